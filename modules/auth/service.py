"""
Auth Module - Service Layer
=============================
Email + password login and token creation.
"""

import logging
from typing import Tuple

from sqlalchemy.orm import Session

from common.exceptions import AuthenticationError
from common.security import verify_password, create_token
from modules.user.models import User
from modules.user.service import user_service

logger = logging.getLogger("qkart.auth")


class AuthService:

    def login_with_email_and_password(self, db: Session, email: str, password: str) -> User:
        """Return the user for valid credentials. Raises AuthenticationError otherwise."""
        user = user_service.get_user_by_email(db, email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login for %s", email)
            raise AuthenticationError("Incorrect email or password")
        return user

    def login(self, db: Session, email: str, password: str) -> Tuple[User, str]:
        """Verify credentials and issue an access token."""
        user = self.login_with_email_and_password(db, email, password)
        token = create_token({"sub": user.email, "uid": user.id})
        logger.info("User %s logged in", user.id)
        return user, token


# Singleton
auth_service = AuthService()
