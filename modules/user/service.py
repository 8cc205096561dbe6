"""
User Module - Service Layer
=============================
Lookup by id/email, account creation, and shipping address updates.
"""

from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from common.exceptions import ConflictError
from common.helpers import normalize_email
from common.security import hash_password
from config.settings import DEFAULT_WALLET_MONEY
from modules.user.models import User


class UserService:

    def get_user_by_id(self, db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == normalize_email(email)).first()

    def create_user(
        self, db: Session, name: str, email: str, password: str,
        wallet_money: int = DEFAULT_WALLET_MONEY,
        address: Optional[str] = None,
    ) -> User:
        """Create a user with a hashed password. Raises ConflictError if the email is taken."""
        user = User(
            name=name,
            email=normalize_email(email),
            password_hash=hash_password(password),
            wallet_money=wallet_money,
        )
        if address is not None:
            user.address = address
        db.add(user)
        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            raise ConflictError("Email already taken")
        return user

    def set_address(self, db: Session, user: User, address: str) -> User:
        """Replace the user's shipping address."""
        user.address = address.strip()
        db.flush()
        return user


# Singleton
user_service = UserService()
