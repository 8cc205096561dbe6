"""
Auth Module - Dependencies
===========================
FastAPI dependencies for user authentication.
These are injected into route handlers via Depends().
"""

from fastapi import Request, Depends
from sqlalchemy.orm import Session

from config.database import get_db
from common.exceptions import AuthenticationError
from common.security import decode_token
from modules.user.models import User
from modules.user.service import user_service


def _token_from_request(request: Request):
    """Bearer header wins over the auth_token cookie."""
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip()
    return request.cookies.get("auth_token")


def get_current_active_user(request: Request, db: Session = Depends(get_db)):
    """
    Identify the current user from the bearer token or auth_token cookie.
    Returns User object or None.
    """
    token = _token_from_request(request)
    if not token:
        return None

    payload = decode_token(token)
    if not payload:
        return None

    email = payload.get("sub")
    if not email:
        return None

    return user_service.get_user_by_email(db, email)


def require_login(user: User = Depends(get_current_active_user)):
    """Require an authenticated user. Raises AuthenticationError (401) if not logged in."""
    if not user:
        raise AuthenticationError("Please authenticate")
    return user
