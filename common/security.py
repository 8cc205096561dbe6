"""
QKart - Security Utilities
===========================
JWT tokens, password hashing, and auth cookie settings.
"""

import hmac
import hashlib
import logging
import secrets
from datetime import timedelta
from typing import Optional

from jose import jwt, JWTError

from config.settings import (
    SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES,
    PASSWORD_HASH_ITERATIONS,
)
from common.helpers import now_utc

logger = logging.getLogger("qkart.security")


# ==========================================
# Passwords
# ==========================================

def hash_password(password: str) -> str:
    """Return a salted PBKDF2-SHA256 hash as "pbkdf2_sha256$<iterations>$<salt>$<hex>"."""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), PASSWORD_HASH_ITERATIONS,
    ).hex()
    return f"pbkdf2_sha256${PASSWORD_HASH_ITERATIONS}${salt}${digest}"


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Constant-time check of a password against a stored hash."""
    if not password or not password_hash:
        return False
    try:
        algo, iterations, salt, expected = password_hash.split("$")
    except ValueError:
        logger.warning("Malformed password hash encountered")
        return False
    if algo != "pbkdf2_sha256":
        return False
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), int(iterations),
    ).hex()
    return hmac.compare_digest(digest, expected)


# ==========================================
# JWT Tokens
# ==========================================

def create_token(data: dict) -> str:
    """Create a signed JWT access token."""
    to_encode = data.copy()
    to_encode["exp"] = now_utc() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Decode a JWT token. Returns payload or None."""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


# ==========================================
# Cookie Helpers
# ==========================================

def get_cookie_kwargs() -> dict:
    """Standard cookie settings for auth tokens."""
    from config.settings import COOKIE_SECURE, COOKIE_SAMESITE
    return dict(
        httponly=True,
        secure=COOKIE_SECURE,
        samesite=COOKIE_SAMESITE,
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
