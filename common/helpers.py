"""
QKart - Shared Helpers
=======================
Pure utility functions with NO database or module dependencies.
"""

from datetime import datetime, timezone
from typing import Optional


def now_utc() -> datetime:
    """Returns current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def normalize_email(value: Optional[str]) -> str:
    """Lowercase and strip an email address ("" for None)."""
    if value is None:
        return ""
    return str(value).strip().lower()


def safe_int(value) -> Optional[int]:
    """Safely convert a value to int. Returns None on failure."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except (ValueError, TypeError):
        return None
