"""
Common utility functions used across multiple routes and services.
"""

import secrets
import string
from datetime import datetime, timezone
from typing import Optional

JOIN_CODE_ALPHABET = string.ascii_uppercase + string.digits
JOIN_CODE_LENGTH = 6


def to_naive_utc(dt: datetime) -> datetime:
    """Stored datetimes are naive UTC; aware inputs are converted, naive ones trusted."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def normalize_join_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def generate_join_code(length: int = JOIN_CODE_LENGTH) -> str:
    return "".join(secrets.choice(JOIN_CODE_ALPHABET) for _ in range(length))


def first_name(display_name: Optional[str]) -> Optional[str]:
    if not isinstance(display_name, str) or not display_name.strip():
        return None
    return display_name.strip().split(" ", 1)[0]


def greeting(display_name: Optional[str], fallback: str = "Welcome back") -> str:
    name = first_name(display_name)
    return f"Welcome back, {name}" if name else fallback


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
