"""
Domain time utilities (pure).

Centralized timestamp validation helper used by voucher expiry handling.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from cartprice.domain.errors import InvalidRule


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforce that a timestamp is timezone-aware and UTC.

    Raises:
        InvalidRule: If the timestamp is naive or has a non-zero offset
    """
    if not isinstance(value, datetime):
        raise InvalidRule(f"{name} must be a datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise InvalidRule(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise InvalidRule(f"{name} must be a UTC timestamp (offset 0)")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)
