"""Utilities for datetime handling.

Every timestamp kuk writes is UTC in RFC 3339 form with a ``Z`` suffix.
"""

from datetime import UTC, datetime


def now_utc() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC; leave aware ones alone."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def to_iso(dt: datetime) -> str:
    """Format as RFC 3339, e.g. ``2026-01-01T09:30:00.123456Z``."""
    return ensure_utc(dt).astimezone(UTC).isoformat().replace("+00:00", "Z")


def from_iso(value: str) -> datetime:
    """Parse an RFC 3339 string.

    Fractions finer than microseconds (as written by nanosecond clocks) are
    truncated. A string without an offset is taken as UTC.
    """
    return ensure_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
