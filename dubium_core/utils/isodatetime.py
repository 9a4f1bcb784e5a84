"""ISO 8601 datetime conversion utilities.

This module centralizes all transformations between Python datetime objects,
ISO 8601 strings and unix timestamps. All timestamp operations should use
these functions to ensure consistency across the codebase.
"""

from datetime import datetime, UTC


def to_timestamp(dt: datetime) -> str:
    """Convert datetime to ISO 8601 UTC timestamp string.

    Always microsecond precision, so stored timestamps sort as text.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    else:
        dt = dt.astimezone(UTC)
    return dt.isoformat(timespec="microseconds").replace("+00:00", "Z")


def to_datetime(timestamp: str) -> datetime:
    """Convert ISO 8601 UTC timestamp string to datetime."""
    return datetime.fromisoformat(timestamp.replace('Z', '+00:00'))


def now() -> str:
    """Get current UTC timestamp as ISO 8601 string."""
    return to_timestamp(datetime.now(UTC))


def now_unix() -> int:
    """Get current UTC time as integer unix seconds."""
    return int(datetime.now(UTC).timestamp())


def from_unix(ts: int) -> datetime:
    """Convert unix seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(ts, UTC)
