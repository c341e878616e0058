"""Time helpers for lifecycle stamps.

Stamps are timezone-aware UTC. Stores without timezone support (SQLite's
DATETIME, for one) hand naive values back, and those are read as UTC.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Get current UTC datetime; the default gateway clock."""
    return datetime.now(timezone.utc)


def parse_iso(iso_string: str) -> datetime:
    """Parse an ISO 8601 string, accepting a trailing `Z` for UTC."""
    return datetime.fromisoformat(iso_string.replace('Z', '+00:00'))


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to a naive datetime; aware datetimes are returned unchanged."""
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt
