"""Date manipulation utilities"""

from datetime import date, datetime, timezone
from typing import List, Optional


def date_key(timestamp: str) -> str:
    """Return the YYYY-MM-DD part of an ISO 8601 timestamp"""
    return timestamp[:10]


def parse_timestamp(timestamp: str) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp into a naive UTC datetime.

    Returns None for unparseable input so callers can skip the record.
    """
    try:
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except (ValueError, TypeError, AttributeError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def month_key(day: date) -> str:
    """Format a date as YYYY-MM"""
    return f"{day.year}-{day.month:02d}"


def trailing_month_keys(as_of: date, months: int) -> List[str]:
    """Generate YYYY-MM keys for the `months` months ending at as_of (oldest first)"""
    keys = []
    for offset in range(months - 1, -1, -1):
        total = as_of.year * 12 + (as_of.month - 1) - offset
        keys.append(f"{total // 12}-{total % 12 + 1:02d}")
    return keys
