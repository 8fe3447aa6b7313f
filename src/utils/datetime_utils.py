"""
Datetime utilities for audit timestamps and time-of-day formatting.

Shift bounds are plain time-of-day values with no date or zone attached.
Audit timestamps (created_at / updated_at) are timezone-aware UTC, also when
read back from a backend that drops the offset.
"""

import logging
from datetime import datetime, time, timezone
from typing import Optional

from core.constants import TIME_OF_DAY_DISPLAY_FORMAT

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """
    Get the current UTC datetime.

    Returns:
        Current datetime with UTC timezone
    """
    return datetime.now(timezone.utc)


def format_time_of_day(value: Optional[time]) -> str:
    """
    Format a time-of-day value for user-facing messages.

    Whole minutes render as "HH:MM" ("13:00"); values carrying seconds keep
    them ("13:00:30") so two distinct bounds never render identically.

    Args:
        value: Time to format, or None

    Returns:
        Formatted string, or "--:--" when value is None
    """
    if value is None:
        return "--:--"
    if value.second or value.microsecond:
        return value.isoformat()
    return value.strftime(TIME_OF_DAY_DISPLAY_FORMAT)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure a stored audit timestamp is timezone-aware UTC.

    Some backends (SQLite) drop the offset of DateTime(timezone=True)
    columns; every value written by this service is UTC, so naive values
    read back are tagged as UTC. Aware values are converted to UTC.

    Args:
        dt: Datetime to normalize, or None

    Returns:
        UTC-aware datetime, or None if dt is None
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
