# File: utils/dt_utils.py
"""Date and time utilities for Workout Reminders.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Functions:
    - as_local: Convert a datetime to local timezone
    - at_local_time: Combine a calendar day with a local wall-clock time
    - dt_parse_date: Parse date strings
    - dt_local_date: Local calendar date of a date/datetime/ISO string
    - dt_day_key: Calendar-day key (YYYY-MM-DD)
    - parse_time_of_day: Parse "HH:MM" / "HH:MM:SS" strings
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time
import logging
from zoneinfo import ZoneInfo

_LOGGER = logging.getLogger(__name__)

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this during integration setup to configure the user's timezone.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


# ==============================================================================
# Timezone Conversion
# ==============================================================================


def as_local(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Convert a datetime to local timezone.

    Args:
        dt_obj: Datetime object. Naive values are assumed to be UTC.
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Datetime in local timezone
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if dt_obj.tzinfo is None:
        # Assume it's in UTC if naive
        dt_obj = dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(tz_info)


def at_local_time(
    day: date, hour: int, minute: int, tz: ZoneInfo | None = None
) -> datetime:
    """Return `day` at `hour:minute` local wall-clock time (timezone-aware).

    The instant is built from the calendar day plus the wall-clock time, so a
    DST transition between two days never moves the result onto another day.

    Example:
        >>> at_local_time(date(2024, 3, 6), 9, 0)
        datetime.datetime(2024, 3, 6, 9, 0, tzinfo=...)
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.combine(day, time(hour, minute), tzinfo=tz_info)


# ==============================================================================
# Date/Time Parsing
# ==============================================================================


def dt_parse_date(date_str: str | None) -> date | None:
    """Safely parse a date string into a `datetime.date`.

    Accepts formats:
    - "2025-04-07" (ISO format)
    - "2025-04-07T18:30:00+02:00" (ISO datetime, date part is kept as written)
    - "2025/04/07"

    Returns:
        datetime.date or None if parsing fails.
    """
    if not date_str or not isinstance(date_str, str):
        return None

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(date_str).date()
    except ValueError:
        pass

    try:
        return datetime.strptime(date_str, "%Y/%m/%d").date()
    except ValueError:
        return None


def dt_local_date(
    value: str | date | datetime | None, tz: ZoneInfo | None = None
) -> date | None:
    """Return the local calendar date of a date, datetime or ISO string.

    Aware datetimes (and ISO strings carrying an offset) are converted to the
    local timezone before the date is taken; plain dates are returned as-is.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return as_local(value, tz).date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    try:
        return date.fromisoformat(value)
    except ValueError:
        pass

    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        _LOGGER.debug("Unparseable date value: %s", value)
        return dt_parse_date(value)
    return dt_local_date(parsed, tz)


def dt_day_key(day: date | datetime) -> str:
    """Return the calendar-day key (YYYY-MM-DD) for a date or datetime."""
    if isinstance(day, datetime):
        day = day.date()
    return day.isoformat()


def parse_time_of_day(time_str: str | None) -> tuple[int, int] | None:
    """Parse "HH:MM" or "HH:MM:SS" into an (hour, minute) tuple.

    Seconds are accepted (HA time selectors emit them) and dropped.

    Returns:
        (hour, minute) or None when the string is malformed or out of range.
    """
    if not time_str or not isinstance(time_str, str):
        return None

    parts = time_str.strip().split(":")
    if len(parts) not in (2, 3):
        return None

    try:
        hour = int(parts[0])
        minute = int(parts[1])
    except ValueError:
        return None

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        _LOGGER.warning("Invalid time of day: %s (out of range)", time_str)
        return None

    return hour, minute
