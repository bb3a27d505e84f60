# File: utils/dt_utils.py
"""Date and time utilities for Pet Care.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Uses standard library: datetime, zoneinfo, dateutil.

Functions:
    - dt_now_local: Get current datetime in local timezone
    - dt_now_utc / dt_now_iso: Current UTC datetime (object / ISO string)
    - dt_truncate_minute: Drop seconds and microseconds
    - dt_parse_date: Parse date strings
    - dt_parse_time: Parse "HH:MM" wall-clock strings
    - dt_combine_local: Build an aware local instant from date + time
    - dt_add_interval: Add weekly/monthly/yearly steps with month-end clamping
    - dt_next_after: First weekly/monthly/yearly occurrence after a reference
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time
import logging
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

# Third-party date utilities (no HA dependency)
from dateutil.relativedelta import relativedelta
from dateutil.rrule import WEEKLY, rrule

if TYPE_CHECKING:
    from datetime import tzinfo

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

# Interval constants
FREQUENCY_WEEKLY = "weekly"
FREQUENCY_MONTHLY = "monthly"
FREQUENCY_YEARLY = "yearly"


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this during integration setup to configure the user's timezone.
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_local(tz: ZoneInfo | None = None) -> datetime:
    """Return the current datetime in local timezone (timezone-aware).

    Example:
        datetime.datetime(2025, 4, 7, 14, 30, tzinfo=...)
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info)


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


def dt_now_iso() -> str:
    """Return the current UTC datetime as an ISO 8601 string.

    Used for record created_at / updated_at stamps.

    Example:
        "2025-04-07T19:30:00.123456+00:00"
    """
    return dt_now_utc().isoformat()


def dt_truncate_minute(dt_obj: datetime) -> datetime:
    """Drop seconds and microseconds from a datetime."""
    return dt_obj.replace(second=0, microsecond=0)


# ==============================================================================
# Date/Time Parsing
# ==============================================================================


def dt_parse_date(date_input: str | date | None) -> date | None:
    """Safely parse a date string into a `datetime.date`.

    Accepts formats:
    - "2025-04-07" (ISO format)
    - "2025-04-07T10:00:00" (ISO datetime, date portion kept)
    - "04/07/2025" (US format)
    - date / datetime objects (returned as date)

    Returns:
        datetime.date or None if parsing fails.
    """
    if isinstance(date_input, datetime):
        return date_input.date()
    if isinstance(date_input, date):
        return date_input
    if not date_input or not isinstance(date_input, str):
        return None

    try:
        return date.fromisoformat(date_input)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(date_input).date()
    except ValueError:
        pass

    for fmt in ("%m/%d/%Y", "%d/%m/%Y", "%Y/%m/%d"):
        try:
            return datetime.strptime(date_input, fmt).date()
        except ValueError:
            continue

    _LOGGER.debug("DEBUG: Unparseable date input: %s", date_input)
    return None


def dt_parse_time(time_input: str | time | None) -> time | None:
    """Parse a 24-hour wall-clock value ("HH:MM" or "HH:MM:SS").

    Seconds are dropped; reminders fire at minute resolution.

    Returns:
        datetime.time or None if parsing fails.

    Example:
        "09:30" → datetime.time(9, 30)
    """
    if isinstance(time_input, time):
        return time_input.replace(second=0, microsecond=0)
    if not time_input or not isinstance(time_input, str):
        return None
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            parsed = datetime.strptime(time_input.strip(), fmt).time()
        except ValueError:
            continue
        return parsed.replace(second=0)
    _LOGGER.debug("DEBUG: Unparseable time input: %s", time_input)
    return None


def dt_format_time(time_obj: time) -> str:
    """Format a time as zero-padded "HH:MM"."""
    return time_obj.strftime("%H:%M")


def dt_combine_local(
    day: date, wall_time: time, tz: tzinfo | None = None
) -> datetime:
    """Combine a calendar date and wall-clock time into an aware local datetime.

    Example:
        dt_combine_local(date(2025, 3, 10), time(9, 0))
        → datetime.datetime(2025, 3, 10, 9, 0, tzinfo=...)
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.combine(day, wall_time, tzinfo=tz_info)


# ==============================================================================
# Interval Arithmetic
# ==============================================================================


def dt_add_interval(
    base: date | datetime, frequency: str, steps: int = 1
) -> date | datetime:
    """Add a number of weekly, monthly or yearly steps to a date or datetime.

    Month and year steps clamp the day-of-month to the target month's length,
    so Jan 31 + 1 month → Feb 28 (or 29). Each call computes from `base`,
    which keeps long series free of cumulative drift.

    Raises:
        ValueError: Unknown frequency.

    Examples:
        dt_add_interval(date(2025, 1, 31), "monthly") → date(2025, 2, 28)
        dt_add_interval(date(2025, 1, 31), "monthly", 2) → date(2025, 3, 31)
        dt_add_interval(date(2024, 2, 29), "yearly") → date(2025, 2, 28)
    """
    if frequency == FREQUENCY_WEEKLY:
        return base + relativedelta(weeks=steps)
    if frequency == FREQUENCY_MONTHLY:
        return base + relativedelta(months=steps)
    if frequency == FREQUENCY_YEARLY:
        return base + relativedelta(years=steps)
    raise ValueError(f"Unsupported interval frequency: {frequency}")


def dt_next_after(
    base: date | datetime, frequency: str, reference: date | datetime
) -> date | datetime:
    """Return the first occurrence of base's pattern strictly after reference.

    Occurrences are base + n intervals (n >= 0), so base itself is returned
    when it already lies after reference. Weekly uses rrule; monthly and
    yearly jump straight to the reference month/year and apply one clamped
    relativedelta, so templates years in the past cost no extra steps.

    Raises:
        ValueError: Unknown frequency.

    Examples:
        dt_next_after(date(2000, 1, 1), "weekly", date(2025, 6, 15)) → date(2025, 6, 21)
        dt_next_after(date(2025, 1, 31), "monthly", date(2025, 2, 10)) → date(2025, 2, 28)
    """
    if base > reference:
        return base

    if frequency == FREQUENCY_WEEKLY:
        # rrule works on datetimes; dates ride along at midnight
        if isinstance(base, datetime):
            return rrule(WEEKLY, dtstart=base).after(reference)
        start = datetime.combine(base, time())
        after = rrule(WEEKLY, dtstart=start).after(datetime.combine(reference, time()))
        return after.date()

    if frequency == FREQUENCY_MONTHLY:
        steps = (reference.year - base.year) * 12 + reference.month - base.month
    elif frequency == FREQUENCY_YEARLY:
        steps = reference.year - base.year
    else:
        raise ValueError(f"Unsupported interval frequency: {frequency}")

    candidate = dt_add_interval(base, frequency, steps)
    if candidate <= reference:
        candidate = dt_add_interval(base, frequency, steps + 1)
    return candidate
