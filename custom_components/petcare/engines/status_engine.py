"""Status Engine - derived, time-based status for Pet Care records.

Pure functions computing vaccine status, reminder status, age and day counts
from stored calendar dates and an explicit `now`.

Design Principles:
    - Stateless: No coordinator reference, operates on passed values
    - Deterministic: `now` is always a parameter, never read from the wall clock
    - Never persisted: callers attach the result at read time

IMPORTANT: This module must NOT import from coordinator.py or managers.
Only import from const.py, utils and standard libraries.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import TYPE_CHECKING, Any

from dateutil.relativedelta import relativedelta

from .. import const
from ..utils.dt_utils import (
    dt_combine_local,
    dt_parse_date,
    dt_parse_time,
    dt_truncate_minute,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


# ==============================================================================
# Vaccine Status
# ==============================================================================


def vaccine_status(
    next_due_date: date | str | None,
    date_administered: date | str | None,
    now: datetime,
) -> str:
    """Classify a vaccine as completed, overdue or upcoming.

    Rules (evaluated in order):
        1. completed: `date_administered` is present, whatever `next_due_date` says
        2. overdue: `next_due_date` is strictly before today's calendar day
        3. upcoming: everything else (including a missing due date)
    """
    if dt_parse_date(date_administered) is not None:
        return const.VACCINE_STATUS_COMPLETED

    due = dt_parse_date(next_due_date)
    if due is not None and due < now.date():
        return const.VACCINE_STATUS_OVERDUE

    return const.VACCINE_STATUS_UPCOMING


def with_vaccine_status(vaccine: Mapping[str, Any], now: datetime) -> dict[str, Any]:
    """Return a copy of a stored vaccine record with its derived status attached."""
    record = dict(vaccine)
    record[const.DATA_VACCINE_STATUS] = vaccine_status(
        record.get(const.DATA_VACCINE_NEXT_DUE_DATE),
        record.get(const.DATA_VACCINE_DATE_ADMINISTERED),
        now,
    )
    return record


# ==============================================================================
# Reminder Status
# ==============================================================================


def reminder_instant(
    reminder_date: date | str, reminder_time: time | str, now: datetime
) -> datetime | None:
    """Combine a reminder's date and wall-clock time in `now`'s timezone."""
    day = dt_parse_date(reminder_date)
    wall = dt_parse_time(reminder_time)
    if day is None or wall is None:
        return None
    return dt_combine_local(day, wall, now.tzinfo)


def reminder_status(
    reminder_date: date | str,
    reminder_time: time | str,
    now: datetime,
) -> str:
    """Classify a reminder as past, today or upcoming.

    Past takes priority: a reminder earlier today whose minute has already
    gone by is `past`, not `today`. Comparison is at minute precision, so a
    reminder set for the current minute is still `today`.
    """
    instant = reminder_instant(reminder_date, reminder_time, now)
    if instant is None:
        return const.REMINDER_STATUS_UPCOMING

    if instant < dt_truncate_minute(now):
        return const.REMINDER_STATUS_PAST
    if instant.date() == now.date():
        return const.REMINDER_STATUS_TODAY
    return const.REMINDER_STATUS_UPCOMING


def is_reminder_today(reminder_date: date | str, now: datetime) -> bool:
    """Return True when the reminder falls on today's calendar day, at any time."""
    return dt_parse_date(reminder_date) == now.date()


def sort_reminders(reminders: Iterable[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """Sort reminders ascending by combined date and time.

    Python's sort is stable, so reminders sharing the same instant keep
    their insertion order.
    """

    def _key(reminder: Mapping[str, Any]) -> tuple[date, time]:
        day = dt_parse_date(reminder.get(const.DATA_REMINDER_DATE)) or date.max
        wall = dt_parse_time(reminder.get(const.DATA_REMINDER_TIME)) or time.max
        return (day, wall)

    return sorted(reminders, key=_key)


# ==============================================================================
# Day Counting & Age
# ==============================================================================


def days_until(target: date | str, now: datetime) -> int:
    """Return the number of calendar days from today until target.

    Negative when the target is in the past.
    """
    day = dt_parse_date(target)
    if day is None:
        raise ValueError(f"Invalid date: {target}")
    return (day - now.date()).days


def calculate_age(date_of_birth: date | str, now: datetime) -> tuple[int, int]:
    """Return (years, months) elapsed since date_of_birth."""
    born = dt_parse_date(date_of_birth)
    if born is None:
        raise ValueError(f"Invalid date of birth: {date_of_birth}")
    delta = relativedelta(now.date(), born)
    return delta.years, delta.months


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def format_age(date_of_birth: date | str, now: datetime) -> str:
    """Format a pet's age for display.

    Examples:
        0 years, 5 months → "5 months"
        3 years, 0 months → "3 years"
        1 year, 1 month → "1 year, 1 month"
    """
    years, months = calculate_age(date_of_birth, now)
    if years == 0:
        return _plural(months, "month")
    if months == 0:
        return _plural(years, "year")
    return f"{_plural(years, 'year')}, {_plural(months, 'month')}"
