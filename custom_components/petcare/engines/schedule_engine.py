"""Schedule Engine for Pet Care.

Produces the bounded, ordered series of future trigger instants for a
reminder, and the quiet-hours deferral applied before submission.

- `dateutil.rrule` for the weekly series
- `dateutil.relativedelta` for month clamping (Jan 31 + 1 month = Feb 28)
- Every occurrence is computed from the anchor, never from the previous
  occurrence, so a clamped month does not shift the rest of the series

IMPORTANT: This module must NOT import from coordinator.py to avoid circular imports.
Only import from const.py, utils and standard libraries.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import ClassVar

from dateutil.relativedelta import relativedelta
from dateutil.rrule import WEEKLY, rrule

from .. import const
from ..utils.dt_utils import (
    dt_combine_local,
    dt_next_after,
    dt_parse_date,
    dt_parse_time,
)


@dataclass(frozen=True)
class Occurrence:
    """One trigger instant of a reminder schedule.

    Attributes:
        index: Position in the series (0 is the primary instant)
        instant: Timezone-aware trigger datetime
    """

    index: int
    instant: datetime


class ScheduleEngine:
    """Stateless generator of reminder trigger series.

    Handles the three repeat policies:
    - none: a single instant at the reminder's date and time
    - weekly: 52 instants, 7 days apart, same weekday and time
    - monthly: 12 instants, one calendar month apart, same day-of-month
      clamped to the last day of shorter months

    Example:
        engine = ScheduleEngine()
        series = engine.generate(date(2025, 1, 6), time(9, 0), "weekly", now)
        primary = series[0].instant
    """

    MAX_OCCURRENCES: ClassVar[dict[str, int]] = const.MAX_OCCURRENCES

    # ────────────────────────────────────────────────────────────────
    # Public API
    # ────────────────────────────────────────────────────────────────

    def generate(
        self,
        start_date: date | str,
        start_time: time | str,
        repeat: str,
        now: datetime,
    ) -> list[Occurrence]:
        """Generate the trigger series for a reminder.

        Args:
            start_date: Reminder date (date or ISO string)
            start_time: Reminder wall-clock time (time or "HH:MM")
            repeat: One of const.REPEAT_OPTIONS
            now: Current aware datetime; its tzinfo is the local timezone

        Returns:
            Ordered list of Occurrence. For repeat "none" this is the single
            first instant even when it is already past; the caller decides
            whether to submit it.

        Raises:
            ValueError: Unparseable date/time or unknown repeat policy.
        """
        first = self.first_instant(start_date, start_time, now)

        if repeat == const.REPEAT_NONE:
            return [Occurrence(0, first)]

        if repeat not in self.MAX_OCCURRENCES:
            raise ValueError(f"Unsupported repeat policy: {repeat}")

        count = self.MAX_OCCURRENCES[repeat]
        anchor = first if first >= now else self.next_occurrence(first, repeat, now)
        if repeat == const.REPEAT_WEEKLY:
            instants = list(rrule(WEEKLY, dtstart=anchor, count=count))
        else:
            # Absolute day= clamps to the month length and restores the 31st
            # after a shorter month.
            instants = [
                anchor + relativedelta(months=steps, day=first.day)
                for steps in range(count)
            ]
        return [Occurrence(index, instant) for index, instant in enumerate(instants)]

    @staticmethod
    def first_instant(
        start_date: date | str, start_time: time | str, now: datetime
    ) -> datetime:
        """Combine date and time into an aware datetime in `now`'s timezone."""
        day = dt_parse_date(start_date)
        wall = dt_parse_time(start_time)
        if day is None or wall is None:
            raise ValueError(f"Invalid reminder date/time: {start_date} {start_time}")
        return dt_combine_local(day, wall, now.tzinfo)

    def next_occurrence(self, first: datetime, repeat: str, now: datetime) -> datetime:
        """Return the next instant strictly after now matching first's pattern.

        Weekly keeps first's weekday and time. Monthly keeps first's
        day-of-month (clamped) and time.
        """
        if repeat not in (const.REPEAT_WEEKLY, const.REPEAT_MONTHLY):
            raise ValueError(f"Unsupported repeat policy: {repeat}")
        return dt_next_after(first, repeat, now)


# ==============================================================================
# Quiet Hours
# ==============================================================================


def _as_time(value: time | str) -> time:
    parsed = dt_parse_time(value)
    if parsed is None:
        raise ValueError(f"Invalid quiet hours time: {value}")
    return parsed


def is_quiet_hours(now: datetime, start: time | str, end: time | str) -> bool:
    """Return True when now's wall-clock time falls in [start, end).

    A window whose start is later than its end spans midnight. A window
    with start == end is empty.
    """
    start_t, end_t = _as_time(start), _as_time(end)
    current = now.time().replace(second=0, microsecond=0, tzinfo=None)
    if start_t == end_t:
        return False
    if start_t < end_t:
        return start_t <= current < end_t
    return current >= start_t or current < end_t


def quiet_window_end(now: datetime, start: time | str, end: time | str) -> datetime:
    """Return the instant the quiet window containing now ends."""
    end_t = _as_time(end)
    end_today = datetime.combine(now.date(), end_t, tzinfo=now.tzinfo)
    if now < end_today:
        return end_today
    return end_today + timedelta(days=1)


def defer_for_quiet_hours(
    instant: datetime,
    now: datetime,
    start: time | str,
    end: time | str,
) -> datetime:
    """Push an immediate trigger to the end of the active quiet window.

    Only applies when now is inside the window and the trigger would fire
    before the window ends. Otherwise the instant is returned unchanged.
    """
    if not is_quiet_hours(now, start, end):
        return instant
    window_end = quiet_window_end(now, start, end)
    if instant < window_end:
        return window_end
    return instant
