"""Tests for ScheduleEngine and quiet hours - pure logic, no HA fixtures needed."""

from __future__ import annotations

from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta
import pytest

from custom_components.petcare import const
from custom_components.petcare.engines.schedule_engine import (
    ScheduleEngine,
    defer_for_quiet_hours,
    is_quiet_hours,
    quiet_window_end,
)

TZ = ZoneInfo("Europe/London")
# Tuesday
NOW = datetime(2025, 3, 11, 10, 0, tzinfo=TZ)


@pytest.fixture
def engine() -> ScheduleEngine:
    return ScheduleEngine()


# =============================================================================
# TEST: SINGLE-SHOT
# =============================================================================


class TestSingleShot:
    """repeat='none' yields exactly the first instant."""

    def test_future(self, engine: ScheduleEngine) -> None:
        series = engine.generate("2025-03-20", "09:00", const.REPEAT_NONE, NOW)
        assert len(series) == 1
        assert series[0].index == 0
        assert series[0].instant == datetime(2025, 3, 20, 9, 0, tzinfo=TZ)

    def test_past_still_returned(self, engine: ScheduleEngine) -> None:
        """The caller, not the engine, decides to drop a past single-shot."""
        series = engine.generate("2025-03-01", "09:00", const.REPEAT_NONE, NOW)
        assert series[0].instant < NOW


# =============================================================================
# TEST: RECURRING SERIES
# =============================================================================


class TestWeekly:
    """Weekly series: 52 instants, 7 days apart."""

    def test_length_and_spacing(self, engine: ScheduleEngine) -> None:
        series = engine.generate("2025-03-14", "09:00", const.REPEAT_WEEKLY, NOW)
        assert len(series) == 52
        assert [o.index for o in series] == list(range(52))
        for previous, current in zip(series, series[1:]):
            assert current.instant - previous.instant == timedelta(days=7)
            assert current.instant.time() == time(9, 0)

    def test_future_start_is_anchor(self, engine: ScheduleEngine) -> None:
        series = engine.generate("2025-03-14", "09:00", const.REPEAT_WEEKLY, NOW)
        assert series[0].instant == datetime(2025, 3, 14, 9, 0, tzinfo=TZ)

    def test_past_start_moves_to_next_weekday(self, engine: ScheduleEngine) -> None:
        """Start 10 days ago (a Saturday): anchor is the next Saturday after now."""
        start = (NOW - timedelta(days=10)).date()
        series = engine.generate(start, "09:00", const.REPEAT_WEEKLY, NOW)
        first = series[0].instant
        assert first > NOW
        assert first.weekday() == start.weekday()
        assert first.time() == time(9, 0)
        assert first - NOW < timedelta(days=7)

    def test_same_weekday_earlier_time_goes_to_next_week(
        self, engine: ScheduleEngine
    ) -> None:
        """Tuesday 09:00 when it is Tuesday 10:00 → next Tuesday."""
        series = engine.generate("2025-03-04", "09:00", const.REPEAT_WEEKLY, NOW)
        assert series[0].instant == datetime(2025, 3, 18, 9, 0, tzinfo=TZ)

    def test_same_weekday_later_time_stays_today(self, engine: ScheduleEngine) -> None:
        series = engine.generate("2025-03-04", "11:00", const.REPEAT_WEEKLY, NOW)
        assert series[0].instant == datetime(2025, 3, 11, 11, 0, tzinfo=TZ)

    def test_start_years_ago_anchors_after_now(self, engine: ScheduleEngine) -> None:
        """Saturday 2000-01-01 resumes on the first Saturday after now."""
        series = engine.generate("2000-01-01", "09:00", const.REPEAT_WEEKLY, NOW)
        assert series[0].instant == datetime(2025, 3, 15, 9, 0, tzinfo=TZ)
        assert series[-1].instant == datetime(2026, 3, 7, 9, 0, tzinfo=TZ)


class TestMonthly:
    """Monthly series: 12 instants, one calendar month apart, clamped."""

    def test_length_and_spacing(self, engine: ScheduleEngine) -> None:
        series = engine.generate("2025-04-05", "08:30", const.REPEAT_MONTHLY, NOW)
        assert len(series) == 12
        for index, occurrence in enumerate(series):
            expected = datetime(2025, 4, 5, 8, 30, tzinfo=TZ) + relativedelta(
                months=index
            )
            assert occurrence.instant == expected

    def test_31st_clamps_without_drift(self, engine: ScheduleEngine) -> None:
        """Jan 31 → Feb 28 → Mar 31: a short month does not shift later ones."""
        now = datetime(2025, 1, 1, 0, 0, tzinfo=TZ)
        series = engine.generate("2025-01-31", "09:00", const.REPEAT_MONTHLY, now)
        days = [o.instant.day for o in series[:4]]
        assert days == [31, 28, 31, 30]

    def test_past_start_moves_to_next_day_of_month(
        self, engine: ScheduleEngine
    ) -> None:
        """Day 5 already passed this month → the 5th of next month."""
        series = engine.generate("2024-11-05", "09:00", const.REPEAT_MONTHLY, NOW)
        assert series[0].instant == datetime(2025, 4, 5, 9, 0, tzinfo=TZ)

    def test_past_start_later_this_month(self, engine: ScheduleEngine) -> None:
        series = engine.generate("2024-11-20", "09:00", const.REPEAT_MONTHLY, NOW)
        assert series[0].instant == datetime(2025, 3, 20, 9, 0, tzinfo=TZ)

    def test_31st_years_ago_clamps_in_anchor_month(
        self, engine: ScheduleEngine
    ) -> None:
        """Jan 31 2003 resumes on Mar 31 2025, then Apr 30 and May 31."""
        series = engine.generate("2003-01-31", "09:00", const.REPEAT_MONTHLY, NOW)
        assert [o.instant.date().isoformat() for o in series[:3]] == [
            "2025-03-31",
            "2025-04-30",
            "2025-05-31",
        ]


def test_unknown_repeat_raises(engine: ScheduleEngine) -> None:
    with pytest.raises(ValueError):
        engine.generate("2025-03-20", "09:00", "daily", NOW)


def test_invalid_date_raises(engine: ScheduleEngine) -> None:
    with pytest.raises(ValueError):
        engine.generate("someday", "09:00", const.REPEAT_NONE, NOW)


# =============================================================================
# TEST: QUIET HOURS
# =============================================================================


class TestQuietHours:
    """Quiet window is [start, end) and may span midnight."""

    @pytest.mark.parametrize(
        ("clock", "expected"),
        [
            (time(21, 59), False),
            (time(22, 0), True),
            (time(3, 0), True),
            (time(6, 59), True),
            (time(7, 0), False),
            (time(12, 0), False),
        ],
    )
    def test_midnight_spanning(self, clock: time, expected: bool) -> None:
        now = datetime.combine(NOW.date(), clock, tzinfo=TZ)
        assert is_quiet_hours(now, "22:00", "07:00") is expected

    def test_same_day_window(self) -> None:
        assert is_quiet_hours(NOW, "09:00", "11:00")
        assert not is_quiet_hours(NOW, "11:00", "13:00")

    def test_equal_bounds_is_empty(self) -> None:
        assert not is_quiet_hours(NOW, "10:00", "10:00")

    def test_window_end_before_midnight(self) -> None:
        late = datetime(2025, 3, 11, 23, 15, tzinfo=TZ)
        assert quiet_window_end(late, "22:00", "07:00") == datetime(
            2025, 3, 12, 7, 0, tzinfo=TZ
        )

    def test_window_end_after_midnight(self) -> None:
        early = datetime(2025, 3, 12, 2, 0, tzinfo=TZ)
        assert quiet_window_end(early, "22:00", "07:00") == datetime(
            2025, 3, 12, 7, 0, tzinfo=TZ
        )

    def test_immediate_trigger_deferred(self) -> None:
        late = datetime(2025, 3, 11, 23, 15, tzinfo=TZ)
        deferred = defer_for_quiet_hours(late, late, "22:00", "07:00")
        assert deferred == datetime(2025, 3, 12, 7, 0, tzinfo=TZ)

    def test_trigger_after_window_untouched(self) -> None:
        late = datetime(2025, 3, 11, 23, 15, tzinfo=TZ)
        later = datetime(2025, 3, 12, 9, 0, tzinfo=TZ)
        assert defer_for_quiet_hours(later, late, "22:00", "07:00") == later

    def test_outside_window_untouched(self) -> None:
        assert defer_for_quiet_hours(NOW, NOW, "22:00", "07:00") == NOW
