"""Engine modules for Pet Care integration.

Contains pure computation engines:
- status_engine: Vaccine/reminder status, age and day counting
- schedule_engine: Reminder trigger series and quiet-hours deferral
- statistics_engine: Expense, compliance and health rollups
"""

from . import status_engine
from .schedule_engine import (
    Occurrence,
    ScheduleEngine,
    defer_for_quiet_hours,
    is_quiet_hours,
    quiet_window_end,
)
from .statistics_engine import StatisticsEngine

__all__ = [
    "Occurrence",
    "ScheduleEngine",
    "StatisticsEngine",
    "defer_for_quiet_hours",
    "is_quiet_hours",
    "quiet_window_end",
    "status_engine",
]
