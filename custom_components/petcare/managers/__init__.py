"""Manager modules for Pet Care integration.

Managers orchestrate workflows and coordinate between engines.
They are stateful, event-aware, and handle cross-cutting concerns.
"""

from .base_manager import BaseManager
from .notification_manager import NotificationManager
from .pet_manager import PetManager
from .record_manager import RecordManager
from .reminder_manager import ReminderManager
from .statistics_manager import StatisticsManager

__all__ = [
    "BaseManager",
    "NotificationManager",
    "PetManager",
    "RecordManager",
    "ReminderManager",
    "StatisticsManager",
]
