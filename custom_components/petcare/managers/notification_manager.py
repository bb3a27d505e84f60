# File: notification_manager.py
"""Notification Manager for Pet Care integration.

This manager turns reminders into scheduled notifications:
- Requests permission before every scheduling attempt
- Expands recurring reminders into their bounded trigger series
- Defers the next immediate trigger out of quiet hours
- Submits each instant to the scheduler and collects the handles
- Cancels single handles, whole reminder series, or everything

Soft failures (permission denied, single-shot already past) return None and
log a warning; they are never raised.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.schedule_engine import ScheduleEngine, defer_for_quiet_hours
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import PetCareDataCoordinator
    from ..notification_helper import PetCareNotificationScheduler
    from ..type_defs import NotificationPayload


class NotificationManager(BaseManager):
    """Adapter between reminders and the notification scheduler.

    Uses coordinator for:
    - The injectable clock (coordinator.now)
    - Quiet-hours and category settings (coordinator.get_option)
    """

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: PetCareDataCoordinator,
        scheduler: PetCareNotificationScheduler,
    ) -> None:
        """Initialize with the scheduler that owns the timers."""
        super().__init__(hass, coordinator)
        self.scheduler = scheduler
        self.engine = ScheduleEngine()

    async def async_setup(self) -> None:
        """Cancel every pending timer when the entry unloads."""
        self.coordinator.config_entry.async_on_unload(self.cancel_all)

    # =========================================================================
    # Quiet Hours
    # =========================================================================

    def _apply_quiet_hours(self, instant: datetime, now: datetime) -> datetime:
        if not self.coordinator.get_option(
            const.CONF_QUIET_HOURS_ENABLED, const.DEFAULT_QUIET_HOURS_ENABLED
        ):
            return instant
        deferred = defer_for_quiet_hours(
            instant,
            now,
            self.coordinator.get_option(
                const.CONF_QUIET_HOURS_START, const.DEFAULT_QUIET_HOURS_START
            ),
            self.coordinator.get_option(
                const.CONF_QUIET_HOURS_END, const.DEFAULT_QUIET_HOURS_END
            ),
        )
        if deferred != instant:
            const.LOGGER.debug(
                "DEBUG: Quiet hours - deferred trigger from %s to %s",
                instant.isoformat(),
                deferred.isoformat(),
            )
        return deferred

    def _category_enabled(self, category: str) -> bool:
        disabled = self.coordinator.get_option(const.CONF_DISABLED_CATEGORIES, [])
        return category not in (disabled or [])

    # =========================================================================
    # Reminder Scheduling
    # =========================================================================

    @staticmethod
    def _reminder_payload(
        reminder: dict[str, Any], occurrence: int
    ) -> NotificationPayload:
        reminder_type = reminder.get(const.DATA_REMINDER_TYPE, const.REMINDER_TYPE_CUSTOM)
        return {
            const.NOTIFY_TITLE: reminder.get(const.DATA_REMINDER_TITLE, ""),
            const.NOTIFY_MESSAGE: reminder.get(const.DATA_DESCRIPTION)
            or f"Reminder for {reminder_type}",
            const.NOTIFY_DATA: {
                const.NOTIFY_DATA_REMINDER_ID: reminder.get(const.DATA_ID),
                const.NOTIFY_DATA_PET_ID: reminder.get(const.DATA_PET_ID),
                const.NOTIFY_DATA_OCCURRENCE: occurrence,
                const.NOTIFY_DATA_CATEGORY: const.NOTIFICATION_CATEGORY_REMINDER,
                const.NOTIFY_TAG: f"{const.NOTIFY_TAG_PREFIX}_{reminder.get(const.DATA_ID)}",
            },
        }

    async def async_schedule_reminder(self, reminder: dict[str, Any]) -> list[str] | None:
        """Schedule every notification for a reminder.

        Returns:
            The handles in occurrence order (element 0 is the primary), or
            None when permission is denied or a single-shot reminder is past.

        Raises:
            ValueError: The reminder's date, time or repeat policy is invalid.
        """
        reminder_id = reminder.get(const.DATA_ID)
        if not await self.scheduler.async_request_permission():
            const.LOGGER.warning(
                "WARNING: Notification permission not granted - reminder %s "
                "saved without an alarm",
                reminder_id,
            )
            return None

        now = self.coordinator.now()
        repeat = reminder.get(const.DATA_REMINDER_REPEAT, const.REPEAT_NONE)
        series = self.engine.generate(
            reminder[const.DATA_REMINDER_DATE],
            reminder[const.DATA_REMINDER_TIME],
            repeat,
            now,
        )

        if repeat == const.REPEAT_NONE and series[0].instant < now:
            const.LOGGER.warning(
                "WARNING: Cannot schedule notification for past date - reminder %s (%s)",
                reminder_id,
                series[0].instant.isoformat(),
            )
            return None

        handles = []
        for occurrence in series:
            instant = occurrence.instant
            if occurrence.index == 0:
                instant = self._apply_quiet_hours(instant, now)
            handles.append(
                self.scheduler.schedule_at(
                    instant, self._reminder_payload(reminder, occurrence.index)
                )
            )

        const.LOGGER.debug(
            "DEBUG: Scheduled %s notification(s) for reminder %s starting %s",
            len(handles),
            reminder_id,
            series[0].instant.isoformat(),
        )
        return handles

    # =========================================================================
    # Cancellation
    # =========================================================================

    def cancel(self, handle: str) -> None:
        """Cancel one notification. Unknown or fired handles are ignored."""
        try:
            self.scheduler.cancel(handle)
        except Exception as err:  # pylint: disable=broad-exception-caught
            # Cancelling is best-effort; a stale timer must never block a delete.
            const.LOGGER.warning(
                "WARNING: Error cancelling notification %s: %s", handle, err
            )

    def cancel_reminder(self, reminder: dict[str, Any]) -> int:
        """Cancel every notification tracked by a reminder.

        Returns:
            Number of handles passed to cancel.
        """
        handles = list(reminder.get(const.DATA_REMINDER_NOTIFICATION_IDS) or [])
        primary = reminder.get(const.DATA_REMINDER_NOTIFICATION_ID)
        if primary and primary not in handles:
            handles.insert(0, primary)
        for handle in handles:
            self.cancel(handle)
        return len(handles)

    def cancel_all(self) -> int:
        """Cancel every scheduled notification. Returns the count cancelled."""
        count = self.scheduler.cancel_all()
        const.LOGGER.info("INFO: Cancelled %s scheduled notification(s)", count)
        return count

    # =========================================================================
    # Immediate Notifications
    # =========================================================================

    async def async_notify_now(
        self,
        title: str,
        message: str,
        category: str = const.NOTIFICATION_CATEGORY_GENERAL,
        extra_data: dict[str, Any] | None = None,
    ) -> str | None:
        """Send a notification as soon as quiet hours allow.

        Returns:
            The scheduled handle, or None when permission is denied or the
            category is disabled.
        """
        if not self._category_enabled(category):
            const.LOGGER.debug("DEBUG: Notification category '%s' disabled", category)
            return None
        if not await self.scheduler.async_request_permission():
            const.LOGGER.warning(
                "WARNING: Notification permission not granted - dropped '%s'", title
            )
            return None

        now = self.coordinator.now()
        instant = self._apply_quiet_hours(now, now)
        data = {const.NOTIFY_DATA_CATEGORY: category, **(extra_data or {})}
        return self.scheduler.schedule_at(
            instant,
            {
                const.NOTIFY_TITLE: title,
                const.NOTIFY_MESSAGE: message,
                const.NOTIFY_DATA: data,
            },
        )
