# File: reminder_manager.py
"""Reminder Manager - reminder lifecycle tied to scheduled notifications.

Ordering rules:
- Add: schedule notifications first, then persist the reminder with the
  handles. If the save fails, the scheduled notifications are not rolled back.
- Update: cancel the old series, schedule the new one, then persist.
- Delete: cancel the series, then remove the record.
- Restore: host timers do not survive a restart, so every stored reminder is
  rescheduled on setup and its handles rewritten.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const, data_builders as db
from ..engines import status_engine
from ..exceptions import PetCareNotFoundError
from ..repositories import generate_id
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import PetCareDataCoordinator
    from .notification_manager import NotificationManager


class ReminderManager(BaseManager):
    """Manager for reminders and their notification series."""

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: PetCareDataCoordinator,
        notification_manager: NotificationManager,
    ) -> None:
        """Initialize with the notification manager used for scheduling."""
        super().__init__(hass, coordinator)
        self.notifications = notification_manager

    async def async_setup(self) -> None:
        """Reschedule stored reminders (timers are lost on restart)."""
        await self.async_restore_schedules()

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _async_get_or_raise(self, reminder_id: str) -> dict[str, Any]:
        reminder = await self.repos.reminders.async_get_by_id(reminder_id)
        if reminder is None:
            raise PetCareNotFoundError(const.LABEL_REMINDER, reminder_id)
        return reminder

    async def _async_attach_schedule(self, reminder: dict[str, Any]) -> dict[str, Any]:
        handles = await self.notifications.async_schedule_reminder(reminder)
        reminder[const.DATA_REMINDER_NOTIFICATION_IDS] = handles or []
        reminder[const.DATA_REMINDER_NOTIFICATION_ID] = handles[0] if handles else None
        return reminder

    def _default_time(self) -> str:
        return self.coordinator.get_option(
            const.CONF_DEFAULT_REMINDER_TIME, const.DEFAULT_REMINDER_TIME
        )

    # =========================================================================
    # CRUD
    # =========================================================================

    async def async_add_reminder(self, user_input: dict[str, Any]) -> dict[str, Any]:
        """Create a reminder and schedule its notifications."""
        await self.async_require_pet(user_input.get(const.DATA_PET_ID))
        reminder = db.build_reminder(user_input, default_time=self._default_time())
        reminder[const.DATA_ID] = generate_id()
        await self._async_attach_schedule(reminder)
        saved = await self.repos.reminders.async_save(reminder)
        self.emit(const.SIGNAL_SUFFIX_REMINDER_UPDATED, reminder_id=saved[const.DATA_ID])
        return saved

    async def async_update_reminder(
        self, reminder_id: str, user_input: dict[str, Any]
    ) -> dict[str, Any]:
        """Replace a reminder's schedule and fields."""
        existing = await self._async_get_or_raise(reminder_id)
        if const.DATA_PET_ID in user_input:
            await self.async_require_pet(user_input[const.DATA_PET_ID])
        reminder = db.build_reminder(
            user_input, existing, default_time=self._default_time()
        )
        self.notifications.cancel_reminder(existing)
        await self._async_attach_schedule(reminder)
        saved = await self.repos.reminders.async_save(reminder)
        self.emit(const.SIGNAL_SUFFIX_REMINDER_UPDATED, reminder_id=reminder_id)
        return saved

    async def async_delete_reminder(self, reminder_id: str) -> None:
        """Cancel a reminder's notifications and remove it."""
        existing = await self._async_get_or_raise(reminder_id)
        self.notifications.cancel_reminder(existing)
        await self.repos.reminders.async_delete(reminder_id)
        self.emit(const.SIGNAL_SUFFIX_REMINDER_DELETED, reminder_id=reminder_id)

    # =========================================================================
    # Queries
    # =========================================================================

    async def async_get_reminders(self, pet_id: str | None = None) -> list[dict[str, Any]]:
        """Return reminders sorted by date and time, each with its status."""
        if pet_id is None:
            reminders = status_engine.sort_reminders(
                await self.repos.reminders.async_get_all()
            )
        else:
            reminders = await self.repos.reminders.async_get_by_pet_id(pet_id)
        now = self.coordinator.now()
        return [
            {
                **reminder,
                const.DATA_REMINDER_STATUS: status_engine.reminder_status(
                    reminder[const.DATA_REMINDER_DATE],
                    reminder[const.DATA_REMINDER_TIME],
                    now,
                ),
            }
            for reminder in reminders
        ]

    # =========================================================================
    # Restart Recovery
    # =========================================================================

    async def async_restore_schedules(self) -> int:
        """Reschedule every stored reminder and persist the new handles.

        Returns:
            Number of reminders that ended up with at least one live handle.
        """
        reminders = await self.repos.reminders.async_get_all()
        restored = 0
        for reminder in reminders:
            try:
                await self._async_attach_schedule(reminder)
            except ValueError as err:
                const.LOGGER.warning(
                    "WARNING: Skipping reminder %s with invalid schedule: %s",
                    reminder.get(const.DATA_ID),
                    err,
                )
                continue
            if reminder[const.DATA_REMINDER_NOTIFICATION_IDS]:
                restored += 1
        if reminders:
            await self.repos.reminders.async_replace_all(reminders)
        const.LOGGER.info(
            "INFO: Restored notification schedules for %s of %s reminder(s)",
            restored,
            len(reminders),
        )
        return restored
