# File: coordinator.py
"""Coordinator for the Pet Care integration.

Wires storage, repositories, the notification scheduler and the managers
for one config entry, and owns the injectable clock. The periodic refresh
materializes due recurring expenses and publishes the health dashboard.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from . import const
from .exceptions import PetCareError
from .managers import (
    NotificationManager,
    PetManager,
    RecordManager,
    ReminderManager,
    StatisticsManager,
)
from .notification_helper import PetCareNotificationScheduler
from .repositories import Repositories
from .store import PetCareStore
from .utils.dt_utils import dt_now_local


class PetCareDataCoordinator(DataUpdateCoordinator):
    """Coordinator for Pet Care integration.

    Managers reach storage through `repositories`, settings through
    `get_option()` and the current time through `now()`.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: PetCareStore,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the PetCareDataCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=timedelta(minutes=const.DEFAULT_UPDATE_INTERVAL),
        )
        self.config_entry = config_entry
        self.store = store
        self._clock = clock or dt_now_local
        self.repositories = Repositories(store, now=self.now)

        self.scheduler = PetCareNotificationScheduler(
            hass,
            notify_service=self.get_option(
                const.CONF_NOTIFY_SERVICE, const.DEFAULT_NOTIFY_SERVICE
            ),
            enabled=self.get_option(
                const.CONF_NOTIFICATIONS_ENABLED, const.DEFAULT_NOTIFICATIONS_ENABLED
            ),
        )
        self.notification_manager = NotificationManager(hass, self, self.scheduler)
        self.pet_manager = PetManager(hass, self, self.notification_manager)
        self.reminder_manager = ReminderManager(hass, self, self.notification_manager)
        self.record_manager = RecordManager(hass, self)
        self.statistics_manager = StatisticsManager(hass, self)

    # -------------------------------------------------------------------------------------
    # Clock & Settings
    # -------------------------------------------------------------------------------------

    def now(self) -> datetime:
        """Return the current local time from the injected clock."""
        return self._clock()

    def get_option(self, key: str, default: Any = None) -> Any:
        """Read a setting from the config entry options."""
        return self.config_entry.options.get(key, default)

    # -------------------------------------------------------------------------------------
    # Setup + Periodic Refresh
    # -------------------------------------------------------------------------------------

    async def async_setup_managers(self) -> None:
        """Run every manager's async_setup (restores reminder timers)."""
        for manager in (
            self.notification_manager,
            self.pet_manager,
            self.reminder_manager,
            self.record_manager,
            self.statistics_manager,
        ):
            await manager.async_setup()

    async def _async_update_data(self) -> dict[str, Any]:
        """Periodic update."""
        try:
            await self.record_manager.async_process_recurring_expenses()
            return await self.statistics_manager.async_get_health_dashboard()
        except PetCareError as err:
            raise UpdateFailed(f"Error updating Pet Care data: {err}") from err
