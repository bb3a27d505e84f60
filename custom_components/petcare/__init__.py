# File: __init__.py
"""Initialization file for the Pet Care integration.

Handles setting up the integration, including loading configuration entries,
initializing data storage, and preparing the coordinator for data handling.

Key Features:
- Config entry setup and unload support.
- Restoring reminder notification timers after a restart.
- Storage cleanup when the entry is removed.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady

from . import const
from .coordinator import PetCareDataCoordinator
from .exceptions import PetCareStorageError
from .services import async_setup_services, async_unload_services
from .store import PetCareStore


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for Pet Care entry: %s", entry.entry_id)

    # Must run before any component that uses the datetime helpers
    const.set_default_timezone(hass)

    store = PetCareStore(hass)
    try:
        await store.async_initialize()
    except PetCareStorageError as err:
        const.LOGGER.error("ERROR: Failed to load Pet Care storage: %s", err)
        raise ConfigEntryNotReady from err

    coordinator = PetCareDataCoordinator(hass, entry, store)

    # Timers do not survive a restart; reschedule before the first refresh
    await coordinator.async_setup_managers()

    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as e:
        const.LOGGER.error("ERROR: Failed to refresh coordinator data: %s", e)
        raise ConfigEntryNotReady from e

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORE: store,
    }

    async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    # Notify target, quiet hours and defaults are read at setup; reload on change
    entry.async_on_unload(entry.add_update_listener(async_reload_entry))

    const.LOGGER.info("INFO: Pet Care setup complete for entry: %s", entry.entry_id)
    return True


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry after its options change."""
    const.LOGGER.debug("DEBUG: Options changed, reloading entry %s", entry.entry_id)
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading Pet Care entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        # Pending notification timers are cancelled by the on_unload hook
        hass.data[const.DOMAIN].pop(entry.entry_id)

        if not hass.data[const.DOMAIN]:
            await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry."""
    const.LOGGER.info("INFO: Removing Pet Care entry: %s", entry.entry_id)

    # The entry is already unloaded here, so open a fresh store to delete files
    store = PetCareStore(hass)
    await store.async_delete_storage()

    const.LOGGER.info("INFO: Pet Care entry data cleared: %s", entry.entry_id)
