"""Diagnostics support for Pet Care integration.

The diagnostics JSON returns the raw stored collections, keyed by
collection name, so the output can be inspected or restored as-is.
"""

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from . import const
from .coordinator import PetCareDataCoordinator


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry.

    Scheduled notification handles are included so stale or missing timers
    can be compared against the handles stored on reminders.
    """
    coordinator: PetCareDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]

    return {
        "options": dict(entry.options),
        "data": coordinator.store.data,
        "scheduled_notifications": {
            handle: instant.isoformat()
            for handle, instant in coordinator.scheduler.scheduled.items()
        },
    }
