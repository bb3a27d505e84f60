# File: notification_helper.py
"""Delivers Pet Care notifications through Home Assistant's notify services.

`PetCareNotificationScheduler` is the host-side notification subsystem: it
answers permission requests, registers one point-in-time timer per scheduled
notification and returns an opaque handle for each. Timers live in memory
only; the coordinator re-schedules stored reminders after a restart.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any
import uuid

from homeassistant.core import CALLBACK_TYPE, HomeAssistant, callback
from homeassistant.helpers.event import async_track_point_in_time

from . import const

if TYPE_CHECKING:
    from .type_defs import NotificationPayload


def split_notify_service(notify_service: str) -> tuple[str, str]:
    """Split "notify.mobile_app_x" into (domain, service).

    A bare service name is assumed to live in the notify domain.
    """
    if "." not in notify_service:
        return const.NOTIFY_DOMAIN, notify_service
    domain, service = notify_service.split(".", 1)
    return domain, service


async def async_send_notification(
    hass: HomeAssistant,
    notify_service: str,
    title: str,
    message: str,
    extra_data: dict[str, Any] | None = None,
) -> bool:
    """Send a notification using the specified notify service.

    Gracefully handles missing notification services. If the service doesn't
    exist, logs a warning and returns False without raising an exception.
    """
    domain, service = split_notify_service(notify_service)

    if not hass.services.has_service(domain, service):
        const.LOGGER.warning(
            "WARNING: Notification service '%s.%s' not available - skipping "
            "notification. Configure the '%s' integration to enable delivery.",
            domain,
            service,
            domain,
        )
        return False

    payload: dict[str, Any] = {const.NOTIFY_TITLE: title, const.NOTIFY_MESSAGE: message}
    if extra_data:
        payload[const.NOTIFY_DATA] = dict(extra_data)

    try:
        await hass.services.async_call(domain, service, payload, blocking=True)
    except Exception as err:  # pylint: disable=broad-exception-caught
        # Runs from timer callbacks; nothing upstream can handle the failure.
        const.LOGGER.error(
            "ERROR: Unexpected error sending notification via '%s.%s': %s. Payload: %s",
            domain,
            service,
            err,
            payload,
        )
        return False

    const.LOGGER.debug("DEBUG: Notification sent via '%s.%s'", domain, service)
    return True


class PetCareNotificationScheduler:
    """Point-in-time notification scheduling on top of notify services.

    Handles are uuid hex strings. Cancelling an unknown, fired or already
    cancelled handle is a no-op.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        notify_service: str = const.DEFAULT_NOTIFY_SERVICE,
        enabled: bool = const.DEFAULT_NOTIFICATIONS_ENABLED,
    ) -> None:
        """Initialize the scheduler."""
        self.hass = hass
        self.notify_service = notify_service
        self.enabled = enabled
        self._timers: dict[str, CALLBACK_TYPE] = {}
        self._fire_times: dict[str, datetime] = {}

    @property
    def scheduled(self) -> dict[str, datetime]:
        """Pending handles and their trigger instants."""
        return dict(self._fire_times)

    async def async_request_permission(self) -> bool:
        """Return True when notifications may be delivered.

        Granted only when notifications are enabled and the configured notify
        service is registered.
        """
        if not self.enabled:
            const.LOGGER.debug("DEBUG: Notifications disabled in options")
            return False
        domain, service = split_notify_service(self.notify_service)
        granted = self.hass.services.has_service(domain, service)
        if not granted:
            const.LOGGER.warning(
                "WARNING: Notify service '%s' is not available", self.notify_service
            )
        return granted

    @callback
    def schedule_at(self, instant: datetime, payload: NotificationPayload) -> str:
        """Register a notification for instant and return its handle."""
        handle = uuid.uuid4().hex

        async def _async_fire(_now: datetime) -> None:
            self._timers.pop(handle, None)
            self._fire_times.pop(handle, None)
            await async_send_notification(
                self.hass,
                self.notify_service,
                payload[const.NOTIFY_TITLE],
                payload[const.NOTIFY_MESSAGE],
                payload.get(const.NOTIFY_DATA),
            )

        self._timers[handle] = async_track_point_in_time(
            self.hass, _async_fire, instant
        )
        self._fire_times[handle] = instant
        return handle

    @callback
    def cancel(self, handle: str) -> bool:
        """Cancel one scheduled notification. Returns False if nothing was pending."""
        unsub = self._timers.pop(handle, None)
        self._fire_times.pop(handle, None)
        if unsub is None:
            const.LOGGER.debug("DEBUG: No pending notification for handle %s", handle)
            return False
        unsub()
        return True

    @callback
    def cancel_all(self) -> int:
        """Cancel every scheduled notification. Returns the count cancelled."""
        count = len(self._timers)
        for unsub in self._timers.values():
            unsub()
        self._timers.clear()
        self._fire_times.clear()
        return count
