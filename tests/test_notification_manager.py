"""Tests for NotificationManager and the notify-backed scheduler.

Manager tests use the FakeScheduler from conftest so no real timers are
created. The scheduler tests drive real HA point-in-time timers with
async_fire_time_changed.
"""

# pylint: disable=redefined-outer-name

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from homeassistant.core import HomeAssistant
import homeassistant.util.dt as dt_util
from pytest_homeassistant_custom_component.common import (
    MockConfigEntry,
    async_fire_time_changed,
    async_mock_service,
)

from custom_components.petcare import const
from custom_components.petcare.coordinator import PetCareDataCoordinator
from custom_components.petcare.notification_helper import (
    PetCareNotificationScheduler,
    async_send_notification,
    split_notify_service,
)
from tests.conftest import NOTIFY_SERVICE, NOW, TZ, FakeScheduler


def _reminder(**fields: Any) -> dict[str, Any]:
    return {
        const.DATA_ID: "r1",
        const.DATA_PET_ID: "p1",
        const.DATA_REMINDER_TITLE: "Heartworm pill",
        const.DATA_REMINDER_TYPE: const.REMINDER_TYPE_MEDICINE,
        const.DATA_REMINDER_DATE: "2025-06-20",
        const.DATA_REMINDER_TIME: "09:00",
        const.DATA_REMINDER_REPEAT: const.REPEAT_NONE,
        **fields,
    }


def _set_options(hass: HomeAssistant, entry: MockConfigEntry, **options: Any) -> None:
    hass.config_entries.async_update_entry(entry, options={**entry.options, **options})


# =============================================================================
# TEST: SCHEDULING
# =============================================================================


class TestScheduleReminder:
    """async_schedule_reminder returns handles or None on soft failure."""

    async def test_single_shot(
        self, coordinator: PetCareDataCoordinator, fake_scheduler: FakeScheduler
    ) -> None:
        handles = await coordinator.notification_manager.async_schedule_reminder(
            _reminder()
        )
        assert handles == ["handle-1"]
        assert fake_scheduler.scheduled["handle-1"] == datetime(2025, 6, 20, 9, 0, tzinfo=TZ)

        payload = fake_scheduler.payloads["handle-1"]
        assert payload[const.NOTIFY_TITLE] == "Heartworm pill"
        assert payload[const.NOTIFY_MESSAGE] == "Reminder for medicine"
        assert payload[const.NOTIFY_DATA][const.NOTIFY_DATA_REMINDER_ID] == "r1"
        assert payload[const.NOTIFY_DATA][const.NOTIFY_DATA_OCCURRENCE] == 0

    async def test_permission_denied_returns_none(
        self, coordinator: PetCareDataCoordinator, fake_scheduler: FakeScheduler
    ) -> None:
        fake_scheduler.granted = False
        assert (
            await coordinator.notification_manager.async_schedule_reminder(_reminder())
            is None
        )
        assert not fake_scheduler.scheduled

    async def test_past_single_shot_returns_none(
        self, coordinator: PetCareDataCoordinator, fake_scheduler: FakeScheduler
    ) -> None:
        reminder = _reminder(
            **{const.DATA_REMINDER_DATE: "2025-06-15", const.DATA_REMINDER_TIME: "11:59"}
        )
        manager = coordinator.notification_manager
        assert await manager.async_schedule_reminder(reminder) is None
        assert not fake_scheduler.scheduled

    async def test_weekly_series(
        self, coordinator: PetCareDataCoordinator, fake_scheduler: FakeScheduler
    ) -> None:
        reminder = _reminder(**{const.DATA_REMINDER_REPEAT: const.REPEAT_WEEKLY})
        handles = await coordinator.notification_manager.async_schedule_reminder(reminder)

        assert len(handles) == 52
        assert len(set(handles)) == 52
        instants = [fake_scheduler.scheduled[h] for h in handles]
        assert instants[0] == datetime(2025, 6, 20, 9, 0, tzinfo=TZ)
        assert instants[-1] == instants[0] + timedelta(weeks=51)
        occurrences = [
            fake_scheduler.payloads[h][const.NOTIFY_DATA][const.NOTIFY_DATA_OCCURRENCE]
            for h in handles
        ]
        assert occurrences == list(range(52))

    async def test_monthly_series(
        self, coordinator: PetCareDataCoordinator, fake_scheduler: FakeScheduler
    ) -> None:
        reminder = _reminder(**{const.DATA_REMINDER_REPEAT: const.REPEAT_MONTHLY})
        handles = await coordinator.notification_manager.async_schedule_reminder(reminder)
        assert len(handles) == 12
        assert fake_scheduler.scheduled[handles[-1]] == datetime(
            2026, 5, 20, 9, 0, tzinfo=TZ
        )


class TestQuietHours:
    """Only the first trigger is moved out of an active quiet window."""

    async def test_first_trigger_deferred(
        self,
        hass: HomeAssistant,
        mock_config_entry: MockConfigEntry,
        coordinator: PetCareDataCoordinator,
        fake_scheduler: FakeScheduler,
    ) -> None:
        _set_options(
            hass,
            mock_config_entry,
            **{
                const.CONF_QUIET_HOURS_ENABLED: True,
                const.CONF_QUIET_HOURS_START: "11:00",
                const.CONF_QUIET_HOURS_END: "13:00",
            },
        )
        reminder = _reminder(
            **{
                const.DATA_REMINDER_DATE: "2025-06-15",
                const.DATA_REMINDER_TIME: "12:30",
                const.DATA_REMINDER_REPEAT: const.REPEAT_WEEKLY,
            }
        )
        handles = await coordinator.notification_manager.async_schedule_reminder(reminder)

        assert fake_scheduler.scheduled[handles[0]] == datetime(2025, 6, 15, 13, 0, tzinfo=TZ)
        assert fake_scheduler.scheduled[handles[1]] == datetime(2025, 6, 22, 12, 30, tzinfo=TZ)

    async def test_disabled_quiet_hours_untouched(
        self, coordinator: PetCareDataCoordinator, fake_scheduler: FakeScheduler
    ) -> None:
        reminder = _reminder(
            **{const.DATA_REMINDER_DATE: "2025-06-15", const.DATA_REMINDER_TIME: "12:30"}
        )
        handles = await coordinator.notification_manager.async_schedule_reminder(reminder)
        assert fake_scheduler.scheduled[handles[0]] == datetime(2025, 6, 15, 12, 30, tzinfo=TZ)


# =============================================================================
# TEST: CANCELLATION & IMMEDIATE NOTIFICATIONS
# =============================================================================


async def test_cancel_reminder_cancels_every_handle(
    coordinator: PetCareDataCoordinator, fake_scheduler: FakeScheduler
) -> None:
    reminder = _reminder(**{const.DATA_REMINDER_REPEAT: const.REPEAT_MONTHLY})
    handles = await coordinator.notification_manager.async_schedule_reminder(reminder)
    reminder[const.DATA_REMINDER_NOTIFICATION_IDS] = handles
    reminder[const.DATA_REMINDER_NOTIFICATION_ID] = handles[0]

    assert coordinator.notification_manager.cancel_reminder(reminder) == 12
    assert fake_scheduler.cancelled == handles
    assert not fake_scheduler.scheduled


async def test_cancel_tolerates_scheduler_errors(
    coordinator: PetCareDataCoordinator, fake_scheduler: FakeScheduler
) -> None:
    """A failing cancel is logged, never raised."""

    def _boom(handle: str) -> bool:
        raise RuntimeError(handle)

    fake_scheduler.cancel = _boom
    coordinator.notification_manager.cancel("stale-handle")


async def test_notify_now_respects_categories(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,
    coordinator: PetCareDataCoordinator,
    fake_scheduler: FakeScheduler,
) -> None:
    manager = coordinator.notification_manager
    handle = await manager.async_notify_now(
        "Vaccine due", "Rabies is due", const.NOTIFICATION_CATEGORY_VACCINE
    )
    assert fake_scheduler.scheduled[handle] == NOW

    _set_options(
        hass,
        mock_config_entry,
        **{const.CONF_DISABLED_CATEGORIES: [const.NOTIFICATION_CATEGORY_VACCINE]},
    )
    assert (
        await manager.async_notify_now(
            "Vaccine due", "Rabies is due", const.NOTIFICATION_CATEGORY_VACCINE
        )
        is None
    )
    assert len(fake_scheduler.scheduled) == 1


# =============================================================================
# TEST: NOTIFY-BACKED SCHEDULER
# =============================================================================


def test_split_notify_service() -> None:
    assert split_notify_service("notify.mobile_app_x") == ("notify", "mobile_app_x")
    assert split_notify_service("mobile_app_x") == ("notify", "mobile_app_x")


async def test_permission_follows_service_and_setting(hass: HomeAssistant) -> None:
    scheduler = PetCareNotificationScheduler(hass, NOTIFY_SERVICE)
    assert not await scheduler.async_request_permission()

    async_mock_service(hass, "notify", "test_phone")
    assert await scheduler.async_request_permission()

    scheduler.enabled = False
    assert not await scheduler.async_request_permission()


async def test_timer_fires_notify_service(hass: HomeAssistant) -> None:
    calls = async_mock_service(hass, "notify", "test_phone")
    scheduler = PetCareNotificationScheduler(hass, NOTIFY_SERVICE)
    fire_at = dt_util.utcnow() + timedelta(minutes=5)

    handle = scheduler.schedule_at(
        fire_at,
        {
            const.NOTIFY_TITLE: "Walk",
            const.NOTIFY_MESSAGE: "Time for a walk",
            const.NOTIFY_DATA: {const.NOTIFY_DATA_REMINDER_ID: "r1"},
        },
    )
    assert handle in scheduler.scheduled

    async_fire_time_changed(hass, fire_at + timedelta(seconds=1))
    await hass.async_block_till_done()

    assert len(calls) == 1
    assert calls[0].data[const.NOTIFY_TITLE] == "Walk"
    assert calls[0].data[const.NOTIFY_DATA] == {const.NOTIFY_DATA_REMINDER_ID: "r1"}
    assert handle not in scheduler.scheduled


async def test_double_cancel_is_noop(hass: HomeAssistant) -> None:
    scheduler = PetCareNotificationScheduler(hass, NOTIFY_SERVICE)
    handle = scheduler.schedule_at(
        dt_util.utcnow() + timedelta(hours=1),
        {const.NOTIFY_TITLE: "t", const.NOTIFY_MESSAGE: "m"},
    )
    assert scheduler.cancel(handle) is True
    assert scheduler.cancel(handle) is False
    assert scheduler.cancel("never-issued") is False


async def test_cancel_all(hass: HomeAssistant) -> None:
    scheduler = PetCareNotificationScheduler(hass, NOTIFY_SERVICE)
    for minutes in (10, 20, 30):
        scheduler.schedule_at(
            dt_util.utcnow() + timedelta(minutes=minutes),
            {const.NOTIFY_TITLE: "t", const.NOTIFY_MESSAGE: "m"},
        )
    assert scheduler.cancel_all() == 3
    assert scheduler.scheduled == {}
    assert scheduler.cancel_all() == 0


async def test_send_notification_missing_service(hass: HomeAssistant) -> None:
    """A missing notify service is skipped, not raised."""
    assert not await async_send_notification(hass, "notify.nobody", "t", "m")
