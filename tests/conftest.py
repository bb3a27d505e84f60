"""Shared fixtures for Pet Care tests."""

from collections.abc import AsyncGenerator
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import (
    MockConfigEntry,
    async_mock_service,
)

from custom_components.petcare import const
from custom_components.petcare.coordinator import PetCareDataCoordinator
from custom_components.petcare.store import PetCareStore

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name

TZ = ZoneInfo("UTC")

# Fixed clock for manager-level tests: Sunday 15 June 2025, 12:00 UTC
NOW = datetime(2025, 6, 15, 12, 0, tzinfo=TZ)

NOTIFY_SERVICE = "notify.test_phone"


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


class FakeScheduler:
    """In-memory stand-in for the notification scheduler.

    Records every scheduled instant and cancel call so tests can assert on
    handles without real timers.
    """

    def __init__(self, granted: bool = True) -> None:
        self.granted = granted
        self.scheduled: dict[str, datetime] = {}
        self.payloads: dict[str, dict[str, Any]] = {}
        self.cancelled: list[str] = []
        self._counter = 0

    async def async_request_permission(self) -> bool:
        return self.granted

    def schedule_at(self, instant: datetime, payload: dict[str, Any]) -> str:
        self._counter += 1
        handle = f"handle-{self._counter}"
        self.scheduled[handle] = instant
        self.payloads[handle] = payload
        return handle

    def cancel(self, handle: str) -> bool:
        self.cancelled.append(handle)
        return self.scheduled.pop(handle, None) is not None

    def cancel_all(self) -> int:
        count = len(self.scheduled)
        self.scheduled.clear()
        return count


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry with default options."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.PETCARE_TITLE,
        data={},
        options={
            const.CONF_NOTIFY_SERVICE: NOTIFY_SERVICE,
            const.CONF_NOTIFICATIONS_ENABLED: True,
            const.CONF_QUIET_HOURS_ENABLED: False,
            const.CONF_QUIET_HOURS_START: const.DEFAULT_QUIET_HOURS_START,
            const.CONF_QUIET_HOURS_END: const.DEFAULT_QUIET_HOURS_END,
            const.CONF_DEFAULT_REMINDER_TIME: const.DEFAULT_REMINDER_TIME,
            const.CONF_CURRENCY: const.DEFAULT_CURRENCY,
            const.CONF_DISABLED_CATEGORIES: [],
        },
        entry_id="test_entry_id",
    )


@pytest.fixture
async def store(hass: HomeAssistant) -> PetCareStore:
    """Return an initialized store backed by the in-memory test storage."""
    petcare_store = PetCareStore(hass)
    await petcare_store.async_initialize()
    return petcare_store


@pytest.fixture
def fake_scheduler() -> FakeScheduler:
    """Return a scheduler that grants permission and records handles."""
    return FakeScheduler()


@pytest.fixture
async def coordinator(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    store: PetCareStore,  # pylint: disable=redefined-outer-name
    fake_scheduler: FakeScheduler,  # pylint: disable=redefined-outer-name
) -> PetCareDataCoordinator:
    """Return a coordinator with a fixed clock and the fake scheduler."""
    mock_config_entry.add_to_hass(hass)
    petcare = PetCareDataCoordinator(hass, mock_config_entry, store, clock=lambda: NOW)
    petcare.scheduler = fake_scheduler
    petcare.notification_manager.scheduler = fake_scheduler
    return petcare


@pytest.fixture
async def add_pet(coordinator: PetCareDataCoordinator):  # pylint: disable=redefined-outer-name
    """Return a helper that creates a pet through the pet manager."""

    async def _add(name: str = "Max", **fields: Any) -> dict[str, Any]:
        user_input = {
            const.DATA_PET_NAME: name,
            const.DATA_PET_SPECIES: const.SPECIES_DOG,
            const.DATA_PET_DATE_OF_BIRTH: "2022-06-15",
            **fields,
        }
        return await coordinator.pet_manager.async_add_pet(user_input)

    return _add


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> AsyncGenerator[MockConfigEntry, None]:
    """Set up the Pet Care integration with a registered notify service."""
    async_mock_service(hass, "notify", NOTIFY_SERVICE.split(".", 1)[1])
    mock_config_entry.add_to_hass(hass)

    assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
    await hass.async_block_till_done()

    yield mock_config_entry

    # Unload so scheduled notification timers do not outlive the test
    await hass.config_entries.async_unload(mock_config_entry.entry_id)
    await hass.async_block_till_done()
