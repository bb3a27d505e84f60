"""Tests for the coordinator's periodic refresh."""

# pylint: disable=redefined-outer-name

from __future__ import annotations

from unittest.mock import AsyncMock, patch

from custom_components.petcare import const
from custom_components.petcare.coordinator import PetCareDataCoordinator
from custom_components.petcare.exceptions import PetCareStorageError
from tests.conftest import NOW


async def test_refresh_materializes_recurring_expenses(
    coordinator: PetCareDataCoordinator, add_pet
) -> None:
    pet = await add_pet()
    await coordinator.record_manager.async_add_record(
        const.COLLECTION_RECURRING_EXPENSES,
        {
            const.DATA_PET_ID: pet[const.DATA_ID],
            const.DATA_RECURRING_CATEGORY: "medicine",
            const.DATA_RECURRING_AMOUNT: 25,
            const.DATA_RECURRING_FREQUENCY: const.RECURRING_FREQUENCY_MONTHLY,
            const.DATA_RECURRING_START_DATE: NOW.date().isoformat(),
        },
    )

    await coordinator.async_refresh()

    assert coordinator.last_update_success
    expenses = await coordinator.repositories.expenses.async_get_by_pet_id(
        pet[const.DATA_ID]
    )
    assert [e[const.DATA_EXPENSE_AMOUNT] for e in expenses] == [25]
    assert coordinator.data["pet_statuses"][0]["pet_id"] == pet[const.DATA_ID]


async def test_refresh_reports_storage_failure(
    coordinator: PetCareDataCoordinator,
) -> None:
    with patch.object(
        coordinator.repositories.recurring_expenses,
        "async_get_due",
        AsyncMock(side_effect=PetCareStorageError("recurring_expenses", "unreadable")),
    ):
        await coordinator.async_refresh()

    assert not coordinator.last_update_success
