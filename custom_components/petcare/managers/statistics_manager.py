# File: statistics_manager.py
"""Statistics Manager - on-demand summaries for the statistics services.

Reads full repository snapshots and hands them to the StatisticsEngine.
Nothing is cached: every call recomputes from storage and the current clock.
"""

from __future__ import annotations

from typing import Any

from homeassistant.core import callback

from .. import const
from ..engines import status_engine
from ..engines.statistics_engine import StatisticsEngine
from .base_manager import BaseManager


class StatisticsManager(BaseManager):
    """Manager exposing per-pet and overall statistics."""

    engine = StatisticsEngine()

    async def async_setup(self) -> None:
        """Refresh the cached dashboard whenever a record changes.

        Service responses are always computed on request; only the
        coordinator's dashboard snapshot needs nudging.
        """
        for suffix in (
            const.SIGNAL_SUFFIX_PET_UPDATED,
            const.SIGNAL_SUFFIX_PET_DELETED,
            const.SIGNAL_SUFFIX_REMINDER_UPDATED,
            const.SIGNAL_SUFFIX_REMINDER_DELETED,
            const.SIGNAL_SUFFIX_RECORD_UPDATED,
        ):
            self.listen(suffix, self._on_data_changed)

    @callback
    def _on_data_changed(self, payload: dict[str, Any]) -> None:
        const.LOGGER.debug("DEBUG: Data changed (%s), refreshing dashboard", payload)
        self.hass.async_create_task(self.coordinator.async_request_refresh())

    async def async_get_pet_statistics(self, pet_id: str) -> dict[str, Any]:
        """Statistics for one pet, plus its name, age and weight trend.

        Raises:
            PetCareNotFoundError: The pet does not exist.
        """
        pet = await self.coordinator.pet_manager.async_get_pet(pet_id)
        now = self.coordinator.now()
        stats = self.engine.pet_statistics(
            pet_id,
            await self.repos.expenses.async_get_by_pet_id(pet_id),
            await self.repos.vaccines.async_get_by_pet_id(pet_id),
            now,
        )
        stats["pet_name"] = pet.get(const.DATA_PET_NAME)
        stats["age"] = status_engine.format_age(pet[const.DATA_PET_DATE_OF_BIRTH], now)
        stats["weight"] = self.engine.weight_trend(
            await self.repos.weights.async_get_by_pet_id(pet_id)
        )
        return stats

    async def async_get_overall_statistics(self) -> dict[str, Any]:
        """Statistics across all pets, with the per-pet breakdown."""
        return self.engine.overall_statistics(
            await self.repos.pets.async_get_all(),
            await self.repos.expenses.async_get_all(),
            await self.repos.vaccines.async_get_all(),
            self.coordinator.now(),
        )

    async def async_get_expense_summary(self, pet_id: str | None = None) -> dict[str, Any]:
        """This month / this year / all-time expense totals."""
        expenses = (
            await self.repos.expenses.async_get_by_pet_id(pet_id)
            if pet_id
            else await self.repos.expenses.async_get_all()
        )
        summary = self.engine.expense_summary(expenses, self.coordinator.now())
        summary["currency"] = self.coordinator.get_option(
            const.CONF_CURRENCY, const.DEFAULT_CURRENCY
        )
        return summary

    async def async_get_health_dashboard(self) -> dict[str, Any]:
        """Vaccine and reminder overview with per-pet health scores."""
        return self.engine.health_dashboard(
            await self.repos.pets.async_get_all(),
            await self.repos.vaccines.async_get_all(),
            await self.repos.reminders.async_get_all(),
            self.coordinator.now(),
        )
