# File: record_manager.py
"""Record Manager - vaccines, expenses, weights and ancillary records.

Every dependent record is checked against its owner before it is written:
records with a pet_id need an existing pet, insurance claims need an
existing policy. Vets are shared and have no owner.

Also materializes recurring expenses into concrete expense records.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import ServiceValidationError

from .. import const, data_builders as db
from ..exceptions import PetCareNotFoundError
from ..utils.dt_utils import dt_next_after, dt_parse_date
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..repositories import Repository

# Most expenses created for one template in a single pass; older gaps are skipped
MAX_RECURRING_CATCH_UP = 1000


class RecordManager(BaseManager):
    """Manager for pet-owned records other than pets and reminders."""

    async def async_setup(self) -> None:
        """No event subscriptions; records are driven by service calls."""

    # =========================================================================
    # Shared CRUD
    # =========================================================================

    async def _async_get_or_raise(
        self, repo: Repository, record_id: str
    ) -> dict[str, Any]:
        record = await repo.async_get_by_id(record_id)
        if record is None:
            raise PetCareNotFoundError(repo.label, record_id)
        return record

    async def _async_check_owner(self, record_type: str, record: dict[str, Any]) -> None:
        if record_type == const.COLLECTION_INSURANCE_CLAIMS:
            insurance_id = record.get(const.DATA_CLAIM_INSURANCE_ID)
            if await self.repos.insurance.async_get_by_id(insurance_id) is None:
                raise ServiceValidationError(
                    translation_domain=const.DOMAIN,
                    translation_key=const.TRANS_KEY_ERROR_NOT_FOUND,
                    translation_placeholders={
                        "entity_type": const.COLLECTION_INSURANCE,
                        "name": str(insurance_id),
                    },
                )
            return
        if self.repos.get(record_type).pet_owned:
            await self.async_require_pet(record.get(const.DATA_PET_ID))

    async def _async_delete(self, repo: Repository, record_id: str) -> None:
        if not await repo.async_delete(record_id):
            raise PetCareNotFoundError(repo.label, record_id)
        self.emit(
            const.SIGNAL_SUFFIX_RECORD_UPDATED,
            collection=repo.collection,
            record_id=record_id,
        )

    async def _async_write(self, repo: Repository, record: dict[str, Any]) -> dict[str, Any]:
        saved = await repo.async_save(record)
        self.emit(
            const.SIGNAL_SUFFIX_RECORD_UPDATED,
            collection=repo.collection,
            record_id=saved[const.DATA_ID],
        )
        return saved

    # =========================================================================
    # Vaccines
    # =========================================================================

    async def async_add_vaccine(self, user_input: dict[str, Any]) -> dict[str, Any]:
        """Create a vaccine; the returned record carries its derived status."""
        await self.async_require_pet(user_input.get(const.DATA_PET_ID))
        return await self._async_write(self.repos.vaccines, db.build_vaccine(user_input))

    async def async_update_vaccine(
        self, vaccine_id: str, user_input: dict[str, Any]
    ) -> dict[str, Any]:
        """Update a vaccine, e.g. to record that it was administered."""
        existing = await self._async_get_or_raise(self.repos.vaccines, vaccine_id)
        if const.DATA_PET_ID in user_input:
            await self.async_require_pet(user_input[const.DATA_PET_ID])
        return await self._async_write(
            self.repos.vaccines, db.build_vaccine(user_input, existing)
        )

    async def async_delete_vaccine(self, vaccine_id: str) -> None:
        """Remove a vaccine."""
        await self._async_delete(self.repos.vaccines, vaccine_id)

    # =========================================================================
    # Expenses & Weights
    # =========================================================================

    async def async_add_expense(self, user_input: dict[str, Any]) -> dict[str, Any]:
        """Create an expense."""
        await self.async_require_pet(user_input.get(const.DATA_PET_ID))
        return await self._async_write(self.repos.expenses, db.build_expense(user_input))

    async def async_delete_expense(self, expense_id: str) -> None:
        """Remove an expense."""
        await self._async_delete(self.repos.expenses, expense_id)

    async def async_add_weight(self, user_input: dict[str, Any]) -> dict[str, Any]:
        """Create a weight record."""
        await self.async_require_pet(user_input.get(const.DATA_PET_ID))
        return await self._async_write(self.repos.weights, db.build_weight(user_input))

    async def async_delete_weight(self, weight_id: str) -> None:
        """Remove a weight record."""
        await self._async_delete(self.repos.weights, weight_id)

    # =========================================================================
    # Ancillary Records
    # =========================================================================

    async def async_add_record(
        self, record_type: str, user_input: dict[str, Any]
    ) -> dict[str, Any]:
        """Create an ancillary record of the given collection type."""
        record = db.build_record(record_type, user_input)
        await self._async_check_owner(record_type, record)
        return await self._async_write(self.repos.get(record_type), record)

    async def async_update_record(
        self, record_type: str, record_id: str, user_input: dict[str, Any]
    ) -> dict[str, Any]:
        """Update an ancillary record in place."""
        repo = self.repos.get(record_type)
        existing = await self._async_get_or_raise(repo, record_id)
        record = db.build_record(record_type, user_input, existing)
        await self._async_check_owner(record_type, record)
        return await self._async_write(repo, record)

    async def async_delete_record(self, record_type: str, record_id: str) -> None:
        """Remove an ancillary record.

        Deleting a policy also removes its claims.
        """
        await self._async_delete(self.repos.get(record_type), record_id)
        if record_type == const.COLLECTION_INSURANCE:
            await self.repos.insurance_claims.async_delete_by_insurance_ids([record_id])

    # =========================================================================
    # Recurring Expenses
    # =========================================================================

    @staticmethod
    def _next_due(template: dict[str, Any], current: date) -> date:
        """First occurrence after current, measured from start_date without drift."""
        start = dt_parse_date(template[const.DATA_RECURRING_START_DATE]) or current
        frequency = template[const.DATA_RECURRING_FREQUENCY]
        return dt_next_after(start, frequency, current)

    async def async_process_recurring_expenses(
        self, now: datetime | None = None
    ) -> list[dict[str, Any]]:
        """Create an expense for every due occurrence of each active template.

        Advances next_due_date past today and deactivates templates whose
        next occurrence falls after end_date.

        Returns:
            The expenses created.
        """
        today = (now or self.coordinator.now()).date()
        created: list[dict[str, Any]] = []

        for template in await self.repos.recurring_expenses.async_get_due(today):
            end = dt_parse_date(template.get(const.DATA_RECURRING_END_DATE))
            due = dt_parse_date(template[const.DATA_RECURRING_NEXT_DUE_DATE])
            steps = 0
            while due is not None and due <= today:
                if end is not None and due > end:
                    break
                if steps >= MAX_RECURRING_CATCH_UP:
                    skipped_from = due
                    due = self._next_due(template, today)
                    const.LOGGER.warning(
                        "WARNING: Recurring expense %s skipped occurrences from %s to %s",
                        template[const.DATA_ID],
                        skipped_from.isoformat(),
                        today.isoformat(),
                    )
                    break
                occurrence = due
                due = self._next_due(template, occurrence)
                expense = await self.repos.expenses.async_save(
                    db.build_expense(
                        {
                            const.DATA_PET_ID: template[const.DATA_PET_ID],
                            const.DATA_EXPENSE_CATEGORY: template[
                                const.DATA_RECURRING_CATEGORY
                            ],
                            const.DATA_EXPENSE_AMOUNT: template[
                                const.DATA_RECURRING_AMOUNT
                            ],
                            const.DATA_DATE: occurrence.isoformat(),
                            const.DATA_DESCRIPTION: template.get(const.DATA_DESCRIPTION),
                            const.DATA_EXPENSE_VENDOR: template.get(
                                const.DATA_RECURRING_VENDOR
                            ),
                            const.DATA_EXPENSE_RECURRING_ID: template[const.DATA_ID],
                        }
                    )
                )
                created.append(expense)
                steps += 1

            template[const.DATA_RECURRING_NEXT_DUE_DATE] = due.isoformat() if due else None
            if end is not None and due is not None and due > end:
                template[const.DATA_RECURRING_IS_ACTIVE] = False
                const.LOGGER.info(
                    "INFO: Recurring expense %s ended on %s",
                    template[const.DATA_ID],
                    end.isoformat(),
                )
            await self.repos.recurring_expenses.async_save(template)

        if created:
            const.LOGGER.debug(
                "DEBUG: Materialized %s recurring expense(s)", len(created)
            )
        return created
