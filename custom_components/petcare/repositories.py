# File: repositories.py
"""Entity repositories for Pet Care collections.

Every repository exposes the same contract over one storage collection:
`async_get_all`, `async_get_by_id`, `async_get_by_pet_id`, `async_save`
(upsert), `async_delete`, `async_delete_by_pet_id`.

Each call reads the whole collection, mutates it in memory and writes the
whole collection back. Two overlapping writers on the same collection are
last-write-wins at the collection level.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, ClassVar
import uuid

from . import const
from .engines import status_engine
from .utils.dt_utils import dt_now_iso, dt_now_local, dt_parse_date

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .store import PetCareStore


def generate_id() -> str:
    """Return a new globally unique record id."""
    return uuid.uuid4().hex


def _date_key(record: dict[str, Any]) -> date:
    return dt_parse_date(record.get(const.DATA_DATE)) or date.min


class Repository:
    """Whole-collection CRUD over one PetCareStore key.

    Subclasses set `collection` and may override the read/write hooks and
    the ordering applied by `async_get_by_pet_id`.
    """

    collection: ClassVar[str]
    pet_owned: ClassVar[bool] = True
    label: ClassVar[str] = const.LABEL_RECORD

    def __init__(
        self,
        store: PetCareStore,
        now: Callable[[], datetime] = dt_now_local,
        timestamp: Callable[[], str] = dt_now_iso,
    ) -> None:
        """Initialize with the backing store and injectable clocks."""
        self._store = store
        self._now = now
        self._timestamp = timestamp

    # ----------------------------------------------------------------------------------
    # Hooks
    # ----------------------------------------------------------------------------------

    def _on_read(self, record: dict[str, Any]) -> dict[str, Any]:
        return record

    def _on_write(self, record: dict[str, Any]) -> dict[str, Any]:
        return record

    def _order(self, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return records

    # ----------------------------------------------------------------------------------
    # Raw collection access
    # ----------------------------------------------------------------------------------

    async def _async_load(self) -> list[dict[str, Any]]:
        return await self._store.async_get_raw(self.collection) or []

    async def _async_write(self, records: list[dict[str, Any]]) -> None:
        await self._store.async_set_raw(self.collection, records)

    # ----------------------------------------------------------------------------------
    # Queries
    # ----------------------------------------------------------------------------------

    async def async_get_all(self) -> list[dict[str, Any]]:
        """Return every record in storage order."""
        return [self._on_read(record) for record in await self._async_load()]

    async def async_get_by_id(self, record_id: str) -> dict[str, Any] | None:
        """Return one record, or None when absent."""
        for record in await self._async_load():
            if record.get(const.DATA_ID) == record_id:
                return self._on_read(record)
        return None

    async def async_get_by_pet_id(self, pet_id: str) -> Any:
        """Return the pet's records in this repository's ordering."""
        return self._order(await self._async_filter_by_pet(pet_id))

    async def _async_filter_by_pet(self, pet_id: str) -> list[dict[str, Any]]:
        return [
            self._on_read(record)
            for record in await self._async_load()
            if record.get(const.DATA_PET_ID) == pet_id
        ]

    async def async_find(
        self, predicate: Callable[[dict[str, Any]], bool]
    ) -> list[dict[str, Any]]:
        """Return every record matching predicate."""
        return [
            record
            for record in (self._on_read(r) for r in await self._async_load())
            if predicate(record)
        ]

    # ----------------------------------------------------------------------------------
    # Mutations
    # ----------------------------------------------------------------------------------

    async def async_save(self, entity: dict[str, Any]) -> dict[str, Any]:
        """Insert or replace a record.

        Existing id: replaced in place, created_at preserved, updated_at bumped.
        Missing or unknown id: appended with fresh stamps (and a new id if none).

        Returns:
            The stored record as a read would return it.
        """
        records = await self._async_load()
        stamp = self._timestamp()
        record = self._on_write(dict(entity))
        record_id = record.get(const.DATA_ID) or generate_id()
        record[const.DATA_ID] = record_id

        for index, current in enumerate(records):
            if current.get(const.DATA_ID) == record_id:
                record[const.DATA_CREATED_AT] = current.get(
                    const.DATA_CREATED_AT, stamp
                )
                record[const.DATA_UPDATED_AT] = stamp
                records[index] = record
                const.LOGGER.debug(
                    "DEBUG: Updated %s record %s", self.collection, record_id
                )
                break
        else:
            record[const.DATA_CREATED_AT] = stamp
            record[const.DATA_UPDATED_AT] = stamp
            records.append(record)
            const.LOGGER.debug("DEBUG: Added %s record %s", self.collection, record_id)

        await self._async_write(records)
        return self._on_read(dict(record))

    async def async_replace_all(self, records: list[dict[str, Any]]) -> None:
        """Write a full collection as given, without touching stamps."""
        await self._async_write([self._on_write(dict(r)) for r in records])

    async def async_delete(self, record_id: str) -> bool:
        """Remove a record. Returns False when the id was not present."""
        records = await self._async_load()
        remaining = [r for r in records if r.get(const.DATA_ID) != record_id]
        if len(remaining) == len(records):
            return False
        await self._async_write(remaining)
        const.LOGGER.debug("DEBUG: Deleted %s record %s", self.collection, record_id)
        return True

    async def async_delete_by_pet_id(self, pet_id: str) -> int:
        """Remove every record owned by pet_id. Returns the count removed."""
        return await self.async_delete_where(
            lambda record: record.get(const.DATA_PET_ID) == pet_id
        )

    async def async_delete_where(
        self, predicate: Callable[[dict[str, Any]], bool]
    ) -> int:
        """Remove every record matching predicate in a single write."""
        records = await self._async_load()
        remaining = [r for r in records if not predicate(r)]
        removed = len(records) - len(remaining)
        if removed:
            await self._async_write(remaining)
            const.LOGGER.debug(
                "DEBUG: Removed %s record(s) from %s", removed, self.collection
            )
        return removed


# ======================================================================================
# Core repositories
# ======================================================================================


class PetRepository(Repository):
    """Pets. Deleting a pet must go through the pet manager cascade."""

    collection = const.COLLECTION_PETS
    pet_owned = False
    label = const.LABEL_PET


class VaccineRepository(Repository):
    """Vaccines. Status is derived on every read and never persisted."""

    collection = const.COLLECTION_VACCINES
    label = const.LABEL_VACCINE

    def _on_read(self, record: dict[str, Any]) -> dict[str, Any]:
        return status_engine.with_vaccine_status(record, self._now())

    def _on_write(self, record: dict[str, Any]) -> dict[str, Any]:
        record.pop(const.DATA_VACCINE_STATUS, None)
        return record


class ReminderRepository(Repository):
    """Reminders, ordered by their combined date and time."""

    collection = const.COLLECTION_REMINDERS
    label = const.LABEL_REMINDER

    def _order(self, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return list(status_engine.sort_reminders(records))


class ExpenseRepository(Repository):
    """Expenses, newest first."""

    collection = const.COLLECTION_EXPENSES
    label = const.LABEL_EXPENSE

    def _order(self, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return sorted(records, key=_date_key, reverse=True)


class WeightRepository(Repository):
    """Weights, oldest first so the last entry is the latest measurement."""

    collection = const.COLLECTION_WEIGHTS
    label = const.LABEL_WEIGHT

    def _order(self, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return sorted(records, key=_date_key)


# ======================================================================================
# Ancillary repositories
# ======================================================================================


class GroomingRepository(Repository):
    """Grooming records, newest first."""

    collection = const.COLLECTION_GROOMING

    def _order(self, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return sorted(records, key=_date_key, reverse=True)


class ActivityRepository(Repository):
    """Activity log entries, newest first."""

    collection = const.COLLECTION_ACTIVITIES

    def _order(self, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return sorted(records, key=_date_key, reverse=True)


class MedicalRecordRepository(Repository):
    """Medical records, newest first."""

    collection = const.COLLECTION_MEDICAL_RECORDS

    def _order(self, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return sorted(records, key=_date_key, reverse=True)


class InsuranceRepository(Repository):
    """Insurance policies. A pet has at most one active policy."""

    collection = const.COLLECTION_INSURANCE

    async def async_get_by_pet_id(self, pet_id: str) -> dict[str, Any] | None:
        """Return the pet's first policy, or None."""
        policies = await self._async_filter_by_pet(pet_id)
        return policies[0] if policies else None

    async def async_get_all_by_pet_id(self, pet_id: str) -> list[dict[str, Any]]:
        """Return every policy recorded for the pet."""
        return await self._async_filter_by_pet(pet_id)


class InsuranceClaimRepository(Repository):
    """Insurance claims, owned by a policy rather than a pet."""

    collection = const.COLLECTION_INSURANCE_CLAIMS
    pet_owned = False

    async def async_get_by_insurance_id(self, insurance_id: str) -> list[dict[str, Any]]:
        """Return claims filed against a policy, newest first."""
        claims = await self.async_find(
            lambda claim: claim.get(const.DATA_CLAIM_INSURANCE_ID) == insurance_id
        )
        return sorted(claims, key=_date_key, reverse=True)

    async def async_delete_by_insurance_ids(self, insurance_ids: Iterable[str]) -> int:
        """Remove every claim filed against any of the given policies."""
        wanted = set(insurance_ids)
        if not wanted:
            return 0
        return await self.async_delete_where(
            lambda claim: claim.get(const.DATA_CLAIM_INSURANCE_ID) in wanted
        )


class VetRepository(Repository):
    """Veterinarians, shared by every pet and kept on pet deletion."""

    collection = const.COLLECTION_VETS
    pet_owned = False


class RecurringExpenseRepository(Repository):
    """Recurring expense templates."""

    collection = const.COLLECTION_RECURRING_EXPENSES

    def _order(self, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [r for r in records if r.get(const.DATA_RECURRING_IS_ACTIVE, True)]

    async def async_get_due(self, today: date) -> list[dict[str, Any]]:
        """Return active templates whose next due date is on or before today."""

        def _due(record: dict[str, Any]) -> bool:
            due = dt_parse_date(record.get(const.DATA_RECURRING_NEXT_DUE_DATE))
            return bool(
                record.get(const.DATA_RECURRING_IS_ACTIVE, True)
                and due is not None
                and due <= today
            )

        return await self.async_find(_due)


# ======================================================================================
# Registry
# ======================================================================================


class Repositories:
    """Holds one repository per collection, sharing a store and clocks."""

    def __init__(
        self,
        store: PetCareStore,
        now: Callable[[], datetime] = dt_now_local,
        timestamp: Callable[[], str] = dt_now_iso,
    ) -> None:
        """Create every repository over the same store."""
        args = (store, now, timestamp)
        self.pets = PetRepository(*args)
        self.vaccines = VaccineRepository(*args)
        self.reminders = ReminderRepository(*args)
        self.expenses = ExpenseRepository(*args)
        self.weights = WeightRepository(*args)
        self.grooming = GroomingRepository(*args)
        self.activities = ActivityRepository(*args)
        self.insurance = InsuranceRepository(*args)
        self.insurance_claims = InsuranceClaimRepository(*args)
        self.medical_records = MedicalRecordRepository(*args)
        self.vets = VetRepository(*args)
        self.recurring_expenses = RecurringExpenseRepository(*args)

    def get(self, collection: str) -> Repository:
        """Return the repository for a collection key."""
        repo = getattr(self, collection, None)
        if not isinstance(repo, Repository):
            raise KeyError(collection)
        return repo
