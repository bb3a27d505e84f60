# File: pet_manager.py
"""Pet Manager - pet lifecycle and cascade deletion.

Responsibilities:
- Create and update pets
- Delete a pet together with every record that references it
- Reconcile orphans left behind by an interrupted deletion

Cascade order for `async_delete_pet`:
    1. Gather: the pet's reminders (and insurance policy ids for claims)
    2. Cancel: every scheduled notification of those reminders (best effort)
    3. Purge: each pet-owned collection, then claims of purged policies
    4. Remove: the pet record itself

A failure in steps 3-4 raises PetCareCascadeError listing the steps that
already completed; nothing is rolled back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const, data_builders as db
from ..exceptions import PetCareCascadeError, PetCareNotFoundError
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import PetCareDataCoordinator
    from ..repositories import Repository
    from .notification_manager import NotificationManager


class PetManager(BaseManager):
    """Manager for pets and their dependent records.

    Collaborators are injected: the notification manager for cancelling
    reminder alarms and the coordinator's repositories for storage.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: PetCareDataCoordinator,
        notification_manager: NotificationManager,
    ) -> None:
        """Initialize with the notification manager used for cancellation."""
        super().__init__(hass, coordinator)
        self.notifications = notification_manager

    async def async_setup(self) -> None:
        """No event subscriptions; pets are driven by service calls."""

    # =========================================================================
    # CRUD
    # =========================================================================

    async def async_get_pet(self, pet_id: str) -> dict[str, Any]:
        """Return a pet or raise PetCareNotFoundError."""
        pet = await self.repos.pets.async_get_by_id(pet_id)
        if pet is None:
            raise PetCareNotFoundError(const.LABEL_PET, pet_id)
        return pet

    async def async_add_pet(self, user_input: dict[str, Any]) -> dict[str, Any]:
        """Create a pet from validated input."""
        pet = await self.repos.pets.async_save(db.build_pet(user_input))
        const.LOGGER.info(
            "INFO: Added pet '%s' (%s)", pet[const.DATA_PET_NAME], pet[const.DATA_ID]
        )
        self.emit(const.SIGNAL_SUFFIX_PET_UPDATED, pet_id=pet[const.DATA_ID])
        return pet

    async def async_update_pet(
        self, pet_id: str, user_input: dict[str, Any]
    ) -> dict[str, Any]:
        """Update a pet in place, preserving id and created_at."""
        existing = await self.async_get_pet(pet_id)
        pet = await self.repos.pets.async_save(db.build_pet(user_input, existing))
        self.emit(const.SIGNAL_SUFFIX_PET_UPDATED, pet_id=pet_id)
        return pet

    # =========================================================================
    # Cascade Delete
    # =========================================================================

    def _pet_owned_repositories(self) -> list[tuple[str, Repository]]:
        return [
            (collection, self.repos.get(collection))
            for collection in const.PET_OWNED_COLLECTIONS
        ]

    async def async_delete_pet(self, pet_id: str) -> dict[str, int]:
        """Delete a pet and every record that references it.

        Returns:
            Count of removed records per collection (including "pets": 1).

        Raises:
            PetCareNotFoundError: The pet does not exist.
            PetCareCascadeError: A purge step failed; `completed_steps` lists
                the collections already purged.
        """
        await self.async_get_pet(pet_id)
        completed: list[str] = []
        removed: dict[str, int] = {}

        try:
            reminders = await self.repos.reminders.async_get_by_pet_id(pet_id)
            policies = await self.repos.insurance.async_get_all_by_pet_id(pet_id)
        except Exception as err:  # pylint: disable=broad-exception-caught
            const.LOGGER.error(
                "ERROR: Cascade delete for pet %s failed while gathering: %s",
                pet_id,
                err,
            )
            raise PetCareCascadeError(pet_id, completed) from err

        for reminder in reminders:
            self.notifications.cancel_reminder(reminder)
        completed.append("cancel_notifications")

        try:
            for collection, repo in self._pet_owned_repositories():
                removed[collection] = await repo.async_delete_by_pet_id(pet_id)
                completed.append(collection)
            removed[const.COLLECTION_INSURANCE_CLAIMS] = (
                await self.repos.insurance_claims.async_delete_by_insurance_ids(
                    policy[const.DATA_ID] for policy in policies
                )
            )
            completed.append(const.COLLECTION_INSURANCE_CLAIMS)
            await self.repos.pets.async_delete(pet_id)
            removed[const.COLLECTION_PETS] = 1
        except Exception as err:  # pylint: disable=broad-exception-caught
            const.LOGGER.error(
                "ERROR: Cascade delete for pet %s failed after %s: %s",
                pet_id,
                completed,
                err,
            )
            raise PetCareCascadeError(pet_id, completed) from err

        const.LOGGER.info("INFO: Deleted pet %s and dependents: %s", pet_id, removed)
        self.emit(const.SIGNAL_SUFFIX_PET_DELETED, pet_id=pet_id)
        return removed

    # =========================================================================
    # Orphan Reconciliation
    # =========================================================================

    async def async_purge_orphans(self) -> dict[str, int]:
        """Remove records whose pet (or insurance policy) no longer exists.

        Reminder alarms of orphaned reminders are cancelled first.

        Returns:
            Count of removed records per collection; collections with no
            orphans are omitted.
        """
        pet_ids = {pet[const.DATA_ID] for pet in await self.repos.pets.async_get_all()}

        def _orphan(record: dict[str, Any]) -> bool:
            return record.get(const.DATA_PET_ID) not in pet_ids

        for reminder in await self.repos.reminders.async_find(_orphan):
            self.notifications.cancel_reminder(reminder)

        removed: dict[str, int] = {}
        for collection, repo in self._pet_owned_repositories():
            count = await repo.async_delete_where(_orphan)
            if count:
                removed[collection] = count

        policy_ids = {
            policy[const.DATA_ID] for policy in await self.repos.insurance.async_get_all()
        }
        claims = await self.repos.insurance_claims.async_delete_where(
            lambda claim: claim.get(const.DATA_CLAIM_INSURANCE_ID) not in policy_ids
        )
        if claims:
            removed[const.COLLECTION_INSURANCE_CLAIMS] = claims

        if removed:
            const.LOGGER.info("INFO: Purged orphaned records: %s", removed)
        else:
            const.LOGGER.debug("DEBUG: No orphaned records found")
        return removed
