# File: exceptions.py
"""Exception types raised by the Pet Care integration.

Soft failures (notification permission denied, schedule already in the past)
are never raised; they are logged and surface as a None result instead.
"""

from __future__ import annotations

from homeassistant.exceptions import HomeAssistantError

from . import const


class PetCareError(HomeAssistantError):
    """Base class for Pet Care errors."""


class PetCareNotFoundError(PetCareError):
    """A record referenced by id does not exist in its collection."""

    def __init__(self, entity_type: str, record_id: str) -> None:
        """Initialize with the entity label and the missing id."""
        super().__init__(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_NOT_FOUND,
            translation_placeholders={"entity_type": entity_type, "name": record_id},
        )
        self.entity_type = entity_type
        self.record_id = record_id


class PetCareStorageError(PetCareError):
    """Storage is unavailable or a collection could not be serialized."""

    def __init__(self, collection: str, reason: str) -> None:
        """Initialize with the collection key and a short reason."""
        super().__init__(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_STORAGE,
            translation_placeholders={"collection": collection, "reason": reason},
        )
        self.collection = collection


class PetCareCascadeError(PetCareError):
    """Pet deletion failed part-way; some dependents may already be gone.

    Attributes:
        pet_id: The pet being deleted
        completed_steps: Collections (or step names) purged before the failure
    """

    def __init__(self, pet_id: str, completed_steps: list[str]) -> None:
        """Initialize with the pet id and the steps that completed."""
        super().__init__(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_CASCADE,
            translation_placeholders={
                "pet_id": pet_id,
                "completed": ", ".join(completed_steps) or "-",
            },
        )
        self.pet_id = pet_id
        self.completed_steps = list(completed_steps)
