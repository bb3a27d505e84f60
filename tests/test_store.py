"""Tests for PetCareStore - whole-collection persistence over HA Store."""

from __future__ import annotations

from typing import Any

import pytest
from homeassistant.core import HomeAssistant

from custom_components.petcare import const
from custom_components.petcare.exceptions import PetCareStorageError
from custom_components.petcare.store import PetCareStore


async def test_unwritten_collection_is_none(store: PetCareStore) -> None:
    """A key that was never written reads as None, not an empty list."""
    assert await store.async_get_raw(const.COLLECTION_PETS) is None


async def test_set_then_get_roundtrip(
    hass: HomeAssistant, hass_storage: dict[str, Any], store: PetCareStore
) -> None:
    """Writes are flushed to the backing storage file immediately."""
    pets = [{const.DATA_ID: "p1", const.DATA_PET_NAME: "Max"}]
    await store.async_set_raw(const.COLLECTION_PETS, pets)

    assert await store.async_get_raw(const.COLLECTION_PETS) == pets
    assert hass_storage[f"petcare.{const.COLLECTION_PETS}"]["data"] == pets


async def test_reads_return_copies(store: PetCareStore) -> None:
    """Mutating a read result never leaks into the cache."""
    await store.async_set_raw(const.COLLECTION_PETS, [{const.DATA_ID: "p1"}])
    first = await store.async_get_raw(const.COLLECTION_PETS)
    first[0][const.DATA_PET_NAME] = "mutated"
    first.append({const.DATA_ID: "p2"})

    assert await store.async_get_raw(const.COLLECTION_PETS) == [{const.DATA_ID: "p1"}]


async def test_existing_data_loaded_on_initialize(
    hass: HomeAssistant, hass_storage: dict[str, Any]
) -> None:
    hass_storage[f"petcare.{const.COLLECTION_VETS}"] = {
        "version": const.STORAGE_VERSION,
        "minor_version": 1,
        "key": f"petcare.{const.COLLECTION_VETS}",
        "data": [{const.DATA_ID: "v1", const.DATA_VET_NAME: "Dr. Who"}],
    }
    petcare_store = PetCareStore(hass)
    await petcare_store.async_initialize()

    vets = await petcare_store.async_get_raw(const.COLLECTION_VETS)
    assert vets[0][const.DATA_VET_NAME] == "Dr. Who"


async def test_unknown_collection_raises(store: PetCareStore) -> None:
    with pytest.raises(PetCareStorageError):
        await store.async_get_raw("unicorns")
    with pytest.raises(PetCareStorageError):
        await store.async_set_raw("unicorns", [])


async def test_data_property_fills_empty_lists(store: PetCareStore) -> None:
    await store.async_set_raw(const.COLLECTION_WEIGHTS, [{const.DATA_ID: "w1"}])
    data = store.data
    assert set(data) == set(const.ALL_COLLECTIONS)
    assert data[const.COLLECTION_WEIGHTS] == [{const.DATA_ID: "w1"}]
    assert data[const.COLLECTION_PETS] == []


async def test_delete_storage_clears_everything(
    hass_storage: dict[str, Any], store: PetCareStore
) -> None:
    await store.async_set_raw(const.COLLECTION_PETS, [{const.DATA_ID: "p1"}])
    await store.async_delete_storage()

    assert f"petcare.{const.COLLECTION_PETS}" not in hass_storage
    assert store.data[const.COLLECTION_PETS] == []
