# File: store.py
"""Handles persistent data storage for the Pet Care integration.

Uses Home Assistant's Storage helper with one storage file per collection
namespace (petcare.pets, petcare.vaccines, ...). Each collection is read and
written as a whole list; there is no per-record indexed write.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.storage import Store

from . import const
from .exceptions import PetCareStorageError

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


class PetCareStore:
    """Key/value persistence for Pet Care collections.

    Thin wrapper around Home Assistant's Store API. Each key maps to a list of
    record dicts. Loaded collections are cached in memory; writes replace the
    cached list and are flushed immediately.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        collections: list[str] | None = None,
        key_prefix: str = const.STORAGE_KEY_PREFIX,
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            collections: Collection keys to manage (default: const.ALL_COLLECTIONS).
            key_prefix: Storage namespace prefix (default: const.STORAGE_KEY_PREFIX).
        """
        self.hass = hass
        self._collections = list(collections or const.ALL_COLLECTIONS)
        self._stores: dict[str, Store] = {
            key: Store(hass, const.STORAGE_VERSION, f"{key_prefix}.{key}")
            for key in self._collections
        }
        self._data: dict[str, list[dict[str, Any]] | None] = {}

    async def async_initialize(self) -> None:
        """Load every collection from storage during startup.

        Collections with no file stay None until first written.
        """
        const.LOGGER.debug("DEBUG: PetCareStore: Loading collections from storage")
        for key, store in self._stores.items():
            try:
                existing = await store.async_load()
            except (OSError, ValueError) as err:
                const.LOGGER.error(
                    "ERROR: Failed to load collection '%s' from %s: %s",
                    key,
                    store.path,
                    err,
                )
                raise PetCareStorageError(key, str(err)) from err
            self._data[key] = existing if isinstance(existing, list) else None
        const.LOGGER.debug(
            "DEBUG: Loaded collections: %s",
            {key: len(items or []) for key, items in self._data.items()},
        )

    def _get_store(self, key: str) -> Store:
        store = self._stores.get(key)
        if store is None:
            const.LOGGER.error("ERROR: Unknown storage collection '%s'", key)
            raise PetCareStorageError(key, "unknown collection")
        return store

    async def async_get_raw(self, key: str) -> list[dict[str, Any]] | None:
        """Return a copy of the stored collection, or None if never written."""
        store = self._get_store(key)
        if key not in self._data:
            try:
                loaded = await store.async_load()
            except (OSError, ValueError) as err:
                const.LOGGER.error(
                    "ERROR: Failed to read collection '%s': %s", key, err
                )
                raise PetCareStorageError(key, str(err)) from err
            self._data[key] = loaded if isinstance(loaded, list) else None
        items = self._data[key]
        return copy.deepcopy(items) if items is not None else None

    async def async_set_raw(self, key: str, items: list[dict[str, Any]]) -> None:
        """Replace a whole collection and flush it to disk.

        Raises:
            PetCareStorageError: Disk errors or non-serializable records. The
                in-memory cache is left unchanged when the write fails.
        """
        store = self._get_store(key)
        snapshot = copy.deepcopy(items)
        try:
            await store.async_save(snapshot)
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save collection '%s' due to file system error: %s. "
                "Check disk space and file permissions for %s",
                key,
                err,
                store.path,
            )
            raise PetCareStorageError(key, str(err)) from err
        except (TypeError, ValueError) as err:
            const.LOGGER.error(
                "ERROR: Failed to save collection '%s' due to non-serializable data: %s",
                key,
                err,
            )
            raise PetCareStorageError(key, str(err)) from err
        self._data[key] = snapshot
        const.LOGGER.debug("DEBUG: Saved %s record(s) to '%s'", len(snapshot), key)

    @property
    def data(self) -> dict[str, list[dict[str, Any]]]:
        """Return a snapshot of every cached collection (empty lists for unset)."""
        return {
            key: copy.deepcopy(self._data.get(key) or []) for key in self._collections
        }

    async def async_delete_storage(self) -> None:
        """Delete every collection file and clear the in-memory cache."""
        const.LOGGER.warning("WARNING: Removing all Pet Care storage files")
        self._data.clear()
        for key, store in self._stores.items():
            try:
                await store.async_remove()
            except OSError as err:
                const.LOGGER.error(
                    "ERROR: Failed to remove storage file for '%s' (%s): %s",
                    key,
                    store.path,
                    err,
                )
                raise PetCareStorageError(key, str(err)) from err
        const.LOGGER.info("INFO: Pet Care storage files removed")
