"""Interface for cache storage backends.

Defines the contract for the synchronous key/value mediums the cache
orchestrator delegates physical storage to (session-scoped, durable,
in-memory). Backends hold no cache logic of their own.
"""

import abc
from typing import Optional

from ..models.common import CacheStorageType, StorageKey, StorageValue


class CacheStorage(abc.ABC):
    """Abstract Base Class for cache storage mediums."""

    @property
    @abc.abstractmethod
    def length(self) -> int:
        """The number of data items stored in the storage."""
        pass

    def __len__(self) -> int:
        return self.length

    @abc.abstractmethod
    def get_item(self, key: StorageKey) -> Optional[StorageValue]:
        """Retrieves a record from storage.

        Args:
            key: The namespaced storage key.

        Returns:
            The stored record, or None if the key is absent or unreadable.
        """
        pass

    @abc.abstractmethod
    def set_item(self, key: StorageKey, value: StorageValue) -> bool:
        """Stores a record.

        Args:
            key: The namespaced storage key.
            value: The record to store. Must survive a JSON round trip unchanged.

        Returns:
            True if the medium accepted the write, False otherwise.
        """
        pass

    @abc.abstractmethod
    def remove_item(self, key: StorageKey) -> None:
        """Removes a record. Missing keys are ignored."""
        pass

    @abc.abstractmethod
    def clear(self) -> None:
        """Removes every record in the storage."""
        pass

    @abc.abstractmethod
    def type(self) -> CacheStorageType:
        """Returns the type identifier of this storage."""
        pass

    @abc.abstractmethod
    def is_enabled(self) -> bool:
        """Checks whether the medium is usable in the current environment.

        Must not raise.
        """
        pass

    @abc.abstractmethod
    def key(self, index: int) -> Optional[str]:
        """Returns the name of the nth key in the storage, or None if out of range."""
        pass
