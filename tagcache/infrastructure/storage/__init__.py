"""Storage Adapters.

Concrete implementations of the CacheStorage interface: in-memory,
session-scoped and durable (diskcache) mediums.
"""

from pathlib import Path
from typing import Optional, Union

from tagcache.domain.interfaces.cache_storage import CacheStorage
from tagcache.domain.models.common import CacheStorageType
from tagcache.infrastructure.storage.local_storage import LocalStorage
from tagcache.infrastructure.storage.memory_storage import MemoryStorage
from tagcache.infrastructure.storage.session_storage import SessionStorage


def create_storage(
    storage_type: Union[CacheStorageType, str],
    directory: Optional[Path] = None,
) -> CacheStorage:
    """Builds a storage adapter by type.

    Args:
        storage_type: A CacheStorageType or its string value.
        directory: Location for the durable storage, or the parent directory
            of the session storage. Ignored for memory storage.

    Raises:
        ValueError: If the type name is unknown.
    """
    storage_type = CacheStorageType(storage_type)
    if storage_type is CacheStorageType.SESSION_STORAGE:
        return SessionStorage(base_dir=directory)
    if storage_type is CacheStorageType.LOCAL_STORAGE:
        return LocalStorage(directory)
    return MemoryStorage()


__all__ = ["create_storage", "LocalStorage", "MemoryStorage", "SessionStorage"]
