"""In-memory storage adapter.

Always enabled; used as the guaranteed fallback when no other medium
is usable. Records are kept as JSON text so that callers never share
mutable state with the stored copy.
"""

import logging
from typing import Dict, Optional

from tagcache.domain.interfaces.cache_storage import CacheStorage
from tagcache.domain.models.common import CacheStorageType, StorageKey, StorageValue
from tagcache.infrastructure.storage.serialization import decode_record, encode_record

logger = logging.getLogger(__name__)


class MemoryStorage(CacheStorage):
    """Process-local dictionary storage."""

    def __init__(self):
        self._data: Dict[str, str] = {}
        logger.debug("Initialized in-memory cache storage.")

    @property
    def length(self) -> int:
        return len(self._data)

    def get_item(self, key: StorageKey) -> Optional[StorageValue]:
        return decode_record(key, self._data.get(key))

    def set_item(self, key: StorageKey, value: StorageValue) -> bool:
        encoded = encode_record(key, value)
        if encoded is None:
            return False
        self._data[key] = encoded
        return True

    def remove_item(self, key: StorageKey) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def type(self) -> CacheStorageType:
        return CacheStorageType.MEMORY

    def is_enabled(self) -> bool:
        return True

    def key(self, index: int) -> Optional[str]:
        if 0 <= index < len(self._data):
            return list(self._data)[index]
        return None
