"""Shared diskcache-backed implementation for the file based storage mediums.

Both the session-scoped and the durable storage keep their records in a
`diskcache.Cache`; they only differ in where the directory lives and how
long it is kept around.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

import diskcache as dc

from tagcache.domain.interfaces.cache_storage import CacheStorage
from tagcache.domain.models.common import StorageKey, StorageValue
from tagcache.infrastructure.storage.serialization import decode_record, encode_record

logger = logging.getLogger(__name__)

# Errors a disk medium may raise on any operation
DISK_ERRORS = (OSError, sqlite3.Error, dc.Timeout)

WRITE_CHECK_KEY = "__tagcache_write_check__"


class DiskStorage(CacheStorage):
    """Storage adapter writing JSON records into a diskcache directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self.disk_cache: Optional[dc.Cache] = None
        self._enabled: Optional[bool] = None
        try:
            # No eviction: size bounding is not a concern of this cache
            self.disk_cache = dc.Cache(
                str(self.directory), timeout=1, eviction_policy="none"
            )
            logger.info(f"Opened disk cache storage at: {self.disk_cache.directory}")
        except DISK_ERRORS as e:
            logger.error(f"Failed to open disk cache storage at {self.directory}: {e}", exc_info=True)

    @property
    def length(self) -> int:
        if self.disk_cache is None:
            return 0
        try:
            return len(self.disk_cache)
        except DISK_ERRORS as e:
            logger.error(f"Failed to count disk cache items: {e}", exc_info=True)
            return 0

    def get_item(self, key: StorageKey) -> Optional[StorageValue]:
        if self.disk_cache is None:
            return None
        try:
            raw = self.disk_cache.get(key, default=None)
        except DISK_ERRORS as e:
            logger.error(f"Error reading storage key '{key}': {e}", exc_info=True)
            return None
        return decode_record(key, raw)

    def set_item(self, key: StorageKey, value: StorageValue) -> bool:
        if self.disk_cache is None:
            return False
        encoded = encode_record(key, value)
        if encoded is None:
            return False
        try:
            return bool(self.disk_cache.set(key, encoded))
        except DISK_ERRORS as e:
            logger.warning(f"Disk cache rejected write for storage key '{key}': {e}")
            return False

    def remove_item(self, key: StorageKey) -> None:
        if self.disk_cache is None:
            return
        try:
            self.disk_cache.delete(key)
        except DISK_ERRORS as e:
            logger.error(f"Error removing storage key '{key}': {e}", exc_info=True)

    def clear(self) -> None:
        if self.disk_cache is None:
            return
        try:
            count = self.disk_cache.clear()
            logger.info(f"Cleared disk cache storage. Removed {count} items.")
        except DISK_ERRORS as e:
            logger.error(f"Failed to clear disk cache storage: {e}", exc_info=True)

    def is_enabled(self) -> bool:
        # Checked once per instance
        if self._enabled is None:
            self._enabled = self._check_writable()
        return self._enabled

    def _check_writable(self) -> bool:
        if self.disk_cache is None:
            return False
        try:
            self.disk_cache.set(WRITE_CHECK_KEY, "1")
            self.disk_cache.delete(WRITE_CHECK_KEY)
            return True
        except DISK_ERRORS as e:
            logger.debug(f"Disk cache storage at {self.directory} is not writable: {e}")
            return False

    def key(self, index: int) -> Optional[str]:
        if self.disk_cache is None or index < 0:
            return None
        try:
            for position, stored_key in enumerate(self.disk_cache.iterkeys()):
                if position == index:
                    return stored_key
        except DISK_ERRORS as e:
            logger.error(f"Failed to iterate disk cache keys: {e}", exc_info=True)
        return None

    def close(self) -> None:
        """Releases the underlying database handles."""
        if self.disk_cache is not None:
            self.disk_cache.close()
