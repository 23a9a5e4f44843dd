"""Tag-aware, time-expiring cache orchestrator.

Layers key namespacing, expiration handling and tag grouping on top of
any CacheStorage. The tag index is kept inside the same storage as a
regular record under a reserved key.

Known limitations:
    * exists() reports falsy stored values (False, 0, "", [], {}) as not
      present. Use status() when that distinction matters.
    * A key is expected to live under a single tag. remove() only
      scavenges the first tag listing the key.
    * The tag index is updated read-modify-write, so two services sharing
      one storage can lose each other's tag updates.
"""

import functools
import hashlib
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from tagcache.domain.interfaces.cache_storage import CacheStorage
from tagcache.domain.models.common import (
    CACHE_PREFIX,
    NEVER_EXPIRES,
    TAGS_STORAGE_KEY,
    CacheDefaults,
    CacheKey,
    CacheOptions,
    CacheStorageType,
    EntryStatus,
    StorageKey,
    StorageOptions,
    StorageValue,
    TagIndex,
)
from tagcache.infrastructure.storage import create_storage

logger = logging.getLogger(__name__)

DEFAULT_STORAGE = CacheStorageType.SESSION_STORAGE
DEFAULT_ENABLED_STORAGE = CacheStorageType.MEMORY


def _now_ms() -> int:
    return int(time.time() * 1000)


class CacheService:
    """Cache with namespaced keys, lazy expiration and tag groups."""

    def __init__(
        self,
        storage: Optional[CacheStorage] = None,
        defaults: CacheDefaults = CacheDefaults(),
        clock: Optional[Callable[[], int]] = None,
    ):
        """Initializes the cache service.

        Args:
            storage: Storage medium to use. Falls back to session storage when
                omitted, and to memory storage when the chosen one is disabled.
            defaults: Expiration applied to writes that carry no expiration.
            clock: Returns the current time in epoch milliseconds.
        """
        self._defaults = defaults
        self._clock = clock or _now_ms
        self._storage = self._validate_storage(storage)
        logger.info(f"CacheService initialized with {self._storage.type().value} storage.")

    @property
    def storage(self) -> CacheStorage:
        """The storage medium selected at construction."""
        return self._storage

    def _validate_storage(self, storage: Optional[CacheStorage]) -> CacheStorage:
        if storage is None:
            storage = create_storage(DEFAULT_STORAGE)
        if not storage.is_enabled():
            logger.warning(
                f"{storage.type().value} storage is not available, "
                f"falling back to {DEFAULT_ENABLED_STORAGE.value} storage."
            )
            close = getattr(storage, "close", None)
            if close is not None:
                close()
            storage = create_storage(DEFAULT_ENABLED_STORAGE)
        return storage

    # --- Public Interface ---

    def set(self, key: str, value: Any, options: Optional[CacheOptions] = None) -> bool:
        """Stores a value.

        Args:
            key: Non-empty cache key.
            value: JSON-serializable payload.
            options: Expiration and tag for this entry. `expires` (epoch ms)
                wins over `max_age` (seconds); without either the service
                defaults apply.

        Returns:
            True if the storage accepted the write.
        """
        storage_key = self._to_storage_key(key)
        options = options or CacheOptions()
        stored = self._storage.set_item(storage_key, self._to_storage_value(value, options))
        if stored:
            logger.debug(f"Cache PUT key: {key}")
        else:
            logger.warning(f"Storage rejected write for cache key: {key}")
        if options.tag and not self._is_system_key(key):
            self._save_tag(options.tag, storage_key)
        return stored

    def get(self, key: str) -> Optional[Any]:
        """Returns the cached value, or None if absent or expired."""
        return self._lookup(key)[1]

    def exists(self, key: str) -> bool:
        """Checks whether a truthy value is cached under the key."""
        return bool(self.get(key))

    def status(self, key: str) -> EntryStatus:
        """Reports whether the key is present, expired or absent.

        Unlike exists(), falsy values count as present. An expired entry
        is removed as a side effect, so the next call reports ABSENT.
        """
        return self._lookup(key)[0]

    def remove(self, key: str) -> None:
        """Removes an entry and drops it from its tag."""
        storage_key = self._to_storage_key(key)
        self._storage.remove_item(storage_key)
        self._remove_from_tag(storage_key)
        logger.debug(f"Cache REMOVE key: {key}")

    def remove_all(self) -> None:
        """Clears the whole storage, tag index included."""
        self._storage.clear()
        logger.info("Cleared all cache entries.")

    def get_tag_data(self, tag: str) -> Dict[str, Any]:
        """Returns {key: value} for every live, truthy entry under the tag."""
        result: Dict[str, Any] = {}
        for storage_key in self._read_tags().get(tag, []):
            key = self._from_storage_key(storage_key)
            if not key:
                continue
            data = self.get(key)
            if data:
                result[key] = data
        return result

    def remove_tag(self, tag: str) -> None:
        """Removes every entry under the tag, and the tag itself."""
        tags = self._read_tags()
        if tag not in tags:
            return
        for storage_key in tags[tag]:
            self._storage.remove_item(StorageKey(storage_key))
        del tags[tag]
        self._write_tags(tags)
        logger.debug(f"Removed tag '{tag}'")

    def cache_result(
        self, prefix: str, max_age: Optional[int] = None, tag: Optional[str] = None
    ) -> Callable:
        """Decorator to cache the result of a function.

        Args:
            prefix: A prefix for the cache key.
            max_age: Optional lifetime in seconds for the cached result.
            tag: Optional tag for the cached result.

        Returns:
            A decorator.
        """
        options = CacheOptions(max_age=max_age, tag=tag)

        def decorator(func: Callable) -> Callable:
            @functools.wraps(func)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                key = self._generate_key(prefix, *args, **kwargs)
                status, cached_value = self._lookup(key)
                if status is EntryStatus.PRESENT:
                    return cached_value
                result = func(*args, **kwargs)
                self.set(key, result, options)
                return result
            return wrapper
        return decorator

    # --- Internals ---

    def _lookup(self, key: str) -> Tuple[EntryStatus, Optional[Any]]:
        storage_value = self._storage.get_item(self._to_storage_key(key))
        if not self._is_storage_value(storage_value):
            logger.debug(f"Cache MISS for key: {key}")
            return EntryStatus.ABSENT, None
        if self._validate_storage_value(storage_value):
            logger.debug(f"Cache HIT for key: {key}")
            return EntryStatus.PRESENT, storage_value["value"]
        logger.debug(f"Cache EXPIRED key: {key}")
        self.remove(key)
        return EntryStatus.EXPIRED, None

    def _generate_key(self, prefix: str, *args: Any, **kwargs: Any) -> str:
        key_parts = [prefix]
        key_parts.extend(map(str, args))
        # Ensure consistent order for kwargs
        key_parts.extend(f"{k}={v}" for k, v in sorted(kwargs.items()))
        key_string = "|".join(key_parts)
        return f"{prefix}_{hashlib.sha256(key_string.encode('utf-8')).hexdigest()}"

    def _to_storage_key(self, key: str) -> StorageKey:
        if not isinstance(key, str) or not key:
            raise ValueError(f"Cache key must be a non-empty string, got {key!r}")
        return StorageKey(CACHE_PREFIX + key)

    def _from_storage_key(self, storage_key: str) -> CacheKey:
        if storage_key.startswith(CACHE_PREFIX):
            return CacheKey(storage_key[len(CACHE_PREFIX):])
        return CacheKey(storage_key)

    def _is_system_key(self, key: str) -> bool:
        return key in (TAGS_STORAGE_KEY,)

    def _to_storage_value(self, value: Any, options: CacheOptions) -> StorageValue:
        return {"value": value, "options": self._to_storage_options(options)}

    def _to_storage_options(self, options: CacheOptions) -> StorageOptions:
        if options.expires is not None:
            expires = options.expires
        elif options.max_age is not None:
            expires = self._clock() + options.max_age * 1000
        else:
            expires = self._default_expires()
        max_age = options.max_age if options.max_age is not None else self._defaults.max_age
        return {"expires": expires, "maxAge": max_age}

    def _default_expires(self) -> int:
        if self._defaults.expires != NEVER_EXPIRES:
            return self._defaults.expires
        if self._defaults.max_age != NEVER_EXPIRES:
            return self._clock() + self._defaults.max_age * 1000
        return NEVER_EXPIRES

    def _is_storage_value(self, storage_value: Any) -> bool:
        if not isinstance(storage_value, dict) or "value" not in storage_value:
            return False
        options = storage_value.get("options")
        if not isinstance(options, dict):
            return False
        expires = options.get("expires")
        return isinstance(expires, (int, float)) and not isinstance(expires, bool)

    def _validate_storage_value(self, storage_value: StorageValue) -> bool:
        return storage_value["options"]["expires"] > self._clock()

    # --- Tag Index ---

    def _read_tags(self) -> TagIndex:
        tags = self.get(TAGS_STORAGE_KEY)
        if not isinstance(tags, dict):
            return {}
        return {
            tag: [key for key in keys if isinstance(key, str)]
            for tag, keys in tags.items()
            if isinstance(keys, list)
        }

    def _write_tags(self, tags: TagIndex) -> None:
        # Written directly so the index itself is never tagged
        record: StorageValue = {
            "value": tags,
            "options": {"expires": NEVER_EXPIRES, "maxAge": NEVER_EXPIRES},
        }
        if not self._storage.set_item(self._to_storage_key(TAGS_STORAGE_KEY), record):
            logger.warning("Storage rejected write of the tag index.")

    def _save_tag(self, tag: str, storage_key: StorageKey) -> None:
        tags = self._read_tags()
        tags.setdefault(tag, []).append(storage_key)
        self._write_tags(tags)

    def _remove_from_tag(self, storage_key: StorageKey) -> None:
        tags = self._read_tags()
        for keys in tags.values():
            if storage_key in keys:
                keys.remove(storage_key)
                self._write_tags(tags)
                break
