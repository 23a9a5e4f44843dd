"""tagcache: a tag-aware, time-expiring key/value cache over swappable storage."""

from tagcache.core.cache_service import CacheService
from tagcache.domain.models.common import CacheDefaults, CacheOptions, CacheStorageType, EntryStatus

__all__ = ["CacheService", "CacheDefaults", "CacheOptions", "CacheStorageType", "EntryStatus"]
