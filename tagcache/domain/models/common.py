"""Defines common Value Objects used across the cache contexts.

These objects represent the keys, options and stored records that flow
between the cache orchestrator and its storage backends.
"""

import enum
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, NewType, Optional, TypedDict

# === Keys ===
CacheKey = NewType("CacheKey", str)        # Key as supplied by the caller
StorageKey = NewType("StorageKey", str)    # Key after namespacing, as seen by the backend
TagName = NewType("TagName", str)          # Caller-assigned group label

# === Reserved Values ===
CACHE_PREFIX = "CacheService"
TAGS_STORAGE_KEY = CacheKey("CacheService_tags")

# Maximal timestamp (epoch ms) / age (seconds) meaning "never expires"
NEVER_EXPIRES = sys.maxsize


class CacheStorageType(str, enum.Enum):
    """Identifiers of the available storage mediums."""
    SESSION_STORAGE = "session_storage"
    LOCAL_STORAGE = "local_storage"
    MEMORY = "memory"


class EntryStatus(str, enum.Enum):
    """Tri-state result of looking up a key."""
    PRESENT = "present"
    EXPIRED = "expired"
    ABSENT = "absent"


# --- Structured Data ---
class StorageOptions(TypedDict):
    """Resolved expiration data persisted alongside a value."""
    expires: int   # epoch milliseconds
    maxAge: int    # seconds


class StorageValue(TypedDict):
    """The record written to the backend for every key."""
    value: Any
    options: StorageOptions


TagIndex = Dict[str, List[str]]  # tag name -> namespaced keys


@dataclass(frozen=True)
class CacheOptions:
    """Per-call options for CacheService.set.

    Attributes:
        expires: Absolute expiry as epoch milliseconds. Wins over max_age.
        max_age: Lifetime in seconds, counted from the time of the write.
        tag: Optional tag to group this entry under.
    """
    expires: Optional[int] = None
    max_age: Optional[int] = None
    tag: Optional[str] = None


@dataclass(frozen=True)
class CacheDefaults:
    """Immutable defaults applied when a call does not supply its own options."""
    expires: int = NEVER_EXPIRES
    max_age: int = NEVER_EXPIRES
