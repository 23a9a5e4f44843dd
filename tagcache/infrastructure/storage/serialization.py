"""JSON encoding of storage records shared by all storage adapters."""

import json
import logging
from typing import Any, Optional

from tagcache.domain.models.common import StorageKey, StorageValue

logger = logging.getLogger(__name__)


def encode_record(key: StorageKey, record: StorageValue) -> Optional[str]:
    """Serializes a record to JSON text, or returns None if it cannot be encoded.

    Records that JSON would silently alter (tuples, non-string mapping keys)
    are rejected as well, so a read always returns what was written.
    """
    try:
        encoded = json.dumps(record, allow_nan=False)
    except (TypeError, ValueError) as e:
        logger.warning(f"Cannot serialize value for storage key '{key}': {e}")
        return None
    if json.loads(encoded) != record:
        logger.warning(f"Value for storage key '{key}' does not survive JSON encoding unchanged.")
        return None
    return encoded


def decode_record(key: StorageKey, raw: Any) -> Optional[StorageValue]:
    """Parses JSON text read from a medium. Unreadable payloads decode to None."""
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"Discarding unreadable payload for storage key '{key}': {e}")
        return None
