"""Durable storage adapter.

Records persist in a diskcache directory across processes and restarts.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from tagcache.domain.models.common import CacheStorageType
from tagcache.infrastructure.storage.disk_storage import DiskStorage

logger = logging.getLogger(__name__)

# Use pathlib for proper cross-platform path handling
DEFAULT_STORAGE_DIR = Path.home() / ".tagcache" / "storage"


class LocalStorage(DiskStorage):
    """Disk storage kept in a fixed directory."""

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        directory = Path(directory) if directory is not None else DEFAULT_STORAGE_DIR
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            # diskcache will fail to open too, leaving the storage disabled
            logger.warning(f"Failed to create storage directory {directory}: {e}")
        super().__init__(directory)

    def type(self) -> CacheStorageType:
        return CacheStorageType.LOCAL_STORAGE
