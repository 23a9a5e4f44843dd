"""Session-scoped storage adapter.

Records live in a private temporary directory that is removed when the
storage is closed or garbage collected, or when the interpreter exits.
"""

import logging
import shutil
import tempfile
import weakref
from pathlib import Path
from typing import Optional

import diskcache as dc

from tagcache.domain.models.common import CacheStorageType
from tagcache.infrastructure.storage.disk_storage import DiskStorage

logger = logging.getLogger(__name__)

SESSION_DIR_PREFIX = "tagcache-session-"


def _discard_session(disk_cache: Optional[dc.Cache], directory: Path) -> None:
    if disk_cache is not None:
        disk_cache.close()
    shutil.rmtree(directory, ignore_errors=True)
    logger.debug(f"Discarded session storage directory: {directory}")


class SessionStorage(DiskStorage):
    """Disk storage bound to the lifetime of this object."""

    def __init__(self, base_dir: Optional[Path] = None):
        try:
            directory = Path(tempfile.mkdtemp(prefix=SESSION_DIR_PREFIX, dir=base_dir))
        except OSError as e:
            logger.warning(f"Could not create a session storage directory: {e}")
            self.directory = Path(base_dir or tempfile.gettempdir())
            self.disk_cache = None
            self._enabled = False
            self._finalizer = None
            return
        super().__init__(directory)
        self._finalizer = weakref.finalize(self, _discard_session, self.disk_cache, directory)

    def type(self) -> CacheStorageType:
        return CacheStorageType.SESSION_STORAGE

    def close(self) -> None:
        """Ends the session, dropping every stored record."""
        if self._finalizer is not None:
            self._finalizer()
