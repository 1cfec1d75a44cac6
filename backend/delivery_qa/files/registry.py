"""In-memory registry of uploaded files.

The registry is append-only: entries are added on upload and never
updated or removed. Nothing is persisted, so a restart forgets every
upload even though the files remain on disk.
"""
import logging
import threading
from typing import Dict, Optional

from .schemas import StoredFile

logger = logging.getLogger(__name__)


class FileRegistry:
    """Thread-safe map of file id to StoredFile."""

    def __init__(self) -> None:
        self._files: Dict[str, StoredFile] = {}
        self._lock = threading.Lock()

    def add(self, stored: StoredFile) -> None:
        """Record a freshly uploaded file.

        Raises:
            ValueError: If the id is already registered.
        """
        with self._lock:
            if stored.id in self._files:
                raise ValueError(f"File id already registered: {stored.id}")
            self._files[stored.id] = stored
        logger.debug("Registered file %s (%s)", stored.id, stored.kind)

    def get(self, file_id: str) -> Optional[StoredFile]:
        with self._lock:
            return self._files.get(file_id)

    def __contains__(self, file_id: object) -> bool:
        with self._lock:
            return file_id in self._files

    def __len__(self) -> int:
        with self._lock:
            return len(self._files)
