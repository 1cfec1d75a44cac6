"""File storage service for uploaded spreadsheets.

Stores uploads on disk as ``{upload_dir}/{token}{ext}`` and records their
metadata in the FileRegistry. Spreadsheet contents are not inspected here;
a malformed workbook is only discovered when it is filtered.
"""
import logging
import secrets
from pathlib import Path

from delivery_qa.errors import PayloadTooLargeError

from .registry import FileRegistry
from .schemas import StoredFile

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".xlsx"
TOKEN_BYTES = 12


def stored_extension(filename: str) -> str:
    """Return the extension used on disk for an uploaded filename.

    Only the basename is considered, so directory parts in a client
    supplied name never reach the storage path.

    Examples:
        >>> stored_extension("report.xls")
        '.xls'
        >>> stored_extension("../../etc/passwd")
        '.xlsx'
        >>> stored_extension("")
        '.xlsx'
    """
    name = Path(filename.replace("\\", "/")).name if filename else ""
    return Path(name).suffix or DEFAULT_EXTENSION


class FileStorageService:
    """Service for saving uploads and registering them."""

    def __init__(self, upload_dir: str, registry: FileRegistry, max_file_bytes: int):
        self.upload_dir = Path(upload_dir)
        self.registry = registry
        self.max_file_bytes = max_file_bytes
        self._ensure_upload_dir()

    def _ensure_upload_dir(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def save_file(self, filename: str, content: bytes, kind: str) -> StoredFile:
        """Write an upload to disk and register it.

        Args:
            filename: Original filename as sent by the client.
            content: File content.
            kind: Category label, already validated as non-empty.

        Returns:
            StoredFile: The newly registered entry.

        Raises:
            PayloadTooLargeError: If content exceeds the size limit.
        """
        size_bytes = len(content)
        if size_bytes > self.max_file_bytes:
            raise PayloadTooLargeError(self.max_file_bytes, what="File size")

        file_id = secrets.token_hex(TOKEN_BYTES)
        file_path = self.upload_dir / f"{file_id}{stored_extension(filename)}"

        self._ensure_upload_dir()
        file_path.write_bytes(content)

        stored = StoredFile(
            id=file_id,
            path=str(file_path),
            kind=kind,
            original_name=filename,
            size_bytes=size_bytes,
        )
        self.registry.add(stored)

        logger.info(
            "Stored upload %s as %s (kind=%s, %d bytes)",
            filename, file_path.name, kind, size_bytes,
        )
        return stored
