"""FastAPI router for spreadsheet uploads."""
import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, File, Form, UploadFile

from delivery_qa.deps import get_storage_service
from delivery_qa.errors import MissingFieldError, PayloadTooLargeError

from .schemas import UploadResponse
from .service import FileStorageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["files"])


@router.post("/upload", response_model=UploadResponse)
def upload_file(
    # A plain text "file" part arrives as str and counts as no file.
    file: Union[UploadFile, str, None] = File(None),
    kind: Optional[str] = Form(None),
    service: FileStorageService = Depends(get_storage_service),
):
    """Upload a spreadsheet.

    Multipart fields:
    - file: the spreadsheet (xlsx, xls, csv...), at most 25MB by default
    - kind: category of the file, e.g. "plataforma", "ias", "plano"

    Returns:
        UploadResponse with the new file id

    Raises:
        MissingFieldError 400: If file or kind is absent
        PayloadTooLargeError 413: If the file exceeds the size limit
    """
    if file is None or isinstance(file, str):
        raise MissingFieldError("file", 'File not sent (field "file").')

    kind = (kind or "").strip()
    if not kind:
        raise MissingFieldError("kind")

    # Bounded read: one byte past the limit is enough to reject.
    content = file.file.read(service.max_file_bytes + 1)
    if len(content) > service.max_file_bytes:
        logger.warning("Rejected upload %s: over %d bytes", file.filename, service.max_file_bytes)
        raise PayloadTooLargeError(service.max_file_bytes, what="File size")

    original_name = file.filename or ""
    stored = service.save_file(filename=original_name, content=content, kind=kind)

    return UploadResponse(fileId=stored.id, kind=stored.kind, originalName=stored.original_name)
