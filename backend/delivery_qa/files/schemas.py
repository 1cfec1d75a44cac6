"""Pydantic schemas for spreadsheet uploads.

- StoredFile: metadata for an uploaded spreadsheet, kept in the FileRegistry
- UploadResponse: API response after a successful upload

Files are stored under the upload directory as ``{token}{ext}`` where the
token is random and unrelated to the original filename.
"""
import time

from pydantic import BaseModel, ConfigDict, Field


class StoredFile(BaseModel):
    """Metadata for an uploaded spreadsheet.

    Entries are created once on upload and never mutated or deleted; they
    live as long as the process does.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Random hex token identifying the file")
    path: str = Field(..., description="Location of the stored file on disk")
    kind: str = Field(..., description="Caller-supplied category of the file")
    original_name: str = Field(..., description="Filename as uploaded")
    size_bytes: int = Field(..., ge=0, description="File size in bytes")
    uploaded_at: float = Field(default_factory=time.time, description="Upload timestamp")


class UploadResponse(BaseModel):
    """Response body of ``POST /api/upload``."""
    fileId: str
    kind: str
    originalName: str
