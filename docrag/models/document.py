"""Document registry models.

A :class:`Document` is the record kept for every uploaded file.  Its
``status`` starts at ``uploaded`` and is only ever changed by the ingestion
pipeline, which moves it to ``ingested`` or ``failed``.  Re-ingesting a
document may move it between the two terminal states in either direction.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DocumentStatus(str, Enum):  # noqa: UP042 - StrEnum requires Python 3.11+
    """Lifecycle state of a registered document."""

    UPLOADED = "uploaded"
    INGESTED = "ingested"
    FAILED = "failed"


class Document(BaseModel):
    """A registered upload and its ingestion status."""

    model_config = ConfigDict(frozen=True)

    document_id: str = Field(description="Opaque identifier assigned at registration.")
    original_name: str = Field(description="Filename as supplied by the uploader.")
    stored_name: str = Field(description="Sanitized, unique filename on disk.")
    mime_type: str = Field(default="application/octet-stream", description="Declared MIME type.")
    size: int = Field(default=0, ge=0, description="File size in bytes.")
    storage_path: str = Field(description="Absolute or working-directory-relative path to the file.")
    status: DocumentStatus = Field(default=DocumentStatus.UPLOADED)
    created_at: datetime = Field(description="Registration timestamp (UTC).")


class FileLocation(BaseModel):
    """Where a document's bytes live and how it was described at upload."""

    model_config = ConfigDict(frozen=True)

    path: str
    original_name: str
    mime_type: str
