"""Registers uploaded files as documents.

Uploads are written under the configured upload directory with a sanitized,
collision-free name (``<base>-<unique><ext>``) and then recorded in the
document store with status ``uploaded``.  Ingestion is a separate step.
"""

from __future__ import annotations

import asyncio
import mimetypes
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from docrag.models.document import Document, DocumentStatus
from docrag.utils.files import unique_stored_name

if TYPE_CHECKING:
    from docrag.interfaces.document_store import IDocumentStore
    from docrag.models.document import FileLocation

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_MIME = "application/octet-stream"
_DEFAULT_MAX_BYTES = 50 * 1024 * 1024


def guess_mime_type(filename: str) -> str:
    """Guess a MIME type from *filename*, falling back to octet-stream."""
    mime, _ = mimetypes.guess_type(filename)
    if mime:
        return mime
    if filename.lower().endswith(".md"):
        return "text/markdown"
    return _DEFAULT_MIME


class DocumentService:
    """Stores uploaded bytes and manages document records.

    Parameters
    ----------
    document_store:
        Registry for document records.
    upload_dir:
        Directory receiving stored files; created on first write.
    max_upload_bytes:
        Uploads larger than this are rejected with ``ValueError``.
    """

    def __init__(
        self,
        document_store: IDocumentStore,
        upload_dir: str | Path = "data/uploads",
        max_upload_bytes: int = _DEFAULT_MAX_BYTES,
    ) -> None:
        self._document_store = document_store
        self._upload_dir = Path(upload_dir)
        self._max_upload_bytes = max_upload_bytes

    async def register_upload(
        self,
        filename: str,
        content: bytes,
        mime_type: str | None = None,
    ) -> Document:
        """Persist *content* and create a document record for it.

        Zero-byte files are accepted; ingestion records them as failed.
        """
        if not filename:
            raise ValueError("filename must not be empty")
        if len(content) > self._max_upload_bytes:
            raise ValueError(
                f"File exceeds upload limit of {self._max_upload_bytes} bytes"
            )

        stored_name = unique_stored_name(filename)
        destination = self._upload_dir / stored_name
        await asyncio.to_thread(self._write_file, destination, content)

        document = Document(
            document_id=uuid.uuid4().hex,
            original_name=filename,
            stored_name=stored_name,
            mime_type=mime_type or guess_mime_type(filename),
            size=len(content),
            storage_path=str(destination),
            status=DocumentStatus.UPLOADED,
            created_at=datetime.now(timezone.utc),
        )
        await self._document_store.create_document(document)
        logger.info(
            "document_registered",
            document_id=document.document_id,
            stored_name=stored_name,
            mime_type=document.mime_type,
        )
        return document

    async def register_file(self, path: str | Path, mime_type: str | None = None) -> Document:
        """Register a local file by copying it into the upload directory."""
        source = Path(path)
        if not source.is_file():
            raise FileNotFoundError(f"No such file: {source}")
        content = await asyncio.to_thread(source.read_bytes)
        return await self.register_upload(source.name, content, mime_type)

    async def get_document(self, document_id: str) -> Document | None:
        return await self._document_store.get_document(document_id)

    async def list_documents(self, limit: int = 100, offset: int = 0) -> list[Document]:
        return await self._document_store.list_documents(limit=limit, offset=offset)

    async def get_file_location(self, document_id: str) -> FileLocation:
        return await self._document_store.get_file_location(document_id)

    @staticmethod
    def _write_file(destination: Path, content: bytes) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(content)
