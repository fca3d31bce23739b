"""SQLite-backed document registry.

Persists uploaded-document records to a local SQLite database at
``data/documents.db``.  Uses ``aiosqlite`` for async I/O.
"""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

import aiosqlite
import structlog

from docrag.interfaces.document_store import IDocumentStore
from docrag.models.document import Document, DocumentStatus, FileLocation
from docrag.utils.errors import DocumentNotFoundError, FileMissingError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/documents.db")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS documents (
    document_id   TEXT    PRIMARY KEY,
    original_name TEXT    NOT NULL,
    stored_name   TEXT    NOT NULL,
    mime_type     TEXT    NOT NULL,
    size          INTEGER NOT NULL,
    storage_path  TEXT    NOT NULL,
    status        TEXT    NOT NULL,
    created_at    TEXT    NOT NULL
);
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_documents_created ON documents(created_at);",
]

_INSERT_SQL = """\
INSERT INTO documents
    (document_id, original_name, stored_name, mime_type, size, storage_path, status, created_at)
VALUES (?, ?, ?, ?, ?, ?, ?, ?);
"""

_SELECT_COLUMNS = (
    "SELECT document_id, original_name, stored_name, mime_type, size, "
    "storage_path, status, created_at FROM documents"
)


def _row_to_document(row: aiosqlite.Row) -> Document:
    data = dict(row)
    return Document(
        document_id=data["document_id"],
        original_name=data["original_name"],
        stored_name=data["stored_name"],
        mime_type=data["mime_type"],
        size=data["size"],
        storage_path=data["storage_path"],
        status=DocumentStatus(data["status"]),
        created_at=datetime.fromisoformat(data["created_at"]),
    )


class SQLiteDocumentStore(IDocumentStore):
    """SQLite-backed document registry."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the documents table and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(_CREATE_TABLE_SQL)
            for idx_sql in _CREATE_INDICES_SQL:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("document_db_initialized", path=str(self._db_path))

    async def create_document(self, document: Document) -> Document:
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(
                _INSERT_SQL,
                (
                    document.document_id,
                    document.original_name,
                    document.stored_name,
                    document.mime_type,
                    document.size,
                    document.storage_path,
                    document.status.value,
                    document.created_at.isoformat(),
                ),
            )
            await db.commit()
        logger.info(
            "document_created",
            document_id=document.document_id,
            original_name=document.original_name,
            size=document.size,
        )
        return document

    async def get_document(self, document_id: str) -> Document | None:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"{_SELECT_COLUMNS} WHERE document_id = ?",
                (document_id,),
            )
            row = await cursor.fetchone()
        return _row_to_document(row) if row else None

    async def list_documents(self, limit: int = 100, offset: int = 0) -> list[Document]:
        """Return records newest first."""
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"{_SELECT_COLUMNS} ORDER BY created_at DESC LIMIT ? OFFSET ?",
                (limit, offset),
            )
            rows = await cursor.fetchall()
        return [_row_to_document(r) for r in rows]

    async def get_file_location(self, document_id: str) -> FileLocation:
        document = await self.get_document(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id, provider_name=self.get_provider_name())
        if not os.access(document.storage_path, os.R_OK):
            raise FileMissingError(
                message=f"File missing on disk for document {document_id}",
                provider_name=self.get_provider_name(),
            )
        return FileLocation(
            path=document.storage_path,
            original_name=document.original_name,
            mime_type=document.mime_type,
        )

    async def set_status(self, document_id: str, status: DocumentStatus) -> None:
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute(
                "UPDATE documents SET status = ? WHERE document_id = ?",
                (status.value, document_id),
            )
            await db.commit()
            updated = cursor.rowcount

        if updated == 0:
            raise DocumentNotFoundError(document_id, provider_name=self.get_provider_name())
        logger.info("document_status_updated", document_id=document_id, status=status.value)

    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
        return "sqlite_documents"
