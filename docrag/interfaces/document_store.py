"""Abstract base class for the document registry.

The registry owns document records and their status.  The ingestion
pipeline only needs :meth:`get_file_location` and :meth:`set_status`; the
remaining methods serve uploads, listing and downloads.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from docrag.models.document import Document, DocumentStatus, FileLocation


# Concrete implementation: SQLiteDocumentStore (docrag/providers/document_store/)
class IDocumentStore(ABC):
    """Contract for persisting uploaded-document records."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create the underlying schema if it does not exist."""

    @abstractmethod
    async def get_file_location(self, document_id: str) -> FileLocation:
        """Return where the document's bytes live.

        Raises
        ------
        docrag.utils.errors.DocumentNotFoundError
            If no record exists for *document_id*.
        docrag.utils.errors.FileMissingError
            If the record exists but its file is not on disk.
        """

    @abstractmethod
    async def set_status(self, document_id: str, status: DocumentStatus) -> None:
        """Record a new status.

        Raises
        ------
        docrag.utils.errors.DocumentNotFoundError
            If no record was updated.
        """

    @abstractmethod
    async def create_document(self, document: Document) -> Document:
        """Insert a new record and return it."""

    @abstractmethod
    async def get_document(self, document_id: str) -> Document | None:
        """Return the record for *document_id*, or ``None``."""

    @abstractmethod
    async def list_documents(self, limit: int = 100, offset: int = 0) -> list[Document]:
        """Return records newest first."""
