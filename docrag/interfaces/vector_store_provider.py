"""Abstract base class for vector-store service providers.

The vector store is the only component that persists chunk vectors and the
only one that runs similarity queries.  Writes are keyed by chunk id with
replace semantics, which is what makes re-ingestion idempotent.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from docrag.models.rag import ChunkRecord, VectorMatches


# Concrete implementation: ChromaDBProvider (docrag/providers/vector_store/)
class IVectorStoreProvider(ABC):
    """Contract for vector-store services used by the RAG pipeline.

    **Supported filter syntax** (the *where* dict in :meth:`query`):

    * ``{"document_id": "<id>"}`` — equality on a metadata field; only
      chunks of that document are considered.
    """

    @abstractmethod
    async def upsert(self, records: list[ChunkRecord]) -> int:
        """Insert or replace chunk records by ``chunk_id``.

        Returns
        -------
        int
            The number of records written.

        Raises
        ------
        docrag.utils.errors.VectorStoreError
            If the store operation fails.
        """

    @abstractmethod
    async def query(
        self,
        query_embedding: list[float],
        top_k: int,
        where: dict[str, Any] | None = None,
    ) -> VectorMatches:
        """Return up to *top_k* nearest chunks, best match first.

        Parameters
        ----------
        query_embedding:
            The embedded question.
        top_k:
            Maximum number of results to return.
        where:
            Optional metadata equality filter, applied before ranking.

        Raises
        ------
        docrag.utils.errors.VectorStoreError
            If the query fails.
        """

    @abstractmethod
    async def delete_stale_chunks(self, document_id: str, keep_count: int) -> int:
        """Delete the document's chunks whose ``chunk_index >= keep_count``.

        Called after a re-ingestion produced fewer chunks than before.
        Returns the number of chunks deleted.
        """

    @abstractmethod
    async def delete_document(self, document_id: str) -> int:
        """Delete every chunk belonging to *document_id*; return the count."""

    @abstractmethod
    async def count(self) -> int:
        """Return the total number of chunks in the store."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this vector store."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the store client was initialized."""
