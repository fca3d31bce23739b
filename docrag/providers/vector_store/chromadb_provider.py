"""ChromaDB vector store provider adapter.

Connects to a Chroma server with ``chromadb.HttpClient`` when a host is
configured, otherwise keeps the collection on local disk with
``chromadb.PersistentClient``.  Uses cosine distance.  The client is
synchronous, so every call runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import os
from typing import Any

os.environ.setdefault("ANONYMIZED_TELEMETRY", "False")

import chromadb
import structlog

from docrag.interfaces.vector_store_provider import IVectorStoreProvider
from docrag.models.rag import ChunkRecord, VectorMatches
from docrag.utils.errors import VectorStoreError

logger = structlog.get_logger(logger_name=__name__)


class _NoopEmbeddingFunction(chromadb.EmbeddingFunction[list[str]]):
    """Keeps ChromaDB from loading its default embedding model.

    docrag always passes pre-computed embeddings, so this is never called.
    """

    def __call__(self, input: list[str]) -> list[list[float]]:
        raise NotImplementedError(
            "docrag uses pre-computed embeddings; "
            "ChromaDB's built-in embedding should never be called."
        )

    def name(self) -> str:
        """Return function name (required by ChromaDB's EmbeddingFunction protocol)."""
        return "noop_precomputed"


class ChromaDBProvider(IVectorStoreProvider):
    """Vector store provider backed by a ChromaDB collection.

    Parameters
    ----------
    collection_name:
        Name of the collection holding chunk vectors.
    host, port:
        Chroma server address; when *host* is empty an embedded persistent
        client is used instead.
    persist_directory:
        On-disk location for the embedded client.
    expected_dimension:
        When given, a non-empty collection whose stored vectors have a
        different length is rejected at startup.
    client:
        A pre-built client (tests pass an ``EphemeralClient``).
    """

    def __init__(
        self,
        collection_name: str = "default_kb",
        host: str = "",
        port: int = 8000,
        persist_directory: str = "./data/chromadb",
        expected_dimension: int | None = None,
        client: Any | None = None,
    ) -> None:
        self._collection_name = collection_name
        client_settings = chromadb.config.Settings(anonymized_telemetry=False)
        if client is not None:
            self._client = client
        elif host:
            self._client = chromadb.HttpClient(host=host, port=port, settings=client_settings)
        else:
            self._client = chromadb.PersistentClient(
                path=persist_directory, settings=client_settings
            )

        # Collections created by other tools may carry a different embedding
        # function; reopening those with ours raises ValueError.
        try:
            self._collection = self._client.get_or_create_collection(
                name=collection_name,
                metadata={"hnsw:space": "cosine"},
                embedding_function=_NoopEmbeddingFunction(),
            )
        except ValueError:
            self._collection = self._client.get_or_create_collection(
                name=collection_name,
                metadata={"hnsw:space": "cosine"},
            )

        if expected_dimension is not None:
            self._validate_embedding_dimension(expected_dimension)

    # ------------------------------------------------------------------
    # Startup validation
    # ------------------------------------------------------------------

    def _validate_embedding_dimension(self, expected_dim: int) -> None:
        """Fail fast when stored vectors don't match the embedding model."""
        try:
            if self._collection.count() == 0:
                return
            sample = self._collection.peek(limit=1)
            embeddings = sample.get("embeddings") if sample else None
            if embeddings is None or len(embeddings) == 0:
                return
            stored_dim = len(embeddings[0])
        except Exception as exc:
            logger.warning("embedding_dimension_check_skipped", error=str(exc))
            return

        if stored_dim != expected_dim:
            logger.error(
                "embedding_dimension_mismatch",
                stored_dim=stored_dim,
                expected_dim=expected_dim,
            )
            raise VectorStoreError(
                message=(
                    f"Embedding dimension mismatch: collection '{self._collection_name}' "
                    f"holds {stored_dim}-dim vectors but the embedding model produces "
                    f"{expected_dim}-dim vectors."
                ),
                provider_name=self.get_provider_name(),
            )

    # ------------------------------------------------------------------
    # IVectorStoreProvider implementation
    # ------------------------------------------------------------------

    async def upsert(self, records: list[ChunkRecord]) -> int:
        """Insert or replace *records* keyed by ``chunk_id``."""
        if not records:
            return 0
        try:
            await asyncio.to_thread(
                self._collection.upsert,
                ids=[r.chunk_id for r in records],
                embeddings=[r.embedding for r in records],
                documents=[r.text for r in records],
                metadatas=[r.metadata.model_dump() for r in records],
            )
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB upsert failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.debug("chromadb_upsert", count=len(records))
        return len(records)

    async def query(
        self,
        query_embedding: list[float],
        top_k: int,
        where: dict[str, Any] | None = None,
    ) -> VectorMatches:
        kwargs: dict[str, Any] = {
            "query_embeddings": [query_embedding],
            "n_results": top_k,
            "include": ["documents", "metadatas", "distances"],
        }
        if where:
            kwargs["where"] = where

        try:
            results = await asyncio.to_thread(self._collection.query, **kwargs)
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB query failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        ids = results["ids"][0] if results.get("ids") else []
        if not ids:
            return VectorMatches()

        documents = results["documents"][0] if results.get("documents") else [""] * len(ids)
        metadatas = results["metadatas"][0] if results.get("metadatas") else [{}] * len(ids)
        distances = results["distances"][0] if results.get("distances") else None

        return VectorMatches(
            ids=list(ids),
            texts=[d or "" for d in documents],
            metadatas=[dict(m or {}) for m in metadatas],
            distances=list(distances) if distances is not None else None,
        )

    async def delete_stale_chunks(self, document_id: str, keep_count: int) -> int:
        where = {
            "$and": [
                {"document_id": document_id},
                {"chunk_index": {"$gte": keep_count}},
            ]
        }
        return await self._delete_where(where)

    async def delete_document(self, document_id: str) -> int:
        return await self._delete_where({"document_id": document_id})

    async def count(self) -> int:
        try:
            return await asyncio.to_thread(self._collection.count)
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB count failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    def get_provider_name(self) -> str:
        return "chromadb"

    def is_available(self) -> bool:
        return self._collection is not None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _delete_where(self, where: dict[str, Any]) -> int:
        try:
            existing = await asyncio.to_thread(self._collection.get, where=where, include=[])
            ids = existing["ids"] if existing and existing["ids"] else []
            if ids:
                await asyncio.to_thread(self._collection.delete, ids=ids)
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB delete failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.info("chromadb_delete", where=where, deleted_count=len(ids))
        return len(ids)
