"""Orchestrator for the document ingestion pipeline.

Pipeline stages: **locate -> extract -> chunk -> embed -> store**.

:meth:`IngestionService.ingest` is the only entry point.  It never raises
for ordinary failures: every exception inside the pipeline is turned into a
``failed`` document status and a structured :class:`IngestionResult`, so
callers (the HTTP route, the CLI) only have to inspect the result.

Chunk ids are ``<document_id>:<chunk_index>``.  Because chunking is
deterministic, re-ingesting the same file with the same parameters writes
to exactly the same ids and overwrites in place.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

from docrag.config.settings import RagConfig
from docrag.models.document import DocumentStatus
from docrag.models.rag import ChunkMetadata, ChunkRecord, IngestionResult
from docrag.services.extraction.text_extractor import TextExtractor
from docrag.services.ingestion.chunker import TextChunker
from docrag.utils.errors import EmbeddingProviderError, EmptyContentError

if TYPE_CHECKING:
    from docrag.interfaces.document_store import IDocumentStore
    from docrag.interfaces.embedding_provider import IEmbeddingProvider
    from docrag.interfaces.vector_store_provider import IVectorStoreProvider
    from docrag.models.document import FileLocation

logger = structlog.get_logger(logger_name=__name__)


class IngestionService:
    """Coordinates extraction, chunking, embedding and upsert for one document.

    Batches run strictly one after another: each embedding call finishes and
    its records are upserted before the next batch is embedded.

    Parameters
    ----------
    document_store:
        Resolves file locations and records the resulting status.
    embedding_provider:
        Generates embedding vectors for chunk text.
    vector_store:
        Stores embedded chunks for retrieval.
    config:
        Chunking, batching and pruning parameters.
    extractor:
        Optional override; defaults to :class:`TextExtractor`.
    """

    def __init__(
        self,
        document_store: IDocumentStore,
        embedding_provider: IEmbeddingProvider,
        vector_store: IVectorStoreProvider,
        config: RagConfig | None = None,
        extractor: TextExtractor | None = None,
    ) -> None:
        self._document_store = document_store
        self._embedding_provider = embedding_provider
        self._vector_store = vector_store
        self._config = config or RagConfig()
        self._extractor = extractor or TextExtractor()
        self._chunker = TextChunker(
            chunk_size=self._config.chunk_size,
            overlap=self._config.chunk_overlap,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def ingest(self, document_id: str) -> IngestionResult:
        """Index one registered document and record the outcome.

        Returns
        -------
        IngestionResult
            ``status="ingested"`` with the chunk count and embedding model on
            success; ``status="failed"`` with the error message and class
            name otherwise.
        """
        start = time.monotonic()
        try:
            chunk_count = await self._run(document_id)
        except Exception as exc:
            elapsed = round(time.monotonic() - start, 2)
            logger.error(
                "ingestion_failed",
                document_id=document_id,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            await self._mark_failed(document_id)
            return IngestionResult.failed(document_id, exc, ingestion_time=elapsed)

        elapsed = round(time.monotonic() - start, 2)
        result = IngestionResult.succeeded(
            document_id=document_id,
            chunk_count=chunk_count,
            embedding_model=self._embedding_provider.get_model_name(),
            ingestion_time=elapsed,
        )
        logger.info(
            "ingestion_complete",
            document_id=document_id,
            chunks=chunk_count,
            embedding_model=result.embedding_model,
            time_s=elapsed,
        )
        return result

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    async def _run(self, document_id: str) -> int:
        location = await self._document_store.get_file_location(document_id)
        text = await self._extractor.extract(
            location.path, location.original_name, location.mime_type
        )
        chunks = self._chunker.chunk(text)
        if not chunks:
            raise EmptyContentError(f"No text content to ingest for {location.original_name}")

        stored = await self._embed_and_store(document_id, location, chunks)

        if self._config.prune_stale_chunks:
            removed = await self._vector_store.delete_stale_chunks(document_id, stored)
            if removed:
                logger.info("stale_chunks_pruned", document_id=document_id, removed=removed)

        await self._document_store.set_status(document_id, DocumentStatus.INGESTED)
        return stored

    async def _embed_and_store(
        self,
        document_id: str,
        location: FileLocation,
        chunks: list[str],
    ) -> int:
        total_stored = 0
        batch = self._config.batch_size

        for i in range(0, len(chunks), batch):
            texts = chunks[i : i + batch]
            embeddings = await self._embedding_provider.embed(texts)
            if len(embeddings) != len(texts):
                raise EmbeddingProviderError(
                    message=(
                        f"Expected {len(texts)} embeddings, received {len(embeddings)}"
                    ),
                    provider_name=self._embedding_provider.get_provider_name(),
                )

            records = [
                ChunkRecord(
                    chunk_id=ChunkRecord.chunk_id_for(document_id, i + offset),
                    text=text,
                    embedding=embedding,
                    metadata=ChunkMetadata(
                        document_id=document_id,
                        chunk_index=i + offset,
                        source_name=location.original_name,
                        mime_type=location.mime_type,
                    ),
                )
                for offset, (text, embedding) in enumerate(zip(texts, embeddings))
            ]
            await self._vector_store.upsert(records)
            total_stored += len(records)
            logger.debug(
                "ingestion_batch_stored",
                document_id=document_id,
                batch_start=i,
                batch_size=len(records),
            )

        return total_stored

    async def _mark_failed(self, document_id: str) -> None:
        """Record the failed status; a failure here is logged, not raised."""
        try:
            await self._document_store.set_status(document_id, DocumentStatus.FAILED)
        except Exception as exc:
            logger.warning(
                "ingestion_status_update_failed",
                document_id=document_id,
                error=str(exc),
            )
