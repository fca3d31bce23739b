"""RAG pipeline data models.

Ingestion turns a document into :class:`ChunkRecord` objects and upserts
them into the vector store; querying turns a question into
:class:`VectorMatches`, packs them into an :class:`AssembledContext` and
returns a :class:`QueryResult`.  All models are frozen.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from docrag.models.document import DocumentStatus


# ---------------------------------------------------------------------------
# ChunkRecord - the unit written to the vector store.
# ---------------------------------------------------------------------------
class ChunkMetadata(BaseModel):
    """Metadata stored next to every chunk vector."""

    model_config = ConfigDict(frozen=True)

    document_id: str
    chunk_index: int = Field(ge=0)
    source_name: str = Field(description="Original filename of the parent document.")
    mime_type: str


class ChunkRecord(BaseModel):
    """A chunk of document text with its embedding, ready for upsert.

    ``chunk_id`` is derived purely from the document id and the chunk's
    position, so re-ingesting identical content overwrites the same entries.
    """

    model_config = ConfigDict(frozen=True)

    chunk_id: str = Field(description='Deterministic key "<document_id>:<chunk_index>".')
    text: str
    embedding: list[float]
    metadata: ChunkMetadata

    @staticmethod
    def chunk_id_for(document_id: str, chunk_index: int) -> str:
        return f"{document_id}:{chunk_index}"


# ---------------------------------------------------------------------------
# Retrieval
# ---------------------------------------------------------------------------
class VectorMatches(BaseModel):
    """Parallel result lists from a vector-store query, best match first."""

    model_config = ConfigDict(frozen=True)

    ids: list[str] = Field(default_factory=list)
    texts: list[str] = Field(default_factory=list)
    metadatas: list[dict[str, Any]] = Field(default_factory=list)
    distances: list[float] | None = None

    def __len__(self) -> int:
        return len(self.ids)


class SourceRef(BaseModel):
    """Identifies one chunk that was included in an assembled context."""

    model_config = ConfigDict(frozen=True)

    document_id: str
    source_name: str
    chunk_index: int


class AssembledContext(BaseModel):
    """Context text handed to the answer generator plus the sources it contains."""

    model_config = ConfigDict(frozen=True)

    context: str = ""
    sources: list[SourceRef] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------
class IngestionResult(BaseModel):
    """Outcome of one ingestion run.

    Successful runs carry ``chunk_count`` and ``embedding_model``; failed runs
    carry ``error`` (the message) and ``error_type`` (the exception class
    name).  Built through :meth:`succeeded` and :meth:`failed`.
    """

    model_config = ConfigDict(frozen=True)

    document_id: str
    status: DocumentStatus
    chunk_count: int = Field(default=0, ge=0)
    embedding_model: str | None = None
    error: str | None = None
    error_type: str | None = None
    ingestion_time: float = Field(
        default=0.0,
        ge=0.0,
        description="Wall-clock time in seconds for the ingestion run.",
    )

    @classmethod
    def succeeded(
        cls,
        document_id: str,
        chunk_count: int,
        embedding_model: str,
        ingestion_time: float = 0.0,
    ) -> IngestionResult:
        return cls(
            document_id=document_id,
            status=DocumentStatus.INGESTED,
            chunk_count=chunk_count,
            embedding_model=embedding_model,
            ingestion_time=ingestion_time,
        )

    @classmethod
    def failed(
        cls,
        document_id: str,
        exc: BaseException,
        ingestion_time: float = 0.0,
    ) -> IngestionResult:
        return cls(
            document_id=document_id,
            status=DocumentStatus.FAILED,
            error=str(exc),
            error_type=type(exc).__name__,
            ingestion_time=ingestion_time,
        )

    @property
    def ok(self) -> bool:
        return self.status == DocumentStatus.INGESTED


class QueryDebug(BaseModel):
    """Retrieval details returned with every answer."""

    model_config = ConfigDict(frozen=True)

    top_k: int
    embedding_model: str
    chat_model: str
    matched: int = Field(ge=0, description="Number of chunks the vector store returned.")
    documents: list[str] = Field(default_factory=list, description="Texts of the matched chunks.")


class QueryResult(BaseModel):
    """Answer to a question plus the sources it was grounded in."""

    model_config = ConfigDict(frozen=True)

    answer: str
    sources: list[SourceRef] = Field(default_factory=list)
    debug: QueryDebug
