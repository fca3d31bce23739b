"""Shared pytest fixtures for the docrag test suite."""

from __future__ import annotations

import hashlib
import os
import struct
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from docrag.config.settings import RagConfig, Settings
from docrag.interfaces.answer_generator import IAnswerGenerator
from docrag.interfaces.document_store import IDocumentStore
from docrag.interfaces.embedding_provider import IEmbeddingProvider
from docrag.interfaces.llm_provider import ILLMProvider
from docrag.interfaces.vector_store_provider import IVectorStoreProvider
from docrag.models.document import Document, DocumentStatus, FileLocation
from docrag.models.rag import ChunkRecord, VectorMatches
from docrag.utils.errors import DocumentNotFoundError, FileMissingError

# ---------------------------------------------------------------------------
# Deterministic embeddings
# ---------------------------------------------------------------------------

_EMBEDDING_DIM = 64


def _hash_to_vector(text: str, dim: int = _EMBEDDING_DIM) -> list[float]:
    """Generate a deterministic unit vector by hashing *text*."""
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    raw = digest
    while len(raw) < dim * 4:
        raw += hashlib.sha256(raw).digest()
    raw = raw[: dim * 4]
    values = [v if v == v and abs(v) < 1e30 else 0.0 for v in struct.unpack(f"<{dim}f", raw)]
    magnitude = max(sum(v * v for v in values) ** 0.5, 1e-10)
    return [v / magnitude for v in values]


class MockEmbeddingProvider(IEmbeddingProvider):
    """In-memory deterministic embedding provider that records every call."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    async def embed(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [_hash_to_vector(t) for t in texts]

    async def embed_single(self, text: str) -> list[float]:
        return (await self.embed([text]))[0]

    def get_dimension(self) -> int:
        return _EMBEDDING_DIM

    def get_model_name(self) -> str:
        return "mock-embedding-model"

    def get_provider_name(self) -> str:
        return "mock-embedding"

    def is_available(self) -> bool:
        return True


class MockVectorStore(IVectorStoreProvider):
    """In-memory vector store keyed by chunk id.

    Honours equality ``where`` filters and ranks by dot product.
    """

    def __init__(self) -> None:
        self.records: dict[str, ChunkRecord] = {}
        self.upsert_calls = 0

    async def upsert(self, records: list[ChunkRecord]) -> int:
        self.upsert_calls += 1
        for record in records:
            self.records[record.chunk_id] = record
        return len(records)

    async def query(
        self,
        query_embedding: list[float],
        top_k: int,
        where: dict[str, Any] | None = None,
    ) -> VectorMatches:
        candidates = [
            r for r in self.records.values()
            if not where or all(r.metadata.model_dump().get(k) == v for k, v in where.items())
        ]
        scored = sorted(
            candidates,
            key=lambda r: sum(a * b for a, b in zip(query_embedding, r.embedding)),
            reverse=True,
        )[:top_k]
        return VectorMatches(
            ids=[r.chunk_id for r in scored],
            texts=[r.text for r in scored],
            metadatas=[r.metadata.model_dump() for r in scored],
            distances=[0.0 for _ in scored],
        )

    async def delete_stale_chunks(self, document_id: str, keep_count: int) -> int:
        stale = [
            cid for cid, r in self.records.items()
            if r.metadata.document_id == document_id and r.metadata.chunk_index >= keep_count
        ]
        for cid in stale:
            del self.records[cid]
        return len(stale)

    async def delete_document(self, document_id: str) -> int:
        return await self.delete_stale_chunks(document_id, 0)

    async def count(self) -> int:
        return len(self.records)

    def ids_for(self, document_id: str) -> set[str]:
        return {cid for cid, r in self.records.items() if r.metadata.document_id == document_id}

    def get_provider_name(self) -> str:
        return "mock-vector-store"

    def is_available(self) -> bool:
        return True


class MockDocumentStore(IDocumentStore):
    """Dict-backed document registry."""

    def __init__(self) -> None:
        self.documents: dict[str, Document] = {}

    async def initialize(self) -> None:
        return None

    async def create_document(self, document: Document) -> Document:
        self.documents[document.document_id] = document
        return document

    async def get_document(self, document_id: str) -> Document | None:
        return self.documents.get(document_id)

    async def list_documents(self, limit: int = 100, offset: int = 0) -> list[Document]:
        ordered = sorted(self.documents.values(), key=lambda d: d.created_at, reverse=True)
        return ordered[offset : offset + limit]

    async def get_file_location(self, document_id: str) -> FileLocation:
        document = self.documents.get(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        if not os.path.exists(document.storage_path):
            raise FileMissingError()
        return FileLocation(
            path=document.storage_path,
            original_name=document.original_name,
            mime_type=document.mime_type,
        )

    async def set_status(self, document_id: str, status: DocumentStatus) -> None:
        document = self.documents.get(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        self.documents[document_id] = document.model_copy(update={"status": status})

    def status_of(self, document_id: str) -> DocumentStatus:
        return self.documents[document_id].status


class MockAnswerGenerator(IAnswerGenerator):
    """Echoes how much context it received."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    async def complete(self, question: str, context: str) -> str:
        self.calls.append((question, context))
        return f"answer to {question!r} from {len(context)} chars"

    def get_model_name(self) -> str:
        return "mock-chat-model"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_embedding_provider() -> MockEmbeddingProvider:
    return MockEmbeddingProvider()


@pytest.fixture
def mock_vector_store() -> MockVectorStore:
    return MockVectorStore()


@pytest.fixture
def mock_document_store() -> MockDocumentStore:
    return MockDocumentStore()


@pytest.fixture
def mock_answer_generator() -> MockAnswerGenerator:
    return MockAnswerGenerator()


@pytest.fixture
def mock_llm_provider() -> ILLMProvider:
    """MagicMock(spec=ILLMProvider) whose complete() returns a fixed answer."""
    mock = MagicMock(spec=ILLMProvider)
    mock.get_provider_name.return_value = "mock-llm"
    mock.get_model_name.return_value = "mock-chat-model"
    mock.is_available.return_value = True
    mock.complete = AsyncMock(return_value="The answer is 42.")
    return mock


@pytest.fixture
def rag_config() -> RagConfig:
    return RagConfig()


@pytest.fixture
def mock_settings(tmp_path: Path) -> Settings:
    """Settings with dummy keys and every path under *tmp_path*."""
    return Settings(
        _env_file=None,
        openai_api_key="sk-test-key",
        anthropic_api_key="",
        chroma_persist_dir=str(tmp_path / "chromadb"),
        document_db_path=str(tmp_path / "documents.db"),
        upload_dir=str(tmp_path / "uploads"),
        app_env="test",
    )


@pytest.fixture
def make_document(tmp_path: Path, mock_document_store: MockDocumentStore):
    """Write a file under *tmp_path* and register it in the mock store."""
    counter = {"n": 0}

    async def _make(
        name: str,
        content: bytes | str,
        mime_type: str = "text/plain",
        document_id: str | None = None,
    ) -> Document:
        counter["n"] += 1
        data = content.encode("utf-8") if isinstance(content, str) else content
        path = tmp_path / f"stored-{counter['n']}-{name}"
        path.write_bytes(data)
        document = Document(
            document_id=document_id or f"doc-{counter['n']}",
            original_name=name,
            stored_name=path.name,
            mime_type=mime_type,
            size=len(data),
            storage_path=str(path),
            status=DocumentStatus.UPLOADED,
            created_at=datetime.now(timezone.utc),
        )
        return await mock_document_store.create_document(document)

    return _make


@pytest.fixture
def sample_text() -> str:
    """A few paragraphs of plain text for ingestion tests."""
    return (
        "Returns are accepted within 30 days of purchase when the item is unused.\n\n"
        "Refunds are issued to the original payment method within five business days.\n\n"
        "Shipping costs are not refundable unless the item arrived damaged.\n\n"
        "Gift cards cannot be exchanged for cash and never expire.\n"
    ) * 12
