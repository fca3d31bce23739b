"""Unit tests for the ChromaDB vector store provider.

Runs against a real embedded PersistentClient under ``tmp_path``.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from docrag.models.rag import ChunkMetadata, ChunkRecord
from docrag.providers.vector_store.chromadb_provider import ChromaDBProvider
from docrag.utils.errors import VectorStoreError


def _record(document_id: str, index: int, embedding: list[float], text: str | None = None) -> ChunkRecord:
    return ChunkRecord(
        chunk_id=ChunkRecord.chunk_id_for(document_id, index),
        text=text or f"{document_id} chunk {index}",
        embedding=embedding,
        metadata=ChunkMetadata(
            document_id=document_id,
            chunk_index=index,
            source_name=f"{document_id}.txt",
            mime_type="text/plain",
        ),
    )


@pytest.fixture
def provider(tmp_path) -> ChromaDBProvider:
    return ChromaDBProvider(
        collection_name="test_collection",
        persist_directory=str(tmp_path / "chroma"),
    )


class TestUpsertAndQuery:
    @pytest.mark.asyncio
    async def test_query_returns_nearest_first(self, provider) -> None:
        await provider.upsert(
            [
                _record("doc-a", 0, [1.0, 0.0, 0.0]),
                _record("doc-a", 1, [0.0, 1.0, 0.0]),
                _record("doc-b", 0, [0.0, 0.0, 1.0]),
            ]
        )

        matches = await provider.query([0.9, 0.1, 0.0], top_k=2)

        assert matches.ids[0] == "doc-a:0"
        assert len(matches) == 2
        assert matches.metadatas[0]["document_id"] == "doc-a"
        assert matches.metadatas[0]["chunk_index"] == 0
        assert matches.metadatas[0]["source_name"] == "doc-a.txt"
        assert matches.texts[0] == "doc-a chunk 0"
        assert matches.distances is not None

    @pytest.mark.asyncio
    async def test_where_filter(self, provider) -> None:
        await provider.upsert(
            [_record("doc-a", 0, [1.0, 0.0]), _record("doc-b", 0, [0.9, 0.1])]
        )

        matches = await provider.query([1.0, 0.0], top_k=5, where={"document_id": "doc-b"})

        assert matches.ids == ["doc-b:0"]

    @pytest.mark.asyncio
    async def test_empty_collection_returns_no_matches(self, provider) -> None:
        matches = await provider.query([1.0, 0.0], top_k=3)
        assert len(matches) == 0

    @pytest.mark.asyncio
    async def test_upsert_replaces_existing_id(self, provider) -> None:
        await provider.upsert([_record("doc-a", 0, [1.0, 0.0], text="old")])
        await provider.upsert([_record("doc-a", 0, [1.0, 0.0], text="new")])

        assert await provider.count() == 1
        matches = await provider.query([1.0, 0.0], top_k=1)
        assert matches.texts == ["new"]

    @pytest.mark.asyncio
    async def test_upsert_empty_is_noop(self, provider) -> None:
        assert await provider.upsert([]) == 0


class TestDeletion:
    @pytest.mark.asyncio
    async def test_delete_stale_chunks(self, provider) -> None:
        await provider.upsert([_record("doc-a", i, [1.0, float(i)]) for i in range(5)])
        await provider.upsert([_record("doc-b", i, [0.0, 1.0]) for i in range(3)])

        removed = await provider.delete_stale_chunks("doc-a", keep_count=2)

        assert removed == 3
        assert await provider.count() == 5
        remaining = await provider.query([1.0, 0.0], top_k=10, where={"document_id": "doc-a"})
        assert sorted(remaining.ids) == ["doc-a:0", "doc-a:1"]

    @pytest.mark.asyncio
    async def test_delete_document(self, provider) -> None:
        await provider.upsert([_record("doc-a", i, [1.0, 0.0]) for i in range(2)])
        await provider.upsert([_record("doc-b", 0, [0.0, 1.0])])

        assert await provider.delete_document("doc-a") == 2
        assert await provider.count() == 1

    @pytest.mark.asyncio
    async def test_delete_nothing(self, provider) -> None:
        assert await provider.delete_stale_chunks("missing", keep_count=0) == 0


class TestProviderBehaviour:
    def test_provider_name(self, provider) -> None:
        assert provider.get_provider_name() == "chromadb"
        assert provider.is_available() is True

    def test_accepts_injected_client(self) -> None:
        mock_client = MagicMock()
        ChromaDBProvider(collection_name="injected", client=mock_client)
        assert mock_client.get_or_create_collection.call_args.kwargs["name"] == "injected"

    @pytest.mark.asyncio
    async def test_dimension_mismatch_rejected(self, tmp_path) -> None:
        first = ChromaDBProvider(collection_name="dims", persist_directory=str(tmp_path / "c"))
        await first.upsert([_record("doc-a", 0, [1.0, 0.0, 0.0])])

        with pytest.raises(VectorStoreError, match="dimension mismatch"):
            ChromaDBProvider(
                collection_name="dims",
                persist_directory=str(tmp_path / "c"),
                expected_dimension=5,
            )

    @pytest.mark.asyncio
    async def test_query_failure_wrapped(self) -> None:
        mock_client = MagicMock()
        mock_client.get_or_create_collection.return_value.query.side_effect = RuntimeError("boom")
        provider = ChromaDBProvider(client=mock_client)

        with pytest.raises(VectorStoreError):
            await provider.query([1.0], top_k=1)
