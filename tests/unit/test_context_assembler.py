"""Unit tests for context packing and filtered retrieval."""

from __future__ import annotations

import pytest

from docrag.models.rag import ChunkMetadata, ChunkRecord, VectorMatches
from docrag.services.retrieval.context_assembler import (
    RetrievalAssembler,
    format_block,
    pack_context,
)


def _matches(count: int, text_len: int = 100, document_id: str = "doc-1") -> VectorMatches:
    return VectorMatches(
        ids=[f"{document_id}:{i}" for i in range(count)],
        texts=[chr(ord("a") + i) * text_len for i in range(count)],
        metadatas=[
            {"document_id": document_id, "chunk_index": i, "source_name": "guide.txt", "mime_type": "text/plain"}
            for i in range(count)
        ],
        distances=[0.1 * i for i in range(count)],
    )


class TestFormatBlock:
    def test_header_layout(self) -> None:
        block = format_block(1, "doc-1", 3, "guide.txt", "body")
        assert block == "[source 1] docId=doc-1 chunk=3 file=guide.txt\nbody\n\n"


class TestPackContext:
    def test_empty_matches_give_empty_context(self) -> None:
        assembled = pack_context(VectorMatches(), max_chars=12000)
        assert assembled.context == ""
        assert assembled.sources == []

    def test_all_blocks_fit(self) -> None:
        assembled = pack_context(_matches(3), max_chars=12000)

        assert len(assembled.sources) == 3
        assert assembled.context.startswith("[source 1] docId=doc-1 chunk=0 file=guide.txt\n")
        assert "[source 3]" in assembled.context
        assert not assembled.context.endswith("\n")

    def test_respects_budget(self) -> None:
        block_len = len(format_block(1, "doc-1", 0, "guide.txt", "a" * 100))
        assembled = pack_context(_matches(5), max_chars=block_len * 2 + 10)

        assert len(assembled.sources) == 2
        assert len(assembled.context) <= block_len * 2 + 10

    def test_stops_at_first_block_that_does_not_fit(self) -> None:
        matches = VectorMatches(
            ids=["d:0", "d:1", "d:2"],
            texts=["short", "x" * 500, "tiny"],
            metadatas=[
                {"document_id": "d", "chunk_index": i, "source_name": "f.txt"} for i in range(3)
            ],
        )
        assembled = pack_context(matches, max_chars=200)

        # "tiny" would fit but packing stops at the oversized second block.
        assert [s.chunk_index for s in assembled.sources] == [0]
        assert "tiny" not in assembled.context

    def test_first_block_larger_than_budget_gives_empty(self) -> None:
        assembled = pack_context(_matches(1, text_len=500), max_chars=100)
        assert assembled.context == ""
        assert assembled.sources == []

    @pytest.mark.parametrize("max_chars", [50, 300, 1000, 12000])
    def test_context_never_exceeds_budget(self, max_chars: int) -> None:
        assembled = pack_context(_matches(20, text_len=90), max_chars=max_chars)
        assert len(assembled.context) <= max_chars

    def test_sources_follow_match_order(self) -> None:
        assembled = pack_context(_matches(4), max_chars=12000)
        assert [s.chunk_index for s in assembled.sources] == [0, 1, 2, 3]
        assert all(s.source_name == "guide.txt" for s in assembled.sources)


class TestRetrievalAssembler:
    @pytest.mark.asyncio
    async def test_filter_for_unknown_document_returns_nothing(self, mock_vector_store) -> None:
        await mock_vector_store.upsert(
            [
                ChunkRecord(
                    chunk_id=f"doc-1:{i}",
                    text=f"chunk {i}",
                    embedding=[1.0, 0.0],
                    metadata=ChunkMetadata(
                        document_id="doc-1", chunk_index=i, source_name="a.txt", mime_type="text/plain"
                    ),
                )
                for i in range(3)
            ]
        )
        assembler = RetrievalAssembler(mock_vector_store)

        matches = await assembler.retrieve([1.0, 0.0], top_k=3, document_id_filter="missing")
        assert len(matches) == 0

        scoped = await assembler.retrieve([1.0, 0.0], top_k=3, document_id_filter="doc-1")
        assert len(scoped) == 3

    @pytest.mark.asyncio
    async def test_assemble_context_packs_matches(self, mock_vector_store) -> None:
        await mock_vector_store.upsert(
            [
                ChunkRecord(
                    chunk_id="doc-9:0",
                    text="The warranty lasts two years.",
                    embedding=[0.5, 0.5],
                    metadata=ChunkMetadata(
                        document_id="doc-9", chunk_index=0, source_name="warranty.md", mime_type="text/markdown"
                    ),
                )
            ]
        )
        assembled = await RetrievalAssembler(mock_vector_store).assemble_context(
            [0.5, 0.5], top_k=5, max_chars=12000
        )

        assert "docId=doc-9 chunk=0 file=warranty.md" in assembled.context
        assert assembled.sources[0].document_id == "doc-9"
