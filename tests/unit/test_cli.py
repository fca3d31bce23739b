"""Unit tests for the document CLI."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from docrag.cli.ingest import _build_parser, main
from docrag.models.document import DocumentStatus
from docrag.models.rag import IngestionResult, QueryDebug, QueryResult, SourceRef
from docrag.utils.errors import DocumentNotFoundError


class TestParser:
    def test_add_with_flags(self) -> None:
        args = _build_parser().parse_args(["add", "notes.md", "--mime-type", "text/markdown", "--ingest"])
        assert args.command == "add"
        assert args.file == "notes.md"
        assert args.mime_type == "text/markdown"
        assert args.ingest is True

    def test_query_options(self) -> None:
        args = _build_parser().parse_args(["query", "What?", "--top-k", "3", "--document", "abc"])
        assert args.question == "What?"
        assert args.top_k == 3
        assert args.document == "abc"

    def test_query_defaults(self) -> None:
        args = _build_parser().parse_args(["query", "What?"])
        assert args.top_k is None
        assert args.document is None

    def test_list_limit_default(self) -> None:
        assert _build_parser().parse_args(["list"]).limit == 100


def _components(tmp_path: Path) -> dict:
    ingestion = MagicMock()
    ingestion.ingest = AsyncMock(
        return_value=IngestionResult.succeeded("doc-1", chunk_count=4, embedding_model="mock-embedding-model")
    )
    query = MagicMock()
    query.answer_query = AsyncMock(
        return_value=QueryResult(
            answer="Thirty days.",
            sources=[SourceRef(document_id="doc-1", source_name="policy.txt", chunk_index=0)],
            debug=QueryDebug(top_k=5, embedding_model="e", chat_model="c", matched=1),
        )
    )
    store = MagicMock()
    store.initialize = AsyncMock()
    documents = MagicMock()
    documents.list_documents = AsyncMock(return_value=[])
    vector_store = MagicMock()
    vector_store.count = AsyncMock(return_value=12)
    return {
        "document_store": store,
        "document_service": documents,
        "ingestion_service": ingestion,
        "query_service": query,
        "vector_store": vector_store,
    }


class TestMain:
    def test_no_command_prints_help(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1

    def test_query_prints_answer_and_sources(self, tmp_path, mock_settings, capsys) -> None:
        components = _components(tmp_path)
        with patch("docrag.cli.ingest.Settings", return_value=mock_settings), patch(
            "docrag.cli.ingest.build_components", return_value=components
        ):
            with pytest.raises(SystemExit) as exc_info:
                main(["query", "How long?", "--top-k", "2"])

        assert exc_info.value.code == 0
        out = capsys.readouterr().out
        assert "Thirty days." in out
        assert "policy.txt" in out
        components["query_service"].answer_query.assert_awaited_once_with(
            "How long?", top_k=2, document_id_filter=None
        )

    def test_failed_ingestion_exits_nonzero(self, tmp_path, mock_settings, capsys) -> None:
        components = _components(tmp_path)
        components["ingestion_service"].ingest = AsyncMock(
            return_value=IngestionResult.failed("doc-1", ValueError("boom"))
        )
        with patch("docrag.cli.ingest.Settings", return_value=mock_settings), patch(
            "docrag.cli.ingest.build_components", return_value=components
        ):
            with pytest.raises(SystemExit) as exc_info:
                main(["ingest", "doc-1"])

        assert exc_info.value.code == 1
        assert "ValueError: boom" in capsys.readouterr().err

    def test_application_error_reported(self, tmp_path, mock_settings, capsys) -> None:
        components = _components(tmp_path)
        components["query_service"].answer_query = AsyncMock(side_effect=DocumentNotFoundError("x"))
        with patch("docrag.cli.ingest.Settings", return_value=mock_settings), patch(
            "docrag.cli.ingest.build_components", return_value=components
        ):
            with pytest.raises(SystemExit) as exc_info:
                main(["query", "anything"])

        assert exc_info.value.code == 1
        assert "Document not found: x" in capsys.readouterr().err

    def test_stats(self, tmp_path, mock_settings, capsys) -> None:
        components = _components(tmp_path)
        doc = MagicMock(status=DocumentStatus.INGESTED)
        components["document_service"].list_documents = AsyncMock(return_value=[doc, doc])
        with patch("docrag.cli.ingest.Settings", return_value=mock_settings), patch(
            "docrag.cli.ingest.build_components", return_value=components
        ):
            with pytest.raises(SystemExit):
                main(["stats"])

        out = capsys.readouterr().out
        assert "Total chunks: 12" in out
        assert "ingested   2" in out
