# =============================================================================
# docrag/cli/ingest.py - Document management CLI
# =============================================================================
#
# Subcommands:
#
#   add    - Register a local file (optionally ingest it right away)
#   ingest - Ingest an already registered document by id
#   query  - Ask a question against the indexed documents
#   list   - List registered documents and their status
#   stats  - Show the number of chunks in the vector store
#
# Provider selection is shared with the API server (docrag/container.py):
#   - Embedding: OpenAI -> FastEmbed -> Nomic/Ollama
#   - LLM:       Anthropic -> OpenAI -> Ollama
#   - Vector store: ChromaDB (HTTP client if CHROMA_HOST is set)
#
# Usage examples:
#   python -m docrag.cli add ./handbook.pdf --ingest
#   python -m docrag.cli ingest 3f2a...
#   python -m docrag.cli query "What is the refund policy?" --top-k 3
#   python -m docrag.cli list
# =============================================================================

"""Standalone CLI for registering, ingesting and querying documents."""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any

from docrag.config.settings import Settings
from docrag.container import build_components
from docrag.utils.errors import DocRagError
from docrag.utils.logging import configure_logging


async def _prepare(app_settings: Settings) -> dict[str, Any]:
    components = build_components(app_settings)
    await components["document_store"].initialize()
    return components


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _print_ingestion(result: Any) -> int:
    if result.ok:
        print("\nIngestion complete:")
        print(f"  Document:        {result.document_id}")
        print(f"  Chunks:          {result.chunk_count}")
        print(f"  Embedding model: {result.embedding_model}")
        print(f"  Time:            {result.ingestion_time:.2f}s")
        return 0
    print("\nIngestion failed:", file=sys.stderr)
    print(f"  Document: {result.document_id}", file=sys.stderr)
    print(f"  Error:    {result.error_type}: {result.error}", file=sys.stderr)
    return 1


async def _handle_add(args: argparse.Namespace, app_settings: Settings) -> int:
    components = await _prepare(app_settings)
    document = await components["document_service"].register_file(
        args.file, mime_type=args.mime_type
    )
    print(f"Registered {document.original_name}")
    print(f"  Document ID: {document.document_id}")
    print(f"  MIME type:   {document.mime_type}")
    print(f"  Size:        {document.size} bytes")

    if not args.ingest:
        return 0
    result = await components["ingestion_service"].ingest(document.document_id)
    return _print_ingestion(result)


async def _handle_ingest(args: argparse.Namespace, app_settings: Settings) -> int:
    components = await _prepare(app_settings)
    print(f"Ingesting document: {args.document_id}")
    result = await components["ingestion_service"].ingest(args.document_id)
    return _print_ingestion(result)


async def _handle_query(args: argparse.Namespace, app_settings: Settings) -> int:
    components = await _prepare(app_settings)
    result = await components["query_service"].answer_query(
        args.question,
        top_k=args.top_k,
        document_id_filter=args.document,
    )
    print(result.answer)
    if result.sources:
        print("\nSources:")
        for position, source in enumerate(result.sources, start=1):
            print(
                f"  [{position}] {source.source_name} "
                f"(doc {source.document_id}, chunk {source.chunk_index})"
            )
    print(
        f"\nRetrieved {result.debug.matched} chunk(s); "
        f"embedding={result.debug.embedding_model}, chat={result.debug.chat_model}"
    )
    return 0


async def _handle_list(args: argparse.Namespace, app_settings: Settings) -> int:
    components = await _prepare(app_settings)
    documents = await components["document_service"].list_documents(limit=args.limit)
    if not documents:
        print("No documents registered.")
        return 0
    for document in documents:
        print(
            f"{document.document_id}  {document.status.value:<9} "
            f"{document.size:>10}  {document.original_name}"
        )
    return 0


async def _handle_stats(app_settings: Settings) -> int:
    components = await _prepare(app_settings)
    total = await components["vector_store"].count()
    documents = await components["document_service"].list_documents(limit=10_000)
    by_status: dict[str, int] = {}
    for document in documents:
        by_status[document.status.value] = by_status.get(document.status.value, 0) + 1

    print("Index Statistics")
    print("=" * 40)
    print(f"  Collection:   {app_settings.chroma_collection}")
    print(f"  Total chunks: {total}")
    print(f"  Documents:    {len(documents)}")
    for status, count in sorted(by_status.items()):
        print(f"    {status:<10} {count}")
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the document CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m docrag.cli",
        description="Register, ingest and query documents.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    add_parser = subparsers.add_parser("add", help="Register a local file")
    add_parser.add_argument("file", help="Path to a .pdf, .txt or .md file")
    add_parser.add_argument("--mime-type", dest="mime_type", default=None, help="Override MIME type")
    add_parser.add_argument("--ingest", action="store_true", help="Ingest right after registering")

    ingest_parser = subparsers.add_parser("ingest", help="Ingest a registered document")
    ingest_parser.add_argument("document_id", help="Document ID returned by 'add'")

    query_parser = subparsers.add_parser("query", help="Ask a question")
    query_parser.add_argument("question", help="Natural-language question")
    query_parser.add_argument("--top-k", dest="top_k", type=int, default=None, help="Chunks to retrieve")
    query_parser.add_argument("--document", default=None, help="Restrict retrieval to one document ID")

    list_parser = subparsers.add_parser("list", help="List registered documents")
    list_parser.add_argument("--limit", type=int, default=100, help="Maximum rows (default: 100)")

    subparsers.add_parser("stats", help="Show index statistics")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse the subcommand and dispatch to its handler."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    configure_logging(log_level=app_settings.log_level)

    handlers = {
        "add": lambda: _handle_add(args, app_settings),
        "ingest": lambda: _handle_ingest(args, app_settings),
        "query": lambda: _handle_query(args, app_settings),
        "list": lambda: _handle_list(args, app_settings),
        "stats": lambda: _handle_stats(app_settings),
    }

    try:
        exit_code = asyncio.run(handlers[args.command]())
    except (DocRagError, FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
