"""docrag domain models — re-exports all public model classes.

    - document.py — uploaded document records and their lifecycle status
    - rag.py      — chunk records, retrieval results, ingestion/query results
"""

from __future__ import annotations

from docrag.models.document import Document, DocumentStatus, FileLocation
from docrag.models.rag import (
    AssembledContext,
    ChunkMetadata,
    ChunkRecord,
    IngestionResult,
    QueryDebug,
    QueryResult,
    SourceRef,
    VectorMatches,
)

__all__ = [
    "AssembledContext",
    "ChunkMetadata",
    "ChunkRecord",
    "Document",
    "DocumentStatus",
    "FileLocation",
    "IngestionResult",
    "QueryDebug",
    "QueryResult",
    "SourceRef",
    "VectorMatches",
]
