"""Document ingestion: chunking and the ingest orchestrator."""

from docrag.services.ingestion.chunker import TextChunker, normalize_text
from docrag.services.ingestion.ingestion_service import IngestionService

__all__ = ["IngestionService", "TextChunker", "normalize_text"]
