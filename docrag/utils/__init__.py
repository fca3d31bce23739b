"""Utility modules for docrag.

- **errors** -- Exception hierarchy rooted at DocRagError; each stage raises
  its own subclass so callers can handle failures granularly.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **files** -- Upload filename sanitizing and unique stored-name generation.
"""

from docrag.utils.errors import (
    ConfigurationError,
    DocRagError,
    DocumentNotFoundError,
    EmbeddingProviderError,
    EmptyContentError,
    ExtractionError,
    FileMissingError,
    LLMError,
    UnsupportedFileTypeError,
    VectorStoreError,
)
from docrag.utils.files import file_extension, sanitize_filename, unique_stored_name
from docrag.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "DocRagError",
    "DocumentNotFoundError",
    "EmbeddingProviderError",
    "EmptyContentError",
    "ExtractionError",
    "FileMissingError",
    "LLMError",
    "UnsupportedFileTypeError",
    "VectorStoreError",
    "configure_logging",
    "file_extension",
    "get_logger",
    "sanitize_filename",
    "unique_stored_name",
]
