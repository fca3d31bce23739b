"""Text extraction from stored document files."""

from docrag.services.extraction.text_extractor import (
    PdfSource,
    PlainTextSource,
    TextExtractor,
    UnsupportedSource,
    classify_source,
)

__all__ = [
    "PdfSource",
    "PlainTextSource",
    "TextExtractor",
    "UnsupportedSource",
    "classify_source",
]
