"""Turns a stored file into plain text.

Dispatch happens in two steps.  :func:`classify_source` is a pure function
of the declared MIME type and the original filename and returns one of
three tagged variants; :meth:`TextExtractor.extract` then reads the file
with the matching decoder.  Unsupported types are rejected before any
bytes are read.

Supported classes:

* PDF — ``application/pdf`` or a ``.pdf`` name; decoded with PyMuPDF.
* Plain text — any ``text/*`` type or a ``.txt`` / ``.md`` name; read as UTF-8.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import fitz  # PyMuPDF -- the "fitz" import name is a PyMuPDF convention
import structlog

from docrag.utils.errors import ExtractionError, UnsupportedFileTypeError
from docrag.utils.files import file_extension

logger = structlog.get_logger(logger_name=__name__)

_PDF_MIME = "application/pdf"
_TEXT_EXTENSIONS = frozenset({".txt", ".md"})


@dataclass(frozen=True)
class PdfSource:
    """A file to be decoded page by page with PyMuPDF."""


@dataclass(frozen=True)
class PlainTextSource:
    """A file read verbatim as UTF-8."""


@dataclass(frozen=True)
class UnsupportedSource:
    """A file no extractor handles; carries what was observed."""

    mime_type: str
    extension: str


SourceKind = Union[PdfSource, PlainTextSource, UnsupportedSource]


def classify_source(original_name: str, mime_type: str) -> SourceKind:
    """Decide which extractor handles a file.

    The MIME type is checked first, then the extension of *original_name*;
    either one is enough to select a class.
    """
    mime = (mime_type or "").lower()
    ext = file_extension(original_name)
    if mime == _PDF_MIME or ext == ".pdf":
        return PdfSource()
    if mime.startswith("text/") or ext in _TEXT_EXTENSIONS:
        return PlainTextSource()
    return UnsupportedSource(mime_type=mime_type or "", extension=ext)


class TextExtractor:
    """Reads stored documents into text for chunking.

    File and PDF work is blocking, so it runs in a worker thread.
    """

    async def extract(self, file_path: str, original_name: str, mime_type: str) -> str:
        """Return the full text of the file at *file_path*.

        Raises
        ------
        UnsupportedFileTypeError
            If neither the MIME type nor the extension is supported.
        ExtractionError
            If the file cannot be decoded.
        """
        kind = classify_source(original_name, mime_type)
        if isinstance(kind, UnsupportedSource):
            raise UnsupportedFileTypeError(kind.mime_type, kind.extension)

        if isinstance(kind, PdfSource):
            text = await asyncio.to_thread(self._read_pdf, file_path)
        else:
            text = await asyncio.to_thread(self._read_text, file_path)

        logger.debug(
            "text_extracted",
            file=original_name,
            kind=type(kind).__name__,
            characters=len(text),
        )
        return text

    # ------------------------------------------------------------------
    # Sync decoders (executed via asyncio.to_thread)
    # ------------------------------------------------------------------

    @staticmethod
    def _read_pdf(file_path: str) -> str:
        try:
            doc = fitz.open(file_path)
        except Exception as exc:
            raise ExtractionError(
                message=f"Cannot open PDF: {exc}",
                provider_name="pymupdf",
            ) from exc

        try:
            pages = [page.get_text("text") for page in doc]
        except Exception as exc:
            raise ExtractionError(
                message=f"Cannot read PDF text: {exc}",
                provider_name="pymupdf",
            ) from exc
        finally:
            doc.close()

        return "\n".join(pages)

    @staticmethod
    def _read_text(file_path: str) -> str:
        try:
            return Path(file_path).read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ExtractionError(message=f"File is not valid UTF-8: {exc}") from exc
