"""Fixed-size character windows with overlap.

Text is normalized first (line endings unified, trailing blanks before a
newline dropped, outer whitespace trimmed), then cut into windows of
``chunk_size`` characters.  Each window after the first starts ``overlap``
characters before the previous one ended, so a passage straddling a
boundary appears whole in at least one chunk.

The output is a pure function of ``(text, chunk_size, overlap)``; the
deterministic chunk ids used for idempotent upserts depend on that.
"""

from __future__ import annotations

import re

import structlog

logger = structlog.get_logger(logger_name=__name__)

_TRAILING_BLANKS = re.compile(r"[ \t]+\n")


def normalize_text(text: str) -> str:
    """Unify line endings to ``\\n``, drop blanks before newlines, trim."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _TRAILING_BLANKS.sub("\n", text)
    return text.strip()


class TextChunker:
    """Splits text into overlapping fixed-size windows.

    Parameters
    ----------
    chunk_size:
        Maximum characters per chunk (default 1200).
    overlap:
        Characters shared by consecutive windows (default 200).  An overlap
        at or above ``chunk_size`` is tolerated: every window still starts
        at least one character after the previous one.
    """

    def __init__(self, chunk_size: int = 1200, overlap: int = 200) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if overlap < 0:
            raise ValueError("overlap must not be negative")
        self._chunk_size = chunk_size
        self._overlap = overlap

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def overlap(self) -> int:
        return self._overlap

    def chunk(self, text: str) -> list[str]:
        """Split *text* into an ordered list of non-empty chunks.

        Windows are stripped of surrounding whitespace and dropped when
        nothing remains.  Empty or whitespace-only input returns ``[]``.
        """
        normalized = normalize_text(text)
        if not normalized:
            return []

        length = len(normalized)
        chunks: list[str] = []
        start = 0
        while start < length:
            end = min(start + self._chunk_size, length)
            piece = normalized[start:end].strip()
            if piece:
                chunks.append(piece)
            if end == length:
                break
            start = max(end - self._overlap, start + 1)

        logger.debug(
            "chunking_complete",
            num_chunks=len(chunks),
            text_length=length,
            chunk_size=self._chunk_size,
            overlap=self._overlap,
        )
        return chunks
