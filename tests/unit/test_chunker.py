"""Unit tests for the TextChunker — fixed-size overlapping character windows."""

from __future__ import annotations

import pytest

from docrag.services.ingestion.chunker import TextChunker, normalize_text


def _make_chunker(chunk_size: int = 1200, overlap: int = 200) -> TextChunker:
    return TextChunker(chunk_size=chunk_size, overlap=overlap)


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


class TestNormalizeText:
    def test_crlf_and_lone_cr_become_newlines(self) -> None:
        assert normalize_text("a\r\nb\rc") == "a\nb\nc"

    def test_trailing_blanks_before_newline_removed(self) -> None:
        assert normalize_text("line one  \t\nline two") == "line one\nline two"

    def test_outer_whitespace_trimmed(self) -> None:
        assert normalize_text("\n\n  body  \n\n") == "body"


# ---------------------------------------------------------------------------
# Windowing
# ---------------------------------------------------------------------------


class TestWindowing:
    def test_two_windows_for_2000_characters(self) -> None:
        chunks = _make_chunker().chunk("A" * 2000)

        assert len(chunks) == 2
        assert len(chunks[0]) == 1200
        # Second window starts 200 characters before the first one ended.
        assert len(chunks[1]) == 1000

    def test_short_text_is_single_chunk(self) -> None:
        chunks = _make_chunker().chunk("Hello world.")
        assert chunks == ["Hello world."]

    def test_empty_and_whitespace_inputs_return_nothing(self) -> None:
        chunker = _make_chunker()
        assert chunker.chunk("") == []
        assert chunker.chunk("   \n\t\r\n  ") == []

    def test_consecutive_windows_overlap(self) -> None:
        text = "".join(chr(ord("a") + i % 26) for i in range(500))
        chunks = _make_chunker(chunk_size=100, overlap=20).chunk(text)

        for previous, current in zip(chunks, chunks[1:]):
            assert previous[-20:] == current[:20]

    def test_windows_cover_every_character(self) -> None:
        text = "".join(chr(ord("a") + i % 26) for i in range(1037))
        chunks = _make_chunker(chunk_size=100, overlap=30).chunk(text)

        rebuilt = chunks[0] + "".join(c[30:] for c in chunks[1:])
        assert rebuilt == text

    def test_no_chunk_is_empty_or_oversized(self, sample_text: str) -> None:
        chunks = _make_chunker(chunk_size=150, overlap=25).chunk(sample_text)

        assert len(chunks) > 1
        for chunk in chunks:
            assert chunk.strip() == chunk
            assert 0 < len(chunk) <= 150

    def test_deterministic(self, sample_text: str) -> None:
        chunker = _make_chunker(chunk_size=300, overlap=50)
        assert chunker.chunk(sample_text) == chunker.chunk(sample_text)

    def test_crlf_input_matches_lf_input(self) -> None:
        lf = "first line\nsecond line\n" * 100
        crlf = lf.replace("\n", "\r\n")
        chunker = _make_chunker(chunk_size=120, overlap=10)
        assert chunker.chunk(crlf) == chunker.chunk(lf)


class TestDegenerateParameters:
    def test_overlap_equal_to_size_still_terminates(self) -> None:
        chunks = _make_chunker(chunk_size=10, overlap=10).chunk("x" * 15)
        # Each window advances by at least one character.
        assert len(chunks) == 6
        assert all(len(c) <= 10 for c in chunks)

    def test_overlap_larger_than_size_still_terminates(self) -> None:
        chunks = _make_chunker(chunk_size=5, overlap=50).chunk("y" * 12)
        assert len(chunks) == 8

    def test_zero_overlap_partitions_text(self) -> None:
        chunks = _make_chunker(chunk_size=4, overlap=0).chunk("abcdefghij")
        assert chunks == ["abcd", "efgh", "ij"]

    @pytest.mark.parametrize("size", [0, -1])
    def test_non_positive_size_rejected(self, size: int) -> None:
        with pytest.raises(ValueError):
            TextChunker(chunk_size=size, overlap=0)

    def test_negative_overlap_rejected(self) -> None:
        with pytest.raises(ValueError):
            TextChunker(chunk_size=10, overlap=-1)
