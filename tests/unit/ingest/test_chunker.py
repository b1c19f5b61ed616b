"""Tests for the fixed-window text chunker."""

from __future__ import annotations

import pytest

from resumerag.exceptions import ChunkLimitError
from resumerag.ingest.chunker import TextChunker, chunk_text


def _reconstruct(chunks: list[str], overlap: int) -> str:
    return chunks[0] + "".join(c[overlap:] for c in chunks[1:])


def test_empty_text_yields_no_chunks():
    assert chunk_text("") == []


def test_short_text_is_single_chunk():
    assert chunk_text("Python developer") == ["Python developer"]


def test_text_exactly_one_window():
    text = "a" * 1000
    assert chunk_text(text) == [text]


def test_default_windows_overlap_by_200():
    text = "".join(chr(ord("a") + i % 26) for i in range(2500))
    chunks = chunk_text(text)

    assert [len(c) for c in chunks] == [1000, 1000, 900]
    for prev, nxt in zip(chunks, chunks[1:]):
        assert prev[-200:] == nxt[:200]


@pytest.mark.parametrize("length", [1, 999, 1000, 1001, 1801, 4321])
def test_chunks_reconstruct_text(length: int):
    text = "".join(str(i % 10) for i in range(length))
    assert _reconstruct(chunk_text(text), 200) == text


def test_whitespace_preserved_verbatim():
    chunker = TextChunker(chunk_size=5, overlap=2)
    text = "  a\n\n b  \t"
    assert _reconstruct(chunker.split(text), 2) == text


def test_overlap_not_smaller_than_window_advances_without_overlap():
    chunker = TextChunker(chunk_size=4, overlap=4)
    assert chunker.split("abcdefghij") == ["abcd", "efgh", "ij"]


def test_chunk_limit_raises():
    chunker = TextChunker(chunk_size=1, overlap=0, max_chunks=3)
    with pytest.raises(ChunkLimitError):
        chunker.split("abcd")


def test_chunk_limit_allows_exactly_max_chunks():
    chunker = TextChunker(chunk_size=1, overlap=0, max_chunks=3)
    assert chunker.split("abc") == ["a", "b", "c"]


@pytest.mark.parametrize(
    "kwargs",
    [{"chunk_size": 0}, {"overlap": -1}, {"max_chunks": 0}],
)
def test_invalid_settings_rejected(kwargs):
    with pytest.raises(ValueError):
        TextChunker(**kwargs)
