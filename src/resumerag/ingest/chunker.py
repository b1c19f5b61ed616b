"""Fixed-window text chunker with character overlap.

Windows are measured in characters and taken verbatim (no stripping), so
dropping the first ``overlap`` characters of every chunk after the first and
concatenating reconstructs the input exactly.
"""

from __future__ import annotations

from resumerag.exceptions import ChunkLimitError

DEFAULT_CHUNK_SIZE = 1000
DEFAULT_OVERLAP = 200
DEFAULT_MAX_CHUNKS = 10_000


class TextChunker:
    """Split text into overlapping fixed-size windows.

    Args:
        chunk_size: Window size in characters.
        overlap: Characters shared by consecutive windows. When
            ``overlap >= chunk_size`` windows are laid end to end instead.
        max_chunks: Safety cap; exceeding it raises ``ChunkLimitError``.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        overlap: int = DEFAULT_OVERLAP,
        max_chunks: int = DEFAULT_MAX_CHUNKS,
    ) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
        if overlap < 0:
            raise ValueError("overlap must be >= 0")
        if max_chunks < 1:
            raise ValueError("max_chunks must be >= 1")
        self.chunk_size = chunk_size
        self.overlap = overlap
        self.max_chunks = max_chunks

    def split(self, text: str) -> list[str]:
        """Return the ordered window strings for *text* (empty text → [])."""
        segments: list[str] = []
        start = 0
        length = len(text)

        while start < length:
            if len(segments) >= self.max_chunks:
                raise ChunkLimitError(
                    f"Too many chunks generated (limit {self.max_chunks}). "
                    "Text may be too large for the configured chunk size."
                )
            end = min(start + self.chunk_size, length)
            segments.append(text[start:end])
            if end >= length:
                break
            next_start = end - self.overlap
            # Forward progress is guaranteed even when overlap >= chunk_size.
            start = next_start if next_start > start else end

        return segments


def chunk_text(text: str) -> list[str]:
    """Split *text* with the default 1000/200 character windows."""
    return TextChunker().split(text)
