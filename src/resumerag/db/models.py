"""Domain models for the resumerag database layer."""

from __future__ import annotations

from dataclasses import dataclass, field

DOCUMENT_TYPES: tuple[str, ...] = ("resume", "other")


@dataclass
class Document:
    name: str
    content: str
    type: str = "other"
    tags: list[str] = field(default_factory=list)
    created_at: str | None = None
    id: int | None = None  # assigned on insert, immutable afterwards


@dataclass
class Chunk:
    document_id: int
    chunk_index: int
    chunk_text: str
    embedding: list[float] | None = None
    created_at: str | None = None
    id: int | None = None


@dataclass
class SearchHit:
    """One similarity search result, joined with its owning document's name."""

    chunk_text: str
    document_id: int
    document_name: str
    similarity: float
    chunk_id: int | None = None
    chunk_index: int | None = None
