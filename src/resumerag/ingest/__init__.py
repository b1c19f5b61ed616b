"""resumerag ingest pipeline: fixed-window chunker and embedding gateway."""

from resumerag.ingest.chunker import TextChunker
from resumerag.ingest.embeddings import EmbeddingGateway

__all__ = [
    "EmbeddingGateway",
    "TextChunker",
]
