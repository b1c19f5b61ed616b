"""Context assembler: query → embedding → top-K chunks → grounding string.

The formatted string is the only thing handed to the language model as
grounding; the model never queries the database itself.

Format, one section per hit in ranked order, sections separated by a blank line:

  --- SECTION 1 FROM: <document name> ---
  <chunk text>
"""

from __future__ import annotations

from collections.abc import Iterable

from resumerag.db.models import SearchHit
from resumerag.ingest.embeddings import EmbeddingGateway
from resumerag.rag.retriever import VectorIndex

DEFAULT_MAX_CHUNKS = 5


class ContextAssembler:
    """Build grounding context for a free-text query.

    Args:
        gateway: Embedding gateway used to embed the query.
        index: Vector index searched for similar chunks.
    """

    def __init__(self, gateway: EmbeddingGateway, index: VectorIndex) -> None:
        self._gateway = gateway
        self._index = index

    def retrieve(
        self,
        query: str,
        max_chunks: int = DEFAULT_MAX_CHUNKS,
        scope: Iterable[int] | None = None,
    ) -> list[SearchHit]:
        """Embed *query* and return the ranked hits."""
        query_vector = self._gateway.embed_one(query)
        return self._index.search(query_vector, max_chunks, scope=scope)

    def build_context(
        self,
        query: str,
        max_chunks: int = DEFAULT_MAX_CHUNKS,
        scope: Iterable[int] | None = None,
    ) -> str:
        """Return the formatted context, or "" when nothing relevant is stored."""
        return format_context(self.retrieve(query, max_chunks, scope))


def format_context(hits: list[SearchHit]) -> str:
    """Render ranked hits as delimited sections with provenance headers."""
    return "\n\n".join(
        f"--- SECTION {rank} FROM: {hit.document_name} ---\n{hit.chunk_text}"
        for rank, hit in enumerate(hits, start=1)
    )
