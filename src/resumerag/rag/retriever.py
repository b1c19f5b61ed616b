"""Vector index: cosine-similarity top-K over stored chunk embeddings.

Ranking happens in SQLite via sqlite-vec's ``vec_distance_cosine``:

  similarity = 1 - cosine_distance(stored, query)     (higher = closer)

Exact ties are ordered by ascending chunk id, so a fixed index state always
yields the same ranking. An optional document-id scope restricts which
chunks take part.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable

from resumerag.db.models import SearchHit
from resumerag.db.repository import Repository
from resumerag.exceptions import SearchError


class VectorIndex:
    """Read-only similarity search over a Repository's chunks.

    Args:
        repo: Open Repository instance.
    """

    def __init__(self, repo: Repository) -> None:
        self._repo = repo

    def search(
        self,
        query_vector: list[float],
        k: int,
        scope: Iterable[int] | None = None,
    ) -> list[SearchHit]:
        """Return up to *k* chunks most similar to *query_vector*, best first.

        Args:
            query_vector: Embedding of the query.
            k: Maximum number of results (fewer when fewer chunks are eligible).
            scope: Optional document ids; when non-empty only their chunks rank.

        Raises:
            ValueError: If *k* < 1 or *query_vector* is empty.
            SearchError: SQLite rejected the similarity query.
        """
        if k < 1:
            raise ValueError(f"k must be >= 1, got {k}")
        if not query_vector:
            raise ValueError("query_vector must not be empty")
        scope_ids = set(scope) if scope else None
        try:
            return self._repo.search_similar(query_vector, limit=k, document_ids=scope_ids)
        except sqlite3.Error as exc:
            raise SearchError(f"Similarity search failed: {exc}") from exc
