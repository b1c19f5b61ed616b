"""Repository pattern for all resumerag database operations.

Single interface for: documents, chunks (with embeddings) and cosine
similarity search. Writes commit immediately unless they run inside
``Repository.transaction()``, in which case the outermost block commits.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from resumerag.db.models import DOCUMENT_TYPES, Chunk, Document, SearchHit

logger = logging.getLogger(__name__)


class Repository:
    """Data access layer for documents and their embedded chunks.

    Wraps an open sqlite3.Connection. The connection is owned by the caller
    and must be closed after use.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with sqlite-vec loaded and schema
                initialised (see resumerag.db.schema.initialize).
        """
        self._conn = conn
        self._in_transaction = False

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Group several writes into one commit; roll everything back on error.

        Nested calls join the outer transaction.
        """
        if self._in_transaction:
            yield
            return
        self._in_transaction = True
        try:
            yield
        except BaseException:
            self._conn.rollback()
            raise
        else:
            self._conn.commit()
        finally:
            self._in_transaction = False

    def _commit(self) -> None:
        if not self._in_transaction:
            self._conn.commit()

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def add_document(self, document: Document) -> int:
        """Insert a document and return its new id.

        Args:
            document: Document to persist; ``id`` and ``created_at`` are ignored.

        Raises:
            ValueError: If ``document.type`` is not a known document type.
        """
        _check_type(document.type)
        cur = self._conn.execute(
            """
            INSERT INTO documents (name, content, type, tags)
            VALUES (?, ?, ?, ?)
            """,
            (document.name, document.content, document.type, _dump_tags(document.tags)),
        )
        self._commit()
        return cur.lastrowid

    def get_document(self, document_id: int) -> Document | None:
        """Return a document by id, or None if not found."""
        row = self._conn.execute(
            "SELECT id, name, content, type, tags, created_at FROM documents WHERE id = ?",
            (document_id,),
        ).fetchone()
        return _row_to_document(row) if row else None

    def list_documents(self, doc_type: str | None = None) -> list[Document]:
        """Return documents newest first, optionally restricted to *doc_type*."""
        sql = "SELECT id, name, content, type, tags, created_at FROM documents"
        params: tuple = ()
        if doc_type is not None:
            _check_type(doc_type)
            sql += " WHERE type = ?"
            params = (doc_type,)
        sql += " ORDER BY created_at DESC, id DESC"
        return [_row_to_document(r) for r in self._conn.execute(sql, params).fetchall()]

    def update_document(
        self, document_id: int, content: str, name: str | None = None
    ) -> bool:
        """Overwrite a document's content (and name, if given).

        Returns:
            True if a row was updated, False if the id does not exist.
        """
        if name:
            cur = self._conn.execute(
                "UPDATE documents SET content = ?, name = ? WHERE id = ?",
                (content, name, document_id),
            )
        else:
            cur = self._conn.execute(
                "UPDATE documents SET content = ? WHERE id = ?",
                (content, document_id),
            )
        self._commit()
        return cur.rowcount > 0

    def delete_document(self, document_id: int) -> bool:
        """Delete a document; its chunks go with it (ON DELETE CASCADE).

        Returns:
            True if a row was deleted, False if the id does not exist.
        """
        cur = self._conn.execute("DELETE FROM documents WHERE id = ?", (document_id,))
        self._commit()
        return cur.rowcount > 0

    # ------------------------------------------------------------------
    # Chunks
    # ------------------------------------------------------------------

    def add_chunk(self, chunk: Chunk) -> int:
        """Insert a chunk with its embedding. Returns the new chunk id."""
        if not chunk.embedding:
            raise ValueError(f"Chunk {chunk.chunk_index} has no embedding")
        cur = self._conn.execute(
            """
            INSERT INTO chunks (document_id, chunk_text, embedding, chunk_index)
            VALUES (?, ?, vec_f32(?), ?)
            """,
            (
                chunk.document_id,
                chunk.chunk_text,
                json.dumps(chunk.embedding),
                chunk.chunk_index,
            ),
        )
        self._commit()
        return cur.lastrowid

    def add_chunks(self, chunks: Iterable[Chunk]) -> list[int]:
        """Insert several chunks in one transaction. Returns ids in input order."""
        with self.transaction():
            ids = [self.add_chunk(c) for c in chunks]
        if ids:
            logger.info("Stored %d chunks", len(ids))
        return ids

    def list_chunks(self, document_id: int) -> list[Chunk]:
        """Return a document's chunks ordered by chunk_index, embeddings included."""
        rows = self._conn.execute(
            """
            SELECT id, document_id, chunk_text, vec_to_json(embedding) AS embedding,
                   chunk_index, created_at
            FROM chunks WHERE document_id = ? ORDER BY chunk_index
            """,
            (document_id,),
        ).fetchall()
        return [_row_to_chunk(r) for r in rows]

    def count_chunks(self, document_id: int | None = None) -> int:
        """Return the number of chunks for *document_id*, or overall if None."""
        if document_id is None:
            return self._conn.execute("SELECT COUNT(*) FROM chunks").fetchone()[0]
        return self._conn.execute(
            "SELECT COUNT(*) FROM chunks WHERE document_id = ?", (document_id,)
        ).fetchone()[0]

    def delete_chunks_by_document(self, document_id: int) -> int:
        """Delete every chunk of *document_id*. Returns the number removed."""
        cur = self._conn.execute("DELETE FROM chunks WHERE document_id = ?", (document_id,))
        self._commit()
        if cur.rowcount:
            logger.info("Deleted %d chunks for document %s", cur.rowcount, document_id)
        return cur.rowcount

    # ------------------------------------------------------------------
    # Similarity search
    # ------------------------------------------------------------------

    def search_similar(
        self,
        embedding: list[float],
        limit: int = 5,
        document_ids: Iterable[int] | None = None,
    ) -> list[SearchHit]:
        """Rank chunks by cosine similarity to *embedding*, best first.

        similarity = 1 - vec_distance_cosine(stored, query). Exact ties are
        broken by ascending chunk id so results are stable for a given index.
        Chunks whose stored vector length differs from *embedding* are not
        eligible.

        Args:
            embedding: Query vector.
            limit: Maximum number of hits.
            document_ids: Optional allowlist; empty or None means all documents.
        """
        scope = sorted(set(document_ids)) if document_ids else []
        sql = """
            SELECT c.id, c.document_id, c.chunk_text, c.chunk_index, d.name,
                   1 - vec_distance_cosine(c.embedding, vec_f32(?)) AS similarity
            FROM chunks c
            JOIN documents d ON d.id = c.document_id
            WHERE vec_length(c.embedding) = ?
        """
        params: list = [json.dumps(embedding), len(embedding)]
        if scope:
            placeholders = ",".join("?" * len(scope))
            sql += f" AND c.document_id IN ({placeholders})"
            params.extend(scope)
        sql += " ORDER BY similarity DESC, c.id ASC LIMIT ?"
        params.append(limit)

        return [
            SearchHit(
                chunk_text=r["chunk_text"],
                document_id=r["document_id"],
                document_name=r["name"],
                similarity=r["similarity"],
                chunk_id=r["id"],
                chunk_index=r["chunk_index"],
            )
            for r in self._conn.execute(sql, params).fetchall()
        ]


# ------------------------------------------------------------------
# Row → model helpers
# ------------------------------------------------------------------


def _check_type(doc_type: str) -> None:
    if doc_type not in DOCUMENT_TYPES:
        raise ValueError(
            f"Invalid document type {doc_type!r}. Must be one of: {', '.join(DOCUMENT_TYPES)}"
        )


def _dump_tags(tags: Iterable[str] | None) -> str:
    # Tags are a set; store them sorted so equal sets serialise identically.
    return json.dumps(sorted({t for t in (tags or []) if t}))


def _row_to_document(row: sqlite3.Row) -> Document:
    return Document(
        id=row["id"],
        name=row["name"],
        content=row["content"],
        type=row["type"],
        tags=json.loads(row["tags"]),
        created_at=row["created_at"],
    )


def _row_to_chunk(row: sqlite3.Row) -> Chunk:
    return Chunk(
        id=row["id"],
        document_id=row["document_id"],
        chunk_text=row["chunk_text"],
        embedding=json.loads(row["embedding"]),
        chunk_index=row["chunk_index"],
        created_at=row["created_at"],
    )
