"""Resource lifecycle manager: keeps each document's chunks in step with its content.

Every create/update chunks and embeds the new content *before* touching the
database, then writes the document row, retires old chunks and inserts the new
ones inside a single transaction. A failure at any step leaves the stored
document exactly as it was; ``reindex`` regenerates chunks from stored
content if a database was left inconsistent by other means.

Callers must serialise lifecycle operations per document id: two concurrent
updates of the same document on separate connections are not coordinated here.
"""

from __future__ import annotations

import logging
import sqlite3
import time
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from resumerag.db.models import Chunk, Document
from resumerag.db.repository import Repository
from resumerag.diff.engine import apply_operations
from resumerag.diff.operations import DiffOperation
from resumerag.exceptions import (
    DocumentNotFoundError,
    EmptyContentError,
    ResourceError,
    ResumeRagError,
)
from resumerag.ingest.chunker import TextChunker
from resumerag.ingest.embeddings import EmbeddingGateway

logger = logging.getLogger(__name__)

# Failures the lifecycle boundary converts into ResourceError.
_WRAPPED_ERRORS = (ResumeRagError, sqlite3.Error, ValueError)


@dataclass
class ResourceResult:
    document_id: int
    chunks_processed: int

    def to_dict(self) -> dict:
        return {
            "success": True,
            "documentId": self.document_id,
            "chunksProcessed": self.chunks_processed,
        }


class ResourceManager:
    """Owns documents and their chunks.

    Args:
        repo: Open Repository instance.
        gateway: Embedding gateway used for chunk embeddings.
        chunker: Chunker for document content (1000/200 characters by default).
    """

    def __init__(
        self,
        repo: Repository,
        gateway: EmbeddingGateway,
        chunker: TextChunker | None = None,
    ) -> None:
        self._repo = repo
        self._gateway = gateway
        self._chunker = chunker or TextChunker()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create(
        self,
        content: str,
        name: str | None = None,
        doc_type: str = "other",
        tags: Sequence[str] | None = None,
    ) -> ResourceResult:
        """Store a new document and its embedded chunks.

        Raises:
            EmptyContentError: *content* is blank.
            ResourceError: Chunking, embedding or persistence failed; nothing
                was written.
        """
        document_name = name or f"Document {int(time.time() * 1000)}"
        try:
            texts, vectors = self._prepare(content, "create", None)
            with self._repo.transaction():
                document_id = self._repo.add_document(
                    Document(
                        name=document_name,
                        content=content,
                        type=doc_type,
                        tags=list(tags or []),
                    )
                )
                self._store_chunks(document_id, texts, vectors)
        except ResourceError:
            raise
        except _WRAPPED_ERRORS as exc:
            logger.error("Creating document %r failed: %s", document_name, exc)
            raise ResourceError(
                f"Failed to create resource: {exc}", operation="create"
            ) from exc

        logger.info("Created document %d (%d chunks)", document_id, len(texts))
        return ResourceResult(document_id=document_id, chunks_processed=len(texts))

    def update(
        self, document_id: int, content: str, name: str | None = None
    ) -> ResourceResult:
        """Replace a document's content and regenerate all of its chunks.

        No chunk derived from the previous content survives a successful call.

        Raises:
            DocumentNotFoundError: No document with *document_id*.
            EmptyContentError: *content* is blank.
            ResourceError: Embedding or persistence failed; the stored
                document and chunks are unchanged.
        """
        self.get(document_id)
        try:
            texts, vectors = self._prepare(content, "update", document_id)
            with self._repo.transaction():
                self._repo.update_document(document_id, content, name=name)
                self._repo.delete_chunks_by_document(document_id)
                self._store_chunks(document_id, texts, vectors)
        except ResourceError:
            raise
        except _WRAPPED_ERRORS as exc:
            logger.error("Updating document %d failed: %s", document_id, exc)
            raise ResourceError(
                f"Failed to update resource: {exc}",
                operation="update",
                document_id=document_id,
            ) from exc

        logger.info("Updated document %d (%d chunks)", document_id, len(texts))
        return ResourceResult(document_id=document_id, chunks_processed=len(texts))

    def delete(self, document_id: int) -> bool:
        """Delete a document and, by cascade, all of its chunks.

        Returns:
            True if the document existed and was deleted, False otherwise.
        """
        try:
            deleted = self._repo.delete_document(document_id)
        except sqlite3.Error as exc:
            logger.error("Deleting document %d failed: %s", document_id, exc)
            raise ResourceError(
                f"Failed to delete resource: {exc}",
                operation="delete",
                document_id=document_id,
            ) from exc
        if deleted:
            logger.info("Deleted document %d", document_id)
        return deleted

    def reindex(self, document_id: int) -> ResourceResult:
        """Re-chunk and re-embed a document's stored content.

        Repair path for a document whose chunks no longer match its content.
        """
        document = self.get(document_id)
        try:
            texts, vectors = self._prepare(document.content, "reindex", document_id)
            with self._repo.transaction():
                self._repo.delete_chunks_by_document(document_id)
                self._store_chunks(document_id, texts, vectors)
        except ResourceError:
            raise
        except _WRAPPED_ERRORS as exc:
            logger.error("Reindexing document %d failed: %s", document_id, exc)
            raise ResourceError(
                f"Failed to reindex resource: {exc}",
                operation="reindex",
                document_id=document_id,
            ) from exc

        logger.info("Reindexed document %d (%d chunks)", document_id, len(texts))
        return ResourceResult(document_id=document_id, chunks_processed=len(texts))

    def apply_edits(
        self,
        document_id: int,
        operations: Sequence[DiffOperation],
        verify: bool = False,
    ) -> ResourceResult:
        """Apply diff operations to the stored content and persist the result.

        Args:
            document_id: Target document.
            operations: Ordered diff operations (line indices refer to the
                currently stored content).
            verify: Reject operations whose oldText does not match.
        """
        document = self.get(document_id)
        try:
            new_content = apply_operations(document.content, operations, verify=verify)
        except ResumeRagError as exc:
            raise ResourceError(
                f"Failed to apply edits: {exc}", operation="edit", document_id=document_id
            ) from exc
        return self.update(document_id, new_content)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, document_id: int) -> Document:
        """Return a document or raise DocumentNotFoundError."""
        document = self._repo.get_document(document_id)
        if document is None:
            raise DocumentNotFoundError(
                f"Document {document_id} not found", document_id=document_id
            )
        return document

    def list_documents(self, doc_type: str | None = None) -> list[Document]:
        """Return documents newest first, optionally filtered by type."""
        return self._repo.list_documents(doc_type)

    # ------------------------------------------------------------------
    # Structured inputs
    # ------------------------------------------------------------------

    def add_experience(
        self,
        date: str,
        description: str,
        **details: str | Sequence[str] | None,
    ) -> ResourceResult:
        """Store a work/project experience as its own document.

        Args:
            date: When the experience happened (free text).
            description: What was done.
            **details: Optional fields: title, company, position, location,
                url (strings) and tags, skills, tools, technologies, projects,
                education, certifications, awards, publications (lists).
        """
        content = format_experience(date, description, **details)
        return self.create(content, name=f"Experience - {_timestamp()}")

    def add_job_posting(self, job_posting: str, link: str | None = None) -> ResourceResult:
        """Store a job posting as an ``other`` document tagged ``job``."""
        content = job_posting.strip()
        if link:
            content = f"{content}\n\nLink: {link}"
        return self.create(
            content,
            name=f"Job Posting - {_timestamp()}",
            doc_type="other",
            tags=["job"],
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _prepare(
        self, content: str, operation: str, document_id: int | None
    ) -> tuple[list[str], list[list[float]]]:
        """Chunk and embed *content* without writing anything."""
        if not content or not content.strip():
            raise EmptyContentError(
                "Content is empty; no chunks created",
                operation=operation,
                document_id=document_id,
            )
        texts = self._chunker.split(content)
        if not texts:
            raise EmptyContentError(
                "No chunks created from content",
                operation=operation,
                document_id=document_id,
            )
        vectors = self._gateway.embed_batch(texts)
        return texts, vectors

    def _store_chunks(
        self, document_id: int, texts: list[str], vectors: list[list[float]]
    ) -> None:
        self._repo.add_chunks(
            Chunk(document_id=document_id, chunk_index=i, chunk_text=t, embedding=v)
            for i, (t, v) in enumerate(zip(texts, vectors))
        )


# Ordered (field, label) pairs for experience documents.
_EXPERIENCE_FIELDS: tuple[tuple[str, str], ...] = (
    ("title", "Title"),
    ("company", "Company"),
    ("position", "Position"),
    ("location", "Location"),
    ("url", "URL"),
    ("tags", "Tags"),
    ("skills", "Skills"),
    ("tools", "Tools"),
    ("technologies", "Technologies"),
    ("projects", "Projects"),
    ("education", "Education"),
    ("certifications", "Certifications"),
    ("awards", "Awards"),
    ("publications", "Publications"),
)


def format_experience(
    date: str, description: str, **details: str | Sequence[str] | None
) -> str:
    """Render an experience as ``Label: value`` lines; empty fields are skipped.

    Raises:
        ValueError: An unknown detail field was given.
    """
    known = {f for f, _ in _EXPERIENCE_FIELDS}
    unknown = set(details) - known
    if unknown:
        raise ValueError(f"Unknown experience fields: {', '.join(sorted(unknown))}")

    parts = [f"Date: {date}", f"Description: {description}"]
    for key, label in _EXPERIENCE_FIELDS:
        value = details.get(key)
        if not value:
            continue
        if not isinstance(value, str):
            value = ", ".join(v for v in value if v)
            if not value:
                continue
        parts.append(f"{label}: {value}")
    return "\n".join(parts).strip()


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()
