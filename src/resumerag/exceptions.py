"""Exception hierarchy shared by the resumerag core.

The CLI catches ``ResumeRagError`` at its boundary and renders the message;
library code raises the most specific subclass and chains the cause.
"""

from __future__ import annotations


class ResumeRagError(Exception):
    """Base class for all resumerag failures."""


class ChunkLimitError(ResumeRagError):
    """Raised when chunking would exceed the configured safety cap."""


# ---------------------------------------------------------------------------
# Embeddings
# ---------------------------------------------------------------------------


class EmbeddingError(ResumeRagError):
    """Base class for embedding capability failures."""


class EmbeddingCountMismatch(EmbeddingError):
    """The capability returned a different number of vectors than requested."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Expected {expected} embeddings, got {actual}")
        self.expected = expected
        self.actual = actual


class InvalidEmbedding(EmbeddingError):
    """A returned vector is empty or contains non-finite / non-numeric values."""

    def __init__(self, index: int, reason: str) -> None:
        super().__init__(f"Invalid embedding at index {index}: {reason}")
        self.index = index
        self.reason = reason


class EmbeddingGenerationFailed(EmbeddingError):
    """A single-text embedding request produced no vector."""


# ---------------------------------------------------------------------------
# Vector search
# ---------------------------------------------------------------------------


class SearchError(ResumeRagError):
    """The similarity query failed inside SQLite."""


# ---------------------------------------------------------------------------
# Diff engine
# ---------------------------------------------------------------------------


class DiffError(ResumeRagError):
    """Base class for diff engine failures."""


class DiffOperationError(DiffError):
    """A wire-format diff operation is malformed."""


class DiffMismatchError(DiffError):
    """Verification mode: an operation's oldText does not match the target line."""

    def __init__(self, position: int, line: int | None, expected: str, actual: str | None) -> None:
        where = f"line {line}" if line is not None else "end of content"
        super().__init__(
            f"Operation {position} expected {expected!r} at {where}, found {actual!r}"
        )
        self.position = position
        self.line = line
        self.expected = expected
        self.actual = actual


# ---------------------------------------------------------------------------
# Resource lifecycle
# ---------------------------------------------------------------------------


class ResourceError(ResumeRagError):
    """A document lifecycle operation failed.

    Attributes:
        operation: Lifecycle operation name (create, update, delete, reindex, edit).
        document_id: Affected document id, if one was known.
    """

    def __init__(self, message: str, operation: str = "", document_id: int | None = None) -> None:
        super().__init__(message)
        self.operation = operation
        self.document_id = document_id


class EmptyContentError(ResourceError):
    """Content is blank and would produce no chunks."""


class DocumentNotFoundError(ResourceError):
    """No document exists with the requested id."""
