"""Embedding gateway: batched embeddings with count and sanity validation.

The gateway wraps an embedding capability ``embed(texts) -> vectors``. By
default that is ``litellm.embedding`` (via ``rag.llm_client.embed_batch``);
tests and alternative providers inject their own callable.

No retries happen here beyond what the capability does itself; every
failure is raised to the caller.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence

from resumerag.exceptions import (
    EmbeddingCountMismatch,
    EmbeddingError,
    EmbeddingGenerationFailed,
    InvalidEmbedding,
)
from resumerag.rag import llm_client

logger = logging.getLogger(__name__)

EmbedFn = Callable[[list[str]], Sequence[Sequence[float]]]

DEFAULT_MODEL = "openai/text-embedding-3-small"
DEFAULT_DIMENSIONS = 1536


class EmbeddingGateway:
    """Embed texts in one batched call and validate what comes back.

    Args:
        embed_fn: Capability returning one vector per input text, in order.
            Defaults to a litellm-backed call for *model*.
        model: LiteLLM embedding model string, used when *embed_fn* is None.
        dimensions: Expected vector length. A mismatch is logged as a warning
            but does not fail the call.
    """

    def __init__(
        self,
        embed_fn: EmbedFn | None = None,
        model: str = DEFAULT_MODEL,
        dimensions: int | None = DEFAULT_DIMENSIONS,
    ) -> None:
        self.model = model
        self.dimensions = dimensions
        self._embed_fn = embed_fn or (lambda texts: llm_client.embed_batch(model, texts))

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Return one validated vector per text, preserving input order.

        Raises:
            EmbeddingCountMismatch: The capability returned a different count.
            InvalidEmbedding: A vector is empty, all zeros, or holds a non-finite/non-numeric value.
            EmbeddingError: The capability itself raised.
        """
        if not texts:
            return []

        try:
            raw = self._embed_fn(list(texts))
        except EmbeddingError:
            raise
        except Exception as exc:
            raise EmbeddingError(f"Embedding request failed: {exc}") from exc

        raw = list(raw) if raw is not None else []
        if len(raw) != len(texts):
            raise EmbeddingCountMismatch(expected=len(texts), actual=len(raw))

        vectors = [_validate_vector(i, v) for i, v in enumerate(raw)]

        if self.dimensions:
            off = [i for i, v in enumerate(vectors) if len(v) != self.dimensions]
            if off:
                logger.warning(
                    "%d of %d embeddings have unexpected dimensionality "
                    "(expected %d, got %d at index %d); search quality may suffer",
                    len(off), len(vectors), self.dimensions, len(vectors[off[0]]), off[0],
                )
        return vectors

    def embed_one(self, text: str) -> list[float]:
        """Embed a single text.

        Raises:
            EmbeddingGenerationFailed: The capability returned no vector.
        """
        try:
            vectors = self.embed_batch([text])
        except EmbeddingCountMismatch as exc:
            if exc.actual == 0:
                raise EmbeddingGenerationFailed("Failed to generate embedding") from exc
            raise
        if not vectors:
            raise EmbeddingGenerationFailed("Failed to generate embedding")
        return vectors[0]


def _validate_vector(index: int, vector: object) -> list[float]:
    """Return *vector* as a list of floats or raise InvalidEmbedding."""
    if not isinstance(vector, (list, tuple)):
        raise InvalidEmbedding(index, f"expected a list of numbers, got {type(vector).__name__}")
    if len(vector) == 0:
        raise InvalidEmbedding(index, "empty vector")
    for value in vector:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidEmbedding(index, f"non-numeric value {value!r}")
        if not math.isfinite(value):
            raise InvalidEmbedding(index, f"non-finite value {value!r}")
    if not any(vector):
        raise InvalidEmbedding(index, "zero vector has no direction")
    return [float(v) for v in vector]
