"""Tests for the vector index (cosine top-K with optional scope)."""

from __future__ import annotations

import sqlite3
from unittest.mock import patch

import pytest

from resumerag.db.models import Chunk, Document
from resumerag.exceptions import SearchError
from resumerag.rag.retriever import VectorIndex


def _add(repo, name: str, vectors: dict[str, list[float]]) -> int:
    doc_id = repo.add_document(Document(name=name, content=" ".join(vectors)))
    repo.add_chunks(
        Chunk(document_id=doc_id, chunk_index=i, chunk_text=text, embedding=vec)
        for i, (text, vec) in enumerate(vectors.items())
    )
    return doc_id


@pytest.fixture
def index(repo):
    return VectorIndex(repo)


def test_search_ranks_by_descending_similarity(repo, index):
    _add(
        repo,
        "resume.md",
        {
            "near": [1.0, 0.2, 0.0],
            "exact": [1.0, 0.0, 0.0],
            "far": [0.0, 0.0, 1.0],
        },
    )

    hits = index.search([1.0, 0.0, 0.0], k=3)

    assert [h.chunk_text for h in hits] == ["exact", "near", "far"]
    assert hits[0].similarity == pytest.approx(1.0, abs=1e-6)
    assert hits[0].similarity > hits[1].similarity > hits[2].similarity


def test_search_returns_fewer_than_k(repo, index):
    _add(repo, "resume.md", {"only": [1.0, 0.0, 0.0]})
    assert len(index.search([1.0, 0.0, 0.0], k=10)) == 1


def test_search_empty_index_returns_empty(index):
    assert index.search([1.0, 0.0, 0.0], k=5) == []


def test_scope_excludes_other_documents(repo, index):
    a = _add(repo, "a.md", {"a-text": [0.0, 1.0, 0.0]})
    _add(repo, "b.md", {"b-text": [1.0, 0.0, 0.0]})

    hits = index.search([1.0, 0.0, 0.0], k=5, scope={a})

    assert [h.document_id for h in hits] == [a]
    assert hits[0].document_name == "a.md"


def test_empty_scope_means_all_documents(repo, index):
    _add(repo, "a.md", {"a-text": [0.0, 1.0, 0.0]})
    _add(repo, "b.md", {"b-text": [1.0, 0.0, 0.0]})
    assert len(index.search([1.0, 0.0, 0.0], k=5, scope=set())) == 2


def test_ranking_is_deterministic_for_ties(repo, index):
    _add(repo, "a.md", {f"tie {i}": [0.5, 0.5, 0.0] for i in range(4)})

    first = [h.chunk_id for h in index.search([1.0, 0.0, 0.0], k=4)]
    second = [h.chunk_id for h in index.search([1.0, 0.0, 0.0], k=4)]

    assert first == second == sorted(first)


def test_invalid_arguments(index):
    with pytest.raises(ValueError):
        index.search([1.0, 0.0, 0.0], k=0)
    with pytest.raises(ValueError):
        index.search([], k=3)


def test_chunks_of_other_dimensionality_are_not_eligible(repo, index):
    three = _add(repo, "three.md", {"three-dim": [1.0, 0.0, 0.0]})
    _add(repo, "four.md", {"four-dim": [1.0, 0.0, 0.0, 0.0]})

    hits = index.search([1.0, 0.0, 0.0], k=5)

    assert [h.document_id for h in hits] == [three]
    assert [h.chunk_text for h in index.search([0.0, 1.0, 0.0, 0.0], k=5)] == ["four-dim"]


def test_search_with_no_vector_of_query_length_returns_empty(repo, index):
    _add(repo, "four.md", {"four-dim": [1.0, 0.0, 0.0, 0.0]})
    assert index.search([1.0, 0.0], k=5) == []


def test_sqlite_failure_raised_as_search_error(repo, index):
    with patch.object(
        repo, "search_similar", side_effect=sqlite3.OperationalError("no such function")
    ):
        with pytest.raises(SearchError, match="no such function") as exc_info:
            index.search([1.0, 0.0, 0.0], k=3)
    assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)
