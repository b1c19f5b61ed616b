"""Tests for the context assembler."""

from __future__ import annotations

from resumerag.db.models import SearchHit
from resumerag.rag.assembler import format_context
from resumerag.services import build_services


def _hit(text: str, name: str, similarity: float = 0.9) -> SearchHit:
    return SearchHit(chunk_text=text, document_id=1, document_name=name, similarity=similarity)


def test_format_context_sections_in_rank_order():
    context = format_context([_hit("Built APIs", "resume.md"), _hit("Led sales", "notes.txt")])

    assert context == (
        "--- SECTION 1 FROM: resume.md ---\nBuilt APIs\n\n"
        "--- SECTION 2 FROM: notes.txt ---\nLed sales"
    )


def test_format_context_empty():
    assert format_context([]) == ""


def test_build_context_empty_database(services):
    assert services.assembler.build_context("python") == ""


def test_build_context_retrieves_most_similar(services):
    services.manager.create("python python python", name="dev.md")
    services.manager.create("sales quota sales", name="sales.md")

    context = services.assembler.build_context("python", max_chunks=1)

    assert context.startswith("--- SECTION 1 FROM: dev.md ---\n")
    assert "sales" not in context


def test_build_context_respects_scope(services):
    services.manager.create("python python", name="dev.md")
    other = services.manager.create("design work", name="design.md")

    context = services.assembler.build_context("python", max_chunks=5, scope=[other.document_id])

    assert "design.md" in context
    assert "dev.md" not in context


def test_retrieve_returns_hits(services):
    created = services.manager.create("python", name="dev.md")
    hits = services.assembler.retrieve("python", 3)
    assert hits[0].document_id == created.document_id


def test_build_context_ignores_documents_embedded_at_another_size(tmp_db, config, services):
    services.manager.create("python python", name="dev.md")
    wider = build_services(
        tmp_db, config, embed_fn=lambda texts: [[1.0, 0.5, 0.5, 0.5] for _ in texts]
    )
    wider.manager.create("python design", name="wide.md")

    context = services.assembler.build_context("python")

    assert "dev.md" in context
    assert "wide.md" not in context
