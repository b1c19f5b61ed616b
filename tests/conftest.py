"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from resumerag.config import ResumeRagConfig
from resumerag.db.connection import Database
from resumerag.db.repository import Repository
from resumerag.db.schema import initialize
from resumerag.services import build_services

# Keyword axes for the deterministic stub embedder.
_AXES = ("python", "sales", "design")


def keyword_vector(text: str) -> list[float]:
    """Three-dimensional embedding: keyword counts plus a small bias."""
    lowered = text.lower()
    return [lowered.count(word) + 0.1 for word in _AXES]


def stub_embed(texts: list[str]) -> list[list[float]]:
    return [keyword_vector(t) for t in texts]


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with schema initialized, closed after test."""
    db = Database(tmp_path / ".resumerag.db")
    conn = db.connect()
    initialize(conn)
    yield conn
    conn.close()


@pytest.fixture
def repo(tmp_db) -> Repository:
    return Repository(tmp_db)


@pytest.fixture
def config() -> ResumeRagConfig:
    cfg = ResumeRagConfig()
    cfg.embedding.dimensions = 3
    cfg.chunking.chunk_size = 40
    cfg.chunking.overlap = 10
    return cfg


@pytest.fixture
def services(tmp_db, config):
    """Core components wired around tmp_db with the stub embedder."""
    return build_services(tmp_db, config, embed_fn=stub_embed)


@pytest.fixture
def embed_fn():
    """The deterministic stub embedder."""
    return stub_embed


@pytest.fixture
def vectorize():
    """Expected embedding for a text under the stub embedder."""
    return keyword_vector


@pytest.fixture
def cli_project(tmp_path, monkeypatch):
    """Working directory for CLI runs: project config, stubbed embeddings, fake key.

    Returns the database path the CLI will use.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("resumerag.config._GLOBAL_CONFIG_PATH", tmp_path / "home" / "config.yaml")
    for var in ("RESUMERAG_GENERATION_MODEL", "RESUMERAG_EMBEDDING_MODEL", "RESUMERAG_DB"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(
        "resumerag.rag.llm_client.embed_batch", lambda model, texts: stub_embed(texts)
    )
    (tmp_path / "resumerag.yaml").write_text(
        "embedding:\n  dimensions: 3\nchunking:\n  chunk_size: 40\n  overlap: 10\n",
        encoding="utf-8",
    )
    return tmp_path / ".resumerag.db"
