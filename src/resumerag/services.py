"""Explicit wiring of the core components around one database connection.

Nothing here is global: callers build a ``Services`` per connection and pass
it (or its parts) to whoever needs it. Tests substitute ``embed_fn``.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

from resumerag.config import ResumeRagConfig
from resumerag.db.repository import Repository
from resumerag.ingest.chunker import TextChunker
from resumerag.ingest.embeddings import EmbedFn, EmbeddingGateway
from resumerag.rag.assembler import ContextAssembler
from resumerag.rag.retriever import VectorIndex
from resumerag.resources.manager import ResourceManager


@dataclass
class Services:
    config: ResumeRagConfig
    repo: Repository
    gateway: EmbeddingGateway
    index: VectorIndex
    assembler: ContextAssembler
    manager: ResourceManager


def build_services(
    conn: sqlite3.Connection,
    config: ResumeRagConfig | None = None,
    embed_fn: EmbedFn | None = None,
) -> Services:
    """Assemble repository, gateway, index, assembler and manager for *conn*."""
    config = config or ResumeRagConfig()
    repo = Repository(conn)
    gateway = EmbeddingGateway(
        embed_fn=embed_fn,
        model=config.embedding.model,
        dimensions=config.embedding.dimensions,
    )
    chunker = TextChunker(
        chunk_size=config.chunking.chunk_size,
        overlap=config.chunking.overlap,
        max_chunks=config.chunking.max_chunks,
    )
    index = VectorIndex(repo)
    return Services(
        config=config,
        repo=repo,
        gateway=gateway,
        index=index,
        assembler=ContextAssembler(gateway, index),
        manager=ResourceManager(repo, gateway, chunker),
    )
