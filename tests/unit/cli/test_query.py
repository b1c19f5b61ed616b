"""Tests for resumerag query and ask."""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from resumerag.cli.main import app
from resumerag.db.connection import Database
from resumerag.db.models import Chunk, Document
from resumerag.db.repository import Repository

runner = CliRunner()

_CHAT = "resumerag.rag.chat.llm_client.complete_with_tools"


@pytest.fixture
def populated(tmp_path, cli_project):
    for name, text in (("dev.md", "python python"), ("sales.md", "sales sales")):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        assert runner.invoke(app, ["add", str(path)]).exit_code == 0
    return cli_project


# ---------------------------------------------------------------------------
# query
# ---------------------------------------------------------------------------


def test_query_ranks_most_similar_first(populated):
    result = runner.invoke(app, ["query", "python", "-k", "1"])
    assert result.exit_code == 0, result.output
    assert "dev.md" in result.output
    assert "sales.md" not in result.output


def test_query_scoped_to_document(populated):
    result = runner.invoke(app, ["query", "python", "--document", "2"])
    assert result.exit_code == 0, result.output
    assert "sales.md" in result.output
    assert "dev.md" not in result.output


def test_query_empty_database(cli_project):
    runner.invoke(app, ["init", "."])
    result = runner.invoke(app, ["query", "python"])
    assert result.exit_code == 0
    assert "No matching content" in result.output


# ---------------------------------------------------------------------------
# ask
# ---------------------------------------------------------------------------


def _tool_call(name: str, arguments: dict):
    return SimpleNamespace(
        id="call_1",
        function=SimpleNamespace(name=name, arguments=json.dumps(arguments)),
    )


def test_ask_runs_tool_loop(populated):
    replies = [
        SimpleNamespace(content=None, tool_calls=[_tool_call("getInformation", {"query": "python"})]),
        SimpleNamespace(content="You know Python.", tool_calls=None),
    ]
    with patch(_CHAT, side_effect=replies) as mock_chat:
        result = runner.invoke(app, ["ask", "What languages do I know?"])

    assert result.exit_code == 0, result.output
    assert "You know Python." in result.output
    assert "getInformation" in result.output
    tool_message = mock_chat.call_args_list[1].kwargs["messages"][-1]
    assert "--- SECTION 1 FROM: dev.md ---" in tool_message["content"]


def test_ask_unknown_document(populated):
    result = runner.invoke(app, ["ask", "help", "--document", "99"])
    assert result.exit_code == 1
    assert "Document not found" in result.output


def test_ask_model_failure_exits_1(populated):
    with patch(_CHAT, side_effect=RuntimeError("rate limited")):
        result = runner.invoke(app, ["ask", "hi"])
    assert result.exit_code == 1
    assert "rate limited" in result.output


def test_query_skips_chunks_embedded_at_another_size(populated):
    with Database(populated) as conn:
        repo = Repository(conn)
        doc_id = repo.add_document(Document(name="wide.md", content="python"))
        repo.add_chunk(
            Chunk(document_id=doc_id, chunk_index=0, chunk_text="python", embedding=[1.0] * 4)
        )

    result = runner.invoke(app, ["query", "python"])

    assert result.exit_code == 0, result.output
    assert "dev.md" in result.output
    assert "wide.md" not in result.output


def test_query_zero_embedding_reported_not_raised(populated, monkeypatch):
    monkeypatch.setattr(
        "resumerag.rag.llm_client.embed_batch", lambda model, texts: [[0.0, 0.0, 0.0]]
    )

    result = runner.invoke(app, ["query", "python"])

    assert result.exit_code == 1
    assert "Embedding failed" in result.output
    assert isinstance(result.exception, SystemExit)
