"""Tests for the LiteLLM client wrapper."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from resumerag.rag.llm_client import (
    complete,
    complete_with_tools,
    embed_batch,
    provider_of,
    validate_api_key,
)


# ------------------------------------------------------------------
# provider / validate_api_key
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    ("model", "provider"),
    [
        ("openai/gpt-4o-mini", "openai"),
        ("ollama/llama3.2", "ollama"),
        ("Anthropic/claude-3-5-haiku", "anthropic"),
        ("gpt-4o", "openai"),
    ],
)
def test_provider_of(model, provider):
    assert provider_of(model) == provider


def test_validate_api_key_raises_if_missing(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(EnvironmentError, match="OPENAI_API_KEY"):
        validate_api_key("openai/gpt-4o-mini")


def test_validate_api_key_passes_if_set(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-key")
    validate_api_key("openai/gpt-4o-mini")


def test_validate_api_key_ollama_no_key_required(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    validate_api_key("ollama/llama3.2")


def test_validate_api_key_unknown_provider_uses_prefix(monkeypatch):
    monkeypatch.delenv("TOGETHER_API_KEY", raising=False)
    with pytest.raises(EnvironmentError, match="TOGETHER_API_KEY"):
        validate_api_key("together/mixtral")


# ------------------------------------------------------------------
# complete()
# ------------------------------------------------------------------


def test_complete_returns_content():
    mock_response = MagicMock()
    mock_response.choices[0].message.content = "Hello, world!"

    with patch("resumerag.rag.llm_client.litellm.completion", return_value=mock_response):
        result = complete("openai/gpt-4o-mini", [{"role": "user", "content": "Hi"}])

    assert result == "Hello, world!"


def test_complete_returns_empty_string_on_none_content():
    mock_response = MagicMock()
    mock_response.choices[0].message.content = None

    with patch("resumerag.rag.llm_client.litellm.completion", return_value=mock_response):
        result = complete("openai/gpt-4o-mini", [{"role": "user", "content": "Hi"}])

    assert result == ""


def test_complete_passes_params_to_litellm():
    mock_response = MagicMock()
    mock_response.choices[0].message.content = "{}"

    with patch(
        "resumerag.rag.llm_client.litellm.completion", return_value=mock_response
    ) as mock_c:
        complete(
            "openai/gpt-4o-mini",
            [{"role": "user", "content": "test"}],
            max_tokens=512,
            temperature=0.5,
            num_retries=2,
            response_format={"type": "json_object"},
        )

    call_kwargs = mock_c.call_args.kwargs
    assert call_kwargs["model"] == "openai/gpt-4o-mini"
    assert call_kwargs["max_tokens"] == 512
    assert call_kwargs["temperature"] == 0.5
    assert call_kwargs["num_retries"] == 2
    assert call_kwargs["response_format"] == {"type": "json_object"}


def test_complete_omits_response_format_by_default():
    mock_response = MagicMock()
    mock_response.choices[0].message.content = "ok"

    with patch(
        "resumerag.rag.llm_client.litellm.completion", return_value=mock_response
    ) as mock_c:
        complete("openai/gpt-4o-mini", [{"role": "user", "content": "test"}])

    assert "response_format" not in mock_c.call_args.kwargs


# ------------------------------------------------------------------
# complete_with_tools()
# ------------------------------------------------------------------


def test_complete_with_tools_returns_message():
    mock_response = MagicMock()
    message = mock_response.choices[0].message
    tools = [{"type": "function", "function": {"name": "getInformation"}}]

    with patch(
        "resumerag.rag.llm_client.litellm.completion", return_value=mock_response
    ) as mock_c:
        result = complete_with_tools("openai/gpt-4o-mini", [], tools)

    assert result is message
    assert mock_c.call_args.kwargs["tools"] == tools


# ------------------------------------------------------------------
# embed_batch()
# ------------------------------------------------------------------


def test_embed_batch_returns_vectors_in_order():
    mock_response = MagicMock()
    mock_response.data = [
        {"index": 0, "embedding": [0.1, 0.2]},
        {"index": 1, "embedding": [0.3, 0.4]},
    ]

    with patch(
        "resumerag.rag.llm_client.litellm.embedding", return_value=mock_response
    ) as mock_e:
        result = embed_batch("openai/text-embedding-3-small", ["a", "b"])

    assert result == [[0.1, 0.2], [0.3, 0.4]]
    assert mock_e.call_args.kwargs["input"] == ["a", "b"]
    assert mock_e.call_args.kwargs["num_retries"] == 3


def test_embed_batch_restores_input_order():
    mock_response = MagicMock()
    mock_response.data = [
        {"index": 2, "embedding": [3.0]},
        {"index": 0, "embedding": [1.0]},
        {"index": 1, "embedding": [2.0]},
    ]

    with patch("resumerag.rag.llm_client.litellm.embedding", return_value=mock_response):
        result = embed_batch("openai/text-embedding-3-small", ["a", "b", "c"])

    assert result == [[1.0], [2.0], [3.0]]
