"""Tests for the tool-calling question loop."""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import patch

from resumerag.config import GenerationCfg
from resumerag.rag.chat import SYSTEM_PROMPT, ask, build_system_prompt
from resumerag.tools.base import BaseTool


class _EchoTool(BaseTool):
    name = "getInformation"
    description = "echo"
    parameters = {"type": "object", "properties": {"query": {"type": "string"}}}

    def __init__(self):
        self.calls = []

    def execute(self, query: str) -> str:
        self.calls.append(query)
        return f"--- SECTION 1 FROM: resume.md ---\n{query} at Acme"


def _message(content=None, tool_calls=None):
    return SimpleNamespace(content=content, tool_calls=tool_calls)


def _call(name, arguments, call_id="call_1"):
    return SimpleNamespace(
        id=call_id,
        function=SimpleNamespace(name=name, arguments=arguments),
    )


_PATCH = "resumerag.rag.chat.llm_client.complete_with_tools"


def test_direct_answer_without_tools():
    with patch(_PATCH, return_value=_message("Hello")) as mock_c:
        result = ask("Hi", [_EchoTool()], GenerationCfg())

    assert result.answer == "Hello"
    assert result.tool_calls == []
    messages = mock_c.call_args.kwargs["messages"]
    assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert messages[1] == {"role": "user", "content": "Hi"}


def test_tool_call_result_fed_back():
    tool = _EchoTool()
    replies = [
        _message(tool_calls=[_call("getInformation", json.dumps({"query": "python"}))]),
        _message("You used Python at Acme."),
    ]
    with patch(_PATCH, side_effect=replies) as mock_c:
        result = ask("Where did I use Python?", [tool], GenerationCfg())

    assert result.answer == "You used Python at Acme."
    assert tool.calls == ["python"]
    assert result.tool_calls[0].name == "getInformation"
    assert result.tool_calls[0].arguments == {"query": "python"}

    second_turn = mock_c.call_args_list[1].kwargs["messages"]
    assert second_turn[-2]["role"] == "assistant"
    assert second_turn[-2]["tool_calls"][0]["function"]["name"] == "getInformation"
    assert second_turn[-1]["role"] == "tool"
    assert second_turn[-1]["tool_call_id"] == "call_1"
    assert "python at Acme" in second_turn[-1]["content"]


def test_tool_schemas_passed_to_model():
    with patch(_PATCH, return_value=_message("ok")) as mock_c:
        ask("Hi", [_EchoTool()], GenerationCfg(model="ollama/llama3.2", temperature=0.2))

    kwargs = mock_c.call_args.kwargs
    assert kwargs["model"] == "ollama/llama3.2"
    assert kwargs["temperature"] == 0.2
    assert kwargs["tools"][0]["function"]["name"] == "getInformation"


def test_unknown_tool_and_bad_arguments_reported_to_model():
    replies = [
        _message(
            tool_calls=[
                _call("noSuchTool", "{}", "call_1"),
                _call("getInformation", "{not json", "call_2"),
                _call("getInformation", json.dumps({"wrong": 1}), "call_3"),
            ]
        ),
        _message("done"),
    ]
    with patch(_PATCH, side_effect=replies):
        result = ask("Hi", [_EchoTool()], GenerationCfg())

    errors = [r.result for r in result.tool_calls]
    assert "Unknown tool" in errors[0]["error"]
    assert "Invalid tool arguments" in errors[1]["error"]
    assert "error" in errors[2]


def test_stops_after_max_steps():
    looping = _message("thinking", tool_calls=[_call("getInformation", '{"query": "x"}')])
    with patch(_PATCH, return_value=looping) as mock_c:
        result = ask("Hi", [_EchoTool()], GenerationCfg(max_steps=2))

    assert mock_c.call_count == 2
    assert len(result.tool_calls) == 2
    assert result.answer == "thinking"


def test_system_prompt_mentions_edited_document():
    assert build_system_prompt() == SYSTEM_PROMPT
    assert "document ID 12" in build_system_prompt(12)
