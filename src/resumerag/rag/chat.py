"""Tool-calling question loop.

The model receives the system prompt, the user question and the tool
definitions. Each turn it either answers (loop ends) or requests tool calls,
which are executed and fed back as ``tool`` messages. Grounding reaches the
model only through tool results such as getInformation's context string.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from resumerag.config import GenerationCfg
from resumerag.exceptions import ResumeRagError
from resumerag.rag import llm_client
from resumerag.tools.base import BaseTool

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are a helpful assistant answering questions about a resume/CV and helping users \
improve their resumes.
You MUST base your answers ONLY on the provided resume context.

Rules:
- Use context from the database using the getInformation tool
- If the context doesn't contain information to answer the question, say \
"I don't have information about [specific thing]"
- Be accurate and specific - cite details from the context when possible
- If asked about something not in the context, clearly state it's not mentioned
- Do not make up or infer information that isn't explicitly in the context
- When users ask for resume suggestions, advice on how to add experience, or how to \
improve their resume, use the provideResumeSuggestions tool"""


@dataclass
class ToolCallRecord:
    name: str
    arguments: dict[str, Any]
    result: Any


@dataclass
class ChatResult:
    answer: str
    tool_calls: list[ToolCallRecord] = field(default_factory=list)


def build_system_prompt(document_id: int | None = None) -> str:
    if document_id is None:
        return SYSTEM_PROMPT
    return (
        f"{SYSTEM_PROMPT}\n\nNote: The user is currently editing document ID {document_id}. "
        "When providing resume suggestions, you can reference this document."
    )


def ask(
    question: str,
    tools: Sequence[BaseTool],
    config: GenerationCfg,
    document_id: int | None = None,
) -> ChatResult:
    """Answer *question*, letting the model call *tools* for at most ``config.max_steps`` turns."""
    messages: list[dict[str, Any]] = [
        {"role": "system", "content": build_system_prompt(document_id)},
        {"role": "user", "content": question},
    ]
    by_name = {t.name: t for t in tools}
    schemas = [t.to_schema() for t in tools]
    records: list[ToolCallRecord] = []
    answer = ""

    for _ in range(config.max_steps):
        message = llm_client.complete_with_tools(
            model=config.model,
            messages=messages,
            tools=schemas,
            temperature=config.temperature,
        )
        answer = message.content or ""
        tool_calls = getattr(message, "tool_calls", None) or []
        if not tool_calls:
            return ChatResult(answer=answer, tool_calls=records)

        messages.append(
            {
                "role": "assistant",
                "content": answer,
                "tool_calls": [
                    {
                        "id": call.id,
                        "type": "function",
                        "function": {
                            "name": call.function.name,
                            "arguments": call.function.arguments,
                        },
                    }
                    for call in tool_calls
                ],
            }
        )
        for call in tool_calls:
            arguments, result = _run_tool(by_name, call.function.name, call.function.arguments)
            records.append(ToolCallRecord(call.function.name, arguments, result))
            messages.append(
                {
                    "role": "tool",
                    "tool_call_id": call.id,
                    "content": result if isinstance(result, str) else json.dumps(result),
                }
            )

    logger.warning("Stopped after %d model turns without a final answer", config.max_steps)
    return ChatResult(answer=answer, tool_calls=records)


def _run_tool(
    by_name: dict[str, BaseTool], name: str, raw_arguments: str | None
) -> tuple[dict[str, Any], Any]:
    """Execute one tool call. Failures are reported back to the model as ``{"error": ...}``."""
    try:
        arguments = json.loads(raw_arguments or "{}")
    except json.JSONDecodeError as exc:
        return {}, {"error": f"Invalid tool arguments: {exc}"}
    if not isinstance(arguments, dict):
        return {}, {"error": "Tool arguments must be a JSON object"}

    tool = by_name.get(name)
    if tool is None:
        return arguments, {"error": f"Unknown tool '{name}'"}

    try:
        return arguments, tool.execute(**arguments)
    except (ResumeRagError, TypeError, ValueError) as exc:
        logger.warning("Tool %s failed: %s", name, exc)
        return arguments, {"error": str(exc)}
