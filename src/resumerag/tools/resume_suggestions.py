"""provideResumeSuggestions tool: advice plus structured edit operations.

When bound to a document, the model is asked for a JSON object

  {"suggestions": str, "operations": [DiffOperation...], "summary": str}

whose operations are validated against the DiffOperation wire shape. Invalid
operations are dropped; the rest are returned for preview and are never
applied automatically.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from resumerag.diff.operations import operation_from_dict, operation_to_dict
from resumerag.exceptions import DiffOperationError, DocumentNotFoundError
from resumerag.rag import llm_client
from resumerag.rag.assembler import ContextAssembler
from resumerag.resources.manager import ResourceManager
from resumerag.tools.base import BaseTool

logger = logging.getLogger(__name__)

_NO_DOCUMENTS = (
    "I don't have any documents in the database yet. "
    "Please upload a document or add an experience first."
)

_ADVICE_GUIDELINES = """\
- Review ALL the provided context from their documents and experiences
- Provide specific suggestions on how to format, structure, and present their experience
- Suggest which sections to add experiences to (e.g., Work Experience, Projects, Skills)
- Recommend action verbs and quantifiable achievements where appropriate
- Suggest how to highlight relevant skills and accomplishments
- Be practical and actionable - focus on what to add, how to phrase it, and where to place it"""

_TEXT_SYSTEM = f"""\
You are an expert resume advisor helping users improve their resume.
Analyze their experience and documentation, then provide specific, actionable
suggestions on how to incorporate it into their resume.

Guidelines:
{_ADVICE_GUIDELINES}
- If they mention a specific experience, focus on how to incorporate that into their resume"""

_DIFF_SYSTEM = f"""\
You are an expert resume advisor and editor helping users improve their resume.

Your task has two parts:
1. Provide human-readable text suggestions explaining how to improve the resume
2. Generate structured diff operations that represent the precise changes needed

Guidelines for suggestions:
{_ADVICE_GUIDELINES}

Guidelines for diff operations:
- Only include operations for content that actually needs to change
- Use "insert" (newText) to add content, "delete" (oldText) to remove content,
  "replace" (oldText, newText) to modify content
- Include "line" numbers (0-indexed, referring to the CURRENT RESUME lines) when possible
- Include "section" names when applicable (e.g., "Work Experience", "Skills")
- Operations are applied in order in a single pass, so list them by ascending line
- Be conservative and maintain the existing structure and format of the resume
- For multi-line changes, use multiple operations
- oldText must exactly match the line in the current resume

Respond with ONLY a JSON object with keys "suggestions" (string),
"operations" (array) and "summary" (string)."""


class ResumeSuggestionsTool(BaseTool):
    """Resume advice grounded in retrieved context.

    Args:
        assembler: Context assembler for retrieval.
        manager: Resource manager, used to read the bound document.
        model: LiteLLM generation model.
        document_id: Document being edited; enables structured operations.
        max_chunks: Chunks of context to retrieve.
        temperature: Sampling temperature for the advice call.
    """

    name = "provideResumeSuggestions"
    description = (
        "Provide suggestions on how to improve a resume or incorporate experience into a "
        "resume. Use this tool when the user asks for resume advice, suggestions on how "
        "to add experience, or how to improve their resume."
    )
    parameters = {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": (
                    "The user's question or request about resume improvements "
                    "or incorporating experience"
                ),
            },
        },
        "required": ["query"],
    }

    def __init__(
        self,
        assembler: ContextAssembler,
        manager: ResourceManager,
        model: str,
        document_id: int | None = None,
        max_chunks: int = 10,
        temperature: float = 0.7,
    ) -> None:
        self._assembler = assembler
        self._manager = manager
        self._model = model
        self._document_id = document_id
        self._max_chunks = max_chunks
        self._temperature = temperature

    def execute(self, query: str) -> dict[str, Any]:
        context = self._assembler.build_context(query, self._max_chunks)
        if not context:
            return {"suggestions": _NO_DOCUMENTS}

        current = self._current_content()
        if current:
            return self._suggest_with_operations(query, context, current)

        suggestions = llm_client.complete(
            model=self._model,
            messages=[
                {"role": "system", "content": _TEXT_SYSTEM},
                {
                    "role": "user",
                    "content": (
                        f"USER'S DOCUMENTATION AND EXPERIENCE:\n{context}\n\n"
                        f"USER REQUEST: {query}\n\n"
                        "Based on all the documentation and experiences provided above, "
                        "provide specific, detailed and actionable suggestions on how to "
                        "improve their resume and incorporate their experience."
                    ),
                },
            ],
            temperature=self._temperature,
        )
        return {"suggestions": suggestions}

    def _current_content(self) -> str:
        if self._document_id is None:
            return ""
        try:
            return self._manager.get(self._document_id).content
        except DocumentNotFoundError:
            logger.warning("Bound document %s no longer exists", self._document_id)
            return ""

    def _suggest_with_operations(self, query: str, context: str, current: str) -> dict[str, Any]:
        lines = current.split("\n")
        numbered = "\n".join(f"{i}: {line}" for i, line in enumerate(lines))
        raw = llm_client.complete(
            model=self._model,
            messages=[
                {"role": "system", "content": _DIFF_SYSTEM},
                {
                    "role": "user",
                    "content": (
                        f"CURRENT RESUME ({len(lines)} lines, "
                        f"prefixed with their 0-based line number):\n{numbered}\n\n"
                        f"USER'S DOCUMENTATION AND EXPERIENCE:\n{context}\n\n"
                        f"USER REQUEST: {query}\n\n"
                        "The operations array MUST contain at least one concrete change."
                    ),
                },
            ],
            temperature=self._temperature,
            response_format={"type": "json_object"},
        )
        payload = _parse_json_object(raw)
        if payload is None:
            logger.warning("Suggestion response was not a JSON object; returning text only")
            return {"suggestions": raw, "structuredChanges": [], "documentId": self._document_id}

        return {
            "suggestions": str(payload.get("suggestions", "")),
            "structuredChanges": _valid_operations(payload.get("operations")),
            "documentId": self._document_id,
        }


def _parse_json_object(raw: str) -> dict | None:
    """Parse the outermost JSON object in *raw*. Returns None on failure."""
    try:
        start = raw.index("{")
        end = raw.rindex("}") + 1
        obj = json.loads(raw[start:end])
    except (ValueError, json.JSONDecodeError):
        return None
    return obj if isinstance(obj, dict) else None


def _valid_operations(items: Any) -> list[dict[str, Any]]:
    """Round-trip operations through the wire parser, dropping malformed ones."""
    if not isinstance(items, list):
        return []
    valid: list[dict[str, Any]] = []
    for i, item in enumerate(items):
        try:
            valid.append(operation_to_dict(operation_from_dict(item)))
        except DiffOperationError as exc:
            logger.warning("Dropping model-proposed operation %d: %s", i, exc)
    return valid
