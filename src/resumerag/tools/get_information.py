"""getInformation tool: retrieval-only access to stored documents."""

from __future__ import annotations

from collections.abc import Iterable

from resumerag.rag.assembler import ContextAssembler
from resumerag.tools.base import BaseTool


class GetInformationTool(BaseTool):
    """Return grounding context for a query, optionally scoped to document ids."""

    name = "getInformation"
    description = "Get information from the database"
    parameters = {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "The query to get information from the database",
            },
        },
        "required": ["query"],
    }

    def __init__(
        self,
        assembler: ContextAssembler,
        max_chunks: int = 10,
        scope: Iterable[int] | None = None,
    ) -> None:
        self._assembler = assembler
        self._max_chunks = max_chunks
        self._scope = list(scope) if scope else None

    def execute(self, query: str) -> str:
        return self._assembler.build_context(query, self._max_chunks, scope=self._scope)
