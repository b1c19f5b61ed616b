"""Tools exposed to the language model during chat."""

from __future__ import annotations

from collections.abc import Iterable

from resumerag.services import Services
from resumerag.tools.add_experience import AddExperienceTool
from resumerag.tools.add_job_posting import AddJobPostingTool
from resumerag.tools.base import BaseTool
from resumerag.tools.get_information import GetInformationTool
from resumerag.tools.resume_suggestions import ResumeSuggestionsTool

__all__ = [
    "AddExperienceTool",
    "AddJobPostingTool",
    "BaseTool",
    "GetInformationTool",
    "ResumeSuggestionsTool",
    "build_tools",
]


def build_tools(
    services: Services,
    document_id: int | None = None,
    scope: Iterable[int] | None = None,
) -> list[BaseTool]:
    """Return the chat tool set bound to *services*.

    Args:
        services: Wired core components.
        document_id: Document the user is editing, if any.
        scope: Optional document ids restricting getInformation retrieval.
    """
    cfg = services.config
    return [
        ResumeSuggestionsTool(
            services.assembler,
            services.manager,
            model=cfg.generation.model,
            document_id=document_id,
            max_chunks=cfg.retrieval.tool_max_chunks,
            temperature=cfg.generation.temperature,
        ),
        AddExperienceTool(services.manager),
        AddJobPostingTool(services.manager),
        GetInformationTool(
            services.assembler,
            max_chunks=cfg.retrieval.tool_max_chunks,
            scope=scope,
        ),
    ]
