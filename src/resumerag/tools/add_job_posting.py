"""addJobPosting tool: save a job posting to the document collection."""

from __future__ import annotations

from typing import Any

from resumerag.resources.manager import ResourceManager
from resumerag.tools.base import BaseTool


class AddJobPostingTool(BaseTool):
    name = "addJobPosting"
    description = (
        "Save a job posting to the user's document collection. The user will provide "
        "the job posting text and optionally a link to the posting."
    )
    parameters = {
        "type": "object",
        "properties": {
            "jobPosting": {
                "type": "string",
                "description": "The full text content of the job posting",
            },
            "link": {
                "type": "string",
                "description": "Optional URL/link to the job posting",
            },
        },
        "required": ["jobPosting"],
    }

    def __init__(self, manager: ResourceManager) -> None:
        self._manager = manager

    def execute(self, jobPosting: str, link: str | None = None) -> dict[str, Any]:  # noqa: N803
        result = self._manager.add_job_posting(jobPosting, link=link)
        return {
            **result.to_dict(),
            "message": "Job posting saved successfully and is now available for RAG queries.",
        }
