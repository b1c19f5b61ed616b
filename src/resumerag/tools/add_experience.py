"""addExperience tool: store a structured experience entry."""

from __future__ import annotations

from typing import Any

from resumerag.resources.manager import ResourceManager
from resumerag.tools.base import BaseTool

_STRING_FIELDS = ("title", "company", "position", "location", "url")
_LIST_FIELDS = (
    "tags",
    "skills",
    "tools",
    "technologies",
    "projects",
    "education",
    "certifications",
    "awards",
    "publications",
)


def _experience_schema() -> dict[str, Any]:
    properties: dict[str, Any] = {
        "date": {"type": "string", "description": "The date of the experience"},
        "description": {
            "type": "string",
            "description": "The description of the experience to add to your history",
        },
    }
    for f in _STRING_FIELDS:
        properties[f] = {"type": "string", "description": f"The {f} of the experience"}
    for f in _LIST_FIELDS:
        properties[f] = {
            "type": "array",
            "items": {"type": "string"},
            "description": f"The {f} of the experience",
        }
    return {"type": "object", "properties": properties, "required": ["date", "description"]}


class AddExperienceTool(BaseTool):
    name = "addExperience"
    description = (
        "Add a new experience to your history. Though only date and description are "
        "required, prompt the user for more information if their description is vague "
        "or unclear."
    )
    parameters = _experience_schema()

    def __init__(self, manager: ResourceManager) -> None:
        self._manager = manager

    def execute(self, date: str, description: str, **details: Any) -> dict[str, Any]:
        result = self._manager.add_experience(date, description, **details)
        return {
            **result.to_dict(),
            "message": "Experience stored successfully and is now available for RAG queries.",
        }
