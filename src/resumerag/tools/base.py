"""Base interface for tools the language model may call."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseTool(ABC):
    """A model-callable tool with a fixed JSON-schema input.

    Subclasses set ``name``, ``description`` and ``parameters`` and implement
    ``execute()``. Results must be JSON-serialisable.
    """

    name: str = ""
    description: str = ""
    parameters: dict[str, Any] = {"type": "object", "properties": {}}

    @abstractmethod
    def execute(self, **arguments: Any) -> Any:
        """Run the tool with the model-supplied *arguments*."""

    def to_schema(self) -> dict[str, Any]:
        """Return the OpenAI/LiteLLM function-calling definition."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }
