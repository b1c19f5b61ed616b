"""Document lifecycle: create, update, delete, reindex and apply edits."""

from resumerag.resources.manager import ResourceManager, ResourceResult

__all__ = ["ResourceManager", "ResourceResult"]
