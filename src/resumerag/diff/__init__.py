"""Structured, line-anchored document edits and line-level diff previews."""

from resumerag.diff.engine import DiffLine, apply_operations, preview, render_preview
from resumerag.diff.operations import (
    DeleteOp,
    DiffOperation,
    InsertOp,
    ReplaceOp,
    operation_from_dict,
    operation_to_dict,
    operations_from_list,
)

__all__ = [
    "DeleteOp",
    "DiffLine",
    "DiffOperation",
    "InsertOp",
    "ReplaceOp",
    "apply_operations",
    "operation_from_dict",
    "operation_to_dict",
    "operations_from_list",
    "preview",
    "render_preview",
]
