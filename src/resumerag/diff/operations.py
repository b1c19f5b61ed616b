"""DiffOperation variants and their JSON wire shape.

Wire shape (camelCase, as produced by the model and consumed by the editor):

  { "type": "insert",  "section"?: str, "line"?: int, "newText": str }
  { "type": "delete",  "section"?: str, "line"?: int, "oldText": str }
  { "type": "replace", "section"?: str, "line"?: int, "oldText": str, "newText": str }

``line`` is a 0-based index into the *original* content's lines.
``section`` is a human label only and never affects application.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Union

from resumerag.exceptions import DiffOperationError


@dataclass(frozen=True)
class InsertOp:
    new_text: str
    line: int | None = None
    section: str | None = None

    type: ClassVar[str] = "insert"


@dataclass(frozen=True)
class DeleteOp:
    old_text: str
    line: int | None = None
    section: str | None = None

    type: ClassVar[str] = "delete"


@dataclass(frozen=True)
class ReplaceOp:
    old_text: str
    new_text: str
    line: int | None = None
    section: str | None = None

    type: ClassVar[str] = "replace"


DiffOperation = Union[InsertOp, DeleteOp, ReplaceOp]


def operation_from_dict(data: Any) -> DiffOperation:
    """Parse one wire-format operation.

    Raises:
        DiffOperationError: Unknown ``type``, missing/non-string text field,
            or a ``line`` that is not a non-negative integer.
    """
    if not isinstance(data, dict):
        raise DiffOperationError(f"Operation must be an object, got {type(data).__name__}")

    op_type = data.get("type")
    line = _parse_line(data.get("line"))
    section = data.get("section")
    if section is not None and not isinstance(section, str):
        raise DiffOperationError("'section' must be a string")

    if op_type == "insert":
        return InsertOp(new_text=_text(data, "newText"), line=line, section=section)
    if op_type == "delete":
        return DeleteOp(old_text=_text(data, "oldText"), line=line, section=section)
    if op_type == "replace":
        return ReplaceOp(
            old_text=_text(data, "oldText"),
            new_text=_text(data, "newText"),
            line=line,
            section=section,
        )
    raise DiffOperationError(
        f"Unknown operation type {op_type!r}; expected insert, delete or replace"
    )


def operations_from_list(data: Any) -> list[DiffOperation]:
    """Parse a JSON array of wire-format operations, preserving order."""
    if not isinstance(data, list):
        raise DiffOperationError(f"Operations must be a list, got {type(data).__name__}")
    ops: list[DiffOperation] = []
    for i, item in enumerate(data):
        try:
            ops.append(operation_from_dict(item))
        except DiffOperationError as exc:
            raise DiffOperationError(f"Operation {i}: {exc}") from exc
    return ops


def operation_to_dict(op: DiffOperation) -> dict[str, Any]:
    """Serialise an operation to its wire shape (optional keys omitted when None)."""
    out: dict[str, Any] = {"type": op.type}
    if op.section is not None:
        out["section"] = op.section
    if op.line is not None:
        out["line"] = op.line
    if isinstance(op, (DeleteOp, ReplaceOp)):
        out["oldText"] = op.old_text
    if isinstance(op, (InsertOp, ReplaceOp)):
        out["newText"] = op.new_text
    return out


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise DiffOperationError(f"'{data.get('type')}' operation requires string '{key}'")
    return value


def _parse_line(value: Any) -> int | None:
    if value is None:
        return None
    # JSON numbers from models sometimes arrive as 3.0
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise DiffOperationError(f"'line' must be a non-negative integer, got {value!r}")
    return value
