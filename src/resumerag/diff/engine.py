"""Diff engine: apply line-anchored operations, and preview line-level diffs.

``apply_operations`` is a single forward pass over the original lines:

  - a cursor starts at line 0; each operation targets its explicit ``line``
    or, when omitted, the current cursor
  - original lines before the target are copied through
  - insert  → emit newText; the original line at the cursor stays pending
  - delete  → skip one original line (if any remain)
  - replace → emit newText and skip one original line (if any remain;
              past the end it simply appends)
  - remaining original lines are copied through at the end

A target behind the cursor does not move it backwards. ``oldText`` is not
checked against the content unless ``verify=True``.

``preview`` is a longest-common-subsequence line diff, so the number of
added + removed lines is minimal.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from resumerag.diff.operations import DeleteOp, DiffOperation, InsertOp, ReplaceOp
from resumerag.exceptions import DiffMismatchError


@dataclass(frozen=True)
class DiffLine:
    """One preview line.

    Attributes:
        type: ``added``, ``removed`` or ``unchanged``.
        line: Line text without its newline.
        line_number: 1-based; new numbering for added lines, original
            numbering for removed and unchanged lines.
    """

    type: str
    line: str
    line_number: int

    def to_dict(self) -> dict:
        return {"type": self.type, "line": self.line, "lineNumber": self.line_number}


# ------------------------------------------------------------------
# apply
# ------------------------------------------------------------------


def apply_operations(
    content: str,
    operations: Sequence[DiffOperation],
    verify: bool = False,
) -> str:
    """Apply *operations* in order to *content* and return the new text.

    Args:
        content: Original document text.
        operations: Ordered insert/delete/replace operations.
        verify: When True, a delete/replace whose ``old_text`` differs from
            the original line at the cursor raises instead of applying.

    Raises:
        DiffMismatchError: Only in verify mode.
    """
    lines = content.split("\n")
    result: list[str] = []
    current = 0

    for position, op in enumerate(operations):
        target = op.line if op.line is not None else current

        while current < target and current < len(lines):
            result.append(lines[current])
            current += 1

        if isinstance(op, InsertOp):
            result.append(op.new_text)
            continue

        if verify:
            actual = lines[current] if current < len(lines) else None
            if actual != op.old_text:
                raise DiffMismatchError(
                    position, current if actual is not None else None, op.old_text, actual
                )

        if isinstance(op, DeleteOp):
            if current < len(lines):
                current += 1
        elif isinstance(op, ReplaceOp):
            result.append(op.new_text)
            if current < len(lines):
                current += 1
        else:
            raise TypeError(f"Unsupported diff operation: {op!r}")

    result.extend(lines[current:])
    return "\n".join(result)


# ------------------------------------------------------------------
# preview
# ------------------------------------------------------------------


def preview(old_content: str, new_content: str) -> list[DiffLine]:
    """Return a minimal line diff between two texts, in display order."""
    old = old_content.split("\n")
    new = new_content.split("\n")

    prefix = 0
    while prefix < len(old) and prefix < len(new) and old[prefix] == new[prefix]:
        prefix += 1

    suffix = 0
    while (
        suffix < len(old) - prefix
        and suffix < len(new) - prefix
        and old[-1 - suffix] == new[-1 - suffix]
    ):
        suffix += 1

    diff = [DiffLine("unchanged", old[i], i + 1) for i in range(prefix)]
    diff.extend(
        _lcs_diff(old[prefix:len(old) - suffix], new[prefix:len(new) - suffix], prefix, prefix)
    )
    diff.extend(
        DiffLine("unchanged", old[i], i + 1) for i in range(len(old) - suffix, len(old))
    )
    return diff


def _lcs_diff(old: list[str], new: list[str], old_offset: int, new_offset: int) -> list[DiffLine]:
    """Diff the middle section with an LCS table; removals precede additions."""
    n, m = len(old), len(new)
    # lcs[i][j] = LCS length of old[i:] and new[j:]
    lcs = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(n - 1, -1, -1):
        row, below = lcs[i], lcs[i + 1]
        for j in range(m - 1, -1, -1):
            if old[i] == new[j]:
                row[j] = below[j + 1] + 1
            else:
                row[j] = max(below[j], row[j + 1])

    out: list[DiffLine] = []
    i = j = 0
    while i < n and j < m:
        if old[i] == new[j]:
            out.append(DiffLine("unchanged", old[i], old_offset + i + 1))
            i += 1
            j += 1
        elif lcs[i + 1][j] >= lcs[i][j + 1]:
            out.append(DiffLine("removed", old[i], old_offset + i + 1))
            i += 1
        else:
            out.append(DiffLine("added", new[j], new_offset + j + 1))
            j += 1
    out.extend(DiffLine("removed", old[k], old_offset + k + 1) for k in range(i, n))
    out.extend(DiffLine("added", new[k], new_offset + k + 1) for k in range(j, m))
    return out


_MARKERS = {"added": "+", "removed": "-", "unchanged": " "}


def render_preview(diff: Sequence[DiffLine]) -> str:
    """Render preview lines as ``+``/``-``/space prefixed text."""
    return "\n".join(f"{_MARKERS[d.type]} {d.line}" for d in diff)
