"""resumerag edit: preview and apply structured edit operations.

The operations file holds a JSON array of DiffOperation objects:

  [{"type": "replace", "oldText": "Skills: Go", "newText": "Skills: Go, Python", "line": 4}]

An object with an ``operations`` (or ``structuredChanges``) key is accepted as well.
Without --apply the command only prints the preview.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated, Any

import typer

from resumerag.cli.errors import err_file_not_found, err_operations_file
from resumerag.cli.session import console, open_services, require_api_key
from resumerag.diff.engine import DiffLine, apply_operations, preview, render_preview
from resumerag.diff.operations import DiffOperation, operations_from_list
from resumerag.exceptions import DiffError


def edit_cmd(
    document_id: Annotated[int, typer.Argument(help="Document id.")],
    ops_file: Annotated[Path, typer.Argument(help="JSON file with edit operations.")],
    apply: Annotated[
        bool, typer.Option("--apply", help="Persist the edits and re-embed the document.")
    ] = False,
    verify: Annotated[
        bool,
        typer.Option("--verify", help="Fail if a delete/replace oldText does not match."),
    ] = False,
    db: Annotated[Path | None, typer.Option("--db", help="Path to the database.")] = None,
) -> None:
    """Preview (and optionally apply) edit operations on a document."""
    operations = _load_operations(ops_file)

    with open_services(db) as services:
        document = services.manager.get(document_id)
        new_content = apply_operations(document.content, operations, verify=verify)
        diff = preview(document.content, new_content)
        _print_preview(diff)

        if not apply:
            console.print("\n[dim]Preview only. Re-run with --apply to save.[/]")
            return

        require_api_key(services.config.embedding.model)
        result = services.manager.apply_edits(document_id, operations, verify=verify)

    console.print(
        f"\n[green]✓[/] Saved document {document_id}  |  Chunks: {result.chunks_processed}"
    )


def _load_operations(path: Path) -> list[DiffOperation]:
    if not path.is_file():
        console.print(err_file_not_found(str(path)))
        raise typer.Exit(1)
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        console.print(err_operations_file(str(path), f"Not valid JSON: {exc}"))
        raise typer.Exit(1) from None

    if isinstance(data, dict):
        data = data.get("operations", data.get("structuredChanges"))
    try:
        return operations_from_list(data)
    except DiffError as exc:
        console.print(err_operations_file(str(path), str(exc)))
        raise typer.Exit(1) from None


def _print_preview(diff: Sequence[DiffLine]) -> None:
    if all(line.type == "unchanged" for line in diff):
        console.print("[dim]No changes.[/]")
        return
    styles = {"added": "green", "removed": "red", "unchanged": None}
    # One rendered row per DiffLine; preview lines never contain newlines.
    for line, text in zip(diff, render_preview(diff).split("\n")):
        console.print(text, style=styles[line.type], markup=False, highlight=False)
