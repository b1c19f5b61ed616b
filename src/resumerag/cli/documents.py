"""Document lifecycle commands: add, update, remove, reindex, list, show.

Only plain-text files are accepted:
  .txt .text .md .markdown
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from resumerag.cli.errors import err_document_not_found, err_file_not_found, err_unsupported_file
from resumerag.cli.session import console, open_services, require_api_key
from resumerag.db.models import DOCUMENT_TYPES
from resumerag.resources.manager import ResourceResult

_TEXT_EXTS = (".txt", ".text", ".md", ".markdown")

_DbOption = Annotated[
    Path | None,
    typer.Option("--db", help="Path to the database (default: database.path from config)."),
]


# ------------------------------------------------------------------
# add / update
# ------------------------------------------------------------------


def add_cmd(
    file: Annotated[Path, typer.Argument(help="Plain-text file to add.")],
    name: Annotated[
        str | None,
        typer.Option("--name", "-n", help="Document name (default: file name)."),
    ] = None,
    doc_type: Annotated[
        str,
        typer.Option("--type", "-t", help="Document type: resume or other."),
    ] = "other",
    tag: Annotated[
        list[str] | None,
        typer.Option("--tag", help="Tag to attach (repeatable)."),
    ] = None,
    db: _DbOption = None,
) -> None:
    """Add a document: store it, chunk it and embed every chunk."""
    if doc_type not in DOCUMENT_TYPES:
        console.print(
            f"[red]Error:[/] Invalid --type '{doc_type}'. Use one of: {', '.join(DOCUMENT_TYPES)}"
        )
        raise typer.Exit(1)
    content = _read_text_file(file)

    with open_services(db, create=True) as services:
        require_api_key(services.config.embedding.model)
        result = services.manager.create(
            content, name=name or file.name, doc_type=doc_type, tags=tag or []
        )
    _report(f"Added [bold]{name or file.name}[/]", result)


def update_cmd(
    document_id: Annotated[int, typer.Argument(help="Document id.")],
    file: Annotated[Path, typer.Argument(help="Plain-text file with the new content.")],
    name: Annotated[str | None, typer.Option("--name", "-n", help="Rename the document.")] = None,
    db: _DbOption = None,
) -> None:
    """Replace a document's content and rebuild its chunks."""
    content = _read_text_file(file)

    with open_services(db) as services:
        require_api_key(services.config.embedding.model)
        result = services.manager.update(document_id, content, name=name)
    _report(f"Updated document {document_id}", result)


# ------------------------------------------------------------------
# structured input
# ------------------------------------------------------------------


def add_experience_cmd(
    date: Annotated[str, typer.Option("--date", help="When it happened, e.g. 2023-05.")],
    description: Annotated[str, typer.Option("--description", "-d", help="What you did.")],
    title: Annotated[str | None, typer.Option("--title")] = None,
    company: Annotated[str | None, typer.Option("--company")] = None,
    position: Annotated[str | None, typer.Option("--position")] = None,
    location: Annotated[str | None, typer.Option("--location")] = None,
    url: Annotated[str | None, typer.Option("--url")] = None,
    skill: Annotated[list[str] | None, typer.Option("--skill", help="Repeatable.")] = None,
    technology: Annotated[
        list[str] | None, typer.Option("--technology", help="Repeatable.")
    ] = None,
    tag: Annotated[list[str] | None, typer.Option("--tag", help="Repeatable.")] = None,
    db: _DbOption = None,
) -> None:
    """Record a work experience as a searchable document."""
    details = {
        "title": title,
        "company": company,
        "position": position,
        "location": location,
        "url": url,
        "skills": skill,
        "technologies": technology,
        "tags": tag,
    }
    with open_services(db, create=True) as services:
        require_api_key(services.config.embedding.model)
        result = services.manager.add_experience(
            date, description, **{k: v for k, v in details.items() if v}
        )
    _report("Experience added", result)


def add_job_cmd(
    file: Annotated[Path, typer.Argument(help="Plain-text file containing the job posting.")],
    link: Annotated[str | None, typer.Option("--link", help="URL of the posting.")] = None,
    db: _DbOption = None,
) -> None:
    """Store a job posting for later comparison against your resume."""
    content = _read_text_file(file)

    with open_services(db, create=True) as services:
        require_api_key(services.config.embedding.model)
        result = services.manager.add_job_posting(content, link=link)
    _report("Job posting added", result)


# ------------------------------------------------------------------
# remove / reindex
# ------------------------------------------------------------------


def remove_cmd(
    document_id: Annotated[int, typer.Argument(help="Document id.")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation prompt.")] = False,
    db: _DbOption = None,
) -> None:
    """Delete a document and all of its chunks."""
    with open_services(db) as services:
        document = services.repo.get_document(document_id)
        if document is None:
            console.print(err_document_not_found(document_id))
            raise typer.Exit(1)

        chunk_count = services.repo.count_chunks(document_id)
        console.print(f"\nRemove document: [bold]{document.name}[/] (id {document_id})")
        console.print(f"  Chunks: {chunk_count}")

        if not yes and not typer.confirm("Confirm removal?", default=False):
            console.print("[dim]Cancelled.[/]")
            raise typer.Exit(0)

        services.manager.delete(document_id)
    console.print(f"\n[green]✓[/] Removed document {document_id} ({chunk_count} chunks)")


def reindex_cmd(
    document_id: Annotated[int, typer.Argument(help="Document id.")],
    db: _DbOption = None,
) -> None:
    """Re-chunk and re-embed a document from its stored content."""
    with open_services(db) as services:
        require_api_key(services.config.embedding.model)
        result = services.manager.reindex(document_id)
    _report(f"Reindexed document {document_id}", result)


# ------------------------------------------------------------------
# list / show
# ------------------------------------------------------------------


def list_cmd(
    doc_type: Annotated[
        str | None,
        typer.Option("--type", "-t", help="Only show documents of this type."),
    ] = None,
    db: _DbOption = None,
) -> None:
    """List stored documents, newest first."""
    if doc_type is not None and doc_type not in DOCUMENT_TYPES:
        console.print(
            f"[red]Error:[/] Invalid --type '{doc_type}'. Use one of: {', '.join(DOCUMENT_TYPES)}"
        )
        raise typer.Exit(1)

    with open_services(db) as services:
        documents = services.manager.list_documents(doc_type)
        counts = {d.id: services.repo.count_chunks(d.id) for d in documents}

    if not documents:
        console.print("[dim]No documents yet. Run:  resumerag add FILE[/]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Tags")
    table.add_column("Chunks", justify="right")
    table.add_column("Created")
    for d in documents:
        table.add_row(
            str(d.id),
            d.name,
            d.type,
            ", ".join(d.tags),
            str(counts[d.id]),
            str(d.created_at or ""),
        )
    console.print(table)


def show_cmd(
    document_id: Annotated[int, typer.Argument(help="Document id.")],
    chunks: Annotated[bool, typer.Option("--chunks", help="Also print stored chunks.")] = False,
    db: _DbOption = None,
) -> None:
    """Print a document's content."""
    with open_services(db) as services:
        document = services.manager.get(document_id)
        stored = services.repo.list_chunks(document_id) if chunks else []

    console.print(f"[bold]{document.name}[/]  [dim](id {document.id}, {document.type})[/]")
    console.print(document.content, markup=False, highlight=False)
    for chunk in stored:
        console.print(f"\n[dim]--- chunk {chunk.chunk_index} ---[/]")
        console.print(chunk.chunk_text, markup=False, highlight=False)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _read_text_file(path: Path) -> str:
    if not path.is_file():
        console.print(err_file_not_found(str(path)))
        raise typer.Exit(1)
    if path.suffix.lower() not in _TEXT_EXTS:
        console.print(err_unsupported_file(str(path), list(_TEXT_EXTS)))
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8", errors="replace")


def _report(headline: str, result: ResourceResult) -> None:
    console.print(f"[green]✓[/] {headline}")
    console.print(
        f"  Document id: {result.document_id}  |  Chunks: {result.chunks_processed}"
    )
