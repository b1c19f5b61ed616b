"""Rich error messages for the CLI.

Every message states what went wrong and the action that fixes it.

Usage:
    from resumerag.cli.errors import err_no_db
    console.print(err_no_db(".resumerag.db"))
    raise typer.Exit(1)
"""

from __future__ import annotations

from resumerag.exceptions import (
    ChunkLimitError,
    DiffError,
    DocumentNotFoundError,
    EmbeddingError,
    EmptyContentError,
    ResourceError,
    ResumeRagError,
    SearchError,
)


def err_no_db(db_path: str = ".resumerag.db") -> str:
    """No database at *db_path*."""
    return (
        f"[red]Error:[/] No database found at '{db_path}'.\n"
        "  Run:  resumerag init"
    )


def err_config(message: str) -> str:
    """Config file is invalid."""
    return (
        f"[red]Error:[/] Invalid configuration.\n"
        f"  {message}\n"
        "  Fix resumerag.yaml or ~/.resumerag/config.yaml and retry."
    )


def err_no_api_key(detail: str) -> str:
    """Provider key missing from the environment."""
    return f"[red]Error:[/] {detail}"


def err_file_not_found(path: str) -> str:
    return f"[red]Error:[/] File not found: '{path}'"


def err_unsupported_file(path: str, allowed: list[str]) -> str:
    """Only plain-text documents can be added."""
    return (
        f"[red]Error:[/] Unsupported file type: '{path}'\n"
        f"  Supported extensions: {', '.join(allowed)}\n"
        "  Convert the document to plain text first."
    )


def err_document_not_found(document_id: int | None) -> str:
    return (
        f"[yellow]Document not found:[/] no document with id {document_id}.\n"
        "  Run:  resumerag list  to see all documents."
    )


def err_operations_file(path: str, detail: str) -> str:
    """Edit operations file could not be parsed."""
    return (
        f"[red]Error:[/] Invalid operations file '{path}'.\n"
        f"  {detail}\n"
        '  Expected a JSON array of {"type": "insert|delete|replace", ...} objects.'
    )


def render_error(exc: ResumeRagError) -> str:
    """Map a library error to an actionable message."""
    if isinstance(exc, DocumentNotFoundError):
        return err_document_not_found(exc.document_id)
    if isinstance(exc, EmptyContentError):
        return (
            f"[red]Error:[/] {exc}\n"
            "  The document has no text to index. Check the file contents."
        )
    if isinstance(exc, ResourceError):
        message = f"[red]Error:[/] {exc}"
        if exc.document_id is not None and exc.operation in ("update", "edit", "reindex"):
            message += (
                f"\n  Document {exc.document_id} may have stale chunks.\n"
                f"  Run:  resumerag reindex {exc.document_id}"
            )
        return message
    if isinstance(exc, EmbeddingError):
        return (
            f"[red]Error:[/] Embedding failed: {exc}\n"
            "  Check the embedding model and provider credentials."
        )
    if isinstance(exc, ChunkLimitError):
        return (
            f"[red]Error:[/] {exc}\n"
            "  Split the document or raise chunking.max_chunks in resumerag.yaml."
        )
    if isinstance(exc, SearchError):
        return (
            f"[red]Error:[/] {exc}\n"
            "  Stored embeddings may come from a different model. Run: resumerag reindex <id>"
        )
    if isinstance(exc, DiffError):
        return f"[red]Error:[/] Could not apply edits: {exc}"
    return f"[red]Error:[/] {exc}"
