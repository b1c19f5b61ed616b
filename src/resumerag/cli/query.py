"""resumerag query / ask: retrieval and question answering.

  resumerag query "python experience"     print the assembled context
  resumerag ask "What did I do at Acme?"  tool-calling answer from the model
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.panel import Panel

from resumerag.cli.errors import err_document_not_found
from resumerag.cli.session import console, open_services, require_api_key
from resumerag.rag.chat import ask
from resumerag.tools import build_tools

logger = logging.getLogger(__name__)


def query_cmd(
    text: Annotated[str, typer.Argument(help="Search text.")],
    max_chunks: Annotated[
        int | None,
        typer.Option("--max-chunks", "-k", min=1, help="Chunks to retrieve (default from config)."),
    ] = None,
    document: Annotated[
        list[int] | None,
        typer.Option("--document", help="Restrict the search to this document id (repeatable)."),
    ] = None,
    db: Annotated[Path | None, typer.Option("--db", help="Path to the database.")] = None,
) -> None:
    """Show the stored text most similar to TEXT."""
    with open_services(db) as services:
        require_api_key(services.config.embedding.model)
        k = max_chunks or services.config.retrieval.max_chunks
        hits = services.assembler.retrieve(text, k, scope=document)

    if not hits:
        console.print("[yellow]No matching content.[/] Add documents with:  resumerag add FILE")
        return

    for rank, hit in enumerate(hits, start=1):
        console.print(
            Panel(
                hit.chunk_text,
                title=f"[bold]{rank}. {hit.document_name}[/]",
                subtitle=f"similarity {hit.similarity:.3f}",
                title_align="left",
                expand=True,
            )
        )


def ask_cmd(
    question: Annotated[str, typer.Argument(help="Question about your resume.")],
    document: Annotated[
        int | None,
        typer.Option("--document", help="Id of the resume being edited (enables structured edits)."),
    ] = None,
    db: Annotated[Path | None, typer.Option("--db", help="Path to the database.")] = None,
) -> None:
    """Answer a question grounded in your stored documents."""
    with open_services(db) as services:
        cfg = services.config
        require_api_key(cfg.embedding.model)
        require_api_key(cfg.generation.model)

        if document is not None and services.repo.get_document(document) is None:
            console.print(err_document_not_found(document))
            raise typer.Exit(1)

        tools = build_tools(services, document_id=document)
        try:
            result = ask(question, tools, cfg.generation, document_id=document)
        except Exception as exc:
            logger.debug("Model call failed", exc_info=True)
            console.print(f"[red]Error:[/] Model call failed: {exc}")
            raise typer.Exit(1) from None

    for call in result.tool_calls:
        console.print(f"[dim]→ {call.name}({', '.join(f'{k}={v!r}' for k, v in call.arguments.items())})[/]")
        if isinstance(call.result, dict) and call.result.get("structuredChanges"):
            console.print(
                f"[dim]  {len(call.result['structuredChanges'])} proposed edit(s); "
                f"save them to a file and run:  resumerag edit {document} OPS.json[/]"
            )
    console.print(result.answer or "[dim](no answer)[/]")
