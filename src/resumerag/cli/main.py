"""resumerag CLI entry point."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from resumerag.cli.documents import (
    add_cmd,
    add_experience_cmd,
    add_job_cmd,
    list_cmd,
    reindex_cmd,
    remove_cmd,
    show_cmd,
    update_cmd,
)
from resumerag.cli.edit import edit_cmd
from resumerag.cli.init import init_cmd
from resumerag.cli.query import ask_cmd, query_cmd


def _installed_version() -> str:
    try:
        return importlib.metadata.version("resumerag")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"resumerag {_installed_version()}")
        raise typer.Exit()


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
        force=True,
    )


app = typer.Typer(
    name="resumerag",
    help=(
        "resumerag: retrieval-augmented resume assistant.\n\n"
        "  resumerag add resume.md --type resume   Index a document.\n"
        "  resumerag ask \"What did I ship in 2023?\"  Grounded answers from your documents."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging.")
    ] = False,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Only show warnings and errors.")
    ] = False,
) -> None:
    """resumerag: retrieval-augmented resume assistant."""
    _configure_logging(verbose, quiet)


app.command("init")(init_cmd)
app.command("add")(add_cmd)
app.command("add-experience")(add_experience_cmd)
app.command("add-job")(add_job_cmd)
app.command("list")(list_cmd)
app.command("show")(show_cmd)
app.command("update")(update_cmd)
app.command("remove")(remove_cmd)
app.command("reindex")(reindex_cmd)
app.command("query")(query_cmd)
app.command("edit")(edit_cmd)
app.command("ask")(ask_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed resumerag version."""
    typer.echo(f"resumerag {_installed_version()}")


if __name__ == "__main__":
    app()
