"""Shared CLI plumbing: config loading, DB opening and error translation."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer
from rich.console import Console

from resumerag.cli.errors import err_config, err_no_api_key, err_no_db, render_error
from resumerag.config import ConfigError, ResumeRagConfig, load_config
from resumerag.db.connection import Database
from resumerag.db.schema import initialize
from resumerag.exceptions import ResumeRagError
from resumerag.rag.llm_client import validate_api_key
from resumerag.services import Services, build_services

console = Console()


def load_cfg() -> ResumeRagConfig:
    """Load config, exiting with a readable message on ConfigError."""
    try:
        return load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1) from None


def require_api_key(model: str) -> None:
    try:
        validate_api_key(model)
    except EnvironmentError as exc:
        console.print(err_no_api_key(str(exc)))
        raise typer.Exit(1) from None


@contextmanager
def open_services(db: Path | None, *, create: bool = False) -> Iterator[Services]:
    """Yield wired services for the database at *db* (or the configured path).

    Library errors raised inside the block are rendered and turned into
    exit code 1. The connection is always closed.

    Args:
        db: Explicit database path from --db, or None for config.database.path.
        create: Create the database if it does not exist yet.
    """
    cfg = load_cfg()
    db_path = db if db is not None else Path(cfg.database.path)
    if not create and not db_path.exists():
        console.print(err_no_db(str(db_path)))
        raise typer.Exit(1)

    conn = open_db(db_path)
    try:
        yield build_services(conn, cfg)
    except ResumeRagError as exc:
        console.print(render_error(exc))
        raise typer.Exit(1) from None
    finally:
        conn.close()


def open_db(db_path: Path) -> sqlite3.Connection:
    db = Database(db_path)
    conn = db.connect()
    initialize(conn)
    return conn
