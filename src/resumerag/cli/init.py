"""resumerag init: create the database and a project config.

Creates:
  .resumerag.db            empty database with schema (or --db path)
  resumerag.yaml           project config with the default sections
  ~/.resumerag/config.yaml global model defaults (created once, mode 0o600)
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from resumerag.cli.session import console, load_cfg, open_db
from resumerag.config import ensure_global_config

_PROJECT_CONFIG = """\
# resumerag project configuration.
# API keys come from the environment (OPENAI_API_KEY, ANTHROPIC_API_KEY, ...).

database:
  path: {db_path}

embedding:
  model: {embedding_model}
  dimensions: {dimensions}

chunking:
  chunk_size: {chunk_size}
  overlap: {overlap}

retrieval:
  max_chunks: {max_chunks}
  tool_max_chunks: {tool_max_chunks}

generation:
  model: {generation_model}
  max_steps: {max_steps}
"""


def init_cmd(
    project_dir: Annotated[
        Path,
        typer.Argument(help="Directory to initialize. Defaults to current directory."),
    ] = Path("."),
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Database path (default: .resumerag.db in the project)."),
    ] = None,
    global_config: Annotated[
        Path | None,
        typer.Option("--global-config", hidden=True, help="Override global config path (testing)."),
    ] = None,
) -> None:
    """Initialize a resumerag project: database, resumerag.yaml and global config."""
    project_dir = project_dir.resolve()
    project_dir.mkdir(parents=True, exist_ok=True)
    cfg = load_cfg()

    db_path = db if db is not None else project_dir / ".resumerag.db"
    existed = db_path.exists()
    open_db(db_path).close()
    if existed:
        console.print(f"[yellow]⚠[/]  {db_path} already exists. Schema is up to date.")
    else:
        console.print(f"  [green]✓[/] Database created: [bold]{db_path}[/]")

    config_path = project_dir / "resumerag.yaml"
    if config_path.exists():
        console.print(f"  [dim]{config_path.name} already exists, left unchanged.[/]")
    else:
        config_path.write_text(
            _PROJECT_CONFIG.format(
                db_path=db_path if db is not None else ".resumerag.db",
                embedding_model=cfg.embedding.model,
                dimensions=cfg.embedding.dimensions,
                chunk_size=cfg.chunking.chunk_size,
                overlap=cfg.chunking.overlap,
                max_chunks=cfg.retrieval.max_chunks,
                tool_max_chunks=cfg.retrieval.tool_max_chunks,
                generation_model=cfg.generation.model,
                max_steps=cfg.generation.max_steps,
            ),
            encoding="utf-8",
        )
        console.print(f"  [green]✓[/] Config written: [bold]{config_path}[/]")

    global_path = ensure_global_config(global_config)
    console.print(f"  [dim]Global config: {global_path}[/]")

    console.print("\nNext:  resumerag add resume.md --type resume")
