"""resumerag configuration loader.

Priority (high → low):
  1. CLI flags           (handled at the call site, not here)
  2. Environment variables  (RESUMERAG_EMBEDDING_MODEL, RESUMERAG_GENERATION_MODEL,
     RESUMERAG_DB)
  3. Per-project resumerag.yaml  (current working directory)
  4. Global ~/.resumerag/config.yaml  (model defaults only, never API keys)
  5. Hardcoded defaults

Global config must never contain API keys; use environment variables instead.
All YAML reads use yaml.safe_load(), never yaml.load().
"""

from __future__ import annotations

import os
import re
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".resumerag"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "resumerag.yaml"

# Matches api_key, api-key, api_secret, *_token, token, *_secret, secret,
# password/passwd, credential(s). Leaves max_chunks, max_steps etc. alone.
_API_KEY_RE: re.Pattern[str] = re.compile(
    r"api[_\-]?(?:key|secret)"
    r"|_token$"
    r"|^token$"
    r"|_secret$"
    r"|^secret$"
    r"|passw(?:ord|d)"
    r"|credential",
    re.IGNORECASE,
)

_KNOWN_SECTIONS: frozenset[str] = frozenset(
    ["database", "embedding", "chunking", "retrieval", "generation"]
)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid or forbidden value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class DatabaseCfg:
    """SQLite database location (resumerag.yaml: database:)."""

    path: str = ".resumerag.db"


@dataclass
class EmbeddingCfg:
    """Embedding capability configuration (resumerag.yaml: embedding:).

    Attributes:
        model: LiteLLM embedding model string (provider/model format).
        dimensions: Expected vector length; mismatches are logged, not fatal.
    """

    model: str = "openai/text-embedding-3-small"
    dimensions: int = 1536


@dataclass
class ChunkingCfg:
    """Fixed-window chunker settings, in characters (resumerag.yaml: chunking:)."""

    chunk_size: int = 1000
    overlap: int = 200
    max_chunks: int = 10_000


@dataclass
class RetrievalCfg:
    """Context assembly settings (resumerag.yaml: retrieval:).

    Attributes:
        max_chunks: Chunks retrieved for a direct query.
        tool_max_chunks: Chunks retrieved when a model tool asks for context.
    """

    max_chunks: int = 5
    tool_max_chunks: int = 10


@dataclass
class GenerationCfg:
    """Language model settings (resumerag.yaml: generation:)."""

    model: str = "openai/gpt-4o-mini"
    max_steps: int = 5
    temperature: float = 0.7


@dataclass
class ResumeRagConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    database: DatabaseCfg = field(default_factory=DatabaseCfg)
    embedding: EmbeddingCfg = field(default_factory=EmbeddingCfg)
    chunking: ChunkingCfg = field(default_factory=ChunkingCfg)
    retrieval: RetrievalCfg = field(default_factory=RetrievalCfg)
    generation: GenerationCfg = field(default_factory=GenerationCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _check_no_api_keys(data: dict[str, Any], source: Path) -> None:
    """Raise ConfigError if *data* contains any API-key-like key names."""

    def _scan(obj: Any, path: str) -> None:
        if isinstance(obj, dict):
            for k, v in obj.items():
                full = f"{path}.{k}" if path else k
                if _API_KEY_RE.search(str(k)):
                    raise ConfigError(
                        f"Global config '{source}' contains a forbidden key '{full}'.\n"
                        f"  API keys must be set via environment variables, not config files.\n"
                        f"  Remove '{full}' from {source.name} and use:\n"
                        f"    export {str(k).upper().replace('-', '_')}=<value>"
                    )
                _scan(v, full)

    _scan(data, "")


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}', ignored.",
                UserWarning,
                stacklevel=4,
            )


def _validate(cfg: ResumeRagConfig) -> None:
    """Reject values that would make the pipeline misbehave."""
    if cfg.chunking.chunk_size < 1:
        raise ConfigError(f"chunking.chunk_size must be >= 1, got {cfg.chunking.chunk_size}")
    if cfg.chunking.overlap < 0:
        raise ConfigError(f"chunking.overlap must be >= 0, got {cfg.chunking.overlap}")
    if cfg.chunking.max_chunks < 1:
        raise ConfigError(f"chunking.max_chunks must be >= 1, got {cfg.chunking.max_chunks}")
    if cfg.embedding.dimensions < 1:
        raise ConfigError(f"embedding.dimensions must be >= 1, got {cfg.embedding.dimensions}")
    if cfg.retrieval.max_chunks < 1 or cfg.retrieval.tool_max_chunks < 1:
        raise ConfigError("retrieval.max_chunks and retrieval.tool_max_chunks must be >= 1")
    if cfg.generation.max_steps < 1:
        raise ConfigError(f"generation.max_steps must be >= 1, got {cfg.generation.max_steps}")


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any]) -> ResumeRagConfig:
    """Build a *ResumeRagConfig* from a merged raw YAML dict."""
    cfg = ResumeRagConfig()

    if "database" in data:
        d = data["database"] or {}
        cfg.database = DatabaseCfg(path=str(d.get("path", cfg.database.path)))

    if "embedding" in data:
        e = data["embedding"] or {}
        cfg.embedding = EmbeddingCfg(
            model=str(e.get("model", cfg.embedding.model)),
            dimensions=int(e.get("dimensions", cfg.embedding.dimensions)),
        )

    if "chunking" in data:
        c = data["chunking"] or {}
        cfg.chunking = ChunkingCfg(
            chunk_size=int(c.get("chunk_size", cfg.chunking.chunk_size)),
            overlap=int(c.get("overlap", cfg.chunking.overlap)),
            max_chunks=int(c.get("max_chunks", cfg.chunking.max_chunks)),
        )

    if "retrieval" in data:
        r = data["retrieval"] or {}
        cfg.retrieval = RetrievalCfg(
            max_chunks=int(r.get("max_chunks", cfg.retrieval.max_chunks)),
            tool_max_chunks=int(r.get("tool_max_chunks", cfg.retrieval.tool_max_chunks)),
        )

    if "generation" in data:
        g = data["generation"] or {}
        cfg.generation = GenerationCfg(
            model=str(g.get("model", cfg.generation.model)),
            max_steps=int(g.get("max_steps", cfg.generation.max_steps)),
            temperature=float(g.get("temperature", cfg.generation.temperature)),
        )

    return cfg


def _apply_env_overrides(cfg: ResumeRagConfig) -> ResumeRagConfig:
    """Apply RESUMERAG_* environment variable overrides."""
    if model := os.environ.get("RESUMERAG_GENERATION_MODEL"):
        cfg.generation.model = model
    if model := os.environ.get("RESUMERAG_EMBEDDING_MODEL"):
        cfg.embedding.model = model
    if db_path := os.environ.get("RESUMERAG_DB"):
        cfg.database.path = db_path
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> ResumeRagConfig:
    """Load and return a merged *ResumeRagConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *resumerag.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Returns:
        Fully merged *ResumeRagConfig* with env var overrides applied.

    Raises:
        ConfigError: If global config contains API-key-like fields, or a value
            is out of range.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    if global_path.exists():
        raw_global = yaml.safe_load(global_path.read_text(encoding="utf-8")) or {}
        _check_no_api_keys(raw_global, global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = yaml.safe_load(project_cfg_path.read_text(encoding="utf-8")) or {}
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _apply_env_overrides(_cfg_from_dict(merged))
    _validate(cfg)
    return cfg


def ensure_global_config(
    global_config_path: Path | None = None,
) -> Path:
    """Create ``~/.resumerag/config.yaml`` with defaults if it does not exist.

    Creates parent directory with mode 0o700 and the config file with
    mode 0o600 (owner-readable only).

    Args:
        global_config_path: Override path (for testing).

    Returns:
        Path to the global config file.
    """
    target = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    if not target.exists():
        content = (
            "# resumerag global configuration: model defaults only.\n"
            "# NEVER store API keys here. Use environment variables:\n"
            "#   export OPENAI_API_KEY=sk-...\n"
            "# Local models work through litellm prefixes, e.g. ollama/llama3.2\n"
            "\n"
            "embedding:\n"
            "  model: openai/text-embedding-3-small\n"
            "  dimensions: 1536\n"
            "\n"
            "generation:\n"
            "  model: openai/gpt-4o-mini\n"
        )
        target.write_text(content, encoding="utf-8")
        target.chmod(0o600)

    return target
