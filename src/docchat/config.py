"""docchat configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site — not in this module)
  2. Environment variables  (DOCCHAT_MAX_FILE_SIZE, DOCCHAT_MAX_CONTENT_LENGTH,
     DOCCHAT_WEB_TIMEOUT)
  3. Per-project docchat.yaml  (current working directory)
  4. Global ~/.docchat/config.yaml
  5. Hardcoded defaults

All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".docchat"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "docchat.yaml"

# Known top-level sections — unknown keys produce a warning
_KNOWN_SECTIONS: frozenset[str] = frozenset(["ingest", "web"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file or env var contains an invalid value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class IngestCfg:
    """Upload limits (docchat.yaml: ingest:)."""

    max_file_size: int = 10 * 1024 * 1024  # 10 MB
    max_content_length: int = 500_000  # characters


@dataclass
class WebCfg:
    """Default scraper limits (docchat.yaml: web:)."""

    timeout: float = 30.0
    max_bytes: int = 5 * 1024 * 1024
    max_redirects: int = 3
    user_agent: str = "docchat/0.1"


@dataclass
class DocchatConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    ingest: IngestCfg = field(default_factory=IngestCfg)
    web: WebCfg = field(default_factory=WebCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def _validate(cfg: DocchatConfig) -> None:
    if cfg.ingest.max_file_size < 1:
        raise ConfigError("ingest.max_file_size must be >= 1")
    if cfg.ingest.max_content_length < 1:
        raise ConfigError("ingest.max_content_length must be >= 1")
    if cfg.web.timeout <= 0:
        raise ConfigError("web.timeout must be > 0")
    if cfg.web.max_bytes < 1:
        raise ConfigError("web.max_bytes must be >= 1")
    if cfg.web.max_redirects < 0:
        raise ConfigError("web.max_redirects must be >= 0")


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


def _cfg_from_dict(data: dict[str, Any]) -> DocchatConfig:
    """Build a *DocchatConfig* from a merged raw YAML dict."""
    cfg = DocchatConfig()

    try:
        if "ingest" in data:
            i = data["ingest"] or {}
            cfg.ingest = IngestCfg(
                max_file_size=int(i.get("max_file_size", cfg.ingest.max_file_size)),
                max_content_length=int(
                    i.get("max_content_length", cfg.ingest.max_content_length)
                ),
            )

        if "web" in data:
            w = data["web"] or {}
            cfg.web = WebCfg(
                timeout=float(w.get("timeout", cfg.web.timeout)),
                max_bytes=int(w.get("max_bytes", cfg.web.max_bytes)),
                max_redirects=int(w.get("max_redirects", cfg.web.max_redirects)),
                user_agent=str(w.get("user_agent", cfg.web.user_agent)),
            )
    except (TypeError, ValueError, AttributeError) as exc:
        raise ConfigError(f"Invalid config value: {exc}") from exc

    return cfg


def _env_number(name: str, convert: type) -> Any:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        return convert(raw)
    except ValueError as exc:
        raise ConfigError(f"Environment variable {name} must be a number, got {raw!r}") from exc


def _apply_env_overrides(cfg: DocchatConfig) -> DocchatConfig:
    """Apply DOCCHAT_* environment variable overrides."""
    if (value := _env_number("DOCCHAT_MAX_FILE_SIZE", int)) is not None:
        cfg.ingest.max_file_size = value
    if (value := _env_number("DOCCHAT_MAX_CONTENT_LENGTH", int)) is not None:
        cfg.ingest.max_content_length = value
    if (value := _env_number("DOCCHAT_WEB_TIMEOUT", float)) is not None:
        cfg.web.timeout = value
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> DocchatConfig:
    """Load and return a merged *DocchatConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *docchat.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Returns:
        Fully merged *DocchatConfig* with env var overrides applied.

    Raises:
        ConfigError: If any layer holds a non-numeric or out-of-range value.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    if global_path.exists():
        raw_global = yaml.safe_load(global_path.read_text(encoding="utf-8")) or {}
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = yaml.safe_load(project_cfg_path.read_text(encoding="utf-8")) or {}
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)
    cfg = _apply_env_overrides(cfg)
    _validate(cfg)
    return cfg
