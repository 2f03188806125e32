"""Shared path utilities for configuration and log locations.

Portable by default: everything lives under the repository root that
contains the running checkout.

- Config: ``<repo_root>/config/config.toml``; ``MBCLIENT_CONFIG`` points
  elsewhere.
- Logs: ``<repo_root>/logs/mbclient.log``.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Final

ENV_CONFIG_PATH: Final[str] = "MBCLIENT_CONFIG"
_REPO_MARKERS: Final[tuple[str, ...]] = ("pyproject.toml", ".git")
_CONFIG_RELATIVE: Final[Path] = Path("config") / "config.toml"
_LOG_DIR_NAME: Final[str] = "logs"
_LOG_FILE_NAME: Final[str] = "mbclient.log"


def resolve_overridable_path(
    *,
    explicit_path: Path | str | None,
    env: Mapping[str, str] | None,
    env_var: str | None,
    default_factory: Callable[[], Path],
) -> Path:
    """Pick the first of explicit path, environment variable, or default.

    Blank environment values count as unset. The result is absolute with
    ``~`` expanded.
    """

    candidate: Path | str | None = explicit_path
    if candidate is None and env_var:
        mapping = env if env is not None else os.environ
        candidate = (mapping.get(env_var) or "").strip() or None
    chosen = Path(candidate) if candidate is not None else default_factory()
    return chosen.expanduser().resolve()


def _detect_repo_root(start: Path | None = None) -> Path:
    """Walk up from ``start`` (default: this file) to the first marker directory.

    Falls back to the current working directory when no ancestor holds
    ``pyproject.toml`` or ``.git``.
    """
    origin = (start or Path(__file__).resolve()).parent
    for directory in (origin, *origin.parents):
        if any((directory / marker).exists() for marker in _REPO_MARKERS):
            return directory
    return Path.cwd()


def default_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Return the TOML config location, honouring ``MBCLIENT_CONFIG``."""

    return resolve_overridable_path(
        explicit_path=None,
        env=env,
        env_var=ENV_CONFIG_PATH,
        default_factory=lambda: _detect_repo_root() / _CONFIG_RELATIVE,
    )


def default_log_dir() -> Path:
    return (_detect_repo_root() / _LOG_DIR_NAME).resolve()


def default_log_file() -> Path:
    """Get the default log file path."""

    return (default_log_dir() / _LOG_FILE_NAME).resolve()


__all__ = [
    "ENV_CONFIG_PATH",
    "default_config_path",
    "default_log_dir",
    "default_log_file",
    "resolve_overridable_path",
]
