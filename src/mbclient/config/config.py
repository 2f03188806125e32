"""Configuration management for mbclient."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

from mbclient.config.file_ops import write_text_file
from mbclient.config.paths import default_config_path
from mbclient.config.settings import (
    COVERART_DOMAIN,
    DEFAULT_APP_NAME,
    DEFAULT_APP_VERSION,
    DEFAULT_MAX_RETRIES,
    MUSICBRAINZ_DOMAIN,
    RATE_LIMIT_CAPACITY,
    RATE_LIMIT_PER_SECOND,
    REQUEST_TIMEOUT_SECONDS,
)
from mbclient.platform.logging import logger


def _path_field(default: Path | None = None) -> Any:
    """Create a field for Path objects with proper conversion.

    Args:
        default: Default value for the field.

    Returns:
        Field with proper metadata for path handling.
    """
    return field(default=default, metadata={"path": True})


def _is_number(value: Any, *, integral: bool = False) -> bool:
    """Return True for ints (or floats unless ``integral``), never for booleans."""
    if isinstance(value, bool):
        return False
    return isinstance(value, int) if integral else isinstance(value, (int, float))


@dataclass
class Config:
    """Client configuration."""

    # MusicBrainz application identity
    mb_app_name: str = DEFAULT_APP_NAME
    mb_app_version: str = DEFAULT_APP_VERSION
    mb_contact: str = ""

    # Remote endpoints
    musicbrainz_domain: str = MUSICBRAINZ_DOMAIN
    coverart_domain: str = COVERART_DOMAIN

    # Dispatch policy
    max_retries: int = DEFAULT_MAX_RETRIES
    rate_limit_enabled: bool = True
    rate_limit_capacity: int = RATE_LIMIT_CAPACITY
    rate_limit_per_second: float = RATE_LIMIT_PER_SECOND
    request_timeout: float = REQUEST_TIMEOUT_SECONDS

    # Log file path
    log_file: Path | None = _path_field()

    def __post_init__(self) -> None:
        """Convert string paths and clamp numeric options to usable values.

        Only fields flagged with ``metadata={"path": True}`` are converted,
        and numeric options falling outside their valid range revert to the
        defaults from ``mbclient.config.settings``.
        """
        for f in fields(self):
            if not f.metadata.get("path", False):
                continue
            value = getattr(self, f.name)
            if isinstance(value, str):
                setattr(self, f.name, Path(value) if value.strip() else None)

        if not _is_number(self.max_retries, integral=True) or self.max_retries < 1:
            logger.warning("Invalid max_retries %r; using %d", self.max_retries, DEFAULT_MAX_RETRIES)
            self.max_retries = DEFAULT_MAX_RETRIES
        if not _is_number(self.rate_limit_capacity, integral=True) or self.rate_limit_capacity < 1:
            logger.warning(
                "Invalid rate_limit_capacity %r; using %d",
                self.rate_limit_capacity,
                RATE_LIMIT_CAPACITY,
            )
            self.rate_limit_capacity = RATE_LIMIT_CAPACITY
        if not _is_number(self.rate_limit_per_second) or self.rate_limit_per_second <= 0:
            logger.warning(
                "Invalid rate_limit_per_second %r; using %s",
                self.rate_limit_per_second,
                RATE_LIMIT_PER_SECOND,
            )
            self.rate_limit_per_second = RATE_LIMIT_PER_SECOND
        if not _is_number(self.request_timeout) or self.request_timeout <= 0:
            logger.warning(
                "Invalid request_timeout %r; using %s",
                self.request_timeout,
                REQUEST_TIMEOUT_SECONDS,
            )
            self.request_timeout = REQUEST_TIMEOUT_SECONDS

    def save(self, path: Path | None = None) -> Path:
        """Save configuration to file.

        Args:
            path: Destination file. Defaults to ``default_config_path()``.

        Returns:
            Path: The file that was written.
        """
        config_dict = asdict(self)

        for key, value in config_dict.items():
            if isinstance(value, Path):
                config_dict[key] = str(value)

        target = path if path is not None else default_config_path()
        try:
            write_text_file(target, self._render_toml(config_dict))
        except OSError as e:
            logger.error("Failed to save configuration: %s", e)
            raise
        logger.info("Configuration saved to %s", target)
        return target

    def _render_toml(self, config: dict[str, Any]) -> str:
        """Render configuration as TOML with inline guidance."""

        lines: list[str] = []

        lines.append("# mbclient Configuration File")
        lines.append("")

        lines.append("# MusicBrainz application identity")
        lines.append("# Sent as 'name/version (contact)' in the User-Agent header")
        lines.append(f"mb_app_name = {self._format_toml_value(config['mb_app_name'])}")
        lines.append(f"mb_app_version = {self._format_toml_value(config['mb_app_version'])}")
        lines.append(f"mb_contact = {self._format_toml_value(config['mb_contact'])}")
        lines.append("")

        lines.append("# Remote endpoints")
        lines.append(
            f"musicbrainz_domain = {self._format_toml_value(config['musicbrainz_domain'])}"
        )
        lines.append(f"coverart_domain = {self._format_toml_value(config['coverart_domain'])}")
        lines.append("")

        lines.append("# Retry and rate limiting")
        lines.append("# The bucket holds rate_limit_capacity tokens and refills")
        lines.append("# rate_limit_per_second tokens every second")
        lines.append(f"max_retries = {self._format_toml_value(config['max_retries'])}")
        lines.append(
            f"rate_limit_enabled = {self._format_toml_value(config['rate_limit_enabled'])}"
        )
        lines.append(
            f"rate_limit_capacity = {self._format_toml_value(config['rate_limit_capacity'])}"
        )
        lines.append(
            f"rate_limit_per_second = {self._format_toml_value(config['rate_limit_per_second'])}"
        )
        lines.append(f"request_timeout = {self._format_toml_value(config['request_timeout'])}")
        lines.append("")

        lines.append("# Log file path (optional)")
        lines.append('# Example: log_file = "/path/to/logs/mbclient.log"')
        if config["log_file"] is not None:
            lines.append(f"log_file = {self._format_toml_value(config['log_file'])}")
        lines.append("")

        return "\n".join(lines)

    def _format_toml_value(self, value: Any) -> str:
        """Format a value for TOML serialization.

        Args:
            value: Value to format

        Returns:
            str: Formatted value
        """
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, Path)):
            escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        return str(value)

    @classmethod
    def load(
        cls,
        path: Path | str | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> Config:
        """Load configuration from file.

        Args:
            path: Explicit config file. Falls back to ``MBCLIENT_CONFIG`` and
                then to the portable repository location.
            env: Environment mapping used for the ``MBCLIENT_CONFIG`` lookup.

        Returns:
            Config: Loaded configuration, or defaults when no file exists.
        """
        config_file = Path(path).expanduser().resolve() if path is not None else default_config_path(env)

        if not config_file.exists():
            logger.debug("No configuration at %s; using defaults", config_file)
            return cls()

        try:
            with open(config_file, "rb") as f:
                config_dict = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.error("Failed to load configuration: %s", e)
            raise

        known = {f.name for f in fields(cls)}
        for key in sorted(set(config_dict) - known):
            logger.warning("Ignoring unknown configuration key '%s' in %s", key, config_file)
            del config_dict[key]

        logger.info("Configuration loaded from %s", config_file)
        return cls(**config_dict)


__all__ = ["Config"]
