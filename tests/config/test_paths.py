"""Tests for configuration path resolution helpers."""

from pathlib import Path

from mbclient.config.paths import (
    ENV_CONFIG_PATH,
    default_config_path,
    default_log_dir,
    default_log_file,
    resolve_overridable_path,
)


def test_default_log_paths(portable_repo_root: Path) -> None:
    """Default log locations should live under the repository logs/ folder."""

    expected_dir = (portable_repo_root / "logs").resolve()
    assert default_log_dir() == expected_dir
    assert default_log_file() == expected_dir / "mbclient.log"


def test_default_config_path_uses_repo_root(portable_repo_root: Path) -> None:
    assert default_config_path(env={}) == (portable_repo_root / "config" / "config.toml").resolve()


def test_env_override_wins_over_repo_root(portable_repo_root: Path, tmp_path: Path) -> None:
    """``MBCLIENT_CONFIG`` should redirect the config lookup."""

    _ = portable_repo_root
    override = tmp_path / "elsewhere" / "mb.toml"
    assert default_config_path(env={ENV_CONFIG_PATH: str(override)}) == override.resolve()


def test_blank_env_override_is_ignored(portable_repo_root: Path) -> None:
    assert default_config_path(env={ENV_CONFIG_PATH: "   "}) == (portable_repo_root / "config" / "config.toml").resolve()


def test_explicit_path_beats_environment(tmp_path: Path) -> None:
    explicit = tmp_path / "explicit.toml"

    resolved = resolve_overridable_path(
        explicit_path=explicit,
        env={ENV_CONFIG_PATH: str(tmp_path / "env.toml")},
        env_var=ENV_CONFIG_PATH,
        default_factory=lambda: tmp_path / "default.toml",
    )

    assert resolved == explicit.resolve()
