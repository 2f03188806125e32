"""Test configuration management."""

from pathlib import Path

import pytest

from mbclient.config.config import Config
from mbclient.config.paths import default_config_path
from mbclient.config.settings import (
    DEFAULT_MAX_RETRIES,
    MUSICBRAINZ_DOMAIN,
    RATE_LIMIT_CAPACITY,
    RATE_LIMIT_PER_SECOND,
    REQUEST_TIMEOUT_SECONDS,
)


def test_default_config(portable_repo_root: Path) -> None:
    """Default configuration should save to the portable repo location."""

    _ = portable_repo_root
    config = Config()
    assert config.log_file is None
    assert config.musicbrainz_domain == MUSICBRAINZ_DOMAIN
    assert config.max_retries == DEFAULT_MAX_RETRIES

    written = config.save()

    assert written == default_config_path()
    assert written.exists()


def test_save_load_toml(portable_repo_root: Path) -> None:
    """Saving then loading should keep every customised value."""

    _ = portable_repo_root
    original = Config(
        mb_app_name="tagger",
        mb_app_version="2.0",
        mb_contact="mailto:me@example.com",
        musicbrainz_domain="beta.musicbrainz.org",
        max_retries=4,
        rate_limit_enabled=False,
        rate_limit_per_second=0.5,
        log_file=Path("/test/logs/mbclient.log"),
    )
    _ = original.save()

    loaded = Config.load()

    assert loaded == original


def test_missing_file_returns_defaults(tmp_path: Path) -> None:
    assert Config.load(tmp_path / "absent.toml") == Config()


def test_save_escapes_quotes_and_backslashes(tmp_path: Path) -> None:
    target = tmp_path / "config.toml"
    config = Config(mb_contact='say "hi" \\ bye')

    _ = config.save(target)

    assert Config.load(target).mb_contact == 'say "hi" \\ bye'


def test_empty_log_file_string_becomes_none() -> None:
    assert Config(log_file="  ").log_file is None  # pyright: ignore[reportArgumentType]


def test_unknown_keys_are_ignored(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    """Unknown keys should be dropped with a warning rather than failing."""

    target = tmp_path / "config.toml"
    _ = target.write_text('mb_app_name = "tagger"\nlegacy_option = 3\n', encoding="utf-8")

    loaded = Config.load(target)

    assert loaded.mb_app_name == "tagger"
    assert "legacy_option" in caplog.text


def test_invalid_numbers_fall_back_to_defaults(caplog: pytest.LogCaptureFixture) -> None:
    config = Config(max_retries=0, rate_limit_capacity=-1, rate_limit_per_second=0)

    assert config.max_retries == DEFAULT_MAX_RETRIES
    assert config.rate_limit_capacity == RATE_LIMIT_CAPACITY
    assert config.rate_limit_per_second == RATE_LIMIT_PER_SECOND
    assert "Invalid max_retries" in caplog.text


def test_invalid_toml_is_reported(tmp_path: Path) -> None:
    import tomllib

    target = tmp_path / "config.toml"
    _ = target.write_text("mb_app_name = ", encoding="utf-8")

    with pytest.raises(tomllib.TOMLDecodeError):
        _ = Config.load(target)


def test_env_selects_config_file(tmp_path: Path) -> None:
    target = tmp_path / "custom.toml"
    _ = Config(mb_app_name="from-env").save(target)

    loaded = Config.load(env={"MBCLIENT_CONFIG": str(target)})

    assert loaded.mb_app_name == "from-env"


def test_booleans_are_not_accepted_as_numbers(tmp_path: Path) -> None:
    target = tmp_path / "config.toml"
    _ = target.write_text("max_retries = true\nrequest_timeout = false\n", encoding="utf-8")

    loaded = Config.load(target)

    assert loaded.max_retries == DEFAULT_MAX_RETRIES
    assert loaded.request_timeout == REQUEST_TIMEOUT_SECONDS
