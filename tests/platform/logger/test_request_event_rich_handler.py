"""Tests for the ``RequestEventRichHandler`` request line rendering."""

from __future__ import annotations

import logging
from io import StringIO
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.text import Text

from mbclient.platform.logging import RequestEventRichHandler, setup_logger


def _make_handler() -> RequestEventRichHandler:
    """Create a handler instance with an in-memory console."""

    console = Console(file=StringIO(), force_terminal=True, soft_wrap=True)
    return RequestEventRichHandler(console=console)


def _build_record(msg: str = "", **extras: Any) -> logging.LogRecord:
    """Create a ``LogRecord`` populated with dispatcher extras for testing."""

    record = logging.LogRecord(
        name="mbclient",
        level=logging.INFO,
        pathname="test",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extras.items():
        setattr(record, key, value)
    return record


def test_render_message_shows_attempt_counter_and_status() -> None:
    handler = _make_handler()
    record = _build_record(
        request_event="request.complete",
        url="https://musicbrainz.org/ws/2/artist/5b11f4ce?fmt=json",
        attempt=2,
        max_retries=10,
        status=200,
    )

    rendered = handler.render_message(record, "")
    assert isinstance(rendered, Text)

    plain = rendered.plain
    assert "[2/10] Received " in plain
    assert "musicbrainz.org/ws/2/artist/5b11f4ce?fmt=json" in plain
    assert "(status=200)" in plain


def test_render_message_reports_backoff_delay() -> None:
    """Throttled events should include the sleep the dispatcher will take."""

    handler = _make_handler()
    record = _build_record(
        request_event="request.throttled",
        url="https://musicbrainz.org/ws/2/release?fmt=json",
        attempt=1,
        max_retries=3,
        status=503,
        delay_seconds=2,
    )

    plain = handler.render_message(record, "").plain  # pyright: ignore[reportAttributeAccessIssue]

    assert "Throttled " in plain
    assert "status=503, sleep=2s" in plain


def test_render_message_truncates_long_paths_and_queries() -> None:
    handler = _make_handler()
    query = "fmt=json&query=" + "x" * 100
    record = _build_record(
        request_event="request.attempt",
        url=f"https://example.org/a/b/c/d/e/f?{query}",
        attempt=1,
        max_retries=1,
    )

    plain = handler.render_message(record, "").plain  # pyright: ignore[reportAttributeAccessIssue]

    assert "example.org/…/c/d/e/f?" in plain
    assert query[:60] + "…" in plain
    assert query not in plain


def test_render_message_includes_error_text() -> None:
    handler = _make_handler()
    record = _build_record(
        request_event="request.failed",
        url="https://musicbrainz.org/ws/2/artist",
        attempt=1,
        max_retries=5,
        error_message="certificate verify failed",
    )

    plain = handler.render_message(record, "").plain  # pyright: ignore[reportAttributeAccessIssue]

    assert "Failed " in plain
    assert "certificate verify failed" in plain


def test_plain_records_fall_back_to_default_rendering() -> None:
    handler = _make_handler()
    record = _build_record(msg="Configuration loaded")

    rendered = handler.render_message(record, "Configuration loaded")

    assert isinstance(rendered, Text)
    assert rendered.plain == "Configuration loaded"


def test_setup_logger_adds_rotating_file_handler(tmp_path: Path) -> None:
    """A log file should add a file handler next to the console handler."""

    log_file = tmp_path / "logs" / "client.log"
    configured = setup_logger(log_file=log_file)
    try:
        assert len(configured.handlers) == 2
        configured.debug("hello file")
        for handler in configured.handlers:
            handler.flush()
        assert "hello file" in log_file.read_text(encoding="utf-8")
    finally:
        _ = setup_logger()
