"""Rich console handler for request dispatch events.

Where: platform/logging/handlers.py
What: Render ``request_event`` log records with icons, colours and compact URLs.
Why: Retry and throttling traces stay readable when many requests interleave.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, override
from urllib.parse import urlsplit

from rich.console import ConsoleRenderable
from rich.logging import RichHandler
from rich.style import Style
from rich.text import Text


class RequestEventRichHandler(RichHandler):
    """Rich handler that renders dispatcher events on a single styled line."""

    _EVENT_STYLES: ClassVar[dict[str, tuple[str, str]]] = {
        "request.attempt": ("📡", "blue"),
        "request.complete": ("✅", "green"),
        "request.throttled": ("⏳", "yellow"),
        "request.retry": ("🔁", "yellow"),
        "request.failed": ("⛔", "red"),
        "request.exhausted": ("❌", "red"),
    }
    _EVENT_LABELS: ClassVar[dict[str, str]] = {
        "request.attempt": "GET ",
        "request.complete": "Received ",
        "request.throttled": "Throttled ",
        "request.retry": "Retrying ",
        "request.failed": "Failed ",
        "request.exhausted": "Gave up ",
    }
    _PATH_SEGMENT_LIMIT: ClassVar[int] = 4
    _QUERY_LIMIT: ClassVar[int] = 60

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Initialize the handler with custom settings.

        Args:
            *args: Positional arguments to pass to RichHandler.
            **kwargs: Keyword arguments to pass to RichHandler.
        """
        kwargs["show_time"] = False
        kwargs["show_path"] = False
        kwargs["show_level"] = False
        kwargs["rich_tracebacks"] = True
        kwargs["markup"] = False
        kwargs["omit_repeated_times"] = False
        super().__init__(*args, **kwargs)

    def _format_url(self, url: str) -> Text:
        """Format a request URL with coloured separators and truncation.

        The host is dimmed, long paths keep only their trailing segments and
        long query strings are cut with an ellipsis.
        """
        parts = urlsplit(url)
        text = Text()
        separator_style = Style(color="magenta")

        if parts.netloc:
            _ = text.append(parts.netloc, style=Style(color="bright_black"))

        segments = [segment for segment in parts.path.split("/") if segment]
        if len(segments) > self._PATH_SEGMENT_LIMIT:
            _ = text.append("/", style=separator_style)
            _ = text.append("…", style=separator_style)
            segments = segments[-self._PATH_SEGMENT_LIMIT:]
        for segment in segments:
            _ = text.append("/", style=separator_style)
            _ = text.append(segment, style=Style(color="white"))

        if parts.query:
            query = parts.query
            if len(query) > self._QUERY_LIMIT:
                query = query[: self._QUERY_LIMIT] + "…"
            _ = text.append("?", style=separator_style)
            _ = text.append(query, style=Style(color="cyan"))
        return text

    def _render_request_event(self, record: logging.LogRecord) -> Text | None:
        """Render structured dispatcher events with dedicated styling."""

        event = getattr(record, "request_event", None)
        if not isinstance(event, str):
            return None

        icon, color = self._EVENT_STYLES.get(event, ("ℹ️", "blue"))
        text = Text()
        _ = text.append(f"{icon} ", style=Style(color=color, bold=True))

        body = Text(style=Style(color=color))
        attempt = getattr(record, "attempt", None)
        max_retries = getattr(record, "max_retries", None)
        if isinstance(attempt, int) and attempt > 0:
            if isinstance(max_retries, int) and max_retries > 0:
                _ = body.append(f"[{attempt}/{max_retries}] ")
            else:
                _ = body.append(f"[{attempt}] ")

        _ = body.append(self._EVENT_LABELS.get(event, ""))

        url = getattr(record, "url", None)
        if url:
            _ = body.append_text(self._format_url(str(url)))

        details: list[str] = []
        status = getattr(record, "status", None)
        if isinstance(status, int) and status > 0:
            details.append(f"status={status}")
        delay = getattr(record, "delay_seconds", None)
        if isinstance(delay, (int, float)):
            details.append(f"sleep={delay:g}s")
        error_message = getattr(record, "error_message", None)
        if error_message:
            details.append(str(error_message))
        if details:
            _ = body.append(" (" + ", ".join(details) + ")")

        _ = text.append_text(body)
        return text

    @override
    def render_message(self, record: logging.LogRecord, message: str) -> ConsoleRenderable:
        """Render message with custom styling for request events."""

        event_text = self._render_request_event(record)
        if event_text is not None:
            return event_text

        return super().render_message(record, message)


__all__ = ["RequestEventRichHandler"]
