"""Scripted transports and sleepers used by the MusicBrainz client tests."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from mbclient.platform.musicbrainz.errors import TransportError
from mbclient.platform.musicbrainz.http_client import TransportResponse
from mbclient.platform.musicbrainz.request_builder import RequestDescriptor

Reply = TransportResponse | TransportError


def make_response(
    status: int = 200,
    body: Any = None,
    *,
    url: str = "https://musicbrainz.org/ws/2/artist",
    headers: Mapping[str, str] | None = None,
) -> TransportResponse:
    """Build a response; non-bytes bodies are JSON encoded."""

    if isinstance(body, bytes):
        raw = body
    elif isinstance(body, str):
        raw = body.encode("utf-8")
    else:
        raw = json.dumps(body if body is not None else {}).encode("utf-8")
    return TransportResponse(
        status=status,
        body=raw,
        url=url,
        headers=TransportResponse.normalize_headers((headers or {}).items()),
    )


def throttled(retry_after: str | None = "1") -> TransportResponse:
    headers = {"Retry-After": retry_after} if retry_after is not None else {}
    return make_response(503, b"", headers=headers)


class ScriptedTransport:
    """Blocking transport replaying a fixed list of replies."""

    def __init__(self, *replies: Reply) -> None:
        self.replies: list[Reply] = list(replies)
        self.requests: list[str] = []
        self.headers: list[dict[str, str]] = []
        self.closed: bool = False

    def _next(self, request: RequestDescriptor, headers: Mapping[str, str]) -> TransportResponse:
        self.requests.append(request.url)
        self.headers.append(dict(headers))
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, TransportError):
            raise reply
        return reply

    def send(self, request: RequestDescriptor, headers: Mapping[str, str]) -> TransportResponse:
        return self._next(request, headers)

    def close(self) -> None:
        self.closed = True


class ScriptedAsyncTransport(ScriptedTransport):
    """Async flavour of ``ScriptedTransport``."""

    async def send(  # pyright: ignore[reportIncompatibleMethodOverride]
        self, request: RequestDescriptor, headers: Mapping[str, str]
    ) -> TransportResponse:
        return self._next(request, headers)

    async def aclose(self) -> None:
        self.closed = True


class SleepRecorder:
    """Sleeper that records durations instead of waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class AsyncSleepRecorder(SleepRecorder):
    async def __call__(self, seconds: float) -> None:  # pyright: ignore[reportIncompatibleMethodOverride]
        self.calls.append(seconds)
