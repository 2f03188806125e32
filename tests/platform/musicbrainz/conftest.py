"""Shared fixtures for MusicBrainz client tests."""

from __future__ import annotations

from typing import Any

import pytest
from fakes import Reply, ScriptedAsyncTransport, ScriptedTransport, SleepRecorder

from mbclient.platform.musicbrainz.client import MusicBrainzClient
from mbclient.platform.musicbrainz.rate_limit import TokenBucket


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_client(sleeps: SleepRecorder) -> Any:
    """Factory building a client around scripted replies with no real waiting."""

    def _factory(*replies: Reply, **overrides: Any) -> tuple[MusicBrainzClient, ScriptedTransport]:
        transport = ScriptedTransport(*replies)
        options: dict[str, Any] = {
            "user_agent": "tests/1.0 (mailto:tests@example.com)",
            "rate_limiter": TokenBucket.disabled(),
            "transport": transport,
            "async_transport": ScriptedAsyncTransport(*replies),
            "sleep": sleeps,
        }
        options.update(overrides)
        return MusicBrainzClient(**options), transport

    return _factory
