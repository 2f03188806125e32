"""Where: src/mbclient/platform/musicbrainz/user_agent.py
What: Build MusicBrainz-compliant User-Agent strings.
Why: Centralise etiquette logic shared by transports and client factories.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from mbclient.config.settings import DEFAULT_APP_NAME, DEFAULT_APP_VERSION, ENV_USER_AGENT


def format_user_agent(app_name: str, app_version: str, contact: str) -> str:
    """Return ``App/Version (contact)`` when contact information is available."""

    stripped = contact.strip()
    if stripped:
        return f"{app_name}/{app_version} ({stripped})"
    return f"{app_name}/{app_version}"


def resolve_user_agent(
    app_name: str = DEFAULT_APP_NAME,
    app_version: str = DEFAULT_APP_VERSION,
    contact: str = "",
    *,
    env: Mapping[str, str] | None = None,
) -> str:
    """Provide the user agent that outbound HTTP calls should send.

    ``MUSICBRAINZ_USER_AGENT`` takes precedence over the formatted identity.
    """

    mapping = env if env is not None else os.environ
    override = (mapping.get(ENV_USER_AGENT) or "").strip()
    if override:
        return override
    return format_user_agent(app_name or DEFAULT_APP_NAME, app_version or DEFAULT_APP_VERSION, contact)


__all__ = [
    "format_user_agent",
    "resolve_user_agent",
]
