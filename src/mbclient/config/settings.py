"""Where: src/mbclient/config/settings.py
What: Fixed protocol constants and fallback defaults for the WS2 client.
Why: Keep magic values in one place so feature modules import names, not literals.
Assumptions: - MusicBrainz keeps its 503 + Retry-After throttling contract.
Trade-offs: - Defaults mirror the public rate limit guidance rather than any account tier.
"""

from __future__ import annotations

from typing import Final

# MusicBrainz application identity ------------------------------------------

# MusicBrainz requires a User-Agent of the form:
#   "AppName/AppVersion (contact-url-or-email)"
# See: https://musicbrainz.org/doc/MusicBrainz_API/Rate_Limiting#Provide_meaningful_User-Agent_strings

DEFAULT_APP_NAME: Final[str] = "mbclient"
DEFAULT_APP_VERSION: Final[str] = "0.1.0"
ENV_USER_AGENT: Final[str] = "MUSICBRAINZ_USER_AGENT"


# Remote endpoints ------------------------------------------------------------

DEFAULT_SCHEME: Final[str] = "https"
MUSICBRAINZ_DOMAIN: Final[str] = "musicbrainz.org"
COVERART_DOMAIN: Final[str] = "coverartarchive.org"
API_ROOT_SEGMENT: Final[str] = "ws/2"
FORMAT_JSON: Final[str] = "json"
INCLUDE_SEPARATOR: Final[str] = "+"

# Search and browse page size bounds accepted by WS2.
PAGE_LIMIT_MIN: Final[int] = 1
PAGE_LIMIT_MAX: Final[int] = 100


# Dispatch policy -------------------------------------------------------------

# Status MusicBrainz answers with when a client exceeds its request budget.
HTTP_RATELIMIT_CODE: Final[int] = 503
NOT_FOUND_STATUS: Final[int] = 404
HTTP_ERROR_STATUS: Final[int] = 400
DEFAULT_MAX_RETRIES: Final[int] = 10

# Extra second slept on top of Retry-After so the retry lands past the window.
RETRY_AFTER_PADDING_SECONDS: Final[int] = 1

# Token bucket: bursts of 5, then 1 request per second.
RATE_LIMIT_CAPACITY: Final[int] = 5
RATE_LIMIT_PER_SECOND: Final[float] = 1.0

# (connect, read) timeouts handed to the transports.
REQUEST_TIMEOUT_SECONDS: Final[float] = 15.0
CONNECT_TIMEOUT_SECONDS: Final[float] = 5.0


__all__ = [
    "API_ROOT_SEGMENT",
    "CONNECT_TIMEOUT_SECONDS",
    "COVERART_DOMAIN",
    "DEFAULT_APP_NAME",
    "DEFAULT_APP_VERSION",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_SCHEME",
    "ENV_USER_AGENT",
    "FORMAT_JSON",
    "HTTP_ERROR_STATUS",
    "HTTP_RATELIMIT_CODE",
    "INCLUDE_SEPARATOR",
    "MUSICBRAINZ_DOMAIN",
    "NOT_FOUND_STATUS",
    "PAGE_LIMIT_MAX",
    "PAGE_LIMIT_MIN",
    "RATE_LIMIT_CAPACITY",
    "RATE_LIMIT_PER_SECOND",
    "REQUEST_TIMEOUT_SECONDS",
    "RETRY_AFTER_PADDING_SECONDS",
]
