"""MusicBrainz web service package.

Where: platform/musicbrainz/__init__.py
What: Re-export the client, typed queries, entity models and error types.
Why: Give callers one import path for everything needed to talk to WS2.
"""

from __future__ import annotations

from .client import MusicBrainzClient, create_client
from .errors import (
    ApiError,
    MalformedResponseError,
    MaxRetriesExceededError,
    MusicBrainzError,
    NotFoundError,
    RetryAfterError,
    TransportError,
)
from .http_client import HTTPXTransport, RequestsTransport, TransportResponse
from .models import (
    Area,
    Artist,
    BrowseResult,
    CoverartListing,
    CoverartResponse,
    Event,
    Instrument,
    Label,
    MusicBrainzEntity,
    Place,
    Recording,
    Release,
    ReleaseGroup,
    SearchResult,
    Series,
    Url,
    Work,
)
from .queries import BrowseQuery, CoverartQuery, FetchQuery, SearchQuery, UrlLookupQuery
from .rate_limit import TokenBucket
from .request_builder import CoverartResolution, CoverartType, RequestDescriptor, get_request
from .user_agent import format_user_agent, resolve_user_agent

__all__ = [
    "ApiError",
    "Area",
    "Artist",
    "BrowseQuery",
    "BrowseResult",
    "CoverartListing",
    "CoverartQuery",
    "CoverartResolution",
    "CoverartResponse",
    "CoverartType",
    "Event",
    "FetchQuery",
    "HTTPXTransport",
    "Instrument",
    "Label",
    "MalformedResponseError",
    "MaxRetriesExceededError",
    "MusicBrainzClient",
    "MusicBrainzEntity",
    "MusicBrainzError",
    "NotFoundError",
    "Place",
    "Recording",
    "Release",
    "ReleaseGroup",
    "RequestDescriptor",
    "RequestsTransport",
    "RetryAfterError",
    "SearchQuery",
    "SearchResult",
    "Series",
    "TokenBucket",
    "TransportError",
    "TransportResponse",
    "Url",
    "UrlLookupQuery",
    "Work",
    "create_client",
    "format_user_agent",
    "get_request",
    "resolve_user_agent",
]
