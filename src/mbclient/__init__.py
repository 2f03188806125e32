"""Typed, rate-limited client for the MusicBrainz web service."""

from __future__ import annotations

from mbclient.platform.musicbrainz import (
    ApiError,
    BrowseQuery,
    CoverartQuery,
    FetchQuery,
    MalformedResponseError,
    MaxRetriesExceededError,
    MusicBrainzClient,
    MusicBrainzError,
    NotFoundError,
    SearchQuery,
    TransportError,
    UrlLookupQuery,
    create_client,
)

__all__ = [
    "ApiError",
    "BrowseQuery",
    "CoverartQuery",
    "FetchQuery",
    "MalformedResponseError",
    "MaxRetriesExceededError",
    "MusicBrainzClient",
    "MusicBrainzError",
    "NotFoundError",
    "SearchQuery",
    "TransportError",
    "UrlLookupQuery",
    "create_client",
]
