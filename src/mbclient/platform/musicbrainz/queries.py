"""Where: src/mbclient/platform/musicbrainz/queries.py
What: Typed query objects for lookups, searches, browses, URL lookups and cover art.
Why: Pair each request URL with the type its response must deserialize into.

Every query exposes ``to_request(client)`` returning a fresh
``RequestDescriptor`` and ``resolve(response)`` turning the raw response
into the typed result (or raising the classified error).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

from mbclient.config.settings import HTTP_ERROR_STATUS, NOT_FOUND_STATUS
from mbclient.platform.logging import logger

from .classifier import resolve_payload
from .errors import ApiError, NotFoundError
from .http_client import TransportResponse
from .models import (
    BrowseResult,
    CoverartListing,
    CoverartResponse,
    MusicBrainzEntity,
    SearchResult,
    Url,
    browse_result_model,
    search_result_model,
)
from .request_builder import (
    CoverartResolution,
    CoverartType,
    RequestDescriptor,
    build_coverart_url,
    build_url_lookup,
    build_ws2_url,
)

if TYPE_CHECKING:
    from .client import MusicBrainzClient

T = TypeVar("T")
R_co = TypeVar("R_co", covariant=True)
E = TypeVar("E", bound=MusicBrainzEntity)


class Query(Protocol[R_co]):
    """Anything the client can execute."""

    def to_request(self, client: MusicBrainzClient) -> RequestDescriptor:
        ...

    def resolve(self, response: TransportResponse) -> R_co:
        ...


def _entity_path(target: Any, path: str | None) -> str:
    if path:
        return path
    api_path = getattr(target, "api_path", "")
    if not api_path:
        raise ValueError(f"{target!r} has no api_path; pass path= explicitly")
    return api_path


@dataclass(slots=True)
class FetchQuery(Generic[T]):
    """Lookup of a single entity by MBID.

    ``target`` is any type pydantic can validate; entity models carry their
    own ``api_path``, other targets need ``path``.
    """

    target: type[T]
    mbid: str
    includes: Sequence[str] = ()
    path: str | None = None

    def to_request(self, client: MusicBrainzClient) -> RequestDescriptor:
        return RequestDescriptor(
            build_ws2_url(
                client.scheme,
                client.domain,
                _entity_path(self.target, self.path),
                mbid=self.mbid,
                includes=self.includes,
            )
        )

    def resolve(self, response: TransportResponse) -> T:
        return resolve_payload(response.body, self.target, url=response.url)


@dataclass(slots=True)
class SearchQuery(Generic[E]):
    """Lucene search against the index of one entity type."""

    target: type[E]
    query: str
    includes: Sequence[str] = ()
    limit: int | None = None
    offset: int | None = None

    def to_request(self, client: MusicBrainzClient) -> RequestDescriptor:
        return RequestDescriptor(
            build_ws2_url(
                client.scheme,
                client.domain,
                _entity_path(self.target, None),
                includes=self.includes,
                limit=self.limit,
                offset=self.offset,
                query=self.query,
            )
        )

    def resolve(self, response: TransportResponse) -> SearchResult:
        return resolve_payload(response.body, search_result_model(self.target), url=response.url)


@dataclass(slots=True)
class BrowseQuery(Generic[E]):
    """Paginated listing of entities directly linked to another entity.

    ``filter_entity`` names the linked entity type (``artist``, ``label``,
    ``release``...) and ``filter_mbid`` its identifier.
    """

    target: type[E]
    filter_entity: str
    filter_mbid: str
    includes: Sequence[str] = ()
    limit: int | None = None
    offset: int | None = None

    def to_request(self, client: MusicBrainzClient) -> RequestDescriptor:
        return RequestDescriptor(
            build_ws2_url(
                client.scheme,
                client.domain,
                _entity_path(self.target, None),
                includes=self.includes,
                filters=[(self.filter_entity, self.filter_mbid)],
                limit=self.limit,
                offset=self.offset,
            )
        )

    def resolve(self, response: TransportResponse) -> BrowseResult:
        return resolve_payload(response.body, browse_result_model(self.target), url=response.url)


@dataclass(slots=True)
class UrlLookupQuery:
    """Lookup of MusicBrainz URL entities by their external resource address."""

    resources: Sequence[str]
    includes: Sequence[str] = ()

    def to_request(self, client: MusicBrainzClient) -> RequestDescriptor:
        return RequestDescriptor(
            build_url_lookup(client.scheme, client.domain, self.resources, includes=self.includes)
        )

    def resolve(self, response: TransportResponse) -> Url | BrowseResult:
        if len(self.resources) == 1:
            return resolve_payload(response.body, Url, url=response.url)
        return resolve_payload(response.body, browse_result_model(Url), url=response.url)


@dataclass(slots=True)
class CoverartQuery:
    """Cover Art Archive lookup for a release or release group.

    Without an image type the JSON listing is fetched; with one, the final
    URL of that image is returned. Setting the type or the resolution twice
    keeps the latest value and logs a warning. Error statuses raise
    ``NotFoundError`` (404) or ``ApiError`` rather than yielding a URL.
    """

    target: type[MusicBrainzEntity]
    mbid: str
    image_type: CoverartType | None = None
    image_resolution: CoverartResolution | None = None
    path: str | None = field(default=None)

    def _set_type(self, image_type: CoverartType) -> CoverartQuery:
        if self.image_type is not None:
            logger.warning(
                "Cover art type already set to '%s'; overriding with '%s'",
                self.image_type.value,
                image_type.value,
            )
        self.image_type = image_type
        return self

    def front(self) -> CoverartQuery:
        return self._set_type(CoverartType.FRONT)

    def back(self) -> CoverartQuery:
        return self._set_type(CoverartType.BACK)

    def resolution(self, size: int | CoverartResolution) -> CoverartQuery:
        """Select the 250, 500 or 1200 pixel thumbnail."""

        resolution = CoverartResolution(size)
        if self.image_resolution is not None:
            logger.warning(
                "Cover art resolution already set to %d; overriding with %d",
                self.image_resolution.value,
                resolution.value,
            )
        self.image_resolution = resolution
        return self

    def to_request(self, client: MusicBrainzClient) -> RequestDescriptor:
        return RequestDescriptor(
            build_coverart_url(
                client.scheme,
                client.coverart_domain,
                _entity_path(self.target, self.path),
                self.mbid,
                image_type=self.image_type,
                resolution=self.image_resolution,
            )
        )

    def resolve(self, response: TransportResponse) -> CoverartResponse:
        # The archive answers 404 with a plain text body, not an error envelope.
        if response.status == NOT_FOUND_STATUS:
            raise NotFoundError(url=response.url)
        if response.status >= HTTP_ERROR_STATUS:
            raise ApiError(f"HTTP {response.status}", response.text.strip(), url=response.url)
        if self.image_type is not None or self.image_resolution is not None:
            return CoverartResponse(url=response.url)
        listing = resolve_payload(response.body, CoverartListing, url=response.url)
        return CoverartResponse(url=response.url, listing=listing)


__all__ = [
    "BrowseQuery",
    "CoverartQuery",
    "FetchQuery",
    "Query",
    "SearchQuery",
    "UrlLookupQuery",
]
