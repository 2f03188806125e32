"""Where: src/mbclient/platform/musicbrainz/models.py
What: Minimal pydantic models for WS2 entities, result pages and error envelopes.
Why: Give queries a concrete target type without mirroring the full remote schema.

Entity models keep a handful of core fields and allow everything else
through as extras, so schema additions on the server do not break
parsing.
"""

from __future__ import annotations

from functools import cache
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, create_model


class ErrorEnvelope(BaseModel):
    """Domain error body MusicBrainz sends instead of the requested payload."""

    model_config = ConfigDict(frozen=True)

    error: str
    help: str

    NOT_FOUND: ClassVar[str] = "Not Found"

    def is_not_found(self) -> bool:
        return self.error == self.NOT_FOUND


class MusicBrainzEntity(BaseModel):
    """Base class for entities addressable through ``/ws/2/{api_path}``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    api_path: ClassVar[str] = ""
    api_plural: ClassVar[str] = ""

    id: str
    disambiguation: str | None = None


class Area(MusicBrainzEntity):
    api_path: ClassVar[str] = "area"
    api_plural: ClassVar[str] = "areas"

    name: str
    sort_name: str | None = Field(default=None, alias="sort-name")
    area_type: str | None = Field(default=None, alias="type")


class Artist(MusicBrainzEntity):
    api_path: ClassVar[str] = "artist"
    api_plural: ClassVar[str] = "artists"

    name: str
    sort_name: str | None = Field(default=None, alias="sort-name")
    artist_type: str | None = Field(default=None, alias="type")
    country: str | None = None
    score: int | None = None


class Event(MusicBrainzEntity):
    api_path: ClassVar[str] = "event"
    api_plural: ClassVar[str] = "events"

    name: str
    event_type: str | None = Field(default=None, alias="type")


class Instrument(MusicBrainzEntity):
    api_path: ClassVar[str] = "instrument"
    api_plural: ClassVar[str] = "instruments"

    name: str
    instrument_type: str | None = Field(default=None, alias="type")


class Label(MusicBrainzEntity):
    api_path: ClassVar[str] = "label"
    api_plural: ClassVar[str] = "labels"

    name: str
    sort_name: str | None = Field(default=None, alias="sort-name")
    label_code: int | None = Field(default=None, alias="label-code")


class Place(MusicBrainzEntity):
    api_path: ClassVar[str] = "place"
    api_plural: ClassVar[str] = "places"

    name: str
    address: str | None = None


class Recording(MusicBrainzEntity):
    api_path: ClassVar[str] = "recording"
    api_plural: ClassVar[str] = "recordings"

    title: str
    length: int | None = None
    video: bool | None = None


class Release(MusicBrainzEntity):
    api_path: ClassVar[str] = "release"
    api_plural: ClassVar[str] = "releases"

    title: str
    status: str | None = None
    date: str | None = None
    country: str | None = None
    barcode: str | None = None


class ReleaseGroup(MusicBrainzEntity):
    api_path: ClassVar[str] = "release-group"
    api_plural: ClassVar[str] = "release-groups"

    title: str
    primary_type: str | None = Field(default=None, alias="primary-type")
    first_release_date: str | None = Field(default=None, alias="first-release-date")


class Series(MusicBrainzEntity):
    api_path: ClassVar[str] = "series"
    api_plural: ClassVar[str] = "series"

    name: str
    series_type: str | None = Field(default=None, alias="type")


class Work(MusicBrainzEntity):
    api_path: ClassVar[str] = "work"
    api_plural: ClassVar[str] = "works"

    title: str
    work_type: str | None = Field(default=None, alias="type")
    language: str | None = None
    iswcs: list[str] | None = None


class Url(MusicBrainzEntity):
    api_path: ClassVar[str] = "url"
    api_plural: ClassVar[str] = "urls"

    resource: str


class SearchResult(BaseModel):
    """One page of search hits; subclasses bind ``entities`` to a list key."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    created: str | None = None
    count: int
    offset: int
    entities: list[Any]


class BrowseResult(BaseModel):
    """One page of browse results; subclasses bind keys to an entity name."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    count: int
    offset: int
    entities: list[Any]


@cache
def search_result_model(entity: type[MusicBrainzEntity]) -> type[SearchResult]:
    """Return the ``SearchResult`` subclass reading ``entity.api_plural``."""

    return create_model(
        f"{entity.__name__}SearchResult",
        __base__=SearchResult,
        entities=(list[entity], Field(alias=entity.api_plural)),  # type: ignore[valid-type]
    )


@cache
def browse_result_model(entity: type[MusicBrainzEntity]) -> type[BrowseResult]:
    """Return the ``BrowseResult`` subclass reading ``{path}-count`` style keys."""

    return create_model(
        f"{entity.__name__}BrowseResult",
        __base__=BrowseResult,
        count=(int, Field(alias=f"{entity.api_path}-count")),
        offset=(int, Field(alias=f"{entity.api_path}-offset")),
        entities=(list[entity], Field(alias=entity.api_plural)),  # type: ignore[valid-type]
    )


class CoverartThumbnails(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    small: str | None = None
    large: str | None = None
    res_250: str | None = Field(default=None, alias="250")
    res_500: str | None = Field(default=None, alias="500")
    res_1200: str | None = Field(default=None, alias="1200")


class CoverartImage(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int | str
    image: str
    front: bool
    back: bool
    approved: bool | None = None
    types: list[str] = Field(default_factory=list)
    comment: str | None = None
    thumbnails: CoverartThumbnails | None = None


class CoverartListing(BaseModel):
    """Image index returned by ``/{entity}/{mbid}`` on the Cover Art Archive."""

    model_config = ConfigDict(extra="allow")

    images: list[CoverartImage]
    release: str | None = None


class CoverartResponse(BaseModel):
    """Either the full image listing or the final URL of a single image."""

    url: str
    listing: CoverartListing | None = None


__all__ = [
    "Area",
    "Artist",
    "BrowseResult",
    "CoverartImage",
    "CoverartListing",
    "CoverartResponse",
    "CoverartThumbnails",
    "ErrorEnvelope",
    "Event",
    "Instrument",
    "Label",
    "MusicBrainzEntity",
    "Place",
    "Recording",
    "Release",
    "ReleaseGroup",
    "SearchResult",
    "Series",
    "Url",
    "Work",
    "browse_result_model",
    "search_result_model",
]
