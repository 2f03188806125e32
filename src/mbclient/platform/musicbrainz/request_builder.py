"""Where: src/mbclient/platform/musicbrainz/request_builder.py
What: Pure construction of WS2 and Cover Art Archive request URLs.
Why: Keep URL shape rules deterministic and testable without any I/O.

Include order is preserved verbatim because MusicBrainz shapes the
response by it; nothing here sorts or de-duplicates parameters.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Final
from urllib.parse import quote

from mbclient.config.settings import (
    API_ROOT_SEGMENT,
    FORMAT_JSON,
    INCLUDE_SEPARATOR,
    PAGE_LIMIT_MAX,
    PAGE_LIMIT_MIN,
)

_HTTP_GET: Final[str] = "GET"


class CoverartType(str, Enum):
    """Which side of the release the image shows."""

    FRONT = "front"
    BACK = "back"


class CoverartResolution(int, Enum):
    """Thumbnail sizes served by the Cover Art Archive."""

    RES_250 = 250
    RES_500 = 500
    RES_1200 = 1200


@dataclass(slots=True)
class RequestDescriptor:
    """One logical GET request and the number of times it has been sent."""

    url: str
    method: str = _HTTP_GET
    attempts: int = 0


def _encode(value: str) -> str:
    return quote(value, safe="")


def _join_includes(includes: Sequence[str]) -> str:
    return INCLUDE_SEPARATOR.join(_encode(include) for include in includes)


def _validate_page(limit: int | None, offset: int | None) -> None:
    if limit is not None and not PAGE_LIMIT_MIN <= limit <= PAGE_LIMIT_MAX:
        raise ValueError(f"limit must be between {PAGE_LIMIT_MIN} and {PAGE_LIMIT_MAX}, got {limit}")
    if offset is not None and offset < 0:
        raise ValueError(f"offset must not be negative, got {offset}")


def build_ws2_url(
    scheme: str,
    domain: str,
    path: str,
    *,
    mbid: str | None = None,
    includes: Sequence[str] = (),
    filters: Iterable[tuple[str, str]] = (),
    limit: int | None = None,
    offset: int | None = None,
    query: str | None = None,
) -> str:
    """Return ``{scheme}://{domain}/ws/2/{path}[/{mbid}]?fmt=json[...]``.

    Optional parameters are appended in a fixed order (``inc``, browse
    filters, ``limit``, ``offset``, ``query``) and only when present.

    Raises:
        ValueError: ``limit`` is outside 1..100 or ``offset`` is negative.
    """

    _validate_page(limit, offset)

    url = f"{scheme}://{domain}/{API_ROOT_SEGMENT}/{path.strip('/')}"
    if mbid:
        url += f"/{_encode(mbid)}"

    params: list[str] = [f"fmt={FORMAT_JSON}"]
    if includes:
        params.append(f"inc={_join_includes(includes)}")
    for name, value in filters:
        params.append(f"{_encode(name)}={_encode(value)}")
    if limit is not None:
        params.append(f"limit={limit}")
    if offset is not None:
        params.append(f"offset={offset}")
    if query is not None:
        params.append(f"query={_encode(query)}")

    return f"{url}?{'&'.join(params)}"


def build_url_lookup(
    scheme: str,
    domain: str,
    resources: Sequence[str],
    *,
    includes: Sequence[str] = (),
) -> str:
    """Return the ``/ws/2/url`` lookup for one or more external resource URLs."""

    if not resources:
        raise ValueError("at least one resource URL is required")
    return build_ws2_url(
        scheme,
        domain,
        "url",
        includes=includes,
        filters=[("resource", resource) for resource in resources],
    )


def build_coverart_url(
    scheme: str,
    domain: str,
    path: str,
    mbid: str,
    *,
    image_type: CoverartType | None = None,
    resolution: CoverartResolution | None = None,
) -> str:
    """Return ``{scheme}://{domain}/{path}/{mbid}[/{front|back}[-{res}]]``.

    A resolution without an image type implies the front cover.
    """

    url = f"{scheme}://{domain}/{path.strip('/')}/{_encode(mbid)}"
    if image_type is None and resolution is not None:
        image_type = CoverartType.FRONT
    if image_type is not None:
        url += f"/{image_type.value}"
        if resolution is not None:
            url += f"-{resolution.value}"
    return url


def get_request(url: str) -> RequestDescriptor:
    """Wrap a prebuilt URL into a fresh descriptor."""

    return RequestDescriptor(url=url)


__all__ = [
    "CoverartResolution",
    "CoverartType",
    "RequestDescriptor",
    "build_coverart_url",
    "build_url_lookup",
    "build_ws2_url",
    "get_request",
]
