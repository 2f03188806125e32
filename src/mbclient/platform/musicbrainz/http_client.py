"""Where: src/mbclient/platform/musicbrainz/http_client.py
What: Blocking (requests) and async (httpx) transports performing one GET attempt.
Why: Decouple network libraries from the retry loop and the response classifier.

A transport sends exactly one request and either returns the response,
whatever its status, or raises ``TransportError``. Timeouts and
connection resets are flagged retryable; TLS, DNS, invalid URLs and
every other library failure are not.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol, cast

import httpx
import requests

from mbclient.config.settings import CONNECT_TIMEOUT_SECONDS, REQUEST_TIMEOUT_SECONDS
from mbclient.platform.logging import logger

from .errors import TransportError
from .request_builder import RequestDescriptor


@dataclass(slots=True, frozen=True)
class TransportResponse:
    """Represent an HTTP response relevant to the MusicBrainz client."""

    status: int
    body: bytes
    url: str
    headers: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def normalize_headers(items: Iterable[tuple[str, str]]) -> dict[str, str]:
        """Lower-case header names so lookups ignore the server's casing."""

        return {str(key).lower(): str(value) for key, value in items}

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class Transport(Protocol):
    """Protocol for blocking transports."""

    def send(self, request: RequestDescriptor, headers: Mapping[str, str]) -> TransportResponse:
        ...

    def close(self) -> None:
        ...


class AsyncTransport(Protocol):
    """Protocol for transports driven by an asyncio event loop."""

    async def send(self, request: RequestDescriptor, headers: Mapping[str, str]) -> TransportResponse:
        ...

    async def aclose(self) -> None:
        ...


def caused_by_connection_reset(exc: BaseException) -> bool:
    """Return True when a ``ConnectionResetError`` sits anywhere in the chain.

    HTTP libraries wrap the socket error several layers deep, sometimes as
    ``__cause__``/``__context__`` and sometimes as an exception argument.
    """

    pending: list[BaseException] = [exc]
    seen: set[int] = set()
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, ConnectionResetError):
            return True
        if current.__cause__ is not None:
            pending.append(current.__cause__)
        if current.__context__ is not None:
            pending.append(current.__context__)
        pending.extend(arg for arg in current.args if isinstance(arg, BaseException))
    return False


class RequestsTransport:
    """Perform blocking GET requests through a shared ``requests.Session``."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        connect_timeout: float = CONNECT_TIMEOUT_SECONDS,
    ) -> None:
        self._session: requests.Session = session if session is not None else requests.Session()
        self._timeout: tuple[float, float] = (connect_timeout, timeout)

    def send(self, request: RequestDescriptor, headers: Mapping[str, str]) -> TransportResponse:
        try:
            response = self._session.request(
                request.method,
                request.url,
                headers=dict(headers),
                timeout=self._timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise self._classify_error(exc, request.url) from exc

        header_items = cast(Iterable[tuple[str, str]], response.headers.items())
        return TransportResponse(
            status=int(response.status_code),
            body=response.content,
            url=str(response.url),
            headers=TransportResponse.normalize_headers(header_items),
        )

    @staticmethod
    def _classify_error(exc: requests.exceptions.RequestException, url: str) -> TransportError:
        # SSLError and ConnectTimeout both subclass ConnectionError; order matters.
        if isinstance(exc, requests.exceptions.SSLError):
            retryable = False
        elif isinstance(exc, requests.exceptions.Timeout):
            retryable = True
        elif isinstance(exc, requests.exceptions.ChunkedEncodingError):
            retryable = True
        elif isinstance(exc, requests.exceptions.ConnectionError):
            retryable = caused_by_connection_reset(exc)
        else:
            retryable = False
        logger.debug("requests transport error (retryable=%s): %s", retryable, exc)
        return TransportError(str(exc) or type(exc).__name__, retryable=retryable, url=url)

    def close(self) -> None:
        self._session.close()


class HTTPXTransport:
    """Perform async GET requests through a lazily created ``httpx.AsyncClient``."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        connect_timeout: float = CONNECT_TIMEOUT_SECONDS,
    ) -> None:
        self._client: httpx.AsyncClient | None = client
        self._timeout: httpx.Timeout = httpx.Timeout(timeout, connect=connect_timeout)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)
        return self._client

    async def send(self, request: RequestDescriptor, headers: Mapping[str, str]) -> TransportResponse:
        client = self._get_client()
        try:
            response = await client.request(
                request.method,
                request.url,
                headers=dict(headers),
                follow_redirects=True,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise self._classify_error(exc, request.url) from exc

        return TransportResponse(
            status=response.status_code,
            body=response.content,
            url=str(response.url),
            headers=TransportResponse.normalize_headers(response.headers.items()),
        )

    @staticmethod
    def _classify_error(exc: httpx.HTTPError | httpx.InvalidURL, url: str) -> TransportError:
        if isinstance(exc, httpx.TimeoutException):
            retryable = True
        elif isinstance(exc, (httpx.ReadError, httpx.WriteError, httpx.RemoteProtocolError)):
            retryable = True
        elif isinstance(exc, httpx.ConnectError):
            retryable = caused_by_connection_reset(exc)
        else:
            retryable = False
        logger.debug("httpx transport error (retryable=%s): %s", retryable, exc)
        return TransportError(str(exc) or type(exc).__name__, retryable=retryable, url=url)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


__all__ = [
    "AsyncTransport",
    "HTTPXTransport",
    "RequestsTransport",
    "Transport",
    "TransportResponse",
    "caused_by_connection_reset",
]
