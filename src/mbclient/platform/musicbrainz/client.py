"""Where: src/mbclient/platform/musicbrainz/client.py
What: Facade tying request building, dispatch and classification together.
Why: Callers hold one explicit, shareable client instead of hidden module state.

This module delegates specialised responsibilities to smaller helpers:
- ``queries`` / ``request_builder`` turn typed queries into request URLs
- ``dispatcher`` owns the retry loop over the shared ``rate_limit`` bucket
- ``http_client`` performs single attempts with requests or httpx
- ``classifier`` turns bodies into typed values or classified errors
- ``user_agent`` centralises etiquette for outbound requests
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from types import TracebackType
from typing import Any, TypeVar

from pydantic import TypeAdapter

from mbclient.config.config import Config
from mbclient.config.settings import (
    API_ROOT_SEGMENT,
    COVERART_DOMAIN,
    DEFAULT_MAX_RETRIES,
    DEFAULT_SCHEME,
    HTTP_RATELIMIT_CODE,
    MUSICBRAINZ_DOMAIN,
)
from mbclient.platform.logging import logger, setup_logger

from .classifier import resolve_payload
from .dispatcher import dispatch_async, dispatch_blocking
from .http_client import (
    AsyncTransport,
    HTTPXTransport,
    RequestsTransport,
    Transport,
    TransportResponse,
)
from .queries import Query
from .rate_limit import TokenBucket
from .request_builder import RequestDescriptor
from .user_agent import format_user_agent, resolve_user_agent

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class MusicBrainzClient:
    """MusicBrainz WS2 client shared by every caller of an application.

    Instances are immutable; the only mutable state is inside
    ``rate_limiter``, which is safe to share across threads and tasks.
    Blocking methods use ``transport`` and ``sleep``; ``*_async`` methods
    use ``async_transport`` and ``async_sleep``.
    """

    user_agent: str = field(default_factory=resolve_user_agent)
    domain: str = MUSICBRAINZ_DOMAIN
    coverart_domain: str = COVERART_DOMAIN
    scheme: str = DEFAULT_SCHEME
    max_retries: int = DEFAULT_MAX_RETRIES
    throttle_status: int = HTTP_RATELIMIT_CODE
    rate_limiter: TokenBucket = field(default_factory=TokenBucket)
    transport: Transport = field(default_factory=RequestsTransport)
    async_transport: AsyncTransport = field(default_factory=HTTPXTransport)
    sleep: Callable[[float], None] = time.sleep
    async_sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    def __post_init__(self) -> None:
        if self.max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {self.max_retries}")
        if not self.user_agent.strip():
            raise ValueError("MusicBrainz requires a non-empty User-Agent")

    @classmethod
    def for_application(
        cls,
        app_name: str,
        app_version: str,
        contact: str,
        **kwargs: Any,
    ) -> MusicBrainzClient:
        """Build a client whose User-Agent identifies the calling application."""

        return cls(user_agent=format_user_agent(app_name, app_version, contact), **kwargs)

    @property
    def headers(self) -> dict[str, str]:
        return {"Accept": "application/json", "User-Agent": self.user_agent}

    def api_root(self) -> str:
        """The API root, for example ``https://musicbrainz.org/ws/2``."""

        return f"{self.scheme}://{self.domain}/{API_ROOT_SEGMENT}"

    # Raw dispatch ------------------------------------------------------------

    def send(self, request: RequestDescriptor | str) -> TransportResponse:
        """Dispatch ``request`` with retries and return the raw response."""

        descriptor = RequestDescriptor(request) if isinstance(request, str) else request
        return dispatch_blocking(
            descriptor,
            transport=self.transport,
            headers=self.headers,
            rate_limiter=self.rate_limiter,
            max_retries=self.max_retries,
            throttle_status=self.throttle_status,
            sleep=self.sleep,
        )

    async def send_async(self, request: RequestDescriptor | str) -> TransportResponse:
        """Awaitable variant of :meth:`send`."""

        descriptor = RequestDescriptor(request) if isinstance(request, str) else request
        return await dispatch_async(
            descriptor,
            transport=self.async_transport,
            headers=self.headers,
            rate_limiter=self.rate_limiter,
            max_retries=self.max_retries,
            throttle_status=self.throttle_status,
            sleep=self.async_sleep,
        )

    # Typed requests ----------------------------------------------------------

    def get(self, request: RequestDescriptor | str, target: type[T] | TypeAdapter[T]) -> T:
        """Dispatch ``request`` and deserialize the body into ``target``.

        Raises:
            NotFoundError, ApiError, MalformedResponseError, TransportError,
            MaxRetriesExceededError
        """

        response = self.send(request)
        return resolve_payload(response.body, target, url=response.url)

    async def get_async(self, request: RequestDescriptor | str, target: type[T] | TypeAdapter[T]) -> T:
        """Awaitable variant of :meth:`get`."""

        response = await self.send_async(request)
        return resolve_payload(response.body, target, url=response.url)

    def execute(self, query: Query[T]) -> T:
        """Build, dispatch and resolve a typed query."""

        response = self.send(query.to_request(self))
        return query.resolve(response)

    async def execute_async(self, query: Query[T]) -> T:
        """Awaitable variant of :meth:`execute`."""

        response = await self.send_async(query.to_request(self))
        return query.resolve(response)

    # Lifecycle ---------------------------------------------------------------

    def close(self) -> None:
        self.transport.close()

    async def aclose(self) -> None:
        await self.async_transport.aclose()

    def __enter__(self) -> MusicBrainzClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    async def __aenter__(self) -> MusicBrainzClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def create_client(config: Config | None = None, **overrides: Any) -> MusicBrainzClient:
    """Build a client from ``Config`` (loaded from disk when omitted).

    Keyword ``overrides`` replace individual client fields, which is how
    tests inject fake transports.
    """

    cfg = config if config is not None else Config.load()
    if cfg.log_file is not None:
        _ = setup_logger(log_file=cfg.log_file)

    options: dict[str, Any] = {
        "user_agent": resolve_user_agent(cfg.mb_app_name, cfg.mb_app_version, cfg.mb_contact),
        "domain": cfg.musicbrainz_domain,
        "coverart_domain": cfg.coverart_domain,
        "max_retries": cfg.max_retries,
        "rate_limiter": TokenBucket(
            cfg.rate_limit_capacity,
            cfg.rate_limit_per_second,
            enabled=cfg.rate_limit_enabled,
        ),
    }
    if "transport" not in overrides:
        options["transport"] = RequestsTransport(timeout=cfg.request_timeout)
    if "async_transport" not in overrides:
        options["async_transport"] = HTTPXTransport(timeout=cfg.request_timeout)
    options.update(overrides)

    client = MusicBrainzClient(**options)
    logger.debug("MusicBrainz client ready for %s as '%s'", client.api_root(), client.user_agent)
    return client


__all__ = [
    "MusicBrainzClient",
    "create_client",
    "format_user_agent",
]
