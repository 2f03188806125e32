"""Where: src/mbclient/platform/musicbrainz/dispatcher.py
What: Retry state machine shared by the blocking and the asyncio client paths.
Why: One canonical loop; only the primitives that suspend differ per driver.

``retry_loop`` is a generator that never performs I/O itself. It yields
effects (take a rate-limit token, send one attempt, back off) and
receives each effect's result. ``dispatch_blocking`` executes the
effects with threads and ``time.sleep``; ``dispatch_async`` awaits them.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Generator, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from math import ceil
from typing import Final

from mbclient.config.settings import (
    DEFAULT_MAX_RETRIES,
    HTTP_RATELIMIT_CODE,
    RETRY_AFTER_PADDING_SECONDS,
)
from mbclient.platform.logging import logger

from .errors import MaxRetriesExceededError, RetryAfterError, TransportError
from .http_client import AsyncTransport, Transport, TransportResponse
from .rate_limit import TokenBucket
from .request_builder import RequestDescriptor

# Effects ---------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class AcquireToken:
    """Wait for the shared rate limiter."""


@dataclass(slots=True, frozen=True)
class SendAttempt:
    """Send ``request`` once; the driver replies with a response or a ``TransportError``."""

    request: RequestDescriptor


@dataclass(slots=True, frozen=True)
class Backoff:
    """Sleep before the next attempt, as directed by the server."""

    seconds: float


Effect = AcquireToken | SendAttempt | Backoff

# Attempt outcomes ------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class Received:
    response: TransportResponse


@dataclass(slots=True, frozen=True)
class Throttled:
    retry_after_seconds: int


@dataclass(slots=True, frozen=True)
class TransientFailure:
    error: TransportError


@dataclass(slots=True, frozen=True)
class FatalFailure:
    error: TransportError


AttemptOutcome = Received | Throttled | TransientFailure | FatalFailure

_ACQUIRE: Final[AcquireToken] = AcquireToken()


def parse_retry_after(value: str | None) -> int | None:
    """Return the ``Retry-After`` delay in whole seconds, or None when unusable.

    Integer seconds are the MusicBrainz format; HTTP-dates are accepted
    too and rounded up.
    """
    if value is None:
        return None
    stripped = value.strip()
    if stripped.isdigit():
        return int(stripped)
    try:
        dt = parsedate_to_datetime(stripped)
    except (TypeError, ValueError, IndexError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    delta = (dt - datetime.now(timezone.utc)).total_seconds()
    return max(0, ceil(delta))


def classify_attempt(
    reply: TransportResponse | TransportError,
    *,
    throttle_status: int = HTTP_RATELIMIT_CODE,
) -> AttemptOutcome:
    """Name the transport-level outcome of a single attempt."""

    if isinstance(reply, TransportError):
        if reply.retryable:
            return TransientFailure(reply)
        return FatalFailure(reply)

    if reply.status != throttle_status:
        return Received(reply)

    raw = reply.header("Retry-After")
    seconds = parse_retry_after(raw)
    if seconds is None:
        return FatalFailure(RetryAfterError(raw, url=reply.url))
    return Throttled(seconds)


def retry_loop(
    request: RequestDescriptor,
    *,
    max_retries: int = DEFAULT_MAX_RETRIES,
    throttle_status: int = HTTP_RATELIMIT_CODE,
) -> Generator[Effect, TransportResponse | TransportError | None, TransportResponse]:
    """Drive ``request`` to a response worth classifying.

    Returns:
        TransportResponse: The first response that is not a throttling answer.

    Raises:
        TransportError: A non-retryable transport failure (including
            ``RetryAfterError``). Raised immediately, whatever budget remains.
        MaxRetriesExceededError: ``max_retries`` attempts were spent on
            transient failures and throttling.
    """

    url = request.url
    while request.attempts < max_retries:
        yield _ACQUIRE

        request.attempts += 1
        attempt = request.attempts
        logger.debug(
            "Sending request (attempt %d/%d): %s",
            attempt,
            max_retries,
            url,
            extra={"request_event": "request.attempt", "url": url, "attempt": attempt, "max_retries": max_retries},
        )
        reply = yield SendAttempt(request)
        assert reply is not None, "SendAttempt must be answered with a response or an error"

        match classify_attempt(reply, throttle_status=throttle_status):
            case Received(response=response):
                logger.debug(
                    "Received status %d for %s",
                    response.status,
                    url,
                    extra={
                        "request_event": "request.complete",
                        "url": url,
                        "attempt": attempt,
                        "max_retries": max_retries,
                        "status": response.status,
                    },
                )
                return response
            case FatalFailure(error=error):
                logger.warning(
                    "Request failed: %s (%s)",
                    url,
                    error,
                    extra={
                        "request_event": "request.failed",
                        "url": url,
                        "attempt": attempt,
                        "max_retries": max_retries,
                        "error_message": str(error),
                    },
                )
                raise error
            case TransientFailure(error=error):
                logger.warning(
                    "Transient failure on attempt %d/%d for %s: %s",
                    attempt,
                    max_retries,
                    url,
                    error,
                    extra={
                        "request_event": "request.retry",
                        "url": url,
                        "attempt": attempt,
                        "max_retries": max_retries,
                        "error_message": str(error),
                    },
                )
            case Throttled(retry_after_seconds=retry_after):
                delay = retry_after + RETRY_AFTER_PADDING_SECONDS
                exhausted = request.attempts >= max_retries
                logger.warning(
                    "Rate limited on attempt %d/%d for %s (Retry-After=%ds)",
                    attempt,
                    max_retries,
                    url,
                    retry_after,
                    extra={
                        "request_event": "request.throttled",
                        "url": url,
                        "attempt": attempt,
                        "max_retries": max_retries,
                        "status": throttle_status,
                        "delay_seconds": None if exhausted else delay,
                    },
                )
                if not exhausted:
                    _ = yield Backoff(float(delay))

    logger.error(
        "Giving up on %s after %d attempts",
        url,
        request.attempts,
        extra={
            "request_event": "request.exhausted",
            "url": url,
            "attempt": request.attempts,
            "max_retries": max_retries,
        },
    )
    raise MaxRetriesExceededError(request.attempts, url=url)


def dispatch_blocking(
    request: RequestDescriptor,
    *,
    transport: Transport,
    headers: Mapping[str, str],
    rate_limiter: TokenBucket,
    max_retries: int = DEFAULT_MAX_RETRIES,
    throttle_status: int = HTTP_RATELIMIT_CODE,
    sleep: Callable[[float], None] = time.sleep,
) -> TransportResponse:
    """Run ``retry_loop`` on the calling thread."""

    loop = retry_loop(request, max_retries=max_retries, throttle_status=throttle_status)
    reply: TransportResponse | TransportError | None = None
    try:
        while True:
            effect = loop.send(reply)
            reply = None
            match effect:
                case AcquireToken():
                    rate_limiter.acquire()
                case SendAttempt(request=pending):
                    try:
                        reply = transport.send(pending, headers)
                    except TransportError as exc:
                        reply = exc
                case Backoff(seconds=seconds):
                    sleep(seconds)
    except StopIteration as stop:
        return stop.value


async def dispatch_async(
    request: RequestDescriptor,
    *,
    transport: AsyncTransport,
    headers: Mapping[str, str],
    rate_limiter: TokenBucket,
    max_retries: int = DEFAULT_MAX_RETRIES,
    throttle_status: int = HTTP_RATELIMIT_CODE,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> TransportResponse:
    """Run ``retry_loop`` cooperatively on the running event loop."""

    loop = retry_loop(request, max_retries=max_retries, throttle_status=throttle_status)
    reply: TransportResponse | TransportError | None = None
    try:
        while True:
            effect = loop.send(reply)
            reply = None
            match effect:
                case AcquireToken():
                    await rate_limiter.acquire_async()
                case SendAttempt(request=pending):
                    try:
                        reply = await transport.send(pending, headers)
                    except TransportError as exc:
                        reply = exc
                case Backoff(seconds=seconds):
                    await sleep(seconds)
    except StopIteration as stop:
        return stop.value


__all__ = [
    "AcquireToken",
    "AttemptOutcome",
    "Backoff",
    "Effect",
    "FatalFailure",
    "Received",
    "SendAttempt",
    "Throttled",
    "TransientFailure",
    "classify_attempt",
    "dispatch_async",
    "dispatch_blocking",
    "parse_retry_after",
    "retry_loop",
]
