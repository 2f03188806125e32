"""Where: src/mbclient/platform/musicbrainz/classifier.py
What: Classify a response body as payload, domain error, or malformed data.
Why: MusicBrainz reuses success statuses for ``{error, help}`` bodies, so only
     the body shape tells a valid payload from a domain error.

Parsing is an ordered list of passes with named outcomes:
1. the caller's target type,
2. the ``ErrorEnvelope`` shape,
3. otherwise ``Malformed`` keeping the first pass's validation error.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from mbclient.platform.logging import logger

from .errors import ApiError, MalformedResponseError, NotFoundError
from .models import ErrorEnvelope

T = TypeVar("T")

_ENVELOPE_ADAPTER: TypeAdapter[ErrorEnvelope] = TypeAdapter(ErrorEnvelope)


@dataclass(slots=True, frozen=True)
class Parsed(Generic[T]):
    value: T


@dataclass(slots=True, frozen=True)
class NotFound:
    error: str
    help: str


@dataclass(slots=True, frozen=True)
class DomainError:
    error: str
    help: str


@dataclass(slots=True, frozen=True)
class Malformed:
    raw_body: str
    error: ValidationError


Classification = Parsed[T] | NotFound | DomainError | Malformed


@lru_cache(maxsize=256)
def _adapter_for(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def type_adapter(target: type[T] | TypeAdapter[T]) -> TypeAdapter[T]:
    """Return a (cached) ``TypeAdapter`` for ``target``."""

    if isinstance(target, TypeAdapter):
        return target
    try:
        return _adapter_for(target)
    except TypeError:
        # Unhashable typing constructs cannot be cached.
        return TypeAdapter(target)


def classify_payload(body: str | bytes, target: type[T] | TypeAdapter[T]) -> Classification[T]:
    """Run the ordered parse passes over ``body`` and name the outcome."""

    try:
        return Parsed(type_adapter(target).validate_json(body))
    except ValidationError as target_error:
        first_error = target_error

    try:
        envelope = _ENVELOPE_ADAPTER.validate_json(body)
    except ValidationError:
        raw = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
        return Malformed(raw_body=raw, error=first_error)

    if envelope.is_not_found():
        return NotFound(error=envelope.error, help=envelope.help)
    return DomainError(error=envelope.error, help=envelope.help)


def unwrap(classification: Classification[T], *, url: str | None = None) -> T:
    """Return the parsed value or raise the matching client error."""

    match classification:
        case Parsed(value=value):
            return value
        case NotFound(help=help_text):
            raise NotFoundError(url=url, help_text=help_text)
        case DomainError(error=error, help=help_text):
            raise ApiError(error, help_text, url=url)
        case Malformed(raw_body=raw_body, error=error):
            logger.warning("Malformed MusicBrainz response for %s: %s", url, error.errors()[:3])
            raise MalformedResponseError(raw_body, error, url=url)
    raise TypeError(f"Unknown classification {classification!r}")


def resolve_payload(body: str | bytes, target: type[T] | TypeAdapter[T], *, url: str | None = None) -> T:
    """Classify ``body`` and unwrap it in one step."""

    return unwrap(classify_payload(body, target), url=url)


__all__ = [
    "Classification",
    "DomainError",
    "Malformed",
    "NotFound",
    "Parsed",
    "classify_payload",
    "resolve_payload",
    "type_adapter",
    "unwrap",
]
