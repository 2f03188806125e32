"""Where: src/mbclient/platform/musicbrainz/errors.py
What: Exception taxonomy raised to callers of the MusicBrainz client.
Why: Callers branch on the failure kind, never on strings or status codes.
"""

from __future__ import annotations

from pydantic import ValidationError


class MusicBrainzError(Exception):
    """Base class for every failure surfaced by the client."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url: str | None = url


class TransportError(MusicBrainzError):
    """The HTTP exchange itself failed.

    ``retryable`` marks timeouts and connection resets; the dispatcher
    retries those and raises everything else immediately.
    """

    def __init__(self, message: str, *, retryable: bool, url: str | None = None) -> None:
        super().__init__(message, url=url)
        self.retryable: bool = retryable


class RetryAfterError(TransportError):
    """A throttling response carried no usable ``Retry-After`` header."""

    def __init__(self, header_value: str | None, *, url: str | None = None) -> None:
        if header_value is None:
            message = "Throttling response without a Retry-After header"
        else:
            message = f"Throttling response with unparseable Retry-After header {header_value!r}"
        super().__init__(message, retryable=False, url=url)
        self.header_value: str | None = header_value


class NotFoundError(MusicBrainzError):
    """MusicBrainz reported that the requested resource does not exist."""

    def __init__(self, *, url: str | None = None, help_text: str = "") -> None:
        super().__init__(f'MusicBrainz returned "Not Found" for {url}', url=url)
        self.help: str = help_text


class ApiError(MusicBrainzError):
    """MusicBrainz answered with a structured ``{error, help}`` envelope."""

    def __init__(self, error: str, help_text: str, *, url: str | None = None) -> None:
        super().__init__(f"MusicBrainz returned an error for {url}: {error}", url=url)
        self.error: str = error
        self.help: str = help_text


class MalformedResponseError(MusicBrainzError):
    """The body matched neither the expected type nor the error envelope.

    ``raw_body`` keeps the payload verbatim and ``validation_error`` keeps
    the failure from parsing the expected type.
    """

    def __init__(
        self,
        raw_body: str,
        validation_error: ValidationError,
        *,
        url: str | None = None,
    ) -> None:
        super().__init__(
            f"The response of {url} could not be deserialized:\n{raw_body}",
            url=url,
        )
        self.raw_body: str = raw_body
        self.validation_error: ValidationError = validation_error


class MaxRetriesExceededError(MusicBrainzError):
    """The attempt budget ran out without a definitive response."""

    def __init__(self, attempts: int, *, url: str | None = None) -> None:
        super().__init__(
            f"Gave up on {url} after {attempts} attempts. Check that the domain is "
            "correct, that MusicBrainz is online, and that the rate limit is respected.",
            url=url,
        )
        self.attempts: int = attempts


__all__ = [
    "ApiError",
    "MalformedResponseError",
    "MaxRetriesExceededError",
    "MusicBrainzError",
    "NotFoundError",
    "RetryAfterError",
    "TransportError",
]
