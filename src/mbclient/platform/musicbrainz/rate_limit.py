"""Where: src/mbclient/platform/musicbrainz/rate_limit.py
What: Thread-safe token bucket gating outbound MusicBrainz requests.
Why: MusicBrainz allows short bursts but roughly 1 request per second overall.
"""

from __future__ import annotations

import asyncio
import threading
import time
from collections.abc import Awaitable, Callable
from typing import Final

from mbclient.config.settings import RATE_LIMIT_CAPACITY, RATE_LIMIT_PER_SECOND


class TokenBucket:
    """Token bucket shared by every request of a client.

    The bucket starts full, so up to ``capacity`` requests go out at once
    after an idle period; afterwards tokens come back at
    ``refill_per_second``. Blocking callers sleep the thread, async callers
    await; both reserve through the same locked routine. Waiters are not
    served in FIFO order.
    """

    def __init__(
        self,
        capacity: int = RATE_LIMIT_CAPACITY,
        refill_per_second: float = RATE_LIMIT_PER_SECOND,
        *,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
        sleeper: Callable[[float], None] = time.sleep,
        async_sleeper: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        if refill_per_second <= 0:
            raise ValueError(f"refill_per_second must be positive, got {refill_per_second}")
        self.capacity: Final[int] = capacity
        self.refill_per_second: Final[float] = refill_per_second
        self.enabled: Final[bool] = enabled
        self._clock: Callable[[], float] = clock
        self._sleeper: Callable[[float], None] = sleeper
        self._async_sleeper: Callable[[float], Awaitable[None]] = async_sleeper
        self._lock: Final[threading.Lock] = threading.Lock()
        self._tokens: float = float(capacity)
        self._last_refill: float = clock()

    @classmethod
    def disabled(cls) -> TokenBucket:
        """Return a bucket whose acquisitions never wait."""

        return cls(enabled=False)

    @property
    def available(self) -> float:
        """Tokens currently in the bucket, after refilling up to now."""

        with self._lock:
            self._refill(self._clock())
            return self._tokens

    def _refill(self, now: float) -> None:
        elapsed = now - self._last_refill
        if elapsed > 0:
            self._tokens = min(float(self.capacity), self._tokens + elapsed * self.refill_per_second)
        self._last_refill = max(self._last_refill, now)

    def _reserve(self) -> float:
        """Take a token if one is available, else return seconds until the next one."""

        with self._lock:
            self._refill(self._clock())
            if self._tokens >= 1.0:
                self._tokens -= 1.0
                return 0.0
            return (1.0 - self._tokens) / self.refill_per_second

    def acquire(self) -> None:
        """Block the calling thread until a token has been taken."""

        if not self.enabled:
            return
        while (wait := self._reserve()) > 0:
            self._sleeper(wait)

    async def acquire_async(self) -> None:
        """Suspend the calling task until a token has been taken."""

        if not self.enabled:
            return
        while (wait := self._reserve()) > 0:
            await self._async_sleeper(wait)


__all__ = ["TokenBucket"]
