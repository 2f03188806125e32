"""Tests for the shared token bucket."""

from __future__ import annotations

import threading
from math import floor

import pytest

from mbclient.platform.musicbrainz.rate_limit import TokenBucket


class FakeClock:
    """Monotonic clock advanced only by the fake sleepers."""

    def __init__(self) -> None:
        self.now: float = 1000.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    async def async_sleep(self, seconds: float) -> None:
        self.sleep(seconds)


def _bucket(clock: FakeClock, **kwargs: object) -> TokenBucket:
    return TokenBucket(
        clock=clock,
        sleeper=clock.sleep,
        async_sleeper=clock.async_sleep,
        **kwargs,  # pyright: ignore[reportArgumentType]
    )


def test_full_bucket_allows_burst_without_waiting() -> None:
    clock = FakeClock()
    bucket = _bucket(clock)

    for _ in range(5):
        bucket.acquire()

    assert clock.sleeps == []
    assert bucket.available == pytest.approx(0.0)


def test_empty_bucket_waits_for_refill() -> None:
    """The sixth immediate acquisition must wait for one token to come back."""

    clock = FakeClock()
    bucket = _bucket(clock)
    for _ in range(5):
        bucket.acquire()

    bucket.acquire()

    assert sum(clock.sleeps) == pytest.approx(1.0)


def test_acquisitions_respect_burst_plus_refill_bound() -> None:
    """Within any window of t seconds at most capacity + floor(t) tokens are handed out."""

    clock = FakeClock()
    bucket = _bucket(clock)
    start = clock.now
    granted: list[float] = []

    for _ in range(25):
        bucket.acquire()
        granted.append(clock.now - start)

    for index, elapsed in enumerate(granted, start=1):
        assert index <= 5 + floor(elapsed + 1e-9)
    assert granted[-1] == pytest.approx(20.0)


def test_idle_time_refills_only_up_to_capacity() -> None:
    clock = FakeClock()
    bucket = _bucket(clock, capacity=3)
    for _ in range(3):
        bucket.acquire()

    clock.now += 3600

    assert bucket.available == pytest.approx(3.0)


def test_disabled_bucket_never_waits() -> None:
    clock = FakeClock()
    bucket = _bucket(clock, enabled=False)

    for _ in range(50):
        bucket.acquire()

    assert clock.sleeps == []


def test_disabled_factory() -> None:
    assert TokenBucket.disabled().enabled is False


@pytest.mark.parametrize(("capacity", "rate"), [(0, 1.0), (5, 0.0), (5, -1.0)])
def test_invalid_arguments_are_rejected(capacity: int, rate: float) -> None:
    with pytest.raises(ValueError):
        _ = TokenBucket(capacity, rate)


def test_concurrent_threads_share_the_budget() -> None:
    """Threads draining one bucket never receive more than the burst at once."""

    lock = threading.Lock()
    clock = FakeClock()

    def locked_sleep(seconds: float) -> None:
        with lock:
            clock.sleep(seconds)

    bucket = TokenBucket(clock=clock, sleeper=locked_sleep)
    granted: list[float] = []

    def worker() -> None:
        for _ in range(3):
            bucket.acquire()
            with lock:
                granted.append(clock.now)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert len(granted) == 12
    start = 1000.0
    # Concurrent sleepers each advance the shared fake clock.
    assert sum(1 for moment in granted if moment - start < 1.0) <= 5


@pytest.mark.asyncio
async def test_async_acquire_waits_like_blocking_acquire() -> None:
    clock = FakeClock()
    bucket = _bucket(clock, capacity=2)

    for _ in range(4):
        await bucket.acquire_async()

    assert sum(clock.sleeps) == pytest.approx(2.0)
