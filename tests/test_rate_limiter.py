"""Tests for per-source request spacing."""

from __future__ import annotations

import asyncio

import pytest

from aura_dashboard.sources.rate_limiter import RateLimiter


class FakeTime:
    """Monotonic clock advanced only by the fake sleep."""

    def __init__(self) -> None:
        self.now = 100.0
        self.sleeps: list[float] = []

    def clock(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


@pytest.fixture
def fake_time() -> FakeTime:
    return FakeTime()


@pytest.fixture
def limiter(fake_time: FakeTime) -> RateLimiter:
    return RateLimiter(
        intervals={"defillama": 1.0, "hyperliquid": 0.2},
        clock=fake_time.clock,
        sleep=fake_time.sleep,
    )


class TestRateLimiter:
    @pytest.mark.asyncio
    async def test_first_call_is_immediate(
        self, limiter: RateLimiter, fake_time: FakeTime
    ) -> None:
        await limiter.acquire("defillama")
        assert fake_time.sleeps == []

    @pytest.mark.asyncio
    async def test_back_to_back_calls_are_spaced(
        self, limiter: RateLimiter, fake_time: FakeTime
    ) -> None:
        await limiter.acquire("defillama")
        fake_time.now += 0.25
        await limiter.acquire("defillama")
        assert fake_time.sleeps == [pytest.approx(0.75)]

    @pytest.mark.asyncio
    async def test_no_wait_after_interval_elapsed(
        self, limiter: RateLimiter, fake_time: FakeTime
    ) -> None:
        await limiter.acquire("defillama")
        fake_time.now += 5
        await limiter.acquire("defillama")
        assert fake_time.sleeps == []

    @pytest.mark.asyncio
    async def test_keys_are_independent(
        self, limiter: RateLimiter, fake_time: FakeTime
    ) -> None:
        await limiter.acquire("defillama")
        await limiter.acquire("hyperliquid")
        assert fake_time.sleeps == []

    @pytest.mark.asyncio
    async def test_concurrent_callers_queue(
        self, limiter: RateLimiter, fake_time: FakeTime
    ) -> None:
        start = fake_time.now
        await asyncio.gather(*(limiter.acquire("defillama") for _ in range(3)))
        assert fake_time.sleeps == [pytest.approx(1.0), pytest.approx(1.0)]
        assert fake_time.now == pytest.approx(start + 2.0)

    @pytest.mark.asyncio
    async def test_unknown_key_uses_default(self, fake_time: FakeTime) -> None:
        limiter = RateLimiter(default_interval=0.5, clock=fake_time.clock, sleep=fake_time.sleep)
        await limiter.acquire("other")
        await limiter.acquire("other")
        assert limiter.interval_for("other") == 0.5
        assert fake_time.sleeps == [pytest.approx(0.5)]

    @pytest.mark.asyncio
    async def test_zero_interval_never_waits(self, fake_time: FakeTime) -> None:
        limiter = RateLimiter(clock=fake_time.clock, sleep=fake_time.sleep)
        for _ in range(5):
            await limiter.acquire("anything")
        assert fake_time.sleeps == []
