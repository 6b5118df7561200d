"""Tests for the LLM token bucket and the refine sliding-window limiter."""

import asyncio

import pytest

from cli.rate_limit import TokenBucketRateLimiter
from web.errors import RateLimitExceeded
from web.rate_limit import SlidingWindowRateLimiter
from web.session_store import TTLStore


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class TestTokenBucketRateLimiter:
    """Test token bucket behavior."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def sleeps(self, clock, monkeypatch):
        """Record waits and advance the fake clock instead of sleeping."""
        waited = []

        async def fake_sleep(seconds):
            waited.append(seconds)
            clock.now += seconds

        monkeypatch.setattr("cli.rate_limit.asyncio.sleep", fake_sleep)
        return waited

    @pytest.mark.asyncio
    async def test_initial_burst(self, clock, sleeps):
        """Burst tokens available immediately."""
        limiter = TokenBucketRateLimiter(requests_per_second=1.0, burst=3, clock=clock)
        for _ in range(3):
            await limiter.acquire()
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_waits_once_burst_spent(self, clock, sleeps):
        limiter = TokenBucketRateLimiter(requests_per_second=2.0, burst=2, clock=clock)
        for _ in range(3):
            await limiter.acquire()
        assert sleeps == [pytest.approx(0.5)]

    @pytest.mark.asyncio
    async def test_refill_over_time(self, clock, sleeps):
        limiter = TokenBucketRateLimiter(requests_per_second=2.0, burst=2, clock=clock)
        await limiter.acquire()
        await limiter.acquire()

        clock.now += 0.5
        await limiter.acquire()
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_refill_capped_at_burst(self, clock, sleeps):
        limiter = TokenBucketRateLimiter(requests_per_second=2.0, burst=3, clock=clock)
        clock.now += 100
        for _ in range(4):
            await limiter.acquire()
        assert sleeps == [pytest.approx(0.5)]

    def test_rejects_non_positive_rate(self):
        with pytest.raises(ValueError):
            TokenBucketRateLimiter(requests_per_second=0)

    @pytest.mark.asyncio
    async def test_concurrent_access(self):
        """Multiple coroutines can use limiter safely."""
        limiter = TokenBucketRateLimiter(requests_per_second=100.0, burst=10)
        results = []

        async def worker(i):
            await limiter.acquire()
            results.append(i)

        await asyncio.gather(*[worker(i) for i in range(10)])
        assert len(results) == 10


class TestSlidingWindowRateLimiter:
    def _limiter(self, clock, max_requests=10, window=3600):
        return SlidingWindowRateLimiter(
            store=TTLStore(clock=clock),
            max_requests=max_requests,
            window_seconds=window,
            clock=clock,
        )

    def test_eleventh_request_rejected(self):
        clock = FakeClock()
        limiter = self._limiter(clock)
        for _ in range(10):
            limiter.check("user:alice")
            clock.now += 1

        with pytest.raises(RateLimitExceeded) as exc_info:
            limiter.check("user:alice")
        assert exc_info.value.retryable is True
        assert exc_info.value.retry_after == 3590

    def test_keys_independent(self):
        clock = FakeClock()
        limiter = self._limiter(clock, max_requests=1)
        limiter.check("user:alice")
        limiter.check("user:bob")
        with pytest.raises(RateLimitExceeded):
            limiter.check("user:alice")

    def test_window_slides(self):
        clock = FakeClock()
        limiter = self._limiter(clock, max_requests=2, window=60)
        limiter.check("k")
        clock.now += 30
        limiter.check("k")

        clock.now += 31
        limiter.check("k")
        assert limiter.remaining("k") == 0

    def test_rejected_requests_not_counted(self):
        clock = FakeClock()
        limiter = self._limiter(clock, max_requests=1, window=60)
        limiter.check("k")
        for _ in range(5):
            with pytest.raises(RateLimitExceeded):
                limiter.check("k")

        clock.now += 61
        limiter.check("k")

    def test_remaining_and_reset(self):
        clock = FakeClock()
        limiter = self._limiter(clock, max_requests=3)
        limiter.check("k")
        assert limiter.remaining("k") == 2

        limiter.reset()
        assert limiter.remaining("k") == 3
