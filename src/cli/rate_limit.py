"""Token-bucket throttle for outgoing LLM analysis calls.

Chunked analysis fans out one request per chunk; the bucket keeps that
fan-out under the provider's request rate.
"""

import asyncio
import time
from typing import Callable


class TokenBucketRateLimiter:
    """Async-compatible token bucket.

    Up to ``burst`` calls go through at once, after which calls are spaced
    at ``requests_per_second``.
    """

    def __init__(
        self,
        requests_per_second: float = 2.0,
        burst: int = 5,
        clock: Callable[[], float] = time.monotonic,
    ):
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        self.rate = requests_per_second
        self.max_tokens = burst
        self._clock = clock
        self._tokens = float(burst)
        self._last_refill = clock()
        self._lock = asyncio.Lock()

    def _refill(self) -> None:
        now = self._clock()
        self._tokens = min(self.max_tokens, self._tokens + (now - self._last_refill) * self.rate)
        self._last_refill = now

    def _wait_time(self) -> float:
        return (1.0 - self._tokens) / self.rate

    async def acquire(self) -> None:
        """Take a token, sleeping until one is available."""
        async with self._lock:
            self._refill()
            while self._tokens < 1.0:
                await asyncio.sleep(self._wait_time())
                self._refill()
            self._tokens -= 1.0
