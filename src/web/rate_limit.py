"""Per-key sliding-window rate limiting for refine requests.

Request timestamps live in an injected TTLStore, so state is per app
instance and each entry expires with its window.
"""

import math
import time
from typing import Callable

from web.errors import RateLimitExceeded
from web.session_store import TTLStore

# 10 refinements per rolling hour
REFINE_LIMIT = 10
WINDOW_SECONDS = 3600


class SlidingWindowRateLimiter:
    def __init__(
        self,
        store: TTLStore | None = None,
        max_requests: int = REFINE_LIMIT,
        window_seconds: float = WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store if store is not None else TTLStore()
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock

    def _recent(self, key: str, now: float) -> list[float]:
        cutoff = now - self.window_seconds
        return [t for t in self.store.get(key, []) if t > cutoff]

    def check(self, key: str) -> None:
        """Record a request for ``key``; raise RateLimitExceeded when over the limit."""
        now = self._clock()
        log = self._recent(key, now)

        if len(log) >= self.max_requests:
            retry_after = max(1, math.ceil(log[0] + self.window_seconds - now))
            self.store.set(key, log, ttl=self.window_seconds)
            raise RateLimitExceeded(
                f"Too many refinement requests. Try again in {retry_after} seconds.",
                retry_after=retry_after,
            )

        log.append(now)
        self.store.set(key, log, ttl=self.window_seconds)

    def remaining(self, key: str) -> int:
        return max(0, self.max_requests - len(self._recent(key, self._clock())))

    def reset(self) -> None:
        """Clear all rate limit state. Used in tests."""
        self.store.clear()
