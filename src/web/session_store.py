"""Injectable in-memory key/value store with per-entry expiry.

Replaces module-level dicts so each app instance (and each test) owns its
state and can be swapped for another backend with the same interface.
"""

import threading
import time
from typing import Any, Callable, Optional

_MISSING = object()


class TTLStore:
    """Thread-safe dict with optional per-key time-to-live."""

    def __init__(
        self,
        default_ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl
        self._clock = clock
        self._data: dict[str, tuple[Any, Optional[float]]] = {}
        self._lock = threading.Lock()

    def _expired(self, expires_at: Optional[float], now: float) -> bool:
        return expires_at is not None and expires_at <= now

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._data.get(key, _MISSING)
            if entry is _MISSING:
                return default
            value, expires_at = entry
            if self._expired(expires_at, self._clock()):
                del self._data[key]
                return default
            return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        expires_at = self._clock() + ttl if ttl is not None else None
        with self._lock:
            self._data[key] = (value, expires_at)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, _MISSING) is not _MISSING

    def sweep(self) -> int:
        """Drop expired entries. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            stale = [k for k, (_, exp) in self._data.items() if self._expired(exp, now)]
            for k in stale:
                del self._data[k]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def __len__(self) -> int:
        self.sweep()
        with self._lock:
            return len(self._data)
