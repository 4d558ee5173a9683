"""In-memory sliding window rate limiter for voice input."""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Callable


class RateLimiter:
    """Sliding window rate limiter per user.

    Default: 10 requests per 60 seconds per user.
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._counters: dict[str, list[float]] = {}

    def _prune(self, user_id: str, now: float) -> list[float]:
        cutoff = now - self._window_seconds
        timestamps = [t for t in self._counters.get(user_id, []) if t > cutoff]
        if timestamps:
            self._counters[user_id] = timestamps
        else:
            self._counters.pop(user_id, None)
        return timestamps

    def admit(self, user_id: str) -> bool:
        """Return True and record the hit if *user_id* is within the limit."""
        with self._lock:
            now = self._clock()
            timestamps = self._prune(user_id, now)
            if len(timestamps) >= self._max_requests:
                return False
            timestamps.append(now)
            self._counters[user_id] = timestamps
            return True

    def retry_after(self, user_id: str) -> int:
        """Whole seconds until *user_id* may be admitted again; 0 if now."""
        with self._lock:
            now = self._clock()
            timestamps = self._prune(user_id, now)
            if len(timestamps) < self._max_requests:
                return 0
            oldest = timestamps[0]
            return max(1, math.ceil(oldest + self._window_seconds - now))
