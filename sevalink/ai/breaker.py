"""Quota circuit breaker for the upstream generative-AI service.

Closed until the provider answers with a rate-limit error, then open until
the provider's retry delay (or a 24 h default) has elapsed. A trip while
already open never extends the window.
"""

from __future__ import annotations

import logging
import re
import threading
import time
from collections.abc import Callable

from sevalink.models import QuotaState

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_SECONDS = 24 * 60 * 60

_RETRY_DELAY = re.compile(r"(\d+(?:\.\d+)?)\s*([smh])", re.IGNORECASE)
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600}


def parse_retry_delay(value: str | None) -> float:
    """Convert a provider delay such as "21s", "5m" or "1h" to seconds.

    Anything unparseable maps to the 24 h default.
    """
    if not value:
        return DEFAULT_COOLDOWN_SECONDS
    match = _RETRY_DELAY.search(value)
    if not match:
        return DEFAULT_COOLDOWN_SECONDS
    return float(match.group(1)) * _UNIT_SECONDS[match.group(2).lower()]


class QuotaBreaker:
    """Process-wide quota state guarded by a lock."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._exceeded_at: float | None = None
        self._reset_at: float | None = None

    def is_open(self) -> bool:
        """True while upstream calls must be skipped; auto-resets on expiry."""
        with self._lock:
            if self._reset_at is None:
                return False
            if self._clock() >= self._reset_at:
                logger.info("Quota cool-down elapsed, upstream calls re-enabled")
                self._exceeded_at = None
                self._reset_at = None
                return False
            return True

    def trip(self, retry_delay: str | None = None) -> bool:
        """Open the breaker. Returns False if it was already open."""
        with self._lock:
            now = self._clock()
            if self._reset_at is not None and now < self._reset_at:
                return False
            seconds = parse_retry_delay(retry_delay)
            self._exceeded_at = now
            self._reset_at = now + seconds
        logger.warning("Upstream quota exceeded, falling back to heuristics for %.0fs", seconds)
        return True

    def reset(self) -> None:
        with self._lock:
            self._exceeded_at = None
            self._reset_at = None

    def status(self) -> QuotaState:
        if not self.is_open():
            return QuotaState(exceeded=False)
        with self._lock:
            exceeded_at = self._exceeded_at
            reset_at = self._reset_at
        remaining = max(0.0, reset_at - self._clock()) if reset_at is not None else None
        return QuotaState(
            exceeded=reset_at is not None,
            exceeded_at=exceeded_at,
            reset_at=reset_at,
            seconds_until_reset=remaining,
        )
