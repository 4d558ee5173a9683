"""Tests for the per-user sliding window rate limiter."""

from __future__ import annotations

from sevalink.ratelimit.limiter import RateLimiter
from tests.conftest import FakeClock


class TestRateLimiter:
    def test_default_ten_per_minute(self) -> None:
        limiter = RateLimiter()
        assert limiter._max_requests == 10
        assert limiter._window_seconds == 60

    def test_eleventh_request_rejected(self, clock: FakeClock) -> None:
        limiter = RateLimiter(clock=clock)
        for _ in range(10):
            assert limiter.admit("user-1") is True
            clock.advance(1)
        assert limiter.admit("user-1") is False

    def test_admission_resumes_after_window_slides(self, clock: FakeClock) -> None:
        limiter = RateLimiter(clock=clock)
        for _ in range(10):
            limiter.admit("user-1")
            clock.advance(1)
        assert limiter.admit("user-1") is False
        # Oldest hit was at t0; at t0 + 60 it leaves the window
        clock.advance(50)
        assert limiter.admit("user-1") is True
        assert limiter.admit("user-1") is False

    def test_rejection_is_not_recorded(self, clock: FakeClock) -> None:
        limiter = RateLimiter(max_requests=1, window_seconds=10, clock=clock)
        assert limiter.admit("u") is True
        clock.advance(5)
        assert limiter.admit("u") is False
        clock.advance(5)
        assert limiter.admit("u") is True

    def test_users_independent(self, clock: FakeClock) -> None:
        limiter = RateLimiter(max_requests=1, clock=clock)
        assert limiter.admit("a") is True
        assert limiter.admit("b") is True
        assert limiter.admit("a") is False

    def test_retry_after(self, clock: FakeClock) -> None:
        limiter = RateLimiter(max_requests=2, window_seconds=60, clock=clock)
        assert limiter.retry_after("u") == 0
        limiter.admit("u")
        clock.advance(15.5)
        limiter.admit("u")
        assert limiter.retry_after("u") == 45

    def test_stale_users_pruned(self, clock: FakeClock) -> None:
        limiter = RateLimiter(max_requests=1, window_seconds=10, clock=clock)
        limiter.admit("u")
        clock.advance(11)
        limiter.retry_after("u")
        assert "u" not in limiter._counters
