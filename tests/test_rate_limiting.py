"""Tests for rate limiting on login attempts.

Verifies that the sliding-window rate limiter allows attempts under the
limit, rejects attempts over it, and that the login endpoint answers 429
once a client address is exhausted.
"""

import time
from unittest.mock import patch

import pytest

from receivables.core.rate_limiter import RateLimiter
from receivables.routers.auth import login_rate_limiter


@pytest.fixture(autouse=True)
def _restore_limit():
    original = login_rate_limiter.max_requests
    yield
    login_rate_limiter.max_requests = original
    login_rate_limiter.reset()


class TestRateLimiterUnit:
    def test_allows_under_limit(self):
        limiter = RateLimiter(max_requests=3, window_seconds=60)
        assert limiter.is_allowed("key1") is True
        assert limiter.is_allowed("key1") is True
        assert limiter.is_allowed("key1") is True

    def test_rejects_over_limit(self):
        limiter = RateLimiter(max_requests=2, window_seconds=60)
        assert limiter.is_allowed("key1") is True
        assert limiter.is_allowed("key1") is True
        assert limiter.is_allowed("key1") is False

    def test_separate_keys_have_separate_limits(self):
        limiter = RateLimiter(max_requests=1, window_seconds=60)
        assert limiter.is_allowed("10.0.0.1") is True
        assert limiter.is_allowed("10.0.0.2") is True
        assert limiter.is_allowed("10.0.0.1") is False

    def test_zero_disables_limit(self):
        limiter = RateLimiter(max_requests=0)
        assert all(limiter.is_allowed("key1") for _ in range(100))

    def test_reset_clears_all_state(self):
        limiter = RateLimiter(max_requests=1, window_seconds=60)
        assert limiter.is_allowed("key1") is True
        assert limiter.is_allowed("key1") is False
        limiter.reset()
        assert limiter.is_allowed("key1") is True

    def test_allows_after_window_expires(self):
        limiter = RateLimiter(max_requests=1, window_seconds=1)
        assert limiter.is_allowed("key1") is True
        assert limiter.is_allowed("key1") is False

        future = time.monotonic() + 2
        with patch("receivables.core.rate_limiter.time.monotonic", return_value=future):
            assert limiter.is_allowed("key1") is True


class TestLoginRateLimit:
    def test_allows_under_limit(self, client):
        login_rate_limiter.max_requests = 3
        for _ in range(3):
            resp = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})
            assert resp.status_code == 200

    def test_failed_attempts_count(self, client):
        login_rate_limiter.max_requests = 2
        for _ in range(2):
            resp = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
            assert resp.status_code == 401

        resp = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})
        assert resp.status_code == 429
        assert resp.json() == {
            "error": "Too many login attempts. Maximum 2 attempts per minute."
        }
