import pytest

from rams import rate_limit
from rams.config import get_settings
from rams.rate_limit import RateLimiter


@pytest.fixture
def production(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    get_settings.cache_clear()


@pytest.fixture
def clock(monkeypatch):
    now = [1000.0]
    monkeypatch.setattr(rate_limit.time, "monotonic", lambda: now[0])
    return now


def test_disabled_in_development():
    limiter = RateLimiter(max_requests=1, window_seconds=60)
    assert all(limiter.check("10.0.0.1") for _ in range(5))
    assert len(limiter) == 0


def test_limits_per_key(production):
    limiter = RateLimiter(max_requests=2, window_seconds=60)

    assert limiter.check("10.0.0.1")
    assert limiter.check("10.0.0.1")
    assert not limiter.check("10.0.0.1")
    assert limiter.check("10.0.0.2")


def test_window_expiry(production, clock):
    limiter = RateLimiter(max_requests=1, window_seconds=60)

    assert limiter.check("10.0.0.1")
    assert not limiter.check("10.0.0.1")
    clock[0] += 61
    assert limiter.check("10.0.0.1")


def test_expired_clients_are_dropped(production, clock):
    limiter = RateLimiter(max_requests=5, window_seconds=60)
    limiter.check("10.0.0.1")
    limiter.check("10.0.0.2")
    assert len(limiter) == 2

    clock[0] += 61
    assert limiter.check("10.0.0.3")
    assert len(limiter) == 1


def test_live_clients_survive_sweep(production, clock):
    limiter = RateLimiter(max_requests=1, window_seconds=60)
    limiter.check("10.0.0.1")
    clock[0] += 30
    limiter.check("10.0.0.2")

    clock[0] += 31
    limiter.check("10.0.0.3")
    assert len(limiter) == 2
    assert not limiter.check("10.0.0.2")
