"""
Tests for the per-IP rate limiter
"""

import time

import pytest

from app.utils.security import rate_limit_check, rate_limiter


@pytest.fixture(autouse=True)
def clean_limiter():
    rate_limiter.clear()
    yield
    rate_limiter.clear()


def test_limit_is_enforced_per_client():
    assert all(rate_limit_check("10.0.0.1", limit=3) for _ in range(3))
    assert not rate_limit_check("10.0.0.1", limit=3)
    assert rate_limit_check("10.0.0.2", limit=3)


def test_old_requests_leave_the_window():
    rate_limiter["10.0.0.1"] = [time.time() - 120] * 3
    assert rate_limit_check("10.0.0.1", limit=3)
    assert len(rate_limiter["10.0.0.1"]) == 1


def test_idle_clients_are_forgotten():
    rate_limiter["10.0.0.9"] = [time.time() - 120]
    rate_limiter["10.0.0.8"] = []

    rate_limit_check("10.0.0.1")

    assert set(rate_limiter) == {"10.0.0.1"}
