"""
Unit Tests - API Middleware
"""
import pytest

from order_analytics.serving.api.middleware import RateLimitMiddleware


async def noop_app(scope, receive, send):
    pass


@pytest.fixture
def limiter() -> RateLimitMiddleware:
    return RateLimitMiddleware(noop_app, max_requests=2, window_seconds=60)


class TestRateLimitMiddleware:
    """Tests for RateLimitMiddleware bookkeeping"""

    def test_prune_forgets_idle_clients(self, limiter):
        limiter._requests["10.0.0.1"].extend([0.0, 10.0])
        limiter._requests["10.0.0.2"].extend([40.0, 100.0])

        limiter.prune(current_time=105.0)

        assert "10.0.0.1" not in limiter._requests
        assert list(limiter._requests["10.0.0.2"]) == [100.0]

    def test_prune_keeps_requests_inside_window(self, limiter):
        limiter._requests["10.0.0.1"].extend([30.0, 40.0])

        limiter.prune(current_time=60.0)

        assert list(limiter._requests["10.0.0.1"]) == [30.0, 40.0]

    def test_prune_empties_state(self, limiter):
        limiter._requests["10.0.0.1"].append(0.0)

        limiter.prune(current_time=1000.0)

        assert len(limiter._requests) == 0
