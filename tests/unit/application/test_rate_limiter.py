"""Unit tests for FixedWindowRateLimiter."""

import pytest

from src.application.services.rate_limiter import FixedWindowRateLimiter


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return FixedWindowRateLimiter(max_requests=10, window_seconds=60, clock=clock)


class TestFixedWindowRateLimiter:
    """Tests for fixed-window counting."""

    async def test_eleventh_request_rejected(self, limiter):
        decisions = [await limiter.hit("ip:1.2.3.4") for _ in range(11)]

        assert all(d.allowed for d in decisions[:10])
        assert decisions[9].remaining == 0
        assert decisions[10].allowed is False
        assert decisions[10].retry_after == 60

    async def test_retry_after_counts_down(self, limiter, clock):
        for _ in range(10):
            await limiter.hit("k")
        clock.advance(45.5)

        decision = await limiter.hit("k")

        assert decision.allowed is False
        assert decision.retry_after == 15

    async def test_allowed_exactly_at_window_end(self, limiter, clock):
        for _ in range(10):
            await limiter.hit("k")
        clock.advance(59)
        rejected = await limiter.hit("k")
        assert rejected.allowed is False
        assert rejected.retry_after == 1

        clock.advance(1)
        decision = await limiter.hit("k")

        assert decision.allowed is True
        assert decision.remaining == 9

    async def test_keys_are_independent(self, limiter):
        for _ in range(10):
            await limiter.hit("a")

        assert (await limiter.hit("a")).allowed is False
        assert (await limiter.hit("b")).allowed is True

    async def test_rejected_requests_do_not_extend_window(self, limiter, clock):
        for _ in range(10):
            await limiter.hit("k")
        for _ in range(5):
            clock.advance(10)
            await limiter.hit("k")

        clock.advance(10)
        assert (await limiter.hit("k")).allowed is True

    async def test_reset(self, limiter):
        for _ in range(10):
            await limiter.hit("k")

        await limiter.reset()

        assert (await limiter.hit("k")).allowed is True

    @pytest.mark.parametrize(
        ("max_requests", "window"), [(0, 60), (10, 0), (10, -1)]
    )
    def test_invalid_configuration(self, max_requests, window):
        with pytest.raises(ValueError):
            FixedWindowRateLimiter(max_requests=max_requests, window_seconds=window)
