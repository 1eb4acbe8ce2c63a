# =============================================================================
# tests/test_rate_limit.py - Sliding Window Rate Limiter Tests
# =============================================================================
# The limiter takes an injectable clock, so these tests move time by hand.
#
# Run with: pytest tests/test_rate_limit.py -v
# =============================================================================

import pytest

from lib.rate_limit import SlidingWindowRateLimiter


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


class TestSlidingWindowRateLimiter:
    """Tests for SlidingWindowRateLimiter."""

    def test_accepts_up_to_limit_then_rejects(self, clock):
        # Arrange
        limiter = SlidingWindowRateLimiter(3, 60, clock=clock)

        # Act
        results = [limiter.hit("1.2.3.4") for _ in range(4)]

        # Assert
        assert results == [True, True, True, False]

    def test_keys_are_independent(self, clock):
        limiter = SlidingWindowRateLimiter(1, 60, clock=clock)

        assert limiter.hit("a") is True
        assert limiter.hit("b") is True
        assert limiter.hit("a") is False

    def test_capacity_returns_as_window_slides(self, clock):
        limiter = SlidingWindowRateLimiter(2, 60, clock=clock)
        limiter.hit("ip")
        clock.advance(30)
        limiter.hit("ip")
        assert limiter.hit("ip") is False

        # First hit leaves the window, second is still inside
        clock.advance(30)
        assert limiter.hit("ip") is True
        assert limiter.hit("ip") is False

    def test_rejected_hits_are_not_recorded(self, clock):
        """A client hammering while blocked doesn't extend its own block."""
        limiter = SlidingWindowRateLimiter(1, 60, clock=clock)
        limiter.hit("ip")

        for _ in range(10):
            clock.advance(5)
            assert limiter.hit("ip") is False

        clock.advance(10)  # 60s after the only accepted hit
        assert limiter.hit("ip") is True

    def test_remaining(self, clock):
        limiter = SlidingWindowRateLimiter(5, 60, clock=clock)
        assert limiter.remaining("ip") == 5

        limiter.hit("ip")
        limiter.hit("ip")
        assert limiter.remaining("ip") == 3

        clock.advance(61)
        assert limiter.remaining("ip") == 5

    def test_reset_one_key(self, clock):
        limiter = SlidingWindowRateLimiter(1, 60, clock=clock)
        limiter.hit("a")
        limiter.hit("b")

        limiter.reset("a")

        assert limiter.hit("a") is True
        assert limiter.hit("b") is False

    def test_reset_all(self, clock):
        limiter = SlidingWindowRateLimiter(1, 60, clock=clock)
        limiter.hit("a")
        limiter.hit("b")

        limiter.reset()

        assert limiter.hit("a") is True
        assert limiter.hit("b") is True

    def test_idle_keys_are_dropped_after_the_window(self, clock):
        # Arrange
        limiter = SlidingWindowRateLimiter(5, 60, clock=clock)
        for i in range(1000):
            limiter.hit(f"10.0.{i // 256}.{i % 256}")
        assert len(limiter) == 1000

        # Act
        clock.advance(61)
        limiter.hit("192.168.1.1")

        # Assert
        assert len(limiter) == 1

    def test_sweep_keeps_keys_still_inside_the_window(self, clock):
        limiter = SlidingWindowRateLimiter(1, 60, clock=clock)
        limiter.hit("idle")
        clock.advance(30)
        limiter.hit("busy")

        clock.advance(40)
        limiter.hit("new")

        assert len(limiter) == 2
        assert limiter.hit("busy") is False

    @pytest.mark.parametrize("max_requests,window", [(0, 60), (1, 0), (1, -5)])
    def test_rejects_bad_configuration(self, max_requests, window):
        with pytest.raises(ValueError):
            SlidingWindowRateLimiter(max_requests, window)
