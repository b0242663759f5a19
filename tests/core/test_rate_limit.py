"""Tests for rate limiting logic."""

from flight_alerts.core.rate_limit import (
    DEFAULT_BACKOFF_SECONDS,
    RateLimitState,
    is_rate_limited,
    record_rate_limit,
    seconds_remaining,
)


class TestIsRateLimited:
    """Tests for is_rate_limited function."""

    def test_initial_state_not_limited(self):
        """A fresh state never blocks."""
        assert is_rate_limited(RateLimitState(), 0.0) is False
        assert is_rate_limited(RateLimitState(), 12345.0) is False

    def test_limited_inside_window(self):
        """Blocked before the window ends."""
        state = RateLimitState(blocked_until=160.0)
        assert is_rate_limited(state, 100.0) is True
        assert is_rate_limited(state, 159.9) is True

    def test_clears_at_window_end(self):
        """Window clears implicitly once now reaches it."""
        state = RateLimitState(blocked_until=160.0)
        assert is_rate_limited(state, 160.0) is False
        assert is_rate_limited(state, 500.0) is False


class TestRecordRateLimit:
    """Tests for record_rate_limit function."""

    def test_default_backoff(self):
        """Default window is 60 seconds."""
        state = record_rate_limit(100.0)

        assert DEFAULT_BACKOFF_SECONDS == 60.0
        assert state.blocked_until == 160.0

    def test_custom_backoff(self):
        """Custom backoff is honored."""
        state = record_rate_limit(100.0, backoff_seconds=300.0)
        assert state.blocked_until == 400.0

    def test_returns_new_state(self):
        """Recording returns a new state object."""
        before = RateLimitState()
        new_state = record_rate_limit(100.0)

        assert before.blocked_until == 0.0
        assert new_state is not before


class TestSecondsRemaining:
    """Tests for seconds_remaining function."""

    def test_inside_window(self):
        state = RateLimitState(blocked_until=160.0)
        assert seconds_remaining(state, 130.0) == 30.0

    def test_after_window(self):
        state = RateLimitState(blocked_until=160.0)
        assert seconds_remaining(state, 200.0) == 0.0
