"""Rate limiting logic - Pure functions.

This module tracks the upstream rate-limit backoff window. When OpenSky
answers 429, every upstream call is suppressed until the window elapses.
All functions are pure with no side effects.
"""

from dataclasses import dataclass


DEFAULT_BACKOFF_SECONDS = 60.0


@dataclass(frozen=True)
class RateLimitState:
    """Upstream backoff window.

    Attributes:
        blocked_until: Timestamp before which no upstream call may be made
                       (0 when never rate limited)
    """
    blocked_until: float = 0.0


def is_rate_limited(state: RateLimitState, now: float) -> bool:
    """Check whether the backoff window is still active.

    Pure function. The window clears implicitly once `now` passes it.
    """
    return now < state.blocked_until


def seconds_remaining(state: RateLimitState, now: float) -> float:
    """Seconds left in the backoff window (0 when not limited).

    Pure function.
    """
    return max(0.0, state.blocked_until - now)


def record_rate_limit(
    now: float,
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
) -> RateLimitState:
    """Open a new backoff window starting at `now`.

    Pure function - returns new state.

    Args:
        now: Time the rate-limit response was received
        backoff_seconds: Length of the window

    Returns:
        RateLimitState blocking until now + backoff_seconds
    """
    return RateLimitState(blocked_until=now + backoff_seconds)
