"""
Rate limiting contract.

Routes only see IRateLimiter.admit(); the storage behind it (a process-local
dict today) can be swapped for a shared counter without touching them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RateLimitRule:
    """Fixed window: at most max_requests per window_seconds for one key."""

    name: str
    window_seconds: int
    max_requests: int
    message: str = "Too many requests. Please try again later."


@dataclass(frozen=True)
class RateLimitDecision:
    """Rate limit check result."""

    allowed: bool
    limit: int
    remaining: int
    reset_at: float  # epoch seconds
    retry_after: Optional[int] = None  # seconds, set when rejected

    def headers(self) -> dict:
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(int(self.reset_at * 1000)),
        }
        if self.retry_after is not None:
            headers["Retry-After"] = str(self.retry_after)
        return headers


FORGOT_PASSWORD_RULE = RateLimitRule(
    name="forgot-password",
    window_seconds=15 * 60,
    max_requests=3,
    message="Too many password reset requests. Please try again in 15 minutes.",
)

LOGIN_RULE = RateLimitRule(
    name="login",
    window_seconds=15 * 60,
    max_requests=10,
    message="Too many login attempts. Please try again in 15 minutes.",
)

GENERAL_RULE = RateLimitRule(
    name="general",
    window_seconds=60,
    max_requests=100,
    message="Too many requests. Please slow down.",
)


class IRateLimiter(ABC):
    """Base rate limiter interface."""

    @abstractmethod
    def admit(self, key: str, rule: RateLimitRule) -> RateLimitDecision:
        """Count one request for key and decide whether it is admitted."""
        pass

    @abstractmethod
    def sweep(self) -> int:
        """Drop entries whose window has elapsed. Returns count removed."""
        pass

    @abstractmethod
    def reset(self, key: str) -> None:
        """Forget the counter of a key."""
        pass
