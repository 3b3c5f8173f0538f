import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict

from auth_service.app.services.rate_limiter import IRateLimiter, RateLimitDecision, RateLimitRule

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    count: int
    reset_at: float


class InMemoryRateLimiter(IRateLimiter):
    """
    Fixed window rate limiter backed by a process-local dict.

    Each admit() is a single critical section, so concurrent requests for
    the same key can never lose an increment. Expired entries are reset on
    access; sweep() only reclaims memory.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def admit(self, key: str, rule: RateLimitRule) -> RateLimitDecision:
        with self._lock:
            now = self._clock()
            entry = self._entries.get(key)

            if entry is None or now >= entry.reset_at:
                entry = _Entry(count=1, reset_at=now + rule.window_seconds)
                self._entries[key] = entry
            else:
                entry.count += 1

            count, reset_at = entry.count, entry.reset_at

        remaining = max(0, rule.max_requests - count)
        if count <= rule.max_requests:
            return RateLimitDecision(
                allowed=True,
                limit=rule.max_requests,
                remaining=remaining,
                reset_at=reset_at,
            )

        return RateLimitDecision(
            allowed=False,
            limit=rule.max_requests,
            remaining=0,
            reset_at=reset_at,
            retry_after=math.ceil(reset_at - now),
        )

    def sweep(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if now >= entry.reset_at]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug(f"Rate limiter sweep removed {len(expired)} entries")
        return len(expired)

    def reset(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
