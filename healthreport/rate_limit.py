"""
Rate limiting for the registry HTTP API.

Sliding window limiter keyed by submitting principal, so one reporter
cannot flood the store with submissions.
"""

import threading
import time
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Optional


@dataclass
class RateLimitResult:
    """Result of a rate limit check."""
    allowed: bool
    remaining: int
    reset_at: float
    retry_after: Optional[float] = None


class RateLimiter:
    """
    Sliding window rate limiter.

    Thread-safe; uses one deque of hit times per key.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: int = 60,
        clock: Callable[[], float] = time.time
    ):
        """
        Args:
            limit: Maximum requests per window
            window_seconds: Window size in seconds (default 60)
            clock: Time source, injectable for tests
        """
        self._limit = max(1, limit)
        self._window = window_seconds
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.RLock()

    def allow(self, key: str) -> bool:
        return self.check(key).allowed

    def check(self, key: str) -> RateLimitResult:
        """Check the limit for ``key`` and record the hit if allowed."""
        now = self._clock()
        window_start = now - self._window

        with self._lock:
            q = self._hits[key]

            while q and q[0] < window_start:
                q.popleft()

            current_count = len(q)
            reset_at = (q[0] + self._window) if q else (now + self._window)

            if current_count >= self._limit:
                return RateLimitResult(
                    allowed=False,
                    remaining=0,
                    reset_at=reset_at,
                    retry_after=max(0.0, q[0] + self._window - now)
                )

            q.append(now)
            return RateLimitResult(
                allowed=True,
                remaining=self._limit - current_count - 1,
                reset_at=reset_at
            )

    def reset(self, key: Optional[str] = None) -> None:
        """Reset counters for one key, or for all keys."""
        with self._lock:
            if key:
                self._hits.pop(key, None)
            else:
                self._hits.clear()
