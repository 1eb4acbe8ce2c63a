# =============================================================================
# lib/rate_limit.py - Sliding-Window Rate Limiter
# =============================================================================
# Per-key (client IP) admission control: a key may make at most
# `max_requests` accepted requests within any `window_seconds` span.
#
# Counters live in process memory, so every API worker process enforces
# its own budget.
#
# Usage:
#   limiter = SlidingWindowRateLimiter(max_requests=10, window_seconds=900)
#   if not limiter.hit(client_ip):
#       raise RateLimitExceededError(...)
# =============================================================================

import threading
import time
from collections import deque
from typing import Callable


class SlidingWindowRateLimiter:
    """
    Timestamp-log rate limiter.

    Each key keeps the timestamps of its accepted requests. On every hit,
    timestamps older than the window are discarded; the hit is accepted and
    recorded only while fewer than `max_requests` remain. Rejected hits are
    not recorded, so a blocked client regains capacity as soon as its oldest
    accepted request leaves the window.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def __len__(self) -> int:
        """Number of keys currently tracked."""
        with self._lock:
            return len(self._hits)

    def _prune(self, key: str, now: float) -> deque[float]:
        hits = self._hits.setdefault(key, deque())
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()
        return hits

    def _sweep(self, now: float) -> None:
        """Drop keys with no hit inside the window; runs at most once per window."""
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        stale = [key for key, hits in self._hits.items() if not hits or now - hits[-1] >= self.window_seconds]
        for key in stale:
            del self._hits[key]

    def hit(self, key: str) -> bool:
        """
        Try to admit one request for `key`.

        Returns:
            True if accepted (and recorded), False if the key is over budget
        """
        now = self._clock()
        with self._lock:
            self._sweep(now)
            hits = self._prune(key, now)
            if len(hits) >= self.max_requests:
                return False
            hits.append(now)
            return True

    def remaining(self, key: str) -> int:
        """How many more requests `key` may make right now."""
        now = self._clock()
        with self._lock:
            hits = self._prune(key, now)
            remaining = self.max_requests - len(hits)
            if not hits:
                del self._hits[key]
            return remaining

    def reset(self, key: str | None = None) -> None:
        """Forget one key, or every key."""
        with self._lock:
            if key is None:
                self._hits.clear()
            else:
                self._hits.pop(key, None)
