"""
Per-client request counting for the chat API. Single-process and in-memory.
"""

from dataclasses import dataclass
import math
import threading
import time
from typing import Callable, Dict, Optional


class RateLimitExceeded(Exception):
    """A client sent more requests than its window allows."""

    def __init__(self, client_id: str, retry_after_minutes: int):
        super().__init__(f"Rate limit exceeded for {client_id}")
        self.client_id = client_id
        self.retry_after_minutes = retry_after_minutes


@dataclass
class RateLimitDecision:
    allowed: bool
    reset_time: Optional[float] = None  # epoch seconds when the window resets

    def retry_after_minutes(self, now: Optional[float] = None) -> int:
        if self.reset_time is None:
            return 0
        now = time.time() if now is None else now
        seconds = max(0.0, self.reset_time - now)
        return max(1, math.ceil(seconds / 60))


class RateLimiter:
    """
    Allows `max_requests` per key in each window; a window starts at the key's first request.

    Expired windows are dropped every `prune_every` checks so clients that
    never return do not stay tracked.
    """

    def __init__(self, window_sec: int = 300, max_requests: int = 20, clock: Callable[[], float] = time.time,
                 prune_every: int = 100):
        if prune_every < 1:
            raise ValueError("prune_every must be >= 1")
        self.window_sec = window_sec
        self.max_requests = max_requests
        self.clock = clock
        self.prune_every = prune_every
        self._windows: Dict[str, Dict[str, float]] = {}
        self._checks = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        """Number of clients currently tracked."""
        return len(self._windows)

    def _prune(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if now > window["reset_time"]]
        for key in expired:
            del self._windows[key]

    def check(self, key: str) -> RateLimitDecision:
        now = self.clock()
        with self._lock:
            self._checks += 1
            if self._checks % self.prune_every == 0:
                self._prune(now)

            window = self._windows.get(key)

            if window is None or now > window["reset_time"]:
                self._windows[key] = {"count": 1, "reset_time": now + self.window_sec}
                return RateLimitDecision(allowed=True)

            if window["count"] >= self.max_requests:
                return RateLimitDecision(allowed=False, reset_time=window["reset_time"])

            window["count"] += 1
            return RateLimitDecision(allowed=True)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
            self._checks = 0
