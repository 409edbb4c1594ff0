"""In-memory sliding-window rate limiter keyed by sender.

Process-local; a multi-instance deployment would swap this for a shared
key-value store behind the same allow() call.
"""

import threading
import time
from collections import deque
from typing import Callable, Deque, Dict


class InMemoryRateLimiter:
    """Allow at most max_requests per identity within window_sec."""

    def __init__(
        self,
        max_requests: int,
        window_sec: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        self.max_requests = max_requests
        self.window_sec = window_sec
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()

    def _prune(self, now: float) -> None:
        # Drop expired hits, and senders with none left, so the map only holds active windows
        for identity in list(self._hits):
            hits = self._hits[identity]
            while hits and now - hits[0] >= self.window_sec:
                hits.popleft()
            if not hits:
                del self._hits[identity]

    def tracked_identities(self) -> int:
        """Number of senders with requests inside the current window."""
        with self._lock:
            self._prune(self._clock())
            return len(self._hits)

    def allow(self, identity: str) -> bool:
        """Record a request for identity and return whether it is within the limit."""
        now = self._clock()
        with self._lock:
            self._prune(now)
            hits = self._hits.setdefault(identity, deque())
            if len(hits) >= self.max_requests:
                return False
            hits.append(now)
            return True
