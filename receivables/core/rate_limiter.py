"""Per-client login throttling."""

import time
from collections import defaultdict
from threading import Lock


class RateLimiter:
    """Allows at most ``max_requests`` hits per key inside a moving window.

    Keys are opaque strings, typically a client address. A limit of zero or
    less turns throttling off.
    """

    def __init__(self, max_requests: int, window_seconds: int = 60):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._hits: dict[str, list[float]] = defaultdict(list)
        self._lock = Lock()

    def is_allowed(self, key: str) -> bool:
        """Record a hit for ``key`` and report whether it fits the limit."""
        if self.max_requests <= 0:
            return True

        now = time.monotonic()
        cutoff = now - self.window_seconds

        with self._lock:
            recent = [t for t in self._hits[key] if t > cutoff]
            self._hits[key] = recent

            if len(recent) >= self.max_requests:
                return False

            recent.append(now)
            return True

    def reset(self) -> None:
        """Forget every recorded hit."""
        with self._lock:
            self._hits.clear()
