"""Per-client admission control over fixed counting windows."""

import time
import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class Admission:
    """Outcome of one admission check.

    ``retry_after`` is measured against the same window that made the decision,
    and is 0 for admitted requests.
    """

    allowed: bool
    retry_after: float = 0.0


ADMITTED = Admission(allowed=True)


@dataclass
class _Window:
    started_at: float
    count: int = 0


class RateLimiter:
    """Counts requests per client key; the whole check runs under one lock."""

    def __init__(self, enabled: bool, max_requests: int, window_seconds: float,
                 time_func=None):
        self.enabled = enabled
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._time_func = time_func or time.monotonic
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def admit(self, client_key: str) -> Admission:
        """Count one request against client_key and decide whether it may proceed."""
        if not self.enabled:
            return ADMITTED

        with self._lock:
            now = self._time_func()
            window = self._windows.get(client_key)
            # Windows roll over lazily, on the first request after they expire.
            if window is None or now - window.started_at >= self.window_seconds:
                window = self._windows[client_key] = _Window(started_at=now)

            window.count += 1
            if window.count <= self.max_requests:
                return ADMITTED
            remaining = self.window_seconds - (now - window.started_at)
            return Admission(allowed=False, retry_after=max(0.0, remaining))

    @property
    def tracked_clients(self) -> int:
        """Client keys that have an open or expired window."""
        with self._lock:
            return len(self._windows)
