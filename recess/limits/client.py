"""Client-side fixed-window rate limiting."""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

TimeFn = Callable[[], float]


@dataclass
class _Window:
    count: int
    reset_at_ms: int


class ClientRateLimiter:
    """Counts requests per identifier in fixed windows.

    Guards the client against hammering the backend (repeated form
    submissions, message spam). The backend enforces its own limits.
    """

    def __init__(self, now_fn: TimeFn | None = None) -> None:
        self._now = now_fn or time.time
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def check(self, identifier: str, max_requests: int, window_ms: int) -> bool:
        """Count one request against identifier.

        Args:
            identifier: Key for the action being limited.
            max_requests: Requests allowed per window.
            window_ms: Window length in milliseconds.

        Returns:
            True if the limit is exceeded (request should be refused).
        """
        now = self._now_ms()
        with self._lock:
            self._purge(now)
            window = self._windows.get(identifier)
            if window is None:
                self._windows[identifier] = _Window(count=1, reset_at_ms=now + window_ms)
                return False
            if window.count >= max_requests:
                return True
            window.count += 1
            return False

    def reset_in(self, identifier: str) -> int:
        """Milliseconds until identifier's window resets (0 if no window)."""
        now = self._now_ms()
        with self._lock:
            window = self._windows.get(identifier)
            if window is None or window.reset_at_ms < now:
                return 0
            return window.reset_at_ms - now

    def clear(self, identifier: str) -> None:
        with self._lock:
            self._windows.pop(identifier, None)

    def _purge(self, now: int) -> None:
        expired = [key for key, w in self._windows.items() if w.reset_at_ms < now]
        for key in expired:
            del self._windows[key]

    def _now_ms(self) -> int:
        return int(self._now() * 1000)
