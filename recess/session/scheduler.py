"""Timer scheduling used by the session timeout."""

import threading
import time
from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    """Handle of a scheduled callback."""

    def cancel(self) -> None:
        """Cancel the callback if it has not fired yet."""
        ...


class Scheduler(Protocol):
    """Source of delayed callbacks and of the current time."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once after delay_ms milliseconds.

        Args:
            delay_ms: Delay in milliseconds.
            callback: Function to call.

        Returns:
            Handle that cancels the callback.
        """
        ...

    def now_ms(self) -> int:
        """Current time as epoch milliseconds."""
        ...


class ThreadingScheduler:
    """Scheduler backed by daemon threading.Timer instances."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        timer = threading.Timer(delay_ms / 1000, callback)
        timer.daemon = True
        timer.start()
        return timer

    def now_ms(self) -> int:
        return int(time.time() * 1000)
