"""Activity listener - turns bursts of input events into one debounced signal."""

import threading
from collections.abc import Callable
from typing import Any

import pygame

from recess.session.scheduler import Scheduler, TimerHandle

# Quiet period after the last raw event before activity is confirmed
DEBOUNCE_MS = 1000

# Pointer-down, key-down, touch-start, scroll, pointer-move
ACTIVITY_EVENT_TYPES = frozenset(
    {
        pygame.MOUSEBUTTONDOWN,
        pygame.KEYDOWN,
        pygame.FINGERDOWN,
        pygame.MOUSEWHEEL,
        pygame.MOUSEMOTION,
    }
)


class ActivityListener:
    """Debounces raw input events into "activity confirmed" callbacks."""

    def __init__(self, scheduler: Scheduler, on_activity: Callable[[], None]) -> None:
        """Initialize the listener.

        Args:
            scheduler: Scheduler for the debounce timer.
            on_activity: Called once per quiet window after the last raw event.
        """
        self._scheduler = scheduler
        self._on_activity = on_activity
        self._pending: TimerHandle | None = None
        self._lock = threading.Lock()

    @property
    def is_pending(self) -> bool:
        """Whether a debounced callback is waiting to fire."""
        with self._lock:
            return self._pending is not None

    def on_raw_event(self) -> None:
        """Restart the debounce window."""
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            handle: TimerHandle | None = None

            def fire() -> None:
                with self._lock:
                    if self._pending is not handle:
                        return
                    self._pending = None
                self._on_activity()

            handle = self._scheduler.call_later(DEBOUNCE_MS, fire)
            self._pending = handle

    def handle_event(self, event: Any) -> bool:
        """Feed a pygame event to the listener.

        Args:
            event: Pygame event.

        Returns:
            True if the event counted as user activity.
        """
        if event.type not in ACTIVITY_EVENT_TYPES:
            return False
        self.on_raw_event()
        return True

    def cancel(self) -> None:
        """Drop any pending debounced callback."""
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None
