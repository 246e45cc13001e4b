"""Two-stage inactivity countdown: warning, then expiry."""

import logging
import threading
from collections.abc import Callable
from enum import Enum, auto

from recess.session.scheduler import Scheduler, TimerHandle
from recess.session.store import SessionStore

logger = logging.getLogger(__name__)

INACTIVITY_TIMEOUT_MS = 15 * 60 * 1000
WARNING_BEFORE_TIMEOUT_MS = 2 * 60 * 1000


class TimeoutState(Enum):
    """Session timeout states."""

    IDLE = auto()  # No countdown running
    ARMED = auto()  # Counting down, warning not shown yet
    WARNED = auto()  # Warning shown, expiry pending
    EXPIRED = auto()  # Terminal, session torn down


class TimerController:
    """Owns the warning and expiry timers and restarts them on activity.

    Each arm bumps a generation counter. Callbacks from older generations are
    dropped, so a timer thread that was already running when its handle got
    cancelled cannot fire a second warning or expiry.

    close() shuts the controller until the next open(): rearm() and
    mark_expired() then do nothing, so a callback that passed its checks
    before an unmount cannot arm or expire afterwards.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        store: SessionStore,
        on_warning: Callable[[], None],
        on_expire: Callable[[], None],
    ) -> None:
        """Initialize the timer controller.

        Args:
            scheduler: Scheduler for both timers.
            store: Store receiving the rearm timestamp.
            on_warning: Called when the warning timer fires.
            on_expire: Called when the expiry timer fires.
        """
        self._scheduler = scheduler
        self._store = store
        self._on_warning = on_warning
        self._on_expire = on_expire

        self._state = TimeoutState.IDLE
        self._warning_handle: TimerHandle | None = None
        self._expiry_handle: TimerHandle | None = None
        self._warning_shown = False
        self._generation = 0
        self._closed = False
        self._lock = threading.RLock()

    @property
    def state(self) -> TimeoutState:
        with self._lock:
            return self._state

    @property
    def warning_shown(self) -> bool:
        with self._lock:
            return self._warning_shown

    @property
    def pending_handles(self) -> int:
        """Number of live warning/expiry handles (0, 1 or 2)."""
        with self._lock:
            return sum(h is not None for h in (self._warning_handle, self._expiry_handle))

    def rearm(self) -> bool:
        """Restart the countdown from now.

        Returns:
            False if the session already expired or the controller is closed,
            and nothing was armed.
        """
        with self._lock:
            if self._closed or self._state == TimeoutState.EXPIRED:
                return False

            self._cancel_handles()
            generation = self._generation

            self._warning_handle = self._scheduler.call_later(
                INACTIVITY_TIMEOUT_MS - WARNING_BEFORE_TIMEOUT_MS,
                lambda: self._warning_due(generation),
            )
            self._expiry_handle = self._scheduler.call_later(
                INACTIVITY_TIMEOUT_MS,
                lambda: self._expiry_due(generation),
            )
            self._warning_shown = False
            self._state = TimeoutState.ARMED
            self._store.record_activity(self._scheduler.now_ms())
            return True

    def cancel_all(self) -> None:
        """Cancel both timers and return to IDLE. Safe to call repeatedly."""
        with self._lock:
            self._cancel_handles()
            self._warning_shown = False
            self._state = TimeoutState.IDLE

    def open(self) -> None:
        with self._lock:
            self._closed = False

    def close(self) -> None:
        """Cancel both timers, return to IDLE and refuse to arm or expire."""
        with self._lock:
            self._closed = True
            self.cancel_all()

    def mark_expired(self) -> bool:
        """Cancel both timers, forget the stored activity and enter EXPIRED.

        Returns:
            False if the session had already expired or the controller is closed.
        """
        with self._lock:
            if self._closed or self._state == TimeoutState.EXPIRED:
                return False
            self.cancel_all()
            # A later sign-in in this tab must not inherit the old timestamp
            self._store.clear()
            self._state = TimeoutState.EXPIRED
            return True

    def _cancel_handles(self) -> None:
        if self._warning_handle is not None:
            self._warning_handle.cancel()
            self._warning_handle = None
        if self._expiry_handle is not None:
            self._expiry_handle.cancel()
            self._expiry_handle = None
        self._generation += 1

    def _warning_due(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._state != TimeoutState.ARMED:
                return
            self._warning_handle = None
            if self._warning_shown:
                return
            self._warning_shown = True
            self._state = TimeoutState.WARNED

        logger.info("Session expires in %d ms", WARNING_BEFORE_TIMEOUT_MS)
        self._on_warning()

    def _expiry_due(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping expiry from cancelled countdown")
                return
            if self._state not in (TimeoutState.ARMED, TimeoutState.WARNED):
                return
            self._expiry_handle = None

        self._on_expire()
