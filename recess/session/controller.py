"""Session timeout for the authenticated area of the client."""

import logging
import threading
from collections.abc import Callable
from types import TracebackType
from typing import Any

from recess.providers.base import AuthProvider, Notifier
from recess.session.activity import ActivityListener
from recess.session.config import TimeoutMessages
from recess.session.expiry import ExpiryAction
from recess.session.scheduler import Scheduler, ThreadingScheduler
from recess.session.store import SessionStore, Tab
from recess.session.timer import INACTIVITY_TIMEOUT_MS, TimeoutState, TimerController

logger = logging.getLogger(__name__)


class SessionTimeout:
    """Signs the user out after 15 minutes without input, warning 2 minutes ahead.

    One instance per authenticated mount. Use it as a context manager, or pair
    mount() with unmount() on every exit path, otherwise a pending expiry can
    fire after the user has left the authenticated area.
    """

    def __init__(
        self,
        tab: Tab,
        auth: AuthProvider,
        notifier: Notifier,
        scheduler: Scheduler | None = None,
        on_timeout: Callable[[], None] | None = None,
        messages: TimeoutMessages | None = None,
        enabled: bool = True,
    ) -> None:
        """Initialize the session timeout.

        Args:
            tab: Tab whose storage holds the activity timestamp.
            auth: Authentication collaborator, signed out on expiry.
            notifier: Receives the warning and expired notifications.
            scheduler: Timer source. Defaults to ThreadingScheduler.
            on_timeout: Optional callback run on expiry, before sign-out.
            messages: Notification texts and durations.
            enabled: If False, mount() never arms the countdown.
        """
        self._tab = tab
        self._auth = auth
        self._notifier = notifier
        self._scheduler = scheduler or ThreadingScheduler()
        self._messages = messages or TimeoutMessages()
        self.enabled = enabled

        self._store = SessionStore(tab.storage)
        self._timers = TimerController(
            self._scheduler,
            self._store,
            on_warning=self._show_warning,
            on_expire=self.expire,
        )
        self._expiry = ExpiryAction(
            self._timers,
            notifier,
            auth,
            self._messages,
            on_timeout=on_timeout,
        )
        self._listener = ActivityListener(self._scheduler, on_activity=self.reset_timer)

        self._mounted = False
        self._lock = threading.Lock()

    @property
    def state(self) -> TimeoutState:
        return self._timers.state

    @property
    def warning_shown(self) -> bool:
        return self._timers.warning_shown

    @property
    def is_mounted(self) -> bool:
        with self._lock:
            return self._mounted

    @property
    def store(self) -> SessionStore:
        return self._store

    def mount(self) -> None:
        """Enter the authenticated area.

        Raises:
            SessionTimeoutAlreadyActiveError: The tab already has an active
                session timeout.
        """
        with self._lock:
            if self._mounted:
                return
            self._tab.claim_session_timeout(self)
            self._mounted = True
            self._timers.open()

        if not self.enabled or not self._auth.is_authenticated:
            self._timers.cancel_all()
            return

        if self._store.check_already_expired(self._scheduler.now_ms(), INACTIVITY_TIMEOUT_MS):
            logger.info("Stored activity is older than the timeout, expiring on mount")
            self.expire()
            return

        self._timers.rearm()

    def unmount(self) -> None:
        """Leave the authenticated area, cancelling every pending timer."""
        with self._lock:
            if not self._mounted:
                return
            self._mounted = False

        self._listener.cancel()
        self._timers.close()
        self._tab.release_session_timeout(self)

    def on_raw_event(self) -> None:
        """Report a raw input event."""
        if self._accepts_activity():
            self._listener.on_raw_event()

    def handle_event(self, event: Any) -> bool:
        """Feed a pygame event.

        Returns:
            True if the event counted as activity.
        """
        if not self._accepts_activity():
            return False
        return self._listener.handle_event(event)

    def reset_timer(self) -> None:
        """Restart the countdown (confirmed activity)."""
        if not self._accepts_activity():
            return
        self._timers.rearm()

    def clear_timers(self) -> None:
        """Cancel the countdown and forget the activity (explicit sign-out path)."""
        self._listener.cancel()
        self._timers.cancel_all()
        self._store.clear()

    def expire(self) -> None:
        """End the session now."""
        self._listener.cancel()
        self._expiry.expire()

    def _accepts_activity(self) -> bool:
        return (
            self.is_mounted
            and self.enabled
            and self._auth.is_authenticated
            and self._timers.state != TimeoutState.EXPIRED
        )

    def _show_warning(self) -> None:
        self._notifier.show_warning(self._messages.warning, self._messages.warning_duration_ms)

    def __enter__(self) -> "SessionTimeout":
        self.mount()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.unmount()
