"""Expiry action - ends the session once the countdown runs out."""

import logging
from collections.abc import Callable

from recess.providers.base import AuthProvider, Notifier
from recess.session.config import TimeoutMessages
from recess.session.timer import TimerController

logger = logging.getLogger(__name__)


class ExpiryAction:
    """Tears down an inactive session and tells the user."""

    def __init__(
        self,
        timers: TimerController,
        notifier: Notifier,
        auth: AuthProvider,
        messages: TimeoutMessages,
        on_timeout: Callable[[], None] | None = None,
    ) -> None:
        self._timers = timers
        self._notifier = notifier
        self._auth = auth
        self._messages = messages
        self._on_timeout = on_timeout

    def expire(self) -> None:
        """Cancel timers, notify, run on_timeout, then sign out.

        A failed sign-out is logged and swallowed: the countdown is already
        over locally and the user has already been told.
        """
        if not self._timers.mark_expired():
            return

        logger.info("Session expired due to inactivity")
        self._notifier.show_expired(self._messages.expired, self._messages.expired_duration_ms)

        if self._on_timeout is not None:
            self._on_timeout()

        try:
            self._auth.sign_out()
        except Exception:
            logger.exception("Sign-out after session timeout failed")
