"""Tab-scoped storage and the last-activity session store."""

import logging
import threading

from recess.errors import SessionTimeoutAlreadyActiveError

logger = logging.getLogger(__name__)

SESSION_ACTIVITY_KEY = "session_activity"


class TabStorage:
    """String key/value store that lives as long as the tab.

    Nothing is written to disk and nothing is shared between tabs.
    """

    def __init__(self) -> None:
        self._items: dict[str, str] = {}
        self._lock = threading.Lock()

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class Tab:
    """One browsing context: its storage and its single session-timeout slot."""

    def __init__(self, storage: TabStorage | None = None) -> None:
        self.storage = storage or TabStorage()
        self._session_timeout: object | None = None
        self._lock = threading.Lock()

    @property
    def has_session_timeout(self) -> bool:
        with self._lock:
            return self._session_timeout is not None

    def claim_session_timeout(self, owner: object) -> None:
        """Register owner as the tab's active session timeout.

        Raises:
            SessionTimeoutAlreadyActiveError: A different owner is active.
        """
        with self._lock:
            if self._session_timeout is not None and self._session_timeout is not owner:
                raise SessionTimeoutAlreadyActiveError(
                    "A session timeout is already active in this tab"
                )
            self._session_timeout = owner

    def release_session_timeout(self, owner: object) -> None:
        """Release the slot if owner holds it."""
        with self._lock:
            if self._session_timeout is owner:
                self._session_timeout = None


class SessionStore:
    """Persists the last-activity timestamp in tab-scoped storage."""

    def __init__(self, storage: TabStorage) -> None:
        self._storage = storage

    def record_activity(self, timestamp_ms: int) -> None:
        """Store the last-activity time.

        Args:
            timestamp_ms: Epoch milliseconds.
        """
        self._storage.set_item(SESSION_ACTIVITY_KEY, str(int(timestamp_ms)))

    def last_activity(self) -> int | None:
        """Read the last-activity time.

        Returns:
            Epoch milliseconds, or None if missing or unreadable.
        """
        raw = self._storage.get_item(SESSION_ACTIVITY_KEY)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring unreadable %s value: %r", SESSION_ACTIVITY_KEY, raw)
            return None

    def check_already_expired(self, now_ms: int, timeout_ms: int) -> bool:
        """Check whether the stored activity is older than the timeout window.

        Args:
            now_ms: Current epoch milliseconds.
            timeout_ms: Inactivity timeout.

        Returns:
            True if a timestamp exists and is at least timeout_ms old.
        """
        last = self.last_activity()
        if last is None:
            return False
        return now_ms - last >= timeout_ms

    def clear(self) -> None:
        self._storage.remove_item(SESSION_ACTIVITY_KEY)
