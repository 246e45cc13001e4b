"""Shared test fixtures."""

from collections.abc import Callable, Iterator
from unittest.mock import MagicMock

import pytest

from recess.session.controller import SessionTimeout
from recess.session.store import Tab

START_MS = 1_700_000_000_000


class FakeTimer:
    """Handle returned by FakeScheduler."""

    def __init__(self, due_ms: int, seq: int, callback: Callable[[], None]) -> None:
        self.due_ms = due_ms
        self.seq = seq
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Manual clock: timers fire only when advance() moves time past them."""

    def __init__(self, start_ms: int = START_MS) -> None:
        self.now = start_ms
        self.timers: list[FakeTimer] = []
        self._seq = 0

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(self.now + delay_ms, self._seq, callback)
        self._seq += 1
        self.timers.append(timer)
        return timer

    def now_ms(self) -> int:
        return self.now

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance(self, ms: int) -> None:
        target = self.now + ms
        while True:
            due = [t for t in self.pending if t.due_ms <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.due_ms, t.seq))
            self.now = timer.due_ms
            timer.fired = True
            timer.callback()
        self.now = target


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def tab() -> Tab:
    return Tab()


@pytest.fixture
def auth() -> MagicMock:
    """Signed-in auth collaborator that signs out cleanly."""
    mock = MagicMock()
    mock.is_authenticated = True

    def sign_out() -> None:
        mock.is_authenticated = False

    mock.sign_out.side_effect = sign_out
    return mock


@pytest.fixture
def notifier() -> MagicMock:
    return MagicMock()


@pytest.fixture
def session(
    tab: Tab, auth: MagicMock, notifier: MagicMock, scheduler: FakeScheduler
) -> Iterator[SessionTimeout]:
    timeout = SessionTimeout(tab, auth=auth, notifier=notifier, scheduler=scheduler)
    yield timeout
    timeout.unmount()
