"""Inactivity-based session timeout."""

from recess.session.activity import DEBOUNCE_MS, ActivityListener
from recess.session.config import SessionConfig, TimeoutMessages
from recess.session.controller import SessionTimeout
from recess.session.expiry import ExpiryAction
from recess.session.scheduler import Scheduler, ThreadingScheduler, TimerHandle
from recess.session.store import SESSION_ACTIVITY_KEY, SessionStore, Tab, TabStorage
from recess.session.timer import (
    INACTIVITY_TIMEOUT_MS,
    WARNING_BEFORE_TIMEOUT_MS,
    TimeoutState,
    TimerController,
)

__all__ = [
    "DEBOUNCE_MS",
    "INACTIVITY_TIMEOUT_MS",
    "SESSION_ACTIVITY_KEY",
    "WARNING_BEFORE_TIMEOUT_MS",
    "ActivityListener",
    "ExpiryAction",
    "Scheduler",
    "SessionConfig",
    "SessionStore",
    "SessionTimeout",
    "Tab",
    "TabStorage",
    "ThreadingScheduler",
    "TimeoutMessages",
    "TimeoutState",
    "TimerController",
    "TimerHandle",
]
