"""Runtime controller that wires the client together."""

import logging
import os
import time
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from recess.errors import AuthError, ConfigError
from recess.limits.client import ClientRateLimiter
from recess.notify.toast import ToastNotifier, ToastOverlay, ToastQueue
from recess.providers.supabase import SupabaseClient, SupabaseConfig
from recess.runtime.window import SessionWindow, WindowConfig
from recess.session.config import SessionConfig
from recess.session.controller import SessionTimeout
from recess.session.store import Tab
from recess.session.timer import TimeoutState

logger = logging.getLogger(__name__)


class RuntimeState(Enum):
    """Runtime controller states."""

    STARTING = auto()
    RUNNING = auto()
    STOPPING = auto()


@dataclass
class AuthConfig:
    """Sign-in retry and throttling configuration."""

    max_retries: int = 3
    retry_delay_ms: int = 1000
    max_attempts_per_window: int = 5
    attempt_window_ms: int = 15 * 60 * 1000

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuthConfig":
        """Create from dictionary."""
        return cls(
            max_retries=int(data.get("max_retries", 3)),
            retry_delay_ms=int(data.get("retry_delay_ms", 1000)),
            max_attempts_per_window=int(data.get("max_attempts_per_window", 5)),
            attempt_window_ms=int(data.get("attempt_window_ms", 15 * 60 * 1000)),
        )


SIGN_IN_LIMIT_KEY = "sign-in"


class RuntimeController:
    """Signs in, mounts the session timeout and runs the window loop."""

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize the runtime controller.

        Args:
            config_path: Path to configuration YAML file.
        """
        # Load environment variables
        load_dotenv()

        self.config = self._load_config(config_path)
        self._state = RuntimeState.STARTING
        self._running = False

        self._auth_config = AuthConfig.from_dict(self.config.get("auth", {}))
        self._session_config = SessionConfig.from_dict(self.config.get("session", {}))
        self._sign_in_limiter = ClientRateLimiter()

        # Component references (initialized in start())
        self._client: SupabaseClient | None = None
        self._tab = Tab()
        self._toasts = ToastQueue()
        self._session: SessionTimeout | None = None
        self._window: SessionWindow | None = None

    @property
    def state(self) -> RuntimeState:
        return self._state

    def _load_config(self, config_path: Path | None) -> dict[str, Any]:
        """Load configuration from YAML file, with secrets from the environment.

        Args:
            config_path: Path to config file.

        Returns:
            Configuration dictionary.
        """
        if config_path is None:
            config_path = Path("config/default.yaml")

        config: dict[str, Any] = {}
        if config_path.exists():
            with open(config_path) as f:
                config = yaml.safe_load(f) or {}

        supabase = dict(config.get("supabase") or {})
        supabase["url"] = os.environ.get("SUPABASE_URL", supabase.get("url", ""))
        supabase["anon_key"] = os.environ.get("SUPABASE_ANON_KEY", supabase.get("anon_key", ""))
        config["supabase"] = supabase
        return config

    def start(self) -> None:
        """Sign in, mount the authenticated area and run until quit or expiry."""
        self._state = RuntimeState.STARTING
        self._running = True

        email = os.environ.get("RECESS_EMAIL")
        password = os.environ.get("RECESS_PASSWORD")
        if not email or not password:
            raise ConfigError("RECESS_EMAIL and RECESS_PASSWORD must be set")

        self._client = SupabaseClient(SupabaseConfig.from_dict(self.config["supabase"]))

        try:
            self._sign_in_with_retry(email, password)

            self._session = SessionTimeout(
                self._tab,
                auth=self._client,
                notifier=ToastNotifier(self._toasts),
                on_timeout=self._on_session_timeout,
                messages=self._session_config.messages,
                enabled=self._session_config.enabled,
            )
            self._window = SessionWindow(
                self._session,
                ToastOverlay(self._toasts),
                WindowConfig.from_dict(self.config.get("window", {})),
            )
            self._window.initialize()

            with self._session:
                self._state = RuntimeState.RUNNING
                print("Recess started. Press ESC to quit, F5 to reload.")
                self._main_loop()
        finally:
            self.stop()

    def stop(self) -> None:
        """Stop all components and shutdown."""
        self._state = RuntimeState.STOPPING
        self._running = False

        if self._session is not None:
            self._session.unmount()

        if self._window is not None:
            self._window.shutdown()
            self._window = None

        if self._client is not None:
            self._client.close()
            self._client = None

        print("Recess stopped.")

    def _main_loop(self) -> None:
        """Main render/event loop."""
        while self._running and self._window is not None and self._session is not None:
            if not self._window.run_frame():
                break
            # Keep the expired toast on screen until it times out, then leave
            if self._signed_out() and not self._toasts.active():
                break

    def _signed_out(self) -> bool:
        # A reload after expiry remounts into IDLE, so the auth state counts too
        if self._session is not None and self._session.state == TimeoutState.EXPIRED:
            return True
        return self._client is not None and not self._client.is_authenticated

    def _sign_in_with_retry(self, email: str, password: str) -> None:
        """Sign in, retrying transport failures.

        Raises:
            AuthError: Credentials rejected, attempts throttled or retries exhausted.
        """
        if self._client is None:
            return

        for attempt in range(self._auth_config.max_retries):
            if self._sign_in_limiter.check(
                SIGN_IN_LIMIT_KEY,
                self._auth_config.max_attempts_per_window,
                self._auth_config.attempt_window_ms,
            ):
                wait_s = self._sign_in_limiter.reset_in(SIGN_IN_LIMIT_KEY) // 1000
                raise AuthError(f"Too many sign-in attempts, try again in {wait_s}s")
            try:
                self._client.sign_in_with_password(email, password)
                return
            except AuthError as e:
                # Rejected credentials carry a status code, transport errors do not
                if e.status_code is not None or attempt == self._auth_config.max_retries - 1:
                    raise
                logger.warning("Sign-in attempt %d failed: %s", attempt + 1, e)
                time.sleep(self._auth_config.retry_delay_ms / 1000)

    def _on_session_timeout(self) -> None:
        logger.info("Leaving the authenticated area after inactivity")
