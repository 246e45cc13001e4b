"""Session timeout configuration."""

from dataclasses import dataclass, field
from typing import Any

DEFAULT_WARNING_MESSAGE = (
    "Your session will expire in 2 minutes due to inactivity. "
    "Move your mouse or press a key to stay signed in."
)
DEFAULT_EXPIRED_MESSAGE = "Session expired due to inactivity. Please sign in again to continue."


@dataclass
class TimeoutMessages:
    """User-facing texts and display durations for timeout notifications."""

    warning: str = DEFAULT_WARNING_MESSAGE
    warning_duration_ms: int = 30000
    expired: str = DEFAULT_EXPIRED_MESSAGE
    expired_duration_ms: int = 10000

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimeoutMessages":
        return cls(
            warning=str(data.get("warning", DEFAULT_WARNING_MESSAGE)),
            warning_duration_ms=int(data.get("warning_duration_ms", 30000)),
            expired=str(data.get("expired", DEFAULT_EXPIRED_MESSAGE)),
            expired_duration_ms=int(data.get("expired_duration_ms", 10000)),
        )


@dataclass
class SessionConfig:
    """Session section of the config file.

    The timeout and warning lead time are fixed and deliberately absent here.
    """

    enabled: bool = True
    messages: TimeoutMessages = field(default_factory=TimeoutMessages)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionConfig":
        """Create config from dictionary.

        Args:
            data: Configuration dictionary.

        Returns:
            SessionConfig instance.
        """
        return cls(
            enabled=bool(data.get("enabled", True)),
            messages=TimeoutMessages.from_dict(data.get("messages") or {}),
        )
