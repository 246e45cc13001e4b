"""Base protocol definitions for external collaborators."""

from typing import Protocol


class AuthProvider(Protocol):
    """Protocol for the authentication backend."""

    @property
    def is_authenticated(self) -> bool:
        """Whether a user is currently signed in."""
        ...

    def sign_out(self) -> None:
        """Terminate the authenticated session.

        Raises:
            Exception: If the backend could not confirm the sign-out.
        """
        ...


class Notifier(Protocol):
    """Protocol for user-visible notifications. Fire and forget."""

    def show_warning(self, message: str, duration_ms: int) -> None:
        """Show a warning notification.

        Args:
            message: Text to show.
            duration_ms: How long the notification stays visible.
        """
        ...

    def show_expired(self, message: str, duration_ms: int) -> None:
        """Show a session-expired notification.

        Args:
            message: Text to show.
            duration_ms: How long the notification stays visible.
        """
        ...
