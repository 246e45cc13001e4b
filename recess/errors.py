"""Exception hierarchy for Recess."""


class RecessError(Exception):
    """Base class for all Recess errors."""


class ConfigError(RecessError):
    """Invalid or incomplete configuration."""


class SessionTimeoutAlreadyActiveError(RecessError):
    """Another session timeout is already mounted in the same tab."""


class BackendError(RecessError):
    """A request to the hosted backend failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthError(BackendError):
    """Sign-in or token validation failed."""


class SignOutError(AuthError):
    """The backend could not confirm the sign-out."""


class RateLimitExceededError(RecessError):
    """Too many requests for an endpoint within the window."""

    def __init__(self, retry_after: int, limit: int, window_minutes: int) -> None:
        super().__init__(
            f"Rate limit exceeded ({limit} per {window_minutes} min), retry in {retry_after}s"
        )
        self.retry_after = retry_after
        self.limit = limit
        self.window_minutes = window_minutes
