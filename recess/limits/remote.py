"""Server-side rate limit checks through the backend's check_rate_limit function.

Library API for callers of rate-limited backend endpoints. The pygame runtime
only throttles sign-in, with ClientRateLimiter.
"""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from recess.errors import BackendError, RateLimitExceededError

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_S = 60


class RpcBackend(Protocol):
    """The part of the backend client used for rate limiting."""

    def rpc(self, name: str, params: dict[str, Any]) -> Any: ...

    def insert(self, table: str, row: dict[str, Any]) -> None: ...


@dataclass
class RateLimitConfig:
    """Limit for one endpoint."""

    endpoint: str
    max_requests: int = 10
    window_minutes: int = 60

    @classmethod
    def from_dict(cls, endpoint: str, data: dict[str, Any]) -> "RateLimitConfig":
        return cls(
            endpoint=endpoint,
            max_requests=int(data.get("max_requests", 10)),
            window_minutes=int(data.get("window_minutes", 60)),
        )


@dataclass
class RateLimitResult:
    """Outcome of a rate limit check."""

    allowed: bool
    retry_after: int | None = None
    remaining: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RateLimitResult":
        retry_after = data.get("retry_after", data.get("retryAfter"))
        remaining = data.get("remaining")
        return cls(
            allowed=bool(data.get("allowed", True)),
            retry_after=int(retry_after) if retry_after is not None else None,
            remaining=int(remaining) if remaining is not None else None,
        )


class RemoteRateLimiter:
    """Asks the backend whether a user may call an endpoint.

    Fails open: when the check itself errors the request is allowed.
    """

    def __init__(self, backend: RpcBackend) -> None:
        self._backend = backend

    def check(self, user_id: str, config: RateLimitConfig) -> RateLimitResult:
        """Check and count one request.

        Args:
            user_id: Requesting user.
            config: Endpoint limit.

        Returns:
            Backend verdict, or allowed=True if the backend could not answer.
        """
        try:
            data = self._backend.rpc(
                "check_rate_limit",
                {
                    "p_user_id": user_id,
                    "p_endpoint": config.endpoint,
                    "p_max_requests": config.max_requests,
                    "p_window_minutes": config.window_minutes,
                },
            )
        except BackendError as e:
            logger.error("Rate limit check failed for %s: %s", config.endpoint, e)
            return RateLimitResult(allowed=True)

        if not isinstance(data, dict):
            logger.error("Unexpected rate limit response for %s: %r", config.endpoint, data)
            return RateLimitResult(allowed=True)
        try:
            return RateLimitResult.from_dict(data)
        except (TypeError, ValueError) as e:
            logger.error("Malformed rate limit response for %s: %s", config.endpoint, e)
            return RateLimitResult(allowed=True)

    def enforce(self, user_id: str, config: RateLimitConfig) -> RateLimitResult:
        """Check the limit and raise if it is exceeded.

        Raises:
            RateLimitExceededError: The user is over the limit.
        """
        result = self.check(user_id, config)
        if result.allowed:
            return result

        logger.warning("Rate limit exceeded for user %s on %s", user_id, config.endpoint)
        self._record_violation(user_id, config)
        raise RateLimitExceededError(
            retry_after=result.retry_after or DEFAULT_RETRY_AFTER_S,
            limit=config.max_requests,
            window_minutes=config.window_minutes,
        )

    def _record_violation(self, user_id: str, config: RateLimitConfig) -> None:
        try:
            self._backend.insert(
                "rate_limit_violations",
                {
                    "parent_id": user_id,
                    "violation_type": "api_rate_limit",
                    "endpoint": config.endpoint,
                    "metadata": {
                        "maxRequests": config.max_requests,
                        "windowMinutes": config.window_minutes,
                    },
                },
            )
        except BackendError as e:
            logger.error("Could not record rate limit violation: %s", e)
