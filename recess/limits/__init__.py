"""Rate limiting, client-side and backend-enforced."""

from recess.limits.client import ClientRateLimiter
from recess.limits.remote import RateLimitConfig, RateLimitResult, RemoteRateLimiter

__all__ = ["ClientRateLimiter", "RateLimitConfig", "RateLimitResult", "RemoteRateLimiter"]
