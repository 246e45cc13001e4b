"""Tests for client and remote rate limiting."""

from unittest.mock import MagicMock

import httpx
import pytest

from recess.errors import BackendError, RateLimitExceededError
from recess.limits.client import ClientRateLimiter
from recess.limits.remote import RateLimitConfig, RateLimitResult, RemoteRateLimiter
from recess.providers.supabase import SupabaseClient, SupabaseConfig


class FakeClock:
    def __init__(self) -> None:
        self.t = 1000.0

    def __call__(self) -> float:
        return self.t


class TestClientRateLimiter:
    def test_allows_within_limit(self) -> None:
        limiter = ClientRateLimiter(now_fn=FakeClock())
        assert not limiter.check("send-message", 2, 60_000)
        assert not limiter.check("send-message", 2, 60_000)

    def test_rejects_when_saturated(self) -> None:
        limiter = ClientRateLimiter(now_fn=FakeClock())
        limiter.check("send-message", 2, 60_000)
        limiter.check("send-message", 2, 60_000)
        assert limiter.check("send-message", 2, 60_000)

    def test_identifiers_are_independent(self) -> None:
        limiter = ClientRateLimiter(now_fn=FakeClock())
        limiter.check("a", 1, 60_000)
        assert limiter.check("a", 1, 60_000)
        assert not limiter.check("b", 1, 60_000)

    def test_window_expiry_starts_fresh(self) -> None:
        clock = FakeClock()
        limiter = ClientRateLimiter(now_fn=clock)
        limiter.check("a", 1, 60_000)
        assert limiter.check("a", 1, 60_000)

        clock.t += 61
        assert not limiter.check("a", 1, 60_000)

    def test_reset_in(self) -> None:
        clock = FakeClock()
        limiter = ClientRateLimiter(now_fn=clock)
        assert limiter.reset_in("a") == 0

        limiter.check("a", 1, 60_000)
        clock.t += 15
        assert limiter.reset_in("a") == 45_000

        clock.t += 60
        assert limiter.reset_in("a") == 0

    def test_clear(self) -> None:
        limiter = ClientRateLimiter(now_fn=FakeClock())
        limiter.check("a", 1, 60_000)
        limiter.clear("a")
        assert not limiter.check("a", 1, 60_000)


@pytest.fixture
def backend() -> MagicMock:
    return MagicMock()


@pytest.fixture
def lesson_limit() -> RateLimitConfig:
    return RateLimitConfig(endpoint="generate-custom-lesson", max_requests=10, window_minutes=60)


class TestRateLimitResult:
    def test_from_dict_accepts_camel_case(self) -> None:
        result = RateLimitResult.from_dict({"allowed": False, "retryAfter": 30, "remaining": 0})
        assert result == RateLimitResult(allowed=False, retry_after=30, remaining=0)


class TestRemoteRateLimiter:
    def test_check_calls_rpc(self, backend, lesson_limit) -> None:
        backend.rpc.return_value = {"allowed": True, "remaining": 7}

        result = RemoteRateLimiter(backend).check("parent-1", lesson_limit)

        assert result.allowed
        assert result.remaining == 7
        backend.rpc.assert_called_once_with(
            "check_rate_limit",
            {
                "p_user_id": "parent-1",
                "p_endpoint": "generate-custom-lesson",
                "p_max_requests": 10,
                "p_window_minutes": 60,
            },
        )

    def test_check_fails_open_on_backend_error(self, backend, lesson_limit, caplog) -> None:
        backend.rpc.side_effect = BackendError("down", status_code=503)

        result = RemoteRateLimiter(backend).check("parent-1", lesson_limit)

        assert result.allowed
        assert "Rate limit check failed" in caplog.text

    def test_check_fails_open_on_unexpected_payload(self, backend, lesson_limit) -> None:
        backend.rpc.return_value = None
        assert RemoteRateLimiter(backend).check("parent-1", lesson_limit).allowed

    def test_check_fails_open_on_malformed_fields(self, backend, lesson_limit, caplog) -> None:
        backend.rpc.return_value = {"allowed": False, "retry_after": "soon"}

        result = RemoteRateLimiter(backend).check("parent-1", lesson_limit)

        assert result.allowed
        assert "Malformed rate limit response" in caplog.text

    def test_check_fails_open_on_gateway_page(self, lesson_limit, caplog) -> None:
        http = httpx.Client(
            transport=httpx.MockTransport(lambda r: httpx.Response(200, text="<html>gateway</html>"))
        )
        client = SupabaseClient(
            SupabaseConfig(url="https://example.supabase.co", anon_key="anon-key"), http_client=http
        )

        result = RemoteRateLimiter(client).check("parent-1", lesson_limit)

        assert result.allowed
        assert "Rate limit check failed" in caplog.text

    def test_enforce_passes_when_allowed(self, backend, lesson_limit) -> None:
        backend.rpc.return_value = {"allowed": True}
        RemoteRateLimiter(backend).enforce("parent-1", lesson_limit)
        backend.insert.assert_not_called()

    def test_enforce_records_violation_and_raises(self, backend, lesson_limit) -> None:
        backend.rpc.return_value = {"allowed": False, "retry_after": 120}

        with pytest.raises(RateLimitExceededError) as exc:
            RemoteRateLimiter(backend).enforce("parent-1", lesson_limit)

        assert exc.value.retry_after == 120
        assert exc.value.limit == 10
        table, row = backend.insert.call_args.args
        assert table == "rate_limit_violations"
        assert row["parent_id"] == "parent-1"
        assert row["violation_type"] == "api_rate_limit"
        assert row["metadata"] == {"maxRequests": 10, "windowMinutes": 60}

    def test_enforce_defaults_retry_after(self, backend, lesson_limit) -> None:
        backend.rpc.return_value = {"allowed": False}
        with pytest.raises(RateLimitExceededError) as exc:
            RemoteRateLimiter(backend).enforce("parent-1", lesson_limit)
        assert exc.value.retry_after == 60

    def test_violation_recording_failure_still_raises_limit(self, backend, lesson_limit) -> None:
        backend.rpc.return_value = {"allowed": False, "retry_after": 5}
        backend.insert.side_effect = BackendError("insert failed")

        with pytest.raises(RateLimitExceededError):
            RemoteRateLimiter(backend).enforce("parent-1", lesson_limit)

    def test_config_from_dict(self) -> None:
        config = RateLimitConfig.from_dict("weekly-report", {"max_requests": 3})
        assert config == RateLimitConfig("weekly-report", max_requests=3, window_minutes=60)
