"""Supabase REST adapter: password auth, sign-out, RPC calls and inserts."""

import logging
import threading
from dataclasses import dataclass
from typing import Any

import httpx

from recess.errors import AuthError, BackendError, ConfigError, SignOutError

logger = logging.getLogger(__name__)


@dataclass
class SupabaseConfig:
    """Connection settings for the hosted backend."""

    url: str = ""
    anon_key: str = ""
    timeout_s: float = 10.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SupabaseConfig":
        return cls(
            url=str(data.get("url", "")).rstrip("/"),
            anon_key=str(data.get("anon_key", "")),
            timeout_s=float(data.get("timeout_s", 10.0)),
        )


class SupabaseClient:
    """Minimal Supabase client over httpx."""

    def __init__(
        self,
        config: SupabaseConfig,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Backend URL and anon key.
            http_client: Optional preconfigured httpx client (tests inject a
                MockTransport here).

        Raises:
            ConfigError: URL or anon key missing.
        """
        if not config.url or not config.anon_key:
            raise ConfigError("Supabase url and anon_key are required")

        self.config = config
        self._http = http_client or httpx.Client(timeout=config.timeout_s)
        self._access_token: str | None = None
        self._user: dict[str, Any] | None = None
        self._lock = threading.Lock()

    @property
    def is_authenticated(self) -> bool:
        with self._lock:
            return self._access_token is not None

    @property
    def user(self) -> dict[str, Any] | None:
        with self._lock:
            return self._user

    @property
    def user_id(self) -> str | None:
        user = self.user
        return str(user["id"]) if user and "id" in user else None

    def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        """Sign in with email and password.

        Args:
            email: Account email.
            password: Account password.

        Returns:
            The signed-in user record.

        Raises:
            AuthError: Credentials rejected or backend unreachable.
        """
        try:
            response = self._http.post(
                f"{self.config.url}/auth/v1/token",
                params={"grant_type": "password"},
                headers=self._headers(),
                json={"email": email, "password": password},
            )
        except httpx.RequestError as e:
            raise AuthError(f"Sign-in request failed: {e}") from e

        if response.status_code != 200:
            raise AuthError(
                f"Sign-in rejected: {_error_message(response)}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
            token = data["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise AuthError(f"Sign-in returned an unreadable session: {e}") from e
        user: dict[str, Any] = data.get("user") or {}
        with self._lock:
            self._access_token = token
            self._user = user
        logger.info("Signed in as %s", email)
        return user

    def sign_out(self) -> None:
        """Revoke the session on the backend.

        The local session is dropped before the request is sent, so the
        client ends signed out even when the backend call fails.

        Raises:
            SignOutError: The backend did not confirm the sign-out.
        """
        with self._lock:
            token = self._access_token
            self._access_token = None
            self._user = None

        if token is None:
            return

        try:
            response = self._http.post(
                f"{self.config.url}/auth/v1/logout",
                headers=self._headers(token),
            )
        except httpx.RequestError as e:
            raise SignOutError(f"Sign-out request failed: {e}") from e

        if response.status_code not in (200, 204):
            raise SignOutError(
                f"Sign-out rejected: {_error_message(response)}",
                status_code=response.status_code,
            )
        logger.info("Signed out")

    def rpc(self, name: str, params: dict[str, Any]) -> Any:
        """Call a Postgres function exposed through PostgREST.

        Args:
            name: Function name.
            params: Named arguments.

        Returns:
            Decoded JSON result.

        Raises:
            BackendError: Request failed, returned an error status or a body
                that is not JSON.
        """
        response = self._request("POST", f"/rest/v1/rpc/{name}", json=params)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(
                f"rpc {name} returned a non-JSON body", status_code=response.status_code
            ) from e

    def insert(self, table: str, row: dict[str, Any]) -> None:
        """Insert one row into a table.

        Raises:
            BackendError: Request failed or returned an error status.
        """
        self._request(
            "POST",
            f"/rest/v1/{table}",
            json=row,
            extra_headers={"Prefer": "return=minimal"},
        )

    def close(self) -> None:
        self._http.close()

    def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        extra_headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        with self._lock:
            token = self._access_token
        headers = self._headers(token)
        if extra_headers:
            headers.update(extra_headers)

        try:
            response = self._http.request(
                method, f"{self.config.url}{path}", headers=headers, json=json
            )
        except httpx.RequestError as e:
            raise BackendError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            raise BackendError(
                f"{method} {path} returned {response.status_code}: {_error_message(response)}",
                status_code=response.status_code,
            )
        return response

    def _headers(self, token: str | None = None) -> dict[str, str]:
        return {
            "apikey": self.config.anon_key,
            "Authorization": f"Bearer {token or self.config.anon_key}",
            "Content-Type": "application/json",
        }


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(data, dict):
        for key in ("error_description", "msg", "message", "error"):
            if data.get(key):
                return str(data[key])
    return str(data)
