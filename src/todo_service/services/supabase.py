"""Supabase REST client for auth sessions and table rows."""

import logging
from functools import lru_cache
from typing import Any

import httpx

from ..config import settings
from ..errors import ConfigurationError
from ..models.auth import AuthSession, AuthUser

logger = logging.getLogger(__name__)


class SupabaseError(Exception):
    """A Supabase request failed."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"Supabase error ({status_code}): {message}")
        self.status_code = status_code
        self.message = message


class SupabaseClient:
    """Minimal Supabase client over the Auth (GoTrue) and PostgREST HTTP APIs.

    Table requests carry the user's access token, so the project's row level
    security policies decide which rows are visible and writable.
    """

    def __init__(
        self,
        url: str,
        publishable_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize Supabase client.

        Args:
            url: Project URL, e.g. "https://abc.supabase.co"
            publishable_key: Public (anon/publishable) API key
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.url = url.rstrip("/")
        self.publishable_key = publishable_key
        self.timeout = timeout
        self._transport = transport

    def _headers(self, access_token: str | None = None) -> dict[str, str]:
        return {
            "apikey": self.publishable_key,
            "Authorization": f"Bearer {access_token or self.publishable_key}",
        }

    async def _request(
        self,
        method: str,
        path: str,
        access_token: str | None = None,
        params: dict[str, str] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> httpx.Response:
        headers = self._headers(access_token)
        if prefer:
            headers["Prefer"] = prefer

        try:
            async with httpx.AsyncClient(
                base_url=self.url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Supabase request failed: {method} {path}: {e}")
            raise SupabaseError(503, str(e)) from e

        if response.is_error:
            message = _error_message(response)
            logger.error(f"Supabase error {response.status_code} on {method} {path}: {message}")
            raise SupabaseError(response.status_code, message)

        return response

    async def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user owning the token, or None when the token is not valid."""
        try:
            response = await self._request("GET", "/auth/v1/user", access_token=access_token)
        except SupabaseError as e:
            if e.status_code in (401, 403):
                return None
            raise

        data = response.json()
        return AuthUser(id=data["id"], email=data.get("email"), access_token=access_token)

    async def exchange_code_for_session(self, code: str, code_verifier: str) -> AuthSession:
        """Exchange a PKCE auth code for a session."""
        response = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "pkce"},
            json={"auth_code": code, "code_verifier": code_verifier},
        )
        data = response.json()
        return AuthSession(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            expires_in=data.get("expires_in", 3600),
            user_id=(data.get("user") or {}).get("id"),
        )

    async def select(
        self,
        table: str,
        access_token: str,
        filters: dict[str, str],
        order: str | None = None,
    ) -> list[dict]:
        """Select rows matching PostgREST filters like {"user_id": "eq.123"}."""
        params = {"select": "*", **filters}
        if order:
            params["order"] = order
        response = await self._request("GET", f"/rest/v1/{table}", access_token=access_token, params=params)
        return response.json()

    async def insert(self, table: str, access_token: str, row: dict) -> dict:
        """Insert one row and return it as stored."""
        response = await self._request(
            "POST",
            f"/rest/v1/{table}",
            access_token=access_token,
            json=row,
            prefer="return=representation",
        )
        return response.json()[0]

    async def update(self, table: str, access_token: str, filters: dict[str, str], values: dict) -> list[dict]:
        """Update matching rows and return them."""
        response = await self._request(
            "PATCH",
            f"/rest/v1/{table}",
            access_token=access_token,
            params=filters,
            json=values,
            prefer="return=representation",
        )
        return response.json()

    async def delete(self, table: str, access_token: str, filters: dict[str, str]) -> list[dict]:
        """Delete matching rows and return them."""
        response = await self._request(
            "DELETE",
            f"/rest/v1/{table}",
            access_token=access_token,
            params=filters,
            prefer="return=representation",
        )
        return response.json()


def _error_message(response: httpx.Response) -> str:
    """Best-effort message from a Supabase error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return body.get("message") or body.get("msg") or body.get("error_description") or body.get("error") or str(body)
    return str(body)


@lru_cache(maxsize=1)
def get_supabase_client() -> SupabaseClient:
    """Get or create the SupabaseClient singleton."""
    if not settings.supabase_url or not settings.supabase_publishable_key:
        raise ConfigurationError(
            "TODO_SUPABASE_URL and TODO_SUPABASE_PUBLISHABLE_KEY must be set.",
            error="Auth service configuration error",
        )
    return SupabaseClient(
        url=settings.supabase_url,
        publishable_key=settings.supabase_publishable_key,
        timeout=settings.http_timeout,
    )
