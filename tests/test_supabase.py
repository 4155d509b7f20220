"""Tests for the Supabase REST client."""

import asyncio
import json

import httpx
import pytest

from todo_service.services.supabase import SupabaseClient, SupabaseError

URL = "https://project.supabase.co"
KEY = "sb_publishable_test"


def _client(handler) -> SupabaseClient:
    return SupabaseClient(URL, KEY, transport=httpx.MockTransport(handler))


def test_get_user_sends_key_and_token() -> None:
    """Test that user lookup carries the API key and the user's token."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["apikey"] = request.headers["apikey"]
        seen["auth"] = request.headers["authorization"]
        return httpx.Response(200, json={"id": "user-1", "email": "a@example.com"})

    user = asyncio.run(_client(handler).get_user("token-1"))

    assert user.id == "user-1"
    assert user.email == "a@example.com"
    assert user.access_token == "token-1"
    assert seen == {"path": "/auth/v1/user", "apikey": KEY, "auth": "Bearer token-1"}


@pytest.mark.parametrize("status_code", [401, 403])
def test_get_user_returns_none_for_rejected_token(status_code: int) -> None:
    """Test that an invalid session is not an error."""
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"msg": "invalid JWT"})

    assert asyncio.run(_client(handler).get_user("bad")) is None


def test_get_user_raises_on_server_error() -> None:
    """Test that Supabase outages are errors, not signed-out users."""
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "down"})

    with pytest.raises(SupabaseError) as exc_info:
        asyncio.run(_client(handler).get_user("token"))
    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "down"


def test_exchange_code_for_session_uses_pkce_grant() -> None:
    """Test the PKCE code exchange request and parsed session."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["grant_type"] = request.url.params["grant_type"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"access_token": "at", "refresh_token": "rt", "expires_in": 1800, "user": {"id": "user-1"}},
        )

    session = asyncio.run(_client(handler).exchange_code_for_session("code-1", "verifier-1"))

    assert seen == {"grant_type": "pkce", "body": {"auth_code": "code-1", "code_verifier": "verifier-1"}}
    assert session.access_token == "at"
    assert session.refresh_token == "rt"
    assert session.expires_in == 1800
    assert session.user_id == "user-1"


def test_select_builds_postgrest_query() -> None:
    """Test select parameters and ordering."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=[{"id": 1}])

    rows = asyncio.run(_client(handler).select("todos", "token", {"user_id": "eq.u1"}, order="created_at.desc"))

    assert rows == [{"id": 1}]
    assert seen["path"] == "/rest/v1/todos"
    assert seen["params"] == {"select": "*", "user_id": "eq.u1", "order": "created_at.desc"}


def test_insert_asks_for_representation() -> None:
    """Test that inserts return the stored row."""
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.headers["prefer"] == "return=representation"
        return httpx.Response(201, json=[{"id": 7, **json.loads(request.content)}])

    row = asyncio.run(_client(handler).insert("todos", "token", {"title": "t"}))

    assert row == {"id": 7, "title": "t"}


def test_update_and_delete_send_filters() -> None:
    """Test that update and delete target rows by filter."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, dict(request.url.params)))
        return httpx.Response(200, json=[])

    client = _client(handler)
    assert asyncio.run(client.update("todos", "token", {"id": "eq.1"}, {"completed": True})) == []
    assert asyncio.run(client.delete("todos", "token", {"id": "eq.1"})) == []

    assert calls == [("PATCH", {"id": "eq.1"}), ("DELETE", {"id": "eq.1"})]


def test_connection_failure_is_503() -> None:
    """Test that transport errors become SupabaseError."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(SupabaseError) as exc_info:
        asyncio.run(_client(handler).select("todos", "token", {}))
    assert exc_info.value.status_code == 503
