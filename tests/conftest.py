"""Shared fixtures for API and service tests."""

from datetime import datetime
from typing import Iterator
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from todo_service.clock import FixedClock, get_clock
from todo_service.main import app
from todo_service.models.auth import AuthUser
from todo_service.services.completion import BedrockCompletionClient, get_completion_client
from todo_service.services.supabase import SupabaseClient, get_supabase_client

# Friday, 10:00 in Asia/Seoul
NOW = datetime(2024, 3, 15, 10, 0)


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at NOW."""
    return FixedClock(NOW)


@pytest.fixture
def completion_client() -> MagicMock:
    """Completion client stand-in; set .complete.return_value per test."""
    return MagicMock(spec=BedrockCompletionClient)


@pytest.fixture
def supabase() -> MagicMock:
    """Supabase client stand-in with async methods."""
    mock = MagicMock(spec=SupabaseClient)
    mock.get_user.return_value = None
    return mock


@pytest.fixture
def user() -> AuthUser:
    return AuthUser(id="user-1", email="user@example.com", access_token="valid-token")


@pytest.fixture
def client(clock: FixedClock, completion_client: MagicMock, supabase: MagicMock) -> Iterator[TestClient]:
    """Test client with the clock, model and Supabase replaced."""
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_completion_client] = lambda: completion_client
    app.dependency_overrides[get_supabase_client] = lambda: supabase

    with (
        patch("todo_service.services.todo_parser.ensure_credentials"),
        patch("todo_service.services.todo_analyzer.ensure_credentials"),
        patch("todo_service.auth.get_supabase_client", return_value=supabase),
    ):
        yield TestClient(app)

    app.dependency_overrides.clear()
