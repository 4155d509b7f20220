"""Tests for the task CRUD endpoints."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from todo_service.models.analysis import AnalysisResult
from todo_service.models.auth import AuthUser
from todo_service.services.supabase import SupabaseError

AUTH = {"Authorization": "Bearer valid-token"}

ROWS = [
    {"id": "a", "user_id": "user-1", "title": "Quarterly report", "description": None, "priority": "high",
     "due_date": "2024-03-15", "due_time": "09:00", "category": ["업무"], "completed": False,
     "completed_at": None, "created_at": "2024-03-03T00:00:00+00:00"},
    {"id": "b", "user_id": "user-1", "title": "Gym", "description": None, "priority": "low",
     "due_date": "2024-03-20", "due_time": None, "category": [], "completed": False,
     "completed_at": None, "created_at": "2024-03-05T00:00:00+00:00"},
    {"id": "c", "user_id": "user-1", "title": "Buy milk", "description": None, "priority": "medium",
     "due_date": "2024-03-16", "due_time": None, "category": ["개인"], "completed": True,
     "completed_at": "2024-03-14T09:00:00+00:00", "created_at": "2024-03-04T00:00:00+00:00"},
]


@pytest.fixture
def signed_in(supabase: MagicMock, user: AuthUser) -> MagicMock:
    """Supabase stand-in that accepts valid-token and holds ROWS."""
    supabase.get_user.side_effect = lambda token: user if token == "valid-token" else None
    supabase.select.return_value = ROWS
    return supabase


def test_list_requires_session(client: TestClient, supabase: MagicMock) -> None:
    """Test that listing without a token is 401."""
    response = client.get("/todos")

    assert response.status_code == 401
    assert response.json()["error"] == "Authentication required"
    supabase.select.assert_not_called()


def test_list_rejects_invalid_token(client: TestClient, signed_in: MagicMock) -> None:
    """Test that an unknown token is 401."""
    response = client.get("/todos", headers={"Authorization": "Bearer expired"})

    assert response.status_code == 401


def test_list_accepts_session_cookie(client: TestClient, signed_in: MagicMock) -> None:
    """Test that the access token cookie authenticates too."""
    client.cookies.set("sb-access-token", "valid-token")

    response = client.get("/todos")

    assert response.status_code == 200


def test_list_returns_newest_first_scoped_to_user(client: TestClient, signed_in: MagicMock) -> None:
    """Test default ordering and that the query is filtered by owner."""
    response = client.get("/todos", headers=AUTH)

    assert response.status_code == 200
    assert [t["id"] for t in response.json()] == ["b", "c", "a"]
    args = signed_in.select.call_args
    assert args.args[1] == "valid-token"
    assert args.args[2] == {"user_id": "eq.user-1"}
    assert args.kwargs["order"] == "created_at.desc"


def test_list_filters_and_sorts(client: TestClient, signed_in: MagicMock) -> None:
    """Test query parameters for status, priority and sort order."""
    response = client.get(
        "/todos",
        params=[("status", "incomplete"), ("status", "overdue"), ("sort_by", "priority")],
        headers=AUTH,
    )

    assert [t["id"] for t in response.json()] == ["a", "b"]

    response = client.get("/todos", params={"priority": "medium"}, headers=AUTH)
    assert [t["id"] for t in response.json()] == ["c"]

    response = client.get("/todos", params={"q": "GYM"}, headers=AUTH)
    assert [t["id"] for t in response.json()] == ["b"]


def test_list_for_period(client: TestClient, signed_in: MagicMock) -> None:
    """Test today and this-week selection."""
    response = client.get("/todos", params={"period": "today"}, headers=AUTH)
    assert [t["id"] for t in response.json()] == ["a"]

    response = client.get("/todos", params={"period": "week", "sort_by": "dueDate"}, headers=AUTH)
    assert [t["id"] for t in response.json()] == ["a", "c"]


def test_list_rejects_unknown_sort(client: TestClient, signed_in: MagicMock) -> None:
    """Test that an unknown sort key is a 400."""
    response = client.get("/todos", params={"sort_by": "title"}, headers=AUTH)

    assert response.status_code == 400


def test_create_sets_owner_and_incomplete(client: TestClient, signed_in: MagicMock) -> None:
    """Test that a created task belongs to the caller and starts incomplete."""
    signed_in.insert.side_effect = lambda table, token, row: {"id": "new", **row}

    response = client.post(
        "/todos",
        json={"title": "  Write report ", "due_date": "2024-03-16", "due_time": "15:00",
              "priority": "high", "category": ["업무", "업무"]},
        headers=AUTH,
    )

    assert response.status_code == 201
    table, token, row = signed_in.insert.call_args.args
    assert table == "todos"
    assert row["user_id"] == "user-1"
    assert row["completed"] is False
    assert row["title"] == "Write report"
    assert row["category"] == ["업무"]
    assert response.json()["id"] == "new"


@pytest.mark.parametrize("body", [{"title": ""}, {"title": "x" * 51}, {"title": "ok", "description": "d" * 501}])
def test_create_validates_fields(client: TestClient, signed_in: MagicMock, body: dict) -> None:
    """Test title and description limits."""
    response = client.post("/todos", json=body, headers=AUTH)

    assert response.status_code == 400
    signed_in.insert.assert_not_called()


def test_create_rejects_nested_category(client: TestClient, signed_in: MagicMock) -> None:
    """Test that a category holding non-strings is a bad request, not a server error."""
    response = client.post("/todos", json={"title": "ok", "category": [["a"]]}, headers=AUTH)

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"
    signed_in.insert.assert_not_called()


def test_update_sends_only_given_fields(client: TestClient, signed_in: MagicMock) -> None:
    """Test partial updates."""
    signed_in.update.return_value = [{**ROWS[0], "priority": "low"}]

    response = client.patch("/todos/a", json={"priority": "low"}, headers=AUTH)

    assert response.status_code == 200
    assert response.json()["priority"] == "low"
    table, token, filters, values = signed_in.update.call_args.args
    assert filters == {"user_id": "eq.user-1", "id": "eq.a"}
    assert values == {"priority": "low"}


def test_update_missing_task_is_404(client: TestClient, signed_in: MagicMock) -> None:
    """Test that updating a task that matched no row is 404."""
    signed_in.update.return_value = []

    response = client.patch("/todos/zzz", json={"title": "New"}, headers=AUTH)

    assert response.status_code == 404
    assert response.json()["error"] == "Task not found"


@pytest.mark.parametrize(
    "body",
    [{"priority": None, "title": None}, {"title": None}, {"priority": None}, {"category": None}],
)
def test_update_rejects_null_required_fields(client: TestClient, signed_in: MagicMock, body: dict) -> None:
    """Test that title, priority and category cannot be cleared with null."""
    response = client.patch("/todos/a", json=body, headers=AUTH)

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"
    signed_in.update.assert_not_called()


def test_update_allows_clearing_optional_fields(client: TestClient, signed_in: MagicMock) -> None:
    """Test that description and due date can be cleared with null."""
    signed_in.update.return_value = [{**ROWS[0], "description": None, "due_date": None}]

    response = client.patch("/todos/a", json={"description": None, "due_date": None}, headers=AUTH)

    assert response.status_code == 200
    assert signed_in.update.call_args.args[3] == {"description": None, "due_date": None}


def test_complete_stamps_completed_at(client: TestClient, signed_in: MagicMock) -> None:
    """Test that completing sets completed_at to now."""
    signed_in.update.return_value = [{**ROWS[0], "completed": True, "completed_at": "2024-03-15T10:00:00+09:00"}]

    response = client.patch("/todos/a/complete", json={"completed": True}, headers=AUTH)

    assert response.status_code == 200
    table, token, filters, values = signed_in.update.call_args.args
    assert filters == {"user_id": "eq.user-1", "id": "eq.a", "completed": "eq.false"}
    assert values == {"completed": True, "completed_at": "2024-03-15T10:00:00+09:00"}


def test_complete_keeps_completed_at_of_done_task(client: TestClient, signed_in: MagicMock) -> None:
    """Test that completing a task twice keeps the first completion time."""
    signed_in.update.return_value = []
    signed_in.select.return_value = [ROWS[2]]

    response = client.patch("/todos/c/complete", json={"completed": True}, headers=AUTH)

    assert response.status_code == 200
    assert response.json()["completed"] is True
    assert response.json()["completed_at"].startswith("2024-03-14T09:00:00")
    assert signed_in.select.call_args.args[2] == {"user_id": "eq.user-1", "id": "eq.c"}


def test_complete_missing_task_is_404(client: TestClient, signed_in: MagicMock) -> None:
    """Test that completing an unknown id is 404."""
    signed_in.update.return_value = []
    signed_in.select.return_value = []

    response = client.patch("/todos/zzz/complete", json={"completed": True}, headers=AUTH)

    assert response.status_code == 404


def test_reopen_clears_completed_at(client: TestClient, signed_in: MagicMock) -> None:
    """Test that reopening clears completed_at."""
    signed_in.update.return_value = [ROWS[2] | {"completed": False, "completed_at": None}]

    response = client.patch("/todos/c/complete", json={"completed": False}, headers=AUTH)

    assert response.status_code == 200
    assert signed_in.update.call_args.args[3] == {"completed": False, "completed_at": None}
    assert response.json()["completed_at"] is None


def test_delete(client: TestClient, signed_in: MagicMock) -> None:
    """Test deleting an owned task."""
    signed_in.delete.return_value = [ROWS[0]]

    response = client.delete("/todos/a", headers=AUTH)

    assert response.status_code == 200
    assert response.json() == {"success": True, "id": "a"}


def test_delete_missing_task_is_404(client: TestClient, signed_in: MagicMock) -> None:
    """Test that deleting nothing is 404."""
    signed_in.delete.return_value = []

    response = client.delete("/todos/a", headers=AUTH)

    assert response.status_code == 404


def test_store_failure_is_502(client: TestClient, signed_in: MagicMock) -> None:
    """Test that Supabase errors surface as store errors."""
    signed_in.select.side_effect = SupabaseError(500, "relation does not exist")

    response = client.get("/todos", headers=AUTH)

    assert response.status_code == 502
    assert "relation does not exist" in response.json()["details"]


def test_analysis_of_own_tasks_for_today(
    client: TestClient, signed_in: MagicMock, completion_client: MagicMock
) -> None:
    """Test that the caller's tasks are filtered to the period and analyzed."""
    completion_client.complete.return_value = AnalysisResult(
        summary="0 of 1 done", urgent_tasks=["Quarterly report"], insights=["i"], recommendations=["r"],
    )

    response = client.get("/todos/analysis", params={"period": "today"}, headers=AUTH)

    assert response.status_code == 200
    assert response.json()["meta"]["total_todos"] == 1
    assert response.json()["data"]["urgentTasks"] == ["Quarterly report"]


def test_analysis_with_no_tasks_in_period(
    client: TestClient, signed_in: MagicMock, completion_client: MagicMock
) -> None:
    """Test that an empty period gets the template without a model call."""
    signed_in.select.return_value = [ROWS[1]]

    response = client.get("/todos/analysis", params={"period": "today"}, headers=AUTH)

    assert response.status_code == 200
    assert response.json()["data"]["urgentTasks"] == []
    completion_client.complete.assert_not_called()
