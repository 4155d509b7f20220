"""Task CRUD endpoints scoped to the signed-in user."""

import logging

from fastapi import APIRouter, Depends, Query

from ..auth import get_current_user
from ..clock import ZoneClock, get_clock
from ..config import settings
from ..models.analysis import AnalysisResponse, Period
from ..models.auth import AuthUser
from ..models.task import (
    Priority,
    TodoCompleteRequest,
    TodoCreate,
    TodoDeleteResponse,
    TodoRecord,
    TodoUpdate,
)
from ..services.completion import BedrockCompletionClient, get_completion_client
from ..services.supabase import SupabaseClient, get_supabase_client
from ..services.todo_analyzer import analyze_todos
from ..services.todo_filters import (
    SortOrder,
    TodoStatus,
    filter_todos,
    sort_todos,
    todos_for_period,
)
from ..services.todo_store import TodoStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/todos", tags=["todos"])


def get_todo_store(supabase: SupabaseClient = Depends(get_supabase_client)) -> TodoStore:
    """FastAPI dependency returning the task store."""
    return TodoStore(supabase, table=settings.todos_table)


@router.get("", response_model=list[TodoRecord])
async def list_todos(
    q: str | None = Query(None, description="Search title and description"),
    status: list[TodoStatus] = Query(default=[]),
    priority: list[Priority] = Query(default=[]),
    sort_by: SortOrder = SortOrder.CREATED_DATE,
    period: Period | None = None,
    user: AuthUser = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store),
    clock: ZoneClock = Depends(get_clock),
) -> list[TodoRecord]:
    """
    List the user's tasks.

    Filters combine: search text, any of the given statuses, any of the
    given priorities and, optionally, a period (today, or this Sunday-start
    week). Default order is newest first.
    """
    now = clock.now()
    todos = await store.list_todos(user)
    if period:
        todos = todos_for_period(todos, period, now.date())
    todos = filter_todos(todos, now, query=q, statuses=status, priorities=priority)
    return sort_todos(todos, sort_by)


@router.post("", response_model=TodoRecord, status_code=201)
async def create_todo(
    request: TodoCreate,
    user: AuthUser = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store),
) -> TodoRecord:
    """Create a task, e.g. from an edited /parse result."""
    return await store.create_todo(user, request)


@router.get("/analysis", response_model=AnalysisResponse)
async def analyze_my_todos(
    period: Period = Period.TODAY,
    user: AuthUser = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store),
    client: BedrockCompletionClient = Depends(get_completion_client),
    clock: ZoneClock = Depends(get_clock),
) -> AnalysisResponse:
    """Analyze the user's own tasks for today or this week."""
    todos = await store.list_todos(user)
    selected = todos_for_period(todos, period, clock.today())
    logger.info(f"Analysis for user {user.id}: {len(selected)} of {len(todos)} tasks in period={period.value}")
    return await analyze_todos(selected, period, client, clock)


@router.patch("/{todo_id}", response_model=TodoRecord)
async def update_todo(
    todo_id: str,
    request: TodoUpdate,
    user: AuthUser = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store),
) -> TodoRecord:
    """Edit the fields sent in the body."""
    return await store.update_todo(user, todo_id, request)


@router.patch("/{todo_id}/complete", response_model=TodoRecord)
async def complete_todo(
    todo_id: str,
    request: TodoCompleteRequest,
    user: AuthUser = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store),
    clock: ZoneClock = Depends(get_clock),
) -> TodoRecord:
    """Mark a task done or reopen it."""
    return await store.set_completed(user, todo_id, request.completed, clock.now())


@router.delete("/{todo_id}", response_model=TodoDeleteResponse)
async def delete_todo(
    todo_id: str,
    user: AuthUser = Depends(get_current_user),
    store: TodoStore = Depends(get_todo_store),
) -> TodoDeleteResponse:
    """Delete a task."""
    await store.delete_todo(user, todo_id)
    return TodoDeleteResponse(success=True, id=todo_id)
