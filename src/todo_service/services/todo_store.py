"""Owner-scoped task persistence on the Supabase todos table."""

import logging
from datetime import datetime

from ..errors import StoreError, TodoNotFoundError
from ..models.auth import AuthUser
from ..models.task import TodoCreate, TodoRecord, TodoUpdate
from .supabase import SupabaseClient, SupabaseError

logger = logging.getLogger(__name__)


class TodoStore:
    """Read and write one user's tasks.

    Every query is filtered by user_id in addition to the table's row level
    security, so a task that belongs to someone else behaves as not found.
    """

    def __init__(self, supabase: SupabaseClient, table: str = "todos"):
        self.supabase = supabase
        self.table = table

    def _owned(self, user: AuthUser, todo_id: str | None = None) -> dict[str, str]:
        filters = {"user_id": f"eq.{user.id}"}
        if todo_id is not None:
            filters["id"] = f"eq.{todo_id}"
        return filters

    async def list_todos(self, user: AuthUser) -> list[TodoRecord]:
        """All of the user's tasks, newest first."""
        try:
            rows = await self.supabase.select(
                self.table,
                user.access_token,
                self._owned(user),
                order="created_at.desc",
            )
        except SupabaseError as e:
            raise StoreError(f"Could not load tasks: {e.message}") from e
        return [TodoRecord.model_validate(row) for row in rows]

    async def create_todo(self, user: AuthUser, todo: TodoCreate) -> TodoRecord:
        """Insert a new, incomplete task owned by the user."""
        row = todo.model_dump(mode="json")
        row.update(user_id=user.id, completed=False)
        try:
            created = await self.supabase.insert(self.table, user.access_token, row)
        except SupabaseError as e:
            raise StoreError(f"Could not create task: {e.message}") from e
        logger.info(f"Created task {created.get('id')} for user {user.id}")
        return TodoRecord.model_validate(created)

    async def _update(self, user: AuthUser, todo_id: str, values: dict, filters: dict | None = None) -> list[dict]:
        try:
            return await self.supabase.update(
                self.table,
                user.access_token,
                filters or self._owned(user, todo_id),
                values,
            )
        except SupabaseError as e:
            raise StoreError(f"Could not update task {todo_id}: {e.message}") from e

    async def get_todo(self, user: AuthUser, todo_id: str) -> TodoRecord:
        """One of the user's tasks by id."""
        try:
            rows = await self.supabase.select(self.table, user.access_token, self._owned(user, todo_id))
        except SupabaseError as e:
            raise StoreError(f"Could not load task {todo_id}: {e.message}") from e
        if not rows:
            raise TodoNotFoundError(f"No task with id {todo_id}")
        return TodoRecord.model_validate(rows[0])

    async def update_todo(self, user: AuthUser, todo_id: str, changes: TodoUpdate) -> TodoRecord:
        """Apply the fields present in `changes`.

        An empty patch still round-trips to the store so missing ids are reported.
        """
        values = changes.model_dump(mode="json", exclude_unset=True)
        if not values:
            values = {"id": todo_id}
        logger.info(f"Updating task {todo_id}: fields={sorted(values)}")
        rows = await self._update(user, todo_id, values)
        if not rows:
            raise TodoNotFoundError(f"No task with id {todo_id}")
        return TodoRecord.model_validate(rows[0])

    async def set_completed(self, user: AuthUser, todo_id: str, completed: bool, now: datetime) -> TodoRecord:
        """Mark a task done (stamping completed_at) or reopen it (clearing it).

        completed_at is stamped only on the transition to done; completing an
        already completed task leaves it unchanged.
        """
        if not completed:
            rows = await self._update(user, todo_id, {"completed": False, "completed_at": None})
            if not rows:
                raise TodoNotFoundError(f"No task with id {todo_id}")
            return TodoRecord.model_validate(rows[0])

        rows = await self._update(
            user,
            todo_id,
            {"completed": True, "completed_at": now.isoformat()},
            filters={**self._owned(user, todo_id), "completed": "eq.false"},
        )
        if rows:
            return TodoRecord.model_validate(rows[0])
        return await self.get_todo(user, todo_id)

    async def delete_todo(self, user: AuthUser, todo_id: str) -> None:
        """Delete a task; raise TodoNotFoundError when nothing was removed."""
        try:
            rows = await self.supabase.delete(self.table, user.access_token, self._owned(user, todo_id))
        except SupabaseError as e:
            raise StoreError(f"Could not delete task {todo_id}: {e.message}") from e
        if not rows:
            raise TodoNotFoundError(f"No task with id {todo_id}")
        logger.info(f"Deleted task {todo_id} for user {user.id}")
