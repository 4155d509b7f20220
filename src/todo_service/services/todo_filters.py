"""Search, filter, sort and period selection over a task list."""

from datetime import date, datetime, timedelta
from enum import Enum

from ..clock import due_moment, sunday_index
from ..models.analysis import Period
from ..models.task import Priority, TodoRecord

PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


class TodoStatus(str, Enum):
    """Status filter values."""

    COMPLETED = "completed"
    INCOMPLETE = "incomplete"
    OVERDUE = "overdue"


class SortOrder(str, Enum):
    """List orderings."""

    CREATED_DATE = "createdDate"
    PRIORITY = "priority"
    DUE_DATE = "dueDate"


def is_overdue(todo: TodoRecord, now: datetime) -> bool:
    """Open task whose deadline has passed."""
    if todo.completed or not todo.due_date:
        return False
    return due_moment(todo.due_date, todo.due_time, now.tzinfo) < now


def todo_status(todo: TodoRecord, now: datetime) -> TodoStatus:
    if todo.completed:
        return TodoStatus.COMPLETED
    if is_overdue(todo, now):
        return TodoStatus.OVERDUE
    return TodoStatus.INCOMPLETE


def filter_todos(
    todos: list[TodoRecord],
    now: datetime,
    query: str | None = None,
    statuses: list[TodoStatus] | None = None,
    priorities: list[Priority] | None = None,
) -> list[TodoRecord]:
    """
    Keep tasks matching every given filter.

    Args:
        todos: Tasks to filter
        now: Aware "now", used to tell overdue from incomplete
        query: Case-insensitive substring of the title or description
        statuses: Any of these statuses matches; overdue tasks are not "incomplete"
        priorities: Any of these priorities matches

    Returns:
        Matching tasks in their original order
    """
    result = list(todos)

    if query:
        needle = query.lower()
        result = [
            t for t in result
            if needle in t.title.lower() or needle in (t.description or "").lower()
        ]

    if statuses:
        wanted = set(statuses)
        result = [t for t in result if todo_status(t, now) in wanted]

    if priorities:
        wanted_priorities = set(priorities)
        result = [t for t in result if t.priority in wanted_priorities]

    return result


def sort_todos(todos: list[TodoRecord], order: SortOrder = SortOrder.CREATED_DATE) -> list[TodoRecord]:
    """Sort a copy of the list. Tasks missing the sort key go last."""
    if order == SortOrder.PRIORITY:
        return sorted(todos, key=lambda t: PRIORITY_RANK[t.priority])

    if order == SortOrder.DUE_DATE:
        return sorted(todos, key=lambda t: (t.due_date is None, t.due_date or date.min))

    with_created = [t for t in todos if t.created_at]
    without_created = [t for t in todos if not t.created_at]
    return sorted(with_created, key=lambda t: t.created_at, reverse=True) + without_created


def week_bounds(today: date) -> tuple[date, date]:
    """Sunday and Saturday of the week containing `today`."""
    start = today - timedelta(days=sunday_index(today))
    return start, start + timedelta(days=6)


def todos_for_period(todos: list[TodoRecord], period: Period, today: date) -> list[TodoRecord]:
    """Tasks due today, or due this Sunday-to-Saturday week."""
    if period == Period.TODAY:
        return [t for t in todos if t.due_date == today]

    start, end = week_bounds(today)
    return [t for t in todos if t.due_date and start <= t.due_date <= end]
