"""Aggregate statistics over a list of tasks."""

import math
from datetime import datetime, time, timedelta

from ..clock import due_moment, in_zone, sunday_index
from ..models.analysis import (
    DAY_FIELDS,
    TIME_SLOTS,
    CompletionStats,
    DayDistribution,
    PriorityAnalysis,
    TimeDistribution,
    TodoStatistics,
)
from ..models.task import Priority, TodoRecord

UPCOMING_WINDOW = timedelta(days=3)


def percentage(part: int, whole: int) -> float:
    """Percentage with one decimal, 0 for an empty whole."""
    if whole == 0:
        return 0.0
    return round(part / whole * 100, 1)


def time_slot(due_time: str) -> str:
    """Bucket an HH:MM time by its hour."""
    hour = int(due_time.split(":")[0])
    if 6 <= hour < 12:
        return "morning"
    if 12 <= hour < 18:
        return "afternoon"
    if 18 <= hour < 24:
        return "evening"
    return "night"


def pick_busiest(order: tuple[str, ...], totals: dict[str, int]) -> str | None:
    """Name with the highest total; ties go to the earliest in `order`. None if all are zero."""
    best = None
    best_total = 0
    for name in order:
        if totals.get(name, 0) > best_total:
            best = name
            best_total = totals[name]
    return best


def compute_statistics(todos: list[TodoRecord], now: datetime) -> TodoStatistics:
    """Compute completion, deadline, time, weekday and category statistics.

    The caller filters the list to the analysis period beforehand; every
    task passed in is counted.

    Args:
        todos: Tasks to aggregate
        now: Aware "now" in the configured zone

    Returns:
        TodoStatistics
    """
    tz = now.tzinfo
    today = now.date()

    total = len(todos)
    completed = sum(1 for t in todos if t.completed)

    priority_analysis = PriorityAnalysis()
    for level in Priority:
        level_todos = [t for t in todos if t.priority == level]
        level_completed = sum(1 for t in level_todos if t.completed)
        setattr(
            priority_analysis,
            level.value,
            CompletionStats(
                total=len(level_todos),
                completed=level_completed,
                rate=percentage(level_completed, len(level_todos)),
            ),
        )

    overdue = 0
    upcoming = 0
    due_today = 0
    with_deadline_completed = 0
    on_time = 0
    lead_times: list[int] = []
    time_distribution = TimeDistribution()
    day_distribution = DayDistribution()
    categories: dict[str, CompletionStats] = {}

    for todo in todos:
        if todo.due_date:
            deadline = due_moment(todo.due_date, todo.due_time, tz)

            if not todo.completed:
                if deadline < now:
                    overdue += 1
                elif deadline <= now + UPCOMING_WINDOW:
                    upcoming += 1

            if todo.due_date == today:
                due_today += 1

            if todo.completed and todo.completed_at:
                with_deadline_completed += 1
                if in_zone(todo.completed_at, tz) <= deadline:
                    on_time += 1

            if todo.created_at:
                # Lead time runs to the start of the due day; due_time is ignored
                due_day = datetime.combine(todo.due_date, time(0, 0), tzinfo=tz)
                elapsed = due_day - in_zone(todo.created_at, tz)
                lead_times.append(math.ceil(elapsed.total_seconds() / 86400))

            day = getattr(day_distribution, DAY_FIELDS[sunday_index(todo.due_date)])
            day.total += 1
            if todo.completed:
                day.completed += 1

        if todo.due_time:
            slot = getattr(time_distribution, time_slot(todo.due_time))
            slot.total += 1
            if todo.completed:
                slot.completed += 1
            else:
                slot.incomplete += 1

        for label in todo.category:
            counts = categories.setdefault(label, CompletionStats())
            counts.total += 1
            if todo.completed:
                counts.completed += 1

    for counts in categories.values():
        counts.rate = percentage(counts.completed, counts.total)

    return TodoStatistics(
        total=total,
        completed=completed,
        incomplete=total - completed,
        completion_rate=percentage(completed, total),
        priority_analysis=priority_analysis,
        overdue=overdue,
        upcoming=upcoming,
        due_today=due_today,
        on_time_rate=percentage(on_time, with_deadline_completed),
        time_distribution=time_distribution,
        busiest_time_slot=pick_busiest(
            TIME_SLOTS,
            {slot: getattr(time_distribution, slot).total for slot in TIME_SLOTS},
        ),
        day_distribution=day_distribution,
        busiest_day=pick_busiest(
            DAY_FIELDS,
            {day: getattr(day_distribution, day).total for day in DAY_FIELDS},
        ),
        categories=categories,
        top_category=pick_busiest(
            tuple(categories),
            {label: counts.total for label, counts in categories.items()},
        ),
        average_lead_time_days=round(sum(lead_times) / len(lead_times), 1) if lead_times else 0.0,
    )
