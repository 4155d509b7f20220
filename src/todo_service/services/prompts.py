"""Prompt templates for task parsing and task analysis."""

import json

from ..clock import WEEKDAY_NAMES, DateContext
from ..config import settings
from ..models.analysis import DAY_FIELDS, Period, TodoStatistics
from ..models.task import TodoRecord

TIME_SLOT_LABELS = {
    "morning": "Morning (06-12)",
    "afternoon": "Afternoon (12-18)",
    "evening": "Evening (18-24)",
    "night": "Night (00-06)",
}


def build_parse_prompt(cleaned_input: str, context: DateContext) -> str:
    """Build the prompt that turns free text into task fields."""
    return f"""You are a task management assistant. Convert the user's natural-language input into structured task data.
Return only the fields of the schema. Do not add explanations.

## Current time
- Date/time: {context.current_date} {context.current_time} ({context.weekday}요일)
- Time zone: {settings.timezone}

## Rules

### 1. title
- The core action, short and clear (20 characters or fewer recommended)
- Drop particles and filler words, e.g. "보고서를 작성하기" -> "보고서 작성"

### 2. due_date (YYYY-MM-DD)
- "오늘" / "today" -> {context.current_date}
- "내일" / "tomorrow" -> {context.tomorrow}
- "모레" / "day after tomorrow" -> {context.day_after_tomorrow}
- "이번 주 금요일" / "this Friday" -> the nearest Friday of the current week
- "다음 주 월요일" / "next Monday" -> Monday of next week
- "다음 주" / "next week" -> Monday of next week
- "이번 주 끝", "주말" / "weekend" -> Saturday of the current week
- No date mentioned at all -> ""

### 3. due_time (HH:MM, 24-hour)
Time-of-day words:
- "아침", "오전" / "morning" -> 09:00
- "점심" / "lunch" -> 12:00
- "오후" / "afternoon" -> 14:00
- "저녁" / "evening" -> 18:00
- "밤" / "night" -> 21:00
Explicit times:
- "3시", "오전 3시" -> 03:00
- "오후 3시", "15시" / "3pm" -> 15:00
- "자정" / "midnight" -> 00:00
- "정오" / "noon" -> 12:00
No time mentioned:
- Work items -> 09:00
- Personal items -> 18:00
- No date either -> ""

### 4. priority
- high: "급하게", "중요한", "빨리", "꼭", "반드시", "긴급", "ASAP", "urgent", "important"
- medium: no keyword, or "보통", "적당히"
- low: "여유롭게", "천천히", "언젠가", "시간 날 때", "someday", "whenever"

### 5. category (at most 2)
- "업무": 회의, 보고서, 프로젝트, 업무, 미팅, PT, 발표, 제안서, 계약
- "개인": 쇼핑, 친구, 가족, 개인, 약속, 집안일, 청소, 빨래
- "건강": 운동, 병원, 건강, 요가, 헬스, 러닝, 조깅, 산책, 검진
- "학습": 공부, 책, 강의, 학습, 수업, 스터디, 자격증, 시험, 독서
- Cannot tell -> []

### 6. description
- Only concrete extra details from the input, never a restatement of the title
- None -> ""

## Examples

Input: "내일 오후 3시까지 중요한 프로젝트 보고서 작성"
Output: {{"title": "프로젝트 보고서 작성", "description": "", "due_date": "{context.tomorrow}", "due_time": "15:00", "priority": "high", "category": ["업무"]}}

Input: "언젠가 책 읽기"
Output: {{"title": "책 읽기", "description": "", "due_date": "", "due_time": "", "priority": "low", "category": ["학습"]}}

## User input

"{cleaned_input}"

Write title and description in the language of the input. Every field must be present; use "" or [] for missing values."""


def simplify_todos(todos: list[TodoRecord]) -> list[dict]:
    """Project tasks down to the fields the analysis needs."""
    return [
        {
            "title": t.title,
            "priority": t.priority.value,
            "completed": t.completed,
            "due_date": t.due_date.isoformat() if t.due_date else None,
            "due_time": t.due_time or None,
            "category": t.category,
        }
        for t in todos
    ]


def _format_statistics(stats: TodoStatistics, period: Period) -> str:
    """Render the statistics readout."""
    p = stats.priority_analysis
    lines = [
        "### Overall",
        f"- Total tasks: {stats.total}",
        f"- Completed: {stats.completed} ({stats.completion_rate:.1f}%)",
        f"- Incomplete: {stats.incomplete}",
        "",
        "### Completion by priority",
        f"- High: {p.high.total} (completed {p.high.completed}, {p.high.rate:.1f}%)",
        f"- Medium: {p.medium.total} (completed {p.medium.completed}, {p.medium.rate:.1f}%)",
        f"- Low: {p.low.total} (completed {p.low.completed}, {p.low.rate:.1f}%)",
        "",
        "### Deadlines",
        f"- Overdue: {stats.overdue}",
        f"- Due within 3 days: {stats.upcoming}",
        f"- Due today: {stats.due_today}",
        f"- On-time completion rate: {stats.on_time_rate:.1f}%",
        "",
        "### Time of day",
    ]
    for slot, label in TIME_SLOT_LABELS.items():
        counts = getattr(stats.time_distribution, slot)
        lines.append(f"- {label}: {counts.total} (completed {counts.completed})")
    if stats.busiest_time_slot:
        busiest = getattr(stats.time_distribution, stats.busiest_time_slot)
        lines.append(f"- Busiest time slot: {stats.busiest_time_slot} ({busiest.total})")
    else:
        lines.append("- Busiest time slot: none")

    if period == Period.WEEK:
        lines.extend(["", "### Day of week (this week)"])
        for name, field in zip(WEEKDAY_NAMES, DAY_FIELDS):
            counts = getattr(stats.day_distribution, field)
            lines.append(f"- {name}요일: {counts.total} (completed {counts.completed})")
        if stats.busiest_day:
            busiest_day = getattr(stats.day_distribution, stats.busiest_day)
            day_label = WEEKDAY_NAMES[DAY_FIELDS.index(stats.busiest_day)]
            lines.append(f"- Busiest day: {day_label}요일 ({busiest_day.total})")
        else:
            lines.append("- Busiest day: none")

    lines.extend(["", "### Categories"])
    ranked = sorted(stats.categories.items(), key=lambda item: item[1].total, reverse=True)
    for name, counts in ranked[:5]:
        lines.append(f"- {name}: {counts.total} (completed {counts.completed}, {counts.rate:.1f}%)")
    if stats.top_category:
        lines.append(f"- Most common category: {stats.top_category} ({stats.categories[stats.top_category].total})")

    lines.extend(["", "### Productivity"])
    if stats.average_lead_time_days > 0:
        lines.append(f"- Average lead time: about {stats.average_lead_time_days:.1f} days")
    else:
        lines.append("- Average lead time: not enough data")

    return "\n".join(lines)


def _focus_points(period: Period, context: DateContext) -> str:
    if period == Period.TODAY:
        return f"""### Focus for today
1. What should be done first in the remaining time?
2. Is the remaining work realistic in the {context.hours_left_today} hours left today?
3. What must be finished today and what can move to tomorrow?
4. The best order of work given the current time ({context.current_time})
5. Positive feedback on what is already done"""
    return """### Focus for this week
1. On which days is the user most productive?
2. Productivity by time of day and what to improve
3. Balance between urgent and regular work
4. Is any single day overloaded?
5. A strategy for next week based on this week's pattern"""


def _recommendation_hints(stats: TodoStatistics, period: Period) -> list[str]:
    """Data-driven nudges, only the ones that apply."""
    hints = []
    if stats.overdue > 0:
        hints.append(f"Handle the {stats.overdue} overdue tasks first.")
    if stats.upcoming > 0:
        hints.append(f"Focus on the {stats.upcoming} tasks due within 3 days.")
    if stats.time_distribution.afternoon.incomplete > stats.time_distribution.morning.incomplete:
        hints.append("Work is piling up in the afternoon; move some of it to the morning.")
    if period == Period.WEEK and stats.busiest_day:
        busiest = getattr(stats.day_distribution, stats.busiest_day)
        if busiest.total > 5:
            day_label = WEEKDAY_NAMES[DAY_FIELDS.index(stats.busiest_day)]
            hints.append(f"Spread the load of {day_label}요일 over other days.")
    if stats.average_lead_time_days > 5:
        hints.append("Break tasks into smaller pieces.")
    if stats.completion_rate >= 80:
        hints.append("The completion rate is very high; encourage keeping it up.")
    return hints


def build_analysis_prompt(
    stats: TodoStatistics,
    todos: list[TodoRecord],
    period: Period,
    context: DateContext,
) -> str:
    """Build the report-writing prompt for a task list."""
    period_label = "today (focused daily analysis)" if period == Period.TODAY else "this week (weekly pattern analysis)"
    urgent_window = "due today" if period == Period.TODAY else "due within 3 days"
    hints = _recommendation_hints(stats, period)
    hint_block = "\n".join(f"- {hint}" for hint in hints) if hints else "- No specific adjustments needed."

    return f"""You are an experienced productivity coach. Analyze the user's tasks and give practical insights and encouragement.
Keep it concise. Each list has 3-5 items.

## Current time
- Date: {context.current_date} ({context.weekday}요일)
- Time: {context.current_time}
- Period: {period_label}

## Statistics

{_format_statistics(stats, period)}

## Tasks
{json.dumps(simplify_todos(todos), ensure_ascii=False, indent=2)}

## Requirements

{_focus_points(period, context)}

### summary
- Format: "Y of X tasks completed (Z%)" followed by {"what is left today and where to focus" if period == Period.TODAY else "overall progress this week"}
- Mention what is going well first

### urgentTasks (at most 5)
- Incomplete tasks that are high priority, {urgent_window}, or overdue
- Order: nearest deadline first, then priority
- None -> []

### insights (3-5)
- Use concrete numbers: completion rate {stats.completion_rate:.1f}%, on-time rate {stats.on_time_rate:.1f}%, busiest time slot {stats.busiest_time_slot or "none"}, most common category {stats.top_category or "none"}
- Compare completion across priorities and categories
- Point out overdue work and where tasks pile up
- Positive observations before areas to improve

### recommendations (3-5)
- Specific, measurable, achievable actions
{hint_block}
- Close with encouragement for {"the rest of today" if period == Period.TODAY else "the rest of the week"}

## Style
- Data-driven, specific, positive and practical
- Friendly suggestions, never critical or commanding
- Light use of emoji at most
- Write all text in {settings.response_language}"""
