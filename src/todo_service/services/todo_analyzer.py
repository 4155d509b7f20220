"""AI summary and insights over a list of tasks."""

import logging

from ..clock import ZoneClock, date_context
from ..config import settings
from ..models.analysis import (
    AnalysisMeta,
    AnalysisResponse,
    AnalysisResult,
    Period,
)
from ..models.task import TodoRecord
from .completion import BedrockCompletionClient, ensure_credentials
from .prompts import build_analysis_prompt
from .statistics import compute_statistics

logger = logging.getLogger(__name__)


def empty_analysis(period: Period) -> AnalysisResult:
    """Encouraging canned result for a period with no tasks."""
    summary = "No tasks for today yet." if period == Period.TODAY else "No tasks for this week yet."
    return AnalysisResult(
        summary=summary,
        urgent_tasks=[],
        insights=[
            "Add a new task to get started! 🎯",
            "Use AI task entry to add tasks faster from plain text.",
        ],
        recommendations=[
            "Plan what you want to get done today.",
            "Set priorities and tackle tasks one at a time.",
        ],
    )


async def analyze_todos(
    todos: list[TodoRecord],
    period: Period,
    client: BedrockCompletionClient,
    clock: ZoneClock,
) -> AnalysisResponse:
    """
    Summarize a period's tasks with statistics and Claude-written insights.

    Args:
        todos: Tasks already filtered to the period
        period: today or week
        client: Completion client
        clock: Source of "now" in the configured zone

    Returns:
        AnalysisResponse; the model output is passed through unchanged
    """
    if not todos:
        logger.info(f"No tasks to analyze for period={period.value}, returning template")
        return AnalysisResponse(data=empty_analysis(period))

    ensure_credentials()

    now = clock.now()
    stats = compute_statistics(todos, now)
    logger.info(
        f"Analyzing {stats.total} tasks for period={period.value}: "
        f"completion={stats.completion_rate}% overdue={stats.overdue} upcoming={stats.upcoming}"
    )

    prompt = build_analysis_prompt(stats, todos, period, date_context(now))
    result = client.complete(
        prompt,
        AnalysisResult,
        temperature=settings.analysis_temperature,
        max_tokens=settings.analysis_max_tokens,
        tool_name="record_analysis",
    )

    return AnalysisResponse(
        data=result,
        meta=AnalysisMeta(
            analyzed_at=clock.now(),
            period=period,
            total_todos=stats.total,
            completion_rate=stats.completion_rate,
        ),
    )
