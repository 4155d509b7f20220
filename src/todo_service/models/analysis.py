"""Analysis request/response and statistics models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .task import TodoRecord


# Enumeration order doubles as the tie-break order for "busiest" picks
TIME_SLOTS = ("morning", "afternoon", "evening", "night")
DAY_FIELDS = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")


class Period(str, Enum):
    """Analysis window."""

    TODAY = "today"
    WEEK = "week"


class CompletionStats(BaseModel):
    """Total/completed counts with a completion percentage."""

    total: int = 0
    completed: int = 0
    rate: float = 0.0


class PriorityAnalysis(BaseModel):
    """Completion per priority level."""

    high: CompletionStats = Field(default_factory=CompletionStats)
    medium: CompletionStats = Field(default_factory=CompletionStats)
    low: CompletionStats = Field(default_factory=CompletionStats)


class SlotStats(BaseModel):
    """Counts for one time-of-day bucket."""

    total: int = 0
    completed: int = 0
    incomplete: int = 0


class TimeDistribution(BaseModel):
    """Tasks by due-time hour: morning [6,12), afternoon [12,18), evening [18,24), night [0,6)."""

    morning: SlotStats = Field(default_factory=SlotStats)
    afternoon: SlotStats = Field(default_factory=SlotStats)
    evening: SlotStats = Field(default_factory=SlotStats)
    night: SlotStats = Field(default_factory=SlotStats)


class DayStats(BaseModel):
    """Counts for one weekday."""

    total: int = 0
    completed: int = 0


class DayDistribution(BaseModel):
    """Tasks by due-date weekday, Sunday first."""

    sunday: DayStats = Field(default_factory=DayStats)
    monday: DayStats = Field(default_factory=DayStats)
    tuesday: DayStats = Field(default_factory=DayStats)
    wednesday: DayStats = Field(default_factory=DayStats)
    thursday: DayStats = Field(default_factory=DayStats)
    friday: DayStats = Field(default_factory=DayStats)
    saturday: DayStats = Field(default_factory=DayStats)


class TodoStatistics(BaseModel):
    """Derived statistics over one list of tasks."""

    total: int
    completed: int
    incomplete: int
    completion_rate: float
    priority_analysis: PriorityAnalysis
    overdue: int
    upcoming: int
    due_today: int
    on_time_rate: float
    time_distribution: TimeDistribution
    busiest_time_slot: str | None = None
    day_distribution: DayDistribution
    busiest_day: str | None = None
    categories: dict[str, CompletionStats] = Field(default_factory=dict)
    top_category: str | None = None
    average_lead_time_days: float = 0.0


class TodoAnalyzeRequest(BaseModel):
    """Request to analyze a (pre-filtered) list of tasks."""

    todos: list[TodoRecord]
    period: Period


class AnalysisResult(BaseModel):
    """AI analysis of a task list."""

    model_config = ConfigDict(populate_by_name=True)

    summary: str = Field(..., description="One-line summary including the completion rate")
    urgent_tasks: list[str] = Field(
        ...,
        alias="urgentTasks",
        description="Incomplete tasks to handle first, nearest deadline then priority (at most 5)",
        json_schema_extra={"maxItems": 5},
    )
    insights: list[str] = Field(
        ...,
        description="Data-driven observations (3-5)",
        json_schema_extra={"minItems": 3, "maxItems": 5},
    )
    recommendations: list[str] = Field(
        ...,
        description="Actionable recommendations (3-5)",
        json_schema_extra={"minItems": 3, "maxItems": 5},
    )


class AnalysisMeta(BaseModel):
    """Metadata returned with an analysis."""

    analyzed_at: datetime
    period: Period
    total_todos: int
    completion_rate: float


class AnalysisResponse(BaseModel):
    """Response from the analyzer."""

    success: bool = True
    data: AnalysisResult
    meta: AnalysisMeta | None = None
