"""Task-related Pydantic models."""

import re
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
MAX_TITLE_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 500
MAX_CATEGORIES = 3


class Priority(str, Enum):
    """Task priority levels."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_VALUES = [p.value for p in Priority]


def coerce_priority(value: Any) -> Priority:
    """Return a valid priority, falling back to medium."""
    if isinstance(value, Priority):
        return value
    if isinstance(value, str) and value in PRIORITY_VALUES:
        return Priority(value)
    return Priority.MEDIUM


def dedupe_categories(value: Any, limit: int = MAX_CATEGORIES) -> list[str]:
    """Deduplicate categories in first-seen order and keep at most `limit`."""
    if not isinstance(value, list):
        return []
    return list(dict.fromkeys(value))[:limit]


def clean_due_time(value: Any) -> str | None:
    """Keep only 24-hour HH:MM strings."""
    if isinstance(value, str) and TIME_PATTERN.match(value):
        return value
    return None


def truncate(text: str, limit: int) -> str:
    """Cut text to `limit` characters, ending with an ellipsis when shortened."""
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


class TodoRecord(BaseModel):
    """A stored task as read from the todos table or sent by the UI."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | int | None = None
    user_id: str | None = None
    title: str = ""
    description: str | None = None
    created_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("created_at", "created_date"),
    )
    due_date: date | None = None
    due_time: str | None = None
    priority: Priority = Priority.MEDIUM
    category: list[str] = Field(default_factory=list)
    completed: bool = False
    completed_at: datetime | None = None

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, value: Any) -> Priority:
        return coerce_priority(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, value: Any) -> Any:
        if value == "":
            return None
        # Timestamps stored as "2024-03-15T00:00:00+00:00" keep their calendar day
        if isinstance(value, str) and len(value) > 10:
            return value[:10]
        return value

    @field_validator("due_time", mode="before")
    @classmethod
    def _due_time(cls, value: Any) -> str | None:
        return clean_due_time(value)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, value: Any) -> list[str]:
        return value if isinstance(value, list) else []


class TodoCreate(BaseModel):
    """Request to create a task."""

    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    due_date: date | None = None
    due_time: str | None = Field(None, description="Due time in HH:MM (24-hour) format")
    priority: Priority = Priority.MEDIUM
    category: list[str] = Field(default_factory=list, description="Up to 3 labels")

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("due_time", mode="before")
    @classmethod
    def _due_time(cls, value: Any) -> str | None:
        return clean_due_time(value)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, value: Any) -> Priority:
        return coerce_priority(value)

    # After list[str] validation, so only strings reach the dedupe
    @field_validator("category")
    @classmethod
    def _category(cls, value: list[str]) -> list[str]:
        return dedupe_categories(value)


class TodoUpdate(TodoCreate):
    """Request to edit a task. Only the fields sent are changed.

    description, due_date and due_time may be sent as null to clear them;
    title, priority and category may be omitted but never null.
    """

    title: str | None = Field(None, min_length=1, max_length=MAX_TITLE_LENGTH)
    priority: Priority | None = None
    category: list[str] | None = None

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("title cannot be null")
        return value.strip() if isinstance(value, str) else value

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, value: Any) -> Priority:
        if value is None:
            raise ValueError("priority cannot be null")
        return coerce_priority(value)

    @field_validator("category", mode="before")
    @classmethod
    def _category_not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("category cannot be null")
        return value


class TodoCompleteRequest(BaseModel):
    """Request to toggle completion."""

    completed: bool


class TodoDeleteResponse(BaseModel):
    """Response from deleting a task."""

    success: bool
    id: str


class TodoParseRequest(BaseModel):
    """Request to parse natural language task input."""

    input: str = Field(..., description="Free text like '내일 오후 3시까지 보고서 작성'")


class TodoDraft(BaseModel):
    """Task fields exactly as the model returns them. Empty values mean absent."""

    title: str = Field(..., description="Concise task title (core action only)")
    description: str = Field(..., description='Useful extra details, or "" when none')
    due_date: str = Field(..., description='Due date as YYYY-MM-DD, or "" when no date is mentioned')
    due_time: str = Field(..., description='Due time as HH:MM (24-hour), or ""')
    priority: str = Field(
        ...,
        description="high (urgent/important), medium (normal), low (whenever)",
        json_schema_extra={"enum": PRIORITY_VALUES},
    )
    category: list[str] = Field(
        ...,
        description='Category labels such as ["업무"], or [] when unclear',
    )

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, value: Any) -> list[str]:
        return value if isinstance(value, list) else []


class ParsedTodo(BaseModel):
    """Normalized parse result, ready to prefill the task form."""

    title: str
    description: str = ""
    due_date: str = ""
    due_time: str = ""
    priority: Priority = Priority.MEDIUM
    category: list[str] = Field(default_factory=list)


class TodoParseMeta(BaseModel):
    """Metadata returned with a parse result."""

    processed_at: datetime
    original_input: str
    preprocessed_input: str


class TodoParseResponse(BaseModel):
    """Response with the extracted task."""

    success: bool = True
    data: ParsedTodo
    meta: TodoParseMeta
