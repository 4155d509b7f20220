"""AI-powered task extraction from natural language using Claude via Bedrock."""

import logging
from datetime import date

from ..clock import ZoneClock, date_context
from ..config import settings
from ..models.task import (
    MAX_DESCRIPTION_LENGTH,
    MAX_TITLE_LENGTH,
    ParsedTodo,
    TodoDraft,
    TodoParseMeta,
    TodoParseResponse,
    clean_due_time,
    coerce_priority,
    dedupe_categories,
    truncate,
)
from .completion import BedrockCompletionClient, ensure_credentials
from .input_normalizer import normalize_input, validate_input
from .prompts import build_parse_prompt

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New task"


def _resolve_due_date(value: str, today: date) -> str:
    """Replace dates before today with today; keep anything else as given."""
    if not value:
        return ""
    try:
        due = date.fromisoformat(value[:10])
    except ValueError:
        return value
    if due < today:
        logger.warning(f"Past due date detected: {value} -> {today.isoformat()}")
        return today.isoformat()
    return value


def normalize_parsed_todo(draft: TodoDraft, today: date) -> ParsedTodo:
    """Clamp and correct the model's fields into a persistable task.

    Args:
        draft: Task fields as returned by the model
        today: Current date in the configured zone

    Returns:
        ParsedTodo with every field inside its allowed range
    """
    title = draft.title.strip() or DEFAULT_TITLE
    title = truncate(title, MAX_TITLE_LENGTH)

    description = truncate(draft.description, MAX_DESCRIPTION_LENGTH)

    due_time = ""
    if draft.due_time:
        due_time = clean_due_time(draft.due_time) or ""
        if not due_time:
            logger.warning(f"Invalid due time format: {draft.due_time!r} -> ''")

    return ParsedTodo(
        title=title,
        description=description,
        due_date=_resolve_due_date(draft.due_date, today),
        due_time=due_time,
        priority=coerce_priority(draft.priority),
        category=dedupe_categories(draft.category),
    )


async def parse_todo(
    raw_input: str,
    client: BedrockCompletionClient,
    clock: ZoneClock,
) -> TodoParseResponse:
    """
    Use Claude to turn free text into a structured task.

    Args:
        raw_input: Text like "내일 오후 3시까지 보고서 작성"
        client: Completion client
        clock: Source of "now" in the configured zone

    Returns:
        TodoParseResponse with the normalized task and request metadata
    """
    cleaned = normalize_input(raw_input)
    logger.info(f"Preprocessed input: {cleaned!r}")

    validate_input(cleaned)
    ensure_credentials()

    now = clock.now()
    prompt = build_parse_prompt(cleaned, date_context(now))

    draft = client.complete(
        prompt,
        TodoDraft,
        temperature=settings.parse_temperature,
        max_tokens=settings.parse_max_tokens,
        tool_name="record_todo",
    )
    logger.info(f"Raw AI parse result: {draft.model_dump()}")

    parsed = normalize_parsed_todo(draft, now.date())
    logger.info(f"Parsed task: title='{parsed.title}', due={parsed.due_date} {parsed.due_time}, "
                f"priority={parsed.priority.value}, category={parsed.category}")

    return TodoParseResponse(
        data=parsed,
        meta=TodoParseMeta(
            processed_at=clock.now(),
            original_input=raw_input,
            preprocessed_input=cleaned,
        ),
    )
