"""AI task parsing and analysis endpoints."""

from fastapi import APIRouter, Depends

from ..clock import ZoneClock, get_clock
from ..models.analysis import AnalysisResponse, TodoAnalyzeRequest
from ..models.task import TodoParseRequest, TodoParseResponse
from ..services.completion import BedrockCompletionClient, get_completion_client
from ..services.todo_analyzer import analyze_todos
from ..services.todo_parser import parse_todo

router = APIRouter(tags=["ai"])


@router.post("/parse", response_model=TodoParseResponse)
async def parse(
    request: TodoParseRequest,
    client: BedrockCompletionClient = Depends(get_completion_client),
    clock: ZoneClock = Depends(get_clock),
) -> TodoParseResponse:
    """
    Turn free text into a structured task.

    Uses Claude AI to extract:
    - Title and description
    - Due date and time (relative Korean expressions resolved against today)
    - Priority (high/medium/low)
    - Up to three categories

    Example input: "내일 오후 3시까지 중요한 팀 회의 준비하기"
    """
    return await parse_todo(request.input, client, clock)


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze(
    request: TodoAnalyzeRequest,
    client: BedrockCompletionClient = Depends(get_completion_client),
    clock: ZoneClock = Depends(get_clock),
) -> AnalysisResponse:
    """
    Summarize a period's tasks with statistics-driven insights.

    The caller sends the tasks already filtered to the period. An empty list
    gets an encouraging template without calling the model.
    """
    return await analyze_todos(request.todos, request.period, client, clock)
