"""Pydantic models for request/response schemas."""

from .analysis import (
    AnalysisMeta,
    AnalysisResponse,
    AnalysisResult,
    Period,
    TodoAnalyzeRequest,
    TodoStatistics,
)
from .auth import AuthSession, AuthUser
from .errors import ErrorResponse
from .task import (
    ParsedTodo,
    Priority,
    TodoCompleteRequest,
    TodoCreate,
    TodoDeleteResponse,
    TodoParseRequest,
    TodoParseResponse,
    TodoRecord,
    TodoUpdate,
)

__all__ = [
    "TodoParseRequest",
    "TodoParseResponse",
    "ParsedTodo",
    "Priority",
    "TodoRecord",
    "TodoCreate",
    "TodoUpdate",
    "TodoCompleteRequest",
    "TodoDeleteResponse",
    "TodoAnalyzeRequest",
    "AnalysisResponse",
    "AnalysisResult",
    "AnalysisMeta",
    "TodoStatistics",
    "Period",
    "AuthUser",
    "AuthSession",
    "ErrorResponse",
]
