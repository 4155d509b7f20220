"""Error taxonomy and the handlers that turn it into HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .models.errors import ErrorResponse

logger = logging.getLogger(__name__)

RETRY_LATER = "Please try again in a moment."
CONTACT_SUPPORT = "If the problem persists, contact the service administrator."


class TodoServiceError(Exception):
    """Base class for failures reported to the caller."""

    status_code = 500
    error = "Unexpected server error"
    retry: str | None = RETRY_LATER
    retry_after: str | None = None
    support: str | None = None

    def __init__(self, details: str, error: str | None = None):
        super().__init__(details)
        self.details = details
        if error is not None:
            self.error = error

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            error=self.error,
            details=self.details,
            retry=self.retry,
            retry_after=self.retry_after,
            support=self.support,
        )


class InputValidationError(TodoServiceError):
    """Request content broke a validation rule."""

    status_code = 400
    error = "Invalid input"
    retry = None


class ConfigurationError(TodoServiceError):
    """A required credential or setting is missing on the server."""

    status_code = 500
    error = "AI service configuration error"
    retry = None
    support = CONTACT_SUPPORT


class CompletionError(TodoServiceError):
    """The completion provider call failed."""

    error = "AI request failed"
    support = CONTACT_SUPPORT


class CompletionAuthError(CompletionError):
    """The provider rejected our credential."""

    status_code = 401
    error = "AI service authentication failed"
    retry = None


class CompletionRateLimitError(CompletionError):
    """Provider quota or rate limit exceeded."""

    status_code = 429
    error = "AI service usage limit exceeded"
    retry = None
    retry_after = "Please try again in 1 minute."


class CompletionNetworkError(CompletionError):
    """Could not reach the provider or it timed out."""

    status_code = 503
    error = "AI service connection error"


class CompletionResponseError(CompletionError):
    """Provider answered but the structured output was unusable."""

    status_code = 500
    error = "AI response could not be processed"
    support = "If this keeps happening, try rephrasing your input."


class CompletionServiceError(CompletionError):
    """Provider failure that fits no other class."""

    status_code = 500


class AuthenticationRequiredError(TodoServiceError):
    """No valid session on a route that needs one."""

    status_code = 401
    error = "Authentication required"
    retry = None


class TodoNotFoundError(TodoServiceError):
    """The task does not exist or belongs to someone else."""

    status_code = 404
    error = "Task not found"
    retry = None


class StoreError(TodoServiceError):
    """The task store rejected or failed a request."""

    status_code = 502
    error = "Task store request failed"


async def _handle_service_error(request: Request, exc: TodoServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.error}: {exc.details}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.error}: {exc.details}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(exclude_none=True),
    )


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    details = "Invalid request body."
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        details = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    body = ErrorResponse(error="Invalid request", details=details)
    return JSONResponse(status_code=400, content=body.model_dump(exclude_none=True))


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    body = ErrorResponse(
        error="Unexpected server error",
        details=str(exc) or type(exc).__name__,
        retry=RETRY_LATER,
        support=CONTACT_SUPPORT,
    )
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


def register_error_handlers(app: FastAPI) -> None:
    """Attach the taxonomy handlers to the app."""
    app.add_exception_handler(TodoServiceError, _handle_service_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(Exception, _handle_unexpected)
