"""Error response body."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Structured error returned for every failed request."""

    error: str = Field(..., description="Short human-readable message")
    details: str = Field(..., description="Secondary detail")
    retry: str | None = Field(None, description="Retry suggestion")
    retry_after: str | None = Field(None, description="How long to wait before retrying")
    support: str | None = Field(None, description="Where to go if the problem persists")
