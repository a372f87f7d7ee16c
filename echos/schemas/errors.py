"""Uniform error envelope returned by every failed request."""

from pydantic import BaseModel, Field


class ErrorEnvelope(BaseModel):
    """Body of any non-2xx response."""

    status: int = Field(description="HTTP status code")
    success: bool = Field(default=False)
    message: str | list[str] = Field(description="Human-readable reason")
    error: str = Field(description="Stable error kind, e.g. Unauthorized")
