"""Response envelopes shared by all endpoints."""
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Successful response: `{"data": ...}`."""

    data: T


class ErrorResponse(BaseModel):
    """Error response: `{"error": "..."}`."""

    error: str


class HealthChecks(BaseModel):
    postgres: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    checks: HealthChecks
