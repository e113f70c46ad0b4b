"""
Pydantic request / response schemas for the /api endpoints.
"""

from typing import Any

from pydantic import BaseModel, Field


class BlastRequest(BaseModel):
    # Validated against the intensity set by the route, not by pydantic,
    # so unknown values produce the same 400 as a missing one.
    intensity: str | None = Field(
        default=None,
        description="One of: low, medium, high, extreme.",
    )


class LogRequest(BaseModel):
    level: str | None = None
    message: str | None = None
    stack: str | None = None
    data: Any = None


class Scores(BaseModel):
    low: int = 0
    medium: int = 0
    high: int = 0
    extreme: int = 0


class BlastResponse(BaseModel):
    success: bool = True
    scores: Scores
    message: str


class RollResponse(BlastResponse):
    intensity: str


class LogResponse(BaseModel):
    success: bool = True


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: str


class ErrorResponse(BaseModel):
    error: str
