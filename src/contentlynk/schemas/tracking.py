# src/contentlynk/schemas/tracking.py
"""Schemas for consumption telemetry reported by reader clients."""

from pydantic import BaseModel, Field


class ConsumptionReportIn(BaseModel):
    """Depth report posted by a scroll or video tracker.

    Depths are fractions in ``[0, 1]``.
    """

    post_id: int
    session_id: str | None = Field(None, max_length=128)
    scroll_depth: float | None = Field(None, ge=0.0, le=1.0)
    watch_percentage: float | None = Field(None, ge=0.0, le=1.0)
    listen_percentage: float | None = Field(None, ge=0.0, le=1.0)
    time_spent: int | None = Field(None, ge=0, description="Seconds spent on the post")
    completed: bool = False


class ConsumptionResponse(BaseModel):
    success: bool = True
    session_id: str
    updated: bool
    scroll_depth: float | None
    watch_percentage: float | None
    completed: bool
