# src/contentlynk/schemas/beta.py
"""Beta programme schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BetaApplicationCreate(BaseModel):
    name: str = Field(..., max_length=200)
    email: str = Field(..., max_length=320)
    reason: str | None = Field(None, max_length=5000)
    content_niche: str | None = Field(None, max_length=200)


class BetaApplicationResponse(BaseModel):
    id: int
    name: str
    email: str
    reason: str | None
    content_niche: str | None
    status: str
    reviewed_by_id: int | None
    reviewed_at: datetime | None
    review_notes: str | None
    created_user_id: int | None
    waitlisted_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BetaApplicationListResponse(BaseModel):
    applications: list[BetaApplicationResponse]


class ReviewRequest(BaseModel):
    # Validated by the service so an unknown action answers 400 with a message.
    action: str
    review_notes: str | None = Field(None, max_length=5000)
