# src/contentlynk/schemas/message.py
"""Direct message-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class MessageCreate(BaseModel):
    """Schema for sending a new direct message."""

    to_user_id: int = Field(..., description="Recipient account id")
    content: str = Field(..., description="Plain-text message body")
    thread_id: str | None = Field(None, description="Existing thread to continue")


class MessageRespond(BaseModel):
    action: Literal["accept", "decline"]


class MessageResponse(BaseModel):
    id: int
    from_user_id: int
    to_user_id: int
    content: str
    status: str
    thread_id: str | None
    responded_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageListResponse(BaseModel):
    messages: list[MessageResponse]
