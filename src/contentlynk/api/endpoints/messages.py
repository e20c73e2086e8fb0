"""Direct message endpoints for the ContentLynk API."""

from typing import Literal

from fastapi import APIRouter, Query, status

from contentlynk.api.dependencies import CurrentUserDep, SessionDep
from contentlynk.models import Message
from contentlynk.schemas.message import (
    MessageCreate,
    MessageListResponse,
    MessageRespond,
    MessageResponse,
)
from contentlynk.services.messages import list_messages, mark_read, respond_to_message, send_message

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("", response_model=MessageListResponse)
async def get_messages(
    current_user: CurrentUserDep,
    db: SessionDep,
    box: Literal["inbox", "sent", "pending", "all"] = Query("all", alias="type"),
) -> MessageListResponse:
    """List messages; the inbox only holds messages the user has accepted."""
    messages = list_messages(db, current_user.id, box)
    return MessageListResponse(messages=[MessageResponse.model_validate(m) for m in messages])


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_message(payload: MessageCreate, current_user: CurrentUserDep, db: SessionDep) -> Message:
    """Send a message; it stays PENDING until the recipient responds."""
    message = send_message(db, current_user.id, payload.to_user_id, payload.content, payload.thread_id)
    db.commit()
    db.refresh(message)
    return message


@router.post("/{message_id}/respond", response_model=MessageResponse)
async def respond(
    message_id: int,
    payload: MessageRespond,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Message:
    message = respond_to_message(db, message_id, current_user.id, payload.action)
    db.commit()
    db.refresh(message)
    return message


@router.put("/{message_id}/read", response_model=MessageResponse)
async def read_message(message_id: int, current_user: CurrentUserDep, db: SessionDep) -> Message:
    message = mark_read(db, message_id, current_user.id)
    db.commit()
    db.refresh(message)
    return message
