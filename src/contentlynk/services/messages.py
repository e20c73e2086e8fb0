"""Direct messages that the recipient accepts or declines before a thread opens."""
from __future__ import annotations

import logging
from typing import Literal

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from contentlynk.core.errors import ForbiddenError, InvalidRequestError, NotFoundError
from contentlynk.db.time import utcnow
from contentlynk.models import Message, User

logger = logging.getLogger(__name__)

MessageBox = Literal["inbox", "sent", "pending", "all"]
ResponseAction = Literal["accept", "decline"]

MAX_MESSAGE_LENGTH = 5000


def thread_id_for(user_a: int, user_b: int) -> str:
    """Deterministic thread id for a pair of participants, independent of order."""
    low, high = sorted((user_a, user_b))
    return f"thread_{low}_{high}"


def list_messages(db: Session, user_id: int, box: MessageBox = "all") -> list[Message]:
    query = db.query(Message)
    if box == "inbox":
        query = query.filter(Message.to_user_id == user_id, Message.status.in_(("ACCEPTED", "READ")))
    elif box == "sent":
        query = query.filter(Message.from_user_id == user_id)
    elif box == "pending":
        query = query.filter(Message.to_user_id == user_id, Message.status == "PENDING")
    else:
        query = query.filter(or_(Message.from_user_id == user_id, Message.to_user_id == user_id))
    return query.order_by(Message.created_at.desc(), Message.id.desc()).all()


def send_message(
    db: Session,
    sender_id: int,
    recipient_id: int,
    content: str,
    thread_id: str | None = None,
) -> Message:
    text = content.strip()
    if not text:
        raise InvalidRequestError("to_user_id and content are required")
    if len(text) > MAX_MESSAGE_LENGTH:
        raise InvalidRequestError(f"Message must be at most {MAX_MESSAGE_LENGTH} characters")
    if recipient_id == sender_id:
        raise InvalidRequestError("You cannot message yourself")
    if db.get(User, recipient_id) is None:
        raise NotFoundError("Recipient not found")

    message = Message(
        from_user_id=sender_id,
        to_user_id=recipient_id,
        content=text,
        thread_id=thread_id,
        status="PENDING",
    )
    db.add(message)
    db.flush()
    return message


def respond_to_message(db: Session, message_id: int, user_id: int, action: ResponseAction) -> Message:
    """Accept or decline a pending message addressed to ``user_id``.

    The status change is a conditional update on ``status = 'PENDING'``, so
    of two concurrent responses only one wins; the other gets a 400.
    """
    message = db.get(Message, message_id)
    if message is None:
        raise NotFoundError("Message not found")
    if message.to_user_id != user_id:
        raise ForbiddenError("You can only respond to messages sent to you")

    new_status = "ACCEPTED" if action == "accept" else "DECLINED"
    values: dict[str, object] = {"status": new_status, "responded_at": utcnow()}
    if action == "accept" and not message.thread_id:
        values["thread_id"] = thread_id_for(message.from_user_id, message.to_user_id)

    result = db.execute(
        update(Message)
        .where(Message.id == message_id, Message.status == "PENDING")
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if not result.rowcount:
        raise InvalidRequestError("Message has already been responded to")

    db.flush()
    db.refresh(message)
    logger.info("Message %s %s by user %s", message_id, new_status.lower(), user_id)
    return message


def mark_read(db: Session, message_id: int, user_id: int) -> Message:
    message = (
        db.query(Message)
        .filter(Message.id == message_id, Message.to_user_id == user_id)
        .first()
    )
    if message is None:
        raise NotFoundError("Message not found")
    if message.status == "PENDING":
        raise InvalidRequestError("Accept the message before marking it read")
    if message.status == "ACCEPTED":
        message.status = "READ"
        db.flush()
    return message
