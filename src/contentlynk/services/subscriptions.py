"""Newsletter subscription lifecycle: subscribe, unsubscribe, reactivate."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.orm import Session

from contentlynk.core.errors import InvalidRequestError, NotFoundError
from contentlynk.db.time import utcnow
from contentlynk.models import EmailSubscriber

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "article"


class SubscribeOutcome(Enum):
    CREATED = "created"
    ALREADY_ACTIVE = "already_active"
    REACTIVATED = "reactivated"


SUBSCRIBE_MESSAGES = {
    SubscribeOutcome.CREATED: "Thank you for subscribing!",
    SubscribeOutcome.ALREADY_ACTIVE: "You are already subscribed!",
    SubscribeOutcome.REACTIVATED: "Welcome back! Your subscription has been reactivated.",
}


@dataclass(frozen=True)
class SubscribeResult:
    subscriber: EmailSubscriber
    outcome: SubscribeOutcome

    @property
    def message(self) -> str:
        return SUBSCRIBE_MESSAGES[self.outcome]


def normalize_email(email: str | None) -> str:
    """Lower-case and trim ``email``; raises when it has no ``@``."""
    value = (email or "").strip().lower()
    if "@" not in value:
        raise InvalidRequestError("Valid email is required")
    return value


def subscribe(
    db: Session,
    email: str | None,
    name: str | None = None,
    source: str | None = None,
) -> SubscribeResult:
    address = normalize_email(email)
    subscriber = db.query(EmailSubscriber).filter(EmailSubscriber.email == address).first()

    if subscriber is not None:
        if subscriber.is_active:
            return SubscribeResult(subscriber, SubscribeOutcome.ALREADY_ACTIVE)
        subscriber.is_active = True
        subscriber.unsubscribed_at = None
        subscriber.source = source or DEFAULT_SOURCE
        db.flush()
        logger.info("Reactivated subscriber %s", subscriber.id)
        return SubscribeResult(subscriber, SubscribeOutcome.REACTIVATED)

    subscriber = EmailSubscriber(email=address, name=name or None, source=source or DEFAULT_SOURCE)
    db.add(subscriber)
    db.flush()
    return SubscribeResult(subscriber, SubscribeOutcome.CREATED)


def unsubscribe(db: Session, email: str | None) -> EmailSubscriber:
    """Deactivate a subscriber without deleting the row."""
    address = normalize_email(email)
    subscriber = db.query(EmailSubscriber).filter(EmailSubscriber.email == address).first()
    if subscriber is None:
        raise NotFoundError("Subscriber not found")
    if subscriber.is_active:
        subscriber.is_active = False
        subscriber.unsubscribed_at = utcnow()
        db.flush()
    return subscriber
