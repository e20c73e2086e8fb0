# src/contentlynk/services/anti_gaming.py
"""Anti-gaming checks applied before an engagement is stored.

Two rules are enforced: a user may like or share a post only once, and a
user may not record more than ``ENGAGEMENT_RATE_LIMIT_PER_HOUR``
engagements in any trailing hour.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from contentlynk.core.errors import InvalidRequestError, RateLimitedError
from contentlynk.core.settings import settings
from contentlynk.db.time import utcnow
from contentlynk.models import ENGAGEMENT_KINDS, Engagement

logger = logging.getLogger(__name__)

ENGAGEMENT_WINDOW = timedelta(hours=1)
SINGLE_USE_KINDS = frozenset({"like", "share"})

_PAST_TENSE = {"like": "liked", "share": "shared", "comment": "commented on"}


def duplicate_message(kind: str) -> str:
    return f"Post already {_PAST_TENSE[kind]}"


def recent_engagement_count(db: Session, user_id: int, now: datetime | None = None) -> int:
    """Number of engagements by ``user_id`` inside the trailing window."""
    window_start = (now or utcnow()) - ENGAGEMENT_WINDOW
    return (
        db.query(func.count(Engagement.id))
        .filter(Engagement.user_id == user_id, Engagement.created_at >= window_start)
        .scalar()
        or 0
    )


def check_engagement_allowed(db: Session, post_id: int, user_id: int, kind: str) -> None:
    """Raise if the engagement would break an anti-gaming rule.

    Raises:
        InvalidRequestError: unknown kind or a repeated like/share.
        RateLimitedError: hourly engagement budget exhausted.
    """
    if kind not in ENGAGEMENT_KINDS:
        raise InvalidRequestError(f"Unsupported engagement type: {kind}")

    if kind in SINGLE_USE_KINDS:
        existing = (
            db.query(Engagement.id)
            .filter(
                Engagement.post_id == post_id,
                Engagement.user_id == user_id,
                Engagement.kind == kind,
            )
            .first()
        )
        if existing is not None:
            raise InvalidRequestError(duplicate_message(kind))

    limit = settings.engagement_rate_limit_per_hour
    if recent_engagement_count(db, user_id) >= limit:
        logger.warning("User %s exceeded %s engagements per hour", user_id, limit)
        raise RateLimitedError(
            f"Rate limit exceeded: at most {limit} engagements per hour",
            retry_after=int(ENGAGEMENT_WINDOW.total_seconds()),
        )


def create_engagement(db: Session, post_id: int, user_id: int, kind: str) -> Engagement:
    """Validate and persist one engagement row.

    The partial unique index on (post, user, kind) backs the duplicate check
    against concurrent requests; a conflict surfaces as the same 400.
    """
    check_engagement_allowed(db, post_id, user_id, kind)

    engagement = Engagement(post_id=post_id, user_id=user_id, kind=kind)
    try:
        with db.begin_nested():
            db.add(engagement)
            db.flush()
    except IntegrityError as exc:
        raise InvalidRequestError(duplicate_message(kind)) from exc
    return engagement
