# src/contentlynk/services/rate_limit.py
"""Sliding-window limiter for image uploads.

Each upload leaves a timestamped marker row. A check counts the markers
inside the trailing hour; writing a marker also purges markers older than a
day so the table stays small without a background job.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from contentlynk.core.settings import settings
from contentlynk.db.time import as_utc, utcnow
from contentlynk.models import ImageUploadRateLimit

logger = logging.getLogger(__name__)

RATE_LIMIT_WINDOW = timedelta(hours=1)
RETENTION = timedelta(hours=24)


@dataclass(frozen=True)
class RateLimitStatus:
    """Result of a limit check; ``reset_in`` is in seconds."""

    allowed: bool
    remaining: int
    reset_in: int | None = None

    @property
    def reset_in_minutes(self) -> int:
        return math.ceil((self.reset_in or 0) / 60)


def check_upload_rate_limit(
    db: Session,
    user_id: int,
    *,
    limit: int | None = None,
    now: datetime | None = None,
) -> RateLimitStatus:
    """Return whether ``user_id`` may upload another image right now.

    Fails closed: any database error yields ``allowed=False``.
    """
    max_uploads = settings.max_image_uploads_per_hour if limit is None else limit
    now = now or utcnow()
    window_start = now - RATE_LIMIT_WINDOW

    try:
        recent = (
            db.query(func.count(ImageUploadRateLimit.id))
            .filter(
                ImageUploadRateLimit.user_id == user_id,
                ImageUploadRateLimit.uploaded_at >= window_start,
            )
            .scalar()
            or 0
        )
        if recent < max_uploads:
            return RateLimitStatus(allowed=True, remaining=max_uploads - recent)

        oldest = (
            db.query(ImageUploadRateLimit.uploaded_at)
            .filter(
                ImageUploadRateLimit.user_id == user_id,
                ImageUploadRateLimit.uploaded_at >= window_start,
            )
            .order_by(ImageUploadRateLimit.uploaded_at.asc())
            .limit(1)
            .scalar()
        )
    except SQLAlchemyError:
        logger.exception("Upload rate limit check failed for user %s", user_id)
        return RateLimitStatus(allowed=False, remaining=0)

    reset_in = None
    if oldest is not None:
        seconds = (as_utc(oldest) + RATE_LIMIT_WINDOW - now).total_seconds()
        reset_in = max(0, math.ceil(seconds))
    return RateLimitStatus(allowed=False, remaining=0, reset_in=reset_in)


def record_upload(db: Session, user_id: int, now: datetime | None = None) -> None:
    """Store an upload marker and purge markers older than the retention period.

    The upload has already happened when this runs, so a failure here is
    logged rather than raised.
    """
    now = now or utcnow()
    try:
        with db.begin_nested():
            db.add(ImageUploadRateLimit(user_id=user_id, uploaded_at=now))
            db.flush()
            db.execute(
                delete(ImageUploadRateLimit)
                .where(ImageUploadRateLimit.uploaded_at < now - RETENTION)
                .execution_options(synchronize_session=False)
            )
    except SQLAlchemyError:
        logger.exception("Failed to record image upload for user %s", user_id)
