# src/contentlynk/services/engagement.py
"""Engagement recorder: likes, comments and shares with paired counters.

Every counter change happens in the same transaction as the event row it
mirrors and uses a store-side ``SET x = x + 1`` so concurrent requests
cannot lose updates. ``recount_post_counters`` rebuilds the counters from
the event tables when drift is suspected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from contentlynk.core.errors import InvalidRequestError
from contentlynk.models import Comment, Engagement, LegacyLike, Post, ViewLog
from contentlynk.services.anti_gaming import create_engagement
from contentlynk.services.post_service import get_post_or_404, get_visible_post_or_404

logger = logging.getLogger(__name__)

COUNTER_BY_KIND = {"like": "likes", "comment": "comments", "share": "shares"}
MAX_COMMENT_LENGTH = 5000

_NOT_ENGAGED = {"like": "Post not liked", "share": "Post not shared"}


@dataclass(frozen=True)
class EngagementResult:
    """Outcome of a recorded or removed engagement."""

    post_id: int
    kind: str
    count: int
    engagement: Engagement | None = None
    comment: Comment | None = None


def bump_counters(db: Session, post_id: int, **deltas: int) -> None:
    """Atomically add ``deltas`` to the named counter columns of a post."""
    values = {name: getattr(Post, name) + delta for name, delta in deltas.items()}
    db.execute(update(Post).where(Post.id == post_id).values(**values))


def _counter_value(db: Session, post_id: int, column: str) -> int:
    return db.execute(select(getattr(Post, column)).where(Post.id == post_id)).scalar_one()


def _mirror_like(db: Session, post_id: int, user_id: int) -> None:
    """Best-effort copy into the legacy ``likes`` table; failures are logged only."""
    try:
        with db.begin_nested():
            exists = (
                db.query(LegacyLike.id)
                .filter(LegacyLike.post_id == post_id, LegacyLike.user_id == user_id)
                .first()
            )
            if exists is None:
                db.add(LegacyLike(post_id=post_id, user_id=user_id))
                db.flush()
    except SQLAlchemyError as exc:
        logger.warning("Legacy like mirror failed for post %s user %s: %s", post_id, user_id, exc)


def _unmirror_like(db: Session, post_id: int, user_id: int) -> None:
    try:
        with db.begin_nested():
            db.execute(
                delete(LegacyLike).where(
                    LegacyLike.post_id == post_id,
                    LegacyLike.user_id == user_id,
                )
            )
    except SQLAlchemyError as exc:
        logger.warning("Legacy like removal failed for post %s user %s: %s", post_id, user_id, exc)


def _clean_comment(content: str | None) -> str:
    text = (content or "").strip()
    if not text:
        raise InvalidRequestError("Comment content is required")
    if len(text) > MAX_COMMENT_LENGTH:
        raise InvalidRequestError(f"Comment must be at most {MAX_COMMENT_LENGTH} characters")
    return text


def record_engagement(
    db: Session,
    post_id: int,
    user_id: int,
    kind: str,
    *,
    content: str | None = None,
) -> EngagementResult:
    """Record a like, comment or share and increment the matching counter.

    Raises:
        NotFoundError: the post does not exist or is not visible to the user.
        InvalidRequestError: duplicate like/share or an empty comment.
        RateLimitedError: the user's hourly engagement budget is spent.
    """
    get_visible_post_or_404(db, post_id, user_id)
    text = _clean_comment(content) if kind == "comment" else None

    engagement = create_engagement(db, post_id, user_id, kind)
    comment = None
    if text is not None:
        comment = Comment(post_id=post_id, user_id=user_id, content=text)
        db.add(comment)

    column = COUNTER_BY_KIND[kind]
    bump_counters(db, post_id, **{column: 1})
    db.flush()

    if kind == "like":
        _mirror_like(db, post_id, user_id)

    return EngagementResult(
        post_id=post_id,
        kind=kind,
        count=_counter_value(db, post_id, column),
        engagement=engagement,
        comment=comment,
    )


def remove_engagement(db: Session, post_id: int, user_id: int, kind: str) -> EngagementResult:
    """Undo a like or share.

    The counter is decremented only when an engagement row was deleted, so
    repeated or spurious removals cannot push it below the true count.
    """
    if kind not in _NOT_ENGAGED:
        raise InvalidRequestError(f"Cannot remove engagement of type {kind}")
    get_post_or_404(db, post_id)

    result = db.execute(
        delete(Engagement).where(
            Engagement.post_id == post_id,
            Engagement.user_id == user_id,
            Engagement.kind == kind,
        )
    )
    if not result.rowcount:
        raise InvalidRequestError(_NOT_ENGAGED[kind])

    column = COUNTER_BY_KIND[kind]
    bump_counters(db, post_id, **{column: -result.rowcount})
    db.flush()

    if kind == "like":
        _unmirror_like(db, post_id, user_id)

    return EngagementResult(post_id=post_id, kind=kind, count=_counter_value(db, post_id, column))


def has_engaged(db: Session, post_id: int, user_id: int, kind: str) -> bool:
    return (
        db.query(Engagement.id)
        .filter(
            Engagement.post_id == post_id,
            Engagement.user_id == user_id,
            Engagement.kind == kind,
        )
        .first()
        is not None
    )


def recount_post_counters(db: Session, post_id: int) -> Post:
    """Rebuild the denormalized counters of a post from its event rows."""
    post = get_post_or_404(db, post_id)

    def _count_kind(kind: str) -> int:
        return (
            db.query(func.count(Engagement.id))
            .filter(Engagement.post_id == post_id, Engagement.kind == kind)
            .scalar()
            or 0
        )

    total_views = db.query(func.count(ViewLog.id)).filter(ViewLog.post_id == post_id).scalar() or 0
    authenticated_views = (
        db.query(func.count(ViewLog.id))
        .filter(ViewLog.post_id == post_id, ViewLog.is_authenticated.is_(True))
        .scalar()
        or 0
    )

    post.likes = _count_kind("like")
    post.shares = _count_kind("share")
    post.comments = db.query(func.count(Comment.id)).filter(Comment.post_id == post_id).scalar() or 0
    post.total_views = total_views
    post.views = total_views
    post.authenticated_views = authenticated_views
    post.public_views = total_views - authenticated_views
    db.flush()
    logger.info("Recounted counters for post %s", post_id)
    return post
