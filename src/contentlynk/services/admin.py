"""Administrative user management with an audit trail for deletions."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, time

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from contentlynk.core.errors import InvalidRequestError, NotFoundError, UnauthorizedError
from contentlynk.core.settings import settings
from contentlynk.db.time import utcnow
from contentlynk.models import (
    Bookmark,
    Comment,
    EmailVerificationToken,
    Engagement,
    ImageUploadRateLimit,
    LegacyLike,
    Message,
    Post,
    PostConsumption,
    User,
    UserDeletionLog,
    ViewLog,
)
from contentlynk.services.bot_detection import BotAnalysis, UserSignals, analyze_user
from contentlynk.services.engagement import recount_post_counters

logger = logging.getLogger(__name__)

MAX_BULK_DELETE = 50
USER_FILTERS = ("all", "verified", "unverified", "admin", "likely-bots", "suspicious")


@dataclass(frozen=True)
class UserReport:
    user: User
    posts: int
    comments: int
    analysis: BotAnalysis


@dataclass
class BulkDeleteResult:
    requested_count: int
    deleted_count: int = 0
    errors: list[dict[str, object]] = field(default_factory=list)


def make_admin(db: Session, email: str, secret: str | None) -> User:
    """Promote the account with ``email`` when ``secret`` matches the setup secret."""
    if not settings.admin_setup_secret or secret != settings.admin_setup_secret:
        raise UnauthorizedError("Unauthorized")
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if user is None:
        raise NotFoundError("User not found")
    user.is_admin = True
    db.flush()
    logger.info("User %s promoted to admin", user.id)
    return user


def _activity_counts(db: Session, user_ids: list[int]) -> tuple[dict[int, int], dict[int, int]]:
    if not user_ids:
        return {}, {}
    posts = dict(
        db.query(Post.author_id, func.count(Post.id))
        .filter(Post.author_id.in_(user_ids), Post.deleted.is_(False))
        .group_by(Post.author_id)
        .all()
    )
    comments = dict(
        db.query(Comment.user_id, func.count(Comment.id))
        .filter(Comment.user_id.in_(user_ids))
        .group_by(Comment.user_id)
        .all()
    )
    return posts, comments


def _report(user: User, posts: int, comments: int, now: datetime) -> UserReport:
    signals = UserSignals(
        username=user.username,
        email=user.email,
        email_verified=user.email_verified,
        created_at=user.created_at,
        posts=posts,
        comments=comments,
    )
    return UserReport(user=user, posts=posts, comments=comments, analysis=analyze_user(signals, now))


def _matches(report: UserReport, status: str) -> bool:
    if status == "verified":
        return report.user.email_verified
    if status == "unverified":
        return not report.user.email_verified
    if status == "admin":
        return report.user.is_admin
    if status == "likely-bots":
        return report.analysis.is_likely_bot
    if status == "suspicious":
        return report.analysis.is_suspicious
    return True


def list_users(
    db: Session,
    status: str | None = None,
    search: str | None = None,
    now: datetime | None = None,
) -> list[UserReport]:
    """Users newest first with activity counts and bot analysis."""
    status = status or "all"
    if status not in USER_FILTERS:
        raise InvalidRequestError(f"Unknown status filter: {status}")

    query = db.query(User)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(
                User.email.ilike(pattern),
                User.username.ilike(pattern),
                User.display_name.ilike(pattern),
            )
        )
    users = query.order_by(User.created_at.desc(), User.id.desc()).all()

    now = now or utcnow()
    posts, comments = _activity_counts(db, [u.id for u in users])
    reports = [_report(u, posts.get(u.id, 0), comments.get(u.id, 0), now) for u in users]
    return [r for r in reports if _matches(r, status)]


def user_stats(db: Session, now: datetime | None = None) -> dict[str, int]:
    now = now or utcnow()
    today_start = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
    total = db.query(func.count(User.id)).scalar() or 0
    verified = db.query(func.count(User.id)).filter(User.email_verified.is_(True)).scalar() or 0
    today = db.query(func.count(User.id)).filter(User.created_at >= today_start).scalar() or 0
    return {"total": total, "verified": verified, "unverified": total - verified, "today": today}


def get_user_report(db: Session, user_id: int, now: datetime | None = None) -> UserReport:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    posts, comments = _activity_counts(db, [user.id])
    return _report(user, posts.get(user.id, 0), comments.get(user.id, 0), now or utcnow())


def _purge_user_rows(db: Session, user_id: int) -> None:
    """Remove everything owned by ``user_id`` and repair counters it touched.

    Rows are deleted explicitly so the result does not depend on the
    database enforcing ``ON DELETE CASCADE``.
    """
    own_posts = select(Post.id).where(Post.author_id == user_id)
    for model in (Engagement, LegacyLike, Comment, Bookmark, ViewLog, PostConsumption):
        db.execute(
            delete(model)
            .where(model.post_id.in_(own_posts))
            .execution_options(synchronize_session=False)
        )

    touched = {
        row[0]
        for row in db.execute(
            select(Engagement.post_id).where(Engagement.user_id == user_id)
            .union(select(Comment.post_id).where(Comment.user_id == user_id))
        )
    }

    for model in (Engagement, LegacyLike, Comment, Bookmark, EmailVerificationToken, ImageUploadRateLimit):
        db.execute(
            delete(model)
            .where(model.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
    for model in (ViewLog, PostConsumption):
        db.execute(
            update(model)
            .where(model.user_id == user_id)
            .values(user_id=None)
            .execution_options(synchronize_session=False)
        )
    db.execute(
        delete(Message)
        .where(or_(Message.from_user_id == user_id, Message.to_user_id == user_id))
        .execution_options(synchronize_session=False)
    )
    db.execute(delete(Post).where(Post.author_id == user_id).execution_options(synchronize_session=False))

    live = db.query(Post.id).filter(Post.id.in_(touched), Post.deleted.is_(False)).all() if touched else []
    for (post_id,) in live:
        recount_post_counters(db, post_id)


def _delete_with_audit(db: Session, report: UserReport, admin_id: int, reason: str | None) -> None:
    user = report.user
    db.add(
        UserDeletionLog(
            deleted_user_id=user.id,
            deleted_username=user.username,
            deleted_email=user.email,
            deleted_by_id=admin_id,
            reason=reason,
            bot_score=report.analysis.score,
        )
    )
    _purge_user_rows(db, user.id)
    db.delete(user)
    db.flush()
    logger.info("Admin %s deleted user %s (%s)", admin_id, user.id, user.username)


def delete_user(db: Session, admin_id: int, user_id: int, reason: str | None = None) -> str:
    """Delete one account; returns the deleted username."""
    if user_id == admin_id:
        raise InvalidRequestError("Cannot delete your own account")
    report = get_user_report(db, user_id)
    if report.user.is_admin:
        raise InvalidRequestError("Cannot delete admin accounts")
    username = report.user.username
    _delete_with_audit(db, report, admin_id, reason)
    return username


def bulk_delete_users(
    db: Session,
    admin_id: int,
    user_ids: list[int],
    *,
    reason: str | None = None,
    confirmed_bots_only: bool = False,
) -> BulkDeleteResult:
    """Delete up to ``MAX_BULK_DELETE`` accounts after validating the whole batch."""
    ids = list(dict.fromkeys(user_ids))
    if not ids:
        raise InvalidRequestError("No users selected for deletion")
    if len(ids) > MAX_BULK_DELETE:
        raise InvalidRequestError(f"Cannot delete more than {MAX_BULK_DELETE} users at once")
    if admin_id in ids:
        raise InvalidRequestError("Cannot delete your own account")

    users = db.query(User).filter(User.id.in_(ids)).all()
    if any(u.is_admin for u in users):
        raise InvalidRequestError("Cannot delete admin accounts")
    if confirmed_bots_only and any(u.email_verified for u in users):
        raise InvalidRequestError("Cannot bulk delete verified users. Please remove them individually.")

    result = BulkDeleteResult(requested_count=len(ids))
    found = {u.id for u in users}
    for missing in (i for i in ids if i not in found):
        result.errors.append({"user_id": missing, "error": "User not found"})

    now = utcnow()
    posts, comments = _activity_counts(db, sorted(found))
    for user in users:
        report = _report(user, posts.get(user.id, 0), comments.get(user.id, 0), now)
        try:
            with db.begin_nested():
                _delete_with_audit(db, report, admin_id, reason)
        except SQLAlchemyError:
            logger.exception("Failed to delete user %s", user.id)
            result.errors.append({"user_id": user.id, "error": "Failed to delete user"})
            continue
        result.deleted_count += 1

    logger.info("Admin %s bulk deleted %s of %s users", admin_id, result.deleted_count, result.requested_count)
    return result
