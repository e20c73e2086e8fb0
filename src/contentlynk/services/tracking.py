# src/contentlynk/services/tracking.py
"""Server side of view and consumption tracking."""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from contentlynk.models import PostConsumption, ViewLog
from contentlynk.services.engagement import bump_counters
from contentlynk.services.post_service import get_post_or_404, get_visible_post_or_404

logger = logging.getLogger(__name__)

MAX_USER_AGENT_LENGTH = 255


def record_view(
    db: Session,
    post_id: int,
    user_id: int | None,
    is_authenticated: bool,
) -> ViewLog:
    """Append a view log row and bump the four view counters of the post.

    ``total_views`` and the legacy ``views`` always move by one, together
    with exactly one of ``authenticated_views`` / ``public_views``.
    """
    get_visible_post_or_404(db, post_id, user_id)

    view = ViewLog(post_id=post_id, user_id=user_id, is_authenticated=is_authenticated)
    db.add(view)

    audience = "authenticated_views" if is_authenticated else "public_views"
    bump_counters(db, post_id, total_views=1, views=1, **{audience: 1})
    db.flush()
    return view


@dataclass(frozen=True)
class ConsumptionReport:
    """One depth report sent by a reader's tracker."""

    post_id: int
    session_id: str | None = None
    scroll_depth: float | None = None
    watch_percentage: float | None = None
    listen_percentage: float | None = None
    time_spent: int | None = None
    completed: bool = False


@dataclass(frozen=True)
class ConsumptionOutcome:
    consumption: PostConsumption
    session_id: str
    updated: bool


def anonymous_session_id() -> str:
    return f"anon-{int(time.time() * 1000)}-{secrets.token_hex(5)}"


def _max_or_keep(current: float | None, reported: float | None) -> float | None:
    if reported is None:
        return current
    return max(current or 0.0, reported)


def track_consumption(
    db: Session,
    report: ConsumptionReport,
    *,
    user_id: int | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> ConsumptionOutcome:
    """Merge a depth report into the (post, session) record.

    Depth metrics keep the maximum ever reported and ``completed`` never
    reverts, so late or out-of-order reports cannot lower progress. The
    post's consumption aggregates are recomputed afterwards.
    """
    get_visible_post_or_404(db, report.post_id, user_id)
    session_id = report.session_id or anonymous_session_id()

    record = (
        db.query(PostConsumption)
        .filter(
            PostConsumption.post_id == report.post_id,
            PostConsumption.session_id == session_id,
        )
        .first()
    )
    updated = record is not None
    if record is None:
        record = PostConsumption(
            post_id=report.post_id,
            session_id=session_id,
            user_id=user_id,
            scroll_depth=report.scroll_depth,
            watch_percentage=report.watch_percentage,
            listen_percentage=report.listen_percentage,
            time_spent=report.time_spent or 0,
            completed=report.completed,
            ip_address=ip_address,
            user_agent=(user_agent or "")[:MAX_USER_AGENT_LENGTH] or None,
        )
        db.add(record)
    else:
        record.scroll_depth = _max_or_keep(record.scroll_depth, report.scroll_depth)
        record.watch_percentage = _max_or_keep(record.watch_percentage, report.watch_percentage)
        record.listen_percentage = _max_or_keep(record.listen_percentage, report.listen_percentage)
        record.time_spent = max(record.time_spent or 0, report.time_spent or 0)
        record.completed = record.completed or report.completed
        if record.user_id is None and user_id is not None:
            record.user_id = user_id

    db.flush()
    update_post_aggregates(db, report.post_id)
    return ConsumptionOutcome(consumption=record, session_id=session_id, updated=updated)


def update_post_aggregates(db: Session, post_id: int) -> None:
    """Recompute average depths and completion count from consumption rows."""
    post = get_post_or_404(db, post_id)
    avg_scroll, avg_watch, completions = (
        db.query(
            func.avg(PostConsumption.scroll_depth),
            func.avg(PostConsumption.watch_percentage),
            func.sum(case((PostConsumption.completed.is_(True), 1), else_=0)),
        )
        .filter(PostConsumption.post_id == post_id)
        .one()
    )
    post.average_scroll_depth = float(avg_scroll) if avg_scroll is not None else None
    post.average_watch_percentage = float(avg_watch) if avg_watch is not None else None
    post.total_completions = int(completions or 0)
    db.flush()
    logger.debug("Updated consumption aggregates for post %s", post_id)
