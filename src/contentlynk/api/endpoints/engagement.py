"""Likes, comments, shares, bookmarks and views on posts."""

from fastapi import APIRouter, status
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError

from contentlynk.api.dependencies import CurrentUserDep, OptionalUserDep, SessionDep
from contentlynk.core.errors import InvalidRequestError, NotFoundError
from contentlynk.models import Bookmark, Comment, User
from contentlynk.schemas.engagement import (
    BookmarkResponse,
    CommentCreate,
    CommentListResponse,
    EngagementResponse,
    ViewResponse,
)
from contentlynk.schemas.post import AuthorSummary, CommentResponse
from contentlynk.services.engagement import EngagementResult, record_engagement, remove_engagement
from contentlynk.services.post_service import get_visible_post_or_404
from contentlynk.services.tracking import record_view

router = APIRouter(prefix="/posts", tags=["engagement"])


def _engagement_response(result: EngagementResult, author: User | None = None) -> EngagementResponse:
    comment = None
    if result.comment is not None:
        comment = CommentResponse.model_validate(result.comment)
        if author is not None:
            comment.author = AuthorSummary.model_validate(author)
    return EngagementResponse(post_id=result.post_id, kind=result.kind, count=result.count, comment=comment)


@router.post("/{post_id}/like", response_model=EngagementResponse)
async def like_post(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> EngagementResponse:
    result = record_engagement(db, post_id, current_user.id, "like")
    db.commit()
    return _engagement_response(result)


@router.delete("/{post_id}/like", response_model=EngagementResponse)
async def unlike_post(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> EngagementResponse:
    result = remove_engagement(db, post_id, current_user.id, "like")
    db.commit()
    return _engagement_response(result)


@router.post("/{post_id}/share", response_model=EngagementResponse)
async def share_post(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> EngagementResponse:
    result = record_engagement(db, post_id, current_user.id, "share")
    db.commit()
    return _engagement_response(result)


@router.delete("/{post_id}/share", response_model=EngagementResponse)
async def unshare_post(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> EngagementResponse:
    result = remove_engagement(db, post_id, current_user.id, "share")
    db.commit()
    return _engagement_response(result)


@router.post(
    "/{post_id}/comment",
    response_model=EngagementResponse,
    status_code=status.HTTP_201_CREATED,
)
async def comment_on_post(
    post_id: int,
    payload: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> EngagementResponse:
    """Add a comment; blank comments are rejected."""
    result = record_engagement(db, post_id, current_user.id, "comment", content=payload.content)
    db.commit()
    return _engagement_response(result, author=current_user)


@router.get("/{post_id}/comment", response_model=CommentListResponse)
async def list_comments(post_id: int, viewer: OptionalUserDep, db: SessionDep) -> CommentListResponse:
    """Comments on a post, oldest first."""
    get_visible_post_or_404(db, post_id, viewer.id if viewer else None)
    rows = (
        db.query(Comment, User)
        .join(User, User.id == Comment.user_id)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )
    comments = []
    for comment, author in rows:
        item = CommentResponse.model_validate(comment)
        item.author = AuthorSummary.model_validate(author)
        comments.append(item)
    return CommentListResponse(comments=comments)


@router.post("/{post_id}/bookmark", response_model=BookmarkResponse)
async def bookmark_post(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> BookmarkResponse:
    get_visible_post_or_404(db, post_id, current_user.id)
    try:
        with db.begin_nested():
            db.add(Bookmark(post_id=post_id, user_id=current_user.id))
            db.flush()
    except IntegrityError as exc:
        raise InvalidRequestError("Post already bookmarked") from exc
    db.commit()
    return BookmarkResponse(post_id=post_id, bookmarked=True)


@router.delete("/{post_id}/bookmark", response_model=BookmarkResponse)
async def remove_bookmark(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> BookmarkResponse:
    result = db.execute(
        delete(Bookmark).where(Bookmark.post_id == post_id, Bookmark.user_id == current_user.id)
    )
    if not result.rowcount:
        raise NotFoundError("Bookmark not found")
    db.commit()
    return BookmarkResponse(post_id=post_id, bookmarked=False)


@router.post("/{post_id}/view", response_model=ViewResponse)
async def view_post(post_id: int, viewer: OptionalUserDep, db: SessionDep) -> ViewResponse:
    """Count a view; a valid bearer token makes it an authenticated view."""
    is_authenticated = viewer is not None
    record_view(db, post_id, viewer.id if viewer else None, is_authenticated)
    db.commit()
    return ViewResponse(post_id=post_id, is_authenticated=is_authenticated)
