"""Authenticated home feed."""

from collections import defaultdict

from fastapi import APIRouter, Query
from sqlalchemy import func

from contentlynk.api.dependencies import CurrentUserDep, SessionDep
from contentlynk.models import Comment, Engagement, Post, User
from contentlynk.schemas.post import (
    AuthorSummary,
    CommentResponse,
    FeedPost,
    FeedResponse,
    Pagination,
)

router = APIRouter(prefix="/feed", tags=["feed"])

RECENT_COMMENTS = 3


@router.get("", response_model=FeedResponse)
async def get_feed(
    current_user: CurrentUserDep,
    db: SessionDep,
    limit: int = Query(20, ge=1, le=100, description="Maximum number of posts to return"),
    offset: int = Query(0, ge=0, description="Number of posts to skip"),
) -> FeedResponse:
    """Published posts newest first, with the viewer's like state and recent comments."""
    visible = (Post.deleted.is_(False), Post.published.is_(True))
    total = db.query(func.count(Post.id)).filter(*visible).scalar() or 0

    rows = (
        db.query(Post, User)
        .join(User, User.id == Post.author_id)
        .filter(*visible)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    post_ids = [post.id for post, _ in rows]

    liked: set[int] = set()
    comments_by_post: dict[int, list[CommentResponse]] = defaultdict(list)
    if post_ids:
        liked = {
            pid
            for (pid,) in db.query(Engagement.post_id).filter(
                Engagement.post_id.in_(post_ids),
                Engagement.user_id == current_user.id,
                Engagement.kind == "like",
            )
        }
        comment_rows = (
            db.query(Comment, User)
            .join(User, User.id == Comment.user_id)
            .filter(Comment.post_id.in_(post_ids))
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .all()
        )
        for comment, author in comment_rows:
            bucket = comments_by_post[comment.post_id]
            if len(bucket) < RECENT_COMMENTS:
                item = CommentResponse.model_validate(comment)
                item.author = AuthorSummary.model_validate(author)
                bucket.append(item)

    posts = []
    for post, author in rows:
        item = FeedPost.model_validate(post)
        item.author = AuthorSummary.model_validate(author)
        item.is_liked_by_user = post.id in liked
        item.recent_comments = comments_by_post.get(post.id, [])
        posts.append(item)

    return FeedResponse(
        posts=posts,
        pagination=Pagination(
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + len(posts) < total,
        ),
    )
