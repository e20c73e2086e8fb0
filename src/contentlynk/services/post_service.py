"""Service-level helpers for creating and editing posts."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from contentlynk.core.errors import ForbiddenError, InvalidRequestError, NotFoundError
from contentlynk.models import Post
from contentlynk.utils.text import (
    calculate_reading_time,
    generate_excerpt,
    generate_slug,
    numbered_slug,
)

logger = logging.getLogger(__name__)

# Upper bound on conflicting inserts before giving up on a title.
MAX_SLUG_INSERT_ATTEMPTS = 5
SLUG_CONSTRAINT = "uq_post_author_slug"

__all__ = [
    "get_post_or_404",
    "get_visible_post_or_404",
    "generate_unique_slug",
    "insert_post_with_unique_slug",
    "create_post",
    "update_post",
    "soft_delete_post",
]


def get_post_or_404(db: Session, post_id: int) -> Post:
    """Return a live (not deleted) post or raise ``NotFoundError``."""
    post = db.query(Post).filter(Post.id == post_id, Post.deleted.is_(False)).first()
    if post is None:
        raise NotFoundError("Post not found")
    return post


def get_visible_post_or_404(db: Session, post_id: int, viewer_id: int | None) -> Post:
    """Like ``get_post_or_404`` but an unpublished post exists only for its author."""
    post = get_post_or_404(db, post_id)
    if not post.published and (viewer_id is None or post.author_id != viewer_id):
        raise NotFoundError("Post not found")
    return post


def _slug_taken(db: Session, slug: str, author_id: int, exclude_post_id: int | None) -> bool:
    stmt = select(Post.id).where(Post.slug == slug, Post.author_id == author_id)
    if exclude_post_id is not None:
        stmt = stmt.where(Post.id != exclude_post_id)
    return db.execute(stmt.limit(1)).first() is not None


def generate_unique_slug(
    db: Session,
    title: str,
    author_id: int,
    exclude_post_id: int | None = None,
) -> str:
    """Return the first free slug for ``title`` among the author's posts.

    Tries ``base``, ``base-1``, ``base-2``... Posts by other authors never
    collide. ``exclude_post_id`` lets a post keep its own slug on edit.
    """
    base = generate_slug(title)
    attempt = 0
    while _slug_taken(db, numbered_slug(base, attempt), author_id, exclude_post_id):
        attempt += 1
    return numbered_slug(base, attempt)


def _is_slug_conflict(exc: IntegrityError) -> bool:
    """Whether ``exc`` comes from the per-author slug constraint."""
    constraint = getattr(getattr(exc.orig, "diag", None), "constraint_name", None)
    if constraint is not None:
        return constraint == SLUG_CONSTRAINT
    # SQLite names the columns instead of the constraint.
    message = str(exc.orig)
    return SLUG_CONSTRAINT in message or "post.author_id, post.slug" in message


def insert_post_with_unique_slug(db: Session, post: Post, title: str) -> Post:
    """Write ``post`` with a slug that is unique for its author.

    The lookup alone can race with a concurrent write of the same title, so
    the flush runs in a savepoint and a slug conflict triggers a fresh
    lookup. Any other integrity error propagates. Used for new posts and
    for retitled ones.
    """
    for _ in range(MAX_SLUG_INSERT_ATTEMPTS):
        post.slug = generate_unique_slug(db, title, post.author_id, exclude_post_id=post.id)
        try:
            with db.begin_nested():
                db.add(post)
                db.flush()
        except IntegrityError as exc:
            if not _is_slug_conflict(exc):
                raise
            logger.info("Slug %r taken concurrently for author %s, retrying", post.slug, post.author_id)
            continue
        return post
    raise InvalidRequestError("Could not allocate a unique slug, please retry")


def _derive_text_fields(post: Post) -> None:
    post.excerpt = generate_excerpt(post.content)
    post.reading_time = calculate_reading_time(post.content)


def create_post(
    db: Session,
    *,
    author_id: int,
    content: str,
    title: str | None = None,
    content_type: str = "TEXT",
    status: str = "PUBLISHED",
    video_key: str | None = None,
) -> Post:
    """Create a post, deriving slug, excerpt and reading time."""
    post = Post(
        author_id=author_id,
        title=title,
        content=content,
        content_type=content_type,
        status=status,
        published=status == "PUBLISHED",
        video_key=video_key,
    )
    _derive_text_fields(post)
    return insert_post_with_unique_slug(db, post, title or content[:80])


def _check_author(post: Post, user_id: int) -> None:
    if post.author_id != user_id:
        raise ForbiddenError("You can only modify your own posts")


def update_post(db: Session, post: Post, user_id: int, changes: dict[str, Any]) -> Post:
    """Apply a partial update; a new title re-derives the slug."""
    _check_author(post, user_id)

    title_changed = "title" in changes and changes["title"] != post.title
    for key, value in changes.items():
        setattr(post, key, value)
    if "status" in changes:
        post.published = post.status == "PUBLISHED"
    if "content" in changes:
        _derive_text_fields(post)

    db.flush()
    if title_changed and post.title:
        insert_post_with_unique_slug(db, post, post.title)
    return post


def soft_delete_post(db: Session, post: Post, user_id: int) -> None:
    _check_author(post, user_id)
    post.deleted = True
    db.flush()
