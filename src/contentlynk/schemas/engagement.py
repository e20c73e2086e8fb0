# src/contentlynk/schemas/engagement.py
"""Schemas for likes, comments, shares, bookmarks and views."""

from pydantic import BaseModel, Field

from .post import CommentResponse


class CommentCreate(BaseModel):
    content: str = Field(..., description="Comment text; blank comments are rejected")


class EngagementResponse(BaseModel):
    """Counter value after a like, share or comment was recorded or removed."""

    success: bool = True
    post_id: int
    kind: str
    count: int
    comment: CommentResponse | None = None


class CommentListResponse(BaseModel):
    comments: list[CommentResponse]


class BookmarkResponse(BaseModel):
    success: bool = True
    post_id: int
    bookmarked: bool


class ViewResponse(BaseModel):
    success: bool = True
    post_id: int
    is_authenticated: bool
