# src/contentlynk/schemas/post.py
"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ContentType = Literal["ARTICLE", "TEXT", "VIDEO"]
PostStatus = Literal["DRAFT", "PUBLISHED"]


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str | None = Field(None, max_length=200, description="Optional headline")
    content: str = Field(..., min_length=1, max_length=100_000, description="Post body")
    content_type: ContentType = Field("TEXT", description="ARTICLE, TEXT or VIDEO")
    status: PostStatus = Field("PUBLISHED", description="DRAFT or PUBLISHED")
    video_key: str | None = Field(None, description="Storage key returned by the presigned upload")


class PostUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    title: str | None = Field(None, max_length=200)
    content: str | None = Field(None, min_length=1, max_length=100_000)
    status: PostStatus | None = None
    video_key: str | None = None


class AuthorSummary(BaseModel):
    id: int
    username: str
    display_name: str | None = None
    avatar_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    author_id: int
    title: str | None
    slug: str | None
    content: str
    excerpt: str | None
    reading_time: int | None
    content_type: str
    video_key: str | None
    status: str
    published: bool
    likes: int
    comments: int
    shares: int
    views: int
    total_views: int
    authenticated_views: int
    public_views: int
    average_scroll_depth: float | None
    average_watch_percentage: float | None
    total_completions: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentResponse(BaseModel):
    id: int
    post_id: int
    user_id: int
    content: str
    created_at: datetime
    author: AuthorSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class FeedPost(PostResponse):
    """Post as rendered in the feed, with viewer-specific state."""

    author: AuthorSummary | None = None
    is_liked_by_user: bool = False
    recent_comments: list[CommentResponse] = Field(default_factory=list)


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class FeedResponse(BaseModel):
    posts: list[FeedPost]
    pagination: Pagination
