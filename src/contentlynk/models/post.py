# src/contentlynk/models/post.py
"""SQLAlchemy models for posts."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from contentlynk.db.session import Base
from contentlynk.db.time import utcnow


class Post(Base):
    """Article, text or video post authored by a user.

    The counter columns are denormalized from the engagement, comment and
    view tables so feeds can render without aggregating. They are only
    changed through atomic ``UPDATE ... SET x = x + n`` statements issued in
    the same transaction as the event row they mirror, and can be rebuilt
    from those tables with ``recount_post_counters``.
    """

    __tablename__ = "post"
    __table_args__ = (
        UniqueConstraint("author_id", "slug", name="uq_post_author_slug"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    slug: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt: Mapped[str | None] = mapped_column(Text, nullable=True)
    reading_time: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # ARTICLE, TEXT or VIDEO.
    content_type: Mapped[str] = mapped_column(Text, nullable=False, default="TEXT")
    video_key: Mapped[str | None] = mapped_column(Text, nullable=True)

    # DRAFT or PUBLISHED.
    status: Mapped[str] = mapped_column(Text, nullable=False, default="PUBLISHED")
    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comments: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    shares: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    authenticated_views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    public_views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Consumption aggregates, recomputed from post_consumption on every report.
    average_scroll_depth: Mapped[float | None] = mapped_column(Float, nullable=True)
    average_watch_percentage: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_completions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )
