# src/contentlynk/models/beta.py
"""Models for the closed beta programme."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from contentlynk.db.session import Base
from contentlynk.db.time import utcnow


class BetaApplication(Base):
    """Request to join the closed beta, reviewed by an administrator."""

    __tablename__ = "beta_application"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    content_niche: Mapped[str | None] = mapped_column(Text, nullable=True)

    # PENDING, APPROVED, REJECTED or WAITLIST.
    status: Mapped[str] = mapped_column(Text, nullable=False, default="PENDING")
    reviewed_by_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    review_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="SET NULL"),
        nullable=True,
    )

    waitlist_token: Mapped[str | None] = mapped_column(Text, unique=True, nullable=True)
    waitlisted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
