# src/contentlynk/models/user.py
"""SQLAlchemy models for user accounts and e-mail verification."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from contentlynk.db.session import Base
from contentlynk.db.time import utcnow


class User(Base):
    """Registered account; creators and readers share the same table."""

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str | None] = mapped_column(Text, unique=True, nullable=True)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    legal_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    password_hash: Mapped[str | None] = mapped_column(Text, nullable=True)
    wallet_address: Mapped[str | None] = mapped_column(Text, nullable=True)

    # FREE, SILVER, GOLD or PLATINUM.
    membership_tier: Mapped[str] = mapped_column(Text, nullable=False, default="FREE")
    status: Mapped[str] = mapped_column(Text, nullable=False, default="ACTIVE")
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    beta_tester_number: Mapped[int | None] = mapped_column(Integer, nullable=True, unique=True)
    welcome_email_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    welcome_email_sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        onupdate=utcnow,
    )


class EmailVerificationToken(Base):
    """Single-use token mailed to confirm ownership of an address."""

    __tablename__ = "email_verification_token"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class UserDeletionLog(Base):
    """Audit trail row written whenever an administrator deletes an account."""

    __tablename__ = "user_deletion_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Plain values rather than foreign keys; the account no longer exists.
    deleted_user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    deleted_username: Mapped[str] = mapped_column(Text, nullable=False)
    deleted_email: Mapped[str | None] = mapped_column(Text, nullable=True)
    deleted_by_id: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    bot_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
