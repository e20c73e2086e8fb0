"""initial schema

Revision ID: 5c1e9a7d2b40
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e9a7d2b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str, nullable: bool = True) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=nullable)


def _user_fk(name: str, ondelete: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        sa.Integer(),
        sa.ForeignKey("user_account.id", ondelete=ondelete),
        nullable=nullable,
    )


def _post_fk() -> sa.Column:
    return sa.Column(
        "post_id",
        sa.Integer(),
        sa.ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    """Create every table of the publishing platform."""
    op.create_table(
        "user_account",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("password_hash", sa.Text(), nullable=True),
        sa.Column("wallet_address", sa.Text(), nullable=True),
        sa.Column("membership_tier", sa.Text(), nullable=False, server_default="FREE"),
        sa.Column("status", sa.Text(), nullable=False, server_default="ACTIVE"),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("beta_tester_number", sa.Integer(), nullable=True),
        sa.Column("welcome_email_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        _timestamp("welcome_email_sent_at"),
        _timestamp("created_at"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("beta_tester_number"),
    )

    op.create_table(
        "email_verification_token",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _user_fk("user_id", "CASCADE"),
        sa.Column("token", sa.Text(), nullable=False),
        _timestamp("expires_at", nullable=False),
        _timestamp("created_at"),
        sa.UniqueConstraint("token"),
    )
    op.create_index(
        "ix_email_verification_token_user_id", "email_verification_token", ["user_id"]
    )

    op.create_table(
        "user_deletion_log",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("deleted_user_id", sa.Integer(), nullable=False),
        sa.Column("deleted_username", sa.Text(), nullable=False),
        sa.Column("deleted_email", sa.Text(), nullable=True),
        sa.Column("deleted_by_id", sa.Integer(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("bot_score", sa.Integer(), nullable=True),
        _timestamp("created_at"),
    )

    op.create_table(
        "post",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _user_fk("author_id", "CASCADE"),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("slug", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("reading_time", sa.Integer(), nullable=True),
        sa.Column("content_type", sa.Text(), nullable=False, server_default="TEXT"),
        sa.Column("video_key", sa.Text(), nullable=True),
        sa.Column("status", sa.Text(), nullable=False, server_default="PUBLISHED"),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        *(
            sa.Column(name, sa.Integer(), nullable=False, server_default="0")
            for name in (
                "likes",
                "comments",
                "shares",
                "views",
                "total_views",
                "authenticated_views",
                "public_views",
            )
        ),
        sa.Column("average_scroll_depth", sa.Float(), nullable=True),
        sa.Column("average_watch_percentage", sa.Float(), nullable=True),
        sa.Column("total_completions", sa.Integer(), nullable=False, server_default="0"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.UniqueConstraint("author_id", "slug", name="uq_post_author_slug"),
    )
    op.create_index("ix_post_author_id", "post", ["author_id"])

    op.create_table(
        "engagement",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _post_fk(),
        _user_fk("user_id", "CASCADE"),
        sa.Column("kind", sa.Text(), nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("ix_engagement_post_kind", "engagement", ["post_id", "kind"])
    op.create_index("ix_engagement_user_created", "engagement", ["user_id", "created_at"])
    op.create_index(
        "uq_engagement_single",
        "engagement",
        ["post_id", "user_id", "kind"],
        unique=True,
        sqlite_where=sa.text("kind != 'comment'"),
        postgresql_where=sa.text("kind != 'comment'"),
    )

    op.create_table(
        "likes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _post_fk(),
        _user_fk("user_id", "CASCADE"),
        _timestamp("created_at"),
        sa.UniqueConstraint("post_id", "user_id", name="uq_likes_post_user"),
    )

    op.create_table(
        "comment",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _post_fk(),
        _user_fk("user_id", "CASCADE"),
        sa.Column("content", sa.Text(), nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("ix_comment_post_id", "comment", ["post_id"])

    op.create_table(
        "bookmark",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _user_fk("user_id", "CASCADE"),
        _post_fk(),
        _timestamp("created_at"),
        sa.UniqueConstraint("user_id", "post_id", name="uq_bookmark_user_post"),
    )

    op.create_table(
        "view_log",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _post_fk(),
        _user_fk("user_id", "SET NULL", nullable=True),
        sa.Column("is_authenticated", sa.Boolean(), nullable=False, server_default=sa.false()),
        _timestamp("created_at"),
    )
    op.create_index("ix_view_log_post_id", "view_log", ["post_id"])

    op.create_table(
        "post_consumption",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _post_fk(),
        sa.Column("session_id", sa.Text(), nullable=False),
        _user_fk("user_id", "SET NULL", nullable=True),
        sa.Column("scroll_depth", sa.Float(), nullable=True),
        sa.Column("watch_percentage", sa.Float(), nullable=True),
        sa.Column("listen_percentage", sa.Float(), nullable=True),
        sa.Column("time_spent", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("ip_address", sa.Text(), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.UniqueConstraint("post_id", "session_id", name="uq_post_consumption_session"),
    )
    op.create_index("ix_post_consumption_post_id", "post_consumption", ["post_id"])

    op.create_table(
        "image_upload_rate_limit",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _user_fk("user_id", "CASCADE"),
        _timestamp("uploaded_at"),
    )
    op.create_index("ix_image_upload_rate_limit_user_id", "image_upload_rate_limit", ["user_id"])
    op.create_index(
        "ix_image_upload_rate_limit_uploaded_at", "image_upload_rate_limit", ["uploaded_at"]
    )

    op.create_table(
        "message",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _user_fk("from_user_id", "CASCADE"),
        _user_fk("to_user_id", "CASCADE"),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default="PENDING"),
        sa.Column("thread_id", sa.Text(), nullable=True),
        _timestamp("responded_at"),
        _timestamp("created_at"),
    )
    op.create_index("ix_message_from_user_id", "message", ["from_user_id"])
    op.create_index("ix_message_to_user_id", "message", ["to_user_id"])
    op.create_index("ix_message_thread_id", "message", ["thread_id"])

    op.create_table(
        "email_subscriber",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("source", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _timestamp("subscribed_at"),
        _timestamp("unsubscribed_at"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "beta_application",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("content_niche", sa.Text(), nullable=True),
        sa.Column("status", sa.Text(), nullable=False, server_default="PENDING"),
        _user_fk("reviewed_by_id", "SET NULL", nullable=True),
        _timestamp("reviewed_at"),
        sa.Column("review_notes", sa.Text(), nullable=True),
        _user_fk("created_user_id", "SET NULL", nullable=True),
        sa.Column("waitlist_token", sa.Text(), nullable=True),
        _timestamp("waitlisted_at"),
        _timestamp("created_at"),
        sa.UniqueConstraint("waitlist_token"),
    )
    op.create_index("ix_beta_application_email", "beta_application", ["email"])


def downgrade() -> None:
    """Drop every table in reverse dependency order."""
    for table in (
        "beta_application",
        "email_subscriber",
        "message",
        "image_upload_rate_limit",
        "post_consumption",
        "view_log",
        "bookmark",
        "comment",
        "likes",
        "engagement",
        "post",
        "user_deletion_log",
        "email_verification_token",
        "user_account",
    ):
        op.drop_table(table)
