"""user profile fields

Revision ID: 9a4f0c3e6d17
Revises: 5c1e9a7d2b40
Create Date: 2026-10-19 16:03:27.104981

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "9a4f0c3e6d17"
down_revision: Union[str, Sequence[str], None] = "5c1e9a7d2b40"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add the self-service profile columns to user accounts."""
    with op.batch_alter_table("user_account") as batch_op:
        batch_op.add_column(sa.Column("legal_name", sa.Text(), nullable=True))
        batch_op.add_column(sa.Column("bio", sa.Text(), nullable=True))
        batch_op.add_column(sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True))


def downgrade() -> None:
    """Drop the profile columns."""
    with op.batch_alter_table("user_account") as batch_op:
        batch_op.drop_column("updated_at")
        batch_op.drop_column("bio")
        batch_op.drop_column("legal_name")
