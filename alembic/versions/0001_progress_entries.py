"""Create progress_entries table for the local progress cache.

Revision ID: 0001_progress_entries
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_progress_entries"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "progress_entries",
        sa.Column(
            "id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            primary_key=True,
            autoincrement=True,
        ),
        sa.Column("scope", sa.String(length=100), nullable=False),
        sa.Column("key", sa.String(length=50), nullable=False),
        sa.Column("value", sa.String(length=255), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="progress_entries_pkey"),
        sa.UniqueConstraint("scope", "key", name="progress_entries_scope_key_key"),
    )
    op.create_index(
        "ix_progress_entries_scope", "progress_entries", ["scope"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_progress_entries_scope", table_name="progress_entries")
    op.drop_table("progress_entries")
