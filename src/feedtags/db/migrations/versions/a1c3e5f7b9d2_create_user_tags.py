"""create_user_tags

Revision ID: a1c3e5f7b9d2
Revises:
Create Date: 2026-09-28 10:15:00.000000

Creates the user tag tables:
1. user_tags - per-user labels, unique on (user_id, lower(title))
2. entry_user_tags - entry <-> tag associations, cascading from both sides

The users and entries tables belong to the feed reader and are created
here only when missing, so the tag engine can run standalone.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "a1c3e5f7b9d2"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create user tag tables, constraints and indexes."""
    inspector = sa.inspect(op.get_bind())
    existing = set(inspector.get_table_names())

    if "users" not in existing:
        op.create_table(
            "users",
            sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
            sa.Column("username", sa.String(255), nullable=False, unique=True),
            sa.Column(
                "created_at",
                sa.DateTime(timezone=True),
                server_default=sa.func.now(),
            ),
        )

    if "entries" not in existing:
        op.create_table(
            "entries",
            sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
            sa.Column(
                "user_id",
                sa.BigInteger(),
                sa.ForeignKey("users.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("title", sa.Text(), nullable=False),
            sa.Column("url", sa.Text(), nullable=False, server_default=""),
            sa.Column("content", sa.Text(), nullable=True),
            sa.Column(
                "status", sa.String(15), nullable=False, server_default="unread"
            ),
            sa.Column(
                "published_at",
                sa.DateTime(timezone=True),
                server_default=sa.func.now(),
            ),
            sa.Column(
                "created_at",
                sa.DateTime(timezone=True),
                server_default=sa.func.now(),
            ),
        )
        op.create_index("ix_entries_user_id_status", "entries", ["user_id", "status"])

    op.create_table(
        "user_tags",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.BigInteger(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_user_tags_user_id", "user_tags", ["user_id"])
    op.create_index(
        "uq_user_tags_user_id_lower_title",
        "user_tags",
        ["user_id", sa.text("lower(title)")],
        unique=True,
    )

    op.create_table(
        "entry_user_tags",
        sa.Column(
            "entry_id",
            sa.BigInteger(),
            sa.ForeignKey("entries.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "user_tag_id",
            sa.BigInteger(),
            sa.ForeignKey("user_tags.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_index(
        "ix_entry_user_tags_user_tag_id", "entry_user_tags", ["user_tag_id"]
    )


def downgrade() -> None:
    """Drop user tag tables; users and entries are left in place."""
    op.drop_index("ix_entry_user_tags_user_tag_id", table_name="entry_user_tags")
    op.drop_table("entry_user_tags")
    op.drop_index("uq_user_tags_user_id_lower_title", table_name="user_tags")
    op.drop_index("ix_user_tags_user_id", table_name="user_tags")
    op.drop_table("user_tags")
