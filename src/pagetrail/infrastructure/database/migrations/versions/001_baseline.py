"""Baseline schema — pages, per-language names, and language-less path history.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-01
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "pages",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("parent_id", sa.Integer, sa.ForeignKey("pages.id")),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("title", sa.Text, nullable=False, server_default=""),
        sa.Column("status", sa.Text, nullable=False, server_default="active"),
        sa.Column("child_name_format", sa.Text),
        sa.Column("fields", sa.Text),
        sa.Column("titles", sa.Text),
        sa.Column("created", sa.Text, nullable=False),
        sa.Column("modified", sa.Text, nullable=False),
        sa.UniqueConstraint("parent_id", "name", name="uq_pages_parent_name"),
    )
    op.create_index("ix_pages_parent", "pages", ["parent_id"])
    op.create_index("ix_pages_status", "pages", ["status"])

    op.create_table(
        "page_names",
        sa.Column("page_id", sa.Integer, sa.ForeignKey("pages.id"), nullable=False),
        sa.Column("language_id", sa.Integer, nullable=False),
        sa.Column("parent_id", sa.Integer),
        sa.Column("name", sa.Text, nullable=False),
        sa.UniqueConstraint("page_id", "language_id", name="uq_page_names_page_language"),
        sa.UniqueConstraint(
            "parent_id", "language_id", "name", name="uq_page_names_parent_name"
        ),
    )
    op.create_index("ix_page_names_name", "page_names", ["name"])

    op.create_table(
        "page_paths",
        sa.Column("path", sa.Text, primary_key=True),
        sa.Column("pages_id", sa.Integer, nullable=False),
        sa.Column("created", sa.Text, nullable=False),
    )
    op.create_index("ix_page_paths_pages_id", "page_paths", ["pages_id"])
    op.create_index("ix_page_paths_created", "page_paths", ["created"])


def downgrade() -> None:
    op.drop_table("page_paths")
    op.drop_table("page_names")
    op.drop_table("pages")
