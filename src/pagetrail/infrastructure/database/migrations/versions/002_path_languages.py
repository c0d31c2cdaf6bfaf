"""Tag path-history rows with the language they were recorded in.

Revision ID: 002_path_languages
Revises: 001_baseline
Create Date: 2026-10-12
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "002_path_languages"
down_revision: str | None = "001_baseline"
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    # Existing rows predate languages and belong to the default language.
    op.add_column(
        "page_paths",
        sa.Column("language_id", sa.Integer(), nullable=False, server_default="0"),
    )


def downgrade() -> None:
    with op.batch_alter_table("page_paths") as batch:
        batch.drop_column("language_id")
