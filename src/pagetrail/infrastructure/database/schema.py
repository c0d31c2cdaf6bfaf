"""SQLAlchemy Core table definitions for the pagetrail database.

``pages`` and ``page_names`` back the content tree; ``page_paths`` is
the path-history table owned by :class:`PathHistoryStore`.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

pages = Table(
    "pages",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("parent_id", Integer, ForeignKey("pages.id")),
    Column("name", Text, nullable=False),
    Column("title", Text, nullable=False, default="", server_default=""),
    Column("status", Text, nullable=False, default="active", server_default="active"),
    Column("child_name_format", Text),
    Column("fields", Text),  # JSON object
    Column("titles", Text),  # JSON object: language id -> title
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
    UniqueConstraint("parent_id", "name", name="uq_pages_parent_name"),
)

# Per-language names. parent_id is denormalized from pages so the
# uniqueness constraint can be enforced by the storage layer.
page_names = Table(
    "page_names",
    metadata,
    Column("page_id", Integer, ForeignKey("pages.id"), nullable=False),
    Column("language_id", Integer, nullable=False),
    Column("parent_id", Integer),
    Column("name", Text, nullable=False),
    UniqueConstraint("page_id", "language_id", name="uq_page_names_page_language"),
    UniqueConstraint("parent_id", "language_id", "name", name="uq_page_names_parent_name"),
)

page_paths = Table(
    "page_paths",
    metadata,
    Column("path", Text, primary_key=True),
    Column("pages_id", Integer, nullable=False),
    Column("language_id", Integer, nullable=False, default=0, server_default="0"),
    Column("created", Text, nullable=False),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_pages_parent", pages.c.parent_id)
Index("ix_pages_status", pages.c.status)
Index("ix_page_names_name", page_names.c.name)
Index("ix_page_paths_pages_id", page_paths.c.pages_id)
Index("ix_page_paths_created", page_paths.c.created)
