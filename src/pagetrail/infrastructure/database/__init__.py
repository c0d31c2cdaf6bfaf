"""SQLite database engine, schema, and migrations via SQLAlchemy Core."""

from pagetrail.infrastructure.database.engine import create_db_engine, db_path_for, init_database
from pagetrail.infrastructure.database.schema import metadata, page_names, page_paths, pages

__all__ = [
    "create_db_engine",
    "db_path_for",
    "init_database",
    "metadata",
    "page_names",
    "page_paths",
    "pages",
]
