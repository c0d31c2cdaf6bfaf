"""Database engine setup for SQLite with WAL mode.

SQLite is the persistence layer: WAL mode for concurrent reads and a
unique index per naming scope so a losing concurrent writer fails at
commit time. The DB is stored at {site_root}/.pagetrail/pagetrail.db.

SQLAlchemy Core (not ORM) is used: every existence check and insert is
its own short statement, with no identity map to keep in sync.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event, insert, inspect, select
from sqlalchemy.engine import Engine

from pagetrail.domain.models import ROOT_ID
from pagetrail.infrastructure.database.schema import metadata, pages

DB_DIRNAME = ".pagetrail"
DB_FILENAME = "pagetrail.db"


def db_path_for(site_root: Path) -> Path:
    return site_root / DB_DIRNAME / DB_FILENAME


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(site_root: Path) -> Engine:
    """Initialize the pagetrail database at ``{site_root}/.pagetrail/pagetrail.db``.

    A fresh database gets every table from :data:`schema.metadata` and is
    stamped at the alembic head. An existing database is left alone; it
    is brought up to date by ``pagetrail upgrade`` or lazily when a query
    hits a missing column. The root page is seeded in both cases.

    Idempotent: safe to call on an existing site.

    Returns the engine ready for use.
    """
    db_dir = site_root / DB_DIRNAME
    db_dir.mkdir(parents=True, exist_ok=True)

    db_path = db_dir / DB_FILENAME
    engine = create_db_engine(db_path)

    fresh = "pages" not in inspect(engine).get_table_names()
    if fresh:
        metadata.create_all(engine)
        from pagetrail.infrastructure.database.migrations import stamp_head

        stamp_head(engine.url.render_as_string(hide_password=False))

    _seed_root(engine)
    return engine


def _seed_root(engine: Engine) -> None:
    """Insert the root page (id 1, empty name) if it doesn't exist."""
    with engine.begin() as conn:
        row = conn.execute(select(pages.c.id).where(pages.c.id == ROOT_ID)).first()
        if row is None:
            now = datetime.now(UTC).isoformat(timespec="microseconds")
            conn.execute(
                insert(pages).values(
                    id=ROOT_ID,
                    parent_id=None,
                    name="",
                    title="Home",
                    created=now,
                    modified=now,
                )
            )
