"""PathHistoryStore — former paths of pages, keyed by exact path string.

``page_paths.path`` is the primary key, so a given path maps to at most
one page. Records are never updated: a path is inserted once (first
writer wins) and removed when it becomes some page's live address again,
when it is forgotten explicitly, or when its page is purged.

A database created before per-language history lacks
``page_paths.language_id``. The first query that trips over it upgrades
the schema in place and is answered as "no match".
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, insert, literal_column, select
from sqlalchemy.exc import IntegrityError, OperationalError

from pagetrail.domain.errors import SchemaMismatchError
from pagetrail.domain.models import HistoryRecord
from pagetrail.domain.paths import ROOT_PATH, normalize_path
from pagetrail.infrastructure.database.schema import page_paths

if TYPE_CHECKING:
    from sqlalchemy import Row
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

_MISMATCH_MARKERS = ("no such column", "no such table", "has no column named")


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _default_upgrade(engine: Engine) -> None:
    from pagetrail.infrastructure.database.migrations import upgrade_head

    upgrade_head(engine.url.render_as_string(hide_password=False))


class PathHistoryStore:
    """Append-only store of historical page paths.

    Parameters:
        engine: SQLAlchemy engine holding the ``page_paths`` table.
        clock: Source of the ``created`` stamp for new records.
        upgrade: Called once when a schema mismatch is detected. Defaults
            to an alembic upgrade to head.
    """

    def __init__(
        self,
        engine: Engine,
        *,
        clock: Callable[[], datetime] = _utcnow,
        upgrade: Callable[[Engine], None] = _default_upgrade,
    ) -> None:
        self._engine = engine
        self._clock = clock
        self._upgrade = upgrade

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def record_old_path(
        self,
        node_id: int,
        path: str,
        language_id: int = 0,
        *,
        current_path: str | None = None,
    ) -> bool:
        """Remember that *node_id* used to live at *path*.

        A path that is already recorded (for any page) is left alone.
        Afterwards the record for *current_path*, the page's live
        address, is dropped so it cannot shadow a later rename back to it.

        Returns True when a new record was written.
        """
        path = normalize_path(path)
        if path == ROOT_PATH:
            return False

        recorded = False
        with self._schema_guard():
            try:
                with self._engine.begin() as conn:
                    conn.execute(
                        insert(page_paths).values(
                            path=path,
                            pages_id=node_id,
                            language_id=language_id or 0,
                            created=self._clock().isoformat(timespec="microseconds"),
                        )
                    )
                recorded = True
            except IntegrityError:
                if self.lookup(path) is None:
                    raise
                logger.debug("Path %s already recorded; keeping the existing record", path)

        if current_path is not None:
            self.forget(current_path)
        return recorded

    def add(self, node_id: int, path: str, language_id: int = 0) -> bool:
        """Manually add a historical path. Same semantics as :meth:`record_old_path`."""
        return self.record_old_path(node_id, path, language_id)

    def forget(self, path: str) -> int:
        """Delete the record for exactly *path*. Returns the number removed."""
        stmt = delete(page_paths).where(page_paths.c.path == normalize_path(path))
        with self._schema_guard():
            with self._engine.begin() as conn:
                return conn.execute(stmt).rowcount
        return 0

    def purge(self, node_id: int) -> int:
        """Delete every record owned by *node_id*."""
        stmt = delete(page_paths).where(page_paths.c.pages_id == node_id)
        with self._schema_guard():
            with self._engine.begin() as conn:
                removed = conn.execute(stmt).rowcount
            if removed:
                logger.debug("Purged %d historical paths of page %d", removed, node_id)
            return removed
        return 0

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def lookup(self, path: str) -> HistoryRecord | None:
        """Return the record for exactly *path*, or None."""
        stmt = select(page_paths).where(page_paths.c.path == normalize_path(path))
        with self._schema_guard():
            with self._engine.connect() as conn:
                row = conn.execute(stmt).first()
            return None if row is None else _to_record(row)
        return None

    def list_paths(self, node_id: int, language_id: int | None = None) -> list[HistoryRecord]:
        """Historical paths of *node_id*, oldest first.

        With *language_id* only records tagged with that language are
        returned (0 selects default-language records).
        """
        stmt = (
            select(page_paths)
            .where(page_paths.c.pages_id == node_id)
            .order_by(page_paths.c.created, literal_column("rowid"))
        )
        if language_id is not None:
            stmt = stmt.where(page_paths.c.language_id == language_id)
        with self._schema_guard():
            with self._engine.connect() as conn:
                rows = conn.execute(stmt).fetchall()
            return [_to_record(row) for row in rows]
        return []

    def count(self) -> int:
        with self._schema_guard():
            with self._engine.connect() as conn:
                return int(conn.execute(select(func.count()).select_from(page_paths)).scalar_one())
        return 0

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @contextmanager
    def _schema_guard(self) -> Iterator[None]:
        """Upgrade the schema when a query hits a missing column or table.

        The failing statement is abandoned: the ``with`` body stops and
        the caller falls through to its "no match" return.
        """
        try:
            yield
        except OperationalError as exc:
            message = str(exc.orig).lower()
            if not any(marker in message for marker in _MISMATCH_MARKERS):
                raise
            mismatch = SchemaMismatchError(str(exc.orig))
            logger.warning("Path history schema is out of date (%s); upgrading", mismatch)
            self._upgrade(self._engine)


def _to_record(row: Row) -> HistoryRecord:
    return HistoryRecord(
        path=row.path,
        node_id=row.pages_id,
        language_id=row.language_id or 0,
        created=datetime.fromisoformat(row.created),
    )
