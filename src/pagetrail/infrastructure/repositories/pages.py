"""Content-tree storage: pages, their per-language names, and live paths.

Each read and write is its own short transaction. Name uniqueness is
enforced by the storage layer (``uq_pages_parent_name`` and
``uq_page_names_parent_name``); a losing writer gets a
:class:`DuplicateNameError` it can retry with an incremented name.

After an insert, rename, move or permanent delete the tree announces the change
through the plugin hook relay so path history can be recorded.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, insert, or_, select, update
from sqlalchemy.exc import IntegrityError

from pagetrail.domain.errors import DuplicateNameError, PageNotFoundError
from pagetrail.domain.models import ROOT_ID, Node
from pagetrail.domain.paths import ROOT_PATH, decode_segment, normalize_path, split_segments
from pagetrail.domain.types import PageStatus
from pagetrail.infrastructure.database.schema import page_names, pages

if TYPE_CHECKING:
    import pluggy
    from sqlalchemy import Connection, RowMapping
    from sqlalchemy.engine import Engine

    from pagetrail.domain.languages import LanguageProvider

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _stamp(moment: datetime) -> str:
    return moment.isoformat(timespec="microseconds")


class PageTree:
    """SQLite-backed tree storage.

    Parameters:
        engine: SQLAlchemy engine with the ``pages`` tables.
        languages: Optional language capability for per-language names.
        hook: Plugin hook relay receiving change notifications.
        clock: Source of "now" for created/modified stamps.
    """

    def __init__(
        self,
        engine: Engine,
        *,
        languages: LanguageProvider | None = None,
        hook: pluggy.HookRelay | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._engine = engine
        self._languages = languages
        self._hook = hook
        self._clock = clock

    def bind_hooks(self, hook: pluggy.HookRelay) -> None:
        self._hook = hook

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, page_id: int) -> Node | None:
        """Fetch one page by id."""
        with self._engine.connect() as conn:
            row = conn.execute(select(pages).where(pages.c.id == page_id)).mappings().first()
            if row is None:
                return None
            return self._to_node(conn, row)

    def require(self, page_id: int) -> Node:
        node = self.get(page_id)
        if node is None:
            raise PageNotFoundError(page_id)
        return node

    def children(self, page_id: int) -> list[Node]:
        stmt = select(pages).where(pages.c.parent_id == page_id).order_by(pages.c.id)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
            return [self._to_node(conn, row) for row in rows]

    def ancestors(self, node: Node) -> list[Node]:
        """Ancestors of *node*, nearest first, ending with the root."""
        chain: list[Node] = []
        seen = {node.id}
        parent_id = node.parent_id
        while parent_id is not None and parent_id not in seen:
            parent = self.get(parent_id)
            if parent is None:
                break
            chain.append(parent)
            seen.add(parent.id)
            parent_id = parent.parent_id
        return chain

    def is_in_trash(self, node: Node) -> bool:
        """A page is in the trash when it or any ancestor carries the trash status."""
        return node.in_trash or any(a.in_trash for a in self.ancestors(node))

    def live_path(self, node: Node | int, language_id: int = 0) -> str:
        """Current canonical path of *node* in *language_id*."""
        if isinstance(node, int):
            node = self.require(node)
        if node.parent_id is None:
            return ROOT_PATH
        segments = [node.name_for(language_id)]
        segments.extend(a.name_for(language_id) for a in self.ancestors(node) if a.parent_id)
        return normalize_path("/".join(reversed(segments)))

    def find_by_live_path(
        self,
        path: str,
        language_id: int | None = None,
    ) -> tuple[Node, int] | None:
        """Find the page currently living at *path*. History is never consulted.

        Without *language_id* the default names are tried first, then
        every other language. Returns ``(node, language_id)`` for the
        language whose names matched.
        """
        segments = [decode_segment(s) for s in split_segments(normalize_path(path))]
        if language_id is not None:
            candidates = [language_id]
        else:
            candidates = [0]
            if self._languages is not None:
                candidates.extend(lang.id for lang in self._languages.non_default())

        with self._engine.connect() as conn:
            for candidate in candidates:
                page_id = self._walk(conn, segments, candidate)
                if page_id is not None:
                    row = conn.execute(select(pages).where(pages.c.id == page_id)).mappings().one()
                    return self._to_node(conn, row), candidate
        return None

    def count_named(
        self,
        name: str,
        *,
        parent_id: int | None = None,
        exclude_id: int | None = None,
        language_ids: list[int] | None = None,
    ) -> int:
        """Count pages using *name*.

        *language_ids* selects which name columns are checked (0 is the
        default ``name``), combined with OR. ``None`` checks the default
        name only.
        """
        conditions = []
        for language_id in language_ids or [0]:
            if language_id == 0:
                conditions.append(pages.c.name == name)
            else:
                conditions.append(
                    pages.c.id.in_(
                        select(page_names.c.page_id).where(
                            page_names.c.language_id == language_id,
                            page_names.c.name == name,
                        )
                    )
                )

        stmt = select(func.count()).select_from(pages).where(or_(*conditions))
        if parent_id:
            stmt = stmt.where(pages.c.parent_id == parent_id)
        if exclude_id:
            stmt = stmt.where(pages.c.id != exclude_id)

        with self._engine.connect() as conn:
            return int(conn.execute(stmt).scalar_one() or 0)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, node: Node) -> Node:
        """Store a new page and announce it.

        Raises :class:`DuplicateNameError` on a name clash.
        """
        if node.parent_id is None:
            msg = "Only the root page may have no parent"
            raise ValueError(msg)
        self.require(node.parent_id)

        now = self._clock()
        created = _stamp(node.created or now)
        try:
            with self._engine.begin() as conn:
                result = conn.execute(
                    insert(pages).values(
                        parent_id=node.parent_id,
                        name=node.name,
                        title=node.title,
                        status=node.status.value,
                        child_name_format=node.child_name_format,
                        fields=json.dumps(node.fields, default=str),
                        titles=json.dumps({str(k): v for k, v in node.titles.items()}),
                        created=created,
                        modified=_stamp(node.modified or now),
                    )
                )
                page_id = int(result.inserted_primary_key[0])
                for language_id, name in node.names.items():
                    conn.execute(
                        insert(page_names).values(
                            page_id=page_id,
                            language_id=language_id,
                            parent_id=node.parent_id,
                            name=name,
                        )
                    )
        except IntegrityError:
            conflict = self._find_conflict(node.parent_id, {0: node.name, **node.names}, None)
            if conflict is None:
                raise
            raise conflict from None

        added = self.require(page_id)
        if self._hook is not None:
            self._hook.page_added(page=added)
        return added

    def rename(self, page_id: int, name: str, language_id: int = 0) -> Node:
        """Give a page a new name in *language_id* and announce it."""
        page = self.require(page_id)
        old_name = page.name_for(language_id)
        if language_id == 0 and page.name == name:
            return page
        if language_id and page.names.get(language_id) == name:
            return page

        try:
            with self._engine.begin() as conn:
                if language_id == 0:
                    conn.execute(
                        update(pages)
                        .where(pages.c.id == page_id)
                        .values(name=name, modified=_stamp(self._clock()))
                    )
                else:
                    conn.execute(
                        delete(page_names).where(
                            page_names.c.page_id == page_id,
                            page_names.c.language_id == language_id,
                        )
                    )
                    conn.execute(
                        insert(page_names).values(
                            page_id=page_id,
                            language_id=language_id,
                            parent_id=page.parent_id,
                            name=name,
                        )
                    )
        except IntegrityError:
            conflict = self._find_conflict(page.parent_id, {language_id: name}, page_id)
            if conflict is None:
                raise
            raise conflict from None

        renamed = self.require(page_id)
        if self._hook is not None:
            self._hook.page_renamed(page=renamed, old_name=old_name, language_id=language_id)
        return renamed

    def move(self, page_id: int, parent_id: int) -> Node:
        """Move a page under a new parent and announce it."""
        page = self.require(page_id)
        if page.parent_id is None:
            msg = "The root page cannot be moved"
            raise ValueError(msg)
        if page.parent_id == parent_id:
            return page

        parent = self.require(parent_id)
        if parent.id == page_id or any(a.id == page_id for a in self.ancestors(parent)):
            msg = f"Cannot move page {page_id} below itself"
            raise ValueError(msg)

        old_parent_id = page.parent_id
        try:
            with self._engine.begin() as conn:
                conn.execute(
                    update(pages)
                    .where(pages.c.id == page_id)
                    .values(parent_id=parent_id, modified=_stamp(self._clock()))
                )
                conn.execute(
                    update(page_names)
                    .where(page_names.c.page_id == page_id)
                    .values(parent_id=parent_id)
                )
        except IntegrityError:
            conflict = self._find_conflict(parent_id, {0: page.name, **page.names}, page_id)
            if conflict is None:
                raise
            raise conflict from None

        moved = self.require(page_id)
        if self._hook is not None:
            self._hook.page_moved(page=moved, old_parent_id=old_parent_id)
        return moved

    def set_status(self, page_id: int, status: PageStatus) -> Node:
        """Trash or restore a page. Not a move: no path changes."""
        if page_id == ROOT_ID:
            msg = "The root page cannot be trashed"
            raise ValueError(msg)
        self.require(page_id)
        with self._engine.begin() as conn:
            conn.execute(
                update(pages)
                .where(pages.c.id == page_id)
                .values(status=status.value, modified=_stamp(self._clock()))
            )
        return self.require(page_id)

    def delete(self, page_id: int) -> Node:
        """Permanently delete a leaf page and announce it."""
        page = self.require(page_id)
        if page.parent_id is None:
            msg = "The root page cannot be deleted"
            raise ValueError(msg)
        if self.children(page_id):
            msg = f"Page {page_id} has children; delete or move them first"
            raise ValueError(msg)

        with self._engine.begin() as conn:
            conn.execute(delete(page_names).where(page_names.c.page_id == page_id))
            conn.execute(delete(pages).where(pages.c.id == page_id))

        if self._hook is not None:
            self._hook.page_deleted(page=page)
        return page

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _walk(self, conn: Connection, segments: list[str], language_id: int) -> int | None:
        current = ROOT_ID
        for segment in segments:
            found = self._child_named(conn, current, segment, language_id)
            if found is None:
                return None
            current = found
        return current

    def _child_named(
        self,
        conn: Connection,
        parent_id: int,
        name: str,
        language_id: int,
    ) -> int | None:
        if language_id:
            row = conn.execute(
                select(page_names.c.page_id).where(
                    page_names.c.parent_id == parent_id,
                    page_names.c.language_id == language_id,
                    page_names.c.name == name,
                )
            ).first()
            if row is not None:
                return int(row.page_id)
            # Pages without a name in this language fall back to the default name.
            localized = select(page_names.c.page_id).where(
                page_names.c.language_id == language_id
            )
            row = conn.execute(
                select(pages.c.id).where(
                    pages.c.parent_id == parent_id,
                    pages.c.name == name,
                    pages.c.id.not_in(localized),
                )
            ).first()
        else:
            row = conn.execute(
                select(pages.c.id).where(pages.c.parent_id == parent_id, pages.c.name == name)
            ).first()
        return None if row is None else int(row.id)

    def _find_conflict(
        self,
        parent_id: int | None,
        names: dict[int, str],
        exclude_id: int | None,
    ) -> DuplicateNameError | None:
        """Confirm which name collided after an IntegrityError."""
        for language_id, name in names.items():
            taken = self.count_named(
                name,
                parent_id=parent_id,
                exclude_id=exclude_id,
                language_ids=[language_id],
            )
            if taken:
                logger.debug(
                    "Name %r taken under parent %s (language %s)", name, parent_id, language_id
                )
                return DuplicateNameError(name, parent_id, language_id)
        return None

    def _to_node(self, conn: Connection, row: RowMapping) -> Node:
        name_rows = conn.execute(
            select(page_names.c.language_id, page_names.c.name).where(
                page_names.c.page_id == row["id"]
            )
        ).fetchall()
        fields: dict[str, Any] = json.loads(row["fields"]) if row["fields"] else {}
        titles: dict[str, str] = json.loads(row["titles"]) if row["titles"] else {}
        return Node(
            id=row["id"],
            parent_id=row["parent_id"],
            name=row["name"],
            title=row["title"] or "",
            status=PageStatus(row["status"]),
            child_name_format=row["child_name_format"],
            fields=fields,
            names={int(r.language_id): str(r.name) for r in name_rows},
            titles={int(k): v for k, v in titles.items()},
            created=datetime.fromisoformat(row["created"]),
            modified=datetime.fromisoformat(row["modified"]),
        )
