"""PathHistoryTracker — record former paths when pages change.

Called from the tree's change notifications (via the built-in path
history plugin). Only the changed page gets records: descendants of a
renamed or moved page are found later by the resolver's segment peeling.

No history is written for pages in the trash, for pages younger than
``minimum_age`` seconds, or when the path did not actually change. Any
record for a page's new live path is dropped on every add, rename and
move, so a reused path never redirects to its previous occupant.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pagetrail.domain.paths import join_path

if TYPE_CHECKING:
    from pagetrail.domain.languages import LanguageProvider
    from pagetrail.domain.models import Node
    from pagetrail.infrastructure.repositories.pages import PageTree
    from pagetrail.infrastructure.repositories.paths import PathHistoryStore

logger = logging.getLogger(__name__)

DEFAULT_MINIMUM_AGE = 120


def _utcnow() -> datetime:
    return datetime.now(UTC)


class PathHistoryTracker:
    """Translate rename/move/delete notifications into history records.

    Parameters:
        tree: Tree storage for live paths and trash checks.
        store: Where former paths are recorded.
        languages: Optional language capability; non-default languages get
            language-tagged records where their paths differ.
        minimum_age: Pages younger than this many seconds are not tracked.
        enabled: When False no new records are written; purges still run.
        clock: Source of "now" for the age check.
    """

    def __init__(
        self,
        tree: PageTree,
        store: PathHistoryStore,
        *,
        languages: LanguageProvider | None = None,
        minimum_age: int = DEFAULT_MINIMUM_AGE,
        enabled: bool = True,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._tree = tree
        self._store = store
        self._languages = languages
        self._minimum_age = minimum_age
        self._enabled = enabled
        self._clock = clock

    def on_renamed(self, page: Node, old_name: str, language_id: int = 0) -> list[str]:
        """Record the path *page* had before it was renamed in *language_id*."""
        if language_id:
            names = dict(page.names)
            if old_name and old_name != page.name:
                names[language_id] = old_name
            else:
                names.pop(language_id, None)
            previous = page.model_copy(update={"names": names})
        else:
            previous = page.model_copy(update={"name": old_name})
        return self._record(page, previous)

    def on_moved(self, page: Node, old_parent_id: int) -> list[str]:
        """Record the path *page* had under its former parent."""
        previous = page.model_copy(update={"parent_id": old_parent_id})
        return self._record(page, previous)

    def on_added(self, page: Node) -> int:
        """Drop records for the paths a new page now lives at."""
        return self._claim_live_paths(page)

    def on_deleted(self, page: Node) -> int:
        """Drop every former path of a permanently deleted page."""
        return self._store.purge(page.id)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _record(self, page: Node, previous: Node) -> list[str]:
        """Write one record per language whose path changed. Returns the paths."""
        self._claim_live_paths(page)
        if not self._trackable(page):
            return []

        recorded: list[str] = []
        old_default = self._path_of(previous, 0)
        new_default = self._tree.live_path(page, 0)
        if old_default != new_default and self._store.record_old_path(page.id, old_default, 0):
            recorded.append(old_default)

        if self._languages is not None:
            for language in self._languages.non_default():
                old_path = self._path_of(previous, language.id)
                new_path = self._tree.live_path(page, language.id)
                if old_path in (old_default, new_path):
                    continue
                if self._store.record_old_path(page.id, old_path, language.id):
                    recorded.append(old_path)

        if recorded:
            logger.debug("Recorded former paths of page %d: %s", page.id, recorded)
        return recorded

    def _claim_live_paths(self, page: Node) -> int:
        """Forget records for every live path of *page*, trackable or not."""
        paths = {self._tree.live_path(page, 0)}
        if self._languages is not None:
            paths.update(
                self._tree.live_path(page, language.id)
                for language in self._languages.non_default()
            )
        removed = sum(self._store.forget(path) for path in paths)
        if removed:
            logger.debug("Page %d took over %d recorded paths", page.id, removed)
        return removed

    def _path_of(self, node: Node, language_id: int) -> str:
        """Path of *node* as described by its (possibly former) parent and name."""
        if node.parent_id is None:
            return "/"
        parent_path = self._tree.live_path(node.parent_id, language_id)
        return join_path(parent_path, node.name_for(language_id))

    def _trackable(self, page: Node) -> bool:
        if not self._enabled:
            return False
        if self._tree.is_in_trash(page):
            logger.debug("Page %d is in the trash; not recording history", page.id)
            return False
        if page.created is None:
            return True
        created = page.created
        if created.tzinfo is None:
            created = created.replace(tzinfo=UTC)
        age = (self._clock() - created).total_seconds()
        if age < self._minimum_age:
            logger.debug("Page %d is %.0fs old; not recording history", page.id, age)
            return False
        return True
