"""PathResolver — find the page that now answers for a stale path.

The full path is looked up in path history first. On a miss the last
segment is peeled off and the shorter path is tried, up to
``max_segments`` lookups. A hit on a peeled path is an ancestor: its
live path plus the peeled segments is checked against the live tree,
and if nothing lives there the reconstructed path is resolved again,
one level deeper, to follow chains of ancestor renames.

Example::

    /blog was renamed to /news; /blog/old-post is requested.
    lookup(/blog/old-post) -> miss
    lookup(/blog)          -> page 2, live path /news
    live(/news/old-post)   -> page 5            => Found(page 5, peeled=1)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pagetrail.domain.models import DepthExceeded, Found, NotFound, Resolution
from pagetrail.domain.paths import ROOT_PATH, join_path, normalize_path, peel, segment_count

if TYPE_CHECKING:
    from pagetrail.domain.models import HistoryRecord
    from pagetrail.infrastructure.repositories.pages import PageTree
    from pagetrail.infrastructure.repositories.paths import PathHistoryStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_SEGMENTS = 10


class PathResolver:
    """Resolve historical paths against path history and the live tree."""

    def __init__(
        self,
        tree: PageTree,
        store: PathHistoryStore,
        *,
        max_segments: int = DEFAULT_MAX_SEGMENTS,
    ) -> None:
        self._tree = tree
        self._store = store
        self._max_segments = max(1, max_segments)

    def resolve(self, path: str, depth: int = 0) -> Resolution:
        """Resolve *path* to the page that currently corresponds to it.

        *depth* counts the reconstruction rounds already spent; a chain
        longer than ``max_segments`` yields :class:`DepthExceeded`.
        """
        path = normalize_path(path)
        if path == ROOT_PATH:
            return NotFound(path=path)

        record, removed = self._longest_recorded_prefix(path)
        if record is None:
            return NotFound(path=path)

        node = self._tree.get(record.node_id)
        if node is None or self._tree.is_in_trash(node):
            return NotFound(path=path)

        if not removed:
            return Found(node=node, language_id=record.language_id, peeled=0, depth=depth)

        # The match is an ancestor; rebuild the descendant's path under
        # the ancestor's current location.
        base = self._tree.live_path(node, record.language_id)
        reconstructed = join_path(base, *removed)
        if reconstructed == path:
            return NotFound(path=path)

        live = self._tree.find_by_live_path(reconstructed, record.language_id)
        if live is not None:
            target, language_id = live
            if self._tree.is_in_trash(target):
                return NotFound(path=path)
            return Found(
                node=target,
                language_id=record.language_id or language_id,
                peeled=len(removed),
                depth=depth,
            )

        if depth + 1 >= self._max_segments:
            logger.warning("Giving up on %s after %d reconstruction rounds", path, depth + 1)
            return DepthExceeded(path=path, depth=depth + 1)

        logger.debug("No live page at %s; resolving it as a historical path", reconstructed)
        result = self.resolve(reconstructed, depth + 1)
        if isinstance(result, Found) and record.language_id and not result.language_id:
            return result.model_copy(update={"language_id": record.language_id})
        return result

    def _longest_recorded_prefix(self, path: str) -> tuple[HistoryRecord | None, list[str]]:
        """Peel trailing segments until a recorded path matches.

        Returns the matching record (or None) and the peeled segments in
        path order.
        """
        removed: list[str] = []
        remaining = path
        for _ in range(self._max_segments):
            record = self._store.lookup(remaining)
            if record is not None:
                return record, removed
            if segment_count(remaining) <= 1:
                break
            remaining, last = peel(remaining)
            removed.insert(0, last)
        return None, removed
