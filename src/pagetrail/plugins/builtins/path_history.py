"""Built-in plugin connecting tree change notifications to path history.

New pages claim their paths, renames and moves record the page's former
paths, permanent deletes purge them, and unknown paths are handed to the
resolver.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from pagetrail.domain.models import Node, Resolution
    from pagetrail.services.resolver import PathResolver
    from pagetrail.services.tracking import PathHistoryTracker

hookimpl = pluggy.HookimplMarker("pagetrail")


class PathHistoryPlugin:
    """Records page paths on change and resolves stale ones."""

    def __init__(self, tracker: PathHistoryTracker, resolver: PathResolver) -> None:
        self._tracker = tracker
        self._resolver = resolver

    @hookimpl
    def page_added(self, page: Node) -> None:
        self._tracker.on_added(page)

    @hookimpl
    def page_renamed(self, page: Node, old_name: str, language_id: int) -> None:
        self._tracker.on_renamed(page, old_name, language_id)

    @hookimpl
    def page_moved(self, page: Node, old_parent_id: int) -> None:
        self._tracker.on_moved(page, old_parent_id)

    @hookimpl
    def page_deleted(self, page: Node) -> None:
        self._tracker.on_deleted(page)

    @hookimpl
    def page_not_found(self, path: str) -> Resolution | None:
        return self._resolver.resolve(path)
