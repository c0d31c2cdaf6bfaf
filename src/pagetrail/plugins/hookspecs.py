"""Pluggy hook specifications for content-tree change notifications.

The tree storage calls the change hooks synchronously after an insert,
rename, move or permanent delete has been committed. ``page_not_found`` is the
request router's trigger for an unknown path; the first plugin that
returns a resolution wins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from pagetrail.domain.models import Node, Resolution

hookspec = pluggy.HookspecMarker("pagetrail")


class PagetrailHookSpec:
    """Hook specifications for the pagetrail plugin system."""

    @hookspec
    def page_added(self, page: Node) -> None:
        """Called after *page* was stored under its parent."""

    @hookspec
    def page_renamed(self, page: Node, old_name: str, language_id: int) -> None:
        """Called after *page* got a new name in *language_id* (0 = default)."""

    @hookspec
    def page_moved(self, page: Node, old_parent_id: int) -> None:
        """Called after *page* moved away from *old_parent_id*."""

    @hookspec
    def page_deleted(self, page: Node) -> None:
        """Called after *page* was permanently deleted."""

    @hookspec(firstresult=True)
    def page_not_found(self, path: str) -> Resolution | None:
        """Return a resolution for an unknown *path*, or None to pass."""
