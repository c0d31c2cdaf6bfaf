"""HistoryService — inspect and edit the former paths of a page."""

from __future__ import annotations

from typing import Any

from pagetrail.domain.errors import PageNotFoundError
from pagetrail.domain.models import HistoryRecord, Node
from pagetrail.domain.paths import ROOT_PATH, join_path, normalize_path, split_segments
from pagetrail.services._helpers import record_payload
from pagetrail.services.base import BaseService
from pagetrail.services.result import ServiceResult


class HistoryService(BaseService):
    """List, add, and forget historical paths."""

    def list(
        self,
        page_id: int,
        *,
        language_id: int | None = None,
        verbose: bool = False,
        virtual: bool = False,
    ) -> ServiceResult:
        """Former paths of a page, oldest first.

        With *virtual* the paths the page inherited from renamed or moved
        ancestors are included too, flagged ``virtual``.
        """
        op = "list_history"
        site = self._site
        page = site.tree.get(page_id)
        if page is None:
            return self._failure(op, "NOT_FOUND", PageNotFoundError(page_id))

        entries: list[tuple[HistoryRecord, dict[str, Any]]] = []
        for record in site.history.list_paths(page.id, language_id):
            payload = record_payload(record, verbose=verbose)
            if virtual:
                payload["virtual"] = False
            entries.append((record, payload))
        if virtual:
            entries.extend(self._virtual_entries(page, language_id, verbose=verbose))
            entries.sort(key=lambda entry: entry[0].created)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": page.id,
                "path": site.tree.live_path(page),
                "paths": [payload for _, payload in entries],
                "count": len(entries),
            },
        )

    def add(self, page_id: int, path: str, *, language_id: int = 0) -> ServiceResult:
        """Record *path* as a former path of a page."""
        op = "add_history"
        site = self._site
        page = site.tree.get(page_id)
        if page is None:
            return self._failure(op, "NOT_FOUND", PageNotFoundError(page_id))

        normalized = normalize_path(path)
        if normalized == ROOT_PATH:
            return self._failure(op, "INVALID_PATH", "The root path cannot be recorded")
        if normalized == site.tree.live_path(page, language_id):
            return self._failure(op, "INVALID_PATH", f"{normalized} is the page's live path")

        added = site.history.add(page.id, normalized, language_id)
        warnings: list[str] = []
        if not added:
            existing = site.history.lookup(normalized)
            owner = existing.node_id if existing is not None else None
            warnings.append(f"{normalized} is already recorded for page {owner}")

        return ServiceResult(
            ok=True,
            op=op,
            data={"id": page.id, "path": normalized, "added": added},
            warnings=warnings,
        )

    def forget(self, path: str) -> ServiceResult:
        """Delete the record for exactly *path*."""
        op = "forget_history"
        normalized = normalize_path(path)
        removed = self._site.history.forget(normalized)
        if not removed:
            return self._failure(op, "NOT_FOUND", f"No history recorded for {normalized}")
        return ServiceResult(ok=True, op=op, data={"path": normalized, "removed": removed})

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _virtual_entries(
        self,
        page: Node,
        language_id: int | None,
        *,
        verbose: bool,
    ) -> list[tuple[HistoryRecord, dict[str, Any]]]:
        """Paths derived from ancestor history plus the page's relative path."""
        tree = self._site.tree
        entries: list[tuple[HistoryRecord, dict[str, Any]]] = []
        for ancestor in tree.ancestors(page):
            if ancestor.parent_id is None:
                continue
            for record in self._site.history.list_paths(ancestor.id, language_id):
                page_segments = split_segments(tree.live_path(page, record.language_id))
                depth = len(split_segments(tree.live_path(ancestor, record.language_id)))
                derived = join_path(record.path, *page_segments[depth:])
                shifted = record.model_copy(update={"path": derived})
                payload = record_payload(shifted, verbose=verbose)
                payload["virtual"] = True
                if verbose:
                    payload["ancestor_id"] = ancestor.id
                entries.append((record, payload))
        return entries
