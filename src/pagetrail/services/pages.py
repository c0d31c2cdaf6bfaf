"""PageService — create and change pages with generated, unique names.

Pipeline for create: NAME → INSERT (retry on conflict) → RESPOND.

A generated name that loses against the storage uniqueness constraint is
incremented and retried; an explicit name is reported as taken.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pagetrail.domain.errors import (
    DuplicateNameError,
    NameExhaustedError,
    PageNotFoundError,
)
from pagetrail.domain.formats import FORMAT_TITLE
from pagetrail.domain.models import ROOT_ID, NameScope, Node
from pagetrail.domain.types import PageStatus
from pagetrail.services._helpers import page_payload
from pagetrail.services.base import BaseService
from pagetrail.services.result import ServiceResult

logger = logging.getLogger(__name__)


class PageService(BaseService):
    """Page lifecycle: create, rename, move, trash, restore, delete, show."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(
        self,
        title: str = "",
        *,
        parent_id: int = ROOT_ID,
        name: str = "",
        fmt: str = "",
        fields: dict[str, Any] | None = None,
        titles: dict[int, str] | None = None,
        names: dict[int, str] | None = None,
        child_name_format: str | None = None,
        created: datetime | None = None,
    ) -> ServiceResult:
        """Create a page under *parent_id*.

        Without *name* one is generated from *fmt* (or the parent's child
        name format, or the title). Pages with titles in other languages
        also get generated names in those languages.
        """
        op = "create_page"
        site = self._site

        parent = site.tree.get(parent_id)
        if parent is None:
            return self._failure(op, "NOT_FOUND", PageNotFoundError(parent_id))

        explicit_names: dict[int, str] = {}
        for language_id, raw in (names or {}).items():
            if not self._known_language(language_id):
                return self._failure(op, "UNKNOWN_LANGUAGE", f"Unknown language: {language_id}")
            explicit_names[language_id] = site.interpreter.sanitize(raw)

        node = Node(
            parent_id=parent.id,
            title=title.strip(),
            fields=fields or {},
            titles={k: v for k, v in (titles or {}).items() if self._known_language(k)},
            names=explicit_names,
            child_name_format=child_name_format,
            created=created,
        )

        if name:
            sanitized = site.interpreter.sanitize(name)
            if not sanitized:
                return self._failure(op, "INVALID_NAME", f"Not a usable page name: {name!r}")
            node = node.model_copy(update={"name": sanitized})

        generated: set[int] = set()
        try:
            node = site.uniqueness.named(node, fmt, parent)
            if node.autogen_name:
                generated.add(0)
            node, localized = self._localized_names(node, parent)
            generated |= localized
            page = self._insert(node, parent, generated)
        except DuplicateNameError as exc:
            return self._failure(op, "NAME_TAKEN", exc, name=exc.name, parent_id=exc.parent_id)
        except NameExhaustedError as exc:
            return self._failure(op, "NAME_EXHAUSTED", exc, name=exc.name)
        except ValueError as exc:
            return self._failure(op, "INVALID_FORMAT", str(exc))

        return ServiceResult(
            ok=True,
            op=op,
            data={
                **page_payload(page, site.tree.live_path(page)),
                "generated": 0 in generated,
            },
        )

    # ------------------------------------------------------------------
    # Changes
    # ------------------------------------------------------------------

    def rename(self, page_id: int, name: str, *, language_id: int = 0) -> ServiceResult:
        """Rename a page in *language_id* (0 = default name)."""
        op = "rename_page"
        site = self._site
        if language_id and not self._known_language(language_id):
            return self._failure(op, "UNKNOWN_LANGUAGE", f"Unknown language: {language_id}")
        if site.languages is not None and site.languages.is_default(language_id):
            language_id = 0

        sanitized = site.interpreter.sanitize(name)
        if not sanitized:
            return self._failure(op, "INVALID_NAME", f"Not a usable page name: {name!r}")

        try:
            old_path = site.tree.live_path(page_id, language_id)
            page = site.tree.rename(page_id, sanitized, language_id)
        except PageNotFoundError as exc:
            return self._failure(op, "NOT_FOUND", exc)
        except ValueError as exc:
            return self._failure(op, "INVALID_OPERATION", str(exc))
        except DuplicateNameError as exc:
            return self._failure(op, "NAME_TAKEN", exc, name=exc.name, parent_id=exc.parent_id)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                **page_payload(page, site.tree.live_path(page, language_id)),
                "old_path": old_path,
                "language_id": language_id,
            },
        )

    def move(self, page_id: int, parent_id: int) -> ServiceResult:
        """Move a page under a new parent."""
        op = "move_page"
        site = self._site
        try:
            old_path = site.tree.live_path(page_id)
            page = site.tree.move(page_id, parent_id)
        except PageNotFoundError as exc:
            return self._failure(op, "NOT_FOUND", exc)
        except ValueError as exc:
            return self._failure(op, "INVALID_MOVE", str(exc))
        except DuplicateNameError as exc:
            return self._failure(op, "NAME_TAKEN", exc, name=exc.name, parent_id=exc.parent_id)

        return ServiceResult(
            ok=True,
            op=op,
            data={**page_payload(page, site.tree.live_path(page)), "old_path": old_path},
        )

    def trash(self, page_id: int) -> ServiceResult:
        return self._set_status("trash_page", page_id, PageStatus.TRASH)

    def restore(self, page_id: int) -> ServiceResult:
        return self._set_status("restore_page", page_id, PageStatus.ACTIVE)

    def delete(self, page_id: int) -> ServiceResult:
        """Permanently delete a leaf page. Its path history is purged."""
        op = "delete_page"
        site = self._site
        try:
            path = site.tree.live_path(page_id)
            page = site.tree.delete(page_id)
        except PageNotFoundError as exc:
            return self._failure(op, "NOT_FOUND", exc)
        except ValueError as exc:
            return self._failure(op, "INVALID_OPERATION", str(exc))

        return ServiceResult(ok=True, op=op, data={"id": page.id, "path": path, "deleted": True})

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def show(self, page_id: int | None = None, *, path: str | None = None) -> ServiceResult:
        """Show a page by id or by live path."""
        op = "show_page"
        site = self._site
        language_id = 0
        page: Node | None
        if path is not None:
            found = site.tree.find_by_live_path(path)
            page, language_id = found if found is not None else (None, 0)
            if page is None:
                return self._failure(op, "NOT_FOUND", f"No page lives at {path}")
        else:
            page = site.tree.get(page_id if page_id is not None else ROOT_ID)
            if page is None:
                return self._failure(op, "NOT_FOUND", PageNotFoundError(page_id or ROOT_ID))

        children = site.tree.children(page.id)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                **page_payload(page, site.tree.live_path(page, language_id)),
                "in_trash": site.tree.is_in_trash(page),
                "children": [
                    {"id": child.id, "name": child.name, "title": child.title}
                    for child in children
                ],
                "history": [r.path for r in site.history.list_paths(page.id)],
            },
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _set_status(self, op: str, page_id: int, status: PageStatus) -> ServiceResult:
        try:
            page = self._site.tree.set_status(page_id, status)
        except PageNotFoundError as exc:
            return self._failure(op, "NOT_FOUND", exc)
        except ValueError as exc:
            return self._failure(op, "INVALID_OPERATION", str(exc))
        return ServiceResult(
            ok=True,
            op=op,
            data=page_payload(page, self._site.tree.live_path(page)),
        )

    def _known_language(self, language_id: int) -> bool:
        languages = self._site.languages
        return languages is not None and languages.get(language_id) is not None

    def _localized_names(self, node: Node, parent: Node) -> tuple[Node, set[int]]:
        """Generate names for languages that have a title but no name yet."""
        languages = self._site.languages
        if languages is None:
            return node, set()

        names = dict(node.names)
        generated: set[int] = set()
        for language in languages.non_default():
            if language.id in names or not node.titles.get(language.id, "").strip():
                continue
            name = self._site.uniqueness.assign_new_name(
                node, FORMAT_TITLE, parent, language_id=language.id
            )
            if name and name != node.name:
                names[language.id] = name
                generated.add(language.id)
        return node.model_copy(update={"names": names}), generated

    def _insert(self, node: Node, parent: Node, generated: set[int]) -> Node:
        """Insert *node*, re-numbering generated names that lose a race."""
        uniqueness = self._site.uniqueness
        codec = self._site.codec
        for _ in range(self._site.settings.names.max_attempts):
            try:
                return self._site.tree.insert(node)
            except DuplicateNameError as exc:
                if exc.language_id not in generated:
                    raise
                scope = NameScope(parent_id=parent.id, language_id=exc.language_id or None)
                name = uniqueness.uniquify(codec.increment(exc.name), scope)
                logger.debug("Name %r was taken on insert; retrying as %r", exc.name, name)
                if exc.language_id:
                    node = node.model_copy(update={"names": {**node.names, exc.language_id: name}})
                else:
                    node = node.model_copy(update={"name": name, "autogen_name": name})
        raise NameExhaustedError(node.name, self._site.settings.names.max_attempts)
