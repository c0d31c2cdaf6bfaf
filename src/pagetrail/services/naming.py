"""NamingService — name generation without creating pages."""

from __future__ import annotations

from typing import Any

from pagetrail.domain.errors import NameExhaustedError, PageNotFoundError
from pagetrail.domain.models import ROOT_ID, NameScope, Node
from pagetrail.services.base import BaseService
from pagetrail.services.result import ServiceResult


class NamingService(BaseService):
    """Preview generated names, uniquify candidates, draw random names."""

    def preview(
        self,
        title: str = "",
        *,
        fmt: str = "",
        parent_id: int = ROOT_ID,
        fields: dict[str, Any] | None = None,
    ) -> ServiceResult:
        """Show the name a new page would get under *parent_id*."""
        op = "preview_name"
        site = self._site
        parent = site.tree.get(parent_id)
        if parent is None:
            return self._failure(op, "NOT_FOUND", PageNotFoundError(parent_id))

        node = Node(parent_id=parent.id, title=title.strip(), fields=fields or {})
        fmt = fmt or site.interpreter.default_format(node, parent)
        try:
            candidate = site.interpreter.resolve(node, fmt, parent)
            unique = site.uniqueness.uniquify(
                candidate, NameScope(parent_id=parent.id), node=node
            )
        except NameExhaustedError as exc:
            return self._failure(op, "NAME_EXHAUSTED", exc, name=exc.name)
        except ValueError as exc:
            return self._failure(op, "INVALID_FORMAT", str(exc))

        return ServiceResult(
            ok=True,
            op=op,
            data={"format": fmt, "candidate": candidate, "name": unique},
        )

    def unique(
        self,
        name: str,
        *,
        parent_id: int | None = None,
        exclude_id: int | None = None,
        language_id: int | None = None,
    ) -> ServiceResult:
        """Sanitize *name* and increment it until it is free."""
        op = "unique_name"
        site = self._site
        candidate = site.interpreter.sanitize(name)
        if not candidate:
            return self._failure(op, "INVALID_NAME", f"Not a usable page name: {name!r}")

        scope = NameScope(parent_id=parent_id, exclude_id=exclude_id, language_id=language_id)
        try:
            unique = site.uniqueness.uniquify(candidate, scope)
        except NameExhaustedError as exc:
            return self._failure(op, "NAME_EXHAUSTED", exc, name=exc.name)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "input": name,
                "candidate": candidate,
                "name": unique,
                "taken": unique != candidate,
            },
        )

    def random(
        self,
        *,
        count: int = 1,
        parent_id: int | None = None,
        **overrides: Any,
    ) -> ServiceResult:
        """Draw *count* random names that are free in the given scope.

        *overrides* map onto the ``[names.random]`` options (``length``,
        ``min_length``, ``alpha``, ``prefix``, ...); None values are ignored.
        """
        op = "random_name"
        site = self._site
        try:
            options = site.settings.names.random.options(
                NameScope(parent_id=parent_id), **overrides
            )
        except ValueError as exc:
            return self._failure(op, "INVALID_OPTIONS", str(exc))

        names: list[str] = []
        try:
            for _ in range(max(1, count)):
                names.append(site.uniqueness.unique_random_name(options))
        except NameExhaustedError as exc:
            return self._failure(op, "NAME_EXHAUSTED", exc, name=exc.name)

        return ServiceResult(ok=True, op=op, data={"names": names, "count": len(names)})
