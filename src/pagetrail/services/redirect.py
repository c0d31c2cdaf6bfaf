"""RedirectService — answer "where does this path live now?".

The request router calls :meth:`RedirectService.resolve_path` for an
inbound path. A live page is returned as-is; otherwise the
``page_not_found`` hook asks the path-history plugin (or any other
plugin) for a redirect target.
"""

from __future__ import annotations

from typing import Any

from pagetrail.domain.models import DepthExceeded, Found, Node, NotFound
from pagetrail.domain.paths import normalize_path
from pagetrail.domain.types import ErrorKind
from pagetrail.services.base import BaseService
from pagetrail.services.result import ServiceError, ServiceResult


class RedirectService(BaseService):
    """Resolve inbound paths to the page that currently answers for them."""

    def resolve_path(self, path: str) -> ServiceResult:
        """Resolve *path* to ``{id, path, url, language, peeled, depth}``.

        ``url`` is the page's live path in the matched language and
        ``redirect`` tells whether it differs from the requested path.
        """
        op = "resolve_path"
        site = self._site
        requested = normalize_path(path)

        live = site.tree.find_by_live_path(requested)
        if live is not None and not site.tree.is_in_trash(live[0]):
            node, language_id = live
            return ServiceResult(
                ok=True,
                op=op,
                data=self._payload(requested, node, language_id, peeled=0, depth=0),
            )

        result = site.plugins.hook.page_not_found(path=requested)
        if result is None:
            result = NotFound(path=requested)

        if isinstance(result, Found):
            return ServiceResult(
                ok=True,
                op=op,
                data=self._payload(
                    requested,
                    result.node,
                    result.language_id,
                    peeled=result.peeled,
                    depth=result.depth,
                ),
            )
        if isinstance(result, DepthExceeded):
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="DEPTH_EXCEEDED",
                    message=f"Gave up resolving {requested} after {result.depth} rounds",
                    kind=ErrorKind.EXHAUSTION,
                    detail={"path": requested, "depth": result.depth},
                ),
            )
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code="NOT_FOUND",
                message=f"No page found for {requested}",
                kind=ErrorKind.NOT_FOUND,
                detail={"path": requested},
            ),
        )

    def _payload(
        self,
        requested: str,
        node: Node,
        language_id: int,
        *,
        peeled: int,
        depth: int,
    ) -> dict[str, Any]:
        url = self._site.tree.live_path(node, language_id)
        return {
            "id": node.id,
            "path": requested,
            "url": url,
            "redirect": url != requested,
            "language": self._language(language_id),
            "peeled": peeled,
            "depth": depth,
        }

    def _language(self, language_id: int) -> dict[str, Any] | None:
        languages = self._site.languages
        if not language_id or languages is None:
            return None
        language = languages.get(language_id)
        if language is None:
            return {"id": language_id, "name": None}
        return {"id": language.id, "name": language.name}
