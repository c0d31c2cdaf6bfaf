"""BaseService — abstract foundation for the pagetrail service facades.

Every service receives a :class:`Site` at construction time. The Site
provides the tree storage, path history, and naming components; the
service turns their exceptions into :class:`ServiceResult` errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pagetrail.domain.errors import PagetrailError
from pagetrail.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from pagetrail.infrastructure.site import Site


class BaseService:
    """Abstract base for all service-layer facades.

    Usage::

        class PageService(BaseService):
            def rename(self, page_id: int, name: str) -> ServiceResult:
                page = self._site.tree.rename(page_id, name)
                ...
    """

    def __init__(self, site: Site) -> None:
        self._site = site

    @staticmethod
    def _failure(
        op: str,
        code: str,
        message: str | PagetrailError,
        **detail: object,
    ) -> ServiceResult:
        """Build a failed result, carrying the error kind of an exception."""
        if isinstance(message, PagetrailError):
            error = ServiceError.from_exception(code, message, **detail)
        else:
            error = ServiceError(code=code, message=message, detail=detail)
        return ServiceResult(ok=False, op=op, error=error)
