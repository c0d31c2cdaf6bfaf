"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer facade methods return ServiceResult.
Expected failures become a ServiceError carrying the ErrorKind that
produced them; callers pick a 404, a retry, or a hard failure from it.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from pagetrail.domain.errors import PagetrailError
from pagetrail.domain.types import ErrorKind


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    kind: ErrorKind = ErrorKind.MALFORMED_INPUT
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, code: str, exc: PagetrailError, **detail: Any) -> ServiceError:
        return cls(code=code, message=str(exc), kind=exc.kind, detail=detail)


class ServiceResult(BaseModel):
    """Universal return type for service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"rename_page"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
