"""Exceptions raised by the naming and path-history core.

Every exception carries an :class:`ErrorKind` so callers can decide
between a 404, a retry, or a hard failure without string matching.
"""

from __future__ import annotations

from pagetrail.domain.types import ErrorKind


class PagetrailError(Exception):
    """Base class for all pagetrail failures."""

    kind: ErrorKind = ErrorKind.MALFORMED_INPUT


class DuplicateNameError(PagetrailError):
    """A name insert lost against the storage-level uniqueness constraint."""

    kind = ErrorKind.STORAGE_CONFLICT

    def __init__(self, name: str, parent_id: int | None, language_id: int = 0) -> None:
        self.name = name
        self.parent_id = parent_id
        self.language_id = language_id
        super().__init__(
            f"Name {name!r} is already taken under parent {parent_id} (language {language_id})"
        )


class NameExhaustedError(PagetrailError):
    """The uniqueness loop ran past its iteration ceiling."""

    kind = ErrorKind.EXHAUSTION

    def __init__(self, name: str, attempts: int) -> None:
        self.name = name
        self.attempts = attempts
        super().__init__(f"No free name found for {name!r} after {attempts} attempts")


class SchemaMismatchError(PagetrailError):
    """A query referenced a column or table the database does not have yet."""

    kind = ErrorKind.SCHEMA_MISMATCH


class PageNotFoundError(PagetrailError):
    """A page id did not match any stored page."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, page_id: int) -> None:
        self.page_id = page_id
        super().__init__(f"Page not found: {page_id}")
