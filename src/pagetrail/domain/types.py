"""Classification enums shared across layers."""

from __future__ import annotations

from enum import StrEnum


class CharsetMode(StrEnum):
    """How raw text is reduced to the page-name alphabet."""

    ASCII = "ascii"
    UTF8 = "utf8"
    TRANSLATE = "translate"


class ErrorKind(StrEnum):
    """Attribution for every failure surfaced by the core."""

    STORAGE_CONFLICT = "storage_conflict"
    SCHEMA_MISMATCH = "schema_mismatch"
    MALFORMED_INPUT = "malformed_input"
    EXHAUSTION = "exhaustion"
    NOT_FOUND = "not_found"


class PageStatus(StrEnum):
    """Lifecycle status of a page row."""

    ACTIVE = "active"
    TRASH = "trash"
