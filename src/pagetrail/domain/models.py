"""Pydantic models for pages, history records, and resolution results.

INVARIANT: Models are frozen. Changes produce a new instance via
``model_copy(update=...)`` so a node handed to a hook can never be
mutated behind the caller's back.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from pagetrail.domain.types import PageStatus

ROOT_ID = 1


class Node(BaseModel):
    """A page in the content tree.

    ``id`` is 0 for a page that has not been stored yet. ``names`` and
    ``titles`` hold per-language overrides keyed by language id; the
    default language always lives in ``name`` / ``title``.
    """

    model_config = {"frozen": True}

    id: int = 0
    parent_id: int | None = None
    name: str = ""
    title: str = ""
    status: PageStatus = PageStatus.ACTIVE
    child_name_format: str | None = None
    fields: dict[str, Any] = Field(default_factory=dict)
    names: dict[int, str] = Field(default_factory=dict)
    titles: dict[int, str] = Field(default_factory=dict)
    created: datetime | None = None
    modified: datetime | None = None
    autogen_name: str | None = None

    @property
    def is_stored(self) -> bool:
        """Whether the page has a persistent identity."""
        return self.id > 0

    @property
    def in_trash(self) -> bool:
        return self.status == PageStatus.TRASH

    def name_for(self, language_id: int = 0) -> str:
        """Name in *language_id*, falling back to the default name."""
        if language_id:
            return self.names.get(language_id) or self.name
        return self.name

    def title_for(self, language_id: int = 0) -> str:
        """Title in *language_id*, falling back to the default title."""
        if language_id:
            return self.titles.get(language_id) or self.title
        return self.title

    def field_value(self, field_name: str, language_id: int = 0) -> Any:
        """Look up a field by name. Built-in columns shadow custom fields."""
        if field_name == "title":
            return self.title_for(language_id)
        if field_name == "name":
            return self.name_for(language_id)
        if field_name == "id":
            return self.id or None
        if field_name == "parent_id":
            return self.parent_id
        if field_name in ("created", "modified"):
            return getattr(self, field_name)
        return self.fields.get(field_name)


class HistoryRecord(BaseModel):
    """A former path of a page. ``path`` is globally unique."""

    model_config = {"frozen": True}

    path: str
    node_id: int
    language_id: int = 0
    created: datetime


class NameScope(BaseModel):
    """Where a name must be unique.

    Attributes:
        exclude_id: Page ignored by the existence check (the page being named).
        parent_id: Limit the check to siblings under this parent.
        language_id: Pin the check to one language's names. ``None`` checks
            every active language when a language capability is present.
    """

    model_config = {"frozen": True}

    exclude_id: int | None = None
    parent_id: int | None = None
    language_id: int | None = None


class RandomNameOptions(BaseModel):
    """Options for random name generation.

    ``length`` fixes the length; otherwise a length between ``min_length``
    and ``max_length`` (0 means twice the minimum) is drawn per attempt.
    """

    model_config = {"frozen": True}

    length: int = 0
    min_length: int = 6
    max_length: int = 0
    alpha: bool = True
    numeric: bool = True
    confirm: bool = True
    prefix: str = ""
    suffix: str = ""
    scope: NameScope = Field(default_factory=NameScope)


# ---------------------------------------------------------------------------
# Resolution results
# ---------------------------------------------------------------------------


class Found(BaseModel):
    """The resolver located the page that now lives at a historical path."""

    model_config = {"frozen": True}

    status: Literal["found"] = "found"
    node: Node
    language_id: int = 0
    peeled: int = 0
    depth: int = 0


class NotFound(BaseModel):
    model_config = {"frozen": True}

    status: Literal["not_found"] = "not_found"
    path: str


class DepthExceeded(BaseModel):
    """Chained ancestor renames went deeper than the segment cap."""

    model_config = {"frozen": True}

    status: Literal["depth_exceeded"] = "depth_exceeded"
    path: str
    depth: int


Resolution = Found | NotFound | DepthExceeded
