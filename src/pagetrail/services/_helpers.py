"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pagetrail.domain.models import HistoryRecord, Node


def iso(moment: datetime | None) -> str | None:
    """Render a timestamp as ISO 8601, or None."""
    return moment.isoformat() if moment is not None else None


def page_payload(page: Node, path: str) -> dict[str, Any]:
    """The JSON-friendly view of a page used in service results."""
    return {
        "id": page.id,
        "parent_id": page.parent_id,
        "name": page.name,
        "title": page.title,
        "status": page.status.value,
        "path": path,
        "names": {str(k): v for k, v in sorted(page.names.items())},
        "created": iso(page.created),
        "modified": iso(page.modified),
    }


def record_payload(record: HistoryRecord, *, verbose: bool = False) -> dict[str, Any]:
    """The JSON-friendly view of a history record.

    Examples:
        >>> from datetime import UTC, datetime
        >>> r = HistoryRecord(path="/old", node_id=5, created=datetime(2024, 1, 1, tzinfo=UTC))
        >>> record_payload(r)
        {'path': '/old'}
    """
    payload: dict[str, Any] = {"path": record.path}
    if verbose:
        payload["language_id"] = record.language_id
        payload["created"] = iso(record.created)
    return payload
