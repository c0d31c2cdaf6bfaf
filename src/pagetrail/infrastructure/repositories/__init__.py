"""Repositories over the pagetrail database."""

from pagetrail.infrastructure.repositories.pages import PageTree
from pagetrail.infrastructure.repositories.paths import PathHistoryStore

__all__ = ["PageTree", "PathHistoryStore"]
