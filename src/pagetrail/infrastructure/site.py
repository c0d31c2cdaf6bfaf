"""Site — the composition root handed to every service.

Built once from :class:`PagetrailSettings`. Owns the database engine
and wires the naming and path-history components together with
explicit configuration; nothing downstream reads global state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from pagetrail.domain.formats import FormatInterpreter
from pagetrail.domain.languages import LanguageProvider
from pagetrail.infrastructure.database.engine import DB_DIRNAME, init_database
from pagetrail.infrastructure.repositories.pages import PageTree
from pagetrail.infrastructure.repositories.paths import PathHistoryStore
from pagetrail.plugins.builtins.path_history import PathHistoryPlugin
from pagetrail.plugins.manager import PluginManager
from pagetrail.services.resolver import PathResolver
from pagetrail.services.tracking import PathHistoryTracker
from pagetrail.services.uniqueness import UniquenessResolver

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from pagetrail.config.settings import PagetrailSettings
    from pagetrail.domain.names import NameCodec

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Site:
    """Database, tree storage, path history, and naming for one site root.

    Parameters:
        settings: Resolved settings; ``site_root`` locates the database.
        clock: Source of "now" shared by every component.
        load_plugins: Also discover entry-point and local plugins.
    """

    def __init__(
        self,
        settings: PagetrailSettings,
        *,
        clock: Callable[[], datetime] = _utcnow,
        load_plugins: bool = True,
    ) -> None:
        self._settings = settings
        self._clock = clock
        self._engine: Engine = init_database(self.root)

        self._languages: LanguageProvider | None = None
        if settings.languages:
            self._languages = LanguageProvider(lang.to_language() for lang in settings.languages)

        names = settings.names
        self._codec = names.codec()
        self._plugins = PluginManager()
        self._tree = PageTree(
            self._engine,
            languages=self._languages,
            hook=self._plugins.hook,
            clock=clock,
        )
        self._history = PathHistoryStore(self._engine, clock=clock)
        self._interpreter = FormatInterpreter(
            self._codec,
            charset=names.charset,
            clock=clock,
            languages=self._languages,
        )
        self._uniqueness = UniquenessResolver(
            self._tree,
            self._codec,
            self._interpreter,
            languages=self._languages,
            max_attempts=names.max_attempts,
            random_defaults=names.random.options(),
        )
        self._resolver = PathResolver(
            self._tree,
            self._history,
            max_segments=settings.history.max_segments,
        )
        self._tracker = PathHistoryTracker(
            self._tree,
            self._history,
            languages=self._languages,
            minimum_age=settings.history.minimum_age,
            enabled=settings.history.enabled,
            clock=clock,
        )

        self._plugins.register_plugin(
            PathHistoryPlugin(self._tracker, self._resolver), name="path_history"
        )
        if load_plugins:
            self._plugins.discover_and_load(local_dir=self.root / DB_DIRNAME / "plugins")

    @property
    def root(self) -> Path:
        """The site root directory."""
        return self._settings.site_root

    @property
    def settings(self) -> PagetrailSettings:
        return self._settings

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def languages(self) -> LanguageProvider | None:
        return self._languages

    @property
    def codec(self) -> NameCodec:
        return self._codec

    @property
    def plugins(self) -> PluginManager:
        return self._plugins

    @property
    def tree(self) -> PageTree:
        return self._tree

    @property
    def history(self) -> PathHistoryStore:
        return self._history

    @property
    def interpreter(self) -> FormatInterpreter:
        return self._interpreter

    @property
    def uniqueness(self) -> UniquenessResolver:
        return self._uniqueness

    @property
    def resolver(self) -> PathResolver:
        return self._resolver

    @property
    def tracker(self) -> PathHistoryTracker:
        return self._tracker

    def now(self) -> datetime:
        return self._clock()

    def close(self) -> None:
        """Release pooled database connections."""
        self._engine.dispose()
