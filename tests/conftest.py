"""Shared pytest fixtures and test helpers for pagetrail tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from pagetrail.config.settings import PagetrailSettings
from pagetrail.domain.models import Node
from pagetrail.infrastructure.database.engine import init_database
from pagetrail.infrastructure.site import Site

START = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


class FakeClock:
    """Deterministic clock; ``advance`` moves it forward."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 1) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created and the root seeded."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def site_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary site directory, isolated from any PAGETRAIL_* environment."""
    monkeypatch.delenv("PAGETRAIL_CONFIG", raising=False)
    root = tmp_path / "site"
    root.mkdir()
    return root


def _build_site(root: Path, clock: FakeClock, **overrides: Any) -> Site:
    settings = PagetrailSettings.from_cli(site_root=root, **overrides)
    return Site(settings, clock=clock, load_plugins=False)


@pytest.fixture
def site(site_root: Path, clock: FakeClock) -> Iterator[Site]:
    """Fully initialized single-language site driven by the fake clock."""
    s = _build_site(site_root, clock)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def multilang_site(site_root: Path, clock: FakeClock) -> Iterator[Site]:
    """Site with English (default, id 1) and German (id 2)."""
    (site_root / "pagetrail.toml").write_text(
        '[site]\nname = "multi"\n\n'
        '[[languages]]\nid = 1\nname = "en"\ndefault = true\n\n'
        '[[languages]]\nid = 2\nname = "de"\n'
    )
    s = _build_site(site_root, clock)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_site(site_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp site root so the CLI creates an isolated site.

    Use via ``@pytest.mark.usefixtures("_isolated_site")`` on command test
    classes.
    """
    monkeypatch.chdir(site_root)


@pytest.fixture
def make_page(site: Site) -> Callable[..., Node]:
    """Create a page through PageService, asserting success."""
    return page_factory(site)


@pytest.fixture
def make_multilang_page(multilang_site: Site) -> Callable[..., Node]:
    return page_factory(multilang_site)


def page_factory(site: Site) -> Callable[..., Node]:
    from pagetrail.services.pages import PageService

    def _make(title: str = "", **kwargs: Any) -> Node:
        result = PageService(site).create(title, **kwargs)
        assert result.ok, result.error
        return site.tree.require(result.data["id"])

    return _make
