"""Tests for Site — composition from settings."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from pagetrail.config.settings import PagetrailSettings
from pagetrail.domain.types import CharsetMode
from pagetrail.infrastructure.database.engine import db_path_for
from pagetrail.infrastructure.site import Site

if TYPE_CHECKING:
    from conftest import FakeClock


class TestSite:
    def test_creates_database(self, site: Site, site_root: Path) -> None:
        assert site.root == site_root
        assert db_path_for(site_root).is_file()
        assert site.tree.get(1) is not None

    def test_single_language(self, site: Site) -> None:
        assert site.languages is None

    def test_languages_from_config(self, multilang_site: Site) -> None:
        assert multilang_site.languages is not None
        assert multilang_site.languages.default.name == "en"
        assert [lang.id for lang in multilang_site.languages.non_default()] == [2]

    def test_builtin_plugin_registered(self, site: Site) -> None:
        assert "path_history" in site.plugins.list_plugin_names()
        assert not site.plugins.is_loaded

    def test_settings_reach_components(self, site_root: Path) -> None:
        (site_root / "pagetrail.toml").write_text(
            '[names]\ndelimiter = "_"\ncharset = "utf8"\n'
        )
        settings = PagetrailSettings.from_cli(site_root=site_root)
        s = Site(settings, load_plugins=False)
        try:
            assert s.codec.delimiter == "_"
            assert s.interpreter.sanitize("Über Uns") == "über-uns"
            assert s.settings.names.charset is CharsetMode.UTF8
        finally:
            s.close()

    def test_loads_local_plugins(self, site_root: Path) -> None:
        plugin_dir = site_root / ".pagetrail" / "plugins"
        plugin_dir.mkdir(parents=True)
        (plugin_dir / "audit.py").write_text(
            "import pluggy\n"
            "hookimpl = pluggy.HookimplMarker('pagetrail')\n"
            "class Audit:\n"
            "    @hookimpl\n"
            "    def page_deleted(self, page):\n"
            "        pass\n"
        )
        s = Site(PagetrailSettings.from_cli(site_root=site_root))
        try:
            assert "pagetrail_local_plugin_audit.Audit" in s.plugins.list_plugin_names()
            assert s.plugins.is_loaded
        finally:
            s.close()

    def test_now_uses_clock(self, site: Site, clock: FakeClock) -> None:
        clock.advance(30)
        assert site.now() == clock()


@pytest.mark.parametrize("charset", list(CharsetMode))
def test_every_charset_builds(site_root: Path, charset: CharsetMode) -> None:
    settings = PagetrailSettings.from_cli(site_root=site_root)
    settings = settings.model_copy(
        update={"names": settings.names.model_copy(update={"charset": charset})}
    )
    s = Site(settings, load_plugins=False)
    try:
        assert s.interpreter.sanitize("Hello World") == "hello-world"
    finally:
        s.close()
