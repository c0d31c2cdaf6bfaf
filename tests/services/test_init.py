"""Tests for InitService — site creation."""

from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from pagetrail.config.settings import PagetrailSettings
from pagetrail.domain.types import CharsetMode
from pagetrail.infrastructure.database.engine import DB_DIRNAME, db_path_for
from pagetrail.services.init import InitService, render_config


class TestRenderConfig:
    def test_is_valid_toml(self) -> None:
        data = tomllib.loads(render_config('My "Site"', CharsetMode.UTF8))
        assert data["site"]["name"] == 'My "Site"'
        assert data["names"]["charset"] == "utf8"
        assert data["history"]["minimum_age"] == 120


class TestInitSite:
    def test_creates_config_and_database(self, tmp_path: Path) -> None:
        root = tmp_path / "docs"
        result = InitService.init_site(root, name="Docs")
        assert result.ok
        assert result.op == "init"
        assert result.data["name"] == "Docs"
        assert (root / "pagetrail.toml").read_text().count('name = "Docs"') == 1
        assert db_path_for(root.resolve()).is_file()
        assert result.data["database"] == str(db_path_for(root.resolve()))

    def test_default_name_is_directory(self, tmp_path: Path) -> None:
        result = InitService.init_site(tmp_path / "handbook")
        assert result.data["name"] == "handbook"

    def test_refuses_existing_site(self, tmp_path: Path) -> None:
        InitService.init_site(tmp_path)
        result = InitService.init_site(tmp_path)
        assert not result.ok
        assert result.error.code == "SITE_EXISTS"

    def test_refuses_bare_database_dir(self, tmp_path: Path) -> None:
        (tmp_path / DB_DIRNAME).mkdir()
        assert InitService.init_site(tmp_path).error.code == "SITE_EXISTS"

    def test_force_rewrites_config(self, tmp_path: Path) -> None:
        InitService.init_site(tmp_path, name="old")
        result = InitService.init_site(tmp_path, name="new", force=True)
        assert result.ok
        assert 'name = "new"' in (tmp_path / "pagetrail.toml").read_text()

    def test_settings_load_generated_config(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("PAGETRAIL_CONFIG", raising=False)
        InitService.init_site(tmp_path, name="Docs", charset=CharsetMode.TRANSLATE)
        settings = PagetrailSettings.from_cli(site_root=tmp_path)
        assert settings.site.name == "Docs"
        assert settings.names.charset is CharsetMode.TRANSLATE
        assert settings.history.minimum_age == 120
