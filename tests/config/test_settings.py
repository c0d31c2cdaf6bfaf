"""Tests for PagetrailSettings — the merged settings object."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from pagetrail.config.discovery import CONFIG_FILENAME
from pagetrail.config.settings import PagetrailSettings
from pagetrail.domain.types import CharsetMode


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PAGETRAIL_CONFIG", raising=False)
    monkeypatch.delenv("PAGETRAIL_HISTORY__MINIMUM_AGE", raising=False)


class TestDefaults:
    def test_no_config(self, tmp_path: Path) -> None:
        settings = PagetrailSettings.from_cli(site_root=tmp_path)
        assert settings.site_root == tmp_path
        assert settings.config_path is None
        assert settings.site.name == "my-site"
        assert settings.languages == []
        assert not settings.json_output

    def test_cwd_without_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert PagetrailSettings.from_cli().site_root == Path.cwd()


class TestTomlSource:
    def test_sections(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text(
            '[site]\nname = "docs"\n\n'
            '[names]\ncharset = "translate"\n\n'
            '[names.random]\nmin_length = 9\n\n'
            "[history]\nminimum_age = 0\n\n"
            '[[languages]]\nid = 1\nname = "en"\ndefault = true\n'
        )
        settings = PagetrailSettings.from_cli(site_root=tmp_path)
        assert settings.site.name == "docs"
        assert settings.names.charset is CharsetMode.TRANSLATE
        assert settings.names.random.min_length == 9
        assert settings.history.minimum_age == 0
        assert settings.languages[0].default

    def test_site_root_from_config_location(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / CONFIG_FILENAME).write_text('[site]\nname = "docs"\n')
        nested = tmp_path / "pages" / "deep"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = PagetrailSettings.from_cli()
        assert settings.site_root == tmp_path.resolve()
        assert settings.config_path == (tmp_path / CONFIG_FILENAME).resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "other.toml"
        custom.write_text('[site]\nname = "custom"\n')
        settings = PagetrailSettings.from_cli(config_path=str(custom), site_root=tmp_path)
        assert settings.site.name == "custom"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[site\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            PagetrailSettings.from_cli(site_root=tmp_path)


class TestPriority:
    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[history]\nminimum_age = 300\n")
        monkeypatch.setenv("PAGETRAIL_HISTORY__MINIMUM_AGE", "5")
        settings = PagetrailSettings.from_cli(site_root=tmp_path)
        assert settings.history.minimum_age == 5

    def test_cli_flags(self, tmp_path: Path) -> None:
        settings = PagetrailSettings.from_cli(
            site_root=tmp_path, json_output=True, quiet=True, verbose=True, log_json=True
        )
        assert settings.json_output
        assert settings.quiet
        assert settings.verbose
        assert settings.log_json
