"""Tests for UpgradeService — pending checks and the backup/migrate pipeline."""

from __future__ import annotations

from pathlib import Path

import pytest
from alembic import command

from pagetrail.infrastructure.database.engine import DB_DIRNAME
from pagetrail.infrastructure.database.migrations import build_config
from pagetrail.infrastructure.site import Site
from pagetrail.services.upgrade import BACKUP_DIRNAME, UpgradeService


@pytest.fixture
def outdated_site(site: Site) -> Site:
    url = site.engine.url.render_as_string(hide_password=False)
    command.downgrade(build_config(url), "001_baseline")
    return site


class TestCheckPending:
    def test_fresh_database_is_current(self, site: Site) -> None:
        result = UpgradeService(site).check_pending()
        assert result.ok
        assert result.data["pending_count"] == 0
        assert result.data["current"] == result.data["head"] == "002_path_languages"

    def test_outdated_database(self, outdated_site: Site) -> None:
        result = UpgradeService(outdated_site).check_pending()
        assert result.data["pending_count"] == 1
        assert result.data["current"] == "001_baseline"
        (pending,) = result.data["pending"]
        assert pending["revision"] == "002_path_languages"
        assert "language" in pending["description"]


class TestApply:
    def test_up_to_date(self, site: Site) -> None:
        result = UpgradeService(site).apply()
        assert result.ok
        assert result.data["applied_count"] == 0
        assert result.data["message"] == "Database is already up to date"

    def test_applies_with_backup(self, outdated_site: Site) -> None:
        result = UpgradeService(outdated_site).apply()
        assert result.ok
        assert result.data["applied_count"] == 1
        assert result.data["current"] == "002_path_languages"
        backup = Path(result.data["backup_path"])
        assert backup.is_file()
        assert backup.parent == outdated_site.root / DB_DIRNAME / BACKUP_DIRNAME
        assert result.warnings == []

    def test_second_apply_is_noop(self, outdated_site: Site) -> None:
        service = UpgradeService(outdated_site)
        service.apply()
        assert service.apply().data["applied_count"] == 0

    def test_history_usable_after_apply(self, outdated_site: Site) -> None:
        UpgradeService(outdated_site).apply()
        assert outdated_site.history.add(1, "/legacy", 2) is True
        record = outdated_site.history.lookup("/legacy")
        assert record.language_id == 2
