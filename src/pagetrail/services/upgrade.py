"""UpgradeService — database migration with Alembic.

Pipeline: BACKUP → MIGRATE → VALIDATE → REPORT
"""

from __future__ import annotations

import logging
import shutil
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

from pagetrail.infrastructure.database.engine import DB_DIRNAME, db_path_for
from pagetrail.infrastructure.database.migrations import build_config
from pagetrail.services.base import BaseService
from pagetrail.services.result import ServiceError, ServiceResult

logger = logging.getLogger(__name__)

BACKUP_DIRNAME = "backups"


class UpgradeService(BaseService):
    """Handles database schema migrations via Alembic."""

    def _db_url(self) -> str:
        return f"sqlite:///{db_path_for(self._site.root)}"

    def check_pending(self) -> ServiceResult:
        """List pending migrations without applying."""
        op = "upgrade"

        try:
            script = ScriptDirectory.from_config(build_config(self._db_url()))
            head = script.get_current_head()

            with self._site.engine.connect() as conn:
                current = MigrationContext.configure(conn).get_current_revision()

            # Walk from head down to the current revision.
            pending: list[dict[str, Any]] = []
            if current != head and head is not None:
                rev_obj = script.get_revision(head)
                while rev_obj is not None and rev_obj.revision != current:
                    pending.append(
                        {"revision": rev_obj.revision, "description": rev_obj.doc or ""}
                    )
                    down = rev_obj.down_revision
                    if down is None:
                        break
                    rev_obj = script.get_revision(str(down))
            pending.reverse()

            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "pending_count": len(pending),
                    "pending": pending,
                    "current": current,
                    "head": head,
                },
            )
        except Exception as exc:
            return self._failure(op, "CHECK_FAILED", f"Failed to check migrations: {exc}")

    def apply(self) -> ServiceResult:
        """BACKUP → MIGRATE → VALIDATE → REPORT pipeline."""
        op = "upgrade"
        warnings: list[str] = []

        check_result = self.check_pending()
        if not check_result.ok:
            return check_result

        pending_count = check_result.data["pending_count"]
        if pending_count == 0:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "applied_count": 0,
                    "current": check_result.data["head"],
                    "message": "Database is already up to date",
                },
            )

        # BACKUP
        try:
            backup_path = self._backup_db()
        except OSError as exc:
            return self._failure(op, "BACKUP_FAILED", f"Backup failed: {exc}")

        # MIGRATE
        try:
            command.upgrade(build_config(self._db_url()), "head")
        except Exception as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="MIGRATION_FAILED",
                    message=f"Migration failed: {exc}. Backup at: {backup_path}",
                    detail={"backup_path": str(backup_path)},
                ),
            )

        # VALIDATE
        after = self.check_pending()
        if not after.ok or after.data["pending_count"]:
            warnings.append("Database is still behind the latest revision after upgrading")

        logger.info("Applied %d migrations; backup at %s", pending_count, backup_path)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "applied_count": pending_count,
                "current": check_result.data["head"],
                "backup_path": str(backup_path),
            },
            warnings=warnings,
        )

    def _backup_db(self) -> Path:
        """Copy the database file to ``.pagetrail/backups/`` before migrating."""
        with self._site.engine.connect() as conn:
            conn.exec_driver_sql("PRAGMA wal_checkpoint(TRUNCATE)")
        source = db_path_for(self._site.root)
        backup_dir = self._site.root / DB_DIRNAME / BACKUP_DIRNAME
        backup_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S")
        target = backup_dir / f"pagetrail-{stamp}.db"
        shutil.copy2(source, target)
        return target
