"""InitService — create a site: config file, database, root page.

Static entry point: there is no Site before initialization.
"""

from __future__ import annotations

import json
from pathlib import Path

from pagetrail.config.discovery import CONFIG_FILENAME
from pagetrail.domain.types import CharsetMode
from pagetrail.infrastructure.database.engine import DB_DIRNAME, db_path_for, init_database
from pagetrail.services.result import ServiceError, ServiceResult


def render_config(name: str, charset: CharsetMode = CharsetMode.ASCII) -> str:
    """Render a sparse ``pagetrail.toml``; everything else keeps its default."""
    return (
        "# pagetrail site configuration. Unlisted settings use their defaults.\n"
        "\n"
        "[site]\n"
        f"name = {json.dumps(name)}\n"
        "\n"
        "[names]\n"
        f'charset = "{charset.value}"\n'
        "\n"
        "[history]\n"
        "minimum_age = 120\n"
    )


class InitService:
    """Site initialization."""

    @staticmethod
    def init_site(
        path: Path,
        *,
        name: str | None = None,
        charset: CharsetMode = CharsetMode.ASCII,
        force: bool = False,
    ) -> ServiceResult:
        """Initialize a site at *path*.

        Refuses to touch an existing site unless *force* is set; with
        *force* the config file is rewritten and the database kept.
        """
        op = "init"
        path = path.resolve()
        config_path = path / CONFIG_FILENAME
        existing = config_path.exists() or (path / DB_DIRNAME).exists()
        if existing and not force:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="SITE_EXISTS",
                    message=f"A pagetrail site already exists at {path}",
                    detail={"path": str(path)},
                ),
            )

        site_name = name or path.name
        try:
            path.mkdir(parents=True, exist_ok=True)
            config_path.write_text(render_config(site_name, charset), encoding="utf-8")
            engine = init_database(path)
            engine.dispose()
        except OSError as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code="INIT_FAILED", message=f"Could not initialize: {exc}"),
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "name": site_name,
                "path": str(path),
                "config": str(config_path),
                "database": str(db_path_for(path)),
            },
        )
