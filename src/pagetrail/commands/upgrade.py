"""Command: database schema migration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pagetrail.commands._base import PagetrailCommand

if TYPE_CHECKING:
    from pagetrail.commands._context import AppContext


@click.command(
    cls=PagetrailCommand,
    examples="""\
  pagetrail upgrade
  pagetrail upgrade --check
  pagetrail --json upgrade --check""",
)
@click.option(
    "--check", "check_only", is_flag=True, help="Show pending migrations without applying."
)
@click.pass_obj
def upgrade(app: AppContext, check_only: bool) -> None:
    """Run pending database migrations."""
    from pagetrail.services.upgrade import UpgradeService

    svc = UpgradeService(app.site)
    app.emit(svc.check_pending() if check_only else svc.apply())
