"""Command: site initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from pagetrail.commands._base import PagetrailCommand
from pagetrail.domain.types import CharsetMode

if TYPE_CHECKING:
    from pagetrail.commands._context import AppContext

_INIT_EXAMPLES = """\
  pagetrail init
  pagetrail init /srv/site --name docs
  pagetrail init . --charset utf8
  pagetrail init . --force"""


@click.command("init", cls=PagetrailCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option("--name", default=None, help="Site name (default: directory name).")
@click.option(
    "--charset",
    type=click.Choice([mode.value for mode in CharsetMode], case_sensitive=False),
    default=CharsetMode.ASCII.value,
    show_default=True,
    help="Alphabet for generated page names.",
)
@click.option("--force", is_flag=True, help="Rewrite the config of an existing site.")
@click.pass_obj
def init_cmd(app: AppContext, path: str, name: str | None, charset: str, force: bool) -> None:
    """Initialize a new pagetrail site."""
    from pagetrail.services.init import InitService

    app.emit(
        InitService.init_site(
            Path(path),
            name=name,
            charset=CharsetMode(charset.lower()),
            force=force,
        )
    )
