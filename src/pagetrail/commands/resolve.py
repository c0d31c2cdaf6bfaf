"""Command: resolve a (possibly stale) path to the page living there now."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pagetrail.commands._base import PagetrailCommand

if TYPE_CHECKING:
    from pagetrail.commands._context import AppContext


@click.command(
    cls=PagetrailCommand,
    examples="""\
  pagetrail resolve /blog/old-post
  pagetrail -q resolve /about-us
  pagetrail --json resolve /de/ueber-uns""",
)
@click.argument("path")
@click.pass_obj
def resolve(app: AppContext, path: str) -> None:
    """Find the current page for PATH, following renames and moves."""
    from pagetrail.services.redirect import RedirectService

    app.emit(RedirectService(app.site).resolve_path(path))
