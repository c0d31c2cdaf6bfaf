"""Command group: recorded former paths."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pagetrail.commands._base import PagetrailGroup

if TYPE_CHECKING:
    from pagetrail.commands._context import AppContext

_HISTORY_EXAMPLES = """\
  pagetrail history list 7
  pagetrail history add 7 /old/about
  pagetrail history forget /old/about"""


@click.group(cls=PagetrailGroup, examples=_HISTORY_EXAMPLES)
@click.pass_obj
def history(app: AppContext) -> None:
    """Inspect and edit the paths a page used to live at."""


@history.command(
    "list",
    examples="""\
  pagetrail history list 7
  pagetrail history list 7 --virtual --verbose-paths
  pagetrail --json history list 7 --language 2""",
)
@click.argument("page_id", type=int)
@click.option("--language", "language_id", type=int, default=None, help="Only this language.")
@click.option("--verbose-paths", is_flag=True, help="Include language and timestamp.")
@click.option("--virtual", is_flag=True, help="Include paths inherited from ancestors.")
@click.pass_obj
def list_cmd(
    app: AppContext,
    page_id: int,
    language_id: int | None,
    verbose_paths: bool,
    virtual: bool,
) -> None:
    """List the former paths of a page, oldest first."""
    from pagetrail.services.history import HistoryService

    app.emit(
        HistoryService(app.site).list(
            page_id,
            language_id=language_id,
            verbose=verbose_paths,
            virtual=virtual,
        )
    )


@history.command(
    examples="""\
  pagetrail history add 7 /old/about
  pagetrail history add 7 /de/alt --language 2"""
)
@click.argument("page_id", type=int)
@click.argument("path")
@click.option("--language", "language_id", type=int, default=0, help="Language of the path.")
@click.pass_obj
def add(app: AppContext, page_id: int, path: str, language_id: int) -> None:
    """Record PATH as a former path of a page."""
    from pagetrail.services.history import HistoryService

    app.emit(HistoryService(app.site).add(page_id, path, language_id=language_id))


@history.command(examples="  pagetrail history forget /old/about")
@click.argument("path")
@click.pass_obj
def forget(app: AppContext, path: str) -> None:
    """Stop redirecting PATH."""
    from pagetrail.services.history import HistoryService

    app.emit(HistoryService(app.site).forget(path))
