"""Command group: name generation without touching the tree."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pagetrail.commands._base import KeyValue, PagetrailGroup

if TYPE_CHECKING:
    from pagetrail.commands._context import AppContext

_NAME_EXAMPLES = """\
  pagetrail name preview "Hello World" --format "date:%Y-%m-%d"
  pagetrail name unique about-us --parent 1
  pagetrail name random --count 5 --length 8"""


@click.group(cls=PagetrailGroup, examples=_NAME_EXAMPLES)
@click.pass_obj
def name(app: AppContext) -> None:
    """Preview, uniquify, and draw page names."""


@name.command(
    examples="""\
  pagetrail name preview "Hello World"
  pagetrail name preview --format untitled-time --parent 4
  pagetrail name preview "Post" --field author=ada --format "{author}-{title}\""""
)
@click.argument("title", required=False, default="")
@click.option("--format", "fmt", default="", help="Name format (default: the parent's).")
@click.option("--parent", "parent_id", type=int, default=1, show_default=True, help="Parent id.")
@click.option("--field", "fields", type=KeyValue(), multiple=True, help="Field value (repeatable).")
@click.pass_obj
def preview(
    app: AppContext,
    title: str,
    fmt: str,
    parent_id: int,
    fields: tuple[tuple[str, str], ...],
) -> None:
    """Show the name a new page would be given."""
    from pagetrail.services.naming import NamingService

    app.emit(
        NamingService(app.site).preview(title, fmt=fmt, parent_id=parent_id, fields=dict(fields))
    )


@name.command(
    examples="""\
  pagetrail name unique about-us
  pagetrail name unique "Über uns" --parent 4
  pagetrail name unique kontakt --language 2 --exclude 9"""
)
@click.argument("candidate")
@click.option("--parent", "parent_id", type=int, default=None, help="Restrict to siblings.")
@click.option("--exclude", "exclude_id", type=int, default=None, help="Page id to ignore.")
@click.option("--language", "language_id", type=int, default=None, help="Only this language.")
@click.pass_obj
def unique(
    app: AppContext,
    candidate: str,
    parent_id: int | None,
    exclude_id: int | None,
    language_id: int | None,
) -> None:
    """Sanitize CANDIDATE and increment it until it is free."""
    from pagetrail.services.naming import NamingService

    app.emit(
        NamingService(app.site).unique(
            candidate,
            parent_id=parent_id,
            exclude_id=exclude_id,
            language_id=language_id,
        )
    )


@name.command(
    examples="""\
  pagetrail name random
  pagetrail name random --count 3 --length 10 --no-numeric
  pagetrail name random --prefix tmp- --parent 4"""
)
@click.option("--count", type=int, default=1, show_default=True, help="How many names.")
@click.option("--length", type=int, default=None, help="Exact length.")
@click.option("--min-length", type=int, default=None, help="Minimum length.")
@click.option("--max-length", type=int, default=None, help="Maximum length.")
@click.option("--alpha/--no-alpha", default=None, help="Use letters.")
@click.option("--numeric/--no-numeric", default=None, help="Use digits.")
@click.option("--prefix", default=None, help="Prefix for every name.")
@click.option("--suffix", default=None, help="Suffix for every name.")
@click.option("--parent", "parent_id", type=int, default=None, help="Unique among siblings.")
@click.option("--no-confirm", is_flag=True, help="Skip the uniqueness check.")
@click.pass_obj
def random(
    app: AppContext,
    count: int,
    length: int | None,
    min_length: int | None,
    max_length: int | None,
    alpha: bool | None,
    numeric: bool | None,
    prefix: str | None,
    suffix: str | None,
    parent_id: int | None,
    no_confirm: bool,
) -> None:
    """Draw random names that are not yet taken."""
    from pagetrail.services.naming import NamingService

    app.emit(
        NamingService(app.site).random(
            count=count,
            parent_id=parent_id,
            length=length,
            min_length=min_length,
            max_length=max_length,
            alpha=alpha,
            numeric=numeric,
            prefix=prefix,
            suffix=suffix,
            confirm=False if no_confirm else None,
        )
    )
