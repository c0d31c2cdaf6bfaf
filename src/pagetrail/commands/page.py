"""Command group: page tree edits (add, rename, move, trash, restore, delete, show)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pagetrail.commands._base import KeyValue, LanguageValue, PagetrailGroup

if TYPE_CHECKING:
    from pagetrail.commands._context import AppContext

_PAGE_EXAMPLES = """\
  pagetrail page add "About Us"
  pagetrail page add "Hello World" --parent 4 --format "date:%Y-%m-%d"
  pagetrail page rename 7 company
  pagetrail page move 7 12
  pagetrail page show --path /about-us"""


@click.group(cls=PagetrailGroup, examples=_PAGE_EXAMPLES)
@click.pass_obj
def page(app: AppContext) -> None:
    """Create and rearrange pages."""


@page.command(
    examples="""\
  pagetrail page add "About Us"
  pagetrail page add --parent 4 --format "untitled-time"
  pagetrail page add "Post" --field author=ada --format "{author}-{title}"
  pagetrail page add "Contact" --title-in "2=Kontakt" --name-in "2=kontakt"
  pagetrail page add "Blog" --child-format "%Y/%m/%d"\""""
)
@click.argument("title", required=False, default="")
@click.option("--parent", "parent_id", type=int, default=1, show_default=True, help="Parent id.")
@click.option("--name", default="", help="Explicit name (sanitized and made unique).")
@click.option("--format", "fmt", default="", help="Name format for this page.")
@click.option("--field", "fields", type=KeyValue(), multiple=True, help="Field value (repeatable).")
@click.option(
    "--title-in", "titles", type=LanguageValue(), multiple=True, help="Localized title."
)
@click.option("--name-in", "names", type=LanguageValue(), multiple=True, help="Localized name.")
@click.option("--child-format", default=None, help="Name format for this page's children.")
@click.pass_obj
def add(
    app: AppContext,
    title: str,
    parent_id: int,
    name: str,
    fmt: str,
    fields: tuple[tuple[str, str], ...],
    titles: tuple[tuple[int, str], ...],
    names: tuple[tuple[int, str], ...],
    child_format: str | None,
) -> None:
    """Create a page, generating a unique name when none is given."""
    from pagetrail.services.pages import PageService

    app.emit(
        PageService(app.site).create(
            title,
            parent_id=parent_id,
            name=name,
            fmt=fmt,
            fields=dict(fields),
            titles=dict(titles),
            names=dict(names),
            child_name_format=child_format,
        )
    )


@page.command(
    examples="""\
  pagetrail page rename 7 company
  pagetrail page rename 7 unternehmen --language 2"""
)
@click.argument("page_id", type=int)
@click.argument("name")
@click.option("--language", "language_id", type=int, default=0, help="Language id to rename.")
@click.pass_obj
def rename(app: AppContext, page_id: int, name: str, language_id: int) -> None:
    """Rename a page; the old path is remembered."""
    from pagetrail.services.pages import PageService

    app.emit(PageService(app.site).rename(page_id, name, language_id=language_id))


@page.command(examples="  pagetrail page move 7 12")
@click.argument("page_id", type=int)
@click.argument("parent_id", type=int)
@click.pass_obj
def move(app: AppContext, page_id: int, parent_id: int) -> None:
    """Move a page under a new parent; the old path is remembered."""
    from pagetrail.services.pages import PageService

    app.emit(PageService(app.site).move(page_id, parent_id))


@page.command(examples="  pagetrail page trash 7")
@click.argument("page_id", type=int)
@click.pass_obj
def trash(app: AppContext, page_id: int) -> None:
    """Put a page in the trash (its paths stop resolving)."""
    from pagetrail.services.pages import PageService

    app.emit(PageService(app.site).trash(page_id))


@page.command(examples="  pagetrail page restore 7")
@click.argument("page_id", type=int)
@click.pass_obj
def restore(app: AppContext, page_id: int) -> None:
    """Take a page out of the trash."""
    from pagetrail.services.pages import PageService

    app.emit(PageService(app.site).restore(page_id))


@page.command(examples="  pagetrail page delete 7")
@click.argument("page_id", type=int)
@click.pass_obj
def delete(app: AppContext, page_id: int) -> None:
    """Delete a page for good, along with its recorded paths."""
    from pagetrail.services.pages import PageService

    app.emit(PageService(app.site).delete(page_id))


@page.command(
    examples="""\
  pagetrail page show 7
  pagetrail page show --path /about-us
  pagetrail --json page show"""
)
@click.argument("page_id", type=int, required=False)
@click.option("--path", default=None, help="Look the page up by its live path.")
@click.pass_obj
def show(app: AppContext, page_id: int | None, path: str | None) -> None:
    """Show a page (the root when neither ID nor --path is given)."""
    from pagetrail.services.pages import PageService

    app.emit(PageService(app.site).show(page_id, path=path))
