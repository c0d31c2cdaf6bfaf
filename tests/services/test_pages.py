"""Tests for PageService — create, rename, move, trash, delete, show."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import pytest

from pagetrail.domain.models import NameScope, Node
from pagetrail.domain.types import ErrorKind
from pagetrail.infrastructure.site import Site
from pagetrail.services.pages import PageService

if TYPE_CHECKING:
    from conftest import FakeClock


class TestCreate:
    def test_name_from_title(self, site: Site) -> None:
        result = PageService(site).create("About Us")
        assert result.ok
        assert result.op == "create_page"
        assert result.data["name"] == "about-us"
        assert result.data["path"] == "/about-us"
        assert result.data["generated"] is True

    def test_duplicate_title_increments(self, site: Site) -> None:
        service = PageService(site)
        service.create("About")
        assert service.create("About").data["name"] == "about-1"

    def test_explicit_name_sanitized(self, site: Site) -> None:
        result = PageService(site).create("Anything", name="Our Team!")
        assert result.data["name"] == "our-team"
        assert result.data["generated"] is False

    def test_explicit_name_taken(self, site: Site) -> None:
        service = PageService(site)
        service.create("About")
        result = service.create("Other", name="about")
        assert not result.ok
        assert result.error.code == "NAME_TAKEN"
        assert result.error.kind == ErrorKind.STORAGE_CONFLICT

    def test_unusable_name(self, site: Site) -> None:
        result = PageService(site).create("About", name="!!!")
        assert result.error.code == "INVALID_NAME"

    def test_missing_parent(self, site: Site) -> None:
        result = PageService(site).create("About", parent_id=404)
        assert result.error.code == "NOT_FOUND"
        assert result.error.kind == ErrorKind.NOT_FOUND

    def test_format(self, site: Site) -> None:
        result = PageService(site).create("Post", fmt="{author}-title", fields={"author": "ada"})
        assert result.data["name"] == "ada-title"

    def test_child_name_format(self, site: Site, make_page: Callable[..., Node]) -> None:
        blog = make_page("Blog", child_name_format="date:%Y-%m-%d")
        result = PageService(site).create("Ignored", parent_id=blog.id)
        assert result.data["path"] == "/blog/2024-05-01"

    def test_untitled(self, site: Site) -> None:
        assert PageService(site).create().data["name"] == "untitled-0240501120000"

    def test_random(self, site: Site) -> None:
        name = PageService(site).create("Post", fmt="random").data["name"]
        assert name != "post"
        assert name.isalnum()

    def test_generated_name_retried_after_race(
        self, site: Site, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        service = PageService(site)
        service.create("About")
        real = site.uniqueness.exists_in_scope
        calls: list[str] = []

        def stale_first_check(name: str, scope: NameScope | None = None) -> bool:
            calls.append(name)
            if len(calls) == 1:
                return False  # misses the concurrent insert
            return real(name, scope)

        monkeypatch.setattr(site.uniqueness, "exists_in_scope", stale_first_check)
        result = service.create("About")
        assert result.ok
        assert result.data["name"] == "about-1"

    def test_created_stamp(self, site: Site, clock: FakeClock) -> None:
        result = PageService(site).create("About")
        assert result.data["created"] == clock().isoformat()


class TestCreateLanguages:
    def test_localized_names_from_titles(self, multilang_site: Site) -> None:
        result = PageService(multilang_site).create("About us", titles={2: "Über uns"})
        assert result.data["names"] == {"2": "uber-uns"}

    def test_same_localized_name_not_stored(self, multilang_site: Site) -> None:
        result = PageService(multilang_site).create("Kontakt", titles={2: "Kontakt"})
        assert result.data["names"] == {}

    def test_explicit_localized_name(self, multilang_site: Site) -> None:
        result = PageService(multilang_site).create("About", names={2: "Über"})
        assert result.data["names"] == {"2": "uber"}

    def test_unknown_language(self, multilang_site: Site) -> None:
        result = PageService(multilang_site).create("About", names={9: "x"})
        assert result.error.code == "UNKNOWN_LANGUAGE"

    def test_localized_name_increments(self, multilang_site: Site) -> None:
        service = PageService(multilang_site)
        service.create("About", titles={2: "Über uns"})
        result = service.create("Company", titles={2: "Über uns"})
        assert result.data["names"] == {"2": "uber-uns-1"}


class TestRename:
    def test_rename(self, site: Site, make_page: Callable[..., Node]) -> None:
        page = make_page("About")
        result = PageService(site).rename(page.id, "Company")
        assert result.ok
        assert result.data["name"] == "company"
        assert result.data["old_path"] == "/about"
        assert result.data["path"] == "/company"

    def test_rename_missing(self, site: Site) -> None:
        assert PageService(site).rename(404, "x").error.code == "NOT_FOUND"

    def test_rename_taken(self, site: Site, make_page: Callable[..., Node]) -> None:
        make_page("Contact")
        page = make_page("About")
        assert PageService(site).rename(page.id, "contact").error.code == "NAME_TAKEN"

    def test_rename_language(
        self, multilang_site: Site, make_multilang_page: Callable[..., Node]
    ) -> None:
        page = make_multilang_page("About", names={2: "ueber"})
        result = PageService(multilang_site).rename(page.id, "Firma", language_id=2)
        assert result.data["path"] == "/firma"
        assert result.data["old_path"] == "/ueber"
        assert result.data["language_id"] == 2

    def test_default_language_id_renames_default_name(
        self, multilang_site: Site, make_multilang_page: Callable[..., Node]
    ) -> None:
        page = make_multilang_page("About")
        result = PageService(multilang_site).rename(page.id, "company", language_id=1)
        assert result.data["name"] == "company"
        assert result.data["language_id"] == 0


class TestMove:
    def test_move(self, site: Site, make_page: Callable[..., Node]) -> None:
        blog = make_page("Blog")
        post = make_page("Post")
        result = PageService(site).move(post.id, blog.id)
        assert result.data["path"] == "/blog/post"
        assert result.data["old_path"] == "/post"

    def test_move_below_itself(self, site: Site, make_page: Callable[..., Node]) -> None:
        blog = make_page("Blog")
        post = make_page("Post", parent_id=blog.id)
        assert PageService(site).move(blog.id, post.id).error.code == "INVALID_MOVE"

    def test_move_to_missing_parent(self, site: Site, make_page: Callable[..., Node]) -> None:
        post = make_page("Post")
        assert PageService(site).move(post.id, 404).error.code == "NOT_FOUND"


class TestTrashAndDelete:
    def test_trash_and_restore(self, site: Site, make_page: Callable[..., Node]) -> None:
        page = make_page("About")
        service = PageService(site)
        assert service.trash(page.id).data["status"] == "trash"
        assert service.restore(page.id).data["status"] == "active"

    def test_trash_root(self, site: Site) -> None:
        assert PageService(site).trash(1).error.code == "INVALID_OPERATION"

    def test_delete(self, site: Site, make_page: Callable[..., Node]) -> None:
        page = make_page("About")
        result = PageService(site).delete(page.id)
        assert result.data == {"id": page.id, "path": "/about", "deleted": True}
        assert site.tree.get(page.id) is None

    def test_delete_with_children(self, site: Site, make_page: Callable[..., Node]) -> None:
        blog = make_page("Blog")
        make_page("Post", parent_id=blog.id)
        assert PageService(site).delete(blog.id).error.code == "INVALID_OPERATION"


class TestShow:
    def test_root_by_default(self, site: Site) -> None:
        result = PageService(site).show()
        assert result.data["id"] == 1
        assert result.data["path"] == "/"

    def test_by_path(self, site: Site, make_page: Callable[..., Node]) -> None:
        blog = make_page("Blog")
        post = make_page("Post", parent_id=blog.id)
        result = PageService(site).show(path="/blog")
        assert result.data["id"] == blog.id
        assert result.data["children"] == [{"id": post.id, "name": "post", "title": "Post"}]

    def test_unknown_path(self, site: Site) -> None:
        assert PageService(site).show(path="/nowhere").error.code == "NOT_FOUND"

    def test_history_and_trash(
        self, site: Site, make_page: Callable[..., Node], clock: FakeClock
    ) -> None:
        page = make_page("About")
        clock.advance(600)
        service = PageService(site)
        service.rename(page.id, "company")
        service.trash(page.id)
        result = service.show(page.id)
        assert result.data["history"] == ["/about"]
        assert result.data["in_trash"] is True
