"""Tests for the name-format mini-language."""

from __future__ import annotations

from datetime import datetime

import pytest

from pagetrail.domain.formats import FormatInterpreter
from pagetrail.domain.languages import Language, LanguageProvider
from pagetrail.domain.models import Node
from pagetrail.domain.names import NameCodec
from pagetrail.domain.types import CharsetMode

NOW = datetime(2024, 5, 1, 12, 0, 0)


@pytest.fixture
def interpreter() -> FormatInterpreter:
    return FormatInterpreter(NameCodec(), clock=lambda: NOW)


@pytest.fixture
def post() -> Node:
    return Node(parent_id=1, title="Hello World", fields={"author": "Ada", "summary": ""})


class TestResolve:
    def test_title(self, interpreter: FormatInterpreter, post: Node) -> None:
        assert interpreter.resolve(post, "title") == "hello-world"

    def test_empty_title_becomes_untitled_time(self, interpreter: FormatInterpreter) -> None:
        assert interpreter.resolve(Node(parent_id=1), "title") == "untitled-0240501120000"

    def test_untitled(self, interpreter: FormatInterpreter, post: Node) -> None:
        assert interpreter.resolve(post, "untitled") == "untitled"

    def test_untitled_time(self, interpreter: FormatInterpreter, post: Node) -> None:
        assert interpreter.resolve(post, "untitled-time") == "untitled-0240501120000"

    def test_random_needs_generator(self, interpreter: FormatInterpreter, post: Node) -> None:
        with pytest.raises(ValueError, match="random"):
            interpreter.resolve(post, "random")

    def test_random_uses_bound_generator(self, interpreter: FormatInterpreter, post: Node) -> None:
        interpreter.bind_random(lambda: "k3x9q2")
        assert interpreter.resolve(post, "random") == "k3x9q2"

    def test_template(self, interpreter: FormatInterpreter, post: Node) -> None:
        assert interpreter.resolve(post, "{author}-{title}") == "ada-hello-world"

    def test_template_alternatives(self, interpreter: FormatInterpreter, post: Node) -> None:
        assert interpreter.resolve(post, "{summary|author}") == "ada"

    def test_first_non_empty_field(self, interpreter: FormatInterpreter, post: Node) -> None:
        assert interpreter.resolve(post, "summary|author") == "ada"

    def test_date_prefix(self, interpreter: FormatInterpreter, post: Node) -> None:
        assert interpreter.resolve(post, "date:%Y") == "2024"

    def test_date_pattern_with_slash(self, interpreter: FormatInterpreter, post: Node) -> None:
        assert interpreter.resolve(post, "%Y/%m/%d") == "2024-05-01"

    def test_date_pattern_with_space(self, interpreter: FormatInterpreter, post: Node) -> None:
        assert interpreter.resolve(post, "%Y %m") == "2024-05"

    def test_field_token(self, interpreter: FormatInterpreter, post: Node) -> None:
        assert interpreter.resolve(post, "author") == "ada"

    def test_empty_field_falls_back_to_format_text(
        self, interpreter: FormatInterpreter, post: Node
    ) -> None:
        assert interpreter.resolve(post, "editor") == "editor"

    def test_literal_text(self, interpreter: FormatInterpreter, post: Node) -> None:
        assert interpreter.resolve(post, "landing-page") == "landing-page"

    def test_title_wins_over_field_named_title(self, interpreter: FormatInterpreter) -> None:
        node = Node(parent_id=1, title="Real", fields={"title": "Shadowed"})
        assert interpreter.resolve(node, "title") == "real"

    def test_blank_format_uses_default(self, interpreter: FormatInterpreter, post: Node) -> None:
        assert interpreter.resolve(post, "  ") == "hello-world"

    def test_truncates_to_codec_limit(self) -> None:
        interpreter = FormatInterpreter(NameCodec(max_length=5), clock=lambda: NOW)
        assert interpreter.resolve(Node(parent_id=1, title="Hello World"), "title") == "hello"


class TestDefaultFormat:
    def test_parent_child_format_wins(self, interpreter: FormatInterpreter, post: Node) -> None:
        parent = Node(id=4, parent_id=1, name="blog", child_name_format="date:%Y")
        assert interpreter.default_format(post, parent) == "date:%Y"

    def test_unstored_parent_format_ignored(
        self, interpreter: FormatInterpreter, post: Node
    ) -> None:
        parent = Node(parent_id=1, name="blog", child_name_format="date:%Y")
        assert interpreter.default_format(post, parent) == "title"

    def test_title(self, interpreter: FormatInterpreter, post: Node) -> None:
        assert interpreter.default_format(post) == "title"

    def test_stored_without_title_uses_fallback(self, interpreter: FormatInterpreter) -> None:
        node = Node(id=9, parent_id=1)
        assert interpreter.default_format(node, fallback="random") == "random"

    def test_new_without_title(self, interpreter: FormatInterpreter) -> None:
        assert interpreter.default_format(Node(parent_id=1)) == "untitled-time"


class TestSanitize:
    def test_ascii_transliterates(self, interpreter: FormatInterpreter) -> None:
        assert interpreter.sanitize("Über Uns") == "uber-uns"

    def test_utf8(self) -> None:
        interpreter = FormatInterpreter(NameCodec(), charset=CharsetMode.UTF8)
        assert interpreter.sanitize("Über Uns") == "über-uns"


class TestLanguages:
    def test_active_language_selects_title(self) -> None:
        provider = LanguageProvider(
            [Language(id=1, name="en", is_default=True), Language(id=2, name="de")]
        )
        interpreter = FormatInterpreter(NameCodec(), clock=lambda: NOW, languages=provider)
        node = Node(parent_id=1, title="About us", titles={2: "Über uns"})

        assert interpreter.resolve(node, "title") == "about-us"
        with provider.activated(2):
            assert interpreter.resolve(node, "title") == "uber-uns"

    def test_missing_translation_falls_back(self) -> None:
        provider = LanguageProvider(
            [Language(id=1, name="en", is_default=True), Language(id=2, name="de")]
        )
        interpreter = FormatInterpreter(NameCodec(), clock=lambda: NOW, languages=provider)
        with provider.activated(2):
            assert interpreter.resolve(Node(parent_id=1, title="Contact"), "title") == "contact"
