"""Tests for the optional language capability."""

from __future__ import annotations

import pytest

from pagetrail.domain.languages import Language, LanguageProvider, active_language_id


def _provider() -> LanguageProvider:
    return LanguageProvider(
        [
            Language(id=1, name="en", is_default=True),
            Language(id=2, name="de"),
            Language(id=3, name="fr"),
        ]
    )


class TestLanguageProvider:
    def test_default(self) -> None:
        assert _provider().default.name == "en"

    def test_first_becomes_default(self) -> None:
        provider = LanguageProvider([Language(id=5, name="nl"), Language(id=6, name="fy")])
        assert provider.default.id == 5

    def test_rejects_two_defaults(self) -> None:
        with pytest.raises(ValueError, match="Multiple default"):
            LanguageProvider(
                [
                    Language(id=1, name="en", is_default=True),
                    Language(id=2, name="de", is_default=True),
                ]
            )

    def test_rejects_empty(self) -> None:
        with pytest.raises(ValueError):
            LanguageProvider([])

    def test_is_default(self) -> None:
        provider = _provider()
        assert provider.is_default(0)
        assert provider.is_default(None)
        assert provider.is_default(1)
        assert not provider.is_default(2)

    def test_non_default(self) -> None:
        assert [lang.name for lang in _provider().non_default()] == ["de", "fr"]

    def test_get_and_len(self) -> None:
        provider = _provider()
        assert len(provider) == 3
        assert provider.get(3).name == "fr"
        assert provider.get(99) is None


class TestActiveLanguage:
    def test_activated_restores(self) -> None:
        provider = _provider()
        assert provider.active is None
        with provider.activated(2):
            assert provider.active.name == "de"
            with provider.activated(3):
                assert provider.active.name == "fr"
            assert provider.active.name == "de"
        assert provider.active is None

    def test_set_and_clear(self) -> None:
        provider = _provider()
        provider.set_active(3)
        try:
            assert active_language_id(provider) == 3
        finally:
            provider.clear_active()
        assert active_language_id(provider) == 0

    def test_default_language_counts_as_none(self) -> None:
        provider = _provider()
        with provider.activated(1):
            assert active_language_id(provider) == 0

    def test_no_provider(self) -> None:
        assert active_language_id(None) == 0
