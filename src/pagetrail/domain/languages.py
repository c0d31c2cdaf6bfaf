"""Optional multi-language capability.

A site either has a :class:`LanguageProvider` or it has ``None``; all
per-language logic branches on that presence. The provider enumerates
languages and scopes an *active* language (a ContextVar) that field
lookups consult while names are generated.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from pydantic import BaseModel

_active_language: ContextVar[int | None] = ContextVar("_active_language", default=None)


class Language(BaseModel):
    """A site language. Id 0 is reserved for "no language"."""

    model_config = {"frozen": True}

    id: int
    name: str
    is_default: bool = False


class LanguageProvider:
    """Enumerable set of languages with exactly one default."""

    def __init__(self, languages: Iterable[Language]) -> None:
        self._languages = list(languages)
        if not self._languages:
            msg = "LanguageProvider needs at least one language"
            raise ValueError(msg)
        defaults = [lang for lang in self._languages if lang.is_default]
        if len(defaults) > 1:
            msg = f"Multiple default languages: {[lang.name for lang in defaults]}"
            raise ValueError(msg)
        if not defaults:
            first = self._languages[0]
            self._languages[0] = first.model_copy(update={"is_default": True})
        self._by_id = {lang.id: lang for lang in self._languages}

    def __iter__(self) -> Iterator[Language]:
        return iter(self._languages)

    def __len__(self) -> int:
        return len(self._languages)

    @property
    def default(self) -> Language:
        return next(lang for lang in self._languages if lang.is_default)

    def get(self, language_id: int) -> Language | None:
        return self._by_id.get(language_id)

    def is_default(self, language_id: int | None) -> bool:
        """Whether *language_id* names the default language (0 counts as default)."""
        if not language_id:
            return True
        return language_id == self.default.id

    def non_default(self) -> list[Language]:
        return [lang for lang in self._languages if not lang.is_default]

    # ------------------------------------------------------------------
    # Active-language scoping
    # ------------------------------------------------------------------

    @property
    def active(self) -> Language | None:
        language_id = _active_language.get()
        return None if language_id is None else self._by_id.get(language_id)

    def set_active(self, language_id: int) -> None:
        _active_language.set(language_id)

    def clear_active(self) -> None:
        _active_language.set(None)

    @contextmanager
    def activated(self, language_id: int | None) -> Iterator[None]:
        """Temporarily make *language_id* the active language."""
        token = _active_language.set(language_id)
        try:
            yield
        finally:
            _active_language.reset(token)


def active_language_id(provider: LanguageProvider | None) -> int:
    """Active non-default language id, or 0 when none is active."""
    if provider is None:
        return 0
    active = provider.active
    if active is None or active.is_default:
        return 0
    return active.id
