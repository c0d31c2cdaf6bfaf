"""UniquenessResolver — turn a candidate name into a free one.

Each existence check is its own short query, so two writers can both
see a name as free. The storage constraint catches the loser at commit
time and the caller retries with :meth:`UniquenessResolver.uniquify`.
The increment loop is capped; running into the cap raises
:class:`NameExhaustedError` instead of looping forever.
"""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager, nullcontext
from typing import TYPE_CHECKING

from pagetrail.domain.errors import NameExhaustedError
from pagetrail.domain.formats import FORMAT_RANDOM, FORMAT_UNTITLED_TIME
from pagetrail.domain.models import NameScope, Node, RandomNameOptions
from pagetrail.domain.names import random_candidate

if TYPE_CHECKING:
    from pagetrail.domain.formats import FormatInterpreter
    from pagetrail.domain.languages import LanguageProvider
    from pagetrail.domain.names import NameCodec
    from pagetrail.infrastructure.repositories.pages import PageTree

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 1000


class UniquenessResolver:
    """Generate names for pages and make them unique within a scope.

    Parameters:
        tree: Tree storage answering existence queries.
        codec: Name splitting, truncation, and increments.
        interpreter: Format evaluation. Its ``random`` format is bound
            to :meth:`unique_random_name`.
        languages: Optional language capability.
        max_attempts: Ceiling for the increment and random-draw loops.
        random_defaults: Options used when the ``random`` format fires.
    """

    def __init__(
        self,
        tree: PageTree,
        codec: NameCodec,
        interpreter: FormatInterpreter,
        *,
        languages: LanguageProvider | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        random_defaults: RandomNameOptions | None = None,
    ) -> None:
        self._tree = tree
        self._codec = codec
        self._interpreter = interpreter
        self._languages = languages
        self._max_attempts = max(1, max_attempts)
        self._random_defaults = random_defaults or RandomNameOptions()
        interpreter.bind_random(self.unique_random_name)

    # ------------------------------------------------------------------
    # Name assignment
    # ------------------------------------------------------------------

    def assign_new_name(
        self,
        node: Node,
        fmt: str = "",
        parent: Node | None = None,
        *,
        language_id: int | None = None,
    ) -> str:
        """Generate a unique name for *node*, or return "" if it already has one.

        A name counts as "already set" unless it is an ``untitled``
        placeholder. With *language_id* the format is evaluated with that
        language active and uniqueness is checked in that language only.
        """
        if language_id is not None and (
            self._languages is None or self._languages.is_default(language_id)
        ):
            language_id = None
        current = node.names.get(language_id, "") if language_id else node.name
        if current and not self._codec.is_untitled(current):
            return ""

        if parent is None and node.parent_id is not None:
            parent = self._tree.get(node.parent_id)
        if not fmt:
            fmt = self._interpreter.default_format(node, parent)

        with self._language_scope(language_id):
            name = self._interpreter.resolve(node, fmt, parent)

        scope = NameScope(
            exclude_id=node.id or None,
            parent_id=parent.id if parent is not None else node.parent_id,
            language_id=language_id,
        )
        return self.uniquify(name, scope, node=node)

    def named(self, node: Node, fmt: str = "", parent: Node | None = None) -> Node:
        """Return a copy of *node* carrying a generated name, when it needs one."""
        name = self.assign_new_name(node, fmt, parent)
        if not name:
            return node
        return node.model_copy(update={"name": name, "autogen_name": name})

    def uniquify(
        self,
        name: str,
        scope: NameScope | None = None,
        *,
        node: Node | None = None,
    ) -> str:
        """Increment *name* until nothing else in *scope* uses it.

        An empty *name* is first derived from *node*: the parent's child
        name format, else its default format, falling back to ``random`` for
        stored pages and ``untitled-time`` otherwise. The parent is the
        scope's, or the node's own when the scope names none.

        Raises:
            NameExhaustedError: the ceiling of ``max_attempts`` was reached.
        """
        scope = scope or NameScope()
        if not name:
            subject = node or Node()
            fallback = FORMAT_RANDOM if subject.is_stored else FORMAT_UNTITLED_TIME
            parent_id = scope.parent_id or subject.parent_id
            parent = self._tree.get(parent_id) if parent_id else None
            fmt = self._interpreter.default_format(subject, parent, fallback=fallback)
            name = self._interpreter.resolve(subject, fmt, parent)

        attempts = 0
        while self.exists_in_scope(name, scope):
            attempts += 1
            if attempts >= self._max_attempts:
                logger.error(
                    "Gave up finding a free name for %r under parent %s after %d attempts",
                    name,
                    scope.parent_id,
                    attempts,
                )
                raise NameExhaustedError(name, attempts)
            name = self._codec.increment(name)
        return name

    def exists_in_scope(self, name: str, scope: NameScope | None = None) -> bool:
        """Whether another page in *scope* already uses *name*.

        Without a pinned language every language's names are checked.
        """
        scope = scope or NameScope()
        return (
            self._tree.count_named(
                name,
                parent_id=scope.parent_id,
                exclude_id=scope.exclude_id,
                language_ids=self._language_columns(scope.language_id),
            )
            > 0
        )

    # ------------------------------------------------------------------
    # Random names
    # ------------------------------------------------------------------

    def unique_random_name(self, options: RandomNameOptions | None = None) -> str:
        """Draw random names until one is free in ``options.scope``.

        With ``confirm`` disabled the first draw is returned unchecked.
        """
        options = options or self._random_defaults
        for _ in range(self._max_attempts):
            name = random_candidate(options)
            if not options.confirm or not self.exists_in_scope(name, options.scope):
                return name
        logger.error("Random name space exhausted after %d draws", self._max_attempts)
        raise NameExhaustedError(options.prefix or "random", self._max_attempts)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _language_columns(self, language_id: int | None) -> list[int]:
        if self._languages is None:
            return [0]
        if language_id is None:
            return [0, *(lang.id for lang in self._languages.non_default())]
        if self._languages.is_default(language_id):
            return [0]
        return [language_id]

    def _language_scope(self, language_id: int | None) -> AbstractContextManager[None]:
        if self._languages is None or language_id is None:
            return nullcontext()
        return self._languages.activated(language_id)
