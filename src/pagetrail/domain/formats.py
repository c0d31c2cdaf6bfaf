"""Name-format mini-language.

A format string is evaluated against a page in strict priority order:

1. ``title``          the page title (``untitled-time`` when empty)
2. ``random``         a globally unique random name
3. ``untitled``       the untitled token
4. ``untitled-time``  ``untitled-0YYMMDDHHMMSS``
5. ``...{field}...``  template with ``{field}`` / ``{a|b}`` placeholders
6. ``a|b|c``          first field with a non-empty value
7. ``date:PATTERN``   strftime pattern applied to now
8. contains `` `` or ``/``  the whole string is a strftime pattern
9. a field-name token the value of that field
10. anything else     the format text itself

The ordering is a compatibility contract. The leading ``0`` of the
``untitled-time`` suffix keeps timestamps apart from plain ``-N``
increments.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

from pagetrail.domain.languages import LanguageProvider, active_language_id
from pagetrail.domain.models import Node
from pagetrail.domain.names import NameCodec
from pagetrail.domain.sanitizer import is_field_name, to_page_name
from pagetrail.domain.types import CharsetMode

FORMAT_TITLE = "title"
FORMAT_RANDOM = "random"
FORMAT_UNTITLED = "untitled"
FORMAT_UNTITLED_TIME = "untitled-time"

DEFAULT_DATE_PATTERN = "%Y-%m-%d %H:%M:%S"
UNTITLED_TIME_PATTERN = "%y%m%d%H%M%S"

_PLACEHOLDER = re.compile(r"\{([^{}]*)\}")


def render_value(value: Any) -> str:
    """Render a field value as plain text."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime(DEFAULT_DATE_PATTERN)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return " ".join(render_value(v) for v in value)
    return str(value).strip()


class FormatInterpreter:
    """Evaluate name formats against pages.

    Args:
        codec: Supplies the untitled token and the length limit.
        charset: Output alphabet. ``ascii`` transliterates.
        random_name: Producer of globally unique random names. Without one,
            the ``random`` format raises :class:`ValueError`.
        clock: Source of "now" for date and ``untitled-time`` formats.
        languages: Optional language capability; the active language
            selects localized field values.
    """

    def __init__(
        self,
        codec: NameCodec,
        *,
        charset: CharsetMode = CharsetMode.ASCII,
        random_name: Callable[[], str] | None = None,
        clock: Callable[[], datetime] = datetime.now,
        languages: LanguageProvider | None = None,
    ) -> None:
        self._codec = codec
        self._charset = charset
        self._random_name = random_name
        self._clock = clock
        self._languages = languages

    def bind_random(self, random_name: Callable[[], str]) -> None:
        self._random_name = random_name

    # ------------------------------------------------------------------
    # Format selection
    # ------------------------------------------------------------------

    def default_format(
        self,
        node: Node,
        parent: Node | None = None,
        *,
        fallback: str = FORMAT_UNTITLED_TIME,
    ) -> str:
        """Pick the format used when none was given.

        The parent's ``child_name_format`` wins, then ``title`` when the
        page has one, then *fallback* for stored pages, else
        ``untitled-time``.
        """
        if parent is not None and parent.is_stored and parent.child_name_format:
            return parent.child_name_format
        if node.title.strip():
            return FORMAT_TITLE
        if node.is_stored and fallback:
            return fallback
        return FORMAT_UNTITLED_TIME

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def untitled_time(self) -> str:
        stamp = self._clock().strftime(UNTITLED_TIME_PATTERN)
        return f"{self._codec.untitled}{self._codec.delimiter}0{stamp}"

    def resolve(self, node: Node, fmt: str = "", parent: Node | None = None) -> str:
        """Produce a sanitized (but not yet unique) name for *node*."""
        if not fmt.strip():
            fmt = self.default_format(node, parent)
        fmt = fmt.strip()
        language_id = active_language_id(self._languages)

        if fmt == FORMAT_TITLE and not node.title_for(language_id).strip():
            fmt = FORMAT_UNTITLED_TIME

        if fmt == FORMAT_TITLE:
            name = node.title_for(language_id).strip()
        elif fmt == FORMAT_RANDOM:
            if self._random_name is None:
                msg = "The 'random' format needs a random-name generator"
                raise ValueError(msg)
            name = self._random_name()
        elif fmt == FORMAT_UNTITLED:
            name = self._codec.untitled
        elif fmt == FORMAT_UNTITLED_TIME:
            name = self.untitled_time()
        elif "}" in fmt:
            name = self._render_template(node, fmt, language_id)
        elif "|" in fmt:
            name = self._first_field(node, fmt.split("|"), language_id)
        elif fmt.startswith("date:"):
            pattern = fmt[len("date:") :].strip() or DEFAULT_DATE_PATTERN
            name = self._format_date(pattern)
        elif " " in fmt or "/" in fmt:
            name = self._format_date(fmt)
        elif is_field_name(fmt):
            name = render_value(node.field_value(fmt, language_id))
        else:
            name = ""

        if not name:
            name = fmt

        return self.sanitize(name)

    def sanitize(self, raw: str) -> str:
        """Reduce *raw* to the configured alphabet and length."""
        mode = CharsetMode.UTF8 if self._charset == CharsetMode.UTF8 else CharsetMode.TRANSLATE
        name = to_page_name(raw, mode, max_length=0)
        return self._codec.truncate(name)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _first_field(self, node: Node, field_names: list[str], language_id: int) -> str:
        for field_name in field_names:
            field_name = field_name.strip()
            if not field_name:
                continue
            text = render_value(node.field_value(field_name, language_id))
            if text:
                return text
        return ""

    def _render_template(self, node: Node, fmt: str, language_id: int) -> str:
        def _replace(match: re.Match[str]) -> str:
            return self._first_field(node, match.group(1).split("|"), language_id)

        return _PLACEHOLDER.sub(_replace, fmt).strip()

    def _format_date(self, pattern: str) -> str:
        try:
            return self._clock().strftime(pattern)
        except ValueError:
            # Unusable pattern: degrade to the literal text.
            return pattern
