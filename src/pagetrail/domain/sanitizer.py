"""Reduce arbitrary text to the page-name and page-path alphabets.

ASCII mode keeps ``[a-z0-9._-]`` and drops everything else. Translate
mode first transliterates accented characters (NFKD, then drop the
combining marks). UTF-8 mode keeps any Unicode word character. Runs
of anything else collapse to a single ``-``. Leading and trailing
delimiters are stripped.
"""

from __future__ import annotations

import re
import unicodedata

from pagetrail.domain.types import CharsetMode

PAGE_NAME_MAX_LENGTH = 128

_ASCII_INVALID = re.compile(r"[^a-z0-9._-]+")
_UTF8_INVALID = re.compile(r"[^\w.-]+")
_DELIMITER_RUNS = re.compile(r"([._-])[._-]+")
_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_TRIM = "-_."


def _to_ascii(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return decomposed.encode("ascii", "ignore").decode("ascii")


def to_page_name(
    raw: str,
    mode: CharsetMode = CharsetMode.ASCII,
    *,
    max_length: int = PAGE_NAME_MAX_LENGTH,
) -> str:
    """Sanitize *raw* into a page name.

    Examples:
        >>> to_page_name("Hello World!")
        'hello-world'
        >>> to_page_name("Crème Brûlée", CharsetMode.TRANSLATE)
        'creme-brulee'
        >>> to_page_name("Crème Brûlée", CharsetMode.UTF8)
        'crème-brûlée'
    """
    text = raw.strip().lower()
    if mode == CharsetMode.UTF8:
        text = unicodedata.normalize("NFC", text)
        text = _UTF8_INVALID.sub("-", text)
    elif mode == CharsetMode.TRANSLATE:
        text = _ASCII_INVALID.sub("-", _to_ascii(text))
    else:
        text = text.encode("ascii", "ignore").decode("ascii")
        text = _ASCII_INVALID.sub("-", text)
    text = _DELIMITER_RUNS.sub(r"\1", text)
    text = text.strip(_TRIM)
    if max_length > 0:
        text = text[:max_length].rstrip(_TRIM)
    return text


def to_path_name(raw: str, mode: CharsetMode = CharsetMode.ASCII) -> str:
    """Sanitize every ``/``-separated segment of *raw*.

    Empty segments are dropped; a leading slash is preserved.
    """
    segments = [to_page_name(part, mode) for part in raw.split("/")]
    path = "/".join(s for s in segments if s)
    if raw.startswith("/"):
        return "/" + path
    return path


def is_field_name(token: str) -> bool:
    """Whether *token* is a syntactically valid field name."""
    return _FIELD_NAME.match(token) is not None
