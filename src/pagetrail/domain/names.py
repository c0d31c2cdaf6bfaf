"""Page-name parsing, length adjustment, and numeric-suffix increments.

A page name may end in a numbered suffix separated by the delimiter,
e.g. ``about-us-3``. The codec splits such names, renders them back,
and shortens over-long names without ever dropping the suffix.

INVARIANT: ``truncate(name, n)`` returns at most ``n`` characters.
INVARIANT: ``increment`` strictly increases the numeric suffix.
"""

from __future__ import annotations

import re
import secrets
import string
from dataclasses import dataclass

from pagetrail.domain.models import RandomNameOptions

DEFAULT_DELIMITER = "-"
DEFAULT_DELIMITERS: tuple[str, ...] = ("-", "_", ".")
DEFAULT_MAX_LENGTH = 128
DEFAULT_UNTITLED = "untitled"

# Cut at a word delimiter only when it sits in the last ~23% of the prefix.
_WORD_CUT_RATIO = 1.3

_DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class NameCodec:
    """Split, render, truncate, and increment page names.

    Attributes:
        delimiter: Separator placed before numeric suffixes.
        delimiters: Word delimiters recognised when truncating and trimming.
        max_length: Default maximum name length for :meth:`truncate`.
        untitled: Placeholder prefix for names with no better source.
    """

    delimiter: str = DEFAULT_DELIMITER
    delimiters: tuple[str, ...] = DEFAULT_DELIMITERS
    max_length: int = DEFAULT_MAX_LENGTH
    untitled: str = DEFAULT_UNTITLED

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def _parse(self, name: str, delimiter: str = "") -> tuple[str, str | None]:
        """Return ``(prefix, digits)`` where *digits* is the raw suffix text."""
        delimiter = delimiter or self.delimiter
        if delimiter not in name:
            return name, None
        prefix, _, suffix = name.rpartition(delimiter)
        if not _DIGITS.fullmatch(suffix):
            return name, None
        return prefix, suffix

    def split_name_and_number(self, name: str, delimiter: str = "") -> tuple[str, int]:
        """Split *name* into ``(prefix, number)``.

        Returns ``(name, 0)`` when there is no numbered suffix. Leading
        zeros in the suffix are not significant.

        Examples:
            >>> NameCodec().split_name_and_number("about-us-3")
            ('about-us', 3)
            >>> NameCodec().split_name_and_number("about-us")
            ('about-us', 0)
        """
        prefix, digits = self._parse(name, delimiter)
        if digits is None:
            return name, 0
        return prefix, int(digits)

    def join(self, prefix: str, number: int) -> str:
        """Render *prefix* and *number* back into a name."""
        return f"{prefix}{self.delimiter}{number}"

    def has_number_suffix(self, name: str, *, get_prefix: bool = False) -> int | str | None:
        """Return the numbered suffix (or the prefix), or None when absent."""
        prefix, number = self.split_name_and_number(name)
        if not number:
            return None
        return prefix if get_prefix else number

    def is_untitled(self, name: str) -> bool:
        """Whether *name* is an ``untitled`` placeholder, numbered or not."""
        prefix, _ = self.split_name_and_number(name)
        return prefix == self.untitled

    # ------------------------------------------------------------------
    # Transformations
    # ------------------------------------------------------------------

    def truncate(self, name: str, max_length: int = 0) -> str:
        """Shorten *name* to *max_length*, keeping any numbered suffix.

        The cut moves back to the right-most word delimiter when that
        delimiter is close to the end, and trailing delimiters are trimmed.
        """
        limit = max_length if max_length > 0 else self.max_length
        if len(name) <= limit:
            return name

        prefix, digits = self._parse(name)
        suffix = ""
        budget = limit
        if digits is not None:
            suffix = self.delimiter + digits
            if len(suffix) >= limit:
                return name[:limit]
            budget -= len(suffix)

        prefix = prefix[:budget]

        pos = max((prefix.rfind(c) for c in self.delimiters), default=-1)
        if pos <= 0 or pos < len(prefix) / _WORD_CUT_RATIO:
            pos = budget

        trimmed = prefix[:pos].rstrip("".join(self.delimiters))
        return trimmed + suffix

    def increment(self, name: str, number: int | None = None) -> str:
        """Bump the numbered suffix of *name*, or add ``-1`` when absent.

        A zero-padded suffix keeps its width (``page-007`` -> ``page-008``).
        An ``untitled-time`` stamp counts as a suffix too, so a clash within
        one second bumps the stamp instead of appending ``-1``.
        An explicit *number* replaces the suffix instead.
        """
        prefix, digits = self._parse(name)

        if digits is not None:
            if number:
                name = self.join(prefix, int(number))
            else:
                value = str(int(digits) + 1)
                if digits.startswith("0"):
                    value = value.zfill(len(digits))
                name = f"{prefix}{self.delimiter}{value}"
        else:
            name = self.join(name, 1 if number is None else number)

        return self.truncate(name)


def random_candidate(options: RandomNameOptions) -> str:
    """Draw one random name (not checked for uniqueness).

    Alphanumeric names never start with a digit, so they cannot be
    mistaken for a numbered suffix or an id.
    """
    if options.length > 0:
        length = options.length
    else:
        low = options.min_length if options.min_length > 0 else 6
        high = options.max_length if options.max_length >= low else low * 2
        length = low + secrets.randbelow(high - low + 1)

    if options.alpha and options.numeric:
        first = secrets.choice(string.ascii_lowercase)
        alphabet = string.ascii_lowercase + string.digits
        body = first + "".join(secrets.choice(alphabet) for _ in range(length - 1))
    elif options.numeric:
        body = "".join(secrets.choice(string.digits) for _ in range(length))
    else:
        body = "".join(secrets.choice(string.ascii_lowercase) for _ in range(length))

    return f"{options.prefix}{body}{options.suffix}"
