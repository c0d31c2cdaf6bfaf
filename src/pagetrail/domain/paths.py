"""Canonical page paths.

Canonical form: a single leading slash, no trailing slash, no empty
segments, non-ASCII characters percent-encoded. The root is ``/``.
Normalizing is idempotent, so paths built from live names and paths
taken from inbound requests compare equal.
"""

from __future__ import annotations

from urllib.parse import quote, unquote

ROOT_PATH = "/"

_SAFE = "/-_.~"


def split_segments(path: str) -> list[str]:
    """Return the non-empty ``/``-delimited segments of *path*."""
    return [s for s in path.strip().split("/") if s]


def normalize_path(path: str) -> str:
    """Return the canonical, ASCII-safe form of *path*.

    Examples:
        >>> normalize_path("blog//old-post/")
        '/blog/old-post'
        >>> normalize_path("/")
        '/'
    """
    segments = [quote(unquote(s), safe=_SAFE) for s in split_segments(path)]
    return ROOT_PATH + "/".join(segments)


def join_path(base: str, *segments: str) -> str:
    """Append *segments* to *base* and normalize the result."""
    parts = split_segments(base)
    for segment in segments:
        parts.extend(split_segments(segment))
    return normalize_path("/".join(parts))


def peel(path: str) -> tuple[str, str]:
    """Split the last segment off a canonical path.

    Examples:
        >>> peel("/blog/old-post")
        ('/blog', 'old-post')
        >>> peel("/blog")
        ('/', 'blog')
    """
    head, _, last = path.rstrip("/").rpartition("/")
    return head or ROOT_PATH, last


def segment_count(path: str) -> int:
    return len(split_segments(path))


def decode_segment(segment: str) -> str:
    """Undo percent-encoding so a segment can be matched against stored names."""
    return unquote(segment)
