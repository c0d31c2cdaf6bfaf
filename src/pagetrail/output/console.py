"""Rich Console factory and theme for pagetrail output.

Consoles render to a StringIO buffer so ``format_result() -> str`` stays
a plain function. In non-TTY environments (tests, pipes) Rich disables
color codes automatically.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PAGETRAIL_THEME = Theme(
    {
        "pt.ok": "bold green",
        "pt.error": "bold red",
        "pt.warning": "bold yellow",
        "pt.op": "bold cyan",
        "pt.key": "dim",
        "pt.id": "bold blue",
        "pt.path": "dim",
        "pt.url": "bold magenta",
        "pt.name": "bold",
        "pt.virtual": "italic dim",
        "pt.trash": "red",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=PAGETRAIL_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
