"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). Renderers
are dispatched by ``result.op`` in :func:`render_result`; unknown ops
fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from pagetrail.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from pagetrail.services.result import ServiceResult

Renderer = Callable[["ServiceResult", "Console"], None]

# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    The single most useful value of each op: a name, a URL, a path list.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    data = result.data
    if result.op == "resolve_path":
        return str(data.get("url", ""))
    if result.op == "list_history":
        return "\n".join(str(p["path"]) for p in data.get("paths", []))
    if result.op == "random_name":
        return "\n".join(data.get("names", []))
    if "name" in data:
        return str(data["name"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "pt.ok"), (f"  {result.op}", "pt.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    if isinstance(value, (dict, list)):
        value = _json.dumps(value, separators=(",", ":"))
    k = Text(f"  {key}: ", style="pt.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="pt.id")
    elif key in ("path", "old_path"):
        v = Text(str(value), style="pt.path")
    elif key == "url":
        v = Text(str(value), style="pt.url")
    elif key == "name":
        v = Text(str(value), style="pt.name")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="pt.error")
    op = Text(f"  {result.op}", style="pt.op")
    console.print(Text.assemble(label, op, "  ", msg))
    if verbose and err is not None:
        console.print(Text(f"  code: {err.code} ({err.kind.value})", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Renderers ─────────────────────────────────────────────────────────


def _render_page(result: ServiceResult, console: Console) -> None:
    """Render create/rename/move/trash/restore results."""
    _status_line(console, result)
    for key in ("id", "name", "title", "path", "old_path", "status"):
        value = result.data.get(key)
        if value not in (None, ""):
            _field(console, key, value)


def _render_show(result: ServiceResult, console: Console) -> None:
    d = result.data
    _render_page(result, console)
    if d.get("in_trash"):
        console.print(Text("  in trash", style="pt.trash"))
    if d.get("names"):
        _field(console, "names", d["names"])
    children = d.get("children", [])
    if children:
        table = Table(show_header=True, pad_edge=False, expand=False, title="children")
        table.add_column("ID", style="pt.id")
        table.add_column("Name", style="pt.name")
        table.add_column("Title")
        for child in children:
            table.add_row(str(child["id"]), child["name"], child["title"])
        console.print(table)
    for path in d.get("history", []):
        console.print(Text(f"  was: {path}", style="pt.path"))


def _render_history(result: ServiceResult, console: Console) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "id", d.get("id"))
    _field(console, "path", d.get("path"))
    paths = d.get("paths", [])
    if not paths:
        console.print(Text("  no recorded paths", style="dim"))
        return

    extra = [k for k in ("language_id", "created", "ancestor_id") if any(k in p for p in paths)]
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Path", style="pt.path")
    for key in extra:
        table.add_column(key.replace("_", " ").title())
    for entry in paths:
        style = "pt.virtual" if entry.get("virtual") else ""
        cells = [str(entry.get(key, "")) for key in extra]
        table.add_row(entry["path"], *cells, style=style)
    console.print(table)


def _render_resolve(result: ServiceResult, console: Console) -> None:
    d = result.data
    _status_line(console, result)
    arrow = Text.assemble(
        (str(d.get("path")), "pt.path"),
        "  →  " if d.get("redirect") else "  =  ",
        (str(d.get("url")), "pt.url"),
    )
    console.print(Text.assemble("  ", arrow))
    _field(console, "id", d.get("id"))
    if d.get("language"):
        _field(console, "language", d["language"].get("name") or d["language"].get("id"))
    if d.get("peeled"):
        _field(console, "peeled", d["peeled"])
    if d.get("depth"):
        _field(console, "depth", d["depth"])


def _render_random(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for name in result.data.get("names", []):
        console.print(Text(f"  {name}", style="pt.name"))


def _render_generic(result: ServiceResult, console: Console) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Renderer] = {
    "create_page": _render_page,
    "rename_page": _render_page,
    "move_page": _render_page,
    "trash_page": _render_page,
    "restore_page": _render_page,
    "show_page": _render_show,
    "list_history": _render_history,
    "resolve_path": _render_resolve,
    "random_name": _render_random,
}
