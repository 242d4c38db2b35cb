"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from folio.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from folio.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(_extract_key(item) for item in items if _extract_key(item))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_key(item: Any) -> str:
    if isinstance(item, dict):
        for key in ("slug", "id"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "folio.ok"), (f"  {result.op}", "folio.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="folio.key")
    if key in ("slug", "id"):
        v = Text(str(value), style="folio.slug")
    elif key in ("path", "out_dir"):
        v = Text(str(value), style="folio.path")
    elif key == "title":
        v = Text(str(value), style="folio.title")
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text.assemble(("ERROR", "folio.error"), (f"  {result.op}", "folio.op"), " — ", msg)
    )

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Document renderers ────────────────────────────────────────────────


def _render_document_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render list_documents as a table, newest first."""
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Slug", style="folio.slug", no_wrap=True)
    table.add_column("Title", style="folio.title")
    table.add_column("Date", style="folio.date", no_wrap=True)
    table.add_column("Tags")
    if verbose:
        table.add_column("Description", style="dim")

    for item in items:
        row = [
            str(item.get("slug", "")),
            str(item.get("title", "")),
            str(item.get("date", "")),
            ", ".join(item.get("tags") or []),
        ]
        if verbose:
            row.append(str(item.get("description") or ""))
        table.add_row(*(Text(cell) for cell in row))

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} documents")


def _render_document(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render get_document as a panel with header fields and body."""
    d = result.data
    lines: list[str] = [f"date: {d.get('date', '')}"]
    if d.get("description"):
        lines.append(f"description: {d['description']}")
    tags = d.get("tags", [])
    if tags:
        lines.append(f"tags: {', '.join(tags)}")

    content = "\n".join(lines)
    body = d.get("body", "")
    if body:
        content += f"\n\n{body.strip()}"

    title = f"{d.get('slug', '?')} — {d.get('title', 'Untitled')}"
    console.print(Panel(Text(content), title=Text(title), border_style="dim", expand=False))


# ── Like renderers ────────────────────────────────────────────────────


def _render_like_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="folio.slug", no_wrap=True)
    table.add_column("Likes", justify="right")
    table.add_column("Liked", style="folio.liked")
    for item in items:
        table.add_row(
            Text(str(item.get("id", ""))),
            Text(str(item.get("likes", 0))),
            Text("yes" if item.get("liked_by_me") else ""),
        )
    console.print(table)


# ── Mutation renderers ────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render new_document / toggle_like / build_site results."""
    _status_line(console, result)
    for key in ("id", "slug", "path", "likes", "liked_by_me", "out_dir", "pages", "collections"):
        if key in result.data:
            _field(console, key, result.data[key])


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "list_documents": _render_document_table,
    "get_document": _render_document,
    "new_document": _render_mutation,
    "build_site": _render_mutation,
    "like_status": _render_like_table,
    "toggle_like": _render_mutation,
}
