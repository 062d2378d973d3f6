"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer. User-supplied
text (labels, ids) is always wrapped in ``Text`` so it is never parsed as
Rich markup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from mindlattice.output.console import create_console, get_output

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from mindlattice.services.result import ServiceResult

    _Renderer = Callable[[ServiceResult, Console], None]


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
    else:
        _render_error(result, console)
    if verbose:
        _render_meta(console, result)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output: ids for lists, raw content for renders and exports."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if "content" in result.data:
        return str(result.data["content"]).rstrip("\n")
    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if isinstance(item, dict))
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="ml.ok"), Text(f"  {result.op}", style="ml.op"))


def _field(console: Console, key: str, value: Any) -> None:
    if key == "id" or key.endswith("_id") or key in ("source", "target", "start"):
        style = "ml.id"
    elif key == "label":
        style = "ml.label"
    elif key == "tier":
        style = "ml.tier"
    else:
        style = ""
    if isinstance(value, list):
        value = ", ".join(str(v) for v in value) or "-"
    console.print(Text(f"  {key}:", style="ml.key"), Text(str(value), style=style))


def _render_saved(console: Console, result: ServiceResult) -> None:
    if result.data.get("saved_to"):
        _field(console, "saved_to", result.data["saved_to"])


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the telemetry span tree when present."""
    telemetry = (result.meta or {}).get("telemetry")
    if not telemetry:
        return
    console.print()
    console.print(Text("  telemetry:", style="dim"))
    _render_span(console, telemetry, indent=4)


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    line = Text(" " * indent)
    line.append(f"{span.get('duration_ms', 0.0):>8.2f}ms", style="dim")
    line.append(f"  {span.get('name', '?')}")
    annotations = span.get("annotations") or {}
    if annotations:
        line.append(f"  ({', '.join(f'{k}={v}' for k, v in annotations.items())})", style="dim")
    console.print(line)
    for child in span.get("children", []):
        _render_span(console, child, indent + 2)


# ── Renderers ─────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console) -> None:
    code = result.error.code if result.error else "ERROR"
    message = result.error.message if result.error else "Unknown error"
    console.print(
        Text("ERROR", style="ml.error"),
        Text(f"  {result.op}", style="ml.op"),
        Text(f"  [{code}] {message}"),
    )
    for entry in result.data.get("errors", []):
        where = f"{entry.get('section', '?')}[{entry.get('index')}]"
        console.print(Text(f"  - {where}: {entry.get('error', '')}"))


def _render_anchor(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    d = result.data
    for key in ("id", "label", "tier", "content_hash", "epoch", "pinned_at", "recall_stored"):
        if key in d:
            _field(console, key, d[key])
    if d.get("recall_hash"):
        _field(console, "recall_hash", d["recall_hash"])
    _field(console, "out_links", d.get("out_links", []))
    _field(console, "in_links", d.get("in_links", []))
    _render_saved(console, result)


def _render_link(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key in ("id", "source", "target", "kind", "config_hash", "epoch", "forged_at"):
        if key in result.data:
            _field(console, key, result.data[key])
    _render_saved(console, result)


def _anchor_table(items: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("ID", style="ml.id", no_wrap=True)
    table.add_column("Tier", style="ml.tier", justify="right")
    table.add_column("Label", style="ml.label")
    table.add_column("Epoch", justify="right")
    table.add_column("Recall", style="ml.recall")
    for item in items:
        table.add_row(
            Text(str(item.get("id", ""))),
            Text(str(item.get("tier", ""))),
            Text(str(item.get("label", ""))),
            Text(str(item.get("epoch", ""))),
            Text("yes" if item.get("recall_stored") else "-"),
        )
    return table


def _render_anchor_list(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    if items:
        console.print(_anchor_table(items))
    console.print(f"{result.data.get('count', len(items))} anchors")


def _render_link_list(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    if items:
        table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
        table.add_column("ID", style="ml.id", no_wrap=True)
        table.add_column("From", style="ml.id")
        table.add_column("To", style="ml.id")
        table.add_column("Kind", justify="right")
        for item in items:
            table.add_row(
                Text(str(item.get("id", ""))),
                Text(str(item.get("source", ""))),
                Text(str(item.get("target", ""))),
                Text(str(item.get("kind", ""))),
            )
        console.print(table)
    console.print(f"{result.data.get('count', len(items))} links")


def _render_traverse(result: ServiceResult, console: Console) -> None:
    d = result.data
    items = d.get("items", [])
    if not items:
        console.print(Text(f"Anchor {d.get('start')} not found; nothing to traverse."))
        return
    chain = Text(" → ").join(Text(str(item.get("id", "?")), style="ml.id") for item in items)
    console.print(chain)
    console.print(
        f"\n{d.get('count', len(items))} anchors ({d.get('direction')}, depth ≤ {d.get('depth')})"
    )


def _render_degrees(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("ID", style="ml.id", no_wrap=True)
    table.add_column("Label", style="ml.label")
    table.add_column("Out", justify="right")
    table.add_column("In", justify="right")
    for item in items:
        table.add_row(
            Text(str(item.get("id", ""))),
            Text(str(item.get("label", ""))),
            str(item.get("out", 0)),
            str(item.get("in", 0)),
        )
    console.print(table)


def _render_content(result: ServiceResult, console: Console) -> None:
    """Raw text payloads (renders, exports) go out untouched."""
    content = str(result.data.get("content", ""))
    console.print(Text(content.rstrip("\n")), soft_wrap=True)


def _render_check(result: ServiceResult, console: Console) -> None:
    issues = result.data.get("issues", [])
    if not issues:
        console.print(Text("Lattice is consistent.", style="ml.ok"))
    for issue in issues:
        style = "ml.error" if issue.get("severity") == "error" else "ml.warning"
        console.print(
            Text(f"{issue.get('severity', '?').upper():<8}", style=style),
            Text(f"[{issue.get('category', '')}] {issue.get('message', '')}"),
        )
    console.print(
        f"\n{result.data.get('count', len(issues))} issues · "
        f"{result.data.get('anchors', 0)} anchors · {result.data.get('total_edges', 0)} links"
    )


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, _Renderer] = {
    "pin_anchor": _render_anchor,
    "store_recall": _render_anchor,
    "get_anchor": _render_anchor,
    "by_content_hash": _render_anchor,
    "forge_link": _render_link,
    "sever_link": _render_link,
    "get_link": _render_link,
    "find": _render_anchor_list,
    "sorted_by_pinned": _render_anchor_list,
    "epoch_filter": _render_anchor_list,
    "links": _render_link_list,
    "traverse": _render_traverse,
    "degrees": _render_degrees,
    "render": _render_content,
    "render_map": _render_content,
    "export_json": _render_content,
    "export_dot": _render_content,
    "check": _render_check,
}
