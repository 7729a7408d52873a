"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from mandictl.output.console import create_console, get_output, style_for_suggestion

if TYPE_CHECKING:
    from rich.console import Console

    from mandictl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet`` mode: the one value a script wants."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    d = result.data
    if "items" in d and isinstance(d["items"], list):
        return "\n".join(_row_key(item) for item in d["items"])
    if "suggestion" in d:
        suggestion = d["suggestion"]
        price = suggestion.get("suggested_price")
        return str(price) if price is not None else str(suggestion.get("message", ""))
    for key in ("translated_text", "description", "id"):
        if key in d:
            return str(d[key])
    if "stalled" in d:
        return "yes" if d["stalled"] else "no"
    if "tips" in d:
        return "\n".join(d["tips"])
    return f"OK: {result.op}"


def _row_key(item: dict[str, Any]) -> str:
    for key in ("id", "partner_id", "commodity"):
        if key in item:
            return str(item[key])
    return ""


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="mandi.ok"), Text(f"  {result.op}", style="mandi.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="mandi.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="mandi.id")
    elif "price" in key or key in ("total_amount", "total_value"):
        v = Text(str(value), style="mandi.price")
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, ensure_ascii=False, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="mandi.error"),
        Text(f"  {result.op}", style="mandi.op"),
        " — ",
        Text(msg),
    )

    if err is None:
        return
    suggestions = err.detail.get("suggestions")
    if suggestions:
        console.print(Text(f"  did you mean: {', '.join(suggestions)}"))
    if verbose and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Commodity renderers ───────────────────────────────────────────────


def _render_price(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    c = d["commodity"]
    lines = [
        f"price: [mandi.price]{c['price_range']}[/mandi.price] per {c['unit']}",
        f"market: {c['market']}",
        f"trend: [mandi.trend.{c['trend']}]{c['trend']}[/mandi.trend.{c['trend']}]"
        f" ({c['change_percent']:+.1f}%)",
        f"category: {c['category']}",
    ]
    if d.get("related"):
        lines.append(f"related: {', '.join(d['related'])}")
    if verbose:
        lines.append(f"average: {c['average_price']}")
    title = f"{c['icon']} {c['name']}".strip()
    console.print(Panel("\n".join(lines), title=title, expand=False))
    console.print(Text(d["description"]))


def _render_suggest(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print("No matching commodities")
        return
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="mandi.id", no_wrap=True)
    table.add_column("Name")
    for item in items:
        table.add_row(str(item["id"]), f"{item.get('icon', '')} {item['name']}".strip())
    console.print(table)


# ── Negotiation renderers ─────────────────────────────────────────────


def _render_suggestion(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    s = d["suggestion"]
    style = style_for_suggestion(s["type"])
    console.print(
        Text(str(s["type"]).upper(), style=style),
        Text(f"  ({s['tone']})", style="dim"),
    )
    console.print(Text(f"  {s['message']}"))
    if s.get("suggested_price") is not None:
        _field(console, "suggested_price", f"₹{s['suggested_price']}")
    if s.get("rationale"):
        _field(console, "rationale", s["rationale"])
    if "reference_price" in d and d["reference_price"] is not None:
        _field(console, "reference_price", d["reference_price"])
    if d.get("phrase"):
        _field(console, "say", d["phrase"])
    if d.get("stalled"):
        console.print("  [mandi.warning]negotiation looks stalled[/mandi.warning]")


def _render_stalled(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    stalled = result.data.get("stalled", False)
    label = "stalled" if stalled else "still moving"
    console.print(f"{label}: {', '.join(str(o) for o in result.data.get('offers', []))}")


def _render_tips(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    for tip in result.data.get("tips", []):
        console.print(Text(f"  • {tip}"))


# ── Translation renderers ─────────────────────────────────────────────


def _render_translate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    console.print(Text(d["translated_text"]))
    _field(console, "languages", f"{d['source_lang']} -> {d['target_lang']}")
    _field(console, "confidence", f"{d['confidence']:.2f}")
    if d.get("preserved_terms"):
        _field(console, "preserved", ", ".join(d["preserved_terms"]))
    if d.get("needs_review"):
        console.print("  [mandi.warning]review suggested[/mandi.warning]")


# ── Ledger renderers ──────────────────────────────────────────────────


def _render_transaction(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    keys = ["id", "status", "commodity", "quantity", "agreed_price", "total_amount"]
    if verbose:
        keys += ["buyer_id", "seller_id", "created_at", "completed_at"]
    keys += ["buyer_rating", "seller_rating", "cancellation_reason"]
    for key in keys:
        value = result.data.get(key)
        if value is not None:
            _field(console, key, value)


def _render_transaction_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="mandi.id", no_wrap=True)
    table.add_column("Commodity")
    table.add_column("Qty", justify="right")
    table.add_column("Price", style="mandi.price", justify="right")
    table.add_column("Status")
    if verbose:
        table.add_column("Buyer")
        table.add_column("Seller")
    for item in items:
        row = [
            str(item["id"]),
            str(item["commodity"]),
            str(item["quantity"]),
            str(item["agreed_price"]),
            str(item["status"]),
        ]
        if verbose:
            row += [str(item["buyer_id"]), str(item["seller_id"])]
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} transactions")


def _render_commodity_analytics(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print(Text(f"No completed trades for {result.data.get('user_id')}"))
        return
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Commodity")
    table.add_column("Deals", justify="right")
    table.add_column("Volume", justify="right")
    table.add_column("Value", style="mandi.price", justify="right")
    table.add_column("Avg price", style="mandi.price", justify="right")
    for item in items:
        table.add_row(
            str(item["commodity"]),
            str(item["total_transactions"]),
            f"{item['total_volume']:g}",
            f"{item['total_value']:g}",
            f"{item['average_price']:.2f}",
        )
    console.print(table)


def _render_partner_analytics(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print(Text(f"No completed trades for {result.data.get('user_id')}"))
        return
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Partner", style="mandi.id", no_wrap=True)
    table.add_column("Role")
    table.add_column("Deals", justify="right")
    table.add_column("Value", style="mandi.price", justify="right")
    table.add_column("Rating", justify="right")
    for item in items:
        rating = item.get("average_rating")
        table.add_row(
            str(item["partner_id"]),
            str(item["role"]),
            str(item["total_transactions"]),
            f"{item['total_value']:g}",
            "-" if rating is None else f"{rating:.1f}",
        )
    console.print(table)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "price": _render_price,
    "suggest": _render_suggest,
    "negotiate": _render_suggestion,
    "compromise": _render_suggestion,
    "stalled": _render_stalled,
    "tips": _render_tips,
    "translate": _render_translate,
    "record_transaction": _render_transaction,
    "complete_transaction": _render_transaction,
    "cancel_transaction": _render_transaction,
    "rate_transaction": _render_transaction,
    "list_transactions": _render_transaction_table,
    "commodity_analytics": _render_commodity_analytics,
    "partner_analytics": _render_partner_analytics,
}
