"""Rich Console factory and theme for mandictl output.

Consoles render to a StringIO buffer, preserving the
``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich disables color codes automatically.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

MANDI_THEME = Theme(
    {
        "mandi.ok": "bold green",
        "mandi.error": "bold red",
        "mandi.warning": "bold yellow",
        "mandi.op": "bold cyan",
        "mandi.key": "dim",
        "mandi.id": "bold blue",
        "mandi.price": "bold magenta",
        "mandi.counter": "yellow",
        "mandi.accept": "green",
        "mandi.reject": "red",
        "mandi.info": "cyan",
        "mandi.trend.rising": "red",
        "mandi.trend.falling": "green",
    }
)

_SUGGESTION_STYLES: dict[str, str] = {
    "counter": "mandi.counter",
    "accept": "mandi.accept",
    "reject": "mandi.reject",
    "info": "mandi.info",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=MANDI_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_suggestion(suggestion_type: str) -> str:
    return _SUGGESTION_STYLES.get(suggestion_type, "")
