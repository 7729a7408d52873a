"""Commands: term-preserving translation and cache maintenance."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mandictl.commands._base import LANGUAGE, MandiCommand, MandiGroup

if TYPE_CHECKING:
    from mandictl.commands._context import AppContext


@click.command(
    cls=MandiCommand,
    examples="""\
  mandictl translate "hello, the price is ₹500 per kg" --to hi
  mandictl translate "thank you" --from en --to ta
  mandictl --json translate "good offer" --to te""",
)
@click.argument("text")
@click.option(
    "--from", "from_lang", type=LANGUAGE, default="en", show_default=True, help="Source language."
)
@click.option("--to", "to_lang", type=LANGUAGE, required=True, help="Target language.")
@click.pass_obj
def translate(app: AppContext, text: str, from_lang: str, to_lang: str) -> None:
    """Translate TEXT while keeping prices and trade terms intact."""
    app.emit(app.assistant.translate(text, from_lang, to_lang))


@click.group(
    cls=MandiGroup,
    examples="""\
  mandictl cache stats
  mandictl cache clear""",
)
@click.pass_obj
def cache(app: AppContext) -> None:
    """Inspect or reset the translation cache."""


@cache.command()
@click.pass_obj
def stats(app: AppContext) -> None:
    """Show cache size and hit statistics."""
    app.emit(app.assistant.cache_stats())


@cache.command()
@click.pass_obj
def clear(app: AppContext) -> None:
    """Remove every cached translation."""
    app.emit(app.assistant.cache_clear())
