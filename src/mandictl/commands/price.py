"""Commands: commodity price lookup and name suggestions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mandictl.commands._base import MandiCommand, lang_option

if TYPE_CHECKING:
    from mandictl.commands._context import AppContext


@click.command(
    cls=MandiCommand,
    examples="""\
  mandictl price tomato
  mandictl price what is onion rate
  mandictl price टमाटर का भाव --lang hi
  mandictl --json price tamatar""",
)
@click.argument("query", nargs=-1, required=True)
@lang_option
@click.pass_obj
def price(app: AppContext, query: tuple[str, ...], language: str | None) -> None:
    """Look up today's mandi price for a commodity."""
    app.emit(app.assistant.price(" ".join(query), language or app.default_language))


@click.command(
    cls=MandiCommand,
    examples="""\
  mandictl suggest tom
  mandictl suggest pyaz --limit 3""",
)
@click.argument("partial")
@click.option("--limit", default=5, type=int, show_default=True, help="Max suggestions.")
@click.pass_obj
def suggest(app: AppContext, partial: str, limit: int) -> None:
    """Suggest commodity names that contain PARTIAL."""
    app.emit(app.assistant.suggest(partial, limit=limit))
