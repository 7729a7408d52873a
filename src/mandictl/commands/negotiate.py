"""Commands: negotiation advice, compromise, stall detection and tips."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mandictl.commands._base import MandiCommand, lang_option

if TYPE_CHECKING:
    from mandictl.commands._context import AppContext


@click.command(
    cls=MandiCommand,
    examples="""\
  mandictl negotiate tomato 25
  mandictl negotiate tomato 20 --market-price 20 --previous 22
  mandictl negotiate onion 30 --previous 28 --previous 29 --lang hi
  mandictl -q negotiate wheat 1800""",
)
@click.argument("commodity")
@click.argument("offer", type=float)
@click.option("--market-price", type=float, default=None, help="Reference price to compare with.")
@click.option(
    "--previous",
    "previous_offers",
    type=float,
    multiple=True,
    help="Earlier offer, oldest first (repeatable).",
)
@lang_option
@click.pass_obj
def negotiate(
    app: AppContext,
    commodity: str,
    offer: float,
    market_price: float | None,
    previous_offers: tuple[float, ...],
    language: str | None,
) -> None:
    """Get advice on a buyer's OFFER for COMMODITY."""
    app.emit(
        app.assistant.negotiate(
            commodity,
            offer,
            market_price=market_price,
            previous_offers=previous_offers,
            language=language or app.default_language,
        )
    )


@click.command(
    cls=MandiCommand,
    examples="""\
  mandictl compromise 20 25""",
)
@click.argument("your_offer", type=float)
@click.argument("their_offer", type=float)
@click.pass_obj
def compromise(app: AppContext, your_offer: float, their_offer: float) -> None:
    """Suggest meeting in the middle of two offers."""
    app.emit(app.assistant.compromise(your_offer, their_offer))


@click.command(
    cls=MandiCommand,
    examples="""\
  mandictl stalled 100 101 100""",
)
@click.argument("offers", type=float, nargs=-1, required=True)
@click.pass_obj
def stalled(app: AppContext, offers: tuple[float, ...]) -> None:
    """Check whether the last three OFFERS have stopped moving."""
    app.emit(app.assistant.stalled(offers))


@click.command(
    cls=MandiCommand,
    examples="""\
  mandictl tips
  mandictl tips --lang hi""",
)
@lang_option
@click.pass_obj
def tips(app: AppContext, language: str | None) -> None:
    """Show negotiation tips."""
    app.emit(app.assistant.tips(language or app.default_language))
