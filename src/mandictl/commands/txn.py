"""Command group: transaction ledger."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, time
from typing import TYPE_CHECKING, Any

import click

from mandictl.commands._base import MandiGroup
from mandictl.domain.transactions import Party, TransactionStatus

if TYPE_CHECKING:
    from mandictl.commands._context import AppContext

_TXN_EXAMPLES = """\
  mandictl txn record --buyer B1 --seller S1 tomato 50 20
  mandictl txn complete TXN-1a2b3c4d
  mandictl txn rate TXN-1a2b3c4d --by buyer 5
  mandictl txn cancel TXN-1a2b3c4d --reason "quality mismatch"
  mandictl txn list --user S1 --status completed
  mandictl txn list --commodity tom --from 2026-01-01 --to 2026-01-31
  mandictl txn summary S1 --from 2026-01-01
  mandictl txn commodities S1
  mandictl txn partners S1"""


@click.group(cls=MandiGroup, examples=_TXN_EXAMPLES)
@click.pass_obj
def txn(app: AppContext) -> None:
    """Record deals and review trading history."""


@txn.command()
@click.argument("commodity")
@click.argument("quantity", type=float)
@click.argument("agreed_price", type=float)
@click.option("--buyer", "buyer_id", required=True, help="Buyer id.")
@click.option("--seller", "seller_id", required=True, help="Seller id.")
@click.option("--notes", default=None, help="Free-text notes.")
@click.pass_obj
def record(
    app: AppContext,
    commodity: str,
    quantity: float,
    agreed_price: float,
    buyer_id: str,
    seller_id: str,
    notes: str | None,
) -> None:
    """Record a pending deal of QUANTITY units at AGREED_PRICE each."""
    app.emit(
        app.assistant.record_transaction(
            buyer_id, seller_id, commodity, quantity, agreed_price, notes=notes
        )
    )


@txn.command()
@click.argument("transaction_id")
@click.pass_obj
def complete(app: AppContext, transaction_id: str) -> None:
    """Mark a pending transaction completed."""
    app.emit(app.assistant.complete_transaction(transaction_id))


@txn.command()
@click.argument("transaction_id")
@click.option("--reason", default=None, help="Why the deal fell through.")
@click.pass_obj
def cancel(app: AppContext, transaction_id: str, reason: str | None) -> None:
    """Cancel a pending transaction."""
    app.emit(app.assistant.cancel_transaction(transaction_id, reason=reason))


@txn.command()
@click.argument("transaction_id")
@click.argument("rating", type=int)
@click.option(
    "--by",
    type=click.Choice([p.value for p in Party]),
    required=True,
    help="Which party is rating.",
)
@click.pass_obj
def rate(app: AppContext, transaction_id: str, rating: int, by: str) -> None:
    """Rate a completed transaction from 1 to 5."""
    app.emit(app.assistant.rate_transaction(transaction_id, by, rating))


_DATE = click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S"])


def _through_end_of_day(
    _ctx: click.Context, _param: click.Parameter, value: datetime | None
) -> datetime | None:
    if value is None or value.time() != time.min:
        return value
    return datetime.combine(value.date(), time.max)


def date_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """``--from``/``--to`` bounds on ``created_at`` (UTC, inclusive)."""
    func = click.option(
        "--to",
        "date_to",
        type=_DATE,
        default=None,
        callback=_through_end_of_day,
        help="Latest date; a bare date covers that whole day.",
    )(func)
    return click.option("--from", "date_from", type=_DATE, default=None, help="Earliest date.")(
        func
    )


@txn.command("list")
@click.option("--user", "user_id", default=None, help="Only deals involving this user.")
@click.option("--commodity", default=None, help="Only commodities containing this text.")
@click.option(
    "--status",
    type=click.Choice([s.value for s in TransactionStatus]),
    default=None,
    help="Only this status.",
)
@date_options
@click.pass_obj
def list_cmd(
    app: AppContext,
    user_id: str | None,
    commodity: str | None,
    status: str | None,
    date_from: datetime | None,
    date_to: datetime | None,
) -> None:
    """List transactions, newest first."""
    app.emit(
        app.assistant.list_transactions(
            user_id=user_id,
            commodity=commodity,
            status=status,
            date_from=date_from,
            date_to=date_to,
        )
    )


@txn.command()
@click.argument("user_id")
@date_options
@click.pass_obj
def summary(
    app: AppContext, user_id: str, date_from: datetime | None, date_to: datetime | None
) -> None:
    """Totals over a user's completed transactions."""
    app.emit(app.assistant.transaction_summary(user_id, date_from=date_from, date_to=date_to))


@txn.command()
@click.argument("user_id")
@click.pass_obj
def commodities(app: AppContext, user_id: str) -> None:
    """Per-commodity totals of a user's completed deals."""
    app.emit(app.assistant.commodity_analytics(user_id))


@txn.command()
@click.argument("user_id")
@click.pass_obj
def partners(app: AppContext, user_id: str) -> None:
    """Per-partner totals and ratings of a user's completed deals."""
    app.emit(app.assistant.partner_analytics(user_id))
