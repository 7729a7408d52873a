"""TransactionLedger: records deals and their lifecycle.

Every mutation is persisted immediately under a single JSON slot.
Misuse (unknown id, illegal transition, out-of-range values) raises a
:class:`~mandictl.domain.errors.LedgerError` subclass.
"""

from __future__ import annotations

import builtins
import logging
from datetime import datetime

from pydantic import ValidationError

from mandictl.domain.errors import (
    InvalidTransactionStateError,
    LedgerValidationError,
    TransactionNotFoundError,
)
from mandictl.domain.transactions import (
    MAX_RATING,
    MIN_RATING,
    CommodityStats,
    DateRange,
    Party,
    PartnerStats,
    Transaction,
    TransactionStatus,
    TransactionSummary,
)
from mandictl.infrastructure.kvstore import KeyValueStore
from mandictl.services._helpers import (
    Clock,
    as_utc,
    new_id,
    read_json_slot,
    utc_now,
    write_json_slot,
)

logger = logging.getLogger(__name__)

DEFAULT_SLOT = "mandi_transactions"


class TransactionLedger:
    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock = utc_now,
        slot: str = DEFAULT_SLOT,
    ) -> None:
        self._store = store
        self._clock = clock
        self._slot = slot
        self._transactions: dict[str, Transaction] = {}
        self.load()

    def load(self) -> int:
        """Read persisted transactions, discarding the slot if it is unreadable."""
        self._transactions.clear()
        payload = read_json_slot(self._store, self._slot, logger)
        if payload is None:
            return 0
        try:
            loaded = [Transaction.model_validate(item) for item in payload]
        except (TypeError, ValueError) as exc:
            logger.warning("Discarding unreadable transaction ledger: %s", exc)
            return 0
        self._transactions = {t.id: t for t in loaded}
        return len(self._transactions)

    def save(self) -> None:
        write_json_slot(
            self._store,
            self._slot,
            [t.model_dump(mode="json") for t in self._transactions.values()],
        )

    def record(
        self,
        buyer_id: str,
        seller_id: str,
        commodity: str,
        quantity: float,
        agreed_price: float,
        notes: str | None = None,
    ) -> Transaction:
        """Record a new pending transaction."""
        try:
            txn = Transaction(
                id=new_id("TXN"),
                buyer_id=buyer_id,
                seller_id=seller_id,
                commodity=commodity,
                quantity=quantity,
                agreed_price=agreed_price,
                created_at=self._clock(),
                notes=notes,
            )
        except ValidationError as exc:
            raise LedgerValidationError(_first_error(exc)) from exc
        return self._store_txn(txn)

    def complete(self, transaction_id: str) -> Transaction:
        txn = self.get(transaction_id)
        if txn.status != TransactionStatus.PENDING:
            msg = f"Transaction {transaction_id} is already {txn.status}"
            raise InvalidTransactionStateError(msg)
        return self._store_txn(
            txn.model_copy(
                update={"status": TransactionStatus.COMPLETED, "completed_at": self._clock()}
            )
        )

    def cancel(self, transaction_id: str, reason: str | None = None) -> Transaction:
        txn = self.get(transaction_id)
        if txn.status == TransactionStatus.COMPLETED:
            msg = f"Cannot cancel completed transaction {transaction_id}"
            raise InvalidTransactionStateError(msg)
        return self._store_txn(
            txn.model_copy(
                update={"status": TransactionStatus.CANCELLED, "cancellation_reason": reason}
            )
        )

    def rate(self, transaction_id: str, by: Party | str, rating: int) -> Transaction:
        """Attach a 1..5 rating from the buyer or the seller."""
        txn = self.get(transaction_id)
        if txn.status != TransactionStatus.COMPLETED:
            msg = f"Can only rate completed transactions ({transaction_id} is {txn.status})"
            raise InvalidTransactionStateError(msg)
        if not MIN_RATING <= rating <= MAX_RATING:
            msg = f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}"
            raise LedgerValidationError(msg)
        try:
            party = Party(by)
        except ValueError as exc:
            raise LedgerValidationError(f"Unknown party: {by!r}") from exc
        field = "buyer_rating" if party == Party.BUYER else "seller_rating"
        return self._store_txn(txn.model_copy(update={field: rating}))

    def get(self, transaction_id: str) -> Transaction:
        try:
            return self._transactions[transaction_id]
        except KeyError:
            raise TransactionNotFoundError(transaction_id) from None

    def list(
        self,
        user_id: str | None = None,
        commodity: str | None = None,
        status: TransactionStatus | str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> builtins.list[Transaction]:
        """Transactions matching every given filter, newest first.

        ``commodity`` matches any part of the name, ignoring case. The date
        bounds are inclusive; naive datetimes are taken as UTC.
        """
        needle = commodity.lower() if commodity is not None else None
        start = as_utc(date_from)
        end = as_utc(date_to)
        found = [
            t
            for t in self._transactions.values()
            if (user_id is None or t.involves(user_id))
            and (needle is None or needle in t.commodity.lower())
            and (status is None or t.status == status)
            and (start is None or t.created_at >= start)
            and (end is None or t.created_at <= end)
        ]
        return sorted(found, key=lambda t: t.created_at, reverse=True)

    def summary(
        self,
        user_id: str,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> TransactionSummary:
        """Totals over the user's completed transactions within the date bounds."""
        done = self._completed(user_id, date_from, date_to)
        now = self._clock()
        if not done:
            return TransactionSummary(
                date_range=DateRange(start=as_utc(date_from) or now, end=as_utc(date_to) or now)
            )
        volume = sum(t.quantity for t in done)
        value = sum(t.total_amount for t in done)
        commodities = list(dict.fromkeys(t.commodity for t in done))
        return TransactionSummary(
            total_transactions=len(done),
            total_volume=volume,
            total_value=value,
            average_price=value / volume,
            commodities=commodities,
            date_range=DateRange(
                start=as_utc(date_from) or done[0].created_at,
                end=as_utc(date_to) or done[-1].created_at,
            ),
        )

    def commodity_analytics(self, user_id: str) -> builtins.list[CommodityStats]:
        """Per-commodity totals over completed deals, highest value first."""
        groups: dict[str, builtins.list[Transaction]] = {}
        for t in self._completed(user_id):
            groups.setdefault(t.commodity, []).append(t)
        stats = []
        for name, txns in groups.items():
            volume = sum(t.quantity for t in txns)
            value = sum(t.total_amount for t in txns)
            stats.append(
                CommodityStats(
                    commodity=name,
                    total_transactions=len(txns),
                    total_volume=volume,
                    total_value=value,
                    average_price=value / volume,
                )
            )
        return sorted(stats, key=lambda s: (-s.total_value, s.commodity))

    def partner_analytics(self, user_id: str) -> builtins.list[PartnerStats]:
        """Per-counterparty totals over completed deals, highest value first.

        A partner who both bought from and sold to the user gets one entry
        per role.
        """
        groups: dict[tuple[str, Party], builtins.list[Transaction]] = {}
        for t in self._completed(user_id):
            if t.buyer_id == user_id:
                key = (t.seller_id, Party.SELLER)
            else:
                key = (t.buyer_id, Party.BUYER)
            groups.setdefault(key, []).append(t)
        stats = []
        for (partner_id, role), txns in groups.items():
            field = "buyer_rating" if role == Party.BUYER else "seller_rating"
            ratings = [getattr(t, field) for t in txns if getattr(t, field) is not None]
            stats.append(
                PartnerStats(
                    partner_id=partner_id,
                    role=role,
                    total_transactions=len(txns),
                    total_value=sum(t.total_amount for t in txns),
                    average_rating=sum(ratings) / len(ratings) if ratings else None,
                )
            )
        return sorted(stats, key=lambda s: (-s.total_value, s.partner_id, s.role))

    def _completed(
        self,
        user_id: str,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> builtins.list[Transaction]:
        """The user's completed transactions, oldest first."""
        done = self.list(
            user_id=user_id,
            status=TransactionStatus.COMPLETED,
            date_from=date_from,
            date_to=date_to,
        )
        done.reverse()
        return done

    def _store_txn(self, txn: Transaction) -> Transaction:
        self._transactions[txn.id] = txn
        self.save()
        return txn


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {err.get('msg', 'invalid value')}" if loc else str(err.get("msg"))
