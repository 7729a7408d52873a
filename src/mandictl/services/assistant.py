"""MandiAssistant: ServiceResult facade over the assistant services.

External callers (the CLI, scripts) talk to this class. Recoverable
conditions and raised misuse errors are both folded into
``ServiceResult(ok=False)`` with codes ``NOT_FOUND``, ``VALIDATION_ERROR``
or ``INVALID_STATE``.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from mandictl.domain.commodities import CommodityRecord
from mandictl.domain.errors import LedgerError
from mandictl.domain.negotiation import NegotiationContext
from mandictl.domain.templates import price_range_text
from mandictl.domain.types import DEFAULT_LANGUAGE, SuggestionType
from mandictl.services._helpers import as_utc
from mandictl.services.advisor import NegotiationAdvisor
from mandictl.services.resolver import CommodityResolver
from mandictl.services.result import ErrorCode, ServiceResult
from mandictl.services.telemetry import traced
from mandictl.services.transactions import TransactionLedger
from mandictl.services.translation import Translator


def _record_data(record: CommodityRecord) -> dict[str, Any]:
    data = record.model_dump(mode="json")
    data["average_price"] = record.average_price
    data["price_range"] = price_range_text(record)
    return data


def _inverted(date_from: datetime | None, date_to: datetime | None) -> bool:
    start, end = as_utc(date_from), as_utc(date_to)
    return start is not None and end is not None and start > end


def _inverted_range(op: str, date_from: datetime | None, date_to: datetime | None) -> ServiceResult:
    return ServiceResult.failure(
        op,
        ErrorCode.VALIDATION_ERROR,
        "Start date is after end date",
        date_from=str(date_from),
        date_to=str(date_to),
    )


class MandiAssistant:
    """Vendor-facing operations returning :class:`ServiceResult`."""

    def __init__(
        self,
        resolver: CommodityResolver,
        advisor: NegotiationAdvisor,
        translator: Translator,
        ledger: TransactionLedger,
        rng: random.Random | None = None,
    ) -> None:
        self.resolver = resolver
        self.advisor = advisor
        self.translator = translator
        self.ledger = ledger
        self._rng = rng or random.Random()

    # ── Commodity lookup ─────────────────────────────────────────────

    @traced
    def price(self, query: str, language: str = DEFAULT_LANGUAGE) -> ServiceResult:
        """Resolve a free-text price question to a catalog record."""
        op = "price"
        phrase = self.resolver.parse_query(query)
        record = self.resolver.resolve(phrase)
        if record is None:
            candidates = [r.name for r in self.resolver.suggest(phrase)]
            return ServiceResult.failure(
                op,
                ErrorCode.NOT_FOUND,
                f"No commodity matches '{query.strip()}'",
                query=query,
                suggestions=candidates,
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "query": query,
                "commodity": _record_data(record),
                "description": self.resolver.describe(record, language, self._rng),
                "related": [r.id for r in self.resolver.related(record.id)],
            },
        )

    @traced
    def suggest(self, partial: str, limit: int = 5) -> ServiceResult:
        hits = self.resolver.suggest(partial, limit=limit)
        return ServiceResult(
            ok=True,
            op="suggest",
            data={
                "partial": partial,
                "count": len(hits),
                "items": [{"id": r.id, "name": r.name, "icon": r.icon} for r in hits],
            },
        )

    # ── Negotiation ──────────────────────────────────────────────────

    @traced
    def negotiate(
        self,
        commodity: str,
        offer: float,
        *,
        market_price: float | None = None,
        previous_offers: Sequence[float] = (),
        language: str = DEFAULT_LANGUAGE,
    ) -> ServiceResult:
        """Advise on *offer* for *commodity*."""
        op = "negotiate"
        try:
            context = NegotiationContext(
                commodity=commodity,
                reference_price=market_price,
                current_offer=offer,
                previous_offers=tuple(previous_offers),
                buyer_language=language,
            )
        except ValidationError as exc:
            return ServiceResult.invalid(op, exc)

        suggestion = self.advisor.advise(context)
        warnings: list[str] = []
        if suggestion.type == SuggestionType.INFO and market_price is None:
            warnings.append(f"No market price found for '{commodity}'")
        history = [*context.previous_offers, context.current_offer]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "commodity": commodity,
                "offer": offer,
                "reference_price": self.advisor.reference_price(context),
                "suggestion": suggestion.model_dump(mode="json"),
                "phrase": self.advisor.render(suggestion, language, self._rng),
                "stalled": self.advisor.is_stalled(history),
            },
            warnings=warnings,
        )

    @traced
    def compromise(self, your_last_offer: float, their_last_offer: float) -> ServiceResult:
        suggestion = self.advisor.suggest_compromise(your_last_offer, their_last_offer)
        return ServiceResult(
            ok=True, op="compromise", data={"suggestion": suggestion.model_dump(mode="json")}
        )

    @traced
    def stalled(self, offers: Sequence[float]) -> ServiceResult:
        return ServiceResult(
            ok=True,
            op="stalled",
            data={"offers": list(offers), "stalled": self.advisor.is_stalled(offers)},
        )

    @traced
    def tips(self, language: str = DEFAULT_LANGUAGE) -> ServiceResult:
        return ServiceResult(
            ok=True, op="tips", data={"language": language, "tips": self.advisor.tips(language)}
        )

    # ── Translation ──────────────────────────────────────────────────

    @traced
    def translate(self, text: str, from_lang: str, to_lang: str) -> ServiceResult:
        result = self.translator.translate(text, from_lang, to_lang)
        warnings: list[str] = []
        flagged = self.translator.should_flag_for_review(result)
        if result.confidence == 0.0:
            warnings.append("Translation backend failed; original text returned")
        elif flagged:
            warnings.append(f"Low confidence ({result.confidence:.2f}); review suggested")
        return ServiceResult(
            ok=True,
            op="translate",
            data={**result.model_dump(mode="json"), "needs_review": flagged},
            warnings=warnings,
        )

    @traced
    def cache_stats(self) -> ServiceResult:
        return ServiceResult(ok=True, op="cache_stats", data=self.translator.cache.stats())

    @traced
    def cache_clear(self) -> ServiceResult:
        removed = len(self.translator.cache)
        self.translator.cache.clear()
        return ServiceResult(ok=True, op="cache_clear", data={"removed": removed})

    # ── Ledger ───────────────────────────────────────────────────────

    def _ledger_call(self, op: str, func: Any, *args: Any, **kwargs: Any) -> ServiceResult:
        try:
            txn = func(*args, **kwargs)
        except LedgerError as exc:
            return ServiceResult.failure(op, exc.code, str(exc))
        return ServiceResult(
            ok=True,
            op=op,
            data={**txn.model_dump(mode="json"), "total_amount": txn.total_amount},
        )

    @traced
    def record_transaction(
        self,
        buyer_id: str,
        seller_id: str,
        commodity: str,
        quantity: float,
        agreed_price: float,
        notes: str | None = None,
    ) -> ServiceResult:
        return self._ledger_call(
            "record_transaction",
            self.ledger.record,
            buyer_id,
            seller_id,
            commodity,
            quantity,
            agreed_price,
            notes=notes,
        )

    @traced
    def complete_transaction(self, transaction_id: str) -> ServiceResult:
        return self._ledger_call("complete_transaction", self.ledger.complete, transaction_id)

    @traced
    def cancel_transaction(self, transaction_id: str, reason: str | None = None) -> ServiceResult:
        return self._ledger_call(
            "cancel_transaction", self.ledger.cancel, transaction_id, reason=reason
        )

    @traced
    def rate_transaction(self, transaction_id: str, by: str, rating: int) -> ServiceResult:
        return self._ledger_call("rate_transaction", self.ledger.rate, transaction_id, by, rating)

    @traced
    def list_transactions(
        self,
        user_id: str | None = None,
        commodity: str | None = None,
        status: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> ServiceResult:
        op = "list_transactions"
        if _inverted(date_from, date_to):
            return _inverted_range(op, date_from, date_to)
        items = self.ledger.list(
            user_id=user_id,
            commodity=commodity,
            status=status,
            date_from=date_from,
            date_to=date_to,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"count": len(items), "items": [t.model_dump(mode="json") for t in items]},
        )

    @traced
    def transaction_summary(
        self,
        user_id: str,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> ServiceResult:
        op = "transaction_summary"
        if _inverted(date_from, date_to):
            return _inverted_range(op, date_from, date_to)
        summary = self.ledger.summary(user_id, date_from=date_from, date_to=date_to)
        return ServiceResult(
            ok=True,
            op=op,
            data={"user_id": user_id, **summary.model_dump(mode="json")},
        )

    @traced
    def commodity_analytics(self, user_id: str) -> ServiceResult:
        stats = self.ledger.commodity_analytics(user_id)
        return ServiceResult(
            ok=True,
            op="commodity_analytics",
            data={"user_id": user_id, "items": [s.model_dump(mode="json") for s in stats]},
        )

    @traced
    def partner_analytics(self, user_id: str) -> ServiceResult:
        stats = self.ledger.partner_analytics(user_id)
        return ServiceResult(
            ok=True,
            op="partner_analytics",
            data={"user_id": user_id, "items": [s.model_dump(mode="json") for s in stats]},
        )
