"""NegotiationAdvisor: turns an offer into typed negotiation advice."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from mandictl.domain.negotiation import (
    NegotiationContext,
    NegotiationSuggestion,
    NegotiationThresholds,
    evaluate_offer,
    info_suggestion,
)
from mandictl.domain.negotiation import is_stalled as _is_stalled
from mandictl.domain.negotiation import suggest_compromise as _suggest_compromise
from mandictl.domain.templates import negotiation_tips, render_suggestion
from mandictl.domain.types import DEFAULT_LANGUAGE, Language
from mandictl.services.resolver import CommodityResolver

logger = logging.getLogger(__name__)


class NegotiationAdvisor:
    """Rule-based advice against a reference market price.

    The reference price comes from the context when supplied, otherwise
    from the resolver's record for ``context.commodity``.
    """

    def __init__(
        self,
        resolver: CommodityResolver | None = None,
        rng: random.Random | None = None,
        thresholds: NegotiationThresholds | None = None,
    ) -> None:
        self._resolver = resolver or CommodityResolver()
        self._rng = rng or random.Random()
        self._thresholds = thresholds or NegotiationThresholds()

    @property
    def thresholds(self) -> NegotiationThresholds:
        return self._thresholds

    def reference_price(self, context: NegotiationContext) -> float | None:
        if context.reference_price is not None:
            return context.reference_price
        if not context.commodity:
            return None
        record = self._resolver.catalog.get(context.commodity) or self._resolver.resolve(
            context.commodity
        )
        return record.average_price if record else None

    def advise(self, context: NegotiationContext) -> NegotiationSuggestion:
        reference = self.reference_price(context)
        if reference is None:
            logger.debug("No reference price for %r", context.commodity)
            return info_suggestion("No market price data available")
        suggestion = evaluate_offer(
            context.current_offer,
            reference,
            context.previous_offers,
            thresholds=self._thresholds,
        )
        logger.debug(
            "advise offer=%s ref=%s -> %s %s",
            context.current_offer,
            reference,
            suggestion.type,
            suggestion.suggested_price,
        )
        return suggestion

    def render(
        self,
        suggestion: NegotiationSuggestion,
        language: Language | str = DEFAULT_LANGUAGE,
        rng: random.Random | None = None,
    ) -> str:
        """One phrasing of *suggestion*, English when *language* has none."""
        return render_suggestion(suggestion, language, rng=rng or self._rng)

    def tips(self, language: Language | str = DEFAULT_LANGUAGE) -> list[str]:
        return negotiation_tips(language)

    def is_stalled(self, offers: Sequence[float]) -> bool:
        return _is_stalled(offers, tolerance=self._thresholds.stall_tolerance)

    def suggest_compromise(
        self, your_last_offer: float, their_last_offer: float
    ) -> NegotiationSuggestion:
        return _suggest_compromise(your_last_offer, their_last_offer)
