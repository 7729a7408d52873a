"""Tests for NegotiationAdvisor."""

import random

import pytest

from mandictl.domain.negotiation import GENERIC_ADVICE, NegotiationContext, NegotiationThresholds
from mandictl.domain.templates import suggestion_phrasings
from mandictl.domain.types import SuggestionType, Tone
from mandictl.services.advisor import NegotiationAdvisor
from mandictl.services.resolver import CommodityResolver


class TestAdvise:
    def test_high_offer_scenario(self, advisor: NegotiationAdvisor) -> None:
        s = advisor.advise(NegotiationContext(reference_price=20, current_offer=25))
        assert s.type == SuggestionType.COUNTER
        assert s.suggested_price == 21
        assert s.tone == Tone.POLITE

    def test_low_offer_scenario(self, advisor: NegotiationAdvisor) -> None:
        s = advisor.advise(NegotiationContext(reference_price=16, current_offer=10))
        assert s.type == SuggestionType.REJECT
        assert s.suggested_price == 15

    def test_reference_from_catalog_by_name(self, advisor: NegotiationAdvisor) -> None:
        # Tomato averages 20
        s = advisor.advise(NegotiationContext(commodity="tamatar", current_offer=25))
        assert s.suggested_price == 21

    def test_reference_from_catalog_by_id(self, advisor: NegotiationAdvisor) -> None:
        ctx = NegotiationContext(commodity="wheat", current_offer=2175, previous_offers=(2100,))
        assert advisor.advise(ctx).type == SuggestionType.ACCEPT

    def test_explicit_reference_wins(self, advisor: NegotiationAdvisor) -> None:
        ctx = NegotiationContext(commodity="tomato", reference_price=100, current_offer=25)
        assert advisor.reference_price(ctx) == 100

    def test_unknown_commodity_gives_info(self, advisor: NegotiationAdvisor) -> None:
        s = advisor.advise(NegotiationContext(commodity="qqqq", current_offer=25))
        assert s.type == SuggestionType.INFO
        assert s.message == GENERIC_ADVICE
        assert s.suggested_price is None
        assert s.tone == Tone.NEUTRAL

    def test_no_commodity_no_reference(self, advisor: NegotiationAdvisor) -> None:
        assert advisor.advise(NegotiationContext(current_offer=25)).type == SuggestionType.INFO

    @pytest.mark.parametrize("offer", [-10.0, 0.0])
    def test_non_positive_offer_never_raises(
        self, advisor: NegotiationAdvisor, offer: float
    ) -> None:
        s = advisor.advise(NegotiationContext(reference_price=20, current_offer=offer))
        assert s.suggested_price is None or s.suggested_price > 0

    def test_thresholds_injected(self, resolver: CommodityResolver) -> None:
        loose = NegotiationAdvisor(resolver, thresholds=NegotiationThresholds(high_pct=50))
        s = loose.advise(NegotiationContext(reference_price=20, current_offer=25))
        assert s.suggested_price == 20


class TestAuxiliary:
    def test_render_english_fallback(self, advisor: NegotiationAdvisor) -> None:
        s = advisor.advise(NegotiationContext(reference_price=20, current_offer=25))
        text = advisor.render(s, "kn")
        expected = {p.format(price=21) for p in suggestion_phrasings(SuggestionType.COUNTER, "en")}
        assert text in expected

    def test_render_uses_injected_rng(self, resolver: CommodityResolver) -> None:
        ctx = NegotiationContext(reference_price=20, current_offer=25)
        a = NegotiationAdvisor(resolver, rng=random.Random(5))
        b = NegotiationAdvisor(resolver, rng=random.Random(5))
        assert a.render(a.advise(ctx)) == b.render(b.advise(ctx))

    def test_tips(self, advisor: NegotiationAdvisor) -> None:
        assert advisor.tips("hi")[0] == "हमेशा विनम्र और सम्मानजनक रहें"

    def test_is_stalled(self, advisor: NegotiationAdvisor) -> None:
        assert advisor.is_stalled([100, 101, 100])
        assert not advisor.is_stalled([100, 101])

    def test_is_stalled_uses_configured_tolerance(self, resolver: CommodityResolver) -> None:
        wide = NegotiationAdvisor(resolver, thresholds=NegotiationThresholds(stall_tolerance=0.1))
        assert wide.is_stalled([100, 108, 100])

    def test_suggest_compromise(self, advisor: NegotiationAdvisor) -> None:
        assert advisor.suggest_compromise(20, 25).suggested_price == 23

    def test_default_construction(self) -> None:
        advisor = NegotiationAdvisor()
        s = advisor.advise(NegotiationContext(commodity="onion", current_offer=16))
        assert s.type == SuggestionType.COUNTER
