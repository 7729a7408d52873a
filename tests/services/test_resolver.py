"""Tests for CommodityResolver."""

import random

import pytest

from mandictl.domain.commodities import CATALOG, Catalog
from mandictl.services.resolver import CommodityResolver


class TestResolve:
    @pytest.mark.parametrize("record", list(CATALOG), ids=lambda r: r.id)
    def test_canonical_name(self, resolver: CommodityResolver, record: object) -> None:
        assert resolver.resolve(record.name) == record  # type: ignore[attr-defined]

    def test_plural(self, resolver: CommodityResolver) -> None:
        rec = resolver.resolve("tomatoes")
        assert rec is not None
        assert rec.name == "Tomato"

    @pytest.mark.parametrize(
        ("query", "expected"),
        [
            ("tamatar bhav", "tomato"),
            ("Onion price", "onion"),
            ("टमाटर", "tomato"),
            ("gehun", "wheat"),
            ("aloo rate", "potato"),
            ("hari mirch", "chilli"),
        ],
    )
    def test_aliases_and_fillers(
        self, resolver: CommodityResolver, query: str, expected: str
    ) -> None:
        rec = resolver.resolve(query)
        assert rec is not None
        assert rec.id == expected

    @pytest.mark.parametrize("query", ["", "   ", "price", "bhav daam"])
    def test_empty_queries(self, resolver: CommodityResolver, query: str) -> None:
        assert resolver.resolve(query) is None

    def test_threshold_from_constructor(self) -> None:
        strict = CommodityResolver(threshold=0.99)
        assert strict.resolve("tomatoes") is None
        assert strict.resolve("tomato") is not None

    def test_injected_catalog(self) -> None:
        tomato = CATALOG.get("tomato")
        assert tomato is not None
        resolver = CommodityResolver(Catalog([tomato]))
        assert resolver.resolve("onion") is None
        assert resolver.resolve("tomato") == tomato

    def test_match_exposes_score(self, resolver: CommodityResolver) -> None:
        assert resolver.match("tomato").score == 1.0


class TestSupplements:
    def test_parse_query(self, resolver: CommodityResolver) -> None:
        assert resolver.parse_query("what is tomato rate?") == "tomato"

    def test_suggest(self, resolver: CommodityResolver) -> None:
        assert [r.id for r in resolver.suggest("tom")] == ["tomato"]
        ids = [r.id for r in resolver.suggest("to")]
        assert ids == ["tomato", "potato", "cotton", "pulses"]

    def test_suggest_limit(self, resolver: CommodityResolver) -> None:
        assert len(resolver.suggest("a", limit=2)) == 0
        assert len(resolver.suggest("an", limit=2)) == 2

    def test_suggest_too_short(self, resolver: CommodityResolver) -> None:
        assert resolver.suggest("t") == []
        assert resolver.suggest(" ") == []

    def test_related(self, resolver: CommodityResolver) -> None:
        assert [r.id for r in resolver.related("wheat")] == ["rice", "maize"]

    def test_related_unknown(self, resolver: CommodityResolver) -> None:
        assert resolver.related("saffron") == []

    def test_describe(self, resolver: CommodityResolver) -> None:
        wheat = CATALOG.get("wheat")
        assert wheat is not None
        text = resolver.describe(wheat, "en", random.Random(0))
        assert "₹2100–2250" in text
        assert "quintal" in text
