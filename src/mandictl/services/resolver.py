"""CommodityResolver: free-text commodity lookup over the catalog.

Pure over the injected catalog. Lookups never raise; a query that matches
nothing well enough resolves to None.
"""

from __future__ import annotations

import logging
import random

from mandictl.domain.commodities import CATALOG, Catalog, CommodityRecord
from mandictl.domain.matching import (
    DEFAULT_THRESHOLD,
    MatchResult,
    best_match,
    matches_partial,
    normalize_query,
)
from mandictl.domain.matching import parse_query as _parse_query
from mandictl.domain.templates import describe_price
from mandictl.domain.types import DEFAULT_LANGUAGE, Language
from mandictl.services.telemetry import annotate_current

logger = logging.getLogger(__name__)

MIN_PARTIAL_CHARS = 2


class CommodityResolver:
    """Map user text such as ``"tamatar bhav"`` onto a catalog record."""

    def __init__(self, catalog: Catalog = CATALOG, threshold: float = DEFAULT_THRESHOLD) -> None:
        self._catalog = catalog
        self._threshold = threshold

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def threshold(self) -> float:
        return self._threshold

    def match(self, query: str) -> MatchResult:
        """Best match with its score, whether or not it clears the threshold."""
        result = best_match(query, self._catalog, threshold=self._threshold)
        logger.debug(
            "resolve %r -> %s (score %.2f)",
            query,
            result.record.id if result.record else None,
            result.score,
        )
        annotate_current(
            match=result.record.id if result.record else None, score=round(result.score, 2)
        )
        return result

    def resolve(self, query: str) -> CommodityRecord | None:
        return self.match(query).record

    def parse_query(self, text: str) -> str:
        """Commodity phrase from a natural-language price question."""
        return _parse_query(text)

    def suggest(self, partial: str, limit: int = 5) -> list[CommodityRecord]:
        """Autocomplete candidates whose names contain *partial*."""
        needle = normalize_query(partial)
        if len(needle) < MIN_PARTIAL_CHARS:
            return []
        hits = [r for r in self._catalog if matches_partial(r, needle)]
        return hits[:limit]

    def related(self, commodity_id: str, limit: int = 3) -> list[CommodityRecord]:
        return self._catalog.related(commodity_id, limit=limit)

    def describe(
        self,
        record: CommodityRecord,
        language: Language | str = DEFAULT_LANGUAGE,
        rng: random.Random | None = None,
    ) -> str:
        return describe_price(record, language, rng=rng)
