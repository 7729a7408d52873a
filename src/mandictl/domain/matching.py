"""Fuzzy commodity-name matching primitives.

Scoring between a normalized query and a candidate term:

- exact equality -> 1.0
- one contains the other -> 0.8
- otherwise -> Jaccard similarity of their character sets

The best score over every (record, term) pair decides the match. Ties go
to the first maximal pair in catalog order.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from mandictl.domain.commodities import CommodityRecord
from mandictl.domain.types import Language

EXACT_SCORE = 1.0
CONTAINS_SCORE = 0.8
DEFAULT_THRESHOLD = 0.5

# Price-related filler words (English + transliterations + Devanagari).
FILLER_WORDS = frozenset(
    {
        "price",
        "prices",
        "rate",
        "rates",
        "cost",
        "value",
        "bhav",
        "bhaav",
        "daam",
        "keemat",
        "kimat",
        "भाव",
        "दाम",
        "कीमत",
    }
)

_QUESTION_PHRASES = re.compile(
    r"\b(?:what is|what's|whats|check|show|tell me|price of|rate of|cost of|value of)\b"
)
_PARTICLES = frozenset({"का", "की", "के", "क्या", "है", "ka", "ki", "ke", "kya", "hai"})


@dataclass(frozen=True)
class MatchResult:
    """Best catalog match for a query.

    ``record`` is None when no candidate scored above the threshold. The
    score is kept for diagnostics only.
    """

    record: CommodityRecord | None
    score: float

    @property
    def found(self) -> bool:
        return self.record is not None


def normalize_query(query: str) -> str:
    """Lowercase, collapse whitespace and drop price-related filler words.

    Examples:
        >>> normalize_query("  Onion   PRICE ")
        'onion'
        >>> normalize_query("tamatar ka bhav")
        'tamatar ka'
    """
    tokens = query.lower().split()
    return " ".join(t for t in tokens if t not in FILLER_WORDS)


def parse_query(text: str) -> str:
    """Extract the commodity phrase from a natural-language price question.

    Examples:
        >>> parse_query("What is tomato rate?")
        'tomato'
        >>> parse_query("टमाटर का भाव")
        'टमाटर'
    """
    cleaned = _QUESTION_PHRASES.sub(" ", text.lower()).replace("?", " ")
    tokens = normalize_query(cleaned).split()
    return " ".join(t for t in tokens if t not in _PARTICLES)


def jaccard(set_a: set[str], set_b: set[str]) -> float:
    """Jaccard similarity: |A & B| / |A | B|."""
    if not set_a and not set_b:
        return 0.0
    union = len(set_a | set_b)
    return len(set_a & set_b) / union if union > 0 else 0.0


def similarity(query: str, term: str) -> float:
    """Score *query* against a single candidate *term* (both lowercased)."""
    if query == term:
        return EXACT_SCORE
    if query in term or term in query:
        return CONTAINS_SCORE
    return jaccard(set(query), set(term))


def best_match(
    query: str,
    records: Iterable[CommodityRecord],
    *,
    threshold: float = DEFAULT_THRESHOLD,
) -> MatchResult:
    """Find the highest-scoring record for *query*.

    The query is normalized first. A record is returned only when the best
    score is strictly greater than *threshold*.
    """
    normalized = normalize_query(query)
    if not normalized:
        return MatchResult(record=None, score=0.0)

    best: CommodityRecord | None = None
    best_score = 0.0
    for record in records:
        for term in record.search_terms:
            if not term:
                continue
            score = similarity(normalized, term.lower())
            if score > best_score:
                best_score = score
                best = record

    if best_score > threshold:
        return MatchResult(record=best, score=best_score)
    return MatchResult(record=None, score=best_score)


def matches_partial(record: CommodityRecord, partial: str) -> bool:
    """True if *partial* is contained in the record's name, Hindi name or aliases."""
    terms = [record.name, record.localized.get(Language.HI, ""), *record.aliases]
    return any(partial in term.lower() for term in terms if term)
