"""Commercial-term protection for machine translation.

Currency amounts and trading vocabulary must survive translation
verbatim. Before the text reaches a backend every protected term is
swapped for a numbered placeholder token; afterwards the tokens are
swapped back in extraction order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

PLACEHOLDER_FORMAT = "⟦{index}⟧"
PLACEHOLDER_PATTERN = re.compile(r"⟦\d+⟧")

# Currency symbol or abbreviation followed by a numeral with optional
# thousands separators and decimal part: ₹500, Rs. 1,200.50, INR 40, $3
CURRENCY_PATTERN = re.compile(
    r"(?:₹|\$|\b(?:rs\.?|inr)(?=[\s\d]))\s*\d+(?:,\d+)*(?:\.\d+)?",
    re.IGNORECASE,
)

COMMERCIAL_TERMS: tuple[str, ...] = (
    # price
    "rupee",
    "rupees",
    "rs",
    "price",
    "rate",
    "cost",
    # quantity
    "kg",
    "kilogram",
    "quintal",
    "ton",
    "tonne",
    "litre",
    "liter",
    # quality
    "grade",
    "quality",
    "premium",
    "standard",
    # market
    "mandi",
    "apmc",
    "wholesale",
    "retail",
    "market",
    # transaction
    "payment",
    "advance",
    "credit",
    "cash",
    "upi",
    # commodities
    "wheat",
    "rice",
    "dal",
    "onion",
    "potato",
    "tomato",
)

_TERM_PATTERN = re.compile(
    r"\b(?:" + "|".join(re.escape(t) for t in sorted(COMMERCIAL_TERMS, key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)

BASE_CONFIDENCE = 0.9
SHORT_TEXT_CHARS = 10
LONG_TEXT_CHARS = 500
SHORT_TEXT_PENALTY = 0.1
LONG_TEXT_PENALTY = 0.05
UNCHANGED_CONFIDENCE = 0.5


@dataclass(frozen=True)
class PreservedTerm:
    """An extracted substring and the placeholder that replaced it."""

    term: str
    placeholder: str


@dataclass(frozen=True)
class ProtectedText:
    """Text with commercial terms swapped for placeholders."""

    text: str
    terms: tuple[PreservedTerm, ...]

    @property
    def term_strings(self) -> list[str]:
        return [t.term for t in self.terms]


def extract_terms(text: str) -> ProtectedText:
    """Replace currency amounts, then domain vocabulary, with placeholders."""
    found: list[PreservedTerm] = []

    def _swap(match: re.Match[str]) -> str:
        placeholder = PLACEHOLDER_FORMAT.format(index=len(found))
        found.append(PreservedTerm(term=match.group(0), placeholder=placeholder))
        return placeholder

    working = CURRENCY_PATTERN.sub(_swap, text)
    working = _TERM_PATTERN.sub(_swap, working)
    return ProtectedText(text=working, terms=tuple(found))


def restore_terms(text: str, terms: tuple[PreservedTerm, ...] | list[PreservedTerm]) -> str:
    """Put every preserved term back in place of its placeholder."""
    restored = text
    for item in terms:
        restored = restored.replace(item.placeholder, item.term)
    return restored


def compute_confidence(
    original: str,
    translated: str,
    source_lang: str,
    target_lang: str,
) -> float:
    """Heuristic translation confidence in [0, 1].

    Starts at 0.9, loses 0.1 for very short input and 0.05 for very long
    input. A translation identical to its input across different
    languages most likely did nothing and is pinned to 0.5.
    """
    confidence = BASE_CONFIDENCE
    if len(original) < SHORT_TEXT_CHARS:
        confidence -= SHORT_TEXT_PENALTY
    if len(original) > LONG_TEXT_CHARS:
        confidence -= LONG_TEXT_PENALTY
    if original == translated and source_lang != target_lang:
        confidence = UNCHANGED_CONFIDENCE
    return max(0.0, min(1.0, confidence))
