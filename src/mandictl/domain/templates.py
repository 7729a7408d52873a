"""Display phrasings for suggestions, tips and price descriptions.

Phrasings are keyed by ``Language x SuggestionType``. A language without
its own set falls back to English. Which phrasing is used is decided by a
caller-supplied ``random.Random`` so tests can seed it.
"""

from __future__ import annotations

import random
from collections.abc import Mapping
from typing import Any

from mandictl.domain.commodities import CommodityRecord
from mandictl.domain.negotiation import NegotiationSuggestion, format_amount
from mandictl.domain.types import (
    DEFAULT_LANGUAGE,
    Language,
    SuggestionType,
    Trend,
    Unit,
    coerce_language,
)

_SUGGESTION_TEMPLATES: dict[Language, dict[SuggestionType, tuple[str, ...]]] = {
    Language.EN: {
        SuggestionType.COUNTER: (
            "Thank you for your offer. I was thinking ₹{price}.",
            "I appreciate your interest. How about ₹{price}?",
            "That's a bit different from what I had in mind. Can we do ₹{price}?",
        ),
        SuggestionType.ACCEPT: (
            "That sounds fair. I accept your offer.",
            "Yes, that works for me.",
            "Agreed. Let's proceed with this price.",
        ),
        SuggestionType.REJECT: (
            "I appreciate your offer, but I can't go that low. How about ₹{price}?",
            "Thank you, but that's below my cost. I can do ₹{price}.",
            "I understand, but I need at least ₹{price}.",
        ),
    },
    Language.HI: {
        SuggestionType.COUNTER: (
            "आपके प्रस्ताव के लिए धन्यवाद। मैं ₹{price} सोच रहा था।",
            "आपकी रुचि की सराहना करता हूं। ₹{price} कैसा रहेगा?",
            "यह मेरे विचार से थोड़ा अलग है। क्या हम ₹{price} कर सकते हैं?",
        ),
        SuggestionType.ACCEPT: (
            "यह उचित लगता है। मैं आपका प्रस्ताव स्वीकार करता हूं।",
            "हां, यह मेरे लिए ठीक है।",
            "सहमत। चलिए इस कीमत पर आगे बढ़ते हैं।",
        ),
        SuggestionType.REJECT: (
            "मैं आपके प्रस्ताव की सराहना करता हूं, लेकिन मैं इतना कम नहीं जा सकता। ₹{price} कैसा रहेगा?",
            "धन्यवाद, लेकिन यह मेरी लागत से कम है। मैं ₹{price} कर सकता हूं।",
            "मैं समझता हूं, लेकिन मुझे कम से कम ₹{price} चाहिए।",
        ),
    },
}

_TIPS: dict[Language, tuple[str, ...]] = {
    Language.EN: (
        "Always be polite and respectful",
        "Know the market price before negotiating",
        "Start with a reasonable offer",
        "Be willing to compromise",
        "Consider quality and quantity",
        "Build long-term relationships",
    ),
    Language.HI: (
        "हमेशा विनम्र और सम्मानजनक रहें",
        "बातचीत से पहले बाजार मूल्य जानें",
        "उचित प्रस्ताव से शुरू करें",
        "समझौता करने के लिए तैयार रहें",
        "गुणवत्ता और मात्रा पर विचार करें",
        "दीर्घकालिक संबंध बनाएं",
    ),
}

_PRICE_TEMPLATES: dict[Language, tuple[str, ...]] = {
    Language.EN: (
        "{name} is {range} per {unit} in {market}.{trend}",
        "Today {name} costs {range} per {unit}.{trend}",
        "{name}: {range} per {unit} at {market}.{trend}",
    ),
    Language.HI: (
        "{market} में {name} का भाव {range} प्रति {unit} है।{trend}",
        "आज {name} {range} प्रति {unit} बिक रहा है।{trend}",
    ),
}

_UNIT_NAMES: dict[Language, dict[Unit, str]] = {
    Language.EN: {Unit.KG: "kg", Unit.QUINTAL: "quintal", Unit.DOZEN: "dozen", Unit.PIECE: "piece"},
    Language.HI: {Unit.KG: "किलो", Unit.QUINTAL: "क्विंटल", Unit.DOZEN: "दर्जन", Unit.PIECE: "नग"},
}

_TREND_TEXT: dict[Language, dict[Trend, str]] = {
    Language.EN: {Trend.RISING: " Prices are rising.", Trend.FALLING: " Prices are falling."},
    Language.HI: {Trend.RISING: " भाव बढ़ रहे हैं।", Trend.FALLING: " भाव गिर रहे हैं।"},
}


def _resolve(language: Language | str, table: Mapping[Language, Any]) -> Language:
    lang = language if isinstance(language, Language) else coerce_language(language)
    return lang if lang in table else DEFAULT_LANGUAGE


def suggestion_phrasings(
    suggestion_type: SuggestionType, language: Language | str
) -> tuple[str, ...]:
    """All raw phrasings for a suggestion type (empty for ``info``)."""
    lang = _resolve(language, _SUGGESTION_TEMPLATES)
    return _SUGGESTION_TEMPLATES[lang].get(suggestion_type, ())


def render_suggestion(
    suggestion: NegotiationSuggestion,
    language: Language | str = DEFAULT_LANGUAGE,
    *,
    rng: random.Random | None = None,
) -> str:
    """Pick one phrasing for *suggestion* in *language*.

    Suggestion types without phrasings (``info``) render their own message.
    """
    phrasings = suggestion_phrasings(suggestion.type, language)
    if not phrasings:
        return suggestion.message
    chooser = rng or random.Random()
    return chooser.choice(phrasings).format(price=suggestion.suggested_price)


def negotiation_tips(language: Language | str = DEFAULT_LANGUAGE) -> list[str]:
    lang = _resolve(language, _TIPS)
    return list(_TIPS[lang])


def price_range_text(record: CommodityRecord) -> str:
    """``₹18–22`` or ``₹20`` when the range is a single price."""
    if record.price_min == record.price_max:
        return format_amount(record.price_min)
    low = format_amount(record.price_min)
    high = format_amount(record.price_max).removeprefix("₹")
    return f"{low}–{high}"


def describe_price(
    record: CommodityRecord,
    language: Language | str = DEFAULT_LANGUAGE,
    *,
    rng: random.Random | None = None,
) -> str:
    """Short conversational sentence quoting the record's price range."""
    lang = _resolve(language, _PRICE_TEMPLATES)
    chooser = rng or random.Random()
    template = chooser.choice(_PRICE_TEMPLATES[lang])
    return template.format(
        name=record.localized_name(lang) if lang != Language.EN else record.name,
        range=price_range_text(record),
        unit=_UNIT_NAMES[lang][record.unit],
        market=record.market,
        trend=_TREND_TEXT[lang].get(record.trend, ""),
    )
