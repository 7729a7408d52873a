"""Classification enums shared across the domain layer.

Units, trends and categories describe catalog records. Suggestion types
and tones describe negotiation advice. Languages are the codes the
templates and the mock translation backend know about.
"""

from __future__ import annotations

from enum import StrEnum


class Unit(StrEnum):
    """Unit a commodity price is quoted in."""

    KG = "kg"
    QUINTAL = "quintal"
    DOZEN = "dozen"
    PIECE = "piece"


class Trend(StrEnum):
    """Recent price movement of a commodity."""

    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"


class Category(StrEnum):
    """Commodity grouping used for related-item lookups."""

    VEGETABLE = "vegetable"
    GRAIN = "grain"
    PULSE = "pulse"
    CASH_CROP = "cash-crop"
    FRUIT = "fruit"
    SPICE = "spice"


class SuggestionType(StrEnum):
    """Discriminator for negotiation suggestions."""

    COUNTER = "counter"
    ACCEPT = "accept"
    REJECT = "reject"
    INFO = "info"


class Tone(StrEnum):
    """Rhetorical register attached to a suggestion."""

    POLITE = "polite"
    NEUTRAL = "neutral"
    FIRM = "firm"


class Language(StrEnum):
    """Supported language codes."""

    EN = "en"
    HI = "hi"
    TA = "ta"
    TE = "te"
    BN = "bn"
    MR = "mr"
    GU = "gu"
    KN = "kn"
    ML = "ml"
    PA = "pa"


LANGUAGE_NAMES: dict[Language, str] = {
    Language.EN: "English",
    Language.HI: "Hindi",
    Language.TA: "Tamil",
    Language.TE: "Telugu",
    Language.BN: "Bengali",
    Language.MR: "Marathi",
    Language.GU: "Gujarati",
    Language.KN: "Kannada",
    Language.ML: "Malayalam",
    Language.PA: "Punjabi",
}

DEFAULT_LANGUAGE = Language.EN


def coerce_language(code: str | None, *, default: Language = DEFAULT_LANGUAGE) -> Language:
    """Map a free-form language code onto :class:`Language`.

    Unknown or empty codes fall back to *default*.

    Examples:
        >>> coerce_language("HI")
        <Language.HI: 'hi'>
        >>> coerce_language("fr")
        <Language.EN: 'en'>
    """
    if not code:
        return default
    try:
        return Language(code.strip().lower())
    except ValueError:
        return default
