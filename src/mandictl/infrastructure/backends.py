"""Machine translation backends.

Only an offline phrase-table backend ships. It translates a handful of
market phrases into Hindi, Tamil and Telugu and otherwise tags the text
with the target language name so the output visibly differs from the
input. Placeholder tokens pass through untouched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from mandictl.domain.types import DEFAULT_LANGUAGE, LANGUAGE_NAMES, Language, coerce_language


class BackendError(Exception):
    """Raised by a backend that could not produce a translation."""


@runtime_checkable
class TranslationBackend(Protocol):
    def translate(self, text: str, source_lang: str, target_lang: str) -> str: ...


@dataclass(frozen=True)
class LanguageDetection:
    language: Language
    confidence: float


# Ordered: first matching script wins. Marathi shares Devanagari with
# Hindi and is reported as Hindi.
_SCRIPT_RANGES: tuple[tuple[Language, re.Pattern[str]], ...] = (
    (Language.HI, re.compile(r"[ऀ-ॿ]")),
    (Language.TA, re.compile(r"[஀-௿]")),
    (Language.TE, re.compile(r"[ఀ-౿]")),
    (Language.BN, re.compile(r"[ঀ-৿]")),
    (Language.GU, re.compile(r"[઀-૿]")),
    (Language.KN, re.compile(r"[ಀ-೿]")),
    (Language.ML, re.compile(r"[ഀ-ൿ]")),
    (Language.PA, re.compile(r"[਀-੿]")),
)


def detect_language(text: str) -> LanguageDetection:
    """Guess the language of *text* from the Unicode script it uses."""
    for language, pattern in _SCRIPT_RANGES:
        if pattern.search(text):
            return LanguageDetection(language=language, confidence=0.9)
    return LanguageDetection(language=DEFAULT_LANGUAGE, confidence=0.95)


PHRASES: dict[Language, dict[str, str]] = {
    Language.HI: {
        "hello": "नमस्ते",
        "thank you": "धन्यवाद",
        "yes": "हाँ",
        "no": "नहीं",
        "price": "मूल्य",
        "offer": "प्रस्ताव",
        "accept": "स्वीकार",
        "reject": "अस्वीकार",
        "good": "अच्छा",
        "fair": "उचित",
        "too high": "बहुत अधिक",
        "too low": "बहुत कम",
        "per kg": "प्रति किलो",
        "per quintal": "प्रति क्विंटल",
        "market": "बाजार",
        "today": "आज",
    },
    Language.TA: {
        "hello": "வணக்கம்",
        "thank you": "நன்றி",
        "yes": "ஆம்",
        "no": "இல்லை",
        "price": "விலை",
        "offer": "சலுகை",
        "accept": "ஏற்கவும்",
        "reject": "நிராகரி",
        "good": "நல்லது",
        "fair": "நியாயமான",
        "too high": "மிக அதிகம்",
        "too low": "மிக குறைவு",
        "per kg": "கிலோவுக்கு",
        "per quintal": "குவிண்டலுக்கு",
        "market": "சந்தை",
        "today": "இன்று",
    },
    Language.TE: {
        "hello": "నమస్కారం",
        "thank you": "ధన్యవాదాలు",
        "yes": "అవును",
        "no": "కాదు",
        "price": "ధర",
        "offer": "ఆఫర్",
        "accept": "అంగీకరించు",
        "reject": "తిరస్కరించు",
        "good": "మంచి",
        "fair": "న్యాయమైన",
        "too high": "చాలా ఎక్కువ",
        "too low": "చాలా తక్కువ",
        "per kg": "కిలోకు",
        "per quintal": "క్వింటల్‌కు",
        "market": "మార్కెట్",
        "today": "ఈరోజు",
    },
}


def _phrase_pattern(table: dict[str, str]) -> re.Pattern[str]:
    phrases = sorted(table, key=len, reverse=True)
    return re.compile(r"\b(?:" + "|".join(re.escape(p) for p in phrases) + r")\b", re.IGNORECASE)


_PHRASE_PATTERNS: dict[Language, re.Pattern[str]] = {
    lang: _phrase_pattern(table) for lang, table in PHRASES.items()
}


class MockTranslationBackend:
    """Phrase-table backend that needs no network access."""

    name = "mock"

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        if not text.strip():
            return text
        target = coerce_language(target_lang)
        if detect_language(text).language == target:
            return text

        pattern = _PHRASE_PATTERNS.get(target)
        if pattern is not None:
            table = PHRASES[target]
            translated, count = pattern.subn(lambda m: table[m.group(0).lower()], text)
            if count:
                return translated
        return f"[{LANGUAGE_NAMES[target]}] {text}"


BACKENDS: dict[str, type[MockTranslationBackend]] = {"mock": MockTranslationBackend}


def get_backend(name: str) -> TranslationBackend:
    """Instantiate a registered backend by name."""
    try:
        return BACKENDS[name]()
    except KeyError:
        known = ", ".join(sorted(BACKENDS))
        raise BackendError(f"Unknown translation backend {name!r} (known: {known})") from None
