"""Translation result and cache entry models.

INVARIANT: When source and target language are the same, the translated
text is the original text and confidence is 1.0.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class TranslationResult(BaseModel):
    """Outcome of one translation request."""

    model_config = {"frozen": True}

    original_text: str
    translated_text: str
    source_lang: str
    target_lang: str
    confidence: float = Field(ge=0.0, le=1.0)
    preserved_terms: tuple[str, ...] = ()
    created_at: datetime

    @classmethod
    def identity(cls, text: str, lang: str, *, created_at: datetime) -> TranslationResult:
        return cls(
            original_text=text,
            translated_text=text,
            source_lang=lang,
            target_lang=lang,
            confidence=1.0,
            created_at=created_at,
        )

    @classmethod
    def failed(
        cls, text: str, source_lang: str, target_lang: str, *, created_at: datetime
    ) -> TranslationResult:
        """Degraded result returned when the backend errors out."""
        return cls(
            original_text=text,
            translated_text=text,
            source_lang=source_lang,
            target_lang=target_lang,
            confidence=0.0,
            created_at=created_at,
        )


def normalize_text(text: str) -> str:
    return text.lower().strip()


def cache_key(text: str, source_lang: str, target_lang: str) -> str:
    """Composite key ``source:target:normalized-text``."""
    return f"{source_lang}:{target_lang}:{normalize_text(text)}"


@dataclass
class CacheEntry:
    """A cached translation plus its usage bookkeeping."""

    key: str
    result: TranslationResult
    usage_count: int
    last_used: datetime

    def touch(self, now: datetime) -> None:
        self.usage_count += 1
        self.last_used = now

    def to_record(self) -> dict[str, Any]:
        """Serialize to the persisted ``{key, result, usageCount, lastUsed}`` shape."""
        return {
            "key": self.key,
            "result": self.result.model_dump(mode="json"),
            "usageCount": self.usage_count,
            "lastUsed": self.last_used.isoformat(),
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> CacheEntry:
        return cls(
            key=str(record["key"]),
            result=TranslationResult.model_validate(record["result"]),
            usage_count=int(record["usageCount"]),
            last_used=datetime.fromisoformat(record["lastUsed"]),
        )
