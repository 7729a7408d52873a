"""Term-preserving translation with a persistent LRU cache.

INVARIANT: Commercial terms (currency amounts, trading vocabulary) come
out of a translation exactly as they went in. A backend failure never
raises; it yields the original text with confidence 0 and is not cached.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from typing import Any

from mandictl.domain.terms import compute_confidence, extract_terms, restore_terms
from mandictl.domain.translation import CacheEntry, TranslationResult, cache_key
from mandictl.infrastructure.backends import TranslationBackend
from mandictl.infrastructure.kvstore import KeyValueStore
from mandictl.services._helpers import Clock, read_json_slot, utc_now, write_json_slot
from mandictl.services.telemetry import annotate_current, trace_span

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 1000
DEFAULT_SLOT = "mandi_translation_cache"
DEFAULT_SOFT_BUDGET_SECONDS = 2.0
DEFAULT_REVIEW_THRESHOLD = 0.85


class TranslationCache:
    """Bounded cache of translation results keyed by ``src:tgt:text``.

    Entries are kept in recency order. When full, the entry with the
    oldest ``last_used`` is evicted; equal timestamps evict the least
    recently touched entry. The persisted slot is loaded on construction;
    writing it back is explicit via :meth:`save`.
    """

    def __init__(
        self,
        store: KeyValueStore,
        max_size: int = DEFAULT_MAX_SIZE,
        slot: str = DEFAULT_SLOT,
        clock: Clock = utc_now,
    ) -> None:
        if max_size < 1:
            msg = f"max_size must be at least 1, got {max_size}"
            raise ValueError(msg)
        self._store = store
        self._max_size = max_size
        self._slot = slot
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self.load()

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def slot(self) -> str:
        return self._slot

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def entry(self, key: str) -> CacheEntry | None:
        """Raw entry without touching usage statistics."""
        return self._entries.get(key)

    def get(self, key: str) -> TranslationResult | None:
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            logger.debug("Cache miss: %s", key)
            return None
        entry.touch(self._clock())
        self._entries.move_to_end(key)
        self._hits += 1
        logger.debug("Cache hit: %s (uses=%d)", key, entry.usage_count)
        return entry.result

    def put(self, key: str, result: TranslationResult) -> str | None:
        """Insert ``result`` and return the key evicted to make room, if any."""
        evicted = None
        if key not in self._entries and len(self._entries) >= self._max_size:
            evicted = self.evict()
        self._entries[key] = CacheEntry(
            key=key, result=result, usage_count=1, last_used=self._clock()
        )
        self._entries.move_to_end(key)
        return evicted

    def evict(self) -> str | None:
        """Drop the least recently used entry and return its key."""
        if not self._entries:
            return None
        victim = min(self._entries.values(), key=lambda e: e.last_used)
        del self._entries[victim.key]
        self._evictions += 1
        logger.debug("Cache evict: %s", victim.key)
        return victim.key

    def clear(self) -> None:
        """Empty the cache in memory and in the store."""
        self._entries.clear()
        self._hits = self._misses = self._evictions = 0
        self._store.delete(self._slot)

    def stats(self) -> dict[str, Any]:
        lookups = self._hits + self._misses
        return {
            "size": len(self._entries),
            "max_size": self._max_size,
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
            "hit_rate": round(self._hits / lookups, 4) if lookups else 0.0,
            "total_usage": sum(e.usage_count for e in self._entries.values()),
        }

    def load(self) -> int:
        """Replace in-memory entries with the persisted slot.

        Unreadable data is logged and leaves the cache empty. When the slot
        holds more than ``max_size`` entries the most recently used are kept.
        Returns the number of entries loaded.
        """
        self._entries.clear()
        payload = read_json_slot(self._store, self._slot, logger)
        if payload is None:
            return 0
        try:
            if not isinstance(payload, list):
                msg = f"expected a list, got {type(payload).__name__}"
                raise TypeError(msg)
            entries = [CacheEntry.from_record(r) for r in payload]
        except (TypeError, KeyError, ValueError) as exc:
            logger.warning("Discarding unreadable translation cache: %s", exc)
            return 0

        entries.sort(key=lambda e: e.last_used)
        for entry in entries[-self._max_size :]:
            self._entries[entry.key] = entry
        logger.debug("Loaded %d cached translations", len(self._entries))
        return len(self._entries)

    def save(self) -> None:
        write_json_slot(self._store, self._slot, [e.to_record() for e in self._entries.values()])


class Translator:
    """Translate text through a backend while protecting commercial terms."""

    def __init__(
        self,
        backend: TranslationBackend,
        cache: TranslationCache,
        clock: Clock = utc_now,
        soft_budget_seconds: float = DEFAULT_SOFT_BUDGET_SECONDS,
        review_threshold: float = DEFAULT_REVIEW_THRESHOLD,
    ) -> None:
        self._backend = backend
        self._cache = cache
        self._clock = clock
        self._soft_budget = soft_budget_seconds
        self._review_threshold = review_threshold

    @property
    def cache(self) -> TranslationCache:
        return self._cache

    def translate(self, text: str, from_lang: str, to_lang: str) -> TranslationResult:
        key = cache_key(text, from_lang, to_lang)
        cached = self._cache.get(key)
        annotate_current(cache="hit" if cached is not None else "miss")
        if cached is not None:
            # hits change last_used and usage_count
            self._cache.save()
            return cached

        if from_lang == to_lang:
            return TranslationResult.identity(text, from_lang, created_at=self._clock())

        started = time.perf_counter()
        protected = extract_terms(text)
        try:
            with trace_span("backend.translate") as backend_span:
                raw = self._backend.translate(protected.text, from_lang, to_lang)
                if backend_span:
                    backend_span.annotate(terms=len(protected.terms), chars=len(protected.text))
            if not isinstance(raw, str):
                raise TypeError(f"backend returned {type(raw).__name__}, expected str")
            translated = restore_terms(raw, protected.terms)
        except Exception:
            logger.warning(
                "Translation backend failed for %s -> %s", from_lang, to_lang, exc_info=True
            )
            return TranslationResult.failed(text, from_lang, to_lang, created_at=self._clock())
        finally:
            self._check_budget(time.perf_counter() - started)

        result = TranslationResult(
            original_text=text,
            translated_text=translated,
            source_lang=from_lang,
            target_lang=to_lang,
            confidence=compute_confidence(text, translated, from_lang, to_lang),
            preserved_terms=tuple(protected.term_strings),
            created_at=self._clock(),
        )
        evicted = self._cache.put(key, result)
        if evicted:
            annotate_current(evicted=evicted)
        self._cache.save()
        return result

    def should_flag_for_review(self, result: TranslationResult) -> bool:
        return result.confidence < self._review_threshold

    def _check_budget(self, elapsed: float) -> None:
        if elapsed > self._soft_budget:
            logger.warning(
                "Translation took %.2fs, over the %.2fs soft budget", elapsed, self._soft_budget
            )
