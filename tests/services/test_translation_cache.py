"""Tests for TranslationCache: LRU policy, stats and persistence."""

import json
import logging
from datetime import UTC, datetime

import pytest

from mandictl.domain.translation import CacheEntry, TranslationResult
from mandictl.infrastructure.kvstore import MemoryKeyValueStore
from mandictl.services.translation import DEFAULT_SLOT, TranslationCache
from tests.conftest import FixedClock

NOW = datetime(2024, 1, 15, tzinfo=UTC)


def _result(text: str) -> TranslationResult:
    return TranslationResult(
        original_text=text,
        translated_text=f"[Hindi] {text}",
        source_lang="en",
        target_lang="hi",
        confidence=0.9,
        created_at=NOW,
    )


class TestGetPut:
    def test_miss(self, cache: TranslationCache) -> None:
        assert cache.get("en:hi:x") is None
        assert cache.stats()["misses"] == 1

    def test_hit_updates_usage(self, cache: TranslationCache, clock: FixedClock) -> None:
        cache.put("k", _result("x"))
        later = clock.advance(60)
        assert cache.get("k") == _result("x")
        entry = cache.entry("k")
        assert entry is not None
        assert entry.usage_count == 2
        assert entry.last_used == later

    def test_len_and_contains(self, cache: TranslationCache) -> None:
        cache.put("k", _result("x"))
        assert len(cache) == 1
        assert "k" in cache
        assert "other" not in cache

    def test_put_existing_key_does_not_evict(self, store: MemoryKeyValueStore) -> None:
        cache = TranslationCache(store, max_size=2)
        cache.put("a", _result("a"))
        cache.put("b", _result("b"))
        cache.put("a", _result("a2"))
        assert len(cache) == 2
        assert cache.stats()["evictions"] == 0

    def test_invalid_max_size(self, store: MemoryKeyValueStore) -> None:
        with pytest.raises(ValueError):
            TranslationCache(store, max_size=0)


class TestEviction:
    def test_least_recently_used_is_evicted(self, store: MemoryKeyValueStore) -> None:
        clock = FixedClock()
        cache = TranslationCache(store, max_size=3, clock=clock)
        for key in ("a", "b", "c"):
            cache.put(key, _result(key))
            clock.advance()
        cache.get("a")
        clock.advance()
        cache.put("d", _result("d"))
        assert "b" not in cache
        assert all(k in cache for k in ("a", "c", "d"))

    def test_ties_evict_least_recently_touched(self, store: MemoryKeyValueStore) -> None:
        # Frozen clock: every entry shares the same timestamp.
        cache = TranslationCache(store, max_size=2, clock=FixedClock())
        cache.put("a", _result("a"))
        cache.put("b", _result("b"))
        cache.get("a")
        cache.put("c", _result("c"))
        assert "b" not in cache
        assert "a" in cache

    def test_never_exceeds_capacity(self, store: MemoryKeyValueStore) -> None:
        clock = FixedClock()
        cache = TranslationCache(store, max_size=5, clock=clock)
        for i in range(40):
            cache.put(f"k{i}", _result(str(i)))
            if i % 3 == 0:
                cache.get(f"k{i // 2}")
            clock.advance()
            assert len(cache) <= 5

    def test_evict_empty(self, cache: TranslationCache) -> None:
        assert cache.evict() is None

    def test_evict_returns_key(self, cache: TranslationCache) -> None:
        cache.put("only", _result("x"))
        assert cache.evict() == "only"
        assert cache.stats()["evictions"] == 1


class TestStats:
    def test_hit_rate(self, cache: TranslationCache) -> None:
        cache.put("k", _result("x"))
        cache.get("k")
        cache.get("missing")
        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 0.5
        assert stats["size"] == 1
        assert stats["max_size"] == 1000
        assert stats["total_usage"] == 2

    def test_empty_hit_rate(self, cache: TranslationCache) -> None:
        assert cache.stats()["hit_rate"] == 0.0


class TestPersistence:
    def test_save_writes_record_list(
        self, cache: TranslationCache, store: MemoryKeyValueStore
    ) -> None:
        cache.put("en:hi:x", _result("x"))
        cache.save()
        raw = store.get(DEFAULT_SLOT)
        assert raw is not None
        records = json.loads(raw)
        assert records[0]["key"] == "en:hi:x"
        assert set(records[0]) == {"key", "result", "usageCount", "lastUsed"}

    def test_new_cache_loads_saved_entries(
        self, cache: TranslationCache, store: MemoryKeyValueStore
    ) -> None:
        cache.put("en:hi:x", _result("x"))
        cache.save()
        reloaded = TranslationCache(store)
        assert reloaded.get("en:hi:x") == _result("x")

    def test_custom_slot(self, store: MemoryKeyValueStore) -> None:
        cache = TranslationCache(store, slot="other")
        cache.put("k", _result("x"))
        cache.save()
        assert store.get("other") is not None
        assert store.get(DEFAULT_SLOT) is None

    def test_corrupt_json_yields_empty_cache(
        self, store: MemoryKeyValueStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        store.set(DEFAULT_SLOT, "{not json")
        with caplog.at_level(logging.WARNING, logger="mandictl"):
            cache = TranslationCache(store)
        assert len(cache) == 0
        assert "invalid JSON" in caplog.text

    def test_bad_records_yield_empty_cache(
        self, store: MemoryKeyValueStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        store.set(DEFAULT_SLOT, json.dumps([{"key": "k"}]))
        with caplog.at_level(logging.WARNING, logger="mandictl"):
            cache = TranslationCache(store)
        assert len(cache) == 0
        assert "unreadable" in caplog.text

    def test_non_list_payload(self, store: MemoryKeyValueStore) -> None:
        store.set(DEFAULT_SLOT, json.dumps({"key": "k"}))
        assert len(TranslationCache(store)) == 0

    def test_oversized_slot_keeps_most_recent(self, store: MemoryKeyValueStore) -> None:
        clock = FixedClock()
        big = TranslationCache(store, max_size=10, clock=clock)
        for i in range(10):
            big.put(f"k{i}", _result(str(i)))
            clock.advance()
        big.save()
        small = TranslationCache(store, max_size=3)
        assert len(small) == 3
        assert all(f"k{i}" in small for i in (7, 8, 9))

    def test_clear_removes_slot(self, cache: TranslationCache, store: MemoryKeyValueStore) -> None:
        cache.put("k", _result("x"))
        cache.save()
        cache.clear()
        assert len(cache) == 0
        assert store.get(DEFAULT_SLOT) is None

    def test_loaded_entry_keeps_usage(self, store: MemoryKeyValueStore) -> None:
        entry = CacheEntry(key="k", result=_result("x"), usage_count=7, last_used=NOW)
        store.set(DEFAULT_SLOT, json.dumps([entry.to_record()]))
        cache = TranslationCache(store)
        loaded = cache.entry("k")
        assert loaded is not None
        assert loaded.usage_count == 7
