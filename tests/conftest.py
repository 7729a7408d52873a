"""Shared pytest fixtures and test helpers for mandictl tests."""

from __future__ import annotations

import random
import time
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from click.testing import CliRunner

from mandictl.infrastructure.backends import MockTranslationBackend
from mandictl.infrastructure.kvstore import MemoryKeyValueStore
from mandictl.services.advisor import NegotiationAdvisor
from mandictl.services.assistant import MandiAssistant
from mandictl.services.resolver import CommodityResolver
from mandictl.services.transactions import TransactionLedger
from mandictl.services.translation import TranslationCache, Translator

EPOCH = datetime(2024, 1, 15, 9, 30, tzinfo=UTC)


class FixedClock:
    """Deterministic clock; advance it explicitly."""

    def __init__(self, start: datetime = EPOCH) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 1.0) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


class RecordingBackend(MockTranslationBackend):
    """Mock backend that remembers every text it was asked to translate."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, str]] = []

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        self.calls.append((text, source_lang, target_lang))
        return super().translate(text, source_lang, target_lang)


class FailingBackend:
    def __init__(self) -> None:
        self.calls = 0

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        self.calls += 1
        raise ConnectionError("translation service unreachable")


class SlowBackend(MockTranslationBackend):
    def __init__(self, delay: float = 0.02) -> None:
        self.delay = delay

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        time.sleep(self.delay)
        return super().translate(text, source_lang, target_lang)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def resolver() -> CommodityResolver:
    return CommodityResolver()


@pytest.fixture
def advisor(resolver: CommodityResolver, rng: random.Random) -> NegotiationAdvisor:
    return NegotiationAdvisor(resolver, rng=rng)


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def cache(store: MemoryKeyValueStore, clock: FixedClock) -> TranslationCache:
    return TranslationCache(store, clock=clock)


@pytest.fixture
def translator(
    backend: RecordingBackend, cache: TranslationCache, clock: FixedClock
) -> Translator:
    return Translator(backend, cache, clock=clock)


@pytest.fixture
def ledger(store: MemoryKeyValueStore, clock: FixedClock) -> TransactionLedger:
    return TransactionLedger(store, clock=clock)


@pytest.fixture
def assistant(
    resolver: CommodityResolver,
    advisor: NegotiationAdvisor,
    translator: Translator,
    ledger: TransactionLedger,
    rng: random.Random,
) -> MandiAssistant:
    return MandiAssistant(resolver, advisor, translator, ledger, rng=rng)


@pytest.fixture
def _isolated_data(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run CLI commands from an empty temp directory with no config overrides.

    Use via ``@pytest.mark.usefixtures("_isolated_data")`` on command test
    classes.
    """
    monkeypatch.chdir(tmp_path)
    for var in ("MANDICTL_CONFIG", "MANDICTL_STORAGE__BACKEND", "MANDICTL_STORAGE__DATA_DIR"):
        monkeypatch.delenv(var, raising=False)
