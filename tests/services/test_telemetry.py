"""Tests for operation spans: Span, trace_span, annotate_current, @traced."""

from __future__ import annotations

import time
from collections.abc import Generator

import pytest

from mandictl.infrastructure.kvstore import MemoryKeyValueStore
from mandictl.services.advisor import NegotiationAdvisor
from mandictl.services.assistant import MandiAssistant
from mandictl.services.resolver import CommodityResolver
from mandictl.services.result import ServiceResult
from mandictl.services.telemetry import (
    Span,
    _current_span,
    annotate_current,
    disable_telemetry,
    enable_telemetry,
    trace_span,
    traced,
)
from mandictl.services.transactions import TransactionLedger
from mandictl.services.translation import TranslationCache, Translator
from tests.conftest import RecordingBackend


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    yield
    disable_telemetry()
    _current_span.set(None)


class TestSpan:
    def test_open_span_has_no_duration(self) -> None:
        assert Span(name="price").duration_ms == 0.0

    def test_duration_after_end(self) -> None:
        span = Span(name="price")
        time.sleep(0.005)
        span.end()
        assert span.duration_ms > 0

    def test_child_and_keyword_annotations(self) -> None:
        root = Span(name="MandiAssistant.translate")
        root.annotate(cache="miss")
        backend = root.child("backend.translate")
        backend.annotate(terms=2, chars=30)
        backend.end()
        root.end()
        d = root.to_dict()
        assert d["annotations"] == {"cache": "miss"}
        assert d["children"][0]["name"] == "backend.translate"
        assert d["children"][0]["annotations"] == {"terms": 2, "chars": 30}

    def test_bare_span_dict(self) -> None:
        d = Span(name="tips").to_dict()
        assert set(d) == {"name", "duration_ms"}


class TestTraceSpan:
    def test_off_yields_none(self) -> None:
        with trace_span("backend.translate") as span:
            assert span is None

    def test_without_operation_yields_none(self) -> None:
        enable_telemetry()
        with trace_span("backend.translate") as span:
            assert span is None

    def test_nests_under_current(self) -> None:
        enable_telemetry()
        root = Span(name="root")
        token = _current_span.set(root)
        try:
            with trace_span("a"):
                with trace_span("b"):
                    annotate_current(step="inner")
            annotate_current(step="outer")
        finally:
            _current_span.reset(token)
        assert root.annotations == {"step": "outer"}
        assert root.children[0].children[0].annotations == {"step": "inner"}
        assert root.children[0].end_time is not None


class TestAnnotateCurrent:
    def test_noop_when_off(self) -> None:
        root = Span(name="root")
        _current_span.set(root)
        annotate_current(cache="hit")
        assert root.annotations == {}

    def test_noop_without_span(self) -> None:
        enable_telemetry()
        annotate_current(cache="hit")


class TestTraced:
    def test_noop_when_off(self) -> None:
        @traced
        def op() -> ServiceResult:
            return ServiceResult(ok=True, op="tips")

        assert op().meta is None

    def test_keeps_existing_meta(self) -> None:
        @traced
        def op() -> ServiceResult:
            return ServiceResult(ok=True, op="tips", meta={"source": "catalog"})

        enable_telemetry()
        result = op()
        assert result.meta is not None
        assert result.meta["source"] == "catalog"
        assert result.meta["telemetry"]["name"].endswith("op")
        assert result.meta["telemetry"]["duration_ms"] >= 0

    def test_failure_code_recorded(self) -> None:
        @traced
        def op() -> ServiceResult:
            return ServiceResult.failure("price", "NOT_FOUND", "No commodity matches 'x'")

        enable_telemetry()
        assert op().meta["telemetry"]["annotations"] == {"error": "NOT_FOUND"}

    def test_plain_return_passthrough(self) -> None:
        @traced
        def op() -> str:
            return "tomato"

        enable_telemetry()
        assert op() == "tomato"

    def test_exception_propagates_and_resets(self) -> None:
        @traced
        def op() -> ServiceResult:
            raise RuntimeError("boom")

        enable_telemetry()
        with pytest.raises(RuntimeError):
            op()
        assert _current_span.get() is None


class TestAssistantSpans:
    def test_translate_miss_then_hit(self, assistant: MandiAssistant) -> None:
        enable_telemetry()
        first = assistant.translate("the price is ₹500 per kg", "en", "hi").meta["telemetry"]
        second = assistant.translate("the price is ₹500 per kg", "en", "hi").meta["telemetry"]
        assert first["name"] == "MandiAssistant.translate"
        assert first["annotations"]["cache"] == "miss"
        backend = first["children"][0]
        assert backend["name"] == "backend.translate"
        assert backend["annotations"]["terms"] == 3
        assert second["annotations"]["cache"] == "hit"
        assert "children" not in second

    def test_translate_warning_counted(self, assistant: MandiAssistant) -> None:
        enable_telemetry()
        result = assistant.translate("hello", "en", "ta")
        assert result.meta["telemetry"]["annotations"]["warnings"] == len(result.warnings)

    def test_eviction_recorded(
        self,
        store: MemoryKeyValueStore,
        advisor: NegotiationAdvisor,
        ledger: TransactionLedger,
    ) -> None:
        translator = Translator(RecordingBackend(), TranslationCache(store, max_size=1))
        assistant = MandiAssistant(CommodityResolver(), advisor, translator, ledger)
        enable_telemetry()
        assistant.translate("hello", "en", "hi")
        tree = assistant.translate("thank you", "en", "hi").meta["telemetry"]
        assert tree["annotations"]["evicted"] == "en:hi:hello"

    def test_price_records_match(self, assistant: MandiAssistant) -> None:
        enable_telemetry()
        annotations = assistant.price("tamatar").meta["telemetry"]["annotations"]
        assert annotations["match"] == "tomato"
        assert 0 < annotations["score"] <= 1

    def test_price_miss_records_error(self, assistant: MandiAssistant) -> None:
        enable_telemetry()
        annotations = assistant.price("xyzzy").meta["telemetry"]["annotations"]
        assert annotations["match"] is None
        assert annotations["error"] == "NOT_FOUND"
