"""Tests for config section models."""

import pytest
from pydantic import ValidationError

from mandictl.config.models import (
    NegotiationConfig,
    ResolverConfig,
    StorageConfig,
    TranslationConfig,
)
from mandictl.domain.negotiation import NegotiationThresholds


class TestDefaults:
    def test_section_defaults(self) -> None:
        assert ResolverConfig().threshold == 0.5
        translation = TranslationConfig()
        assert translation.max_cache_size == 1000
        assert translation.review_threshold == 0.85
        assert translation.backend == "mock"
        storage = StorageConfig()
        assert storage.data_dir is None
        assert storage.backend == "sqlite"

    def test_thresholds_mapping(self) -> None:
        cfg = NegotiationConfig(high_pct=20, fair_pct=3)
        assert cfg.thresholds() == NegotiationThresholds(
            high_pct=20, low_pct=15, fair_pct=3, stall_tolerance=0.02
        )


class TestValidation:
    @pytest.mark.parametrize(
        ("model", "kwargs"),
        [
            (ResolverConfig, {"threshold": 1.5}),
            (TranslationConfig, {"max_cache_size": 0}),
            (TranslationConfig, {"review_threshold": -0.1}),
            (NegotiationConfig, {"high_pct": 0}),
            (StorageConfig, {"backend": "redis"}),
        ],
    )
    def test_rejects_out_of_range(self, model: type, kwargs: dict) -> None:
        with pytest.raises(ValidationError):
            model(**kwargs)

    def test_frozen(self) -> None:
        cfg = ResolverConfig()
        with pytest.raises(ValidationError):
            cfg.threshold = 0.9  # type: ignore[misc]
