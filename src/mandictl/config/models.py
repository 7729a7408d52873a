"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, mandictl.toml only contains
overrides. An empty file (or no file) is a valid configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from mandictl.domain.negotiation import NegotiationThresholds


class ResolverConfig(BaseModel):
    """[resolver] section."""

    model_config = {"frozen": True}

    threshold: float = Field(default=0.5, ge=0.0, le=1.0)


class NegotiationConfig(BaseModel):
    """[negotiation] section."""

    model_config = {"frozen": True}

    high_pct: float = Field(default=15.0, gt=0)
    low_pct: float = Field(default=15.0, gt=0)
    fair_pct: float = Field(default=5.0, ge=0)
    stall_tolerance: float = Field(default=0.02, gt=0)
    default_language: str = "en"

    def thresholds(self) -> NegotiationThresholds:
        return NegotiationThresholds(
            high_pct=self.high_pct,
            low_pct=self.low_pct,
            fair_pct=self.fair_pct,
            stall_tolerance=self.stall_tolerance,
        )


class TranslationConfig(BaseModel):
    """[translation] section."""

    model_config = {"frozen": True}

    max_cache_size: int = Field(default=1000, ge=1)
    review_threshold: float = Field(default=0.85, ge=0.0, le=1.0)
    soft_budget_seconds: float = Field(default=2.0, gt=0)
    cache_slot: str = "mandi_translation_cache"
    backend: str = "mock"


class StorageConfig(BaseModel):
    """[storage] section.

    ``data_dir`` defaults to ``.mandictl/`` beside the config file (or the
    working directory when there is none).
    """

    model_config = {"frozen": True}

    data_dir: Path | None = None
    backend: Literal["sqlite", "memory"] = "sqlite"
