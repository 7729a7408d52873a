"""Shared service-layer helper functions."""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from mandictl.infrastructure.kvstore import KeyValueStore

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current UTC time. The default clock for every service."""
    return datetime.now(UTC)


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC; aware ones and None pass through."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def new_id(prefix: str) -> str:
    """Short unique identifier such as ``TXN-1f3a9c2b``."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def read_json_slot(store: KeyValueStore, slot: str, logger: logging.Logger) -> Any | None:
    """Load and decode a JSON slot.

    Missing slots return None. Unreadable or corrupt slots are logged and
    also return None so callers start from empty state.
    """
    try:
        raw = store.get(slot)
    except Exception:
        logger.warning("Could not read slot %s", slot, exc_info=True)
        return None
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Slot %s holds invalid JSON; ignoring it", slot)
        return None


def write_json_slot(store: KeyValueStore, slot: str, payload: Any) -> None:
    store.set(slot, json.dumps(payload, ensure_ascii=False))
