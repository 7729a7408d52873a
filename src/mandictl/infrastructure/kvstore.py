"""Key-value slots for persisted state.

Values are opaque strings (JSON text in practice). Two implementations:
an in-memory dict for tests and ``--storage memory``, and a SQLite-backed
store built on the ``kv_store`` table.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol, runtime_checkable

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine

from mandictl.infrastructure.database.schema import kv_store


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal slot storage used by the cache and the ledger."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class SqliteKeyValueStore:
    """Store backed by the ``kv_store`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def get(self, key: str) -> str | None:
        with self._engine.connect() as conn:
            row = conn.execute(select(kv_store.c.value).where(kv_store.c.key == key)).first()
        return None if row is None else str(row.value)

    def set(self, key: str, value: str) -> None:
        now = datetime.now(UTC).isoformat()
        with self._engine.begin() as conn:
            exists = conn.execute(select(kv_store.c.key).where(kv_store.c.key == key)).first()
            if exists is None:
                conn.execute(insert(kv_store).values(key=key, value=value, updated_at=now))
            else:
                conn.execute(
                    update(kv_store)
                    .where(kv_store.c.key == key)
                    .values(value=value, updated_at=now)
                )

    def delete(self, key: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(kv_store).where(kv_store.c.key == key))
