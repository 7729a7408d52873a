"""SQLAlchemy Core table definitions for the mandictl database.

A single key-value table backs every persisted slot (translation cache,
transaction ledger). Values are JSON text.
"""

from __future__ import annotations

from sqlalchemy import Column, MetaData, Table, Text

metadata = MetaData()

kv_store = Table(
    "kv_store",
    metadata,
    Column("key", Text, primary_key=True),
    Column("value", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
)
