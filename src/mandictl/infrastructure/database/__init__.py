"""SQLite database engine and schema via SQLAlchemy Core."""

from mandictl.infrastructure.database.engine import DB_FILENAME, create_db_engine, init_database
from mandictl.infrastructure.database.schema import kv_store, metadata

__all__ = [
    "DB_FILENAME",
    "create_db_engine",
    "init_database",
    "kv_store",
    "metadata",
]
