"""SQLite persistence for the media library.

Connections and transactions come from `connection`, schema setup and
teardown from `init`, and table-level reads and writes from `crud`.
"""

from .connection import get_connection, resolve_db_path, transaction
from .crud import delete, insert, log_import_run, select, update
from .init import (
    CURRENT_SCHEMA_VERSION,
    DatabaseLockedError,
    delete_database,
    initialize_database,
)

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "DatabaseLockedError",
    "delete",
    "delete_database",
    "get_connection",
    "initialize_database",
    "insert",
    "log_import_run",
    "resolve_db_path",
    "select",
    "transaction",
    "update",
]
