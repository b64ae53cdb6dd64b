"""Create, upgrade-in-place and delete the media library database.

`initialize_database` runs the bundled `sql/schema.sql` (idempotent
CREATE ... IF NOT EXISTS statements) and records the schema version in
a one-row-per-key `schema_meta` table.
"""

from __future__ import annotations

import errno
import logging
import sqlite3
from pathlib import Path

from .. import global_config as g

from .connection import execute_script, get_connection, resolve_db_path
from .errors import DatabaseError, from_sqlite_error

logger = logging.getLogger(__name__)

CURRENT_SCHEMA_VERSION = 1

_SCHEMA_META_SQL = """
CREATE TABLE IF NOT EXISTS schema_meta (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

# SQLite side files that may sit next to the database
_SIDE_SUFFIXES = ("-journal", "-wal", "-shm")


class DatabaseLockedError(DatabaseError):
    """Raised when the database file cannot be removed because it is in use."""


def _record_schema_version(conn: sqlite3.Connection, version: int) -> None:
    conn.executescript(_SCHEMA_META_SQL)
    conn.execute(
        "INSERT INTO schema_meta (key, value) VALUES ('schema_version', ?) "
        "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
        (str(version),),
    )


def initialize_database(db_path: Path | str | None = None) -> Path:
    """Bring the database at `db_path` up to the current schema.

    Works on a missing file (it is created) and on an existing library
    (tables and rows are kept).

    Args:
        db_path: SQLite file. Defaults to global_config.DEFAULT_DB_PATH.

    Returns:
        The resolved database path.

    Raises:
        FileNotFoundError: If the packaged schema.sql is missing.
        DatabaseError: If the schema cannot be applied.

    Logs:
        - INFO: "Database initialization complete (schema_version=N)".
    """
    schema_file = g.SQL_DIR / "schema.sql"
    if not schema_file.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_file}")

    resolved = resolve_db_path(db_path)
    conn = get_connection(resolved)
    try:
        execute_script(conn, schema_file.read_text(encoding="utf-8"), description="schema.sql")
        _record_schema_version(conn, CURRENT_SCHEMA_VERSION)
        conn.commit()
    except sqlite3.Error as exc:
        conn.rollback()
        raise from_sqlite_error(exc) from exc
    finally:
        conn.close()

    logger.info("Database initialization complete (schema_version=%s)", CURRENT_SCHEMA_VERSION)
    return resolved


def delete_database(db_path: Path | str | None = None) -> bool:
    """Remove the database file and its journal side files.

    Media files under the media directory are left alone.

    Returns:
        True if a database file was removed, False if there was none.

    Raises:
        DatabaseLockedError: If a file is busy or locked.
        OSError: Any other removal failure.
    """
    resolved = resolve_db_path(db_path)
    if not resolved.exists():
        logger.info("No database at %s; nothing to delete", resolved)
        return False

    candidates = [resolved, *(resolved.with_name(resolved.name + s) for s in _SIDE_SUFFIXES)]
    for path in candidates:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            if exc.errno == errno.EBUSY or "locked" in str(exc).lower():
                raise DatabaseLockedError(
                    f"{path.name} is in use; close all processes using it and retry."
                ) from exc
            raise
        logger.debug("Removed %s", path)

    logger.info("Deleted database at %s", resolved)
    return True
