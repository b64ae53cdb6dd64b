"""Opening the media library database.

One import run writes sequentially from a single process, so plain
per-operation connections are enough; nothing here pools or caches.
"""

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from pathlib import Path

from .. import global_config as g

logger = logging.getLogger(__name__)


def resolve_db_path(db_path: Path | str | None = None) -> Path:
    """Return `db_path` as a Path, or global_config.DEFAULT_DB_PATH when unset."""
    return Path(db_path) if db_path else g.DEFAULT_DB_PATH


def get_connection(db_path: Path | str | None = None) -> sqlite3.Connection:
    """Connect to the library database, creating its folder if needed.

    Rows come back as sqlite3.Row and foreign keys are enforced. The
    default DELETE journal mode is kept so no -wal/-shm files appear next
    to the database.
    """
    resolved = resolve_db_path(db_path)
    resolved.parent.mkdir(parents=True, exist_ok=True)
    logger.debug("Opening SQLite database at %s", resolved)

    conn = sqlite3.connect(str(resolved))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextlib.contextmanager
def transaction(db_path: Path | str | None = None) -> Iterator[sqlite3.Connection]:
    """Yield a fresh connection that commits on exit and always closes.

    Any exception inside the block rolls the transaction back and is
    re-raised.

    Example:
        with transaction(store.db_path) as conn:
            crud.insert(conn, "media", record)
    """
    conn = get_connection(db_path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        logger.debug("Rolled back transaction on %s", db_path or g.DEFAULT_DB_PATH)
        raise
    finally:
        conn.close()


def execute_script(conn: sqlite3.Connection, sql: str, *, description: str) -> None:
    """Run a multi-statement script such as schema.sql.

    Raises:
        sqlite3.Error: If any statement fails (logged first).
    """
    logger.info("Executing SQL script: %s", description)
    try:
        conn.executescript(sql)
    except sqlite3.Error:
        logger.exception("Failed while executing SQL script: %s", description)
        raise
