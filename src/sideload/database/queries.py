"""Thin wrappers around cursor execution.

Every statement the library runs goes through `execute_query`, so SQL
failures are logged in one place before they propagate.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any

logger = logging.getLogger(__name__)

Params = tuple | dict | None


def execute_query(conn: sqlite3.Connection, sql: str, params: Params = None) -> sqlite3.Cursor:
    """Run one statement and hand back its cursor.

    Raises:
        sqlite3.Error: Re-raised after logging.

    Logs:
        - DEBUG: first 80 characters of the statement.
        - ERROR: the failing statement, with traceback.
    """
    try:
        cursor = conn.execute(sql, params or ())
    except sqlite3.Error:
        logger.exception("Statement failed: %s", sql[:80])
        raise
    logger.debug("Executed: %s", sql[:80])
    return cursor


def fetch_one(conn: sqlite3.Connection, sql: str, params: Params = None) -> dict[str, Any] | None:
    row = execute_query(conn, sql, params).fetchone()
    return dict(row) if row is not None else None


def fetch_all(conn: sqlite3.Connection, sql: str, params: Params = None) -> list[dict[str, Any]]:
    return [dict(row) for row in execute_query(conn, sql, params)]


def execute_update(conn: sqlite3.Connection, sql: str, params: Params = None) -> int:
    """Run an UPDATE or DELETE and return how many rows it touched."""
    count = execute_query(conn, sql, params).rowcount
    logger.debug("%s row(s) affected", count)
    return count


def execute_insert(conn: sqlite3.Connection, sql: str, params: Params = None) -> int:
    """Run an INSERT and return the new row's rowid."""
    return execute_query(conn, sql, params).lastrowid
