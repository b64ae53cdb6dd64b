"""Table-agnostic CRUD helpers.

Callers pass an open connection and own the transaction (normally via
`connection.transaction`). Table and column names are interpolated into
SQL, so each one is checked by `_validate_identifier` first; values are
always bound as parameters.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from ..utils.time import now_ts_utc_z

from . import queries
from .errors import from_sqlite_error

logger = logging.getLogger(__name__)

RUN_STATUSES = ("success", "failed", "partial")

T = TypeVar("T")


def _validate_identifier(name: str) -> str:
    """Return `name` if it is a plain SQL identifier (letters, digits, _).

    Raises:
        ValueError: For anything else.
    """
    if not name.replace("_", "").isalnum():
        raise ValueError(f"Unsafe SQL identifier: {name!r}")
    return name


def _where(filters: Mapping[str, Any]) -> tuple[str, list[Any]]:
    clause = " AND ".join(f"{_validate_identifier(col)} = ?" for col in filters)
    return clause, list(filters.values())


def _run(fn: Callable[..., T], conn: sqlite3.Connection, sql: str, params: list[Any]) -> T:
    try:
        return fn(conn, sql, tuple(params))
    except sqlite3.Error as exc:
        raise from_sqlite_error(exc) from exc


def insert(conn: sqlite3.Connection, table: str, data: Mapping[str, Any]) -> dict[str, Any]:
    """Insert one row and return what was written.

    `created_at` and `updated_at` are filled in when absent. The returned
    dict also carries the new rowid as "id" unless `data` set its own.

    Raises:
        ValueError: Unsafe table or column name.
        IntegrityError: A constraint (e.g. UNIQUE rel_path) was violated.
        DatabaseError: Any other SQLite failure.
    """
    now = now_ts_utc_z()
    payload = {"created_at": now, "updated_at": now, **data}
    columns = ", ".join(_validate_identifier(col) for col in payload)
    placeholders = ", ".join("?" * len(payload))
    sql = f"INSERT INTO {_validate_identifier(table)} ({columns}) VALUES ({placeholders})"  # noqa: S608

    rowid = _run(queries.execute_insert, conn, sql, list(payload.values()))
    logger.debug("Inserted row %s into %s", rowid, table)
    payload.setdefault("id", rowid)
    return payload


def select(
    conn: sqlite3.Connection,
    table: str,
    filters: Mapping[str, Any] | None = None,
    *,
    order_by: str | None = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Return rows of `table` whose columns equal every value in `filters`.

    Args:
        conn: Open connection.
        table: Table to read.
        filters: Equality conditions, ANDed. None or empty selects all rows.
        order_by: Column to sort ascending by.
        limit: Cap on the number of rows.

    Raises:
        ValueError: Unsafe table, filter or order_by name.
        DatabaseError: SQLite failure.
    """
    sql = f"SELECT * FROM {_validate_identifier(table)}"  # noqa: S608
    params: list[Any] = []
    if filters:
        clause, params = _where(filters)
        sql += f" WHERE {clause}"
    if order_by:
        sql += f" ORDER BY {_validate_identifier(order_by)}"
    if limit is not None:
        sql += " LIMIT ?"
        params.append(limit)
    return _run(queries.fetch_all, conn, sql, params)


def update(
    conn: sqlite3.Connection,
    table: str,
    filters: Mapping[str, Any],
    values: Mapping[str, Any],
) -> int:
    """Set `values` on matching rows, bump `updated_at`, return the row count.

    Raises:
        ValueError: Empty `filters` (whole-table updates are refused) or an
            unsafe name.
        DatabaseError: SQLite failure.
    """
    if not filters:
        raise ValueError("Refusing to perform UPDATE with no filters")

    payload = {**values, "updated_at": now_ts_utc_z()}
    assignments = ", ".join(f"{_validate_identifier(col)} = ?" for col in payload)
    clause, where_params = _where(filters)
    sql = f"UPDATE {_validate_identifier(table)} SET {assignments} WHERE {clause}"  # noqa: S608
    return _run(queries.execute_update, conn, sql, [*payload.values(), *where_params])


def delete(conn: sqlite3.Connection, table: str, filters: Mapping[str, Any]) -> int:
    """Delete matching rows and return how many went.

    Raises:
        ValueError: Empty `filters` or an unsafe name.
        DatabaseError: SQLite failure.
    """
    if not filters:
        raise ValueError("Refusing to perform DELETE with no filters")

    clause, params = _where(filters)
    sql = f"DELETE FROM {_validate_identifier(table)} WHERE {clause}"  # noqa: S608
    return _run(queries.execute_update, conn, sql, params)


def log_import_run(
    conn: sqlite3.Connection,
    *,
    source: str,
    started_at: str,
    ended_at: str | None = None,
    status: str = "success",
    rows_total: int | None = None,
    rows_imported: int | None = None,
    rows_failed: int | None = None,
    meta: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Record one CSV import run in import_run_log.

    Example:
        with transaction(db_path) as conn:
            log_import_run(
                conn,
                source="media.csv",
                started_at=started,
                ended_at=now_ts_utc_z(),
                status="partial",
                rows_total=10,
                rows_imported=8,
                rows_failed=2,
            )

    Args:
        conn: Open connection (caller manages the transaction).
        source: CSV path the run read from.
        started_at: Canonical UTC instant the run began.
        ended_at: Canonical UTC instant the run finished.
        status: One of RUN_STATUSES.
        rows_total: Data rows read.
        rows_imported: Rows stored successfully.
        rows_failed: Rows skipped with a failure reason.
        meta: Extra context stored as JSON (e.g. hook references).

    Returns:
        The inserted row as a dict, including its generated UUID "id".

    Raises:
        ValueError: Unknown status.
        DatabaseError: SQLite failure.
    """
    if status not in RUN_STATUSES:
        raise ValueError(f"Invalid status: {status}. Must be one of: {', '.join(RUN_STATUSES)}")

    entry = insert(
        conn,
        "import_run_log",
        {
            "id": str(uuid.uuid4()),
            "source": source,
            "started_at": started_at,
            "ended_at": ended_at,
            "status": status,
            "rows_total": rows_total,
            "rows_imported": rows_imported,
            "rows_failed": rows_failed,
            "meta": json.dumps(meta) if meta else None,
        },
    )
    logger.debug("Logged import run for %s (%s)", source, status)
    return entry
