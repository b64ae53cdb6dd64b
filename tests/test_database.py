"""Tests for database initialization and the generic CRUD helpers."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path

import pytest

from sideload.database import (
    CURRENT_SCHEMA_VERSION,
    delete,
    delete_database,
    initialize_database,
    insert,
    log_import_run,
    select,
    transaction,
    update,
)
from sideload.database.errors import (
    DatabaseError,
    IntegrityError,
    NotFoundError,
    ensure_found,
    from_sqlite_error,
)


@pytest.fixture
def initialized_db(sqlite_path: Path) -> Path:
    initialize_database(sqlite_path)
    return sqlite_path


def _media_row(rel_path: str = "2026/10/a.png") -> dict[str, str]:
    return {"title": "a", "file_name": "a.png", "rel_path": rel_path}


@pytest.mark.integration
def test_initialize_creates_tables_and_records_version(initialized_db: Path) -> None:
    conn = sqlite3.connect(initialized_db)
    try:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
        version = conn.execute("SELECT value FROM schema_meta WHERE key = 'schema_version'").fetchone()[0]
    finally:
        conn.close()

    assert {"media", "import_run_log", "schema_meta"} <= tables
    assert version == str(CURRENT_SCHEMA_VERSION)


@pytest.mark.integration
def test_initialize_is_idempotent_and_keeps_rows(initialized_db: Path) -> None:
    with transaction(initialized_db) as conn:
        insert(conn, "media", _media_row())

    initialize_database(initialized_db)

    with transaction(initialized_db) as conn:
        assert len(select(conn, "media")) == 1


@pytest.mark.integration
def test_insert_returns_rowid_and_timestamps(initialized_db: Path) -> None:
    with transaction(initialized_db) as conn:
        first = insert(conn, "media", _media_row("a.png"))
        second = insert(conn, "media", _media_row("b.png"))

    assert second["id"] == first["id"] + 1
    assert first["created_at"].endswith("Z")
    assert first["created_at"] == first["updated_at"]


@pytest.mark.integration
def test_unique_violation_maps_to_integrity_error(initialized_db: Path) -> None:
    with pytest.raises(IntegrityError):
        with transaction(initialized_db) as conn:
            insert(conn, "media", _media_row())
            insert(conn, "media", _media_row())

    with transaction(initialized_db) as conn:
        assert select(conn, "media") == []


@pytest.mark.integration
def test_select_update_delete(initialized_db: Path) -> None:
    with transaction(initialized_db) as conn:
        row = insert(conn, "media", _media_row())
        insert(conn, "media", _media_row("other.png"))

        assert update(conn, "media", {"id": row["id"]}, {"alt_text": "Sunset"}) == 1
        (updated,) = select(conn, "media", {"id": row["id"]})
        assert updated["alt_text"] == "Sunset"

        assert [r["rel_path"] for r in select(conn, "media", order_by="rel_path", limit=1)] == [
            "2026/10/a.png"
        ]
        assert delete(conn, "media", {"id": row["id"]}) == 1
        assert len(select(conn, "media")) == 1


@pytest.mark.unit
def test_update_and_delete_require_filters(db_conn: sqlite3.Connection) -> None:
    with pytest.raises(ValueError, match="no filters"):
        update(db_conn, "media", {}, {"alt_text": "x"})
    with pytest.raises(ValueError, match="no filters"):
        delete(db_conn, "media", {})


@pytest.mark.unit
@pytest.mark.parametrize("table", ["media; DROP TABLE media", "me dia", "media--"])
def test_unsafe_identifiers_are_rejected(db_conn: sqlite3.Connection, table: str) -> None:
    with pytest.raises(ValueError, match="Unsafe SQL identifier"):
        select(db_conn, table)


@pytest.mark.integration
def test_log_import_run(initialized_db: Path) -> None:
    with transaction(initialized_db) as conn:
        entry = log_import_run(
            conn,
            source="media.csv",
            started_at="2026-10-18T10:00:00Z",
            ended_at="2026-10-18T10:00:05Z",
            status="partial",
            rows_total=3,
            rows_imported=2,
            rows_failed=1,
            meta={"hooks": ["pkg.mod:fn"]},
        )
        (stored,) = select(conn, "import_run_log")

    assert stored["id"] == entry["id"]
    assert (stored["rows_total"], stored["rows_imported"], stored["rows_failed"]) == (3, 2, 1)
    assert json.loads(stored["meta"]) == {"hooks": ["pkg.mod:fn"]}


@pytest.mark.unit
def test_log_import_run_rejects_unknown_status(db_conn: sqlite3.Connection) -> None:
    with pytest.raises(ValueError, match="Invalid status"):
        log_import_run(db_conn, source="x.csv", started_at="2026-10-18T10:00:00Z", status="done")


@pytest.mark.integration
def test_delete_database(initialized_db: Path) -> None:
    assert delete_database(initialized_db) is True
    assert not initialized_db.exists()
    assert delete_database(initialized_db) is False


@pytest.mark.unit
def test_error_helpers() -> None:
    assert isinstance(from_sqlite_error(sqlite3.IntegrityError("dup")), IntegrityError)
    assert type(from_sqlite_error(sqlite3.OperationalError("boom"))) is DatabaseError
    assert ensure_found({"id": 1}) == {"id": 1}
    with pytest.raises(NotFoundError, match="gone"):
        ensure_found(None, "gone")
