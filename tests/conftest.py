from __future__ import annotations

import sqlite3
from collections.abc import Callable
from pathlib import Path

import pytest
import requests

from sideload.store import LibraryMediaStore

from helpers import FakeHttp, RecordingStore


@pytest.fixture(autouse=True)
def app_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Forces test mode. Application code can use this to refuse dangerous behaviors.
    Automatically applied to all tests.
    """
    monkeypatch.setenv("APP_ENV", "test")


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """
    A dedicated temp root directory for each test.
    All filesystem writes in tests should be under this root (or tmp_path directly).
    """
    root = tmp_path / "proj"
    (root / "data" / "in").mkdir(parents=True)
    (root / "data" / "uploads").mkdir(parents=True)
    return root


@pytest.fixture(autouse=True)
def chdir_to_project_root(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Automatically change working directory to project_root for all tests.
    This ensures relative-path operations go into the temp directory by default.
    """
    monkeypatch.chdir(project_root)


@pytest.fixture
def sqlite_path(project_root: Path) -> Path:
    """
    On-disk SQLite DB under the temp project root (more realistic than :memory:).
    """
    return project_root / "db" / "test.sqlite"


@pytest.fixture
def media_dir(project_root: Path) -> Path:
    return project_root / "data" / "uploads"


@pytest.fixture
def db_conn(sqlite_path: Path, project_root: Path) -> sqlite3.Connection:
    """
    A SQLite connection that is always closed after each test.

    The DB must live under project_root so tests never touch a real library.
    """
    try:
        sqlite_path.resolve().relative_to(project_root.resolve())
    except ValueError:
        raise AssertionError(
            f"SQLite path {sqlite_path} is not under project_root {project_root}. "
            "This prevents accidental writes to real databases."
        )

    sqlite_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(sqlite_path)
    conn.row_factory = sqlite3.Row
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        yield conn
    finally:
        conn.close()


@pytest.fixture
def library(sqlite_path: Path, media_dir: Path, project_root: Path) -> LibraryMediaStore:
    """A local media library rooted in the temp project."""
    return LibraryMediaStore(
        db_path=sqlite_path,
        media_dir=media_dir,
        temp_dir=project_root / "tmp",
    )


@pytest.fixture
def write_csv(project_root: Path) -> Callable[..., Path]:
    """Write CSV text to data/in/<name> and return the path."""

    def _write(text: str, name: str = "media.csv") -> Path:
        path = project_root / "data" / "in" / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def fake_http(monkeypatch: pytest.MonkeyPatch) -> FakeHttp:
    """Replace requests.get so no test ever touches the network."""
    http = FakeHttp()
    monkeypatch.setattr(requests, "get", http.get)
    return http


@pytest.fixture
def recording_store(project_root: Path) -> RecordingStore:
    return RecordingStore(project_root / "tmp")
