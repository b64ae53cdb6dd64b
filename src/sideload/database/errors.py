"""Exceptions raised by the database layer.

Raw sqlite3 errors never leave this package: crud helpers convert them
with `from_sqlite_error` so callers only handle `DatabaseError` and its
subclasses.
"""

from __future__ import annotations

import sqlite3
from typing import Any


class DatabaseError(Exception):
    """Base for every database-layer failure."""


class IntegrityError(DatabaseError):
    """A UNIQUE, NOT NULL, CHECK or foreign key constraint was violated."""


class NotFoundError(DatabaseError):
    """A row looked up by key does not exist."""


def from_sqlite_error(error: sqlite3.Error) -> DatabaseError:
    """Wrap a sqlite3 exception, keeping constraint violations distinct."""
    cls = IntegrityError if isinstance(error, sqlite3.IntegrityError) else DatabaseError
    return cls(str(error))


def ensure_found(row: Any, message: str = "Row not found") -> Any:
    """Return `row` unchanged, or raise NotFoundError(message) if it is None."""
    if row is None:
        raise NotFoundError(message)
    return row
