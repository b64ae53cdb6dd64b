"""CLI commands for media library database management."""

from pathlib import Path
from typing import Annotated, Any

import typer

from ...database import delete_database, initialize_database
from ..base import BaseCLI

db_app = typer.Typer(help="Media library database commands.")

DbPathOption = Annotated[
    Path | None,
    typer.Option(
        "--db",
        help="Path to SQLite database file (defaults to global config)",
    ),
]


class DatabaseCLI(BaseCLI):
    """CLI helpers for database management."""

    def __init__(self) -> None:
        super().__init__("db")

    def init_db(self, *, db_path: Path | None) -> dict[str, Any]:
        """Create the database (or bring an existing one up to the current schema)."""
        return self.handle_cli_operation(
            operation="db init",
            op_callable=lambda: self._init_operation(db_path=db_path),
            pre_message="Initializing database...",
        )

    def delete_db(self, *, db_path: Path | None) -> dict[str, Any]:
        """Delete the database file; stored media files are left in place."""
        return self.handle_cli_operation(
            operation="db delete",
            op_callable=lambda: self._delete_operation(db_path=db_path),
            pre_message="Deleting database...",
        )

    def _init_operation(self, *, db_path: Path | None) -> dict[str, Any]:
        resolved = initialize_database(db_path=db_path)
        return {"success": True, "message": f"Database ready at {resolved}"}

    def _delete_operation(self, *, db_path: Path | None) -> dict[str, Any]:
        """Convert delete_database's outcome to a standardized result.

        Raises:
            DatabaseLockedError: If database is in use (handled by handle_cli_operation).
            OSError: If deletion fails for other reasons (handled by handle_cli_operation).
        """
        removed = delete_database(db_path=db_path)
        message = "Database deleted successfully" if removed else "Database does not exist"
        return {"success": True, "message": message}


cli = DatabaseCLI()


@db_app.command("init")
def init_command(db_path: DbPathOption = None) -> None:
    """Create the media library database.

    Safe to re-run: existing tables and rows are kept.
    """
    result = cli.init_db(db_path=db_path)
    if not result.get("success"):
        raise typer.Exit(1)


@db_app.command("delete")
def delete_command(db_path: DbPathOption = None) -> None:
    """Delete the media library database.

    Files already stored under the media directory are not removed. Exits
    with code 1 if deletion fails (e.g., database is locked).
    """
    result = cli.delete_db(db_path=db_path)
    if not result.get("success"):
        raise typer.Exit(1)


app = db_app
