"""CLI commands for inspecting the local media library."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ...store import LibraryMediaStore
from ..base import BaseCLI

app = typer.Typer(
    name="media",
    help="Inspect imported media",
)


@app.command("list")
def list_command(
    db_path: Annotated[
        Path | None,
        typer.Option("--db", help="Path to SQLite database file (defaults to global config)"),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("-n", "--limit", min=1, help="Show at most this many items"),
    ] = None,
) -> None:
    """List media items in the library, oldest first."""
    cli = BaseCLI("media")

    def _list() -> dict:
        store = LibraryMediaStore(db_path=db_path)
        rows = store.list_media(limit=limit)
        return {
            "success": True,
            "total": len(rows),
            "items": [
                {
                    "item": f"#{row['id']} {row['rel_path']}",
                    "status": row["mime_type"] or "unknown type",
                    "detail": row["alt_text"] or "",
                }
                for row in rows
            ],
        }

    cli.handle_cli_operation(operation="media list", op_callable=_list)
