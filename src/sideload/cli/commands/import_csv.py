"""CLI command for importing media from a CSV file."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ...database import log_import_run, transaction
from ...hooks import load_hook
from ...importer import BulkMediaImporter, summarize_results
from ...reader import read_csv_rows
from ...store import LibraryMediaStore
from ...utils.time import now_ts_utc_z
from ..base import BaseCLI


def import_command(
    csv_path: Annotated[
        Path,
        typer.Argument(help="CSV file with a `src` column of media URLs"),
    ],
    db_path: Annotated[
        Path | None,
        typer.Option("--db", help="Path to SQLite database file (defaults to global config)"),
    ] = None,
    media_dir: Annotated[
        Path | None,
        typer.Option("--media-dir", help="Folder imported files are stored under"),
    ] = None,
    on_upload: Annotated[
        list[str] | None,
        typer.Option(
            "--on-upload",
            help="Callback fired after each import, as 'package.module:function'. Repeatable.",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Validate the CSV and count rows without downloading"),
    ] = False,
    log_file: Annotated[
        bool,
        typer.Option("--log-file/--no-log-file", help="Write a run log under logs/"),
    ] = True,
) -> None:
    """Import media from the URLs listed in a CSV file.

    The first row must be a header containing `src`. Optional `alt`,
    `caption` and `description` columns annotate each item; any other
    columns are passed to upload callbacks. Failed rows are reported and
    skipped without affecting the exit code; exits with code 1 only if the
    CSV is missing or has no `src` column.
    """
    cli = BaseCLI("import")

    def _dry_run() -> dict:
        rows = list(read_csv_rows(csv_path))
        missing = [row for row in rows if not row.url]
        return {
            "success": not missing,
            "total": len(rows),
            "message": f"[DRY RUN] Would import {len(rows) - len(missing)} rows from {csv_path}",
            "failures": [
                {"item": f"row {row.line_number}", "reason": "empty src"} for row in missing
            ],
        }

    def _import() -> dict:
        hooks = [load_hook(reference) for reference in on_upload or []]
        store = LibraryMediaStore(db_path=db_path, media_dir=media_dir)
        importer = BulkMediaImporter.make(store).from_source(csv_path)
        for hook in hooks:
            importer.on_upload(hook)

        started_at = now_ts_utc_z()
        results = importer.run()
        summary = summarize_results(results)

        if not results:
            status = "success"
        elif summary["succeeded"] == 0:
            status = "failed"
        else:
            status = "success" if summary["success"] else "partial"
        with transaction(store.db_path) as conn:
            log_import_run(
                conn,
                source=str(csv_path),
                started_at=started_at,
                ended_at=now_ts_utc_z(),
                status=status,
                rows_total=summary["total"],
                rows_imported=summary["succeeded"],
                rows_failed=summary["failed"],
                meta={"hooks": on_upload} if on_upload else None,
            )
        return summary

    cli.handle_cli_operation(
        operation="import",
        op_callable=_dry_run if dry_run else _import,
        pre_message=None if dry_run else f"Importing media from {csv_path}...",
        log_name="import",
        log_dry_run=dry_run,
        enable_log=log_file,
        log_context={"csv_path": csv_path},
    )
