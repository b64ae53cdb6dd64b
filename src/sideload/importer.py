"""Bulk media importer.

Reads a CSV whose `src` column holds external URLs, downloads each one,
stores it through a media store and fires upload hooks. Other built-in
columns are `alt`, `caption` and `description`; any further columns are
passed through to the hooks untouched.

Example:
    results = (
        BulkMediaImporter.make(LibraryMediaStore())
        .from_source("media.csv")
        .on_upload(assign_category)
        .run()
    )

Rows are processed one at a time. A row that fails is logged and skipped;
only an unreadable CSV or a missing `src` column stops the run. Running
the same CSV twice imports every row twice.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from . import extensions
from .database.errors import DatabaseError
from .errors import DownloadError, SideloadError, StoreError
from .hooks import HookDispatcher, UploadHook
from .models import (
    DOWNLOAD_FAILED,
    STORE_REJECTED,
    UNRESOLVABLE_EXTENSION,
    CsvRow,
    ImportResult,
    SideloadFile,
)
from .reader import read_csv_rows
from .store.base import MediaStore
from .utils.text import is_meta_valid, sanitize_text_field

logger = logging.getLogger(__name__)


class BulkMediaImporter:
    """Builder and runner for one CSV import job."""

    def __init__(self, store: MediaStore, hooks: HookDispatcher | None = None) -> None:
        self.store = store
        self.hooks = hooks or HookDispatcher()
        self.csv_path: Path | None = None

    @classmethod
    def make(cls, store: MediaStore) -> BulkMediaImporter:
        return cls(store)

    def from_source(self, csv_path: Path | str) -> BulkMediaImporter:
        """Set the CSV file to import from."""
        self.csv_path = Path(csv_path)
        return self

    from_csv = from_source

    def on_upload(self, hook: UploadHook) -> BulkMediaImporter:
        """Register a callback fired with `(media_id, metadata)` after each import."""
        self.hooks.register(hook)
        return self

    def run(self) -> list[ImportResult]:
        """Import every row of the configured CSV.

        Does nothing and returns an empty list when no source was set.

        Returns:
            One ImportResult per data row, in file order.

        Raises:
            NotFoundError: If the CSV cannot be read.
            ConfigError: If the CSV has no `src` column.

        Logs:
            - ERROR: "Failed to import image from URL: {url}" per failed row.
            - INFO: "Successfully imported {n} images!" at the end.
        """
        if not self.csv_path:
            return []
        return self.import_rows(read_csv_rows(self.csv_path))

    def import_rows(self, rows: Iterable[CsvRow]) -> list[ImportResult]:
        results: list[ImportResult] = []
        success_count = 0

        for row in rows:
            result = self.import_row(row)
            results.append(result)
            if result.ok:
                success_count += 1
            else:
                logger.error("Failed to import image from URL: %s", row.url)

        if success_count:
            logger.info("Successfully imported %d images!", success_count)
        else:
            logger.info("No images were imported")
        return results

    def import_row(self, row: CsvRow) -> ImportResult:
        """Download, store, annotate and announce a single row."""
        try:
            tmp_path = self.store.download(row.url)
        except DownloadError as exc:
            logger.debug("Row %d: %s", row.line_number, exc)
            return ImportResult.failure(row, DOWNLOAD_FAILED)

        stem, extension = extensions.split_url_filename(row.url)
        if not extension:
            mime = extensions.sniff_mime_type(tmp_path)
            extension = extensions.extension_for_mime(mime)
            if not extension:
                logger.warning("Row %d: no allowed extension for MIME type %r", row.line_number, mime)
                self.store.delete_temp(tmp_path)
                return ImportResult.failure(row, UNRESOLVABLE_EXTENSION)

        file = SideloadFile(name=f"{stem}.{extension}", tmp_name=tmp_path)
        try:
            media_id = self.store.store(file, row.metadata, source_url=row.url)
        except StoreError as exc:
            logger.warning("Row %d: store rejected %s: %s", row.line_number, file.name, exc)
            self.store.delete_temp(tmp_path)
            return ImportResult.failure(row, STORE_REJECTED)

        try:
            self._apply_metadata(media_id, row.metadata)
        except (SideloadError, DatabaseError) as exc:
            # media already stored; the row still counts as imported
            logger.error(
                "Failed to update metadata for media %s from URL: %s (%s)", media_id, row.url, exc
            )
        hook_errors = self.hooks.dispatch(media_id, row.metadata, url=row.url)
        return ImportResult.success(row, media_id, hook_errors)

    def _apply_metadata(self, media_id: int, metadata: Mapping[str, str]) -> None:
        if is_meta_valid(metadata, "alt"):
            self.store.set_accessible_text(media_id, sanitize_text_field(metadata["alt"]))

        fields = {
            field: sanitize_text_field(metadata[field])
            for field in ("caption", "description")
            if is_meta_valid(metadata, field)
        }
        if fields:
            self.store.update_descriptive_fields(media_id, **fields)


def summarize_results(results: list[ImportResult]) -> dict[str, Any]:
    """Build a CLI-friendly result dictionary from per-row results."""
    failed = [r for r in results if not r.ok]
    succeeded = len(results) - len(failed)
    hook_failures = [r for r in results if r.hook_errors]

    message = f"Imported {succeeded} of {len(results)} rows"
    if hook_failures:
        message += f" ({len(hook_failures)} with upload hook errors)"

    return {
        "success": not failed,
        "total": len(results),
        "succeeded": succeeded,
        "failed": len(failed),
        "message": message,
        "failures": [
            {"item": f"row {r.line_number}: {r.url or '(empty src)'}", "reason": r.reason}
            for r in failed
        ],
        "items": [
            {"item": r.url, "status": "success", "detail": f"media {r.media_id}"}
            for r in results
            if r.ok
        ],
    }
