"""CSV source reader.

The first row of the file is the header row. A `src` column holding the
external URL is required; every other column is passed through as
metadata.
"""

from __future__ import annotations

import csv
import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

from .errors import ConfigError, NotFoundError
from .global_config import CSV_FIELD_SIZE_LIMIT
from .models import CsvRow

logger = logging.getLogger(__name__)

SRC_COLUMN = "src"


def read_csv_rows(csv_path: Path | str) -> Iterator[CsvRow]:
    """Open a CSV source and return a lazy iterator of its data rows.

    The path and header are validated eagerly, so both fatal conditions
    surface at call time rather than on the first `next()`. The returned
    iterator is single-pass and closes the file when exhausted.

    Args:
        csv_path: Path to the CSV file.

    Returns:
        Iterator yielding one CsvRow per data row.

    Raises:
        NotFoundError: If the path does not exist or cannot be read.
        ConfigError: If the header row has no `src` column.
    """
    path = Path(csv_path)
    if not path.is_file() or not os.access(path, os.R_OK):
        raise NotFoundError(f"CSV file not found or not readable: {path}")

    csv.field_size_limit(CSV_FIELD_SIZE_LIMIT)
    # undecodable bytes (e.g. Latin-1 exports) become U+FFFD inside their own cell
    try:
        handle = open(path, "r", encoding="utf-8-sig", errors="replace", newline="")  # noqa: SIM115
    except OSError as exc:
        raise NotFoundError(f"CSV file not found or not readable: {path}") from exc

    try:
        reader = csv.reader(handle)
        headers = next(reader, None)
        if not headers or SRC_COLUMN not in headers:
            raise ConfigError("missing src column")
    except Exception:
        handle.close()
        raise

    logger.debug("Reading %s (columns: %s)", path, ", ".join(headers))
    return _iter_rows(handle, reader, headers)


def _iter_rows(
    handle: TextIO,
    reader: Iterator[list[str]],
    headers: list[str],
) -> Iterator[CsvRow]:
    src_index = headers.index(SRC_COLUMN)
    try:
        for line_number, fields in enumerate(reader, start=1):
            if not fields:
                continue
            url = fields[src_index].strip() if src_index < len(fields) else ""
            metadata = {
                header: fields[index] if index < len(fields) else ""
                for index, header in enumerate(headers)
                if index != src_index
            }
            yield CsvRow(url=url, metadata=metadata, line_number=line_number)
    finally:
        handle.close()
