"""
sideload core package.

Bulk-imports media from external URLs listed in a CSV file:

- `sideload.reader` parses the CSV (`src` column required)
- `sideload.importer` downloads, names, stores and annotates each row
- `sideload.hooks` fires user callbacks after every successful import
- `sideload.store` holds the media store contract and the local library
- `sideload.cli` exposes all of it as the `sideload` command

Configuration:
- Shared, project-wide filesystem anchors live in `sideload.global_config`.
"""

from .errors import ConfigError, DownloadError, NotFoundError, SideloadError, StoreError
from .hooks import HookDispatcher, load_hook
from .importer import BulkMediaImporter, summarize_results
from .models import CsvRow, ImportResult, SideloadFile
from .reader import read_csv_rows
from .store import LibraryMediaStore, MediaStore

__all__ = [
    "BulkMediaImporter",
    "ConfigError",
    "CsvRow",
    "DownloadError",
    "HookDispatcher",
    "ImportResult",
    "LibraryMediaStore",
    "MediaStore",
    "NotFoundError",
    "SideloadError",
    "SideloadFile",
    "StoreError",
    "load_hook",
    "read_csv_rows",
    "summarize_results",
]
