"""Value types passed between the pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

MediaId = int

# Row-level failure reasons
DOWNLOAD_FAILED: Final = "download failed"
UNRESOLVABLE_EXTENSION: Final = "unresolvable extension"
STORE_REJECTED: Final = "store rejected upload"


@dataclass(frozen=True)
class CsvRow:
    """One data row of the import CSV.

    Attributes:
        url: Value of the `src` column.
        metadata: Every other column keyed by header name.
        line_number: 1-based data row number (header excluded).
    """

    url: str
    metadata: dict[str, str]
    line_number: int = 0


@dataclass(frozen=True)
class SideloadFile:
    """A downloaded file handed to a media store.

    Attributes:
        name: Target file name including extension (e.g. "photo.png").
        tmp_name: Path of the temporary download.
    """

    name: str
    tmp_name: Path


@dataclass(frozen=True)
class ImportResult:
    """Outcome of importing one CSV row.

    Exactly one of `media_id` / `reason` is set. `hook_errors` lists
    failures raised by upload callbacks; they do not change the outcome.
    """

    url: str
    media_id: MediaId | None = None
    reason: str | None = None
    line_number: int = 0
    hook_errors: tuple[str, ...] = field(default=())

    @property
    def ok(self) -> bool:
        return self.media_id is not None

    @classmethod
    def success(
        cls,
        row: CsvRow,
        media_id: MediaId,
        hook_errors: tuple[str, ...] = (),
    ) -> ImportResult:
        return cls(
            url=row.url,
            media_id=media_id,
            line_number=row.line_number,
            hook_errors=hook_errors,
        )

    @classmethod
    def failure(cls, row: CsvRow, reason: str) -> ImportResult:
        return cls(url=row.url, reason=reason, line_number=row.line_number)
