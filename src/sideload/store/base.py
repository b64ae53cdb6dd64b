"""The media store contract the importer depends on."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from ..models import MediaId, SideloadFile


@runtime_checkable
class MediaStore(Protocol):
    """Durable storage for imported media and their descriptive fields.

    `download` and `store` signal failure by raising `DownloadError` and
    `StoreError` respectively. On a successful `store` the store takes
    ownership of the temporary file; otherwise the caller removes it with
    `delete_temp`.
    """

    def download(self, url: str) -> Path: ...

    def store(
        self,
        file: SideloadFile,
        metadata: Mapping[str, str],
        *,
        source_url: str | None = None,
    ) -> MediaId: ...

    def set_accessible_text(self, media_id: MediaId, text: str) -> None: ...

    def update_descriptive_fields(
        self,
        media_id: MediaId,
        *,
        caption: str | None = None,
        description: str | None = None,
    ) -> None: ...

    def delete_temp(self, tmp_path: Path) -> None: ...
