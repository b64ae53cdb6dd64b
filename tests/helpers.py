"""Test doubles shared across the suite: canned HTTP and a recording store."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import requests

from sideload.errors import DownloadError, StoreError
from sideload.models import SideloadFile

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\xff"
    b"\xff?\x00\x05\xfe\x02\xfe\xa7V\xbd\xfa\x00\x00\x00\x00IEND\xaeB`\x82"
)


class FakeResponse:
    """Just enough of requests.Response for streamed downloads."""

    def __init__(self, status_code: int = 200, body: bytes = b"") -> None:
        self.status_code = status_code
        self.body = body
        self.closed = False

    def iter_content(self, chunk_size: int = 1) -> list[bytes]:
        return [self.body[i : i + chunk_size] for i in range(0, len(self.body), chunk_size)]

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.closed = True


class FakeHttp:
    """Canned responses for requests.get, keyed by URL.

    Route values may be a FakeResponse, raw bytes (served with 200) or an
    exception instance (raised). Unknown URLs raise ConnectionError.
    """

    def __init__(self) -> None:
        self.routes: dict[str, FakeResponse | bytes | Exception] = {}
        self.calls: list[str] = []

    def get(self, url: str, **kwargs: object) -> FakeResponse:
        self.calls.append(url)
        target = self.routes.get(url)
        if target is None:
            raise requests.ConnectionError(f"no route for {url}")
        if isinstance(target, Exception):
            raise target
        if isinstance(target, bytes):
            return FakeResponse(200, target)
        return target


class RecordingStore:
    """In-memory MediaStore that records every call made to it."""

    def __init__(self, tmp_dir: Path) -> None:
        self.tmp_dir = tmp_dir
        self.tmp_dir.mkdir(parents=True, exist_ok=True)
        self.downloads: dict[str, bytes | Exception] = {}
        self.reject: set[str] = set()
        self.calls: list[tuple] = []
        self.stored: dict[int, dict] = {}
        self.deleted: list[Path] = []
        self.metadata_error: Exception | None = None
        self._next_id = 100

    def download(self, url: str) -> Path:
        self.calls.append(("download", url))
        body = self.downloads.get(url)
        if body is None:
            raise DownloadError(f"Unable to download {url}")
        if isinstance(body, Exception):
            raise body
        path = self.tmp_dir / f"dl-{len(self.calls)}.tmp"
        path.write_bytes(body)
        return path

    def store(
        self,
        file: SideloadFile,
        metadata: Mapping[str, str],
        *,
        source_url: str | None = None,
    ) -> int:
        self.calls.append(("store", file.name))
        if file.name in self.reject:
            raise StoreError(f"rejected {file.name}")
        self._next_id += 1
        self.stored[self._next_id] = {
            "name": file.name,
            "tmp_name": file.tmp_name,
            "metadata": dict(metadata),
            "source_url": source_url,
        }
        return self._next_id

    def set_accessible_text(self, media_id: int, text: str) -> None:
        self.calls.append(("set_accessible_text", media_id, text))
        if self.metadata_error is not None:
            raise self.metadata_error
        self.stored[media_id]["alt"] = text

    def update_descriptive_fields(
        self,
        media_id: int,
        *,
        caption: str | None = None,
        description: str | None = None,
    ) -> None:
        self.calls.append(("update_descriptive_fields", media_id, caption, description))
        if self.metadata_error is not None:
            raise self.metadata_error

    def delete_temp(self, tmp_path: Path) -> None:
        self.calls.append(("delete_temp", tmp_path))
        self.deleted.append(tmp_path)
        Path(tmp_path).unlink(missing_ok=True)

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

