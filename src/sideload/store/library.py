"""Local media library: files on disk, rows in SQLite.

Uploaded files land under `<media_dir>/YYYY/MM/` with a name that is
unique within that folder; each file gets one row in the `media` table
whose integer id is the MediaId handed back to the importer.
"""

from __future__ import annotations

import json
import logging
import mimetypes
import shutil
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

import requests

from .. import global_config as g
from ..database import crud, initialize_database, queries, resolve_db_path, transaction
from ..database.errors import DatabaseError, NotFoundError, ensure_found
from ..errors import DownloadError, StoreError
from ..models import MediaId, SideloadFile
from ..utils.time import utc_now

logger = logging.getLogger(__name__)

# Extensions the library accepts for upload (no period, lower-case)
ALLOWED_UPLOAD_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {
        # images
        "jpg", "jpeg", "jpe", "gif", "png", "bmp", "tif", "tiff", "webp", "avif", "ico", "heic",
        # video
        "mp4", "m4v", "mov", "wmv", "avi", "mpg", "mpeg", "ogv", "webm", "3gp", "3g2",
        # audio
        "mp3", "m4a", "ogg", "oga", "wav", "flac", "wma", "mid", "midi",
        # text
        "txt", "csv", "tsv", "ics", "vtt", "srt",
        # documents
        "pdf", "doc", "docx", "odt", "rtf", "xls", "xlsx", "ods", "ppt", "pptx", "odp", "key", "pages", "numbers",
    }
)


class LibraryMediaStore:
    """MediaStore backed by a media directory and a SQLite index.

    Args:
        db_path: SQLite database path. Defaults to global_config.DEFAULT_DB_PATH.
        media_dir: Root folder for stored files. Defaults to global_config.MEDIA_DIR.
        temp_dir: Folder for in-flight downloads. Defaults to the system temp dir.
        session: Optional requests session (connection reuse, custom adapters).
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        db_path: Path | str | None = None,
        media_dir: Path | str | None = None,
        *,
        temp_dir: Path | str | None = None,
        session: requests.Session | None = None,
        timeout: float = g.DOWNLOAD_TIMEOUT_S,
    ) -> None:
        self.db_path = resolve_db_path(db_path)
        self.media_dir = Path(media_dir) if media_dir else g.MEDIA_DIR
        self.temp_dir = Path(temp_dir) if temp_dir else None
        self.session = session
        self.timeout = timeout
        initialize_database(self.db_path)

    # -- downloads -----------------------------------------------------------

    def download(self, url: str) -> Path:
        """Stream `url` into a temporary file and return its path.

        Raises:
            DownloadError: Empty URL, network failure, non-2xx response, or
                the temporary file could not be written.
        """
        if not url:
            raise DownloadError("No URL given")

        get = self.session.get if self.session is not None else requests.get
        tmp_path: Path | None = None
        try:
            with get(
                url,
                stream=True,
                timeout=self.timeout,
                headers={"User-Agent": g.USER_AGENT},
            ) as resp:
                if not 200 <= resp.status_code < 300:
                    raise DownloadError(f"HTTP {resp.status_code} downloading {url}")

                if self.temp_dir is not None:
                    self.temp_dir.mkdir(parents=True, exist_ok=True)
                with tempfile.NamedTemporaryFile(
                    mode="wb",
                    prefix="sideload-",
                    suffix=".tmp",
                    dir=self.temp_dir,
                    delete=False,
                ) as temp_file:
                    tmp_path = Path(temp_file.name)
                    for chunk in resp.iter_content(chunk_size=g.DOWNLOAD_CHUNK_SIZE):
                        if chunk:
                            temp_file.write(chunk)
        except DownloadError:
            logger.warning("Unable to download %s: bad response status", url)
            raise
        except (requests.RequestException, OSError) as exc:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            logger.warning("Unable to download %s: %s", url, exc)
            raise DownloadError(f"Unable to download {url}") from exc

        logger.debug("Downloaded %s to %s", url, tmp_path)
        return tmp_path

    def delete_temp(self, tmp_path: Path) -> None:
        Path(tmp_path).unlink(missing_ok=True)

    # -- storage -------------------------------------------------------------

    def store(
        self,
        file: SideloadFile,
        metadata: Mapping[str, str],
        *,
        source_url: str | None = None,
    ) -> MediaId:
        """Move a downloaded file into the library and index it.

        Args:
            file: Target name plus temporary path.
            metadata: Row metadata, kept as JSON on the media row.
            source_url: URL the file was downloaded from.

        Returns:
            Id of the new media row.

        Raises:
            StoreError: Disallowed file type, missing temp file, or the file
                could not be moved or indexed.
        """
        name = Path(file.name)
        extension = name.suffix.lstrip(".").lower()
        if extension not in ALLOWED_UPLOAD_EXTENSIONS:
            raise StoreError(f"File type not allowed: {file.name}")

        tmp_path = Path(file.tmp_name)
        if not tmp_path.is_file():
            raise StoreError(f"Temporary file missing: {tmp_path}")

        target_dir = self.media_dir / utc_now().strftime("%Y/%m")
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            target = self._unique_path(target_dir, name.stem, name.suffix)
            shutil.move(str(tmp_path), target)
        except (OSError, ValueError) as exc:
            raise StoreError(f"Could not move {tmp_path} into {target_dir}: {exc}") from exc

        record = {
            "title": name.stem,
            "file_name": target.name,
            "rel_path": target.relative_to(self.media_dir).as_posix(),
            "mime_type": mimetypes.guess_type(target.name)[0],
            "source_url": source_url,
            "meta_json": json.dumps(dict(metadata), sort_keys=True) if metadata else None,
        }
        try:
            with transaction(self.db_path) as conn:
                row = crud.insert(conn, "media", record)
        except DatabaseError as exc:
            target.unlink(missing_ok=True)
            raise StoreError(f"Could not index {target.name}: {exc}") from exc

        logger.info("Stored %s as media %s", record["rel_path"], row["id"])
        return row["id"]

    @staticmethod
    def _unique_path(directory: Path, stem: str, suffix: str) -> Path:
        candidate = directory / f"{stem}{suffix}"
        counter = 1
        while candidate.exists():
            candidate = directory / f"{stem}-{counter}{suffix}"
            counter += 1
        return candidate

    def set_accessible_text(self, media_id: MediaId, text: str) -> None:
        self._update(media_id, {"alt_text": text})

    def update_descriptive_fields(
        self,
        media_id: MediaId,
        *,
        caption: str | None = None,
        description: str | None = None,
    ) -> None:
        values = {
            key: value
            for key, value in (("caption", caption), ("description", description))
            if value is not None
        }
        if values:
            self._update(media_id, values)

    def _update(self, media_id: MediaId, values: Mapping[str, Any]) -> None:
        with transaction(self.db_path) as conn:
            updated = crud.update(conn, "media", {"id": media_id}, values)
        if not updated:
            raise NotFoundError(f"Media {media_id} not found")

    # -- inspection ----------------------------------------------------------

    def get_media(self, media_id: MediaId) -> dict[str, Any]:
        """Return the media row for `media_id`.

        Raises:
            NotFoundError: If no such row exists.
        """
        with transaction(self.db_path) as conn:
            row = queries.fetch_one(conn, "SELECT * FROM media WHERE id = ?", (media_id,))
        return ensure_found(row, f"Media {media_id} not found")

    def list_media(self, *, limit: int | None = None) -> list[dict[str, Any]]:
        with transaction(self.db_path) as conn:
            return crud.select(conn, "media", order_by="id", limit=limit)

    def media_path(self, media_id: MediaId) -> Path:
        return self.media_dir / self.get_media(media_id)["rel_path"]
