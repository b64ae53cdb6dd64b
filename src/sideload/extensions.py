"""File name and extension resolution for downloaded media.

A file extension is taken from the URL path when it has one. Otherwise the
downloaded content is sniffed and its MIME type is mapped through a fixed
allow-list: MIME types do not always map onto a single valid extension
(application/msword is served for .doc, .dot and .wiz, for instance), so
only the vetted subset below is trusted.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path, PurePosixPath
from typing import Final
from urllib.parse import unquote, urlparse

logger = logging.getLogger(__name__)

# mime type -> extension (no period)
MIME_EXTENSIONS: Final[dict[str, str]] = {
    "text/plain": "txt",
    "text/csv": "csv",
    "application/msword": "doc",
    "image/jpg": "jpg",
    "image/jpeg": "jpeg",
    "image/gif": "gif",
    "image/png": "png",
    "video/mp4": "mp4",
}

FALLBACK_STEM = "media"

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")


def split_url_filename(url: str) -> tuple[str, str]:
    """Split the last path segment of a URL into (stem, extension).

    The query string and fragment are ignored and percent-escapes are
    decoded; control characters (NUL, newlines) are then dropped. The
    extension is returned without its period and may be empty.
    A URL with no last path segment falls back to its host name as stem.

    Examples:
        "https://example.com/photo.png?w=10" -> ("photo", "png")
        "https://example.com/file" -> ("file", "")
    """
    parsed = urlparse(url)
    name = _CONTROL_CHARS_RE.sub("", PurePosixPath(unquote(parsed.path)).name)
    if not name:
        return (parsed.hostname or FALLBACK_STEM, "")

    path = PurePosixPath(name)
    extension = path.suffix.lstrip(".")
    stem = path.stem if extension else name
    return (stem, extension)


def normalize_mime_type(mime: str | None) -> str | None:
    """Lower-case a MIME type and drop parameters such as `; charset=`."""
    if not mime:
        return None
    normalized = mime.split(";", 1)[0].strip().lower()
    return normalized or None


def sniff_mime_type(file_path: Path) -> str | None:
    """Return the MIME type of a file's content, or None if it can't be read.

    Uses libmagic, so the result depends on file bytes, never on the name.
    """
    # libmagic is only loaded when a URL path carries no extension
    import magic

    try:
        return normalize_mime_type(magic.from_file(str(file_path), mime=True))
    except (OSError, magic.MagicException) as exc:
        logger.warning("Could not determine MIME type of %s: %s", file_path, exc)
        return None


def extension_for_mime(mime: str | None) -> str | None:
    """Map a MIME type through the allow-list; None if absent or not allowed."""
    normalized = normalize_mime_type(mime)
    if normalized is None:
        return None
    return MIME_EXTENSIONS.get(normalized)
