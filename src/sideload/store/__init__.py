"""Media stores the importer can hand downloaded files to."""

from .base import MediaStore
from .library import ALLOWED_UPLOAD_EXTENSIONS, LibraryMediaStore

__all__ = [
    "ALLOWED_UPLOAD_EXTENSIONS",
    "LibraryMediaStore",
    "MediaStore",
]
