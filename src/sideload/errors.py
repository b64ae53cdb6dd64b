"""Exception types for the import pipeline.

Two tiers:

- Job-level (fatal): `NotFoundError`, `ConfigError`. Raised before any
  row is processed and propagated to the caller.
- Row-level: `DownloadError`, `StoreError`. Raised by a media store and
  caught by the importer at the row boundary.
"""

from __future__ import annotations


class SideloadError(Exception):
    """Base exception for import errors."""


class NotFoundError(SideloadError):
    """Raised when the CSV source does not exist or cannot be read."""


class ConfigError(SideloadError):
    """Raised when the CSV source is structurally unusable (e.g. no `src` column)."""


class DownloadError(SideloadError):
    """Raised by a media store when a URL cannot be downloaded."""


class StoreError(SideloadError):
    """Raised by a media store when it rejects an upload."""
