"""Utility modules.

This package provides shared utilities used across the codebase.
"""

from .text import is_meta_valid, sanitize_text_field
from .time import format_ts_utc_z, now_ts_utc_z, utc_now

__all__ = [
    # Metadata text handling
    "is_meta_valid",
    "sanitize_text_field",
    # Time utilities (canonical timestamps)
    "format_ts_utc_z",
    "now_ts_utc_z",
    "utc_now",
]
