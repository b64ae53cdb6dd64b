"""Plain-text helpers for user supplied metadata fields."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_TAG_RE = re.compile(r"<[^>]*>")
_OCTET_RE = re.compile(r"%[a-fA-F0-9]{2}")
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_text_field(value: str) -> str:
    """Reduce a metadata value to a single line of plain text.

    Strips HTML tags and percent-encoded octets, collapses runs of
    whitespace (including newlines and tabs) to one space, then trims.

    Args:
        value: Raw value from a CSV cell.

    Returns:
        Sanitized single-line string (may be empty).
    """
    text = _TAG_RE.sub("", value)
    text = _OCTET_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def is_meta_valid(meta: Mapping[str, Any], field: str) -> bool:
    """Return True if `field` is present in `meta` as a non-empty string."""
    value = meta.get(field)
    return isinstance(value, str) and value != ""
