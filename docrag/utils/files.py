"""Filename helpers for stored uploads."""

from __future__ import annotations

import re
import uuid
from pathlib import PurePath

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def sanitize_filename(name: str) -> str:
    """Replace every character outside ``[a-zA-Z0-9._-]`` with ``_``.

    Directory components are dropped first so a client-supplied name can
    never escape the upload directory.
    """
    base = PurePath(name.replace("\\", "/")).name
    cleaned = _UNSAFE_CHARS.sub("_", base)
    if cleaned in ("", ".", ".."):
        return "file"
    return cleaned


def unique_stored_name(original_name: str) -> str:
    """Build an on-disk name of the form ``<base>-<unique><ext>``."""
    safe = sanitize_filename(original_name)
    path = PurePath(safe)
    suffix = path.suffix
    stem = safe[: -len(suffix)] if suffix else safe
    return f"{stem or 'file'}-{uuid.uuid4().hex[:12]}{suffix.lower()}"


def file_extension(name: str) -> str:
    """Return the lowercased extension of *name* including the dot, or ``""``."""
    return PurePath(name).suffix.lower()
