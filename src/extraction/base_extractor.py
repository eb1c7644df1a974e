# src/extraction/base_extractor.py - v2
"""Shared input handling for extractor functions.

Every extractor has the signature ``(content, filename) -> str`` and is
total: it returns some usable text for any input and never raises.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Union

ExtractorInput = Union[bytes, str, Path]
ExtractorFn = Callable[[ExtractorInput, str], str]

# Strings longer than this, or spanning lines, are never treated as paths.
_MAX_PATH_LENGTH = 1024


def read_text_content(content: ExtractorInput) -> str:
    """Resolve extractor input into text.

    Paths (and strings naming an existing file) are read as UTF-8; bytes are
    decoded with replacement characters; any other string is already-loaded
    content.
    """
    if isinstance(content, Path):
        return content.read_text(encoding="utf-8", errors="replace")
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    if _names_existing_file(content):
        return Path(content).read_text(encoding="utf-8", errors="replace")
    return content


def fallback_text(content: ExtractorInput) -> str:
    """Best-effort text for the failure path: the input itself, never a path read."""
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    if isinstance(content, str):
        return content
    return ""


def _names_existing_file(value: str) -> bool:
    if not value or "\n" in value or len(value) > _MAX_PATH_LENGTH:
        return False
    try:
        return Path(value).is_file()
    except (OSError, ValueError):
        return False
