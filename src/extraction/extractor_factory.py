# src/extraction/extractor_factory.py - v3
"""Registry: map a file extension to its text extractor.

Every extractor is a plain function ``(content, filename) -> str`` that never
raises. Extensions without a registered extractor fall back to plain text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath

from kbloader.extraction.base_extractor import ExtractorFn, ExtractorInput
from kbloader.extraction.md_extractor import extract_markdown
from kbloader.extraction.pdf_extractor import extract_pdf
from kbloader.extraction.source_extractor import extract_source_structure
from kbloader.extraction.txt_extractor import extract_plain_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisteredExtractor:
    """Extractor function plus whether it does CPU-bound blocking work."""

    fn: ExtractorFn
    blocking: bool = False


# Registry maps extension -> extractor.
_EXTRACTOR_REGISTRY: dict[str, RegisteredExtractor] = {}


class UnsupportedFormatError(ValueError):
    """Raised when no extractor is registered for an extension."""


def _normalize(extension: str) -> str:
    ext = extension.strip().lower()
    return ext if ext.startswith(".") else f".{ext}"


def _register_defaults() -> None:
    """Register built-in extractors."""
    _EXTRACTOR_REGISTRY[".pdf"] = RegisteredExtractor(extract_pdf, blocking=True)
    for ext in (".md", ".markdown"):
        _EXTRACTOR_REGISTRY[ext] = RegisteredExtractor(extract_markdown)
    for ext in (".ts", ".tsx", ".js", ".jsx"):
        _EXTRACTOR_REGISTRY[ext] = RegisteredExtractor(extract_source_structure)
    for ext in (".txt", ".text", ".py", ".java", ".sol"):
        _EXTRACTOR_REGISTRY[ext] = RegisteredExtractor(extract_plain_text)


_register_defaults()


def get_extractor(extension: str) -> RegisteredExtractor:
    """Return the registered extractor for *extension*.

    Raises:
        UnsupportedFormatError: If no extractor is registered.
    """
    ext = _normalize(extension)
    entry = _EXTRACTOR_REGISTRY.get(ext)
    if entry is None:
        raise UnsupportedFormatError(
            f"No extractor for format {ext!r}. "
            f"Supported: {', '.join(sorted(_EXTRACTOR_REGISTRY))}"
        )
    return entry


def register_extractor(extension: str, fn: ExtractorFn, *, blocking: bool = False) -> None:
    """Register a custom extractor for an extension, replacing any existing one."""
    _EXTRACTOR_REGISTRY[_normalize(extension)] = RegisteredExtractor(fn, blocking=blocking)


def supported_extensions() -> list[str]:
    """Return list of extensions with a registered extractor."""
    return sorted(_EXTRACTOR_REGISTRY.keys())


def is_blocking(filename: str) -> bool:
    """Whether extracting *filename* should be pushed off the event loop."""
    entry = _EXTRACTOR_REGISTRY.get(PurePosixPath(filename).suffix.lower())
    return entry is not None and entry.blocking


def extract_document(content: ExtractorInput, filename: str) -> str:
    """Extract text from *content* using the extractor for *filename*'s extension.

    Unregistered extensions are treated as plain text.
    """
    suffix = PurePosixPath(filename).suffix.lower()
    entry = _EXTRACTOR_REGISTRY.get(suffix)
    if entry is None:
        logger.debug("No extractor for %r, treating %s as plain text", suffix, filename)
        return extract_plain_text(content, filename)
    return entry.fn(content, filename)
