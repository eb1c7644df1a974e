# src/extraction/txt_extractor.py - v3
"""Plain text extractor: passthrough."""

from __future__ import annotations

import logging

from kbloader.extraction.base_extractor import ExtractorInput, fallback_text, read_text_content

logger = logging.getLogger(__name__)


def extract_plain_text(content: ExtractorInput, filename: str = "") -> str:
    """Return the text as-is, reading it first when given a file path."""
    try:
        return read_text_content(content)
    except Exception:
        logger.warning("Failed to read text %s", filename or "<content>", exc_info=True)
        return fallback_text(content)
