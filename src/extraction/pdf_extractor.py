# src/extraction/pdf_extractor.py - v2
"""PDF extractor using PyMuPDF (fitz).

Text only, page by page. Corrupt or unreadable PDFs yield empty text so
one bad file never aborts a knowledge-base load.
"""

from __future__ import annotations

import logging
from pathlib import Path

import fitz  # PyMuPDF

from kbloader.extraction.base_extractor import ExtractorInput

logger = logging.getLogger(__name__)


def extract_pdf(content: ExtractorInput, filename: str = "") -> str:
    """Extract all page text from a PDF given as bytes or a file path."""
    label = filename or "<bytes>"
    try:
        doc = _open_document(content)
    except Exception as exc:
        logger.warning("Could not open PDF %s: %s", label, exc)
        return ""

    parts: list[str] = []
    try:
        for page in doc:
            text = page.get_text("text").strip()
            if text:
                parts.append(text)
    except Exception as exc:
        logger.warning("PDF text extraction failed for %s: %s", label, exc)
        return ""
    finally:
        doc.close()

    return "\n\n".join(parts)


def _open_document(content: ExtractorInput) -> fitz.Document:
    """Open PDF from various input types."""
    if isinstance(content, Path):
        return fitz.open(str(content))
    if isinstance(content, str):
        return fitz.open(content)
    return fitz.open(stream=content, filetype="pdf")
