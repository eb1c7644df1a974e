# src/extraction/md_extractor.py - v3
"""Markdown extractor: render to HTML, then strip markup to plain prose."""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup
from markdown_it import MarkdownIt

from kbloader.extraction.base_extractor import ExtractorInput, fallback_text, read_text_content

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_markdown = MarkdownIt()


def extract_markdown(content: ExtractorInput, filename: str = "") -> str:
    """Render Markdown and return its text with whitespace collapsed.

    On any failure the original input text is returned unchanged.
    """
    try:
        text = read_text_content(content)
    except Exception:
        logger.warning("Failed to read Markdown %s", filename or "<content>", exc_info=True)
        return fallback_text(content)

    try:
        html = _markdown.render(text)
        plain = BeautifulSoup(html, "html.parser").get_text(" ")
    except Exception:
        logger.warning(
            "Markdown rendering failed for %s, keeping source text",
            filename or "<content>", exc_info=True,
        )
        return text

    return _WHITESPACE_RE.sub(" ", plain).strip()
