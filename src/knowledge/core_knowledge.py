# src/knowledge/core_knowledge.py - v1
"""Static core knowledge: always prefixed to document content, and the last
line of defence when no document content has ever been loaded."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

CORE_KNOWLEDGE = """
# Project Overview

## Core Concept
This assistant answers questions about the project using its curated
documentation. Answers should stay within what the documents state.

## Key Components
- **Documentation**: guides, FAQs and announcements in the documents directory
- **Source code**: structural summaries of the project's repositories
- **Knowledge base**: the assembled text of every readable document
""".strip("\n")

FALLBACK_NOTICE = (
    "[Notice: the full knowledge base is currently unavailable. "
    "Only the core facts below are known.]"
)


def load_core_knowledge(path: Path | None) -> str:
    """Core knowledge text from *path*, or the built-in text.

    Raises:
        OSError: If *path* is given but cannot be read.
    """
    if path is None:
        return CORE_KNOWLEDGE
    text = path.read_text(encoding="utf-8").strip("\n")
    if not text.strip():
        logger.warning("Core knowledge file %s is empty, using built-in text", path)
        return CORE_KNOWLEDGE
    return text


def static_fallback(core_knowledge: str) -> str:
    """Core knowledge demarcated so it cannot be mistaken for corpus content."""
    return f"{FALLBACK_NOTICE}\n\n{core_knowledge}"
