# src/logging/context.py - v1
"""Contextual logging support: attach load_id, source and document to log records.

Context variables are copied into every asyncio task, so a document set
inside one extraction task never leaks into its siblings.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

_load_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "load_id", default=None
)
_source: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "source", default=None
)
_document: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "document", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    load_id: str | None = None
    source: str | None = None
    document: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        load_id=_load_id.get(),
        source=_source.get(),
        document=_document.get(),
    )


def set_load_context(load_id: str, source: str) -> None:
    """Set load-level context (called once per full-corpus load)."""
    _load_id.set(load_id)
    _source.set(source)


def set_document_context(document: str | None) -> None:
    """Set document-level context (called per extraction task)."""
    _document.set(document)


def clear_context() -> None:
    """Reset all context variables."""
    _load_id.set(None)
    _source.set(None)
    _document.set(None)
