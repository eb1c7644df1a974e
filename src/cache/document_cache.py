# src/cache/document_cache.py - v2
"""In-process document cache with a second-level knowledge-base snapshot.

Two independent layers:
  1. Per-document extracted text, valid while younger than the document TTL
     AND its stored fingerprint matches a freshly computed one.
  2. The assembled knowledge base, valid while younger than its own TTL.
Invalidating one layer never touches the other.

Capacity is enforced by evicting the oldest-inserted document (FIFO).
Overwriting an existing key keeps its original insertion position.

``is_valid`` and ``get`` are separate calls; a ``put`` or eviction may
interleave between them. Callers accept that they can read text that is at
most one TTL window old.

Callers that read a source asynchronously take the fingerprint before the
read and pass it to both ``is_valid`` and ``put``, so cached text is always
stamped with the state of the source it was read from.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from kbloader.cache.fingerprint import SourceRef, compute_fingerprint, document_key
from kbloader.core.models import CachedDocument, CacheStats, KnowledgeBaseSnapshot

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_TTL_S = 30 * 60
DEFAULT_KNOWLEDGE_BASE_TTL_S = 10 * 60
DEFAULT_MAX_ENTRIES = 100

# Marks "compute the fingerprint now"; None means "cannot be statted".
_UNSET: Any = object()


class DocumentCache:
    """Memory-only document and knowledge-base cache.

    One instance is built at process start and handed to the loader and the
    facade; tests build isolated instances. ``clock`` returns seconds and is
    injectable so TTL expiry can be tested without sleeping.
    """

    def __init__(
        self,
        document_ttl_s: float = DEFAULT_DOCUMENT_TTL_S,
        knowledge_base_ttl_s: float = DEFAULT_KNOWLEDGE_BASE_TTL_S,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._document_ttl_s = document_ttl_s
        self._knowledge_base_ttl_s = knowledge_base_ttl_s
        self._max_entries = max_entries
        self._clock = clock
        # dict preserves insertion order; the first key is the oldest insert.
        self._entries: dict[str, CachedDocument] = {}
        self._snapshot: KnowledgeBaseSnapshot | None = None

    @property
    def max_entries(self) -> int:
        return self._max_entries

    # ------------------------------------------------------------------
    # Document layer
    # ------------------------------------------------------------------

    def compute_fingerprint(self, source: SourceRef) -> str | None:
        """Fingerprint of the source as it is now (None if it cannot be statted)."""
        return compute_fingerprint(source)

    def is_valid(self, source: SourceRef, fingerprint: str | None = _UNSET) -> bool:
        """True iff an entry exists, is within TTL, and its fingerprint still matches.

        *fingerprint* is the current fingerprint when the caller already has it.
        """
        entry = self._entries.get(document_key(source))
        if entry is None:
            return False

        if self._clock() - entry.cached_at > self._document_ttl_s:
            return False

        current = self.compute_fingerprint(source) if fingerprint is _UNSET else fingerprint
        if current is None or entry.fingerprint is None:
            return False
        return current == entry.fingerprint

    def get(self, source: SourceRef) -> str | None:
        """Cached text for *source*, without validation."""
        entry = self._entries.get(document_key(source))
        return entry.content if entry is not None else None

    def put(self, source: SourceRef, content: str, fingerprint: str | None = _UNSET) -> None:
        """Insert or overwrite an entry, evicting the oldest insert when full.

        *fingerprint* should describe the source as it was when *content* was
        read; it defaults to the source's state now.
        """
        if fingerprint is _UNSET:
            fingerprint = self.compute_fingerprint(source)
        key = document_key(source)
        if key not in self._entries and len(self._entries) >= self._max_entries:
            oldest_key = next(iter(self._entries))
            del self._entries[oldest_key]
            logger.debug("Evicted %s (capacity %d)", oldest_key, self._max_entries)

        self._entries[key] = CachedDocument(
            key=key,
            content=content,
            fingerprint=fingerprint,
            cached_at=self._clock(),
            size_bytes=len(content.encode("utf-8")),
        )

    def keys(self) -> list[str]:
        """Document keys in insertion order (oldest first)."""
        return list(self._entries)

    # ------------------------------------------------------------------
    # Knowledge-base layer
    # ------------------------------------------------------------------

    def get_knowledge_base(self) -> str | None:
        """The snapshot text if present and within TTL; expired snapshots are dropped."""
        if self._snapshot is None:
            return None

        if self._clock() - self._snapshot.created_at > self._knowledge_base_ttl_s:
            logger.debug("Knowledge base snapshot expired")
            self._snapshot = None
            return None

        return self._snapshot.content

    def put_knowledge_base(self, content: str) -> None:
        """Replace the snapshot with *content*, timestamped now."""
        self._snapshot = KnowledgeBaseSnapshot(content=content, created_at=self._clock())

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Drop all document entries and the snapshot."""
        self._entries.clear()
        self._snapshot = None

    def stats(self) -> CacheStats:
        return CacheStats(
            document_count=len(self._entries),
            total_size_bytes=sum(e.size_bytes for e in self._entries.values()),
            has_knowledge_base=self._snapshot is not None,
            knowledge_base_size_bytes=(
                self._snapshot.size_bytes if self._snapshot is not None else 0
            ),
        )
