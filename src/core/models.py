# src/core/models.py - v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, computed_field


# === SOURCES ===


class SourceCandidate(BaseModel):
    """A document discovered by a source, not yet read.

    ``key`` is the cache identity: stable across re-reads of the same logical
    document. ``revision`` is set by sources that know a content hash
    (e.g. a git blob sha); local files leave it empty and are fingerprinted
    from size and modification time instead.
    """

    key: str
    path: str
    filename: str
    size_bytes: int = 0
    modified_ns: int | None = None
    revision: str | None = None

    @property
    def extension(self) -> str:
        dot = self.filename.rfind(".")
        return self.filename[dot:].lower() if dot > 0 else ""


# === CACHE ===


class CachedDocument(BaseModel):
    """Extracted text of one document plus its freshness metadata."""

    key: str
    content: str
    fingerprint: str | None
    cached_at: float
    size_bytes: int


class KnowledgeBaseSnapshot(BaseModel):
    """Fully assembled knowledge-base text. Replaced wholesale, never edited."""

    model_config = {"frozen": True}

    content: str
    created_at: float

    @computed_field  # type: ignore[prop-decorator]
    @property
    def size_bytes(self) -> int:
        return len(self.content.encode("utf-8"))


class CacheStats(BaseModel):
    """Read-only accounting of the document cache."""

    document_count: int
    total_size_bytes: int
    has_knowledge_base: bool
    knowledge_base_size_bytes: int


# === LOADER / FACADE ===


class LoadMetrics(BaseModel):
    """Aggregate knowledge-base load metrics."""

    total_loads: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    average_load_time_ms: float = 0.0
    last_load_time_ms: float = 0.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cache_hit_rate(self) -> float:
        """Hits over all lookups, 0.0 before the first lookup."""
        lookups = self.cache_hits + self.cache_misses
        if lookups == 0:
            return 0.0
        return round(self.cache_hits / lookups, 4)

    def record_load(self, duration_ms: float) -> None:
        """Fold one completed full load into the running average."""
        self.total_loads += 1
        self.last_load_time_ms = duration_ms
        self.average_load_time_ms = (
            self.average_load_time_ms * (self.total_loads - 1) + duration_ms
        ) / self.total_loads


class KnowledgeMetrics(BaseModel):
    """Loader metrics plus facade fallback-cache information."""

    load: LoadMetrics
    cache: CacheStats
    has_fallback_cache: bool
    fallback_cache_size_bytes: int = Field(ge=0)


class KnowledgeState(str, Enum):
    """Per-fetch state of the knowledge facade."""

    IDLE = "idle"
    LOADING = "loading"
    FRESH = "fresh"
    STALE_FALLBACK = "stale_fallback"
