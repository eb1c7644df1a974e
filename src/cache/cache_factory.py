# src/cache/cache_factory.py - v3
"""Factory for the process-wide document cache."""

from __future__ import annotations

from kbloader.cache.document_cache import DocumentCache
from kbloader.config.settings import Settings


def create_document_cache(settings: Settings | None = None) -> DocumentCache:
    """Instantiate the document cache from settings.

    Args:
        settings: Application settings. Defaults apply when None.

    Returns:
        A new, empty DocumentCache.
    """
    if settings is None:
        return DocumentCache()

    return DocumentCache(
        document_ttl_s=settings.document_cache_ttl_s,
        knowledge_base_ttl_s=settings.knowledge_base_ttl_s,
        max_entries=settings.document_cache_max_entries,
    )
