# src/knowledge/facade_factory.py - v1
"""Factory: wire source, cache, loader and facade from settings."""

from __future__ import annotations

from kbloader.cache.cache_factory import create_document_cache
from kbloader.config.settings import Settings
from kbloader.knowledge.core_knowledge import load_core_knowledge
from kbloader.knowledge.facade import KnowledgeBaseFacade
from kbloader.loader.document_loader import DocumentLoader
from kbloader.sources.source_factory import create_source


def create_document_loader(settings: Settings) -> DocumentLoader:
    """Create a loader with its own source and empty cache."""
    return DocumentLoader(
        source=create_source(settings),
        cache=create_document_cache(settings),
        max_file_size_bytes=settings.max_file_size_bytes,
        concurrency=settings.load_concurrency,
    )


def create_knowledge_facade(settings: Settings) -> KnowledgeBaseFacade:
    """Create the process-wide knowledge facade.

    Raises:
        OSError: If CORE_KNOWLEDGE_FILE is set but unreadable.
    """
    return KnowledgeBaseFacade(
        loader=create_document_loader(settings),
        core_knowledge=load_core_knowledge(settings.core_knowledge_file),
        default_timeout_ms=settings.knowledge_timeout_ms,
    )
