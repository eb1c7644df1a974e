# tests/unit/cache/test_unit_cache_factory.py - v4
"""Tests for cache/cache_factory.py."""

from __future__ import annotations

from kbloader.cache.cache_factory import create_document_cache
from kbloader.cache.document_cache import DocumentCache
from kbloader.config.settings import Settings


class TestCreateDocumentCache:
    def test_defaults(self):
        cache = create_document_cache()
        assert isinstance(cache, DocumentCache)
        assert cache.max_entries == 100

    def test_from_settings(self):
        s = Settings(_env_file=None, document_cache_max_entries=7)
        cache = create_document_cache(s)
        assert cache.max_entries == 7
        assert cache.stats().document_count == 0

    def test_instances_are_isolated(self):
        a = create_document_cache()
        b = create_document_cache()
        a.put_knowledge_base("kb")
        assert b.get_knowledge_base() is None
