# tests/unit/knowledge/test_unit_facade_factory.py - v1
"""Tests for knowledge/facade_factory.py."""

from __future__ import annotations

from kbloader.config.settings import Settings
from kbloader.knowledge.facade_factory import create_document_loader, create_knowledge_facade
from kbloader.sources.local_source import LocalDirectorySource


class TestFactories:
    def test_loader_wiring(self, docs_dir):
        settings = Settings(_env_file=None, docs_dir=docs_dir, document_cache_max_entries=4)
        loader = create_document_loader(settings)
        assert isinstance(loader.source, LocalDirectorySource)
        assert loader.cache.max_entries == 4

    def test_facade_uses_core_file(self, docs_dir, tmp_path):
        core = tmp_path / "core.md"
        core.write_text("Custom core")
        settings = Settings(_env_file=None, docs_dir=docs_dir, core_knowledge_file=core)
        facade = create_knowledge_facade(settings)
        assert facade.get_quick_knowledge().endswith("Custom core")
