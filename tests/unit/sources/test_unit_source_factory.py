# tests/unit/sources/test_unit_source_factory.py - v1
"""Tests for sources/source_factory.py."""

from __future__ import annotations

import pytest

from kbloader.config.settings import Settings
from kbloader.sources.github_source import GitHubRepositorySource
from kbloader.sources.local_source import LocalDirectorySource
from kbloader.sources.source_factory import create_source


class TestCreateSource:
    def test_local(self, tmp_path):
        source = create_source(Settings(_env_file=None, docs_dir=tmp_path))
        assert isinstance(source, LocalDirectorySource)
        assert source.root == tmp_path

    @pytest.mark.asyncio
    async def test_github(self):
        settings = Settings(
            _env_file=None, source_type="github", github_repository="acme/docs",
            github_ref="v1",
        )
        source = create_source(settings)
        try:
            assert isinstance(source, GitHubRepositorySource)
            assert source.name == "github:acme/docs@v1"
        finally:
            await source.aclose()
