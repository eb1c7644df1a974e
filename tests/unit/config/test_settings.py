# tests/unit/config/test_settings.py - v2
"""Tests for config/settings.py - typed Settings and validation rules."""

from __future__ import annotations

from pathlib import Path

import pytest

from kbloader.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_default_source(self):
        s = Settings(_env_file=None)
        assert s.source_type == "local"
        assert s.docs_dir == Path("docs")

    def test_default_cache_policy(self):
        s = Settings(_env_file=None)
        assert s.document_cache_ttl_s == 1800
        assert s.knowledge_base_ttl_s == 600
        assert s.document_cache_max_entries == 100

    def test_default_loader_limits(self):
        s = Settings(_env_file=None)
        assert s.max_file_size_bytes == 10 * 1024 * 1024
        assert s.load_concurrency == 5
        assert s.knowledge_timeout_ms == 5000

    def test_default_allowed_extensions(self):
        s = Settings(_env_file=None)
        assert s.allowed_extensions_set == frozenset(
            {".md", ".txt", ".pdf", ".js", ".ts", ".tsx", ".jsx", ".py", ".java", ".sol"}
        )


class TestSettingsValidation:
    def test_github_requires_repository(self):
        with pytest.raises(ConfigurationError, match="GITHUB_REPOSITORY"):
            Settings(_env_file=None, source_type="github")

    @pytest.mark.parametrize("repo", ["owner", "owner/", "/repo", "a/b/c"])
    def test_github_repository_form(self, repo: str):
        with pytest.raises(ConfigurationError, match="owner/repo"):
            Settings(_env_file=None, source_type="github", github_repository=repo)

    def test_github_valid(self):
        s = Settings(_env_file=None, source_type="github", github_repository="acme/docs")
        assert s.github_repository == "acme/docs"

    def test_zero_ttl(self):
        with pytest.raises(ConfigurationError, match="TTL"):
            Settings(_env_file=None, knowledge_base_ttl_s=0)

    def test_zero_capacity(self):
        with pytest.raises(ConfigurationError, match="DOCUMENT_CACHE_MAX_ENTRIES"):
            Settings(_env_file=None, document_cache_max_entries=0)

    def test_zero_concurrency(self):
        with pytest.raises(ConfigurationError, match="LOAD_CONCURRENCY"):
            Settings(_env_file=None, load_concurrency=0)

    def test_negative_concurrency(self):
        with pytest.raises(ValueError, match="load_concurrency"):
            Settings(_env_file=None, load_concurrency=-1)

    def test_non_positive_request_timeout(self):
        with pytest.raises(ValueError, match="remote_request_timeout_s"):
            Settings(_env_file=None, remote_request_timeout_s=0)

    def test_errors_are_joined(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Settings(_env_file=None, max_file_size_mb=0, knowledge_timeout_ms=0)
        assert "MAX_FILE_SIZE_MB" in str(exc_info.value)
        assert "KNOWLEDGE_TIMEOUT_MS" in str(exc_info.value)


class TestSettingsHelpers:
    def test_extensions_normalized(self):
        s = Settings(_env_file=None, allowed_extensions="MD, txt,,.PDF ")
        assert s.allowed_extensions_set == frozenset({".md", ".txt", ".pdf"})

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LOAD_CONCURRENCY", "2")
        monkeypatch.setenv("DOCS_DIR", "/srv/docs")
        s = Settings(_env_file=None)
        assert s.load_concurrency == 2
        assert s.docs_dir == Path("/srv/docs")

    def test_env_file(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("KNOWLEDGE_TIMEOUT_MS=250\nUNRELATED_KEY=1\n")
        s = Settings(_env_file=env)
        assert s.knowledge_timeout_ms == 250


class TestLoadSettings:
    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        s = load_settings(max_file_size_mb=2)
        assert s.max_file_size_bytes == 2 * 1024 * 1024

    def test_invalid_overrides(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ConfigurationError):
            load_settings(document_cache_ttl_s=-5)
