# tests/unit/cache/test_unit_fingerprint.py - v1
"""Tests for cache/fingerprint.py - document keys and freshness fingerprints."""

from __future__ import annotations

from pathlib import Path

from kbloader.cache.fingerprint import as_candidate, compute_fingerprint, document_key
from kbloader.core.models import SourceCandidate


class TestDocumentKey:
    def test_path_key_is_basename(self, tmp_path: Path):
        assert document_key(tmp_path / "sub" / "guide.md") == "guide.md"
        assert document_key(str(tmp_path / "guide.md")) == "guide.md"

    def test_candidate_key_kept(self):
        c = SourceCandidate(key="acme/docs/a/b.md", path="a/b.md", filename="b.md")
        assert document_key(c) == "acme/docs/a/b.md"
        assert as_candidate(c) is c


class TestComputeFingerprint:
    def test_stable_for_unmodified_file(self, tmp_path: Path):
        doc = tmp_path / "a.txt"
        doc.write_text("World")
        assert compute_fingerprint(doc) == compute_fingerprint(doc)
        assert compute_fingerprint(doc) is not None

    def test_changes_with_size(self, tmp_path: Path):
        doc = tmp_path / "a.txt"
        doc.write_text("World")
        before = compute_fingerprint(doc)
        doc.write_text("World, again")
        assert compute_fingerprint(doc) != before

    def test_missing_file_returns_none(self, tmp_path: Path):
        assert compute_fingerprint(tmp_path / "missing.txt") is None

    def test_revision_used_without_stat(self):
        c = SourceCandidate(key="k", path="/does/not/exist", filename="x", revision="abc")
        assert compute_fingerprint(c) is not None
        other = c.model_copy(update={"revision": "def"})
        assert compute_fingerprint(other) != compute_fingerprint(c)
