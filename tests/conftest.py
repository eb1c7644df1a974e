# tests/conftest.py - v2
"""Shared test fixtures for all unit and integration tests.

Provides a controllable clock, an in-memory document source, and temp
document directories. No network access: remote sources are exercised
through httpx.MockTransport in their own tests.
"""

from __future__ import annotations

import asyncio
import hashlib
from pathlib import Path

import pytest

from kbloader.cache.document_cache import DocumentCache
from kbloader.core.models import SourceCandidate
from kbloader.logging.context import clear_context
from kbloader.sources.base_source import BaseDocumentSource, DocumentSourceError


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemorySource(BaseDocumentSource):
    """Document source backed by a dict of filename -> bytes.

    Candidates carry a content hash as revision, so editing a document
    invalidates its cache entry the same way a new git blob would.
    """

    def __init__(self) -> None:
        self.documents: dict[str, bytes] = {}
        self.sizes: dict[str, int] = {}
        self.fail_listing = False
        self.fail_reads: set[str] = set()
        self.read_delay_s = 0.0
        self.reads: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def name(self) -> str:
        return "memory:test"

    async def list_candidates(self) -> list[SourceCandidate]:
        if self.fail_listing:
            raise DocumentSourceError("source unreachable")
        return [
            SourceCandidate(
                key=name,
                path=name,
                filename=name,
                size_bytes=self.sizes.get(name, len(data)),
                revision=hashlib.sha1(data).hexdigest(),
            )
            for name, data in self.documents.items()
        ]

    async def read_candidate(self, candidate: SourceCandidate) -> bytes:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.read_delay_s:
                await asyncio.sleep(self.read_delay_s)
            self.reads.append(candidate.filename)
            if candidate.filename in self.fail_reads:
                raise DocumentSourceError(f"cannot read {candidate.filename}")
            return self.documents[candidate.filename]
        finally:
            self.in_flight -= 1


# === FIXTURES: Clock and cache ===


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> DocumentCache:
    """Small cache driven by the fake clock (30 min / 10 min TTLs, capacity 3)."""
    return DocumentCache(
        document_ttl_s=30 * 60, knowledge_base_ttl_s=10 * 60, max_entries=3, clock=clock,
    )


# === FIXTURES: Sources ===


@pytest.fixture
def memory_source() -> InMemorySource:
    return InMemorySource()


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Temporary documents directory."""
    docs = tmp_path / "docs"
    docs.mkdir()
    return docs


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_context()
    yield
    clear_context()
