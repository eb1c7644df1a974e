# src/loader/document_loader.py - v2
"""Full-corpus knowledge-base load with per-document caching.

Load algorithm:
  1. Serve the cached knowledge-base snapshot if it is still fresh.
  2. Enumerate candidates from the document source.
  3. Process candidates with at most ``concurrency`` extractions in flight:
     skip oversized files, reuse valid cached text, otherwise read, extract
     and cache.
  4. Join non-empty results under per-document headers, in enumeration
     order, and store the result as the new snapshot.

A single document failing never aborts the load; a source that cannot be
enumerated does.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid

from kbloader.cache.document_cache import DocumentCache
from kbloader.core.models import LoadMetrics, SourceCandidate
from kbloader.extraction.extractor_factory import extract_document, is_blocking
from kbloader.logging.context import set_document_context, set_load_context
from kbloader.sources.base_source import BaseDocumentSource

logger = logging.getLogger(__name__)

NO_DOCUMENTS_MESSAGE = "No supported documents found."
NO_READABLE_DOCUMENTS_MESSAGE = "No readable documents found."
LOAD_ERROR_MESSAGE = "Error loading documents."

DEFAULT_MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024
DEFAULT_CONCURRENCY = 5


class KnowledgeLoadError(Exception):
    """A full-corpus load failed as a whole (the source could not be enumerated)."""


def document_header(filename: str) -> str:
    """Delimiter placed in front of each document in the assembled text."""
    return f"\n\n# Document: {filename}\n"


class DocumentLoader:
    """Builds the knowledge base from a document source through a DocumentCache."""

    def __init__(
        self,
        source: BaseDocumentSource,
        cache: DocumentCache,
        max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self._source = source
        self._cache = cache
        self._max_file_size_bytes = max_file_size_bytes
        self._concurrency = concurrency
        self._metrics = LoadMetrics()
        self._inflight: asyncio.Task[str] | None = None

    @property
    def source(self) -> BaseDocumentSource:
        return self._source

    @property
    def cache(self) -> DocumentCache:
        return self._cache

    @property
    def is_loading(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    # ------------------------------------------------------------------
    # Public accessors
    # ------------------------------------------------------------------

    async def load_all_documents(self) -> str:
        """Assembled knowledge-base text; never raises for a failed load.

        Returns the error sentinel when the source cannot be enumerated.
        """
        try:
            return await asyncio.shield(self.start_load())
        except KnowledgeLoadError:
            logger.error("Error loading documents", exc_info=True)
            return LOAD_ERROR_MESSAGE

    def start_load(self) -> asyncio.Task[str]:
        """Return the in-flight load task, starting one if none is running.

        Concurrent callers share a single load. Must be called from a running
        event loop.
        """
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.create_task(self.load(), name="kbloader-load")
        return self._inflight

    async def cancel_load(self) -> None:
        """Cancel the in-flight load, if any, and wait until it has stopped.

        Call before closing the source, so no background read runs against a
        closed client.
        """
        task = self._inflight
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.info("In-flight load from %s cancelled", self._source.name)
        except KnowledgeLoadError:
            logger.debug("In-flight load failed before it could be cancelled")

    async def preload(self) -> None:
        """Warm the cache at startup."""
        logger.info("Preloading document cache from %s", self._source.name)
        await self.load_all_documents()

    def get_load_metrics(self) -> LoadMetrics:
        """Snapshot of the aggregate load metrics."""
        return self._metrics.model_copy()

    def clear_document_cache(self) -> None:
        """Drop every cached document and the snapshot, and reset metrics."""
        self._cache.clear()
        self._metrics = LoadMetrics()
        logger.info("Document cache cleared")

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    async def load(self) -> str:
        """Run one full-corpus load (or serve the snapshot).

        Raises:
            KnowledgeLoadError: If the source cannot be enumerated.
        """
        started = time.perf_counter()

        cached = self._cache.get_knowledge_base()
        if cached is not None:
            self._metrics.cache_hits += 1
            logger.debug(
                "Knowledge base cache hit (%.1fms)", (time.perf_counter() - started) * 1000
            )
            return cached

        self._metrics.cache_misses += 1
        set_load_context(uuid.uuid4().hex[:12], self._source.name)
        logger.info("Loading documents from %s", self._source.name)

        try:
            candidates = await self._source.list_candidates()
        except Exception as e:
            raise KnowledgeLoadError(f"Cannot enumerate {self._source.name}: {e}") from e

        if not candidates:
            logger.info("No supported documents in %s", self._source.name)
            return NO_DOCUMENTS_MESSAGE

        logger.info("Processing %d document(s)", len(candidates))
        semaphore = asyncio.Semaphore(self._concurrency)

        async def _bounded(candidate: SourceCandidate) -> str:
            async with semaphore:
                return await self.process_candidate(candidate)

        results = await asyncio.gather(*(_bounded(c) for c in candidates))

        combined = "".join(
            document_header(candidate.filename) + content
            for candidate, content in zip(candidates, results)
            if content
        )
        final = combined or NO_READABLE_DOCUMENTS_MESSAGE
        self._cache.put_knowledge_base(final)

        duration_ms = (time.perf_counter() - started) * 1000
        self._metrics.record_load(duration_ms)
        logger.info(
            "Knowledge base loaded in %.0fms (%d KB)",
            duration_ms, len(final.encode("utf-8")) // 1024,
            extra={"data": {"documents": len(candidates), "duration_ms": duration_ms}},
        )
        return final

    async def process_candidate(self, candidate: SourceCandidate) -> str:
        """Extracted text of one candidate, from cache when valid.

        Returns "" for skipped or failed documents; never raises.
        """
        set_document_context(candidate.filename)
        started = time.perf_counter()

        if candidate.size_bytes > self._max_file_size_bytes:
            logger.warning(
                "Skipping large file: %s (%d KB)",
                candidate.filename, candidate.size_bytes // 1024,
            )
            return ""

        try:
            # Taken before the read so an edit during extraction invalidates the entry.
            fingerprint = await asyncio.to_thread(self._cache.compute_fingerprint, candidate)
            if self._cache.is_valid(candidate, fingerprint=fingerprint):
                cached = self._cache.get(candidate)
                if cached:
                    self._metrics.cache_hits += 1
                    logger.debug(
                        "Cache hit for %s (%.1fms)",
                        candidate.filename, (time.perf_counter() - started) * 1000,
                    )
                    return cached

            self._metrics.cache_misses += 1
            raw = await self._source.read_candidate(candidate)
            if is_blocking(candidate.filename):
                content = await asyncio.to_thread(extract_document, raw, candidate.filename)
            else:
                content = extract_document(raw, candidate.filename)
        except Exception:
            logger.warning("Error processing %s", candidate.filename, exc_info=True)
            return ""

        if content:
            self._cache.put(candidate, content, fingerprint=fingerprint)
            logger.debug(
                "Cached %s (%.1fms)", candidate.filename, (time.perf_counter() - started) * 1000
            )
        return content
