# src/knowledge/facade.py - v1
"""Time-bounded knowledge-base accessor with last-good fallback.

The caller always receives text. A fetch races the (shared) document load
against a timer; the timer only stops the wait, the load keeps running and
still refreshes the cache and the last-good value when it finishes.

Fallback chain on timeout or failure:
    last-good knowledge -> demarcated static core knowledge
"""

from __future__ import annotations

import asyncio
import logging

from kbloader.core.models import KnowledgeMetrics, KnowledgeState
from kbloader.knowledge.core_knowledge import CORE_KNOWLEDGE, static_fallback
from kbloader.loader.document_loader import DocumentLoader

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000


class KnowledgeBaseFacade:
    """Single knowledge accessor used by the prompt builder."""

    def __init__(
        self,
        loader: DocumentLoader,
        core_knowledge: str = CORE_KNOWLEDGE,
        default_timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> None:
        self._loader = loader
        self._core_knowledge = core_knowledge
        self._default_timeout_ms = default_timeout_ms
        self._last_good: str | None = None
        self._state = KnowledgeState.IDLE
        self._watched: asyncio.Task[str] | None = None

    @property
    def state(self) -> KnowledgeState:
        return self._state

    @property
    def loader(self) -> DocumentLoader:
        return self._loader

    async def get_knowledge_base(self, timeout_ms: int | None = None) -> str:
        """Fresh knowledge within *timeout_ms*, else the best fallback. Never raises."""
        budget_ms = self._default_timeout_ms if timeout_ms is None else timeout_ms
        self._state = KnowledgeState.LOADING

        try:
            task = self._start_load()
            documents = await asyncio.wait_for(asyncio.shield(task), budget_ms / 1000)
        except asyncio.TimeoutError:
            logger.warning("Knowledge loading timed out after %dms, using fallback", budget_ms)
            return self._fallback()
        except Exception as e:
            logger.warning("Knowledge loading failed, using fallback: %s", e)
            return self._fallback()

        knowledge = self._compose(documents)
        self._last_good = knowledge
        self._state = KnowledgeState.FRESH
        return knowledge

    def get_quick_knowledge(self) -> str:
        """Last-good knowledge or the static fallback, without any I/O."""
        if self._last_good is not None:
            return self._last_good
        return static_fallback(self._core_knowledge)

    async def refresh_knowledge_cache(self) -> None:
        """Run (or join) a load to completion; failures are logged, not raised."""
        logger.info("Refreshing knowledge cache")
        try:
            await asyncio.shield(self._start_load())
        except Exception:
            logger.error("Failed to refresh knowledge cache", exc_info=True)
            return
        logger.info("Knowledge cache refreshed")

    def get_knowledge_metrics(self) -> KnowledgeMetrics:
        return KnowledgeMetrics(
            load=self._loader.get_load_metrics(),
            cache=self._loader.cache.stats(),
            has_fallback_cache=self._last_good is not None,
            fallback_cache_size_bytes=(
                len(self._last_good.encode("utf-8")) if self._last_good is not None else 0
            ),
        )

    def clear_document_cache(self) -> None:
        """Clear the loader's caches and metrics. Last-good knowledge is kept."""
        self._loader.clear_document_cache()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _start_load(self) -> asyncio.Task[str]:
        task = self._loader.start_load()
        if task is not self._watched:
            task.add_done_callback(self._on_load_done)
            self._watched = task
        return task

    def _on_load_done(self, task: asyncio.Task[str]) -> None:
        # Also the path by which a load that outlived its caller's timeout
        # becomes the last-good value.
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.debug("Background knowledge load failed: %s", error)
            return
        self._last_good = self._compose(task.result())

    def _compose(self, documents: str) -> str:
        return f"{self._core_knowledge}\n\n{documents}"

    def _fallback(self) -> str:
        self._state = KnowledgeState.STALE_FALLBACK
        return self.get_quick_knowledge()
