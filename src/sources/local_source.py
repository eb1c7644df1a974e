# src/sources/local_source.py - v1
"""Local directory document source.

Flat listing (no recursion) of one documents directory, filtered by
extension and sorted by filename. Keys are file basenames.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path

from kbloader.core.models import SourceCandidate
from kbloader.sources.base_source import BaseDocumentSource, DocumentSourceError

logger = logging.getLogger(__name__)


class LocalDirectorySource(BaseDocumentSource):
    """Documents read from a directory on the local filesystem."""

    def __init__(
        self,
        root: str | Path,
        allowed_extensions: Iterable[str],
        create: bool = True,
    ) -> None:
        self._root = Path(root)
        self._allowed = frozenset(e.lower() for e in allowed_extensions)
        self._create = create

    @property
    def name(self) -> str:
        return f"local:{self._root}"

    @property
    def root(self) -> Path:
        return self._root

    async def list_candidates(self) -> list[SourceCandidate]:
        return await asyncio.to_thread(self._scan)

    async def read_candidate(self, candidate: SourceCandidate) -> bytes:
        try:
            return await asyncio.to_thread(Path(candidate.path).read_bytes)
        except OSError as e:
            raise DocumentSourceError(f"Cannot read {candidate.path}: {e}") from e

    def _scan(self) -> list[SourceCandidate]:
        try:
            if self._create and not self._root.exists():
                self._root.mkdir(parents=True, exist_ok=True)
                logger.info("Created documents directory %s", self._root)
            entries = sorted(self._root.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise DocumentSourceError(f"Cannot list {self._root}: {e}") from e

        candidates: list[SourceCandidate] = []
        for path in entries:
            if path.suffix.lower() not in self._allowed:
                continue
            try:
                if not path.is_file():
                    continue
                stats = path.stat()
            except OSError:
                logger.warning("Cannot stat %s, skipping", path)
                continue
            candidates.append(
                SourceCandidate(
                    key=path.name,
                    path=str(path),
                    filename=path.name,
                    size_bytes=stats.st_size,
                    modified_ns=stats.st_mtime_ns,
                )
            )
        logger.debug("Found %d candidate(s) in %s", len(candidates), self._root)
        return candidates
