# src/sources/base_source.py - v1
"""Abstract document source interface.

A source enumerates candidate documents and reads their raw bytes. It knows
nothing about extraction or caching.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from kbloader.core.models import SourceCandidate


class DocumentSourceError(Exception):
    """Raised when a source cannot be enumerated or a candidate cannot be read."""


class RemoteFetchError(DocumentSourceError):
    """HTTP failure talking to a remote source."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class BaseDocumentSource(ABC):
    """Unified interface for document sources (local directory, repository)."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable source identifier, used in logs."""

    @abstractmethod
    async def list_candidates(self) -> list[SourceCandidate]:
        """Enumerate supported documents, in a stable order.

        Raises:
            DocumentSourceError: If the source cannot be enumerated.
        """

    @abstractmethod
    async def read_candidate(self, candidate: SourceCandidate) -> bytes:
        """Read the raw content of one candidate.

        Raises:
            DocumentSourceError: If the candidate cannot be read.
        """

    async def aclose(self) -> None:
        """Release any held resources. No-op by default."""
