# src/sources/github_source.py - v2
"""GitHub repository document source over the REST API (httpx).

Listing uses the git trees API (one recursive call); content comes from the
contents API, base64-encoded. Files over 1 MB come back from the contents
API without a body and are re-read through the blob API. The blob sha is
the candidate revision, so a cached document stays valid exactly as long
as the upstream blob is unchanged.

Text files are prefixed with a source attribution header::

    # Source: GitHub Repository owner/repo
    # File: path/in/repo.ts
    <blank line>
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Iterable
from pathlib import PurePosixPath
from typing import Any
from urllib.parse import quote

import httpx

from kbloader.core.models import SourceCandidate
from kbloader.sources.base_source import BaseDocumentSource, RemoteFetchError
from kbloader.sources.retry import RetryExhausted, retry_configs_for, with_retry

logger = logging.getLogger(__name__)

_BINARY_EXTENSIONS = frozenset({".pdf"})


def source_header(repository: str, path: str) -> str:
    """Attribution header prepended to text documents fetched from a repository."""
    return f"# Source: GitHub Repository {repository}\n# File: {path}\n\n"


class GitHubRepositorySource(BaseDocumentSource):
    """Documents read from a GitHub repository at a given ref."""

    def __init__(
        self,
        repository: str,
        allowed_extensions: Iterable[str],
        token: str = "",
        ref: str = "HEAD",
        api_url: str = "https://api.github.com",
        timeout_s: float = 30.0,
        max_retries: int = 3,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        owner, _, repo = repository.partition("/")
        if not owner or not repo or "/" in repo:
            raise ValueError(f"Repository must be in owner/repo form, got {repository!r}")
        self._repository = repository
        self._allowed = frozenset(e.lower() for e in allowed_extensions)
        self._ref = ref
        self._api_url = api_url.rstrip("/")
        self._retry_configs = retry_configs_for(max_retries)

        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers=headers, timeout=httpx.Timeout(timeout_s)
        )
        if not self._owns_client:
            self._client.headers.update(headers)

    @property
    def name(self) -> str:
        return f"github:{self._repository}@{self._ref}"

    async def list_candidates(self) -> list[SourceCandidate]:
        url = f"{self._repo_url}/git/trees/{quote(self._ref, safe='')}"
        data = await self._get_json(url, params={"recursive": "1"})
        if data.get("truncated"):
            logger.warning("Tree listing for %s was truncated by the API", self.name)

        candidates: list[SourceCandidate] = []
        for item in data.get("tree", []):
            if item.get("type") != "blob":
                continue
            path = item.get("path", "")
            pure = PurePosixPath(path)
            if pure.suffix.lower() not in self._allowed:
                continue
            candidates.append(
                SourceCandidate(
                    key=f"{self._repository}/{path}",
                    path=path,
                    filename=pure.name,
                    size_bytes=int(item.get("size") or 0),
                    revision=item.get("sha"),
                )
            )
        candidates.sort(key=lambda c: c.path)
        logger.debug("Found %d candidate(s) in %s", len(candidates), self.name)
        return candidates

    async def read_candidate(self, candidate: SourceCandidate) -> bytes:
        url = f"{self._repo_url}/contents/{quote(candidate.path)}"
        data = await self._get_json(url, params={"ref": self._ref})
        if isinstance(data, dict) and data.get("encoding") == "none":
            data = await self._get_blob(candidate)
        raw = self._decode_content(data, candidate)

        if PurePosixPath(candidate.path).suffix.lower() in _BINARY_EXTENSIONS:
            return raw
        header = source_header(self._repository, candidate.path).encode("utf-8")
        return header + raw

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @property
    def _repo_url(self) -> str:
        return f"{self._api_url}/repos/{self._repository}"

    async def _get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        async def _request() -> Any:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            return response.json()

        try:
            return await with_retry(
                _request, operation=f"GET {url}", retry_configs=self._retry_configs
            )
        except RetryExhausted as e:
            status = None
            if isinstance(e.last_error, httpx.HTTPStatusError):
                status = e.last_error.response.status_code
            raise RemoteFetchError(f"{self.name}: {e}", status_code=status) from e

    async def _get_blob(self, candidate: SourceCandidate) -> Any:
        # The contents API omits the body of files over 1 MB; the blob API
        # serves them base64-encoded up to 100 MB.
        if not candidate.revision:
            raise RemoteFetchError(
                f"{candidate.path} is too large for the contents API and has no blob sha"
            )
        logger.debug("Fetching %s through the blob API", candidate.path)
        return await self._get_json(f"{self._repo_url}/git/blobs/{candidate.revision}")

    @staticmethod
    def _decode_content(data: Any, candidate: SourceCandidate) -> bytes:
        if not isinstance(data, dict) or data.get("type", "file") != "file":
            raise RemoteFetchError(f"{candidate.path} is not a file")
        encoding = data.get("encoding")
        if encoding == "none":
            raise RemoteFetchError(f"No content returned for {candidate.path}")
        content = data.get("content") or ""
        if encoding == "base64":
            try:
                return base64.b64decode(content)
            except ValueError as e:
                raise RemoteFetchError(f"Invalid base64 for {candidate.path}") from e
        return content.encode("utf-8")
