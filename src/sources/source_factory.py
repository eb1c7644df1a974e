# src/sources/source_factory.py - v1
"""Factory: instantiate the document source from configuration."""

from __future__ import annotations

from kbloader.config.settings import Settings
from kbloader.sources.base_source import BaseDocumentSource
from kbloader.sources.local_source import LocalDirectorySource


def create_source(settings: Settings) -> BaseDocumentSource:
    """Create the document source selected by SOURCE_TYPE.

    Raises:
        ValueError: If the source type is not supported.
    """
    if settings.source_type == "local":
        return LocalDirectorySource(
            root=settings.docs_dir,
            allowed_extensions=settings.allowed_extensions_set,
        )

    if settings.source_type == "github":
        from kbloader.sources.github_source import GitHubRepositorySource

        return GitHubRepositorySource(
            repository=settings.github_repository,
            allowed_extensions=settings.allowed_extensions_set,
            token=settings.github_token,
            ref=settings.github_ref,
            api_url=settings.github_api_url,
            timeout_s=settings.remote_request_timeout_s,
            max_retries=settings.remote_max_retries,
        )

    raise ValueError(f"Unsupported source type: {settings.source_type!r}")
