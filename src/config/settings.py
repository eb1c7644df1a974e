# src/config/settings.py - v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for cache policy, document sources, loader limits
and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALLOWED_EXTENSIONS = ".md,.txt,.pdf,.js,.ts,.tsx,.jsx,.py,.java,.sol"


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Document source ===
    source_type: Literal["local", "github"] = "local"
    docs_dir: Path = Path("docs")
    allowed_extensions: str = DEFAULT_ALLOWED_EXTENSIONS

    # GitHub repository source
    github_repository: str = ""
    github_token: str = ""
    github_ref: str = "HEAD"
    github_api_url: str = "https://api.github.com"
    remote_request_timeout_s: float = 30.0
    remote_max_retries: int = 3

    # === Cache ===
    document_cache_ttl_s: int = 30 * 60
    knowledge_base_ttl_s: int = 10 * 60
    document_cache_max_entries: int = 100

    # === Loader ===
    max_file_size_mb: int = 10
    load_concurrency: int = 5

    # === Knowledge facade ===
    knowledge_timeout_ms: int = 5000
    core_knowledge_file: Path | None = None

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("load_concurrency", "remote_max_retries")
    @classmethod
    def validate_non_negative(cls, v: int, info) -> int:  # noqa: N805
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @field_validator("remote_request_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError("remote_request_timeout_s must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.source_type == "github" and not _is_owner_repo(self.github_repository):
            errors.append(
                "SOURCE_TYPE=github requires GITHUB_REPOSITORY in owner/repo form"
            )

        if self.document_cache_ttl_s <= 0 or self.knowledge_base_ttl_s <= 0:
            errors.append("Cache TTLs must be > 0")

        if self.document_cache_max_entries < 1:
            errors.append("DOCUMENT_CACHE_MAX_ENTRIES must be >= 1")

        if self.load_concurrency < 1:
            errors.append("LOAD_CONCURRENCY must be >= 1")

        if self.max_file_size_mb < 1:
            errors.append("MAX_FILE_SIZE_MB must be >= 1")

        if self.knowledge_timeout_ms < 1:
            errors.append("KNOWLEDGE_TIMEOUT_MS must be >= 1")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def allowed_extensions_set(self) -> frozenset[str]:
        """Parse comma-separated extensions, normalized to lowercase with a dot."""
        exts = set()
        for raw in self.allowed_extensions.split(","):
            ext = raw.strip().lower()
            if not ext:
                continue
            exts.add(ext if ext.startswith(".") else f".{ext}")
        return frozenset(exts)

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


def _is_owner_repo(value: str) -> bool:
    parts = value.split("/")
    return len(parts) == 2 and all(p.strip() for p in parts)


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or embedding).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
