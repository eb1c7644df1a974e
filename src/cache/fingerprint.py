# src/cache/fingerprint.py - v3
"""Document identity and freshness fingerprints.

A fingerprint answers "has this source changed since it was cached?":
- local files hash their path, modification time and size (a stat, no read);
- remote candidates that carry a revision (git blob sha) hash that instead.

``compute_fingerprint`` may stat the filesystem; async callers run it in a
worker thread.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Union

from kbloader.core.models import SourceCandidate

SourceRef = Union[str, Path, SourceCandidate]


def as_candidate(source: SourceRef) -> SourceCandidate:
    """Normalize a path-like reference into a SourceCandidate."""
    if isinstance(source, SourceCandidate):
        return source
    path = Path(source)
    return SourceCandidate(key=path.name, path=str(path), filename=path.name)


def document_key(source: SourceRef) -> str:
    """Cache key for a source: the candidate key, or the file basename."""
    return as_candidate(source).key


def compute_fingerprint(source: SourceRef) -> str | None:
    """Compute a freshness fingerprint for the current state of *source*.

    Returns:
        Hex digest, or None if the source cannot be statted (treated by the
        cache as "cannot validate", i.e. never valid).
    """
    candidate = as_candidate(source)
    if candidate.revision:
        data = f"{candidate.key}-rev-{candidate.revision}"
        return hashlib.sha256(data.encode("utf-8")).hexdigest()

    try:
        stats = Path(candidate.path).stat()
    except (OSError, ValueError):
        return None

    data = f"{candidate.path}-{stats.st_mtime_ns}-{stats.st_size}"
    return hashlib.sha256(data.encode("utf-8")).hexdigest()
