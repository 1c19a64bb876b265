"""
Exception hierarchy shared by the store, the indexing pipeline and the CLIs.

- ConfigurationError: setup problems, fatal before any indexing work starts.
- EmbeddingError: provider failure or timeout; recovered per file while
  indexing, surfaced to the caller when embedding a search query.
- PersistenceError: a snapshot could not be written; aborts the current run.
"""

from __future__ import annotations


class DocIndexError(Exception):
    """Base class for all docindex errors."""


class ConfigurationError(DocIndexError):
    """Raised when the environment is not usable (no project root, no credential)."""


class ProjectRootNotFoundError(ConfigurationError):
    """Raised when no directory carrying the project marker is found."""


class MissingCredentialError(ConfigurationError):
    """Raised when the embedding provider credential is not configured."""


class EmbeddingError(DocIndexError):
    """Raised when embedding generation fails."""


class PersistenceError(DocIndexError):
    """Raised when a snapshot file cannot be written."""


__all__ = [
    "DocIndexError",
    "ConfigurationError",
    "ProjectRootNotFoundError",
    "MissingCredentialError",
    "EmbeddingError",
    "PersistenceError",
]
