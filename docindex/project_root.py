"""
Project root discovery and the fixed locations derived from it.
"""

from __future__ import annotations

from pathlib import Path

from docindex.config import INDEX_META_FILENAME, VECTOR_STORE_FILENAME, settings
from docindex.errors import PersistenceError, ProjectRootNotFoundError


def find_project_root(start_dir: str | Path | None = None, marker: str | None = None) -> Path:
    """
    Search upward from ``start_dir`` (default: cwd) for a directory that
    contains the project marker directory.
    """
    marker = marker or settings.project_marker_dir
    current = Path(start_dir or Path.cwd()).resolve()

    for candidate in (current, *current.parents):
        if (candidate / marker).is_dir():
            return candidate

    raise ProjectRootNotFoundError(
        "Project root not found. "
        "Run this command from within a documentation project directory "
        f"(looking for a {marker}/ directory marker)."
    )


def get_vector_data_dir(project_root: Path) -> Path:
    return project_root / settings.vector_data_dir


def get_docs_dir(project_root: Path) -> Path:
    return project_root / settings.docs_dir


def get_vector_store_path(project_root: Path) -> Path:
    return get_vector_data_dir(project_root) / VECTOR_STORE_FILENAME


def get_index_meta_path(project_root: Path) -> Path:
    return get_vector_data_dir(project_root) / INDEX_META_FILENAME


def ensure_vector_data_dir(project_root: Path) -> Path:
    data_dir = get_vector_data_dir(project_root)
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PersistenceError(f"Cannot create vector data directory {data_dir}: {exc}") from exc
    return data_dir


__all__ = [
    "find_project_root",
    "get_vector_data_dir",
    "get_docs_dir",
    "get_vector_store_path",
    "get_index_meta_path",
    "ensure_vector_data_dir",
]
