"""
Per-document index metadata: load and persist the path -> entry mapping.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

from pydantic import ValidationError

from docindex.models.schemas import IndexMetaEntry
from docindex.snapshot import read_snapshot, write_snapshot

logger = logging.getLogger(__name__)

IndexMeta = Dict[str, IndexMetaEntry]


def load_index_meta(meta_path: Path) -> IndexMeta:
    """Missing or malformed metadata means no prior index (cold start)."""
    raw = read_snapshot(meta_path, default={})
    if not isinstance(raw, dict):
        logger.warning("Index metadata is not a mapping, starting empty: %s", meta_path)
        return {}

    try:
        return {str(path): IndexMetaEntry.model_validate(entry) for path, entry in raw.items()}
    except ValidationError as exc:
        logger.warning(
            "Index metadata malformed, starting empty: %s (%d errors)",
            meta_path,
            exc.error_count(),
            extra={"path": str(meta_path)},
        )
        return {}


def save_index_meta(meta_path: Path, meta: IndexMeta) -> None:
    payload = {path: entry.model_dump(by_alias=True, exclude_none=True) for path, entry in sorted(meta.items())}
    write_snapshot(meta_path, payload)


__all__ = ["IndexMeta", "load_index_meta", "save_index_meta"]
