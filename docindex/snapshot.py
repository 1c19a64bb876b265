"""
Whole-file JSON snapshots shared by the vector store and the index metadata.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from docindex.errors import PersistenceError

logger = logging.getLogger(__name__)


def read_snapshot(path: Path, default: Any) -> Any:
    """
    Load a JSON snapshot. A missing, unreadable or unparseable file yields
    ``default`` so the caller starts cold instead of failing.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return default
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Snapshot unreadable, starting empty: %s (%s)", path, exc, extra={"path": str(path)})
        return default

    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("Snapshot corrupt, starting empty: %s (%s)", path, exc, extra={"path": str(path)})
        return default


def write_snapshot(path: Path, data: Any) -> None:
    """
    Rewrite the whole snapshot atomically (temp file in the same directory,
    then ``os.replace``) so readers never observe a half-written file.
    """
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh, ensure_ascii=False, indent=2)
        os.replace(tmp_name, path)
    except (OSError, TypeError, ValueError) as exc:
        if tmp_name:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
        raise PersistenceError(f"Cannot write snapshot {path}: {exc}") from exc


__all__ = ["read_snapshot", "write_snapshot"]
