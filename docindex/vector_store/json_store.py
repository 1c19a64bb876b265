"""
JSON snapshot VectorStore implementation.

Records live in memory as an ordered list and the whole collection is
rewritten to disk after every mutation (or once per ``batch()`` block).
``query`` is a brute-force cosine scan, O(N*D) per call. That is fine for
documentation corpora in the low thousands of chunks and is the known
scaling limit of this backend.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Set, Tuple

import numpy as np

from docindex.snapshot import read_snapshot, write_snapshot
from docindex.vector_store.base import VectorRecord, VectorStore

logger = logging.getLogger(__name__)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity; a zero-magnitude vector on either side scores 0."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise ValueError(f"Embedding dimensions differ: {va.shape[0]} != {vb.shape[0]}")

    denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if denom == 0.0:
        return 0.0
    return float(np.dot(va, vb) / denom)


def _record_from_json(raw: Any) -> VectorRecord:
    if not isinstance(raw, dict) or not isinstance(raw.get("id"), str):
        raise ValueError("record must be an object with a string id")
    embedding = raw.get("embedding")
    if not isinstance(embedding, list):
        raise ValueError(f"record {raw['id']!r} has no embedding list")
    document = raw.get("document")
    if document is not None and not isinstance(document, str):
        raise ValueError(f"record {raw['id']!r} document must be a string")
    metadata = raw.get("metadata")
    if metadata is not None and not isinstance(metadata, dict):
        raise ValueError(f"record {raw['id']!r} metadata must be an object")
    return VectorRecord(
        id=raw["id"],
        text=document or "",
        metadata=metadata or {},
        embedding=[float(x) for x in embedding],
    )


def _record_to_json(record: VectorRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "embedding": record.embedding,
        "document": record.text,
        "metadata": record.metadata,
    }


class JsonVectorStore(VectorStore):
    def __init__(self, storage_path: str | Path) -> None:
        self.storage_path = Path(storage_path)
        self._records: List[VectorRecord] = []
        self._lock = threading.RLock()
        self._batch_depth = 0
        self._dirty = False

    def load(self) -> None:
        """Read the snapshot; absence or corruption leaves an empty store."""
        raw = read_snapshot(self.storage_path, default=[])
        records: List[VectorRecord] = []
        if not isinstance(raw, list):
            logger.warning("Vector store snapshot is not a list, starting empty: %s", self.storage_path)
            raw = []
        try:
            records = [_record_from_json(item) for item in raw]
        except (TypeError, ValueError) as exc:
            logger.warning(
                "Vector store snapshot malformed, starting empty: %s (%s)",
                self.storage_path,
                exc,
                extra={"path": str(self.storage_path)},
            )
            records = []

        with self._lock:
            self._records = records
            self._dirty = False
        logger.info("Vector store loaded", extra={"path": str(self.storage_path), "count": len(records)})

    def _save(self) -> None:
        if self._batch_depth > 0:
            self._dirty = True
            return
        write_snapshot(self.storage_path, [_record_to_json(r) for r in self._records])
        self._dirty = False

    @contextmanager
    def batch(self) -> Iterator[None]:
        """
        Defer snapshot writes until the outermost block exits, then write
        once. The pending state is written even if the block raises.
        """
        with self._lock:
            self._batch_depth += 1
            try:
                yield
            finally:
                self._batch_depth -= 1
                if self._batch_depth == 0 and self._dirty:
                    self._save()

    def add(self, id: str, embedding: List[float], text: str, metadata: Dict[str, Any]) -> None:
        record = VectorRecord(id=id, text=text, metadata=dict(metadata), embedding=list(embedding))
        with self._lock:
            self._records = [r for r in self._records if r.id != id]
            self._records.append(record)
            self._save()

    def delete(self, id: str) -> None:
        with self._lock:
            remaining = [r for r in self._records if r.id != id]
            if len(remaining) == len(self._records):
                return
            self._records = remaining
            self._save()

    def get(self, id: str) -> Optional[VectorRecord]:
        with self._lock:
            for record in self._records:
                if record.id == id:
                    return record
        return None

    def query(self, query_embedding: List[float], k: int) -> List[Tuple[VectorRecord, float]]:
        if k <= 0:
            return []

        with self._lock:
            snapshot = list(self._records)

        dimension = len(query_embedding)
        scored: List[Tuple[VectorRecord, float]] = []
        mismatched = 0
        for record in snapshot:
            if len(record.embedding) != dimension:
                mismatched += 1
                scored.append((record, 0.0))
                continue
            scored.append((record, cosine_similarity(query_embedding, record.embedding)))

        if mismatched:
            logger.warning(
                "%d records have a different embedding dimension than the query (%d); scored as 0. "
                "Reindex after changing the embedding model.",
                mismatched,
                dimension,
                extra={"mismatched": mismatched, "dimension": dimension},
            )

        # sorted() is stable, so equal scores keep storage order.
        scored.sort(key=lambda item: item[1], reverse=True)
        return scored[:k]

    def count(self) -> int:
        return len(self._records)

    def list(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [{"id": r.id, "metadata": dict(r.metadata)} for r in self._records]

    def ids(self) -> Set[str]:
        with self._lock:
            return {r.id for r in self._records}

    def clear(self) -> None:
        with self._lock:
            self._records = []
            self._save()
        logger.info("Vector store cleared", extra={"path": str(self.storage_path)})


__all__ = ["JsonVectorStore", "cosine_similarity"]
