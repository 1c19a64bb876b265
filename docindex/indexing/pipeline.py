"""
Indexing pipeline: diff the document tree against index metadata, chunk and
embed changed files, and bring the vector store in line.

Failure model: embeddings for a file are computed before any store mutation
for that file, so an embedding failure leaves the previous records and the
stale metadata entry untouched and the file is retried on the next run.
Old chunks are deleted and new ones written inside one store batch, then the
metadata entry is flushed. A crash between those two writes leaves records
the metadata does not describe; the next run re-embeds that file and the
orphan sweep at the end of every run drops ids no metadata entry accounts for.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set

from tqdm import tqdm

from docindex.config import settings
from docindex.embeddings.client import Embedder
from docindex.errors import ConfigurationError, EmbeddingError
from docindex.indexing.chunker import chunk_id, chunk_text
from docindex.indexing.index_meta import IndexMeta, load_index_meta, save_index_meta
from docindex.models.schemas import FileChange, IndexMetaEntry, ReindexReport
from docindex.vector_store.base import VectorStore

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[FileChange], None]


def file_mtime(path: Path) -> float:
    """Modification time in milliseconds."""
    return path.stat().st_mtime_ns / 1_000_000


def discover_documents(docs_dir: Path, extensions: Iterable[str]) -> Dict[str, Path]:
    """
    Map relative POSIX path -> absolute path for every documentation file
    under ``docs_dir``. Hidden files and directories are ignored.
    """
    if not docs_dir.is_dir():
        raise ConfigurationError(f"Documentation directory not found: {docs_dir}")

    wanted = {ext.lower() for ext in extensions}
    found: Dict[str, Path] = {}
    for path in docs_dir.rglob("*"):
        if not path.is_file() or path.suffix.lower() not in wanted:
            continue
        rel = path.relative_to(docs_dir)
        if any(part.startswith(".") for part in rel.parts):
            continue
        found[rel.as_posix()] = path
    return dict(sorted(found.items()))


def expected_ids(meta: IndexMeta) -> Set[str]:
    return {chunk_id(path, i) for path, entry in meta.items() for i in range(entry.chunk_count)}


def _delete_chunks(vector_store: VectorStore, source_path: str, count: int) -> None:
    for i in range(count):
        vector_store.delete(chunk_id(source_path, i))


def _embed_chunks(embedder: Embedder, chunks: Sequence[str], executor: Optional[Executor]) -> List[List[float]]:
    if executor is None or len(chunks) < 2:
        return [embedder.embed_text(chunk) for chunk in chunks]
    # map() re-raises the first failure when its result is reached.
    return list(executor.map(embedder.embed_text, chunks))


def reindex(
    docs_dir: Path,
    vector_store: VectorStore,
    meta: IndexMeta,
    embedder: Embedder,
    meta_path: Path | None = None,
    max_chars: int | None = None,
    extensions: Iterable[str] | None = None,
    max_workers: int | None = None,
    on_change: ChangeCallback | None = None,
    progress: bool = False,
    embedding_model: str | None = None,
) -> ReindexReport:
    """
    Bring ``vector_store`` and ``meta`` into agreement with ``docs_dir``.

    ``embedding_model`` (default: the embedder's ``model`` attribute) is
    recorded per document; an entry written by another model is re-embedded
    even if its timestamp is unchanged.

    ``meta`` is updated in place. When ``meta_path`` is given the metadata is
    flushed after every completed file and once more at the end of the pass.
    """
    started = time.time()
    max_chars = max_chars or settings.chunk_max_chars
    extensions = list(extensions or settings.doc_extensions)
    max_workers = max_workers or settings.embedding_max_workers
    embedding_model = embedding_model or getattr(embedder, "model", None)

    current = discover_documents(Path(docs_dir), extensions)
    report = ReindexReport(total_files=len(current))
    logger.info("Found %d documents in %s", len(current), docs_dir, extra={"docs_dir": str(docs_dir)})

    def record(change: FileChange) -> None:
        report.changes.append(change)
        if on_change:
            on_change(change)

    def flush() -> None:
        if meta_path is not None:
            save_index_meta(meta_path, meta)

    # Deletions go first so stale chunks never outlive a rename.
    for path in sorted(set(meta) - set(current)):
        entry = meta[path]
        with vector_store.batch():
            _delete_chunks(vector_store, path, entry.chunk_count)
        del meta[path]
        flush()
        report.deleted += 1
        logger.info("Removed deleted document: %s (%d chunks)", path, entry.chunk_count)
        record(FileChange(path=path, action="deleted", chunks=entry.chunk_count))

    stored_ids = vector_store.ids()
    executor = ThreadPoolExecutor(max_workers=max_workers) if max_workers > 1 else None
    try:
        items = tqdm(current.items(), desc="Indexing", unit="files", disable=not progress)
        for rel_path, abs_path in items:
            entry = meta.get(rel_path)
            try:
                mtime = file_mtime(abs_path)
            except OSError as exc:
                report.failed += 1
                logger.error("Cannot stat %s: %s", rel_path, exc, extra={"path": rel_path})
                record(FileChange(path=rel_path, action="failed", error=str(exc)))
                continue

            if (
                entry is not None
                and entry.modified_at == mtime
                and all(chunk_id(rel_path, i) in stored_ids for i in range(entry.chunk_count))
                and (embedding_model is None or entry.embedding_model == embedding_model)
            ):
                report.skipped += 1
                continue

            try:
                content = abs_path.read_text(encoding="utf-8", errors="replace")
                chunks = chunk_text(content, max_chars=max_chars)
                embeddings = _embed_chunks(embedder, chunks, executor)
            except (OSError, EmbeddingError) as exc:
                report.failed += 1
                logger.error(
                    "Indexing failed for %s, will retry next run: %s",
                    rel_path,
                    exc,
                    extra={"path": rel_path},
                )
                record(FileChange(path=rel_path, action="failed", error=str(exc)))
                continue

            with vector_store.batch():
                if entry is not None:
                    _delete_chunks(vector_store, rel_path, entry.chunk_count)
                for index, (text, embedding) in enumerate(zip(chunks, embeddings)):
                    vector_store.add(
                        chunk_id(rel_path, index),
                        embedding,
                        text,
                        {
                            "source_path": rel_path,
                            "filename": abs_path.name,
                            "chunk_index": index,
                            "chunk_count": len(chunks),
                        },
                    )

            meta[rel_path] = IndexMetaEntry(
                modified_at=mtime,
                chunk_count=len(chunks),
                indexed_at=datetime.now(timezone.utc).isoformat(),
                embedding_model=embedding_model,
            )
            flush()
            report.indexed_chunks += len(chunks)

            action = "new" if entry is None else "updated"
            if entry is None:
                report.new += 1
            else:
                report.updated += 1
            logger.info("Indexed %s document: %s (%d chunks)", action, rel_path, len(chunks))
            record(FileChange(path=rel_path, action=action, chunks=len(chunks)))
    finally:
        if executor is not None:
            executor.shutdown(wait=True)

    orphans = vector_store.ids() - expected_ids(meta)
    if orphans:
        with vector_store.batch():
            for orphan_id in sorted(orphans):
                vector_store.delete(orphan_id)
        report.orphans_removed = len(orphans)
        logger.warning("Removed %d orphaned records", len(orphans), extra={"count": len(orphans)})

    flush()
    report.elapsed_sec = time.time() - started
    logger.info(
        "Reindex completed",
        extra={
            "new": report.new,
            "updated": report.updated,
            "deleted": report.deleted,
            "skipped": report.skipped,
            "failed": report.failed,
            "elapsed_sec": round(report.elapsed_sec, 2),
        },
    )
    return report


class ReindexService:
    """Runs an incremental pass against the persisted metadata at ``meta_path``."""

    def __init__(
        self,
        vector_store: VectorStore,
        embedder: Embedder,
        docs_dir: Path,
        meta_path: Path,
        max_chars: int | None = None,
        max_workers: int | None = None,
        logger_: logging.Logger | None = None,
    ) -> None:
        self.vector_store = vector_store
        self.embedder = embedder
        self.docs_dir = Path(docs_dir)
        self.meta_path = Path(meta_path)
        self.max_chars = max_chars
        self.max_workers = max_workers
        self.logger = logger_ or logging.getLogger(__name__)

    def run(self, on_change: ChangeCallback | None = None, progress: bool = False) -> ReindexReport:
        meta = load_index_meta(self.meta_path)
        report = reindex(
            self.docs_dir,
            self.vector_store,
            meta,
            self.embedder,
            meta_path=self.meta_path,
            max_chars=self.max_chars,
            max_workers=self.max_workers,
            on_change=on_change,
            progress=progress,
        )
        self.logger.info(
            "ReindexService completed",
            extra={"indexed_chunks": report.indexed_chunks, "elapsed_sec": round(report.elapsed_sec or 0.0, 2)},
        )
        return report


__all__ = ["reindex", "discover_documents", "expected_ids", "file_mtime", "ReindexService"]
