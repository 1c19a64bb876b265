"""
CLI for incremental reindexing of the documentation tree.

Example:
    python -m scripts.reindex
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from tqdm import tqdm

from docindex.config import setup_logging
from docindex.embeddings.client import EmbeddingsClient
from docindex.errors import ConfigurationError, PersistenceError
from docindex.indexing.pipeline import ReindexService
from docindex.models.schemas import FileChange, ReindexReport
from docindex.project_root import (
    ensure_vector_data_dir,
    find_project_root,
    get_docs_dir,
    get_index_meta_path,
    get_vector_store_path,
)
from docindex.vector_store import get_vector_store

ACTION_LABELS = {
    "new": "new",
    "updated": "updated",
    "deleted": "deleted",
    "failed": "FAILED",
}


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Re-embed changed documents and drop deleted ones from the vector index.",
    )
    return parser.parse_args(argv)


def print_change(change: FileChange) -> None:
    line = f"{ACTION_LABELS[change.action]:>8}: {change.path}"
    if change.action == "failed" and change.error:
        line += f" ({change.error})"
    elif change.chunks:
        line += f" [{change.chunks} chunks]"
    tqdm.write(line)


def print_summary(report: ReindexReport) -> None:
    print("\nDone.\n")
    print("Summary:")
    print(f"  new:     {report.new} files")
    print(f"  updated: {report.updated} files")
    print(f"  deleted: {report.deleted} files")
    print(f"  skipped: {report.skipped} files")
    if report.failed:
        print(f"  failed:  {report.failed} files (will be retried next run)")
    if report.orphans_removed:
        print(f"  orphaned records removed: {report.orphans_removed}")
    print(f"  total:   {report.total_files} files ({report.elapsed_sec or 0.0:.2f}s)\n")


def main(argv: Sequence[str] | None = None) -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    parse_args(argv)

    try:
        project_root = find_project_root()
        ensure_vector_data_dir(project_root)
        embedder = EmbeddingsClient()
        docs_dir = get_docs_dir(project_root)
        print(f"Incremental reindex of {docs_dir}\n")

        service = ReindexService(
            get_vector_store(get_vector_store_path(project_root)),
            embedder,
            docs_dir=docs_dir,
            meta_path=get_index_meta_path(project_root),
            logger_=logger,
        )
        report = service.run(on_change=print_change, progress=True)
    except (ConfigurationError, PersistenceError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except Exception:
        logger.exception("Reindex failed")
        sys.exit(1)

    print_summary(report)


if __name__ == "__main__":
    main()
