"""
CLI for searching the vector index by free-text query.

Example:
    python -m scripts.search "quest-driven design" --top-k 5
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from docindex.config import settings, setup_logging
from docindex.embeddings.client import EmbeddingsClient
from docindex.errors import ConfigurationError, EmbeddingError
from docindex.models.schemas import SearchResponse
from docindex.project_root import find_project_root, get_vector_store_path
from docindex.search.pipeline import SearchService
from docindex.vector_store import get_vector_store


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search indexed documentation by text query.")
    parser.add_argument("query", nargs="+", help="Query text")
    parser.add_argument("--top-k", "-k", type=int, default=settings.search_top_k, help="How many results to return")
    parser.add_argument("--snippet", type=int, default=settings.preview_chars, help="Preview length in characters")
    args = parser.parse_args(argv)
    if args.top_k <= 0:
        parser.error("--top-k must be positive")
    return args


def print_results(response: SearchResponse, snippet: int) -> None:
    print(f'\nQuery: "{response.query}"\n')
    print(f"Results: {len(response.results)}\n")
    print("-" * 80)

    if not response.results:
        print("\nNo matches found.")

    for idx, hit in enumerate(response.results, start=1):
        meta = hit.metadata
        print(f"\n{idx}. {meta.get('filename') or hit.chunk_id}")
        print(f"   path: {meta.get('source_path')}")
        print(f"   similarity: {hit.similarity * 100:.2f}%")
        chunk_count = meta.get("chunk_count") or 1
        if chunk_count > 1:
            print(f"   chunk: {int(meta.get('chunk_index', 0)) + 1}/{chunk_count}")
        preview = hit.text[:snippet].replace("\n", "\n   ")
        print("\n   preview:")
        print(f"   {preview}" + ("..." if len(hit.text) > snippet else ""))

    print("\n" + "-" * 80 + "\n")


def main(argv: Sequence[str] | None = None) -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    args = parse_args(argv)
    query = " ".join(args.query)

    try:
        project_root = find_project_root()
        embedder = EmbeddingsClient(max_retries=0)
        service = SearchService(get_vector_store(get_vector_store_path(project_root)), embedder, logger_=logger)
        response = service.search(query, top_k=args.top_k)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except (EmbeddingError, ValueError) as exc:
        print(f"Search failed: {exc}", file=sys.stderr)
        sys.exit(1)
    except Exception:
        logger.exception("Search failed")
        sys.exit(1)

    if response.store_empty:
        print("Vector store is empty. Please run `python -m scripts.reindex` first.")
        return

    print_results(response, args.snippet)


if __name__ == "__main__":
    main()
