"""
Utility script to inspect indexed chunks without embeddings.

Usage:
    python -m scripts.inspect_index --limit 5 --offset 0
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Sequence

from docindex.errors import ConfigurationError
from docindex.indexing.index_meta import load_index_meta
from docindex.project_root import find_project_root, get_index_meta_path, get_vector_store_path
from docindex.vector_store import get_vector_store

METADATA_ORDER = ["source_path", "filename", "chunk_index", "chunk_count"]


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Inspect stored chunks in the vector index.")
    parser.add_argument("--limit", type=int, default=5, help="Number of records to show")
    parser.add_argument("--offset", type=int, default=0, help="Offset for pagination")
    args = parser.parse_args(argv)

    try:
        project_root = find_project_root()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    store = get_vector_store(get_vector_store_path(project_root))
    meta = load_index_meta(get_index_meta_path(project_root))
    records = store.list()
    page = records[args.offset : args.offset + args.limit]

    print(f"Total records in store: {store.count()}")
    print(f"Indexed documents: {len(meta)}")
    print(f"Showing {len(page)} records (offset={args.offset}, limit={args.limit})")
    for idx, item in enumerate(page, start=args.offset + 1):
        print(f"\n#{idx}: {item['id']}")
        meta_fields = item["metadata"]
        ordered = {k: meta_fields[k] for k in METADATA_ORDER if k in meta_fields} | {
            k: v for k, v in meta_fields.items() if k not in METADATA_ORDER
        }
        print("Metadata:", json.dumps(ordered, ensure_ascii=False))


if __name__ == "__main__":
    main()
