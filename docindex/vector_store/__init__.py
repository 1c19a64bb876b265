"""
Vector store abstractions and factories.
"""

from __future__ import annotations

from pathlib import Path

from docindex.config import settings
from docindex.vector_store.json_store import JsonVectorStore

DEFAULT_VECTOR_STORE_BACKEND = settings.vector_store_backend


def get_vector_store(storage_path: str | Path):
    """
    Factory to obtain a configured, loaded VectorStore instance.
    Currently supports only the JSON snapshot backend.
    """
    backend = DEFAULT_VECTOR_STORE_BACKEND.lower()
    if backend == "json":
        store = JsonVectorStore(storage_path)
        store.load()
        return store
    raise ValueError(f"Unsupported vector store backend: {backend}")


__all__ = ["DEFAULT_VECTOR_STORE_BACKEND", "get_vector_store", "JsonVectorStore"]
