"""
Shared fixtures: a deterministic stub embedder and temporary document trees.
"""

import os
import threading
from pathlib import Path

import pytest

from docindex.errors import EmbeddingError
from docindex.vector_store.json_store import JsonVectorStore


class FakeEmbedder:
    """
    Letter-frequency embedder. Identical text always maps to the same vector.
    Any text containing one of ``fail_on`` raises EmbeddingError.
    """

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.calls = []
        self._lock = threading.Lock()

    @staticmethod
    def vector(text):
        counts = [0.0] * 27
        for ch in text.lower():
            if "a" <= ch <= "z":
                counts[ord(ch) - ord("a")] += 1.0
            elif ch.isdigit():
                counts[26] += 1.0
        return counts + [1.0]

    def embed_text(self, text):
        with self._lock:
            self.calls.append(text)
        for marker in self.fail_on:
            if marker in text:
                raise EmbeddingError(f"provider rejected chunk containing {marker!r}")
        return self.vector(text)


def write_doc(docs_dir: Path, rel_path: str, content: str, mtime_ns: int = 1_700_000_000_000_000_000) -> Path:
    path = docs_dir / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    os.utime(path, ns=(mtime_ns, mtime_ns))
    return path


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def docs_dir(tmp_path):
    path = tmp_path / "docs"
    path.mkdir()
    return path


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "vector_store.json"


@pytest.fixture
def meta_path(tmp_path):
    return tmp_path / "data" / "index_meta.json"


@pytest.fixture
def store(store_path):
    vector_store = JsonVectorStore(store_path)
    vector_store.load()
    return vector_store
