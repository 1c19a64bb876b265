"""
Vector store interface and shared types.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Set, Tuple


@dataclass
class VectorRecord:
    id: str
    text: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    embedding: List[float] = field(default_factory=list)


class VectorStore(Protocol):
    def load(self) -> None:
        ...

    def add(self, id: str, embedding: List[float], text: str, metadata: Dict[str, Any]) -> None:
        ...

    def delete(self, id: str) -> None:
        ...

    def get(self, id: str) -> Optional[VectorRecord]:
        ...

    def query(self, query_embedding: List[float], k: int) -> List[Tuple[VectorRecord, float]]:
        ...

    def count(self) -> int:
        ...

    def list(self) -> List[Dict[str, Any]]:
        ...

    def ids(self) -> Set[str]:
        ...

    def clear(self) -> None:
        ...

    def batch(self) -> AbstractContextManager[None]:
        ...


__all__ = ["VectorRecord", "VectorStore"]
