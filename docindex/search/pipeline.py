"""
Query path: normalize the query, embed it, rank stored chunks by similarity.
"""

from __future__ import annotations

import logging

from docindex.config import settings
from docindex.embeddings.client import Embedder
from docindex.models.schemas import SearchHit, SearchResponse
from docindex.vector_store.base import VectorStore

logger = logging.getLogger(__name__)


class SearchService:
    """Read-only similarity search over a loaded vector store."""

    def __init__(
        self,
        vector_store: VectorStore,
        embedder: Embedder,
        logger_: logging.Logger | None = None,
    ) -> None:
        self.vector_store = vector_store
        self.embedder = embedder
        self.logger = logger_ or logging.getLogger(__name__)

    @staticmethod
    def normalize_query(text: str) -> str:
        """Trim and collapse whitespace and line breaks."""
        return " ".join(text.strip().split())

    def search(self, query: str, top_k: int | None = None) -> SearchResponse:
        """
        Return the ``top_k`` most similar chunks. An empty store short-circuits
        with ``store_empty=True`` without calling the embedder; an embedding
        failure propagates as EmbeddingError.
        """
        normalized = self.normalize_query(query or "")
        if not normalized:
            raise ValueError("Query must not be empty")

        top_k = top_k if top_k is not None else settings.search_top_k
        if top_k <= 0:
            raise ValueError("top_k must be positive")

        total = self.vector_store.count()
        if total == 0:
            self.logger.info("Search against empty vector store", extra={"query_len": len(normalized)})
            return SearchResponse(query=normalized, store_empty=True, total_records=0)

        embedding = self.embedder.embed_text(normalized)
        ranked = self.vector_store.query(embedding, top_k)
        hits = [
            SearchHit(chunk_id=record.id, text=record.text, metadata=record.metadata, similarity=score)
            for record, score in ranked
        ]

        self.logger.info(
            "Retrieved chunks",
            extra={
                "requested": top_k,
                "returned": len(hits),
                "top_score": round(hits[0].similarity, 3) if hits else None,
                "results": [{"chunk_id": h.chunk_id, "score": round(h.similarity, 3)} for h in hits[:5]],
            },
        )
        return SearchResponse(query=normalized, results=hits, total_records=total)


__all__ = ["SearchService"]
