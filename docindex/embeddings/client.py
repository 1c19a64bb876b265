"""
OpenAI embeddings client.
"""

from __future__ import annotations

import logging
from typing import List, Protocol, Sequence

from openai import OpenAI, OpenAIError

from docindex.config import settings
from docindex.errors import EmbeddingError, MissingCredentialError

DEFAULT_EMBEDDING_MODEL = settings.embedding_model_name
DEFAULT_EMBED_BATCH_SIZE = 64

logger = logging.getLogger(__name__)


class Embedder(Protocol):
    """Anything that turns one text into one vector, raising EmbeddingError on failure."""

    def embed_text(self, text: str) -> List[float]:
        ...


class EmbeddingsClient:
    def __init__(
        self,
        model: str = DEFAULT_EMBEDDING_MODEL,
        batch_size: int = DEFAULT_EMBED_BATCH_SIZE,
        timeout: float | None = None,
        max_retries: int | None = None,
        client: OpenAI | None = None,
    ) -> None:
        self.model = model
        self.batch_size = batch_size
        if client is None:
            if not settings.openai_api_key:
                raise MissingCredentialError(
                    "OPENAI_API_KEY environment variable is not set. Please set it in your .env file."
                )
            client = OpenAI(
                api_key=settings.openai_api_key.get_secret_value(),
                timeout=timeout if timeout is not None else settings.embedding_timeout_sec,
                max_retries=max_retries if max_retries is not None else settings.embedding_max_retries,
            )
        self.client = client

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        if not texts:
            return []

        embeddings: List[List[float]] = []
        for i in range(0, len(texts), self.batch_size):
            batch = list(texts[i : i + self.batch_size])
            try:
                response = self.client.embeddings.create(model=self.model, input=batch)
            except OpenAIError as exc:
                # Timeouts surface as openai.APITimeoutError, a subclass of OpenAIError.
                logger.error(
                    "Embedding request failed: batch size=%d, error=%s",
                    len(batch),
                    exc,
                    extra={"model": self.model},
                )
                raise EmbeddingError(f"Embedding request failed: {exc}") from exc

            data = sorted(response.data, key=lambda item: item.index)
            if len(data) != len(batch):
                raise EmbeddingError(f"Embedding response size mismatch: expected {len(batch)}, got {len(data)}")
            embeddings.extend([list(item.embedding) for item in data])
        return embeddings

    def embed_text(self, text: str) -> List[float]:
        vectors = self.embed_texts([text])
        if not vectors or not vectors[0]:
            raise EmbeddingError("Embedding response contained no vector")
        return vectors[0]


__all__ = ["Embedder", "EmbeddingsClient", "DEFAULT_EMBEDDING_MODEL"]
