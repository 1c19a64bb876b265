"""
Application configuration loaded from environment variables.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VECTOR_STORE_FILENAME = "vector_store.json"
INDEX_META_FILENAME = "index_meta.json"


class Settings(BaseSettings):
    """Centralised application settings."""

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    openai_api_key: SecretStr | None = Field(default=None, alias="OPENAI_API_KEY")
    embedding_model_name: str = Field(default="text-embedding-3-small", alias="EMBEDDING_MODEL_NAME")
    embedding_timeout_sec: float = Field(default=30.0, gt=0, alias="EMBEDDING_TIMEOUT_SEC")
    embedding_max_retries: int = Field(default=2, ge=0, alias="EMBEDDING_MAX_RETRIES")
    embedding_max_workers: int = Field(default=4, ge=1, alias="EMBEDDING_MAX_WORKERS")

    vector_store_backend: str = Field(default="json", alias="VECTOR_STORE_BACKEND")

    # Paths below are relative to the project root.
    project_marker_dir: str = Field(default=".system", alias="PROJECT_MARKER_DIR")
    vector_data_dir: str = Field(default=".system/vector-data", alias="VECTOR_DATA_DIR")
    docs_dir: str = Field(default="edit/4.publish📚", alias="DOCS_DIR")
    doc_extensions: List[str] = Field(default_factory=lambda: [".md"], alias="DOC_EXTENSIONS")

    chunk_max_chars: int = Field(default=6000, gt=0, alias="CHUNK_MAX_CHARS")

    search_top_k: int = Field(default=5, gt=0, alias="SEARCH_TOP_K")
    preview_chars: int = Field(default=200, gt=0, alias="PREVIEW_CHARS")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("doc_extensions")
    @classmethod
    def _normalise_extensions(cls, value: List[str]) -> List[str]:
        normalised = []
        for ext in value:
            ext = ext.strip().lower()
            if not ext:
                continue
            normalised.append(ext if ext.startswith(".") else f".{ext}")
        return normalised


settings = Settings()


def setup_logging() -> logging.Logger:
    """
    Configure base logging for the CLI entry points.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
    )
    return logging.getLogger("docindex")


def public_settings() -> Dict[str, Any]:
    """
    Return settings without secrets for safe logging/inspection.
    """
    return settings.model_dump(
        exclude={"openai_api_key"},
        exclude_none=True,
    )


__all__ = [
    "Settings",
    "settings",
    "setup_logging",
    "public_settings",
    "VECTOR_STORE_FILENAME",
    "INDEX_META_FILENAME",
]
