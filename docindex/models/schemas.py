from __future__ import annotations

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field


# Indexing
class IndexMetaEntry(BaseModel):
    """Bookkeeping for one indexed document; persisted as {mtime, chunks, indexed_at}."""

    model_config = ConfigDict(populate_by_name=True)

    modified_at: float = Field(..., alias="mtime", description="Modification time (ms) seen at indexing")
    chunk_count: int = Field(..., ge=0, alias="chunks", description="Chunks produced on last index")
    indexed_at: str = Field(..., description="ISO-8601 timestamp of the last successful indexing")
    embedding_model: str | None = Field(default=None, description="Model that produced the stored vectors")


class FileChange(BaseModel):
    path: str
    action: Literal["new", "updated", "deleted", "failed"]
    chunks: int = Field(default=0, ge=0)
    error: str | None = None


class ReindexReport(BaseModel):
    """Outcome of one incremental indexing pass."""

    new: int = Field(default=0, ge=0)
    updated: int = Field(default=0, ge=0)
    deleted: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    total_files: int = Field(default=0, ge=0, description="Documents found on disk")
    indexed_chunks: int = Field(default=0, ge=0, description="Chunks embedded and stored in this run")
    orphans_removed: int = Field(default=0, ge=0)
    elapsed_sec: float | None = Field(default=None, ge=0)
    changes: List[FileChange] = Field(default_factory=list)


# Search
class SearchHit(BaseModel):
    chunk_id: str
    text: str
    metadata: Dict[str, Any]
    similarity: float


class SearchResponse(BaseModel):
    query: str
    results: List[SearchHit] = Field(default_factory=list)
    store_empty: bool = Field(default=False, description="True when nothing has been indexed yet")
    total_records: int = Field(default=0, ge=0)


__all__ = [
    "IndexMetaEntry",
    "FileChange",
    "ReindexReport",
    "SearchHit",
    "SearchResponse",
]
