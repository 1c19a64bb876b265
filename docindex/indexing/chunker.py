"""
Text chunking utilities.
"""

from __future__ import annotations

import re
from typing import List

from docindex.config import settings

CHUNK_MAX_CHARS = settings.chunk_max_chars
PARAGRAPH_SEPARATOR = "\n\n"

_BLANK_LINE_PATTERN = re.compile(r"\n\s*\n")


def chunk_id(source_path: str, chunk_index: int) -> str:
    """Stable record id for the ``chunk_index``-th chunk of ``source_path``."""
    return f"{source_path}:chunk:{chunk_index}"


def split_paragraphs(text: str) -> List[str]:
    """
    Split text into paragraphs on blank lines.
    Empty paragraphs are dropped. Leading indentation is kept so indented
    code blocks and list continuations survive; surrounding newlines and
    trailing whitespace are removed.
    """
    normalised = text.replace("\r\n", "\n")
    return [p.strip("\n").rstrip() for p in _BLANK_LINE_PATTERN.split(normalised) if p.strip()]


def chunk_text(text: str, max_chars: int = CHUNK_MAX_CHARS) -> List[str]:
    """
    Greedily pack paragraphs into chunks of at most ``max_chars`` characters,
    counting the separator between paragraphs. A paragraph longer than the
    budget becomes a chunk of its own. Text without paragraphs yields a single
    chunk holding the text unchanged.
    """
    paragraphs = split_paragraphs(text)
    if not paragraphs:
        return [text]

    chunks: List[str] = []
    current: List[str] = []
    current_len = 0

    for paragraph in paragraphs:
        separator_len = len(PARAGRAPH_SEPARATOR) if current else 0
        candidate_len = current_len + separator_len + len(paragraph)

        if current and candidate_len > max_chars:
            chunks.append(PARAGRAPH_SEPARATOR.join(current))
            current = [paragraph]
            current_len = len(paragraph)
            continue

        current.append(paragraph)
        current_len = candidate_len

    if current:
        chunks.append(PARAGRAPH_SEPARATOR.join(current))

    return chunks


__all__ = ["chunk_text", "chunk_id", "split_paragraphs", "CHUNK_MAX_CHARS"]
