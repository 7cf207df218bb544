"""Fixed-size paragraph chunks for storage and paged reading."""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Sequence

from lingoread.extraction.config import DEFAULT_CHUNK_SIZE, DEFAULT_PREVIEW_LIMIT_CAP
from lingoread.extraction.models import Paragraph


@dataclass(frozen=True, slots=True)
class ParagraphChunk:
    """Consecutive paragraphs stored together under one chunk index."""

    chunk_index: int
    paragraphs: list[Paragraph] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "chunk_index": self.chunk_index,
            "paragraphs": [{"id": paragraph.id, "text": paragraph.text} for paragraph in self.paragraphs],
        }


def build_chunks(paragraphs: Sequence[Paragraph], chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[ParagraphChunk]:
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")

    return [
        ParagraphChunk(chunk_index=start // chunk_size, paragraphs=list(paragraphs[start : start + chunk_size]))
        for start in range(0, len(paragraphs), chunk_size)
    ]


def normalize_limit(limit: int | float | None, cap: int = DEFAULT_PREVIEW_LIMIT_CAP) -> int | None:
    """Clamp a caller-supplied paragraph limit; non-positive or missing means unlimited."""

    if limit is None or isinstance(limit, bool):
        return None
    value = math.ceil(limit)
    if value < 1:
        return None
    return min(value, cap)
