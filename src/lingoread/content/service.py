"""Book processing flows: full chunked extraction and bounded previews."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import inspect
import logging
from typing import Awaitable, Callable

from lingoread.content.chunking import ParagraphChunk, build_chunks, normalize_limit
from lingoread.extraction.config import ExtractionSettings
from lingoread.extraction.models import Chapter, ExtractOptions, Paragraph
from lingoread.extraction.orchestrator import extract

logger = logging.getLogger(__name__)


class ProcessingStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


StatusCallback = Callable[[ProcessingStatus], Awaitable[None] | None]


@dataclass(frozen=True, slots=True)
class ProcessedBook:
    """Chunked paragraphs and chapter outline ready for persistence."""

    chunks: list[ParagraphChunk]
    chapters: list[Chapter]
    paragraph_count: int

    @property
    def total_chunks(self) -> int:
        return len(self.chunks)


@dataclass(frozen=True, slots=True)
class ContentPreview:
    """The first paragraphs of a book for immediate display."""

    paragraphs: list[Paragraph]
    chapters: list[Chapter]
    has_more: bool

    @property
    def paragraph_count(self) -> int:
        return len(self.paragraphs)


async def _notify(callback: StatusCallback | None, status: ProcessingStatus) -> None:
    if callback is None:
        return
    result = callback(status)
    if inspect.isawaitable(result):
        await result


async def process_book(
    raw: bytes,
    settings: ExtractionSettings | None = None,
    *,
    source: str | None = None,
    on_status: StatusCallback | None = None,
) -> ProcessedBook:
    """Extract a whole book and group its paragraphs into storage chunks.

    ``on_status`` receives ``processing`` before extraction and ``completed``
    or ``failed`` afterwards; extraction errors are re-raised after ``failed``.
    """

    settings = settings or ExtractionSettings()
    await _notify(on_status, ProcessingStatus.PROCESSING)

    try:
        result = await extract(
            raw,
            ExtractOptions(max_paragraphs=settings.max_paragraphs),
            settings=settings.resolver,
            source=source,
        )
        chunks = build_chunks(result.paragraphs, settings.chunk_size)
    except Exception:
        logger.exception("Book processing failed for %s", source or "<bytes>")
        await _notify(on_status, ProcessingStatus.FAILED)
        raise

    logger.info(
        "Processed %s: %d paragraphs, %d chunks, %d chapters",
        source or "<bytes>",
        result.paragraph_count,
        len(chunks),
        len(result.chapters),
    )
    await _notify(on_status, ProcessingStatus.COMPLETED)
    return ProcessedBook(chunks=chunks, chapters=result.chapters, paragraph_count=result.paragraph_count)


async def content_preview(
    raw: bytes,
    limit: int | float | None = None,
    settings: ExtractionSettings | None = None,
    *,
    source: str | None = None,
) -> ContentPreview:
    """Extract at most ``limit`` paragraphs (capped by settings) for a quick read."""

    settings = settings or ExtractionSettings()
    normalized_limit = normalize_limit(limit, settings.preview_limit_cap)
    result = await extract(
        raw,
        ExtractOptions(max_paragraphs=normalized_limit),
        settings=settings.resolver,
        source=source,
    )
    has_more = normalized_limit is not None and result.paragraph_count >= normalized_limit
    return ContentPreview(paragraphs=result.paragraphs, chapters=result.chapters, has_more=has_more)
