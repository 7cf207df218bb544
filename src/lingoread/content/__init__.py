"""Book content processing on top of the extraction engine."""

from .chunking import ParagraphChunk, build_chunks, normalize_limit
from .service import ContentPreview, ProcessedBook, ProcessingStatus, content_preview, process_book

__all__ = [
    "ContentPreview",
    "ParagraphChunk",
    "ProcessedBook",
    "ProcessingStatus",
    "build_chunks",
    "content_preview",
    "normalize_limit",
    "process_book",
]
