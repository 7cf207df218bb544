"""EPUB paragraph and chapter extraction engine."""

from .errors import ContainerError, ExtractionError
from .models import Chapter, ExtractOptions, ExtractionResult, Paragraph, StreamResult
from .orchestrator import extract, stream_extract

__all__ = [
    "Chapter",
    "ContainerError",
    "ExtractOptions",
    "ExtractionError",
    "ExtractionResult",
    "Paragraph",
    "StreamResult",
    "extract",
    "stream_extract",
]
