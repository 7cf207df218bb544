"""Domain errors raised by the extraction engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ExtractionError(Exception):
    """Base error for extraction failures that abort a whole book."""

    message: str
    source: str | None = None

    def __str__(self) -> str:
        if self.source:
            return f"{self.message} (source={self.source})"
        return self.message


@dataclass(slots=True)
class ContainerError(ExtractionError):
    """The EPUB archive could not be opened or its package could not be read."""
