"""Value objects produced and consumed by the EPUB extraction engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable


@dataclass(frozen=True, slots=True)
class Paragraph:
    """A numbered text block in book reading order."""

    id: int
    text: str


@dataclass(frozen=True, slots=True)
class ExtractedParagraph:
    """A text block from one content document before global numbering."""

    text: str
    anchors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Chapter:
    """A chapter boundary pointing at the paragraph where it starts."""

    index: int
    title: str
    start_paragraph_id: int

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "title": self.title,
            "start_paragraph_id": self.start_paragraph_id,
        }


@dataclass(frozen=True, slots=True)
class NavigationEntry:
    """One table-of-contents entry as declared by the book."""

    title: str
    id: str | None = None
    href: str | None = None


@dataclass(frozen=True, slots=True)
class ContentDocument:
    """One spine item; markup is fetched lazily through ``loader``."""

    id: str
    href: str
    loader: Callable[[], str] = field(repr=False, compare=False, default=lambda: "")

    def load(self) -> str:
        return self.loader()


@dataclass(frozen=True, slots=True)
class DocumentContent:
    """Paragraphs and heading extracted from a single content document."""

    paragraphs: tuple[ExtractedParagraph, ...]
    heading: str | None = None


@dataclass(frozen=True, slots=True)
class ExtractOptions:
    """Caller-supplied limits for one extraction call."""

    max_paragraphs: int | None = None

    def __post_init__(self) -> None:
        if self.max_paragraphs is not None and self.max_paragraphs < 1:
            raise ValueError("max_paragraphs must be >= 1")


@dataclass(frozen=True, slots=True)
class StreamResult:
    """Summary returned by the streaming extractor once traversal stops."""

    paragraph_count: int
    chapters: list[Chapter]
    truncated: bool = False


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Buffered extraction output: every paragraph plus the chapter outline."""

    paragraphs: list[Paragraph]
    chapters: list[Chapter]
    truncated: bool = False

    @property
    def paragraph_count(self) -> int:
        return len(self.paragraphs)


ParagraphSink = Callable[[Paragraph], Awaitable[None] | None]
