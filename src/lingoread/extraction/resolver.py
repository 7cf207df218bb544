"""Chapter boundary resolution.

Resolution runs as a cascade. Per content document:

1. anchor match: paragraph anchors looked up against anchored TOC entries;
2. document match, only when step 1 found nothing for the document: the TOC
   entry for the document id, then an unanchored TOC entry for the document
   file, then the document's own heading.

After the whole book is read, a book whose TOC was mostly missed is rebuilt
from scratch by matching TOC titles against paragraph text, and a book with
no chapter at all gets a single "Full book" chapter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import re
from typing import Callable, Iterable, Sequence

from lingoread.extraction.models import Chapter, ContentDocument, DocumentContent
from lingoread.extraction.navigation import NavigationIndex
from lingoread.extraction.normalization import normalize_title, normalize_whitespace

logger = logging.getLogger(__name__)

DEFAULT_CHAPTER_TITLE = "Full book"
DEFAULT_TEXT_MATCH_RATIO = 0.5
DEFAULT_TEXT_MATCH_MIN_ENTRIES = 2
DEFAULT_SHORT_PARAGRAPH_SLACK = 15

_NUMBERED_TITLE_RE = re.compile(r"^(\d+)\.\s*(.+)$")


@dataclass(frozen=True, slots=True)
class ResolverSettings:
    """Thresholds for the text-matching fallback."""

    text_match_ratio: float = DEFAULT_TEXT_MATCH_RATIO
    text_match_min_entries: int = DEFAULT_TEXT_MATCH_MIN_ENTRIES
    short_paragraph_slack: int = DEFAULT_SHORT_PARAGRAPH_SLACK


@dataclass(frozen=True, slots=True)
class ChapterCandidate:
    """A chapter found inside one document, positioned by paragraph offset."""

    title: str
    offset: int
    tier: str


@dataclass(slots=True)
class TitleRegistry:
    """Tracks chapter titles already used, compared by normalized form."""

    _seen: set[str] = field(default_factory=set)

    def __contains__(self, title: str) -> bool:
        return normalize_title(title) in self._seen

    def claim(self, title: str) -> bool:
        """Mark ``title`` as used; False when an equivalent title was claimed before."""

        key = normalize_title(title)
        if not key or key in self._seen:
            return False
        self._seen.add(key)
        return True


DocumentStrategy = Callable[[ContentDocument, DocumentContent, NavigationIndex], str | None]


def match_by_document_id(document: ContentDocument, content: DocumentContent, index: NavigationIndex) -> str | None:
    return index.title_for_id(document.id)


def match_by_file(document: ContentDocument, content: DocumentContent, index: NavigationIndex) -> str | None:
    return index.title_for_file(document.href)


def match_by_heading(document: ContentDocument, content: DocumentContent, index: NavigationIndex) -> str | None:
    return content.heading


DOCUMENT_STRATEGIES: tuple[DocumentStrategy, ...] = (
    match_by_document_id,
    match_by_file,
    match_by_heading,
)


def resolve_anchor_chapters(
    document: ContentDocument,
    content: DocumentContent,
    index: NavigationIndex,
    titles: TitleRegistry,
) -> list[ChapterCandidate]:
    candidates: list[ChapterCandidate] = []
    if not index.by_file_and_anchor:
        return candidates

    for offset, paragraph in enumerate(content.paragraphs):
        for anchor in paragraph.anchors:
            title = index.title_for_anchor(document.href, anchor)
            if title and titles.claim(title):
                candidates.append(ChapterCandidate(title=title, offset=offset, tier="anchor"))
                break
    return candidates


def resolve_document_chapter(
    document: ContentDocument,
    content: DocumentContent,
    index: NavigationIndex,
    titles: TitleRegistry,
    strategies: Sequence[DocumentStrategy] = DOCUMENT_STRATEGIES,
) -> ChapterCandidate | None:
    """Return the chapter starting at the document's first paragraph, if any.

    The first strategy producing a title decides; a title that was already used
    elsewhere in the book yields no chapter rather than falling through.
    """

    if not content.paragraphs:
        return None

    for strategy in strategies:
        title = strategy(document, content, index)
        if not title:
            continue
        title = normalize_whitespace(title)
        if not title:
            continue
        if not titles.claim(title):
            logger.debug("Skipping repeated chapter title %r in %s", title, document.href)
            return None
        return ChapterCandidate(title=title, offset=0, tier=strategy.__name__)
    return None


def resolve_document(
    document: ContentDocument,
    content: DocumentContent,
    index: NavigationIndex,
    titles: TitleRegistry,
) -> list[ChapterCandidate]:
    """Run the per-document tiers and return chapters ordered by offset."""

    candidates = resolve_anchor_chapters(document, content, index, titles)
    if candidates:
        return candidates

    candidate = resolve_document_chapter(document, content, index, titles)
    return [candidate] if candidate else []


def _matches_normalized(text: str, title: str, slack: int) -> bool:
    if not text or not title:
        return False
    if text == title:
        return True
    if text.startswith(title + " "):
        return True
    if text in (title + ".", title + ","):
        return True
    if len(text) < len(title) + slack and title in text:
        return True

    numbered = _NUMBERED_TITLE_RE.match(title)
    if numbered:
        number, remainder = numbered.group(1), numbered.group(2)
        if text in (number, f"chapter {number}", f"capitulo {number}", remainder):
            return True
    return False


def text_matches_title(
    paragraph_text: str,
    title: str,
    *,
    slack: int = DEFAULT_SHORT_PARAGRAPH_SLACK,
) -> bool:
    """Return True when a paragraph reads like the heading for ``title``."""

    return _matches_normalized(normalize_title(paragraph_text), normalize_title(title), slack)


def needs_text_matching(chapter_count: int, index: NavigationIndex, settings: ResolverSettings) -> bool:
    entry_count = len(index)
    if entry_count <= settings.text_match_min_entries:
        return False
    return chapter_count < entry_count * settings.text_match_ratio


def resolve_by_text(
    paragraphs: Sequence[tuple[int, str]],
    index: NavigationIndex,
    settings: ResolverSettings,
) -> list[Chapter]:
    """Place every TOC entry at the first paragraph whose text matches its title.

    ``paragraphs`` holds ``(paragraph_id, text)`` pairs in reading order.
    """

    titles = TitleRegistry()
    chapters: list[Chapter] = []
    normalized = [(paragraph_id, normalize_title(text)) for paragraph_id, text in paragraphs]

    for entry in index.entries:
        key = normalize_title(entry.title)
        if not key or key in titles:
            continue
        for paragraph_id, text in normalized:
            if _matches_normalized(text, key, settings.short_paragraph_slack):
                titles.claim(entry.title)
                chapters.append(Chapter(index=len(chapters), title=entry.title, start_paragraph_id=paragraph_id))
                break
    return chapters


def default_chapters(paragraph_count: int) -> list[Chapter]:
    if paragraph_count <= 0:
        return []
    return [Chapter(index=0, title=DEFAULT_CHAPTER_TITLE, start_paragraph_id=1)]


def finalize_chapters(chapters: Iterable[Chapter]) -> list[Chapter]:
    """Sort by start paragraph and assign consecutive indexes."""

    ordered = sorted(chapters, key=lambda chapter: chapter.start_paragraph_id)
    return [
        Chapter(index=position, title=chapter.title, start_paragraph_id=chapter.start_paragraph_id)
        for position, chapter in enumerate(ordered)
    ]
