"""Streaming and buffered EPUB extraction entrypoints."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import inspect
import logging

from lingoread.extraction.container import open_container
from lingoread.extraction.models import (
    Chapter,
    ContentDocument,
    DocumentContent,
    ExtractOptions,
    ExtractionResult,
    Paragraph,
    ParagraphSink,
    StreamResult,
)
from lingoread.extraction.navigation import NavigationIndex, build_navigation_index
from lingoread.extraction.paragraphs import extract_paragraphs
from lingoread.extraction.resolver import (
    ResolverSettings,
    TitleRegistry,
    default_chapters,
    finalize_chapters,
    needs_text_matching,
    resolve_by_text,
    resolve_document,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ExtractionContext:
    """Mutable state for one extraction call; never shared between books."""

    index: NavigationIndex
    settings: ResolverSettings
    titles: TitleRegistry = field(default_factory=TitleRegistry)
    chapters: list[Chapter] = field(default_factory=list)
    texts: list[tuple[int, str]] = field(default_factory=list)
    paragraph_count: int = 0

    @property
    def keeps_texts(self) -> bool:
        # paragraph text is only needed when the text-matching fallback can run
        return len(self.index) > self.settings.text_match_min_entries


def _read_document(document: ContentDocument) -> DocumentContent | None:
    html = document.load()
    if not html:
        return None
    return extract_paragraphs(html)


async def _load_document(document: ContentDocument) -> DocumentContent | None:
    try:
        return await asyncio.to_thread(_read_document, document)
    except Exception:
        logger.warning("Skipping unreadable content document %s (%s)", document.href, document.id, exc_info=True)
        return None


async def _emit(sink: ParagraphSink, paragraph: Paragraph) -> None:
    result = sink(paragraph)
    if inspect.isawaitable(result):
        await result


def _finish(context: ExtractionContext, *, truncated: bool) -> StreamResult:
    chapters = context.chapters

    if not truncated and needs_text_matching(len(chapters), context.index, context.settings):
        logger.info(
            "Only %d of %d TOC entries resolved; matching titles against paragraph text",
            len(chapters),
            len(context.index),
        )
        chapters = resolve_by_text(context.texts, context.index, context.settings)

    if not chapters:
        chapters = default_chapters(context.paragraph_count)
        if chapters:
            logger.info("No chapters detected; using a single default chapter")

    return StreamResult(
        paragraph_count=context.paragraph_count,
        chapters=finalize_chapters(chapters),
        truncated=truncated,
    )


async def stream_extract(
    raw: bytes,
    sink: ParagraphSink,
    options: ExtractOptions | None = None,
    *,
    settings: ResolverSettings | None = None,
    source: str | None = None,
) -> StreamResult:
    """Extract paragraphs in reading order, handing each one to ``sink``.

    ``sink`` may be a plain callable or a coroutine function; it is awaited
    before the next paragraph is produced. When ``options.max_paragraphs`` is
    reached the call returns right away with the chapters found so far.
    """

    options = options or ExtractOptions()
    settings = settings or ResolverSettings()
    max_paragraphs = options.max_paragraphs

    container = await asyncio.to_thread(open_container, raw, source=source)
    context = ExtractionContext(index=build_navigation_index(container.navigation), settings=settings)

    for document in container.documents:
        content = await _load_document(document)
        if content is None or not content.paragraphs:
            continue

        candidates = {
            candidate.offset: candidate
            for candidate in resolve_document(document, content, context.index, context.titles)
        }

        for offset, extracted in enumerate(content.paragraphs):
            context.paragraph_count += 1
            paragraph_id = context.paragraph_count

            candidate = candidates.get(offset)
            if candidate is not None:
                logger.debug(
                    "Chapter %r starts at paragraph %d (%s, %s)",
                    candidate.title,
                    paragraph_id,
                    candidate.tier,
                    document.href,
                )
                context.chapters.append(
                    Chapter(index=len(context.chapters), title=candidate.title, start_paragraph_id=paragraph_id)
                )
            if context.keeps_texts:
                context.texts.append((paragraph_id, extracted.text))

            await _emit(sink, Paragraph(id=paragraph_id, text=extracted.text))

            if max_paragraphs is not None and paragraph_id >= max_paragraphs:
                return _finish(context, truncated=True)

    return _finish(context, truncated=False)


async def extract(
    raw: bytes,
    options: ExtractOptions | None = None,
    *,
    settings: ResolverSettings | None = None,
    source: str | None = None,
) -> ExtractionResult:
    """Buffered variant of :func:`stream_extract`."""

    paragraphs: list[Paragraph] = []
    summary = await stream_extract(raw, paragraphs.append, options, settings=settings, source=source)
    return ExtractionResult(paragraphs=paragraphs, chapters=summary.chapters, truncated=summary.truncated)
