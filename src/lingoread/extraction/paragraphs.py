"""Paragraph extraction for one EPUB content document."""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from lingoread.extraction.anchors import collect_anchors
from lingoread.extraction.headings import extract_heading
from lingoread.extraction.models import DocumentContent, ExtractedParagraph
from lingoread.extraction.normalization import normalize_whitespace

BLOCK_SELECTOR = "p, div, li, h1, h2, h3, h4, h5, h6"
_NESTED_BLOCKS = ["p", "div", "li"]
MIN_PARAGRAPH_LENGTH = 2


def parse_html(html: str | bytes) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def _is_wrapper_div(element: Tag) -> bool:
    return element.name == "div" and element.find(_NESTED_BLOCKS) is not None


def _document_text(soup: BeautifulSoup) -> str:
    body = soup.body or soup
    return normalize_whitespace(body.get_text())


def extract_paragraphs(html: str | bytes) -> DocumentContent:
    """Split document markup into normalized text blocks with their anchors.

    ``div`` elements are only taken as leaves: a ``div`` wrapping other block
    elements is skipped so its text is not counted twice. When no block
    element qualifies, the whole document text becomes a single paragraph.
    """

    soup = parse_html(html)
    heading = extract_heading(soup)

    seen_ids: set[str] = set()
    paragraphs: list[ExtractedParagraph] = []

    for element in soup.select(BLOCK_SELECTOR):
        text = normalize_whitespace(element.get_text())
        if len(text) < MIN_PARAGRAPH_LENGTH:
            continue
        if _is_wrapper_div(element):
            continue
        anchors = collect_anchors(element, seen_ids)
        paragraphs.append(ExtractedParagraph(text=text, anchors=tuple(anchors)))

    if not paragraphs:
        fallback = _document_text(soup)
        if len(fallback) >= MIN_PARAGRAPH_LENGTH:
            paragraphs.append(ExtractedParagraph(text=fallback))

    return DocumentContent(paragraphs=tuple(paragraphs), heading=heading)
