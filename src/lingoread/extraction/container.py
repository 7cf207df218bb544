"""EPUB container access through ebooklib: spine documents and flattened TOC."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
import tempfile
from typing import Iterable

import ebooklib
from ebooklib import epub

from lingoread.extraction.errors import ContainerError
from lingoread.extraction.models import ContentDocument, NavigationEntry
from lingoread.extraction.navigation import split_href
from lingoread.extraction.paths import href_filename, normalize_href

logger = logging.getLogger(__name__)

_EPUB_MAGIC = b"PK\x03\x04"
_READ_OPTIONS = {"ignore_ncx": False}
# Manifest items ebooklib reads as plain EpubItem (ITEM_UNKNOWN) when declared text/html.
DOCUMENT_MEDIA_TYPES = frozenset({"application/xhtml+xml", "text/html"})


@dataclass(slots=True)
class EpubContainer:
    """Reading-order content documents and the table of contents of one book."""

    documents: list[ContentDocument] = field(default_factory=list)
    navigation: list[NavigationEntry] = field(default_factory=list)


def looks_like_epub(raw: bytes) -> bool:
    return raw.startswith(_EPUB_MAGIC)


def _read_book(raw: bytes) -> epub.EpubBook:
    # EbookLib 0.18 calls os.path.isdir on its input, so a file object is rejected there.
    handle, path = tempfile.mkstemp(suffix=".epub")
    try:
        with os.fdopen(handle, "wb") as stream:
            stream.write(raw)
        return epub.read_epub(path, options=_READ_OPTIONS)
    finally:
        os.unlink(path)


def _spine_ids(book: epub.EpubBook) -> list[str]:
    ids: list[str] = []
    for spine_entry in book.spine:
        item_id = spine_entry[0] if isinstance(spine_entry, tuple) else spine_entry
        if item_id:
            ids.append(item_id)
    return ids


def is_content_document(item: epub.EpubItem) -> bool:
    return item.get_type() == ebooklib.ITEM_DOCUMENT or item.media_type in DOCUMENT_MEDIA_TYPES


def _documents(book: epub.EpubBook) -> list[ContentDocument]:
    documents: list[ContentDocument] = []
    for item_id in _spine_ids(book):
        item = book.get_item_with_id(item_id)
        if item is None:
            logger.warning("Spine references missing manifest item %r", item_id)
            continue
        if not is_content_document(item):
            logger.warning("Skipping spine item %s with media type %r", item.get_name(), item.media_type)
            continue
        documents.append(ContentDocument(id=item.get_id(), href=item.get_name(), loader=item.get_content))
    return documents


def _manifest_ids(book: epub.EpubBook) -> dict[str, str]:
    ids: dict[str, str] = {}
    for item in book.get_items():
        if not is_content_document(item):
            continue
        name = item.get_name()
        for key in (normalize_href(name), href_filename(name)):
            if key:
                ids.setdefault(key, item.get_id())
    return ids


def _walk_toc(nodes: Iterable[object]) -> Iterable[tuple[str, str | None]]:
    for node in nodes:
        if isinstance(node, epub.Link):
            yield node.title or "", node.href
        elif isinstance(node, epub.Section):
            yield node.title or "", node.href or None
            subitems = getattr(node, "subitems", None)
            if subitems:
                yield from _walk_toc(subitems)
        elif isinstance(node, epub.EpubHtml):
            yield node.title or "", node.get_name()
        elif isinstance(node, (list, tuple)):
            yield from _walk_toc(node)


def _toc_nodes(book: epub.EpubBook) -> list[object]:
    # An NCX with an empty navMap leaves a single blank Link instead of a list.
    toc = book.toc or []
    if isinstance(toc, (list, tuple)):
        return list(toc)
    return [toc]


def _navigation(book: epub.EpubBook) -> list[NavigationEntry]:
    """Flatten the TOC in document order.

    Each entry's id is the manifest id of the document its href points into,
    so a spine document can be matched to TOC entries that target it.
    """

    manifest_ids = _manifest_ids(book)
    entries: list[NavigationEntry] = []
    for title, href in _walk_toc(_toc_nodes(book)):
        if not title and not href:
            continue
        entry_id: str | None = None
        if href:
            file_path, _anchor = split_href(href)
            entry_id = manifest_ids.get(normalize_href(file_path)) or manifest_ids.get(href_filename(file_path))
        entries.append(NavigationEntry(title=title, id=entry_id, href=href or None))
    return entries


def open_container(raw: bytes, *, source: str | None = None) -> EpubContainer:
    """Parse EPUB bytes into spine documents and navigation entries.

    Raises ``ContainerError`` when the archive cannot be read at all.
    """

    if not raw:
        raise ContainerError("EPUB payload is empty", source)
    if not looks_like_epub(raw):
        raise ContainerError("Payload is not a zip-based EPUB container", source)

    try:
        book = _read_book(raw)
    except Exception as exc:
        raise ContainerError(f"Failed to open EPUB container: {exc}", source) from exc

    container = EpubContainer(documents=_documents(book), navigation=_navigation(book))
    logger.debug(
        "Opened EPUB %s: %d spine documents, %d TOC entries",
        source or "<bytes>",
        len(container.documents),
        len(container.navigation),
    )
    return container
