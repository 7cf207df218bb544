from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, Sequence
import zipfile

import pytest
from ebooklib import epub

# (file_name, body_markup) pairs in spine order
Documents = Sequence[tuple[str, str]]
# (href, title) pairs in TOC order
TocLinks = Sequence[tuple[str, str]]


def build_epub(path: Path, documents: Documents, toc: TocLinks = ()) -> Path:
    book = epub.EpubBook()
    book.set_identifier("lingoread-test-book")
    book.set_title("Test Book")
    book.set_language("en")

    items: list[epub.EpubHtml] = []
    for position, (file_name, body) in enumerate(documents, start=1):
        item = epub.EpubHtml(title=f"Document {position}", file_name=file_name, lang="en", uid=f"doc{position}")
        item.content = f"<html><head></head><body>{body}</body></html>"
        book.add_item(item)
        items.append(item)

    book.toc = [epub.Link(href, title, f"nav-{position}") for position, (href, title) in enumerate(toc, start=1)]
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = list(items)

    epub.write_epub(str(path), book)
    return path


@pytest.fixture
def epub_bytes(tmp_path: Path) -> Callable[..., bytes]:
    counter = {"value": 0}

    def _factory(documents: Documents, toc: TocLinks = ()) -> bytes:
        counter["value"] += 1
        target = tmp_path / f"book-{counter['value']}.epub"
        return build_epub(target, documents, toc).read_bytes()

    return _factory


@pytest.fixture
def epub_file(tmp_path: Path) -> Callable[..., Path]:
    def _factory(documents: Documents, toc: TocLinks = (), name: str = "book.epub") -> Path:
        return build_epub(tmp_path / name, documents, toc)

    return _factory


_CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="OEBPS/content.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>"""

_OPF_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="2.0" unique-identifier="bookid">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
    <dc:title>Raw Book</dc:title>
    <dc:identifier id="bookid">lingoread-raw-book</dc:identifier>
    <dc:language>en</dc:language>
  </metadata>
  <manifest>
    <item id="ncx" href="toc.ncx" media-type="application/x-dtbncx+xml"/>
{items}
  </manifest>
  <spine toc="ncx">
{itemrefs}
  </spine>
</package>"""

_NCX_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">
  <head><meta name="dtb:uid" content="lingoread-raw-book"/></head>
  <docTitle><text>Raw Book</text></docTitle>
  <navMap>{nav_points}</navMap>
</ncx>"""

# (file_name, media_type, body_markup) triples in spine order
RawDocuments = Sequence[tuple[str, str, str]]


def build_raw_epub(documents: RawDocuments, toc: TocLinks = ()) -> bytes:
    """Write an EPUB 2 archive by hand, for layouts ebooklib's writer never produces."""

    items = []
    itemrefs = []
    for position, (file_name, media_type, _body) in enumerate(documents, start=1):
        items.append(f'    <item id="doc{position}" href="{file_name}" media-type="{media_type}"/>')
        itemrefs.append(f'    <itemref idref="doc{position}"/>')

    nav_points = "".join(
        f'<navPoint id="nav-{position}" playOrder="{position}">'
        f"<navLabel><text>{title}</text></navLabel><content src=\"{href}\"/></navPoint>"
        for position, (href, title) in enumerate(toc, start=1)
    )

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("mimetype", "application/epub+zip", compress_type=zipfile.ZIP_STORED)
        archive.writestr("META-INF/container.xml", _CONTAINER_XML)
        archive.writestr("OEBPS/content.opf", _OPF_TEMPLATE.format(items="\n".join(items), itemrefs="\n".join(itemrefs)))
        archive.writestr("OEBPS/toc.ncx", _NCX_TEMPLATE.format(nav_points=nav_points))
        for file_name, _media_type, body in documents:
            archive.writestr(
                f"OEBPS/{file_name}",
                f'<html xmlns="http://www.w3.org/1999/xhtml"><head><title>Doc</title></head><body>{body}</body></html>',
            )
    return buffer.getvalue()


@pytest.fixture
def raw_epub_bytes() -> Callable[..., bytes]:
    return build_raw_epub
