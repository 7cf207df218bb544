"""Heading lookup for a single content document."""

from __future__ import annotations

from bs4 import BeautifulSoup

from lingoread.extraction.normalization import normalize_title, normalize_whitespace

HEADING_SELECTOR = "h1, h2, h3, h4, header h1, header h2, .chapter-title, .title"

# Front-matter headings that never name a chapter. Compared after
# diacritic stripping and casefolding, so "Índice" and "indice" both hit.
IGNORED_HEADINGS: frozenset[str] = frozenset(
    {
        "table of contents",
        "contents",
        "toc",
        "copyright",
        "copyright page",
        "cover",
        "title page",
        "half title",
        "dedication",
        "acknowledgments",
        "acknowledgements",
        "also by",
        "about the author",
        "indice",
        "indice general",
        "contenido",
        "contenidos",
        "tabla de contenido",
        "tabla de contenidos",
        "sumario",
        "derechos de autor",
        "creditos",
        "portada",
        "portadilla",
        "pagina de titulo",
        "pagina de creditos",
        "dedicatoria",
        "agradecimientos",
        "sobre el autor",
        "acerca del autor",
    }
)


def is_ignored_heading(text: str) -> bool:
    key = normalize_title(text).rstrip(" .:;")
    return key in IGNORED_HEADINGS


def extract_heading(soup: BeautifulSoup) -> str | None:
    """Return the first meaningful heading in document order, if any."""

    for element in soup.select(HEADING_SELECTOR):
        text = normalize_whitespace(element.get_text())
        if not text:
            continue
        if is_ignored_heading(text):
            continue
        return text
    return None
