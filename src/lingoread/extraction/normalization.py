"""Text normalization helpers shared by extraction stages."""

from __future__ import annotations

import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def normalize_title(text: str) -> str:
    """Comparison key for titles: diacritic-free, whitespace-collapsed, casefolded."""

    return normalize_whitespace(strip_diacritics(text)).casefold()
