"""Lookup tables built once per book from the table of contents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable
from urllib.parse import unquote

from lingoread.extraction.models import NavigationEntry
from lingoread.extraction.normalization import normalize_whitespace
from lingoread.extraction.paths import href_filename, normalize_href


@dataclass(frozen=True, slots=True)
class IndexedEntry:
    """A usable TOC entry with its original position retained for ordering."""

    order: int
    title: str
    file: str
    anchor: str | None


@dataclass(slots=True)
class NavigationIndex:
    """Title lookups keyed by entry id, by file + fragment and by whole file."""

    by_id: dict[str, str] = field(default_factory=dict)
    by_file_and_anchor: dict[str, dict[str, str]] = field(default_factory=dict)
    by_file_no_anchor: dict[str, str] = field(default_factory=dict)
    entries: list[IndexedEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def title_for_anchor(self, href: str, anchor: str) -> str | None:
        for key in _path_keys(href):
            anchors = self.by_file_and_anchor.get(key)
            if anchors and anchor in anchors:
                return anchors[anchor]
        return None

    def title_for_file(self, href: str) -> str | None:
        for key in _path_keys(href):
            title = self.by_file_no_anchor.get(key)
            if title:
                return title
        return None

    def title_for_id(self, entry_id: str) -> str | None:
        return self.by_id.get(entry_id)


def _path_keys(href: str) -> list[str]:
    keys: list[str] = []
    for key in (normalize_href(href), href_filename(href)):
        if key and key not in keys:
            keys.append(key)
    return keys


def split_href(href: str) -> tuple[str, str | None]:
    """Split ``file#fragment`` into an unquoted file path and optional fragment."""

    file_part, _sep, fragment = href.partition("#")
    anchor = unquote(fragment).strip() or None
    return unquote(file_part).strip(), anchor


def build_navigation_index(entries: Iterable[NavigationEntry]) -> NavigationIndex:
    """Index TOC entries in document order; the first entry claiming a key keeps it."""

    index = NavigationIndex()

    for order, entry in enumerate(entries):
        title = normalize_whitespace(entry.title or "")
        if not title:
            continue

        if entry.id:
            index.by_id.setdefault(entry.id, title)

        file_path = ""
        anchor: str | None = None
        if entry.href:
            file_path, anchor = split_href(entry.href)
            keys = _path_keys(file_path)
            if anchor:
                for key in keys:
                    index.by_file_and_anchor.setdefault(key, {}).setdefault(anchor, title)
            else:
                for key in keys:
                    index.by_file_no_anchor.setdefault(key, title)

        index.entries.append(
            IndexedEntry(order=order, title=title, file=normalize_href(file_path), anchor=anchor)
        )

    return index
