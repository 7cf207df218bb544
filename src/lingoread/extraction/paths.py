"""Href canonicalization so spine paths and TOC targets can be compared."""

from __future__ import annotations

import re

_LEADING_RELATIVE_RE = re.compile(r"^(?:\./|\.\./)+")
_CONTENT_ROOT_RE = re.compile(r"^(?:oebps|ops)/", re.IGNORECASE)


def normalize_href(href: str | None) -> str:
    """Return a lowercase, root-relative form of an EPUB path.

    Leading ``./`` and ``../`` segments are dropped, a leading ``OEBPS/`` or
    ``OPS/`` directory is removed and backslashes become forward slashes.
    """

    if not href:
        return ""
    path = href.replace("\\", "/")
    path = _LEADING_RELATIVE_RE.sub("", path)
    path = _CONTENT_ROOT_RE.sub("", path)
    return path.lower()


def href_filename(href: str | None) -> str:
    """Last path segment of the normalized href."""

    normalized = normalize_href(href)
    if not normalized:
        return ""
    return normalized.rsplit("/", 1)[-1]
