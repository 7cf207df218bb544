"""Fragment-id collection for paragraph elements.

Chapter targets show up in several authoring idioms: an ``id`` on the
paragraph itself, an ``<a name>`` nested inside it, an ``id`` on a wrapping
element, or an empty ``<a id>`` placed right before the paragraph. All four are
collected so navigation lookups can hit any of them.
"""

from __future__ import annotations

from bs4 import NavigableString, Tag
from bs4.element import PreformattedString

_ANCHOR_ATTRIBUTES = ("id", "name")


def _attr(element: Tag, name: str) -> str | None:
    value = element.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    if not value:
        return None
    value = value.strip()
    return value or None


def _anchor_ids(element: Tag) -> list[str]:
    ids: list[str] = []
    for name in _ANCHOR_ATTRIBUTES:
        value = _attr(element, name)
        if value:
            ids.append(value)
    return ids


def _is_blank(node: object) -> bool:
    if isinstance(node, Tag):
        return not node.get_text().strip()
    if isinstance(node, PreformattedString):
        # comments, processing instructions and doctypes carry no rendered text
        return True
    if isinstance(node, NavigableString):
        return not str(node).strip()
    return True


def collect_anchors(element: Tag, seen_ids: set[str]) -> list[str]:
    """Return anchors for ``element`` that no earlier element has claimed.

    ``seen_ids`` is shared across one content document and updated in place.
    """

    anchors: list[str] = []

    def claim(value: str | None) -> None:
        if value and value not in seen_ids:
            seen_ids.add(value)
            anchors.append(value)

    claim(_attr(element, "id"))

    for descendant in element.find_all(True):
        for value in _anchor_ids(descendant):
            claim(value)

    parent = element.parent
    if isinstance(parent, Tag) and parent.name != "[document]":
        claim(_attr(parent, "id"))

    for sibling in element.previous_siblings:
        if not _is_blank(sibling):
            break
        if not isinstance(sibling, Tag):
            continue
        for value in _anchor_ids(sibling):
            claim(value)
        for descendant in sibling.find_all(True):
            for value in _anchor_ids(descendant):
                claim(value)

    return anchors
