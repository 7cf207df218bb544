from __future__ import annotations

import pytest

from lingoread.content.chunking import build_chunks, normalize_limit
from lingoread.extraction.models import Paragraph


def _paragraphs(count: int) -> list[Paragraph]:
    return [Paragraph(id=number, text=f"Paragraph {number}") for number in range(1, count + 1)]


def test_chunks_group_fixed_size_runs() -> None:
    chunks = build_chunks(_paragraphs(120))

    assert [chunk.chunk_index for chunk in chunks] == [0, 1, 2]
    assert [len(chunk.paragraphs) for chunk in chunks] == [50, 50, 20]
    assert chunks[1].paragraphs[0].id == 51


def test_custom_chunk_size_and_serialization() -> None:
    chunks = build_chunks(_paragraphs(3), chunk_size=2)

    assert chunks[1].to_dict() == {"chunk_index": 1, "paragraphs": [{"id": 3, "text": "Paragraph 3"}]}


def test_no_paragraphs_means_no_chunks() -> None:
    assert build_chunks([]) == []


def test_invalid_chunk_size() -> None:
    with pytest.raises(ValueError, match="chunk_size"):
        build_chunks(_paragraphs(1), chunk_size=0)


@pytest.mark.parametrize(
    ("limit", "expected"),
    [
        (None, None),
        (0, None),
        (-5, None),
        (0.5, 1),
        (2.5, 3),
        (True, None),
        (25, 25),
        (40.9, 41),
        (5000, 1000),
    ],
)
def test_normalize_limit(limit: object, expected: int | None) -> None:
    assert normalize_limit(limit) == expected


def test_normalize_limit_respects_custom_cap() -> None:
    assert normalize_limit(300, cap=100) == 100
