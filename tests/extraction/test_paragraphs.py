from __future__ import annotations

from lingoread.extraction.paragraphs import extract_paragraphs


def test_extracts_blocks_in_document_order_with_normalized_text() -> None:
    html = """
    <html><body>
      <h1 id="c1">Chapter   One</h1>
      <p>First   paragraph
         spans lines.</p>
      <ul><li>A list item</li></ul>
    </body></html>
    """

    content = extract_paragraphs(html)

    assert [p.text for p in content.paragraphs] == ["Chapter One", "First paragraph spans lines.", "A list item"]
    assert content.paragraphs[0].anchors == ("c1",)
    assert content.heading == "Chapter One"


def test_wrapper_div_is_not_counted_twice() -> None:
    html = "<html><body><div class='wrap'><p>Inside one.</p><p>Inside two.</p></div><div>Leaf div text</div></body></html>"

    content = extract_paragraphs(html)

    assert [p.text for p in content.paragraphs] == ["Inside one.", "Inside two.", "Leaf div text"]


def test_short_blocks_are_skipped() -> None:
    html = "<html><body><p>*</p><p> </p><p>OK</p></body></html>"

    content = extract_paragraphs(html)

    assert [p.text for p in content.paragraphs] == ["OK"]


def test_falls_back_to_whole_document_text() -> None:
    html = "<html><body><span>Only</span> <span>spans   here</span></body></html>"

    content = extract_paragraphs(html)

    assert [p.text for p in content.paragraphs] == ["Only spans here"]
    assert content.paragraphs[0].anchors == ()
    assert content.heading is None


def test_empty_document_yields_nothing() -> None:
    content = extract_paragraphs("<html><body>   </body></html>")

    assert content.paragraphs == ()


def test_anchors_are_exclusive_within_a_document() -> None:
    html = """
    <html><body>
      <div id="part"><p id="p1">One paragraph.</p><p>Two paragraph.</p></div>
      <a id="late"></a><p>Three paragraph.</p>
    </body></html>
    """

    content = extract_paragraphs(html)
    anchors = [anchor for paragraph in content.paragraphs for anchor in paragraph.anchors]

    assert anchors == ["p1", "part", "late"]
    assert len(anchors) == len(set(anchors))
