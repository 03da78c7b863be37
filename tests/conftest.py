from pathlib import Path

import pytest

import fitz

PAGE_W = 200
PAGE_H = 200
HELLO_POS = (20, 50)


def make_pdf(path: Path, pages: int = 2, *, toc=None, links=True) -> Path:
    """Write a small document used across the worker and extractor tests.

    Page 0 holds a line of text, a filled black square and three links;
    every other page holds its own page label.
    """

    doc = fitz.open()
    for index in range(pages):
        page = doc.new_page(width=PAGE_W, height=PAGE_H)
        if index == 0:
            page.insert_text(HELLO_POS, "Hello world", fontsize=12)
            page.draw_rect(fitz.Rect(0, 100, 50, 150), color=(0, 0, 0), fill=(0, 0, 0))
        else:
            page.insert_text(HELLO_POS, f"Page {index + 1}", fontsize=12)
    if links:
        first = doc[0]
        first.insert_link({"kind": fitz.LINK_URI, "from": fitz.Rect(10, 160, 60, 170), "uri": "https://a.com"})
        first.insert_link({"kind": fitz.LINK_URI, "from": fitz.Rect(70, 160, 120, 170), "uri": "mailto:x@y.com"})
        if pages > 1:
            first.insert_link(
                {"kind": fitz.LINK_GOTO, "from": fitz.Rect(130, 160, 180, 170), "page": 1, "to": fitz.Point(0, 0)}
            )
    if toc:
        doc.set_toc(toc)
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def sample_pdf(tmp_path):
    return make_pdf(tmp_path / "sample.pdf")
