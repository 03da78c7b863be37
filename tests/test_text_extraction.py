import fitz

from pagetiles.core.text_extraction import TextExtractor
from pagetiles.geometry import Rect


def _first_page(path):
    doc = fitz.open(str(path))
    return doc, doc[0]


def test_selection_around_line_returns_its_text(sample_pdf):
    doc, page = _first_page(sample_pdf)
    try:
        selection = TextExtractor(page).extract_text_in_rect(Rect.from_coords(10, 30, 190, 70))
    finally:
        doc.close()
    assert selection.text == "Hello world"
    assert selection.bounds.to_tuple() == (10, 30, 190, 70)
    assert selection.line_bounds is not None


def test_empty_region_returns_empty_text(sample_pdf):
    doc, page = _first_page(sample_pdf)
    try:
        selection = TextExtractor(page).extract_text_in_rect(Rect.from_coords(150, 80, 190, 95))
    finally:
        doc.close()
    assert selection.text == ""
    assert selection.line_bounds is None


def test_partial_selection_only_takes_intersecting_glyphs(sample_pdf):
    doc, page = _first_page(sample_pdf)
    try:
        # "Hello world" starts at x=20; a narrow slice catches only the first glyphs
        selection = TextExtractor(page).extract_text_in_rect(Rect.from_coords(0, 30, 28, 70))
    finally:
        doc.close()
    assert selection.text
    assert "Hello world".startswith(selection.text)
    assert len(selection.text) < len("Hello world")


def test_extract_all_text(sample_pdf):
    doc, page = _first_page(sample_pdf)
    try:
        text = TextExtractor(page).extract_all_text()
    finally:
        doc.close()
    assert "Hello world" in text
