import fitz
import pytest

from pagetiles.core.link_extraction import LinkExtractor, categorize_link, link_uri
from pagetiles.core.types import LinkType


@pytest.mark.parametrize(
    "uri, expected",
    [
        ("https://example.com", (LinkType.EXTERNAL_URL, None)),
        ("http://example.com/a?b=1", (LinkType.EXTERNAL_URL, None)),
        ("mailto:someone@example.com", (LinkType.EMAIL, None)),
        ("#page=5", (LinkType.INTERNAL_PAGE, 5)),
        ("#page=abc", (LinkType.OTHER, None)),
        ("#nameddest=intro", (LinkType.INTERNAL_PAGE, None)),
        ("42", (LinkType.INTERNAL_PAGE, 42)),
        ("file://x", (LinkType.OTHER, None)),
        ("ftp://files.example.com", (LinkType.OTHER, None)),
        ("", (LinkType.OTHER, None)),
    ],
)
def test_categorize_link(uri, expected):
    assert categorize_link(uri) == expected


def test_link_uri_for_goto_is_one_based():
    assert link_uri({"kind": fitz.LINK_GOTO, "page": 0}) == "#page=1"
    assert link_uri({"kind": fitz.LINK_GOTO, "page": -1}) is None
    assert link_uri({"kind": fitz.LINK_NAMED, "nameddest": "intro"}) == "#nameddest=intro"
    assert link_uri({"kind": fitz.LINK_URI, "uri": "https://a.com"}) == "https://a.com"


def test_extract_all_links_from_page(sample_pdf):
    doc = fitz.open(str(sample_pdf))
    try:
        links = LinkExtractor(doc[0]).extract_all_links()
    finally:
        doc.close()

    by_type = {link.link_type: link for link in links}
    assert set(by_type) == {LinkType.EXTERNAL_URL, LinkType.EMAIL, LinkType.INTERNAL_PAGE}
    assert by_type[LinkType.EXTERNAL_URL].uri == "https://a.com"
    assert by_type[LinkType.EMAIL].uri == "mailto:x@y.com"
    internal = by_type[LinkType.INTERNAL_PAGE]
    assert internal.page == 2
    x0, y0, x1, y1 = by_type[LinkType.EXTERNAL_URL].bounds.to_tuple()
    assert (round(x0), round(y0), round(x1), round(y1)) == (10, 160, 60, 170)


def test_page_without_links(sample_pdf):
    doc = fitz.open(str(sample_pdf))
    try:
        assert LinkExtractor(doc[1]).extract_all_links() == []
    finally:
        doc.close()
