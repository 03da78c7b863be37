"""Hyperlink extraction and classification."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

import fitz  # PyMuPDF

from ..geometry import Rect
from .types import LinkInfo, LinkType

logger = logging.getLogger(__name__)

PAGE_PREFIX = "#page="
NAMED_PREFIX = "#nameddest="


class LinkExtractor:
    """Collect the link annotations of a single loaded page."""

    def __init__(self, page: fitz.Page) -> None:
        self.page = page

    def extract_all_links(self) -> List[LinkInfo]:
        links: List[LinkInfo] = []
        for link in self.page.get_links():
            uri = link_uri(link)
            if uri is None:
                logger.debug("Skipping link without target on page %d: %s", self.page.number, link)
                continue
            link_type, page = categorize_link(uri)
            if link_type is LinkType.INTERNAL_PAGE and page is None:
                page = _resolved_page(link)
            links.append(
                LinkInfo(
                    bounds=Rect.from_fitz(link["from"]),
                    uri=uri,
                    link_type=link_type,
                    page=page,
                )
            )
        return links


def link_uri(link: Dict[str, object]) -> Optional[str]:
    """Express a PyMuPDF link dictionary as a URI string.

    Internal jumps become ``#page=N`` with ``N`` one-based, the convention
    of PDF open parameters; named destinations become ``#nameddest=NAME``.
    """

    kind = link.get("kind")
    if kind == fitz.LINK_URI:
        return str(link.get("uri") or "") or None
    if kind == fitz.LINK_GOTO:
        page = link.get("page", -1)
        if isinstance(page, int) and page >= 0:
            return f"{PAGE_PREFIX}{page + 1}"
        return None
    if kind == fitz.LINK_NAMED:
        name = link.get("nameddest") or link.get("name")
        return f"{NAMED_PREFIX}{name}" if name else None
    if kind in (fitz.LINK_GOTOR, fitz.LINK_LAUNCH):
        target = link.get("file") or link.get("uri")
        return f"file://{target}" if target else None
    return str(link.get("uri")) if link.get("uri") else None


def categorize_link(uri: str) -> Tuple[LinkType, Optional[int]]:
    """Classify ``uri`` and return ``(type, page)``.

    The checks run in a fixed order: web and mail schemes first, then the
    page-number heuristics. ``page`` is only set for numeric internal
    targets.
    """

    if uri.startswith(("http://", "https://")):
        return LinkType.EXTERNAL_URL, None
    if uri.startswith("mailto:"):
        return LinkType.EMAIL, None
    if uri.startswith(PAGE_PREFIX):
        value = uri[len(PAGE_PREFIX):]
        if value.isascii() and value.isdigit():
            return LinkType.INTERNAL_PAGE, int(value)
        return LinkType.OTHER, None
    if uri.startswith(NAMED_PREFIX):
        return LinkType.INTERNAL_PAGE, None
    if uri and uri.isascii() and uri.isdigit():
        return LinkType.INTERNAL_PAGE, int(uri)
    return LinkType.OTHER, None


def _resolved_page(link: Dict[str, object]) -> Optional[int]:
    page = link.get("page")
    if isinstance(page, int) and page >= 0:
        return page + 1
    return None
