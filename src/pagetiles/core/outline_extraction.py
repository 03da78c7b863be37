"""Table of contents extraction.

PyMuPDF exposes the outline as a linked tree of :class:`fitz.Outline`
nodes (``down`` for the first child, ``next`` for the following sibling).
The tree is converted depth first into immutable :class:`OutlineItem`
objects so nothing outside the worker keeps a reference to the document.
"""
from __future__ import annotations

from typing import Iterator, List, Optional

import fitz  # PyMuPDF

from .types import OutlineItem


class OutlineExtractor:
    def __init__(self, document: fitz.Document) -> None:
        self.document = document

    def extract_outline(self) -> List[OutlineItem]:
        # Without bookmarks the outline wraps a null node that must not be walked.
        if not self.document.get_toc():
            return []
        root = self.document.outline
        if root is None:
            return []
        return [convert_outline(node, 0) for node in _siblings(root)]


def convert_outline(node: fitz.Outline, level: int) -> OutlineItem:
    """Convert ``node`` and, recursively, its children. Roots are level 0."""

    children = [convert_outline(child, level + 1) for child in _siblings(node.down)]
    return OutlineItem(
        title=node.title or "",
        page=_target_page(node),
        level=level,
        children=children,
    )


def _siblings(node: Optional[fitz.Outline]) -> Iterator[fitz.Outline]:
    while node is not None:
        yield node
        node = node.next


def _target_page(node: fitz.Outline) -> Optional[int]:
    if node.is_external:
        return None
    page = node.page
    if page is None or page < 0:
        return None
    return int(page)
