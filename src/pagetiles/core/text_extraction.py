"""Rectangle based text selection using PyMuPDF's raw text dictionary."""
from __future__ import annotations

from typing import List, Optional

import fitz  # PyMuPDF

from ..geometry import Rect
from .types import TextSelection


class TextExtractor:
    """Extract text from a single loaded page."""

    def __init__(self, page: fitz.Page) -> None:
        self.page = page

    def extract_text_in_rect(self, selection: Rect) -> TextSelection:
        """Return the characters whose glyph boxes intersect ``selection``.

        Only lines whose bounding box intersects the selection are visited.
        Each visited line contributes its intersecting characters followed by
        a newline and the final string is stripped. Intersection is strict so
        a selection that merely touches a glyph does not pick it up.
        """

        raw = self.page.get_text("rawdict")
        parts: List[str] = []
        line_bounds: Optional[Rect] = None

        for block in raw.get("blocks", []):
            if block.get("type", 0) != 0:
                continue
            for line in block.get("lines", []):
                bbox = Rect.from_fitz(line["bbox"])
                if not selection.intersects(bbox):
                    continue
                for span in line.get("spans", []):
                    for char in span.get("chars", []):
                        if selection.intersects(Rect.from_fitz(char["bbox"])):
                            parts.append(char["c"])
                parts.append("\n")
                line_bounds = bbox if line_bounds is None else line_bounds.union(bbox)

        return TextSelection(text="".join(parts).strip(), bounds=selection, line_bounds=line_bounds)

    def extract_all_text(self) -> str:
        return self.page.get_text("text")
