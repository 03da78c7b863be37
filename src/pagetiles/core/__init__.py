"""Read-only content extraction over an opened document."""

from .link_extraction import LinkExtractor, categorize_link
from .outline_extraction import OutlineExtractor
from .text_extraction import TextExtractor
from .types import LinkInfo, LinkType, OutlineItem, TextSelection

__all__ = [
    "LinkExtractor",
    "categorize_link",
    "OutlineExtractor",
    "TextExtractor",
    "LinkInfo",
    "LinkType",
    "OutlineItem",
    "TextSelection",
]
