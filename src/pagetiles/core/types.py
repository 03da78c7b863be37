from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from ..geometry import Rect


class LinkType(str, Enum):
    EXTERNAL_URL = "external_url"
    INTERNAL_PAGE = "internal_page"
    EMAIL = "email"
    OTHER = "other"


@dataclass(frozen=True)
class LinkInfo:
    bounds: Rect  # document space
    uri: str
    link_type: LinkType
    page: Optional[int] = None  # only for INTERNAL_PAGE with a numeric target

    def to_dict(self) -> Dict[str, object]:
        return {
            "bounds": [float(v) for v in self.bounds.to_tuple()],
            "uri": self.uri,
            "type": self.link_type.value,
            "page": self.page,
        }


@dataclass(frozen=True)
class TextSelection:
    text: str
    bounds: Rect  # the query rectangle
    line_bounds: Optional[Rect] = None  # union of the intersected lines

    def to_dict(self) -> Dict[str, object]:
        return {
            "text": self.text,
            "bounds": [float(v) for v in self.bounds.to_tuple()],
            "line_bounds": (
                [float(v) for v in self.line_bounds.to_tuple()] if self.line_bounds else None
            ),
        }


@dataclass(frozen=True)
class OutlineItem:
    title: str
    page: Optional[int]
    level: int
    children: List["OutlineItem"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "title": self.title,
            "page": self.page,
            "level": self.level,
            "children": [child.to_dict() for child in self.children],
        }
