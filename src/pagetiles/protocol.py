"""Messages exchanged between the client adapter and the render worker.

Commands travel client -> worker, responses worker -> client. Every message
is an immutable dataclass; the worker dispatches on the command type.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

import numpy as np

from .core.types import LinkInfo, OutlineItem, TextSelection
from .geometry import Rect, Vector

RequestId = int


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RenderRequest:
    """One tile to rasterize.

    ``bounds`` is in page pixels at ``scale`` (page units times scale), so
    its size is the size of the produced pixel buffer. ``x``/``y`` place the
    tile on the grid and ``generation`` is the viewport epoch it belongs to.
    """

    id: RequestId
    page_number: int
    bounds: Rect
    scale: float
    invert_colors: bool = False
    x: int = 0
    y: int = 0
    generation: int = 0


@dataclass(frozen=True)
class LoadDocument:
    path: Path
    request_id: Optional[RequestId] = None


@dataclass(frozen=True)
class SetPage:
    index: int
    request_id: Optional[RequestId] = None


@dataclass(frozen=True)
class RefreshDocument:
    request_id: Optional[RequestId] = None


@dataclass(frozen=True)
class RenderTile:
    request: RenderRequest

    @property
    def request_id(self) -> RequestId:
        return self.request.id


@dataclass(frozen=True)
class ExtractText:
    rect: Rect
    request_id: Optional[RequestId] = None


@dataclass(frozen=True)
class ExtractLinks:
    request_id: Optional[RequestId] = None


@dataclass(frozen=True)
class ExtractOutline:
    request_id: Optional[RequestId] = None


@dataclass(frozen=True)
class Shutdown:
    request_id: Optional[RequestId] = None


Command = Union[
    LoadDocument,
    SetPage,
    RefreshDocument,
    RenderTile,
    ExtractText,
    ExtractLinks,
    ExtractOutline,
    Shutdown,
]


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CachedTile:
    """A rendered tile. ``pixels`` is a read-only ``(H, W, 4)`` RGBA array."""

    id: RequestId
    pixels: np.ndarray = field(repr=False, compare=False)
    bounds: Rect
    x: int
    y: int
    generation: int

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])


@dataclass(frozen=True)
class Loaded:
    page_count: int


@dataclass(frozen=True)
class PageSet:
    index: int
    size: Vector


@dataclass(frozen=True)
class Refreshed:
    path: Path
    page_count: int


@dataclass(frozen=True)
class RenderedTile:
    tile: CachedTile


@dataclass(frozen=True)
class ExtractedText:
    selection: TextSelection


@dataclass(frozen=True)
class ExtractedLinks:
    links: List[LinkInfo]


@dataclass(frozen=True)
class ExtractedOutline:
    outline: List[OutlineItem]


@dataclass(frozen=True)
class Failed:
    """A command could not be completed. ``error`` is the exception class name."""

    request_id: Optional[RequestId]
    command: str
    reason: str
    error: str


Response = Union[
    Loaded,
    PageSet,
    Refreshed,
    RenderedTile,
    ExtractedText,
    ExtractedLinks,
    ExtractedOutline,
    Failed,
]
