"""Viewport, zoom and tile-grid arithmetic.

Three coordinate systems meet here:

* document space: page units as reported by the engine (points for PDF),
* page pixels: document space multiplied by the zoom ``scale``,
* screen space: pixels of the on-screen viewport rectangle.

The page is centred in the viewport and ``translation`` pans it, expressed
in document units.
"""
from __future__ import annotations

import math
from typing import Iterable, List

from .geometry import Rect, Vector
from .protocol import RenderRequest


def centering_offset(screen: Rect, page_size: Vector, scale: float) -> Vector:
    """Offset of the page's top-left corner inside ``screen`` when unpanned."""

    return (screen.size - page_size.scaled(scale)).scaled(0.5)


def visible_bbox(screen: Rect, translation: Vector, scale: float, page_size: Vector) -> Rect:
    """Return the page-pixel rectangle visible through ``screen``.

    Only the viewport's size matters; where the viewport sits inside the
    window does not change what part of the page it shows.
    """

    out = Rect.from_pos_size(Vector.zero(), screen.size)
    out = out.translated(translation.scaled(scale))
    out = out.translated(-centering_offset(screen, page_size, scale))
    return out.rounded()


def screen_to_document(
    point: Vector, screen: Rect, translation: Vector, scale: float, page_size: Vector
) -> Vector:
    """Map a screen position to document space (inverse of :func:`visible_bbox`)."""

    local = point - screen.x0 - centering_offset(screen, page_size, scale)
    return local.scaled(1.0 / scale) + translation


def document_to_screen(
    point: Vector, screen: Rect, translation: Vector, scale: float, page_size: Vector
) -> Vector:
    local = (point - translation).scaled(scale)
    return local + centering_offset(screen, page_size, scale) + screen.x0


def selection_rect(
    start: Vector, end: Vector, screen: Rect, translation: Vector, scale: float, page_size: Vector
) -> Rect:
    """Normalized document-space rectangle spanned by two screen positions."""

    a = screen_to_document(start, screen, translation, scale, page_size)
    b = screen_to_document(end, screen, translation, scale, page_size)
    return Rect.from_coords(min(a.x, b.x), min(a.y, b.y), max(a.x, b.x), max(a.y, b.y))


def zoom_fit_ratio(screen: Rect, page_size: Vector) -> float:
    """Largest scale at which the whole page fits inside ``screen``."""

    if page_size.x <= 0 or page_size.y <= 0:
        return 1.0
    return min(screen.width / page_size.x, screen.height / page_size.y)


def tile_destination(width: int, height: int, x: int, y: int) -> Rect:
    """Destination of a ``width`` x ``height`` tile at grid cell ``(x, y)``."""

    return Rect.from_coords(width * x, height * y, width * (x + 1), height * (y + 1))


def tile_grid(visible: Rect, page_size: Vector, scale: float, tile_size: int) -> Iterable[tuple]:
    """Yield ``(x, y)`` grid cells that overlap both ``visible`` and the page."""

    if tile_size <= 0:
        raise ValueError("tile_size must be positive")
    page_px = Rect.from_pos_size(
        Vector.zero(),
        Vector(math.ceil(page_size.x * scale), math.ceil(page_size.y * scale)),
    )
    if visible.is_empty or page_px.is_empty or not visible.intersects(page_px):
        return
    x_first = max(0, int(visible.x0.x) // tile_size)
    y_first = max(0, int(visible.x0.y) // tile_size)
    x_last = (min(visible.x1.x, page_px.x1.x) - 1) // tile_size
    y_last = (min(visible.x1.y, page_px.x1.y) - 1) // tile_size
    for y in range(y_first, int(y_last) + 1):
        for x in range(x_first, int(x_last) + 1):
            yield x, y


def plan_tiles(
    *,
    visible: Rect,
    page_size: Vector,
    scale: float,
    tile_size: int,
    page_number: int,
    generation: int,
    invert_colors: bool = False,
    first_id: int = 0,
) -> List[RenderRequest]:
    """Build the render requests covering ``visible`` for one viewport epoch.

    Every tile is a full ``tile_size`` square, including those hanging over
    the page edge, so the destination of each tile is purely a function of
    its grid cell.
    """

    requests: List[RenderRequest] = []
    for offset, (x, y) in enumerate(tile_grid(visible, page_size, scale, tile_size)):
        requests.append(
            RenderRequest(
                id=first_id + offset,
                page_number=page_number,
                bounds=tile_destination(tile_size, tile_size, x, y),
                scale=scale,
                invert_colors=invert_colors,
                x=x,
                y=y,
                generation=generation,
            )
        )
    return requests
