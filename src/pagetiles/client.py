"""Client side of the worker protocol.

:class:`TileClient` turns viewer actions into commands, stamps tile
requests with a non-decreasing generation and folds responses back into
plain state that a front end can draw from. It never blocks on the worker.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from .core.types import LinkInfo, LinkType, OutlineItem, TextSelection
from .geometry import Rect, Vector
from .presets import LIGHT_THEME, RenderParams, Theme
from .protocol import (
    CachedTile,
    Command,
    ExtractedLinks,
    ExtractedOutline,
    ExtractedText,
    ExtractLinks,
    ExtractOutline,
    ExtractText,
    Failed,
    Loaded,
    LoadDocument,
    PageSet,
    Refreshed,
    RefreshDocument,
    RenderedTile,
    RenderRequest,
    RenderTile,
    Response,
    SetPage,
)
from .viewport import plan_tiles, screen_to_document, selection_rect, visible_bbox, zoom_fit_ratio
from .worker import RenderWorker

logger = logging.getLogger(__name__)

GridKey = Tuple[int, int]


class TileCache:
    """Tiles keyed by grid cell; older generations never overwrite newer ones."""

    def __init__(self) -> None:
        self._tiles: Dict[GridKey, CachedTile] = {}
        self.generation = 0

    def __len__(self) -> int:
        return len(self._tiles)

    def __contains__(self, key: GridKey) -> bool:
        return key in self._tiles

    def get(self, x: int, y: int) -> Optional[CachedTile]:
        return self._tiles.get((x, y))

    def add(self, tile: CachedTile) -> bool:
        if tile.generation < self.generation:
            return False
        self.generation = tile.generation
        key = (tile.x, tile.y)
        current = self._tiles.get(key)
        if current is not None and current.generation > tile.generation:
            return False
        self._tiles[key] = tile
        return True

    def evict_stale(self) -> int:
        """Drop tiles older than the newest generation seen; return how many."""

        stale = [key for key, tile in self._tiles.items() if tile.generation < self.generation]
        for key in stale:
            del self._tiles[key]
        return len(stale)

    def clear(self) -> None:
        self._tiles.clear()

    def tiles(self) -> List[CachedTile]:
        return sorted(self._tiles.values(), key=lambda t: (t.generation, t.y, t.x))

    def composite(self, width: int, height: int, background=(255, 255, 255, 255)) -> np.ndarray:
        """Paint every cached tile onto a ``height`` x ``width`` RGBA canvas.

        Tiles are drawn oldest generation first so the newest ones win.
        Destination rectangles are clipped to the canvas.
        """

        canvas = np.empty((height, width, 4), dtype=np.uint8)
        canvas[...] = background
        for tile in self.tiles():
            x0, y0, x1, y1 = (int(v) for v in tile.bounds.to_tuple())
            cx1, cy1 = min(x1, width), min(y1, height)
            if x0 >= cx1 or y0 >= cy1:
                continue
            canvas[y0:cy1, x0:cx1] = tile.pixels[: cy1 - y0, : cx1 - x0]
        return canvas


class TileClient:
    """Viewer state plus a fire-and-forget command channel to a worker."""

    def __init__(
        self,
        worker: RenderWorker,
        *,
        params: Optional[RenderParams] = None,
        theme: Theme = LIGHT_THEME,
    ) -> None:
        self.worker = worker
        self.params = params or RenderParams()
        self.theme = theme
        self.cache = TileCache()

        self.generation = 0
        self._last_id = 0

        self.path: Optional[Path] = None
        self.page_count = 0
        self.page_index: Optional[int] = None
        self.page_size: Optional[Vector] = None

        self.screen = Rect.from_coords(0, 0, 800, 600)
        self.translation = Vector.zero()
        self.scale = self.params.scale

        self.links: List[LinkInfo] = []
        self.outline: List[OutlineItem] = []
        self.last_text: Optional[TextSelection] = None
        self.last_error: Optional[Failed] = None

    # -- commands --------------------------------------------------------

    def _send(self, cmd: Command) -> Command:
        self.worker.submit(cmd)
        return cmd

    def _next_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def load(self, path) -> None:
        self.path = Path(path)
        self._send(LoadDocument(self.path, request_id=self._next_id()))

    def set_page(self, index: int) -> None:
        self._send(SetPage(index, request_id=self._next_id()))

    def next_page(self) -> None:
        if self.page_index is not None and self.page_index + 1 < self.page_count:
            self.set_page(self.page_index + 1)

    def previous_page(self) -> None:
        if self.page_index is not None and self.page_index > 0:
            self.set_page(self.page_index - 1)

    def refresh(self) -> None:
        self._send(RefreshDocument(request_id=self._next_id()))

    def extract_text(self, rect: Rect) -> None:
        self._send(ExtractText(rect, request_id=self._next_id()))

    def extract_selection(self, start: Vector, end: Vector) -> None:
        """Request the text under a screen-space drag from ``start`` to ``end``."""

        if self.page_size is None:
            return
        rect = selection_rect(start, end, self.screen, self.translation, self.scale, self.page_size)
        self.extract_text(rect)

    def extract_links(self) -> None:
        self._send(ExtractLinks(request_id=self._next_id()))

    def extract_outline(self) -> None:
        self._send(ExtractOutline(request_id=self._next_id()))

    # -- viewport --------------------------------------------------------

    def set_viewport(
        self,
        *,
        screen: Optional[Rect] = None,
        translation: Optional[Vector] = None,
        scale: Optional[float] = None,
    ) -> List[RenderRequest]:
        if screen is not None:
            self.screen = screen
        if translation is not None:
            self.translation = translation
        if scale is not None:
            self.scale = self.params.clamp_scale(scale)
        return self.request_tiles()

    def pan(self, delta: Vector) -> List[RenderRequest]:
        """Pan by a screen-space ``delta``."""

        return self.set_viewport(translation=self.translation + delta.scaled(1.0 / self.scale))

    def zoom_in(self) -> List[RenderRequest]:
        return self.set_viewport(scale=self.scale * self.params.zoom_step)

    def zoom_out(self) -> List[RenderRequest]:
        return self.set_viewport(scale=self.scale / self.params.zoom_step)

    def zoom_fit(self) -> List[RenderRequest]:
        if self.page_size is None:
            return []
        return self.set_viewport(scale=zoom_fit_ratio(self.screen, self.page_size))

    def request_tiles(self) -> List[RenderRequest]:
        """Start a new generation and submit the tiles of the current view."""

        if self.page_index is None or self.page_size is None:
            return []
        self.generation += 1
        visible = visible_bbox(self.screen, self.translation, self.scale, self.page_size)
        requests = plan_tiles(
            visible=visible,
            page_size=self.page_size,
            scale=self.scale,
            tile_size=self.params.tile_size,
            page_number=self.page_index,
            generation=self.generation,
            invert_colors=self.theme.invert,
            first_id=self._last_id + 1,
        )
        self._last_id += len(requests)
        for req in requests:
            self._send(RenderTile(req))
        logger.debug("Generation %d: %d tiles", self.generation, len(requests))
        return requests

    # -- links -----------------------------------------------------------

    def link_at(self, screen_pos: Vector) -> Optional[LinkInfo]:
        if self.page_size is None:
            return None
        pos = screen_to_document(screen_pos, self.screen, self.translation, self.scale, self.page_size)
        return next((link for link in self.links if link.bounds.contains(pos)), None)

    def follow_link(self, link: LinkInfo) -> bool:
        """Jump to an internal link target. Returns ``False`` for other links."""

        if link.link_type is LinkType.INTERNAL_PAGE and link.page is not None:
            # Link targets are one-based page numbers.
            self.set_page(link.page - 1)
            return True
        return False

    # -- responses -------------------------------------------------------

    def poll(self) -> List[Response]:
        """Apply every response currently waiting; never blocks."""

        responses = self.worker.poll()
        for response in responses:
            self.apply(response)
        return responses

    def apply(self, response: Response) -> None:
        if isinstance(response, RenderedTile):
            if not self.cache.add(response.tile):
                logger.debug("Discarded late tile %d", response.tile.id)
        elif isinstance(response, Loaded):
            self.page_count = response.page_count
            self.page_index = None
            self.page_size = None
            self.links = []
            self.outline = []
            self.cache.clear()
        elif isinstance(response, PageSet):
            self.page_index = response.index
            self.page_size = response.size
            self.cache.clear()
        elif isinstance(response, Refreshed):
            self._apply_refresh(response)
        elif isinstance(response, ExtractedText):
            self.last_text = response.selection
        elif isinstance(response, ExtractedLinks):
            self.links = list(response.links)
        elif isinstance(response, ExtractedOutline):
            self.outline = list(response.outline)
        elif isinstance(response, Failed):
            self.last_error = response
            logger.warning("%s failed: %s", response.command, response.reason)

    def _apply_refresh(self, response: Refreshed) -> None:
        self.page_count = response.page_count
        self.cache.clear()
        if self.page_index is None:
            return
        # The worker keeps the page only when it still exists; reissue
        # SetPage so page size and tiles are rebuilt either way.
        self.set_page(min(self.page_index, response.page_count - 1))


def wait_for(client: TileClient, kinds: Iterable[type], timeout: float = 5.0) -> Response:
    """Block until a response of one of ``kinds`` arrives, applying all others.

    Meant for scripts and tests; an interactive front end calls
    :meth:`TileClient.poll` from its event loop instead.
    """

    wanted = tuple(kinds)
    while True:
        response = client.worker.get_response(timeout=timeout)
        client.apply(response)
        if isinstance(response, wanted):
            return response
