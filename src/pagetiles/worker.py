"""Render worker: owns the open document and executes commands serially.

PyMuPDF objects are not safe to share between threads, so the document and
the current page live exclusively inside :class:`PdfWorker`, driven by a
single thread through :func:`worker_main`. The rest of the application talks
to it only through the command and response queues held by
:class:`RenderWorker`.
"""
from __future__ import annotations

import logging
import queue
import threading
from pathlib import Path
from typing import List, Optional

import fitz
import numpy as np

from .core.link_extraction import LinkExtractor
from .core.outline_extraction import OutlineExtractor
from .core.text_extraction import TextExtractor
from .core.types import LinkInfo, OutlineItem, TextSelection
from .errors import (
    DocumentOpenError,
    NoDocumentError,
    NoPageError,
    PageLoadError,
    PageMismatchError,
    WorkerError,
)
from .geometry import Rect, Vector
from .presets import DARK_THEME, Color8
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
    Shutdown,
)
from .shader import invert_colors
from .viewport import tile_destination

logger = logging.getLogger(__name__)

NO_PAGE = -1


class PdfWorker:
    """Document state plus the operations the worker thread performs."""

    def __init__(self, *, dark_background: Color8 = DARK_THEME.background) -> None:
        self.path: Optional[Path] = None
        self.document: Optional[fitz.Document] = None
        self.current_page: Optional[fitz.Page] = None
        self.current_page_idx: int = NO_PAGE
        self.dark_background = dark_background

    @property
    def page_count(self) -> int:
        return self.document.page_count if self.document is not None else 0

    def load_document(self, path: Path) -> Loaded:
        document = _open(path)
        self.close()
        self.document = document
        self.path = Path(path)
        logger.info("Loaded %s (%d pages)", self.path, document.page_count)
        return Loaded(page_count=document.page_count)

    def set_page(self, index: int) -> PageSet:
        if self.document is None:
            raise NoDocumentError()
        page = _load_page(self.document, index)
        self.current_page = page
        self.current_page_idx = index
        return PageSet(index=index, size=Vector(page.rect.width, page.rect.height))

    def refresh_document(self) -> Refreshed:
        """Reopen the last loaded path, replacing the document handle.

        The current page is re-loaded from the new document when its index is
        still valid and dropped otherwise.
        """

        if self.path is None:
            raise NoDocumentError("No document set")
        document = _open(self.path)
        page: Optional[fitz.Page] = None
        if 0 <= self.current_page_idx < document.page_count:
            try:
                page = _load_page(document, self.current_page_idx)
            except WorkerError:
                document.close()
                raise
        old = self.document
        self.document = document
        self.current_page = page
        if page is None:
            self.current_page_idx = NO_PAGE
        if old is not None:
            old.close()
        logger.info("Refreshed %s (%d pages)", self.path, document.page_count)
        return Refreshed(path=self.path, page_count=document.page_count)

    def render_tile(self, req: RenderRequest) -> CachedTile:
        page = self._require_page()
        if self.current_page_idx != req.page_number:
            raise PageMismatchError(self.current_page_idx, req.page_number)

        if req.bounds.is_empty:
            logger.debug("Tile %d has empty bounds %s", req.id, req.bounds.to_tuple())
            pixels = np.empty((0, 0, 4), dtype=np.uint8)
        else:
            pixels = _rasterize(page, req.bounds, req.scale)
            if req.invert_colors:
                invert_colors(pixels, self.dark_background)
        pixels.flags.writeable = False

        height, width = pixels.shape[:2]
        logger.debug(
            "Rendered tile %d (%d, %d) %dx%d gen=%d", req.id, req.x, req.y, width, height, req.generation
        )
        return CachedTile(
            id=req.id,
            pixels=pixels,
            bounds=tile_destination(width, height, req.x, req.y),
            x=req.x,
            y=req.y,
            generation=req.generation,
        )

    def extract_text(self, rect: Rect) -> TextSelection:
        return TextExtractor(self._require_page()).extract_text_in_rect(rect)

    def extract_links(self) -> List[LinkInfo]:
        return LinkExtractor(self._require_page()).extract_all_links()

    def extract_outline(self) -> List[OutlineItem]:
        if self.document is None:
            raise NoDocumentError()
        return OutlineExtractor(self.document).extract_outline()

    def close(self) -> None:
        self.current_page = None
        self.current_page_idx = NO_PAGE
        if self.document is not None:
            self.document.close()
            self.document = None

    def _require_page(self) -> fitz.Page:
        if self.current_page is None:
            raise NoPageError()
        return self.current_page


def _open(path: Path) -> fitz.Document:
    try:
        document = fitz.open(str(path))
    except Exception as exc:
        raise DocumentOpenError(f"Cannot open {path}: {exc}") from exc
    if document.page_count < 1:
        document.close()
        raise DocumentOpenError(f"Cannot open {path}: document has no pages")
    return document


def _load_page(document: fitz.Document, index: int) -> fitz.Page:
    if not 0 <= index < document.page_count:
        raise PageLoadError(f"Page {index} out of range (0..{document.page_count - 1})")
    try:
        return document.load_page(index)
    except Exception as exc:
        raise PageLoadError(f"Cannot load page {index}: {exc}") from exc


def _rasterize(page: fitz.Page, bounds: Rect, scale: float) -> np.ndarray:
    """Render the page-pixel rectangle ``bounds`` into an RGBA buffer of its size.

    Areas of ``bounds`` outside the page stay opaque white.
    """

    bounds = bounds.rounded()
    width, height = int(bounds.width), int(bounds.height)
    pixels = np.full((height, width, 4), 255, dtype=np.uint8)

    mat = fitz.Matrix(scale, scale)
    area = bounds.to_fitz() & (page.rect * mat)
    if area.is_empty:
        return pixels

    pix = page.get_pixmap(matrix=mat, clip=area * ~mat, colorspace=fitz.csRGB, alpha=False)
    samples = np.frombuffer(pix.samples, dtype=np.uint8).reshape(pix.height, pix.width, pix.n)

    # Pixmap origin is in page pixels; place it relative to the tile.
    dx = pix.x - int(bounds.x0.x)
    dy = pix.y - int(bounds.x0.y)
    x0, y0 = max(dx, 0), max(dy, 0)
    x1, y1 = min(dx + pix.width, width), min(dy + pix.height, height)
    if x0 < x1 and y0 < y1:
        pixels[y0:y1, x0:x1, :3] = samples[y0 - dy : y1 - dy, x0 - dx : x1 - dx, :3]
    return pixels


class Dispatcher:
    """Applies commands to a :class:`PdfWorker`, tracking the tile generation."""

    def __init__(self, worker: Optional[PdfWorker] = None) -> None:
        self.worker = worker or PdfWorker()
        self.current_generation = 0

    def handle(self, cmd: Command) -> Optional[Response]:
        """Execute ``cmd`` and return its response.

        ``None`` means nothing is sent back: a stale render request or
        ``Shutdown``. Failures are logged and returned as :class:`Failed`.
        """

        try:
            return self._dispatch(cmd)
        except WorkerError as exc:
            logger.error("%s failed: %s", type(cmd).__name__, exc)
            return _failed(cmd, exc)
        except Exception as exc:
            logger.exception("%s failed unexpectedly", type(cmd).__name__)
            return _failed(cmd, exc)

    def is_stale(self, req: RenderRequest) -> bool:
        if req.generation > self.current_generation:
            self.current_generation = req.generation
        return req.generation < self.current_generation

    def _dispatch(self, cmd: Command) -> Optional[Response]:
        worker = self.worker
        if isinstance(cmd, RenderTile):
            if self.is_stale(cmd.request):
                logger.debug(
                    "Dropping tile %d: generation %d < %d",
                    cmd.request.id, cmd.request.generation, self.current_generation,
                )
                return None
            return RenderedTile(worker.render_tile(cmd.request))
        if isinstance(cmd, LoadDocument):
            return worker.load_document(cmd.path)
        if isinstance(cmd, SetPage):
            return worker.set_page(cmd.index)
        if isinstance(cmd, RefreshDocument):
            return worker.refresh_document()
        if isinstance(cmd, ExtractText):
            return ExtractedText(worker.extract_text(cmd.rect))
        if isinstance(cmd, ExtractLinks):
            return ExtractedLinks(worker.extract_links())
        if isinstance(cmd, ExtractOutline):
            return ExtractedOutline(worker.extract_outline())
        if isinstance(cmd, Shutdown):
            return None
        raise TypeError(f"Unknown command {cmd!r}")


def _failed(cmd: Command, exc: BaseException) -> Failed:
    return Failed(
        request_id=getattr(cmd, "request_id", None),
        command=type(cmd).__name__,
        reason=str(exc),
        error=type(exc).__name__,
    )


def worker_main(
    commands: "queue.SimpleQueue[Command]",
    responses: "queue.SimpleQueue[Response]",
    dispatcher: Optional[Dispatcher] = None,
) -> None:
    """Process ``commands`` until :class:`Shutdown`, one at a time."""

    logger.info("Worker thread started")
    dispatcher = dispatcher or Dispatcher()
    try:
        while True:
            cmd = commands.get()
            if isinstance(cmd, Shutdown):
                break
            response = dispatcher.handle(cmd)
            if response is not None:
                responses.put(response)
    finally:
        dispatcher.worker.close()
        logger.info("Worker thread shut down")


class RenderWorker:
    """Thread owning a :class:`PdfWorker`, reachable only through queues."""

    def __init__(self, *, dark_background: Color8 = DARK_THEME.background, name: str = "pagetiles-worker") -> None:
        self.commands: "queue.SimpleQueue[Command]" = queue.SimpleQueue()
        self.responses: "queue.SimpleQueue[Response]" = queue.SimpleQueue()
        self._dispatcher = Dispatcher(PdfWorker(dark_background=dark_background))
        self._thread = threading.Thread(
            target=worker_main,
            args=(self.commands, self.responses, self._dispatcher),
            name=name,
            daemon=True,
        )

    def start(self) -> "RenderWorker":
        self._thread.start()
        return self

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def submit(self, cmd: Command) -> None:
        """Enqueue ``cmd``; never blocks."""

        self.commands.put(cmd)

    def get_response(self, timeout: Optional[float] = None) -> Response:
        """Block for the next response. Raises :class:`queue.Empty` on timeout."""

        return self.responses.get(timeout=timeout)

    def poll(self) -> List[Response]:
        """Return every response available right now without blocking."""

        out: List[Response] = []
        while True:
            try:
                out.append(self.responses.get_nowait())
            except queue.Empty:
                return out

    def shutdown(self, timeout: Optional[float] = None) -> None:
        if self._thread.is_alive():
            self.commands.put(Shutdown())
            self._thread.join(timeout)

    def __enter__(self) -> "RenderWorker":
        return self.start()

    def __exit__(self, *exc) -> None:
        self.shutdown()
