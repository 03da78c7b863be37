from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal

from ..client import TileClient
from ..protocol import (
    ExtractedLinks,
    ExtractedOutline,
    ExtractedText,
    Failed,
    Loaded,
    PageSet,
    Refreshed,
    RenderedTile,
    Response,
)


class WorkerBridge(QObject):
    """Polls a :class:`TileClient` from the Qt event loop and emits signals.

    The render worker runs on its own Python thread; this object lives on the
    GUI thread and only drains the response queue, so slots connected to its
    signals can touch widgets directly.
    """

    tileReady = Signal(object)
    documentLoaded = Signal(int)
    pageChanged = Signal(int, float, float)
    documentRefreshed = Signal(str, int)
    textExtracted = Signal(str)
    linksExtracted = Signal(list)
    outlineExtracted = Signal(list)
    failed = Signal(str, str)

    def __init__(self, client: TileClient, interval_ms: int = 16, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.client = client
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self.pump)

    def start(self) -> None:
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def pump(self) -> int:
        """Apply pending responses and emit one signal per response."""

        responses = self.client.poll()
        for response in responses:
            self._emit(response)
        return len(responses)

    def _emit(self, response: Response) -> None:
        if isinstance(response, RenderedTile):
            self.tileReady.emit(response.tile)
        elif isinstance(response, Loaded):
            self.documentLoaded.emit(response.page_count)
        elif isinstance(response, PageSet):
            self.pageChanged.emit(response.index, float(response.size.x), float(response.size.y))
        elif isinstance(response, Refreshed):
            self.documentRefreshed.emit(str(response.path), response.page_count)
        elif isinstance(response, ExtractedText):
            self.textExtracted.emit(response.selection.text)
        elif isinstance(response, ExtractedLinks):
            self.linksExtracted.emit(list(response.links))
        elif isinstance(response, ExtractedOutline):
            self.outlineExtracted.emit(list(response.outline))
        elif isinstance(response, Failed):
            self.failed.emit(response.command, response.reason)
