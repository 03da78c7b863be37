import os

import numpy as np
import pytest

pytest.importorskip("PySide6")
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QCoreApplication  # noqa: E402

from pagetiles.core.types import TextSelection  # noqa: E402
from pagetiles.geometry import Rect, Vector  # noqa: E402
from pagetiles.protocol import (  # noqa: E402
    CachedTile,
    ExtractedText,
    Failed,
    Loaded,
    PageSet,
    RenderedTile,
)
from pagetiles.ui.bridge import WorkerBridge  # noqa: E402


@pytest.fixture(scope="module")
def app():
    return QCoreApplication.instance() or QCoreApplication([])


class _FakeClient:
    def __init__(self, responses):
        self.responses = list(responses)

    def poll(self):
        out, self.responses = self.responses, []
        return out


def test_pump_emits_one_signal_per_response(app):
    tile = CachedTile(
        id=1,
        pixels=np.zeros((2, 2, 4), dtype=np.uint8),
        bounds=Rect.from_coords(0, 0, 2, 2),
        x=0,
        y=0,
        generation=1,
    )
    client = _FakeClient(
        [
            Loaded(page_count=3),
            PageSet(index=1, size=Vector(100, 200)),
            RenderedTile(tile),
            ExtractedText(TextSelection(text="hi", bounds=Rect.from_coords(0, 0, 1, 1))),
            Failed(request_id=None, command="SetPage", reason="bad", error="PageLoadError"),
        ]
    )
    bridge = WorkerBridge(client)
    seen = []
    bridge.documentLoaded.connect(lambda count: seen.append(("loaded", count)))
    bridge.pageChanged.connect(lambda index, w, h: seen.append(("page", index, w, h)))
    bridge.tileReady.connect(lambda t: seen.append(("tile", t.id)))
    bridge.textExtracted.connect(lambda text: seen.append(("text", text)))
    bridge.failed.connect(lambda command, reason: seen.append(("failed", command, reason)))

    assert bridge.pump() == 5
    assert seen == [
        ("loaded", 3),
        ("page", 1, 100.0, 200.0),
        ("tile", 1),
        ("text", "hi"),
        ("failed", "SetPage", "bad"),
    ]
    assert bridge.pump() == 0


def test_timer_start_stop(app):
    bridge = WorkerBridge(_FakeClient([]), interval_ms=5)
    bridge.start()
    assert bridge._timer.isActive()
    bridge.stop()
    assert not bridge._timer.isActive()
