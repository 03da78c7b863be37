"""Asynchronous tile rendering and content extraction for paged documents."""

from __future__ import annotations

from .client import TileCache, TileClient
from .core.types import LinkInfo, LinkType, OutlineItem, TextSelection
from .errors import WorkerError
from .geometry import Rect, Vector
from .presets import DARK_THEME, LIGHT_THEME, RenderParams, Theme, get_theme, iter_themes
from .protocol import CachedTile, RenderRequest
from .shader import invert_colors
from .worker import Dispatcher, PdfWorker, RenderWorker

__all__ = [
    "TileCache",
    "TileClient",
    "LinkInfo",
    "LinkType",
    "OutlineItem",
    "TextSelection",
    "WorkerError",
    "Rect",
    "Vector",
    "DARK_THEME",
    "LIGHT_THEME",
    "RenderParams",
    "Theme",
    "get_theme",
    "iter_themes",
    "CachedTile",
    "RenderRequest",
    "invert_colors",
    "Dispatcher",
    "PdfWorker",
    "RenderWorker",
    "core",
    "ui",
    "utils",
]

__version__ = "0.1.0"
