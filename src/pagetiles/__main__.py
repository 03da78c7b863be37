"""Command line interface for pagetiles."""
from __future__ import annotations

import argparse
import math
import queue
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from .client import TileClient, wait_for
from .geometry import Rect, Vector
from .presets import RenderParams, get_theme, parse_color
from .protocol import (
    ExtractedLinks,
    ExtractedOutline,
    ExtractedText,
    Failed,
    Loaded,
    PageSet,
    RenderedTile,
    RenderTile,
)
from .report import links_to_dict, outline_to_dict, selection_to_dict, to_json, write_json_report
from .settings import configure_logging, load_settings
from .utils import save_png
from .viewport import plan_tiles
from .worker import RenderWorker


class CommandError(Exception):
    """Raised when the worker reports a failure for a CLI request."""


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def _color(value: str):
    try:
        return parse_color(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    settings = load_settings()
    parser = argparse.ArgumentParser(
        prog="pagetiles",
        description="Tile based page rendering and content extraction.",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    parser.add_argument("--json", dest="json_path", help="Write the result to this JSON file")
    parser.add_argument("--timeout", type=float, default=30.0, help="Seconds to wait per response")
    parser.add_argument("--version", action="store_true", help="Print version and exit")
    parser.set_defaults(background=None, dark_background=settings.dark_background)
    sub = parser.add_subparsers(dest="command")

    info = sub.add_parser("info", help="Page count and page sizes")
    info.add_argument("document")

    render = sub.add_parser("render", help="Render the tiles of one page to PNG files")
    render.add_argument("document")
    render.add_argument("--page", type=int, default=0, help="Zero-based page index")
    render.add_argument("--scale", type=_positive_float, default=settings.scale, help="Zoom factor")
    render.add_argument("--tile-size", type=_positive_int, default=settings.tile_size, help="Tile edge (px)")
    render.add_argument("--theme", default=settings.theme, help="Theme name (light|dark)")
    render.add_argument(
        "--background", type=_color, help="Dark theme background, #RRGGBB or r,g,b (default from settings)"
    )
    render.add_argument("--out", required=True, help="Output directory")
    render.add_argument("--stitch", action="store_true", help="Also write the assembled page")

    text = sub.add_parser("text", help="Text inside a rectangle (document units)")
    text.add_argument("document")
    text.add_argument("--page", type=int, default=0)
    text.add_argument("--rect", required=True, help="x0,y0,x1,y1")

    links = sub.add_parser("links", help="Links of one page")
    links.add_argument("document")
    links.add_argument("--page", type=int, default=0)

    outline = sub.add_parser("outline", help="Table of contents")
    outline.add_argument("document")
    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        from . import __version__

        print(__version__)
        return 0
    if not args.command:
        parser.print_help()
        return 2

    configure_logging(args.log_level)

    if args.command == "text":
        try:
            rect = parse_rect(args.rect)
        except ValueError as exc:
            parser.error(str(exc))
            return 2
    dark_background = args.background or args.dark_background
    if args.command == "render":
        try:
            theme = get_theme(args.theme)
        except KeyError as exc:
            parser.error(str(exc))
            return 2
        if theme.invert:
            theme = theme.copy(background=dark_background)

    with RenderWorker(dark_background=dark_background) as worker:
        client = TileClient(worker)
        try:
            _expect(client, Loaded, args.timeout, client.load, args.document)
            if args.command == "info":
                data = _info(client, args.timeout)
            elif args.command == "render":
                data = _render(client, args, theme)
            elif args.command == "text":
                _expect(client, PageSet, args.timeout, client.set_page, args.page)
                result = _expect(client, ExtractedText, args.timeout, client.extract_text, rect)
                data = selection_to_dict(result.selection)
            elif args.command == "links":
                _expect(client, PageSet, args.timeout, client.set_page, args.page)
                result = _expect(client, ExtractedLinks, args.timeout, client.extract_links)
                data = links_to_dict(result.links)
            else:
                result = _expect(client, ExtractedOutline, args.timeout, client.extract_outline)
                data = outline_to_dict(result.outline)
        except CommandError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        except queue.Empty:
            print(f"error: no response from the worker within {args.timeout}s", file=sys.stderr)
            return 1

    if args.json_path:
        write_json_report(data, args.json_path)
    else:
        print(to_json(data))
    return 0


def parse_rect(value: str) -> Rect:
    parts = [p.strip() for p in value.replace(";", ",").split(",")]
    if len(parts) != 4:
        raise ValueError(f"Rectangle '{value}' must have four coordinates")
    try:
        x0, y0, x1, y1 = (float(p) for p in parts)
    except ValueError as exc:
        raise ValueError(f"Rectangle '{value}' has invalid coordinates") from exc
    return Rect.from_coords(min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1))


def _expect(client: TileClient, kind: type, timeout: float, action, *action_args):
    action(*action_args)
    response = wait_for(client, (kind, Failed), timeout=timeout)
    if isinstance(response, Failed):
        raise CommandError(response.reason)
    return response


def _info(client: TileClient, timeout: float) -> dict:
    pages: List[dict] = []
    for index in range(client.page_count):
        page = _expect(client, PageSet, timeout, client.set_page, index)
        pages.append({"index": index, "width": float(page.size.x), "height": float(page.size.y)})
    return {"path": str(client.path), "page_count": client.page_count, "pages": pages}


def _render(client: TileClient, args: argparse.Namespace, theme) -> dict:
    page = _expect(client, PageSet, args.timeout, client.set_page, args.page)
    width = math.ceil(page.size.x * args.scale)
    height = math.ceil(page.size.y * args.scale)
    requests = plan_tiles(
        visible=Rect.from_pos_size(Vector.zero(), Vector(width, height)),
        page_size=page.size,
        scale=args.scale,
        tile_size=args.tile_size,
        page_number=args.page,
        generation=1,
        invert_colors=theme.invert,
    )
    for req in requests:
        client.worker.submit(RenderTile(req))

    out_dir = Path(args.out)
    files: List[str] = []
    for _ in requests:
        response = wait_for(client, (RenderedTile, Failed), timeout=args.timeout)
        if isinstance(response, Failed):
            raise CommandError(response.reason)
        tile = response.tile
        files.append(str(save_png(tile.pixels, out_dir / f"tile_{tile.y:03d}_{tile.x:03d}.png")))

    params = RenderParams(tile_size=args.tile_size, scale=args.scale)
    data = {
        "page": args.page,
        "width": width,
        "height": height,
        "params": params.to_dict(),
        "theme": theme.to_dict(),
        "tiles": files,
    }
    if args.stitch:
        canvas = client.cache.composite(width, height, background=theme.background)
        data["page_image"] = str(save_png(canvas, out_dir / "page.png"))
    return data


if __name__ == "__main__":
    sys.exit(main())
