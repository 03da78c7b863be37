"""Viewer themes, render parameters and color helpers."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Mapping, Optional, Tuple

Color8 = Tuple[int, int, int, int]

WHITE: Color8 = (255, 255, 255, 255)


@dataclass(frozen=True)
class RenderParams:
    """Parameters driving tile planning and rasterization."""

    tile_size: int = 256
    scale: float = 1.0
    zoom_step: float = 1.2
    min_scale: float = 0.1
    max_scale: float = 16.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "tile_size": self.tile_size,
            "scale": self.scale,
            "zoom_step": self.zoom_step,
            "min_scale": self.min_scale,
            "max_scale": self.max_scale,
        }

    def copy(self, **overrides: float) -> "RenderParams":
        return replace(self, **overrides)

    def clamp_scale(self, scale: float) -> float:
        return max(self.min_scale, min(scale, self.max_scale))


@dataclass(frozen=True)
class Theme:
    """Background colour a page is composited against.

    ``invert`` themes run the dark-mode shader on every tile, remapping the
    white paper towards ``background``.
    """

    name: str
    description: str
    background: Color8
    invert: bool = False

    def copy(self, **overrides: object) -> "Theme":
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "description": self.description,
            "background": list(self.background),
            "invert": self.invert,
        }


THEMES: Mapping[str, Theme] = {
    "light": Theme(
        name="light",
        description="Pages rendered as-is on white paper.",
        background=WHITE,
        invert=False,
    ),
    "dark": Theme(
        name="dark",
        description="Tokyo Night background; page luminance remapped.",
        background=(0x1A, 0x1B, 0x26, 0xFF),
        invert=True,
    ),
}

LIGHT_THEME = THEMES["light"]
DARK_THEME = THEMES["dark"]


def get_theme(name: str) -> Theme:
    key = name.lower()
    if key not in THEMES:
        raise KeyError(f"Unknown theme '{name}'. Available: {', '.join(sorted(THEMES))}")
    return THEMES[key]


def iter_themes() -> Iterable[Theme]:
    return THEMES.values()


def parse_color(value: Optional[str]) -> Optional[Color8]:
    """Parse ``#RRGGBB``/``#RRGGBBAA`` or ``r,g,b[,a]`` (0-255) into RGBA."""

    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if value.startswith("#"):
        hex_value = value[1:]
        if len(hex_value) not in (6, 8):
            raise ValueError("Hex colors must be #RRGGBB or #RRGGBBAA")
        channels = [int(hex_value[i : i + 2], 16) for i in range(0, len(hex_value), 2)]
    else:
        parts = value.replace(";", ",").split(",")
        if len(parts) not in (3, 4):
            raise ValueError("RGB colors must provide three or four comma separated numbers")
        channels = [int(p.strip()) for p in parts]
    if any(channel < 0 or channel > 255 for channel in channels):
        raise ValueError(f"Color channels must be within 0-255: '{value}'")
    if len(channels) == 3:
        channels.append(255)
    return tuple(channels)  # type: ignore[return-value]
