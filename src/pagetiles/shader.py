"""CPU dark-mode shader for rendered page tiles.

The transform is a perceptual approximation, not a colour accurate
inversion: each pixel's brightness is looked up in a two-stop gradient that
starts at white for black ink and ends at the theme background for white
paper. Paper therefore lands on the background colour while dark ink turns
light, and mid tones keep their relative contrast.
"""
from __future__ import annotations

import logging
from functools import lru_cache

import numpy as np

from .presets import WHITE, Color8

logger = logging.getLogger(__name__)


@lru_cache(maxsize=8)
def build_gradient_lut(background: Color8) -> np.ndarray:
    """Return a ``(256, 4)`` lookup table sampling white -> ``background``.

    Index ``i`` holds the gradient at ``i / 255``: index 0 (black) maps to
    white and index 255 (white) maps to the background colour.
    """

    t = np.linspace(0.0, 1.0, 256, dtype=np.float64)[:, None]
    start = np.asarray(WHITE, dtype=np.float64)
    end = np.asarray(background, dtype=np.float64)
    lut = np.rint(start + (end - start) * t).clip(0, 255).astype(np.uint8)
    lut.flags.writeable = False
    return lut


def invert_colors(pixels: np.ndarray, background: Color8) -> np.ndarray:
    """Apply the dark-mode transform to an RGBA ``uint8`` buffer in place.

    Pixels with alpha below 255 are treated as unpainted paper and forced to
    opaque white first. Pixels already equal to ``background`` are skipped.
    Alpha is never touched by the gradient step. The buffer is returned for
    convenience.
    """

    if pixels.dtype != np.uint8 or pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError(f"Expected an (H, W, 4) uint8 buffer, got {pixels.dtype} {pixels.shape}")

    translucent = pixels[..., 3] < 255
    if translucent.any():
        pixels[translucent] = WHITE

    bg = np.asarray(background, dtype=np.uint8)
    todo = ~np.all(pixels == bg, axis=-1)
    if not todo.any():
        return pixels

    rgb = pixels[..., :3][todo].astype(np.uint16)
    brightness = rgb.sum(axis=-1) // 3
    lut = build_gradient_lut(tuple(int(c) for c in background))
    pixels[todo, :3] = lut[brightness, :3]
    logger.debug("Inverted %d of %d pixels", int(todo.sum()), todo.size)
    return pixels
