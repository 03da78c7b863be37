from pathlib import Path

import fitz
import numpy as np


def array_to_pixmap(pixels: np.ndarray) -> fitz.Pixmap:
    """Wrap an ``(H, W, 4)`` RGBA array in a PyMuPDF pixmap."""

    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError(f"Expected an (H, W, 4) array, got {pixels.shape}")
    height, width = pixels.shape[:2]
    return fitz.Pixmap(fitz.csRGB, width, height, np.ascontiguousarray(pixels).tobytes(), True)


def save_png(pixels: np.ndarray, path: str | Path) -> Path:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    array_to_pixmap(pixels).save(str(out_path))
    return out_path
