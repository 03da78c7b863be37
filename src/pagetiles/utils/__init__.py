"""Utility functions used across the project."""

from .image_ops import array_to_pixmap, save_png

__all__ = [
    "array_to_pixmap",
    "save_png",
]
