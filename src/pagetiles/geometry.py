"""Vector and rectangle helpers shared by document, tile and screen math."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

import fitz

Number = Union[int, float]


@dataclass(frozen=True)
class Vector:
    """An ``(x, y)`` pair. Arithmetic is component-wise."""

    x: Number = 0
    y: Number = 0

    @classmethod
    def zero(cls) -> "Vector":
        return cls(0, 0)

    def __add__(self, other: "Vector") -> "Vector":
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector") -> "Vector":
        return Vector(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Vector":
        return Vector(-self.x, -self.y)

    def scaled(self, scale: Number) -> "Vector":
        return Vector(self.x * scale, self.y * scale)

    def non_uniform_scaled(self, scale: "Vector") -> "Vector":
        return Vector(self.x * scale.x, self.y * scale.y)

    def div_inverted(self) -> "Vector":
        return Vector(1 / self.x, 1 / self.y)

    def rounded(self) -> "Vector":
        return Vector(int(round(self.x)), int(round(self.y)))

    def to_tuple(self) -> Tuple[Number, Number]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Rect:
    """Axis aligned rectangle stored as top-left ``x0`` and bottom-right ``x1``.

    Corner ordering is not enforced. Consumers must treat an inverted
    rectangle as empty (see :attr:`is_empty`) instead of negative-sized.
    """

    x0: Vector = Vector()
    x1: Vector = Vector()

    @classmethod
    def from_pos_size(cls, pos: Vector, size: Vector) -> "Rect":
        return cls(pos, pos + size)

    @classmethod
    def from_coords(cls, x0: Number, y0: Number, x1: Number, y1: Number) -> "Rect":
        return cls(Vector(x0, y0), Vector(x1, y1))

    @classmethod
    def from_fitz(cls, rect) -> "Rect":
        """Build from a ``fitz.Rect``/``fitz.IRect`` or any 4-sequence."""

        x0, y0, x1, y1 = tuple(rect)
        return cls.from_coords(x0, y0, x1, y1)

    @property
    def width(self) -> Number:
        return self.x1.x - self.x0.x

    @property
    def height(self) -> Number:
        return self.x1.y - self.x0.y

    @property
    def size(self) -> Vector:
        return Vector(self.width, self.height)

    @property
    def center(self) -> Vector:
        return (self.x0 + self.x1).scaled(0.5)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def translated(self, offset: Vector) -> "Rect":
        return Rect(self.x0 + offset, self.x1 + offset)

    def scaled(self, s: Number) -> "Rect":
        """Scale around the centre point by ``s``."""

        return self.scaled_xy(Vector(s, s))

    def scaled_xy(self, s: Vector) -> "Rect":
        """Anisotropic scale around the centre point."""

        center = self.center
        half = self.size.scaled(0.5).non_uniform_scaled(s)
        return Rect(center - half, center + half)

    def contains(self, point: Vector) -> bool:
        return self.x0.x < point.x < self.x1.x and self.x0.y < point.y < self.x1.y

    def intersects(self, other: "Rect") -> bool:
        # Strict: rectangles that only touch do not intersect.
        return (
            self.x0.x < other.x1.x
            and self.x1.x > other.x0.x
            and self.x0.y < other.x1.y
            and self.x1.y > other.x0.y
        )

    def union(self, other: "Rect") -> "Rect":
        return Rect.from_coords(
            min(self.x0.x, other.x0.x),
            min(self.x0.y, other.x0.y),
            max(self.x1.x, other.x1.x),
            max(self.x1.y, other.x1.y),
        )

    def rounded(self) -> "Rect":
        return Rect(self.x0.rounded(), self.x1.rounded())

    def to_tuple(self) -> Tuple[Number, Number, Number, Number]:
        return (self.x0.x, self.x0.y, self.x1.x, self.x1.y)

    def to_fitz(self) -> fitz.Rect:
        return fitz.Rect(*self.to_tuple())

    def to_irect(self) -> fitz.IRect:
        return fitz.IRect(*self.rounded().to_tuple())
