"""
data_model/geometry.py — page geometry: glyph runs and axis-aligned boxes.

TextItem is the immutable input from the page text provider (one positioned
run of glyphs, PDF user space). BoundingBox is always expressed in the
canonical frame: top-left origin, un-rotated page, y growing downwards.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, TypeAlias

# (a, b, c, d, e, f): affine matrix of the text run, PDF user space
Transform: TypeAlias = tuple[float, float, float, float, float, float]

Point: TypeAlias = tuple[float, float]

IDENTITY: Transform = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


def finite(value: object, default: float = 0.0) -> float:
    """Coerces a number-like value to a finite float; anything else → default."""
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


# ---------------------------------------------------------------------------
# BoundingBox
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BoundingBox:
    """
    Axis-aligned box in the canonical frame.

    Construction normalises the corner order, so x1 <= x2 and y1 <= y2
    hold for every instance.
    """
    x1: float
    y1: float
    x2: float
    y2: float

    def __post_init__(self) -> None:
        x1, x2 = sorted((self.x1, self.x2))
        y1, y2 = sorted((self.y1, self.y2))
        object.__setattr__(self, "x1", x1)
        object.__setattr__(self, "y1", y1)
        object.__setattr__(self, "x2", x2)
        object.__setattr__(self, "y2", y2)

    @classmethod
    def from_points(cls, xs: Iterable[float], ys: Iterable[float]) -> BoundingBox:
        xs, ys = list(xs), list(ys)
        return cls(min(xs), min(ys), max(xs), max(ys))

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def height(self) -> float:
        return self.y2 - self.y1

    @property
    def center(self) -> Point:
        return (self.x1 + self.x2) / 2, (self.y1 + self.y2) / 2

    def corners(self) -> tuple[Point, Point, Point, Point]:
        return (
            (self.x1, self.y1),
            (self.x2, self.y1),
            (self.x2, self.y2),
            (self.x1, self.y2),
        )

    def reference_points(self) -> tuple[Point, ...]:
        """Four corners plus the center — anchor points for auto-link distances."""
        return (*self.corners(), self.center)

    def union(self, other: BoundingBox) -> BoundingBox:
        return BoundingBox(
            min(self.x1, other.x1),
            min(self.y1, other.y1),
            max(self.x2, other.x2),
            max(self.y2, other.y2),
        )


def squared_distance(p: Point, q: Point) -> float:
    dx = p[0] - q[0]
    dy = p[1] - q[1]
    return dx * dx + dy * dy


# ---------------------------------------------------------------------------
# TextItem
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class TextItem:
    """
    One positioned run of glyphs as reported by the page text layer.

    - text:      the run's string
    - transform: (a, b, c, d, e, f), kept exactly as received
    - width:     advance width along the baseline (user-space units)
    - height:    font height (user-space units)
    """
    text: str
    transform: Transform = IDENTITY
    width: float = 0.0
    height: float = 0.0

