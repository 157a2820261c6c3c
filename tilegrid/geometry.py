"""Planar point and bounding box value types.

Coordinates are a flat ``(x, y)`` pair.  Callers may interpret them as
``(longitude, latitude)`` or as metres in a projected system such as
RD New; no reprojection happens here.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Point2:
    """An (x, y) coordinate pair."""

    x: float
    y: float


@dataclass(frozen=True)
class AABB2:
    """Axis-aligned bounding box.

    Boxes are expected to satisfy ``min <= max`` on both axes.  This is
    not checked; a box used as a tiling extent is validated by
    :class:`tilegrid.tiling.grid.TilingGrid`.
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_tuple(cls, bbox: Tuple[float, float, float, float]) -> "AABB2":
        """Build a box from ``(x_min, y_min, x_max, y_max)``."""
        x_min, y_min, x_max, y_max = bbox
        return cls(float(x_min), float(y_min), float(x_max), float(y_max))

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.min_x, self.min_y, self.max_x, self.max_y)

    def width(self) -> float:
        return self.max_x - self.min_x

    def height(self) -> float:
        return self.max_y - self.min_y

    def center(self) -> Point2:
        return Point2((self.min_x + self.max_x) * 0.5, (self.min_y + self.max_y) * 0.5)

    def corners(self) -> Tuple[Point2, Point2, Point2, Point2]:
        """Return the corners counter-clockwise from the lower left."""
        return (
            Point2(self.min_x, self.min_y),
            Point2(self.max_x, self.min_y),
            Point2(self.max_x, self.max_y),
            Point2(self.min_x, self.max_y),
        )

    def contains(self, point: Point2) -> bool:
        """Inclusive point-in-box test."""
        return (
            self.min_x <= point.x <= self.max_x
            and self.min_y <= point.y <= self.max_y
        )

    def intersects(self, other: "AABB2") -> bool:
        """Inclusive overlap test; boxes that only touch count as intersecting."""
        return (
            self.min_x <= other.max_x
            and other.min_x <= self.max_x
            and self.min_y <= other.max_y
            and other.min_y <= self.max_y
        )
