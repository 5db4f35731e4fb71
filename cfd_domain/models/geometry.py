"""
Core geometry types for the CFD domain generator.

Provides Point2D, BBox, and Polygon classes used throughout the
pipeline for footprints, region boundaries and cross-section hulls.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import math


@dataclass(frozen=True, slots=True)
class Point2D:
    """2D point (or vector) in coordinates relative to the point of interest."""
    x: float
    y: float

    def distance_to(self, other: 'Point2D') -> float:
        """Euclidean distance to another point."""
        dx = self.x - other.x
        dy = self.y - other.y
        return math.sqrt(dx * dx + dy * dy)

    def __sub__(self, other: 'Point2D') -> 'Point2D':
        """Vector subtraction."""
        return Point2D(self.x - other.x, self.y - other.y)

    def __add__(self, other: 'Point2D') -> 'Point2D':
        """Vector addition."""
        return Point2D(self.x + other.x, self.y + other.y)

    def __mul__(self, factor: float) -> 'Point2D':
        """Scale as a vector."""
        return Point2D(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __neg__(self) -> 'Point2D':
        return Point2D(-self.x, -self.y)


ORIGIN = Point2D(0.0, 0.0)


@dataclass(slots=True)
class BBox:
    """Axis-aligned bounding box in 2D."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def corners(self) -> List[Point2D]:
        """
        Corners in CCW order starting at the minimum corner.

        Index 0 (min_x, min_y), 1 (max_x, min_y), 2 (max_x, max_y),
        3 (min_x, max_y). Edge i runs from corner i to corner i + 1.
        """
        return [
            Point2D(self.min_x, self.min_y),
            Point2D(self.max_x, self.min_y),
            Point2D(self.max_x, self.max_y),
            Point2D(self.min_x, self.max_y),
        ]

    @property
    def width(self) -> float:
        """Width in X direction."""
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        """Height in Y direction."""
        return self.max_y - self.min_y

    @property
    def center(self) -> Point2D:
        """Center point of bbox."""
        return Point2D(
            (self.min_x + self.max_x) / 2,
            (self.min_y + self.max_y) / 2
        )

    @staticmethod
    def from_points(points: List[Point2D]) -> 'BBox':
        """Create bbox from a list of points."""
        if not points:
            raise ValueError("Cannot create BBox from empty point list")

        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return BBox(min(xs), min(ys), max(xs), max(ys))


@dataclass
class Polygon:
    """
    2D polygon with optional holes.

    Attributes:
        outer_ring: List of Point2D forming the outer boundary (should be CCW)
        holes: List of inner rings (each should be CW for proper winding)
        bbox: Cached bounding box (computed on demand if None)

    Winding convention:
        - Outer ring: counter-clockwise (positive signed area)
        - Holes: clockwise (negative signed area)

    Rings never repeat the first vertex at the end.
    """
    outer_ring: List[Point2D]
    holes: List[List[Point2D]] = field(default_factory=list)
    _bbox: Optional[BBox] = field(default=None, repr=False, compare=False)

    @property
    def bbox(self) -> BBox:
        """Get or compute bounding box."""
        if self._bbox is None:
            self._bbox = BBox.from_points(self.outer_ring)
        return self._bbox

    def __len__(self) -> int:
        return len(self.outer_ring)

    def rings(self) -> List[List[Point2D]]:
        """Outer ring followed by holes."""
        return [self.outer_ring] + list(self.holes)

    def signed_area(self) -> float:
        """
        Compute signed area using shoelace formula.
        Positive = CCW, Negative = CW.
        """
        return _signed_area(self.outer_ring)

    def area(self) -> float:
        """
        Compute total area (outer minus holes).
        """
        total = abs(self.signed_area())
        for hole in self.holes:
            total -= abs(_signed_area(hole))
        return total

    def is_ccw(self) -> bool:
        """Check if outer ring is counter-clockwise."""
        return self.signed_area() > 0


def _signed_area(ring: List[Point2D]) -> float:
    """
    Compute signed area of a ring using shoelace formula.
    Positive = CCW, Negative = CW.
    """
    n = len(ring)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += ring[i].x * ring[j].y
        area -= ring[j].x * ring[i].y

    return area / 2.0
