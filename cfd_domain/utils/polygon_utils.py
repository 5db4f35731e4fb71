"""
Polygon utilities for the CFD domain generator.

Provides point-in-polygon tests, area calculations, convex hulls, ring
normalization and the regular-polygon approximations of circles and
ellipses used for round and oval domains.
"""

from typing import List, Sequence
import math

from ..models.geometry import Point2D, Polygon
from ..config import ROUND_POLY_POINTS


def point_in_polygon(point: Point2D, ring: List[Point2D]) -> bool:
    """
    Test if point is strictly inside a polygon ring (ray casting).

    Points on the boundary count as outside.

    Args:
        point: Point to test
        ring: List of polygon vertices (closing vertex optional)

    Returns:
        True if point lies in the bounded interior of the ring
    """
    n = len(ring)
    if n < 3:
        return False

    inside = False
    j = n - 1

    for i in range(n):
        xi, yi = ring[i].x, ring[i].y
        xj, yj = ring[j].x, ring[j].y

        if _point_on_segment(point, ring[i], ring[j]):
            return False

        # Ray casting
        if ((yi > point.y) != (yj > point.y)) and \
           (point.x < (xj - xi) * (point.y - yi) / (yj - yi) + xi):
            inside = not inside

        j = i

    return inside


def point_in_polygon_with_holes(point: Point2D, polygon: Polygon) -> bool:
    """
    Test if point is inside polygon (outer ring minus holes).

    Returns True only if strictly inside the outer ring AND not strictly
    inside any hole.

    Args:
        point: Point to test
        polygon: Polygon with outer ring and optional holes

    Returns:
        True if point is inside outer ring but not in any hole
    """
    if not point_in_polygon(point, polygon.outer_ring):
        return False

    for hole in polygon.holes:
        if point_in_polygon(point, hole):
            return False

    return True


def polygon_signed_area(ring: Sequence[Point2D]) -> float:
    """
    Compute signed area using shoelace formula.

    Args:
        ring: List of polygon vertices

    Returns:
        Signed area (positive = CCW, negative = CW)
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


def polygon_area(ring: Sequence[Point2D]) -> float:
    """Compute unsigned area of polygon."""
    return abs(polygon_signed_area(ring))


def convex_hull(points: Sequence[Point2D]) -> List[Point2D]:
    """
    Compute convex hull of points using monotone chain algorithm.

    Collinear points on the hull boundary are dropped.

    Args:
        points: List of points

    Returns:
        List of hull vertices in CCW order
    """
    unique = sorted(set(points), key=lambda p: (p.x, p.y))
    if len(unique) < 3:
        return unique

    # Build lower hull
    lower: List[Point2D] = []
    for p in unique:
        while len(lower) >= 2 and _cross(lower[-2], lower[-1], p) <= 0:
            lower.pop()
        lower.append(p)

    # Build upper hull
    upper: List[Point2D] = []
    for p in reversed(unique):
        while len(upper) >= 2 and _cross(upper[-2], upper[-1], p) <= 0:
            upper.pop()
        upper.append(p)

    # Concatenate (remove last point of each half as it's repeated)
    return lower[:-1] + upper[:-1]


def _cross(o: Point2D, a: Point2D, b: Point2D) -> float:
    """Cross product of vectors OA and OB."""
    return (a.x - o.x) * (b.y - o.y) - (a.y - o.y) * (b.x - o.x)


def _point_on_segment(p: Point2D, a: Point2D, b: Point2D,
                      tolerance: float = 1e-9) -> bool:
    """Check if point is on line segment (within tolerance)."""
    ab_x = b.x - a.x
    ab_y = b.y - a.y

    ap_x = p.x - a.x
    ap_y = p.y - a.y

    # Cross product (should be ~0 if collinear)
    cross = abs(ab_x * ap_y - ab_y * ap_x)

    ab_len = math.sqrt(ab_x * ab_x + ab_y * ab_y)
    if ab_len < 1e-12:
        return p.distance_to(a) < tolerance

    # Distance from line
    if cross / ab_len > tolerance:
        return False

    # Check if projection is within segment
    t = (ap_x * ab_x + ap_y * ab_y) / (ab_len * ab_len)

    return -tolerance <= t <= 1 + tolerance


def is_clockwise(ring: Sequence[Point2D]) -> bool:
    """Check if polygon ring is clockwise (negative area)."""
    return polygon_signed_area(ring) < 0


def ensure_ccw(ring: List[Point2D]) -> List[Point2D]:
    """Ensure ring is counter-clockwise, reversing if needed."""
    if is_clockwise(ring):
        return list(reversed(ring))
    return ring


def ensure_cw(ring: List[Point2D]) -> List[Point2D]:
    """Ensure ring is clockwise, reversing if needed."""
    if not is_clockwise(ring):
        return list(reversed(ring))
    return ring


def strip_closing_vertex(ring: List[Point2D]) -> List[Point2D]:
    """Drop the last vertex if it repeats the first one."""
    if len(ring) > 1 and ring[0] == ring[-1]:
        return ring[:-1]
    return ring


def normalize_polygon(outer: List[Point2D],
                      holes: Sequence[List[Point2D]] = ()) -> Polygon:
    """
    Build a polygon following the ring conventions.

    Strips duplicated closing vertices, orients the outer ring CCW and
    holes CW. No other repair is attempted.
    """
    return Polygon(
        outer_ring=ensure_ccw(strip_closing_vertex(list(outer))),
        holes=[ensure_cw(strip_closing_vertex(list(h))) for h in holes],
    )


def make_round_polygon(
    center: Point2D,
    radius: float,
    num_points: int = ROUND_POLY_POINTS
) -> Polygon:
    """
    Regular polygon approximating a circle.

    Vertices lie on the circle, starting at angle 0 and going CCW.

    Args:
        center: Circle center
        radius: Circle radius
        num_points: Number of vertices

    Returns:
        CCW polygon
    """
    step = 2 * math.pi / num_points
    return Polygon(outer_ring=make_arc(center, radius, radius, 0.0, num_points, step))


def make_arc(
    center: Point2D,
    radius_x: float,
    radius_y: float,
    start_angle: float,
    num_points: int,
    step: float
) -> List[Point2D]:
    """
    Sample an elliptical arc.

    Args:
        center: Ellipse center
        radius_x: Semi-axis along X
        radius_y: Semi-axis along Y
        start_angle: Angle of the first sample (radians)
        num_points: Number of samples
        step: Angular step between samples (radians)

    Returns:
        Arc vertices in sampling order
    """
    points = []
    for i in range(num_points):
        ang = start_angle + i * step
        points.append(Point2D(
            center.x + radius_x * math.cos(ang),
            center.y + radius_y * math.sin(ang)
        ))
    return points
