"""
Mathematical utilities for the CFD domain generator.

Provides rotations into and out of the flow-aligned frame, and small
triangle helpers used by the triangulation arena.
"""

from typing import Iterable, List
import math

from ..models.geometry import Point2D


def flow_angle(flow_direction: Point2D) -> float:
    """
    Angle of the flow direction measured from the +X axis.

    Args:
        flow_direction: Flow vector (need not be normalized)

    Returns:
        Angle in radians in (-pi, pi]
    """
    return math.atan2(flow_direction.y, flow_direction.x)


def rotate_point(p: Point2D, angle: float) -> Point2D:
    """
    Rotate point about the origin.

    Args:
        p: Point to rotate
        angle: Rotation angle in radians (CCW positive)

    Returns:
        Rotated point
    """
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return Point2D(
        p.x * cos_a - p.y * sin_a,
        p.x * sin_a + p.y * cos_a
    )


def rotate_points(points: Iterable[Point2D], angle: float) -> List[Point2D]:
    """Rotate every point about the origin by angle (radians)."""
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return [
        Point2D(p.x * cos_a - p.y * sin_a, p.x * sin_a + p.y * cos_a)
        for p in points
    ]


def midpoint(a: Point2D, b: Point2D) -> Point2D:
    """Midpoint of segment ab."""
    return Point2D((a.x + b.x) / 2, (a.y + b.y) / 2)


def triangle_area(v0: Point2D, v1: Point2D, v2: Point2D) -> float:
    """Compute unsigned area of triangle."""
    return 0.5 * abs(
        (v1.x - v0.x) * (v2.y - v0.y) -
        (v2.x - v0.x) * (v1.y - v0.y)
    )


def triangle_centroid(v0: Point2D, v1: Point2D, v2: Point2D) -> Point2D:
    """Centroid of triangle."""
    return Point2D(
        (v0.x + v1.x + v2.x) / 3.0,
        (v0.y + v1.y + v2.y) / 3.0
    )
