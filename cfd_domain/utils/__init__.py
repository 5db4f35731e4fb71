"""
Utility functions for the CFD domain generator.
"""

from .math_utils import (
    flow_angle,
    rotate_point,
    rotate_points,
)
from .polygon_utils import (
    point_in_polygon,
    point_in_polygon_with_holes,
    polygon_signed_area,
    convex_hull,
    make_round_polygon,
)
from .triangulation import ConstrainedTriangulation, FaceInfo

__all__ = [
    'flow_angle',
    'rotate_point',
    'rotate_points',
    'point_in_polygon',
    'point_in_polygon_with_holes',
    'polygon_signed_area',
    'convex_hull',
    'make_round_polygon',
    'ConstrainedTriangulation',
    'FaceInfo',
]
