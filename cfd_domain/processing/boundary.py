"""
BPG domain boundary synthesis for the CFD domain generator.

The boundary is built in a flow-aligned local frame (flow along +X), so
"front" is the upstream -X side, "back" the downstream +X side, "right"
the -Y side and "left" the +Y side. The result is rotated back into the
global frame.

Shapes:
- ROUND: circle around the point of interest enclosing every candidate
  point plus the radial margin
- RECTANGLE: candidate bounding box pushed out by per-side margins
- OVAL: two half ellipses (front and back) sharing the side radius
"""

from dataclasses import dataclass
from typing import List, Sequence
import logging
import math

from ..config import (
    BPGDomainSize,
    DomainShape,
    OVAL_HALF_POINTS,
    ROUND_POLY_POINTS,
)
from ..errors import GeometryDegenerate
from ..models.feature import Building
from ..models.geometry import BBox, ORIGIN, Point2D, Polygon
from ..utils.math_utils import flow_angle, midpoint, rotate_point, rotate_points
from ..utils.polygon_utils import make_arc, make_round_polygon, point_in_polygon

logger = logging.getLogger(__name__)


@dataclass
class SynthesizedBoundary:
    """
    Domain boundary produced by one synthesis run.

    Attributes:
        local_polygon: Boundary in the flow-aligned frame
        polygon: Boundary in the global frame
        top_height: Height of the domain top
        angle: Flow angle used for the rotation (radians)
        enlarge_ratio: Enlargement factor applied
    """
    local_polygon: Polygon
    polygon: Polygon
    top_height: float
    angle: float
    enlarge_ratio: float = 1.0


class DomainBoundarySynthesizer:
    """
    Build BPG domain boundaries of a fixed shape and margin set.

    Args:
        shape: Domain topology
        size: Margins in multiples of the highest building height
    """

    def __init__(self, shape: DomainShape, size: BPGDomainSize):
        self.shape = shape
        self.size = size

    def synthesize(
        self,
        candidate_points: Sequence[Point2D],
        flow_direction: Point2D,
        h_max: float,
        enlarge_ratio: float = 1.0,
        point_of_interest: Point2D = ORIGIN
    ) -> SynthesizedBoundary:
        """
        Build the domain boundary.

        Args:
            candidate_points: Points the domain must enclose (global frame)
            flow_direction: Wind direction vector
            h_max: Height of the highest building in scope
            enlarge_ratio: Enlargement factor (1.0 = plain BPG sizing)
            point_of_interest: Center of round domains

        Returns:
            SynthesizedBoundary

        Raises:
            GeometryDegenerate: If there are no candidate points
        """
        if not candidate_points:
            raise GeometryDegenerate("Cannot build domain boundary: no candidate points")

        angle = flow_angle(flow_direction)
        local_points = rotate_points(candidate_points, -angle)

        if self.shape == DomainShape.ROUND:
            local_poi = rotate_point(point_of_interest, -angle)
            ring = self._round(local_points, local_poi, h_max, enlarge_ratio)
        elif self.shape == DomainShape.RECTANGLE:
            ring = self._rectangle(local_points, h_max, enlarge_ratio)
        else:
            ring = self._oval(local_points, h_max, enlarge_ratio)

        top_height = h_max * self.size.top
        if self.shape == DomainShape.ROUND:
            top_height *= enlarge_ratio

        local_polygon = Polygon(outer_ring=ring)
        polygon = Polygon(outer_ring=rotate_points(ring, angle))

        logger.debug(
            f"{self.shape.value} boundary: {len(ring)} vertices, "
            f"top height {top_height:.2f}m, enlarge ratio {enlarge_ratio:.3f}"
        )

        return SynthesizedBoundary(
            local_polygon=local_polygon,
            polygon=polygon,
            top_height=top_height,
            angle=angle,
            enlarge_ratio=enlarge_ratio,
        )

    def _round(
        self,
        points: Sequence[Point2D],
        center: Point2D,
        h_max: float,
        enlarge_ratio: float
    ) -> List[Point2D]:
        max_dist = max(center.distance_to(p) for p in points)
        radius = enlarge_ratio * (max_dist + h_max * self.size.radial)
        logger.info(f"Calculated boundary radius is {radius:.2f}m")
        return make_round_polygon(center, radius, ROUND_POLY_POINTS).outer_ring

    def _rectangle(
        self,
        points: Sequence[Point2D],
        h_max: float,
        enlarge_ratio: float
    ) -> List[Point2D]:
        """
        Push each bbox corner out along its two adjacent sides.

        Corner i sits between bbox edges i-1 and i; edge margins are
        front (-X), right (-Y), back (+X), left (+Y) for corners
        starting at the min corner. With enlarge_ratio > 1 the lower and
        upper corners move further apart by (enlarge_ratio - 1) times half
        the front face, widening the cross-section.
        """
        bbox = BBox.from_points(points)
        size = self.size

        translate = [
            Point2D(-size.front, 0.0),
            Point2D(0.0, -size.right * enlarge_ratio),
            Point2D(size.back, 0.0),
            Point2D(0.0, size.left * enlarge_ratio),
        ]

        widen = Point2D(0.0, -bbox.height / 2) * (enlarge_ratio - 1)
        additional = [widen, widen, -widen, -widen]

        ring = []
        for i, corner in enumerate(bbox.corners()):
            ring.append(
                corner + (translate[i] + translate[(i + 1) % 4]) * h_max + additional[i]
            )

        logger.info(
            f"Calculated boundary extent is "
            f"{ring[1].x - ring[0].x:.2f}m x {ring[3].y - ring[0].y:.2f}m"
        )
        return ring

    def _oval(
        self,
        points: Sequence[Point2D],
        h_max: float,
        enlarge_ratio: float
    ) -> List[Point2D]:
        """
        Two half ellipses around the bbox centroid.

        Each bbox edge contributes its midpoint distance from the centroid
        plus its margin. The upstream half uses the front radius along X,
        the downstream half the back radius; both share the side radius.

        Radii are measured to the edge midpoints, not the corners, so a
        candidate near a bbox corner can lie outside the oval when the
        margins are small compared with the bbox. This matches the
        established oval construction and is not corrected here.
        """
        bbox = BBox.from_points(points)
        size = self.size
        corners = bbox.corners()
        center = bbox.center

        # Edges starting at the min corner: -Y side, +X side, +Y side, -X side
        margins = [size.right, size.back, size.left, size.front]
        distances = []
        for i in range(4):
            mid = midpoint(corners[i], corners[(i + 1) % 4])
            distances.append(center.distance_to(mid) + margins[i] * h_max)

        side = max(distances[0], distances[2]) * enlarge_ratio
        front = distances[3]
        back = distances[1]

        logger.info(
            f"Calculated boundary radii are front {front:.2f}m, "
            f"back {back:.2f}m, side {side:.2f}m"
        )

        step = math.pi / OVAL_HALF_POINTS
        ring = make_arc(center, front, side, math.pi / 2, OVAL_HALF_POINTS, step)
        ring += make_arc(center, back, side, 3 * math.pi / 2, OVAL_HALF_POINTS, step)
        return ring


def collect_candidate_points(
    influence_region: Polygon,
    buildings: Sequence[Building]
) -> List[Point2D]:
    """
    Points the automatic domain boundary must enclose.

    The influence region vertices plus every footprint vertex of active
    buildings that is not strictly inside the influence region.
    """
    points = list(influence_region.outer_ring)
    for building in buildings:
        if not building.is_active():
            continue
        for p in building.footprint().outer_ring:
            if not point_in_polygon(p, influence_region.outer_ring):
                points.append(p)
    return points


def max_building_height(buildings: Sequence[Building]) -> float:
    """Height of the highest active building (0 if there are none)."""
    heights = [b.height for b in buildings if b.is_active()]
    return max(heights) if heights else 0.0
