"""
Blockage ratio estimation for the CFD domain generator.

Buildings are projected onto the plane normal to the flow: each footprint
vertex contributes its cross-flow coordinate paired with its base height
and with the roof height. The convex hull of those points approximates
the building's frontal silhouette. Hulls are overlaid in one constrained
triangulation. Every face enclosed by at least one hull (nesting level
above 0) blocks the flow: overlapping silhouettes count once and
crossing silhouettes on different base heights are never read as holes.
The blocked area is compared with the domain cross-section.
"""

from typing import List, Optional, Sequence
import logging

from ..errors import GeometryDegenerate
from ..models.feature import Building
from ..models.geometry import BBox, Point2D, Polygon
from ..utils.math_utils import rotate_points
from ..utils.polygon_utils import convex_hull, polygon_area
from ..utils.triangulation import ConstrainedTriangulation
from .classifier import ConstrainedDomainClassifier

logger = logging.getLogger(__name__)


def project_building(building: Building, angle: float) -> List[Point2D]:
    """
    Frontal silhouette of a building as seen along the flow.

    Args:
        building: Building to project
        angle: Flow angle (radians)

    Returns:
        Convex hull (CCW) in (cross-flow, height) coordinates

    Raises:
        GeometryDegenerate: If the silhouette has zero area
    """
    local = rotate_points(building.footprint().outer_ring, -angle)

    projected = []
    for p, base in zip(local, building.base_heights):
        projected.append(Point2D(p.y, base))
        projected.append(Point2D(p.y, building.height))

    hull = convex_hull(projected)
    if len(hull) < 3 or polygon_area(hull) <= 0:
        raise GeometryDegenerate(
            f"Building {building.feature_id} has a zero-area frontal projection"
        )
    return hull


class BlockageRatioEstimator:
    """Fraction of the domain cross-section blocked by buildings."""

    def __init__(self, classifier: Optional[ConstrainedDomainClassifier] = None):
        self.classifier = classifier or ConstrainedDomainClassifier()

    def estimate(
        self,
        buildings: Sequence[Building],
        angle: float,
        local_boundary: Polygon,
        top_height: float
    ) -> float:
        """
        Compute the blockage ratio.

        Args:
            buildings: Buildings in scope (inactive ones are skipped)
            angle: Flow angle (radians)
            local_boundary: Domain boundary in the flow-aligned frame
            top_height: Height of the domain top

        Returns:
            Blocked area divided by the domain cross-section area

        Raises:
            GeometryDegenerate: On zero-area silhouettes or a zero
                cross-section
        """
        bbox = BBox.from_points(local_boundary.outer_ring)
        cross_area = bbox.height * top_height
        if cross_area <= 0:
            raise GeometryDegenerate(
                f"Domain cross-section has zero area "
                f"(width {bbox.height:.2f}m, top height {top_height:.2f}m)"
            )

        hulls = [project_building(b, angle) for b in buildings if b.is_active()]
        if not hulls:
            logger.info("No active buildings, blockage ratio is 0")
            return 0.0

        cdt = ConstrainedTriangulation.from_loops(hulls)
        self.classifier.classify(cdt)

        block_area = 0.0
        levels = cdt.face_info.nesting_level
        for face in range(cdt.num_faces):
            if levels[face] > 0:
                block_area += cdt.face_area(face)

        ratio = block_area / cross_area
        logger.info(
            f"Blockage ratio {ratio * 100:.2f}% "
            f"(blocked {block_area:.1f}m2 of {cross_area:.1f}m2 from {len(hulls)} buildings)"
        )
        return ratio
