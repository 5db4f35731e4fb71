"""
Automatic influence region for the CFD domain generator.

The BPG rules size the influence region from the building the point of
interest lies in: a circle of three times that building's largest
planar dimension.
"""

from typing import Callable, Optional, Sequence
import logging

from ..config import BPG_INFLUENCE_MULTIPLIER
from ..errors import ResolutionError
from ..models.feature import Building
from ..models.geometry import Point2D, Polygon
from ..models.reconstruction import ExtrudedFootprint, Reconstruction
from ..utils.polygon_utils import make_round_polygon, point_in_polygon_with_holes

logger = logging.getLogger(__name__)


ReconstructionFactory = Callable[[Building], Reconstruction]


def find_containing_building(
    buildings: Sequence[Building],
    point: Point2D
) -> Optional[Building]:
    """
    First building whose footprint strictly contains point.

    Active and inactive buildings are both considered, in stored order.
    """
    for building in buildings:
        if point_in_polygon_with_holes(point, building.footprint()):
            return building
    return None


class InfluenceRegionResolver:
    """
    Derive the influence region from the building of interest.

    Args:
        reconstruction_factory: Builds the 3D reconstruction of one
            building; defaults to the extruded footprint.
    """

    def __init__(self, reconstruction_factory: ReconstructionFactory = ExtrudedFootprint):
        self.reconstruction_factory = reconstruction_factory

    def resolve(self, buildings: Sequence[Building], point_of_interest: Point2D) -> Polygon:
        """
        Compute the automatic influence region.

        Args:
            buildings: All buildings, in stored order
            point_of_interest: Point of interest

        Returns:
            Circular polygon centred at the point of interest

        Raises:
            ResolutionError: If no building contains the point or its
                reconstruction fails
        """
        building = find_containing_building(buildings, point_of_interest)
        if building is None:
            raise ResolutionError(
                f"Unable to compute influence region: no containing building "
                f"for point of interest ({point_of_interest.x:.2f}, {point_of_interest.y:.2f})"
            )

        logger.debug(f"Point of interest lies in building {building.feature_id}")

        try:
            reconstruction = self.reconstruction_factory(building)
            reconstruction.reconstruct()
            max_dimension = reconstruction.max_dimension()
            reconstruction.clear()
        except Exception as e:
            raise ResolutionError(
                f"Unable to compute influence region: reconstruction of building "
                f"{building.feature_id} failed: {e}"
            ) from e

        radius = BPG_INFLUENCE_MULTIPLIER * max_dimension
        logger.info(
            f"Influence region radius {radius:.2f}m "
            f"(building {building.feature_id}, max dimension {max_dimension:.2f}m)"
        )

        return make_round_polygon(point_of_interest, radius)
