"""
Region selection for the CFD domain generator.

Turns a RegionSpec (automatic, radius or explicit polygon) into a
concrete polygon. The same logic serves the influence region and the
domain boundary; only the automatic case differs, so the caller passes
the callable that computes it.
"""

from typing import Callable
import logging

from ..errors import ConfigurationError
from ..models.geometry import Point2D, Polygon
from ..models.region import Automatic, Explicit, Radius, RegionSpec
from ..utils.polygon_utils import make_round_polygon

logger = logging.getLogger(__name__)


class RegionSelector:
    """Resolve a RegionSpec into a polygon."""

    def select(
        self,
        spec: RegionSpec,
        point_of_interest: Point2D,
        automatic: Callable[[], Polygon]
    ) -> Polygon:
        """
        Produce the region polygon described by spec.

        Args:
            spec: Region specification
            point_of_interest: Center of radius-based regions
            automatic: Computes the region when spec is Automatic

        Returns:
            Region polygon

        Raises:
            ConfigurationError: If spec is not a valid RegionSpec
        """
        if isinstance(spec, Explicit):
            if len(spec.polygon.outer_ring) < 3:
                raise ConfigurationError(
                    f"Region polygon needs at least 3 vertices, got {len(spec.polygon.outer_ring)}"
                )
            logger.debug(f"Using explicit region polygon ({len(spec.polygon)} vertices)")
            return spec.polygon

        if isinstance(spec, Radius):
            if spec.radius <= 0:
                raise ConfigurationError(f"Region radius must be positive, got {spec.radius}")
            logger.debug(f"Using circular region, radius {spec.radius:.2f}m")
            return make_round_polygon(point_of_interest, spec.radius)

        if isinstance(spec, Automatic):
            return automatic()

        raise ConfigurationError(f"Unrecognized region specification: {spec!r}")
