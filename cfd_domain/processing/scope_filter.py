"""
Influence-region scope filtering for the CFD domain generator.

Buildings that do not reach into the influence region play no part in
the domain boundary or the blockage ratio. The filter never changes the
buildings themselves; it returns the subset the later stages consume.
"""

from typing import List, Tuple
from dataclasses import dataclass
from enum import Enum
import logging

from ..models.geometry import Polygon
from ..models.feature import Building
from ..utils.polygon_utils import point_in_polygon

logger = logging.getLogger(__name__)


class ScopeReason(Enum):
    """Reason for leaving a building out of scope."""
    INACTIVE = "inactive"
    OUTSIDE_REGION = "outside_influence_region"


@dataclass
class ScopeResult:
    """Result of scope filtering."""
    kept: List[Building]
    filtered: List[Tuple[str, ScopeReason]]  # (feature_id, reason)


def filter_buildings_by_region(
    buildings: List[Building],
    region: Polygon
) -> ScopeResult:
    """
    Keep buildings with at least one footprint vertex inside the region.

    Vertices on the region boundary count as outside. Inactive buildings
    are always filtered.

    Args:
        buildings: Buildings to filter
        region: Influence region polygon

    Returns:
        ScopeResult with kept buildings and filtered IDs with reasons
    """
    kept = []
    filtered = []

    region_bbox = region.bbox

    for building in buildings:
        if not building.is_active():
            filtered.append((building.feature_id, ScopeReason.INACTIVE))
            continue

        footprint = building.footprint()
        bbox = footprint.bbox

        # Disjoint bounding boxes cannot share a vertex
        is_far = (
            bbox.max_x < region_bbox.min_x or
            bbox.min_x > region_bbox.max_x or
            bbox.max_y < region_bbox.min_y or
            bbox.min_y > region_bbox.max_y
        )

        if not is_far and any(
            point_in_polygon(p, region.outer_ring) for p in footprint.outer_ring
        ):
            kept.append(building)
        else:
            filtered.append((building.feature_id, ScopeReason.OUTSIDE_REGION))
            logger.debug(
                f"Filtered building {building.feature_id}: outside influence region "
                f"(bbox: [{bbox.min_x:.1f}, {bbox.min_y:.1f}] - "
                f"[{bbox.max_x:.1f}, {bbox.max_y:.1f}])"
            )

    if filtered:
        logger.info(
            f"Filtered {len(filtered)} buildings outside influence region "
            f"(kept {len(kept)})"
        )

    return ScopeResult(kept=kept, filtered=filtered)
