"""
Surface layer tagging of the domain terrain.

The domain boundary and the rings of every active feature are overlaid
in one constrained triangulation. Each region of the triangulation takes
the output layer of the first feature containing it, so the order of the
feature list decides overlaps. The per-layer areas inside the domain
are reported.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence
import logging

from ..models.feature import PolyFeature
from ..models.geometry import Polygon
from ..utils.polygon_utils import point_in_polygon
from ..utils.triangulation import ConstrainedTriangulation
from .classifier import ConstrainedDomainClassifier

logger = logging.getLogger(__name__)


@dataclass
class LayerSummary:
    """
    Area of the domain terrain per output layer.

    Attributes:
        layer_areas: Area per surface layer id
        untagged_area: Area of plain terrain and building footprints
        num_faces: Triangles inside the domain
    """
    layer_areas: Dict[int, float] = field(default_factory=dict)
    untagged_area: float = 0.0
    num_faces: int = 0

    @property
    def total_area(self) -> float:
        return self.untagged_area + sum(self.layer_areas.values())


def tag_surface_layers(
    boundary: Polygon,
    features: Sequence[PolyFeature],
    classifier: Optional[ConstrainedDomainClassifier] = None
) -> LayerSummary:
    """
    Classify the domain terrain into surface layers.

    Args:
        boundary: Domain boundary polygon
        features: Features in priority order (first match wins)
        classifier: Classifier to use (default: a new one)

    Returns:
        LayerSummary of the faces inside the boundary
    """
    classifier = classifier or ConstrainedDomainClassifier()
    active = [f for f in features if f.is_active()]

    loops = [boundary.outer_ring]
    for feature in active:
        loops.extend(feature.footprint().rings())

    cdt = ConstrainedTriangulation.from_loops(loops)
    classifier.classify(cdt, active)

    summary = LayerSummary()
    info = cdt.face_info
    for face in range(cdt.num_faces):
        if info.nesting_level[face] <= 0:
            continue
        if not point_in_polygon(cdt.face_centroid(face), boundary.outer_ring):
            continue

        area = cdt.face_area(face)
        tag = info.layer_tag[face]
        summary.num_faces += 1
        if tag is None:
            summary.untagged_area += area
        else:
            summary.layer_areas[tag] = summary.layer_areas.get(tag, 0.0) + area

    for tag, area in sorted(summary.layer_areas.items()):
        logger.info(f"Surface layer {tag}: {area:.1f}m2")
    logger.info(f"Untagged terrain: {summary.untagged_area:.1f}m2")

    return summary
