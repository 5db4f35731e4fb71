"""
Even-odd classification of a constrained triangulation.

Flooding starts from the unbounded outer face at level 0. Crossing an
unconstrained edge keeps the level, crossing a constraint edge raises it
by one. With non-overlapping closed loops, faces inside an odd number of
loops end up on odd levels.

Optionally each flooded region (level > 0) is tagged with the output
layer of the first feature whose footprint contains the region's seed
face. Regions inside buildings stay untagged.
"""

from collections import deque
from typing import Deque, Optional, Sequence, Tuple
import logging

from ..models.feature import FeatureKind, PolyFeature
from ..utils.polygon_utils import point_in_polygon_with_holes
from ..utils.triangulation import ConstrainedTriangulation, OUTER_FACE, UNVISITED

logger = logging.getLogger(__name__)


class ConstrainedDomainClassifier:
    """Breadth-first nesting-level flood over a ConstrainedTriangulation."""

    def classify(
        self,
        cdt: ConstrainedTriangulation,
        ordered_features: Sequence[PolyFeature] = ()
    ) -> None:
        """
        Assign nesting levels (and layer tags) to every face.

        Results are written to `cdt.face_info`; previous values are reset.

        Args:
            cdt: Triangulation to classify
            ordered_features: Features tested in order for region tagging
        """
        info = cdt.face_info
        info.reset()

        # (from_face, to_face) pairs across constraint edges, FIFO order
        border: Deque[Tuple[int, int]] = deque()

        self._flood(cdt, OUTER_FACE, 0, border, ordered_features)
        regions = 1

        while border:
            from_face, to_face = border.popleft()
            if info.level(to_face) != UNVISITED:
                continue
            self._flood(cdt, to_face, info.level(from_face) + 1, border, ordered_features)
            regions += 1

        logger.debug(f"Classified {cdt.num_faces} faces into {regions} regions")

    def _flood(
        self,
        cdt: ConstrainedTriangulation,
        seed: int,
        level: int,
        border: Deque[Tuple[int, int]],
        features: Sequence[PolyFeature]
    ) -> None:
        """Flood one region bounded by constraint edges."""
        info = cdt.face_info
        if info.level(seed) != UNVISITED:
            return

        tag = None
        if level > 0 and features:
            tag = self._region_tag(cdt, seed, features)

        info.set_level(seed, level)
        queue: Deque[int] = deque([seed])

        while queue:
            face = queue.popleft()
            if face != OUTER_FACE:
                info.layer_tag[face] = tag

            for neighbor, constrained in cdt.adjacent(face):
                if info.level(neighbor) != UNVISITED:
                    continue
                if constrained:
                    border.append((face, neighbor))
                else:
                    info.set_level(neighbor, level)
                    queue.append(neighbor)

    @staticmethod
    def _region_tag(
        cdt: ConstrainedTriangulation,
        seed: int,
        features: Sequence[PolyFeature]
    ) -> Optional[int]:
        """Layer of the first active feature containing the seed face."""
        centroid = cdt.face_centroid(seed)
        for feature in features:
            if not feature.is_active():
                continue
            if point_in_polygon_with_holes(centroid, feature.footprint()):
                if feature.kind() == FeatureKind.BUILDING:
                    return None
                return feature.layer_id
        return None
