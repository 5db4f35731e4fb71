"""
Constrained triangulation for the CFD domain generator.

Wraps Shewchuk's Triangle (through the `triangle` package) into a flat
face arena: vertices, triangles and neighbour indices live in numpy
arrays, and the mutable classification metadata of each face lives in a
parallel FaceInfo side-table keyed by face index.

Constraint loops may overlap or cross each other; Triangle splits the
segments at their intersections and the resulting subsegments keep the
constraint marker.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, List, Optional, Sequence, Set, Tuple

import numpy as np
import triangle

from ..errors import GeometryDegenerate
from ..models.geometry import Point2D
from .math_utils import triangle_area, triangle_centroid

# Neighbour index standing for the unbounded outer face
OUTER_FACE = -1

# Level of faces not reached by a flood yet
UNVISITED = -1

# Boundary marker of inserted constraint segments. Triangle marks convex
# hull segments it adds itself with 1.
CONSTRAINT_MARKER = 2

# Triangle switches: PSLG input, keep the convex hull, output neighbours
TRIANGLE_SWITCHES = "pcn"


@dataclass
class FaceInfo:
    """
    Classification metadata of every face, indexed like the triangles.

    Attributes:
        nesting_level: Flood depth per face (UNVISITED before classification)
        layer_tag: Surface layer per face (None = untagged)
        outer_level: Level of the unbounded outer face
    """
    nesting_level: List[int] = field(default_factory=list)
    layer_tag: List[Optional[int]] = field(default_factory=list)
    outer_level: int = UNVISITED

    @classmethod
    def for_faces(cls, num_faces: int) -> 'FaceInfo':
        return cls(
            nesting_level=[UNVISITED] * num_faces,
            layer_tag=[None] * num_faces,
        )

    def reset(self) -> None:
        """Mark every face unvisited and untagged."""
        n = len(self.nesting_level)
        self.nesting_level = [UNVISITED] * n
        self.layer_tag = [None] * n
        self.outer_level = UNVISITED

    def level(self, face: int) -> int:
        if face == OUTER_FACE:
            return self.outer_level
        return self.nesting_level[face]

    def set_level(self, face: int, level: int) -> None:
        if face == OUTER_FACE:
            self.outer_level = level
        else:
            self.nesting_level[face] = level


class ConstrainedTriangulation:
    """
    Constrained triangulation of a set of closed loops and free points.

    Faces are identified by their index into `triangles`. The unbounded
    region outside the triangulated convex hull is the virtual face
    OUTER_FACE.
    """

    def __init__(
        self,
        vertices: np.ndarray,
        triangles: np.ndarray,
        neighbors: np.ndarray,
        constrained_edges: Set[FrozenSet[int]]
    ):
        self.vertices = vertices
        self.triangles = triangles
        self.neighbors = neighbors
        self.constrained_edges = constrained_edges
        self.face_info = FaceInfo.for_faces(len(triangles))

    @classmethod
    def from_loops(
        cls,
        loops: Sequence[Sequence[Point2D]],
        points: Sequence[Point2D] = ()
    ) -> 'ConstrainedTriangulation':
        """
        Triangulate closed constraint loops plus optional free points.

        Each loop is inserted independently as a closed chain of
        constraint segments; a loop must not repeat its first vertex.

        Args:
            loops: Constraint loops
            points: Extra unconstrained vertices

        Returns:
            ConstrainedTriangulation

        Raises:
            GeometryDegenerate: If the input spans no area
        """
        index: Dict[Tuple[float, float], int] = {}
        coords: List[Tuple[float, float]] = []

        def vertex_id(p: Point2D) -> int:
            key = (float(p.x), float(p.y))
            if key not in index:
                index[key] = len(coords)
                coords.append(key)
            return index[key]

        segments: List[Tuple[int, int]] = []
        for loop in loops:
            ids = [vertex_id(p) for p in loop]
            n = len(ids)
            for i in range(n):
                a, b = ids[i], ids[(i + 1) % n]
                if a != b:
                    segments.append((a, b))

        for p in points:
            vertex_id(p)

        if len(coords) < 3:
            raise GeometryDegenerate(
                f"Cannot triangulate {len(coords)} distinct vertices"
            )

        vertices = np.array(coords, dtype=np.float64)
        if not _spans_area(vertices):
            raise GeometryDegenerate("Cannot triangulate collinear vertices")

        tri_input = {'vertices': vertices}
        if segments:
            tri_input['segments'] = np.array(segments, dtype=np.int32)
            tri_input['segment_markers'] = np.full(
                (len(segments), 1), CONSTRAINT_MARKER, dtype=np.int32
            )

        result = triangle.triangulate(tri_input, TRIANGLE_SWITCHES)

        constrained: Set[FrozenSet[int]] = set()
        if segments and 'segment_markers' in result:
            markers = np.ravel(result['segment_markers'])
            for (a, b), marker in zip(result['segments'], markers):
                if marker == CONSTRAINT_MARKER:
                    constrained.add(frozenset((int(a), int(b))))

        return cls(
            vertices=result['vertices'],
            triangles=result['triangles'],
            neighbors=result['neighbors'],
            constrained_edges=constrained,
        )

    @property
    def num_faces(self) -> int:
        return len(self.triangles)

    def point(self, vertex: int) -> Point2D:
        x, y = self.vertices[vertex]
        return Point2D(float(x), float(y))

    def face_points(self, face: int) -> Tuple[Point2D, Point2D, Point2D]:
        a, b, c = self.triangles[face]
        return self.point(a), self.point(b), self.point(c)

    def face_area(self, face: int) -> float:
        return triangle_area(*self.face_points(face))

    def face_centroid(self, face: int) -> Point2D:
        return triangle_centroid(*self.face_points(face))

    def edge_vertices(self, face: int, edge: int) -> Tuple[int, int]:
        """Vertices of the edge opposite corner `edge` of a face."""
        tri = self.triangles[face]
        return int(tri[(edge + 1) % 3]), int(tri[(edge + 2) % 3])

    def is_constrained(self, face: int, edge: int) -> bool:
        return frozenset(self.edge_vertices(face, edge)) in self.constrained_edges

    def neighbor(self, face: int, edge: int) -> int:
        """Face across the edge opposite corner `edge` (OUTER_FACE on the hull)."""
        n = int(self.neighbors[face][edge])
        return n if n >= 0 else OUTER_FACE

    def outer_edges(self) -> Iterator[Tuple[int, int]]:
        """(face, edge) pairs on the convex hull, i.e. shared with the outer face."""
        for face in range(self.num_faces):
            for edge in range(3):
                if self.neighbors[face][edge] < 0:
                    yield face, edge

    def adjacent(self, face: int) -> Iterator[Tuple[int, bool]]:
        """
        Faces adjacent to `face` with the constraint flag of the shared edge.

        The outer face is adjacent to every face with a hull edge.
        """
        if face == OUTER_FACE:
            for hull_face, edge in self.outer_edges():
                yield hull_face, self.is_constrained(hull_face, edge)
            return

        for edge in range(3):
            yield self.neighbor(face, edge), self.is_constrained(face, edge)


def _spans_area(vertices: np.ndarray, tolerance: float = 1e-12) -> bool:
    """Check that not all vertices are collinear."""
    origin = vertices[0]
    rel = vertices[1:] - origin
    if not np.any(np.abs(rel) > 0):
        return False
    # Cross product with the farthest vertex from the origin
    far = rel[np.argmax(np.hypot(rel[:, 0], rel[:, 1]))]
    cross = rel[:, 0] * far[1] - rel[:, 1] * far[0]
    scale = float(np.max(np.hypot(rel[:, 0], rel[:, 1]))) ** 2
    return bool(np.max(np.abs(cross)) > tolerance * scale)
