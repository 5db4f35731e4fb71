"""Tests for the constrained triangulation arena."""

import pytest

from cfd_domain.errors import GeometryDegenerate
from cfd_domain.models.geometry import Point2D
from cfd_domain.utils.triangulation import (
    ConstrainedTriangulation,
    OUTER_FACE,
    UNVISITED,
)

from conftest import rect_ring


def total_area(cdt: ConstrainedTriangulation) -> float:
    return sum(cdt.face_area(face) for face in range(cdt.num_faces))


class TestFromLoops:
    def test_single_square(self):
        cdt = ConstrainedTriangulation.from_loops([rect_ring(0, 0, 10, 10)])

        assert len(cdt.vertices) == 4
        assert cdt.num_faces == 2
        assert total_area(cdt) == pytest.approx(100.0)

    def test_hull_edges_of_loop_are_constrained(self):
        cdt = ConstrainedTriangulation.from_loops([rect_ring(0, 0, 10, 10)])

        hull_edges = list(cdt.outer_edges())
        assert len(hull_edges) == 4
        assert all(cdt.is_constrained(face, edge) for face, edge in hull_edges)

    def test_diagonal_is_unconstrained(self):
        cdt = ConstrainedTriangulation.from_loops([rect_ring(0, 0, 10, 10)])

        inner = [
            (face, edge)
            for face in range(cdt.num_faces)
            for edge in range(3)
            if cdt.neighbor(face, edge) != OUTER_FACE
        ]
        assert len(inner) == 2
        assert not any(cdt.is_constrained(face, edge) for face, edge in inner)

    def test_free_points(self):
        cdt = ConstrainedTriangulation.from_loops(
            [rect_ring(0, 0, 10, 10)], points=[Point2D(5, 5)]
        )

        assert len(cdt.vertices) == 5
        assert cdt.num_faces == 4
        assert total_area(cdt) == pytest.approx(100.0)

    def test_shared_vertices_are_merged(self):
        cdt = ConstrainedTriangulation.from_loops([
            rect_ring(0, 0, 10, 10),
            rect_ring(10, 0, 20, 10),
        ])

        assert len(cdt.vertices) == 6
        assert total_area(cdt) == pytest.approx(200.0)

    def test_hull_without_constraints_is_kept(self):
        # Two separate squares: the gap between them is triangulated too
        cdt = ConstrainedTriangulation.from_loops([
            rect_ring(0, 0, 10, 10),
            rect_ring(20, 0, 30, 10),
        ])

        assert total_area(cdt) == pytest.approx(300.0)
        unconstrained_hull = [
            (face, edge) for face, edge in cdt.outer_edges()
            if not cdt.is_constrained(face, edge)
        ]
        assert len(unconstrained_hull) == 2

    def test_face_info_starts_unvisited(self):
        cdt = ConstrainedTriangulation.from_loops([rect_ring(0, 0, 10, 10)])

        assert cdt.face_info.nesting_level == [UNVISITED] * cdt.num_faces
        assert cdt.face_info.layer_tag == [None] * cdt.num_faces
        assert cdt.face_info.level(OUTER_FACE) == UNVISITED


class TestAdjacency:
    def test_outer_face_touches_hull_faces(self):
        cdt = ConstrainedTriangulation.from_loops([rect_ring(0, 0, 10, 10)])

        adjacent = list(cdt.adjacent(OUTER_FACE))
        assert len(adjacent) == 4
        assert {face for face, _ in adjacent} == {0, 1}
        assert all(constrained for _, constrained in adjacent)

    def test_face_neighbors(self):
        cdt = ConstrainedTriangulation.from_loops([rect_ring(0, 0, 10, 10)])

        neighbors = [face for face, _ in cdt.adjacent(0)]
        assert neighbors.count(OUTER_FACE) == 2
        assert 1 in neighbors


class TestDegenerate:
    def test_too_few_vertices(self):
        with pytest.raises(GeometryDegenerate):
            ConstrainedTriangulation.from_loops([[Point2D(0, 0), Point2D(1, 1)]])

    def test_duplicates_collapse(self):
        with pytest.raises(GeometryDegenerate):
            ConstrainedTriangulation.from_loops(
                [[Point2D(0, 0), Point2D(1, 1), Point2D(0, 0)]]
            )

    def test_collinear_vertices(self):
        with pytest.raises(GeometryDegenerate):
            ConstrainedTriangulation.from_loops(
                [[Point2D(0, 0), Point2D(1, 1), Point2D(3, 3)]]
            )
