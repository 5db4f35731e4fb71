"""Tests for the automatic influence region and its reconstruction collaborator."""

import math

import pytest

from cfd_domain.errors import ReconstructionError, ResolutionError
from cfd_domain.models.geometry import Point2D
from cfd_domain.models.reconstruction import ExtrudedFootprint, Reconstruction
from cfd_domain.processing.influence_region import (
    InfluenceRegionResolver,
    find_containing_building,
)

ORIGIN = Point2D(0.0, 0.0)


class RecordingReconstruction(Reconstruction):
    """Fixed-size reconstruction that records its lifecycle."""

    log = []

    def __init__(self, building, dimension=7.0, fail=None):
        self.building = building
        self.dimension = dimension
        self.fail = fail

    def reconstruct(self):
        self.log.append(("reconstruct", self.building.feature_id))
        if self.fail:
            raise self.fail

    def max_dimension(self):
        return self.dimension

    def clear(self):
        self.log.append(("clear", self.building.feature_id))


@pytest.fixture(autouse=True)
def reset_log():
    RecordingReconstruction.log = []


def max_radius(polygon, center=ORIGIN):
    return max(center.distance_to(p) for p in polygon.outer_ring)


class TestResolve:
    def test_end_to_end_radius(self, central_building):
        region = InfluenceRegionResolver().resolve([central_building], ORIGIN)

        expected = 3 * math.sqrt(10 ** 2 + 10 ** 2)
        assert expected == pytest.approx(42.43, abs=0.01)
        assert len(region.outer_ring) == 360
        for p in region.outer_ring:
            assert ORIGIN.distance_to(p) == pytest.approx(expected)

    def test_no_containing_building(self, make_building):
        buildings = [make_building("far", 100, 100, 110, 110)]

        with pytest.raises(ResolutionError, match="no containing building"):
            InfluenceRegionResolver().resolve(buildings, ORIGIN)

    def test_point_on_footprint_boundary_is_outside(self, make_building):
        buildings = [make_building("corner", 0, 0, 10, 10)]

        with pytest.raises(ResolutionError):
            InfluenceRegionResolver().resolve(buildings, ORIGIN)

    def test_inactive_building_still_selected(self, make_building):
        building = make_building("inactive", -5, -5, 5, 5, active=False)

        region = InfluenceRegionResolver().resolve([building], ORIGIN)

        assert max_radius(region) == pytest.approx(3 * math.sqrt(200))

    def test_first_containing_building_wins(self, make_building):
        small = make_building("small", -1, -1, 1, 1)
        large = make_building("large", -20, -20, 20, 20)

        region = InfluenceRegionResolver().resolve([small, large], ORIGIN)

        assert max_radius(region) == pytest.approx(3 * math.sqrt(8))

    def test_only_selected_building_reconstructed(self, make_building):
        buildings = [
            make_building("other", 50, 50, 60, 60),
            make_building("target", -5, -5, 5, 5),
        ]
        resolver = InfluenceRegionResolver(RecordingReconstruction)

        region = resolver.resolve(buildings, ORIGIN)

        assert RecordingReconstruction.log == [("reconstruct", "target"), ("clear", "target")]
        assert max_radius(region) == pytest.approx(21.0)

    def test_reconstruction_failure_wrapped(self, central_building):
        original = ReconstructionError("roof solver diverged")
        resolver = InfluenceRegionResolver(
            lambda b: RecordingReconstruction(b, fail=original)
        )

        with pytest.raises(ResolutionError, match="roof solver diverged") as excinfo:
            resolver.resolve([central_building], ORIGIN)

        assert excinfo.value.__cause__ is original

    def test_unexpected_failure_wrapped(self, central_building):
        resolver = InfluenceRegionResolver(
            lambda b: RecordingReconstruction(b, fail=RuntimeError("out of memory"))
        )

        with pytest.raises(ResolutionError, match="out of memory"):
            resolver.resolve([central_building], ORIGIN)


class TestFindContainingBuilding:
    def test_hole_is_outside(self, make_building):
        building = make_building("courtyard", -10, -10, 10, 10)
        building.polygon.holes.append(
            [Point2D(-2, -2), Point2D(-2, 2), Point2D(2, 2), Point2D(2, -2)]
        )

        assert find_containing_building([building], ORIGIN) is None
        assert find_containing_building([building], Point2D(5, 5)) is building


class TestExtrudedFootprint:
    def test_max_dimension_is_footprint_diagonal(self, central_building):
        reconstruction = ExtrudedFootprint(central_building)
        reconstruction.reconstruct()

        assert reconstruction.max_dimension() == pytest.approx(math.sqrt(200))

    def test_roof_below_base_fails(self, make_building):
        building = make_building("sunk", -5, -5, 5, 5, height=3.0,
                                 base_heights=[0.0, 0.0, 4.0, 0.0])

        with pytest.raises(ReconstructionError):
            ExtrudedFootprint(building).reconstruct()

    def test_dimension_requires_reconstruction(self, central_building):
        reconstruction = ExtrudedFootprint(central_building)

        with pytest.raises(ReconstructionError):
            reconstruction.max_dimension()

    def test_clear_discards_geometry(self, central_building):
        reconstruction = ExtrudedFootprint(central_building)
        reconstruction.reconstruct()
        reconstruction.clear()

        with pytest.raises(ReconstructionError):
            reconstruction.max_dimension()
