"""Tests for RegionSelector."""

import pytest

from cfd_domain.errors import ConfigurationError
from cfd_domain.models.geometry import Point2D, Polygon
from cfd_domain.models.region import Automatic, Explicit, Radius
from cfd_domain.processing.region_selector import RegionSelector

from conftest import rect_ring


def fail_automatic():
    raise AssertionError("automatic region must not be computed")


class TestRegionSelector:
    def test_explicit_returned_as_is(self):
        polygon = Polygon(outer_ring=rect_ring(-50, -50, 50, 50))

        result = RegionSelector().select(Explicit(polygon), Point2D(0, 0), fail_automatic)

        assert result is polygon

    def test_radius_circle_around_point(self):
        poi = Point2D(2, 3)

        result = RegionSelector().select(Radius(75.0), poi, fail_automatic)

        assert len(result.outer_ring) == 360
        for p in result.outer_ring:
            assert poi.distance_to(p) == pytest.approx(75.0)

    def test_automatic_delegates(self):
        sentinel = Polygon(outer_ring=rect_ring(0, 0, 1, 1))
        calls = []

        def automatic():
            calls.append(True)
            return sentinel

        result = RegionSelector().select(Automatic(), Point2D(0, 0), automatic)

        assert result is sentinel
        assert calls == [True]

    @pytest.mark.parametrize("radius", [0.0, -10.0])
    def test_non_positive_radius(self, radius):
        with pytest.raises(ConfigurationError):
            RegionSelector().select(Radius(radius), Point2D(0, 0), fail_automatic)

    def test_degenerate_explicit_polygon(self):
        polygon = Polygon(outer_ring=[Point2D(0, 0), Point2D(1, 0)])

        with pytest.raises(ConfigurationError):
            RegionSelector().select(Explicit(polygon), Point2D(0, 0), fail_automatic)

    @pytest.mark.parametrize("spec", [None, 350, "auto", [1.0, 2.0]])
    def test_unrecognized_spec(self, spec):
        with pytest.raises(ConfigurationError):
            RegionSelector().select(spec, Point2D(0, 0), fail_automatic)
