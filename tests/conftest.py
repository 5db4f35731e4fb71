"""Shared pytest fixtures for the CFD domain generator tests.

Geometry is built directly in the point-of-interest frame (the point of
interest at the origin), so the domain core can be tested without
touching any file.
"""

from typing import List, Optional

import pytest

from cfd_domain.models.feature import Building, SurfaceLayer
from cfd_domain.models.geometry import Point2D, Polygon


def rect_ring(min_x: float, min_y: float, max_x: float, max_y: float) -> List[Point2D]:
    """CCW rectangle ring starting at the minimum corner."""
    return [
        Point2D(min_x, min_y),
        Point2D(max_x, min_y),
        Point2D(max_x, max_y),
        Point2D(min_x, max_y),
    ]


@pytest.fixture
def make_rect():
    """Factory for CCW rectangle rings."""
    return rect_ring


@pytest.fixture
def make_building():
    """Factory for rectangular buildings.

    Usage:
        make_building("b1", -5, -5, 5, 5, height=20)
    """
    def _make(
        feature_id: str,
        min_x: float,
        min_y: float,
        max_x: float,
        max_y: float,
        height: float = 20.0,
        base_heights: Optional[List[float]] = None,
        active: bool = True,
    ) -> Building:
        return Building(
            feature_id=feature_id,
            polygon=Polygon(outer_ring=rect_ring(min_x, min_y, max_x, max_y)),
            height=height,
            base_heights=list(base_heights) if base_heights else [],
            active=active,
        )

    return _make


@pytest.fixture
def make_layer():
    """Factory for rectangular surface layers."""
    def _make(
        feature_id: str,
        min_x: float,
        min_y: float,
        max_x: float,
        max_y: float,
        layer_id: int,
        active: bool = True,
    ) -> SurfaceLayer:
        return SurfaceLayer(
            feature_id=feature_id,
            polygon=Polygon(outer_ring=rect_ring(min_x, min_y, max_x, max_y)),
            output_layer_id=layer_id,
            active=active,
        )

    return _make


@pytest.fixture
def central_building(make_building) -> Building:
    """10x10 building centred on the point of interest, 20m high."""
    return make_building("central", -5, -5, 5, 5, height=20.0)
