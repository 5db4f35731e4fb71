"""
Polygon features consumed by the domain computation.

Buildings and surface layers are owned by the feature collection that
loaded them. The domain core only reads them through the small
PolyFeature capability interface and never changes their state.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .geometry import Polygon


class FeatureKind(Enum):
    """Feature classification."""
    BUILDING = "building"
    SURFACE_LAYER = "surface_layer"


class PolyFeature(ABC):
    """Capability interface shared by every polygon feature."""

    @abstractmethod
    def is_active(self) -> bool:
        """Whether the feature takes part in the computation."""

    @abstractmethod
    def footprint(self) -> Polygon:
        """Footprint polygon (outer ring CCW, holes CW)."""

    @abstractmethod
    def kind(self) -> FeatureKind:
        """Feature classification."""

    @property
    def layer_id(self) -> Optional[int]:
        """Output layer of the feature, None for features that are not surface layers."""
        return None


@dataclass
class Building(PolyFeature):
    """
    Building footprint with its heights.

    Attributes:
        feature_id: Identifier from the source data
        polygon: Footprint polygon
        height: Absolute roof height
        base_heights: Ground height under each outer-ring vertex
        active: False when the building is out of scope
    """
    feature_id: str
    polygon: Polygon
    height: float
    base_heights: List[float] = field(default_factory=list)
    active: bool = True

    def __post_init__(self):
        """Default base heights to ground level and check their count."""
        n = len(self.polygon.outer_ring)
        if not self.base_heights:
            self.base_heights = [0.0] * n
        elif len(self.base_heights) != n:
            raise ValueError(
                f"Building {self.feature_id}: {len(self.base_heights)} base heights "
                f"for {n} footprint vertices"
            )

    def is_active(self) -> bool:
        return self.active

    def footprint(self) -> Polygon:
        return self.polygon

    def kind(self) -> FeatureKind:
        return FeatureKind.BUILDING


@dataclass
class SurfaceLayer(PolyFeature):
    """
    Surface polygon (water, vegetation, pavement, ...) tagged into the terrain.

    Attributes:
        feature_id: Identifier from the source data
        polygon: Surface polygon
        output_layer_id: Index of the output layer the surface belongs to
        active: False when the surface is out of scope
    """
    feature_id: str
    polygon: Polygon
    output_layer_id: int
    active: bool = True

    def is_active(self) -> bool:
        return self.active

    def footprint(self) -> Polygon:
        return self.polygon

    def kind(self) -> FeatureKind:
        return FeatureKind.SURFACE_LAYER

    @property
    def layer_id(self) -> Optional[int]:
        return self.output_layer_id
