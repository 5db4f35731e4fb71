"""
Single-building reconstruction collaborator.

The automatic influence region needs the maximum planar dimension of the
building that contains the point of interest. Producing the 3D form of
that building is the job of an external reconstruction algorithm; this
module only defines the interface it must offer, plus a footprint-based
implementation used when no reconstruction algorithm is plugged in.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..errors import ReconstructionError
from .feature import Building


class Reconstruction(ABC):
    """Transient 3D reconstruction of one building."""

    @abstractmethod
    def reconstruct(self) -> None:
        """
        Build the 3D form.

        Raises:
            ReconstructionError: If the building cannot be reconstructed
        """

    @abstractmethod
    def max_dimension(self) -> float:
        """Largest planar extent of the reconstructed form."""

    def clear(self) -> None:
        """Discard the reconstructed geometry."""


class ExtrudedFootprint(Reconstruction):
    """
    Reconstruction of a building as its footprint extruded to roof height.

    The planar extent of a prism equals the largest distance between two
    footprint vertices.
    """

    def __init__(self, building: Building):
        self.building = building
        self._max_dim: Optional[float] = None

    def reconstruct(self) -> None:
        ring = self.building.footprint().outer_ring
        if len(ring) < 3:
            raise ReconstructionError(
                f"Building {self.building.feature_id} has a degenerate footprint"
            )
        if self.building.height <= max(self.building.base_heights):
            raise ReconstructionError(
                f"Building {self.building.feature_id} roof is not above its base"
            )

        max_sq = 0.0
        for i, p in enumerate(ring):
            for q in ring[i + 1:]:
                dx = p.x - q.x
                dy = p.y - q.y
                max_sq = max(max_sq, dx * dx + dy * dy)
        self._max_dim = max_sq ** 0.5

    def max_dimension(self) -> float:
        if self._max_dim is None:
            raise ReconstructionError(
                f"Building {self.building.feature_id} has not been reconstructed"
            )
        return self._max_dim

    def clear(self) -> None:
        self._max_dim = None
