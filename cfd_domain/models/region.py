"""
Region specifications and the domain result.

A region (influence region or domain boundary) is configured in one of
three ways: computed automatically with the BPG rules, a circle of given
radius around the point of interest, or an explicit polygon.
"""

from dataclasses import dataclass
from typing import Optional, Union

from .geometry import Polygon


@dataclass(frozen=True)
class Automatic:
    """Region derived with the BPG rules."""


@dataclass(frozen=True)
class Radius:
    """Circular region of given radius centred at the point of interest."""
    radius: float


@dataclass(frozen=True)
class Explicit:
    """
    Explicit region polygon.

    The polygon is expected to be normalized already: translated to the
    point-of-interest frame, without a duplicated closing vertex and with
    a counter-clockwise outer ring.
    """
    polygon: Polygon


RegionSpec = Union[Automatic, Radius, Explicit]


@dataclass
class DomainResult:
    """
    Final computational domain.

    Attributes:
        boundary: Domain boundary polygon in the global (unrotated) frame
        top_height: Height of the domain top
        blockage_ratio: Blockage ratio measured before any correction
            (None when the boundary was not derived with the BPG rules)
        enlarge_ratio: Enlargement factor of the corrective pass (1.0 if none)
        corrected: True if the boundary was re-synthesized once
    """
    boundary: Polygon
    top_height: float
    blockage_ratio: Optional[float] = None
    enlarge_ratio: float = 1.0
    corrected: bool = False
