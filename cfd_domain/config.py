"""
Configuration constants for the CFD domain generator.

Contains the Best Practice Guideline (BPG) sizing defaults, polygon
approximation settings and the immutable runtime configuration passed
into every pipeline stage.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .errors import ConfigurationError
from .models.geometry import Point2D
from .models.region import Automatic, RegionSpec


# =============================================================================
# DOMAIN SHAPE
# =============================================================================

class DomainShape(Enum):
    """
    Topology of the BPG domain boundary.

    ROUND: Circle around the point of interest.
    RECTANGLE: Flow-aligned box around the candidate points.
    OVAL: Two flow-aligned half ellipses sharing the side radius.
    """
    ROUND = "round"
    RECTANGLE = "rectangle"
    OVAL = "oval"

    @classmethod
    def from_string(cls, value: str) -> 'DomainShape':
        """Parse a shape name (case-insensitive)."""
        if isinstance(value, str):
            name = value.strip().lower()
            for shape in cls:
                if shape.value == name:
                    return shape
        raise ConfigurationError(f"'{value}' is not a supported domain type")


# =============================================================================
# BPG CONSTANTS
# =============================================================================

# Influence radius = multiplier * max dimension of the building of interest
BPG_INFLUENCE_MULTIPLIER = 3.0

# Margins in multiples of the highest building height
BPG_ROUND_RADIAL = 15.0
BPG_FRONT = 5.0
BPG_SIDE = 5.0
BPG_BACK = 15.0
BPG_TOP = 6.0

# Maximum blockage ratio of the domain cross-section (3%)
BPG_BLOCKAGE_RATIO = 0.03

# =============================================================================
# POLYGON APPROXIMATION
# =============================================================================

# Vertices of a full circle approximation
ROUND_POLY_POINTS = 360

# Vertices of each half of the oval domain (1 degree step)
OVAL_HALF_POINTS = 180

# Default flow direction (+X)
DEFAULT_FLOW_DIRECTION = Point2D(1.0, 0.0)


# =============================================================================
# RUNTIME CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class BPGDomainSize:
    """
    Domain margins expressed as multiples of the highest building height.

    front/back apply along the flow axis, left/right across it (left is
    the +Y side of the flow-aligned frame). radial is used by the round
    domain, top sets the domain height.
    """
    front: float = BPG_FRONT
    back: float = BPG_BACK
    left: float = BPG_SIDE
    right: float = BPG_SIDE
    radial: float = BPG_ROUND_RADIAL
    top: float = BPG_TOP

    def __post_init__(self):
        for name in ('front', 'back', 'left', 'right', 'radial', 'top'):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"bpg_domain_size {name} must be non-negative")

    @classmethod
    def from_list(cls, shape: DomainShape, values) -> 'BPGDomainSize':
        """
        Build margins from the compact list form.

        Round domains use [radial, top]; rectangle and oval domains use
        [front, side, back, top].
        """
        try:
            values = [float(v) for v in values]
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid bpg_domain_size {values!r}: {e}") from e

        if shape == DomainShape.ROUND:
            if len(values) != 2:
                raise ConfigurationError("Round domain expects bpg_domain_size [radial, top]")
            return cls(radial=values[0], top=values[1])

        if len(values) != 4:
            raise ConfigurationError(
                f"{shape.value.capitalize()} domain expects bpg_domain_size [front, side, back, top]"
            )
        front, side, back, top = values
        return cls(front=front, back=back, left=side, right=side, top=top)


@dataclass(frozen=True)
class DomainConfig:
    """
    Immutable configuration for one domain computation.

    Coordinates inside the core are relative to the point of interest,
    which therefore sits at the origin unless stated otherwise.
    """

    # Point of interest in absolute coordinates (used to translate IO)
    point_of_interest: Point2D = Point2D(0.0, 0.0)

    # Region specifications
    influence_region: RegionSpec = field(default_factory=Automatic)
    domain_bnd: RegionSpec = field(default_factory=Automatic)

    # BPG domain
    flow_direction: Point2D = DEFAULT_FLOW_DIRECTION
    domain_shape: DomainShape = DomainShape.ROUND
    domain_size: BPGDomainSize = field(default_factory=BPGDomainSize)

    # Blockage ratio
    blockage_check: bool = False
    blockage_threshold: float = BPG_BLOCKAGE_RATIO

    # Top height for explicitly defined domains
    top_height: Optional[float] = None

    # Inputs
    buildings_path: Optional[str] = None
    height_attribute: str = "height"
    surface_layers: Tuple[Tuple[str, str], ...] = ()  # (path, layer name)

    # Output
    output_dir: str = "./output"
    output_file_name: str = "domain"
    verbose: bool = False

    def __post_init__(self):
        """Validate configuration values."""
        if self.flow_direction.x == 0 and self.flow_direction.y == 0:
            raise ConfigurationError("flow_direction must be a non-zero vector")

        if not (0 < self.blockage_threshold < 1):
            raise ConfigurationError("blockage threshold must be between 0 and 1")

        if self.top_height is not None and self.top_height <= 0:
            raise ConfigurationError("top_height must be positive")
