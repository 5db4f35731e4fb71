"""
Processing modules for the CFD domain generator.

Contains region selection, influence region resolution, scope filtering,
boundary synthesis, blockage estimation and triangulation classification.
"""

from .region_selector import RegionSelector
from .influence_region import InfluenceRegionResolver, find_containing_building
from .scope_filter import (
    filter_buildings_by_region,
    ScopeResult,
    ScopeReason,
)
from .boundary import (
    DomainBoundarySynthesizer,
    SynthesizedBoundary,
    collect_candidate_points,
    max_building_height,
)
from .blockage import BlockageRatioEstimator, project_building
from .classifier import ConstrainedDomainClassifier
from .surface_layers import LayerSummary, tag_surface_layers

__all__ = [
    'RegionSelector',
    'InfluenceRegionResolver',
    'find_containing_building',
    'filter_buildings_by_region',
    'ScopeResult',
    'ScopeReason',
    'DomainBoundarySynthesizer',
    'SynthesizedBoundary',
    'collect_candidate_points',
    'max_building_height',
    'BlockageRatioEstimator',
    'project_building',
    'ConstrainedDomainClassifier',
    'LayerSummary',
    'tag_surface_layers',
]
