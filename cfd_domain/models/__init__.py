"""
Data models for the CFD domain generator.
"""

from .geometry import Point2D, BBox, Polygon, ORIGIN
from .region import Automatic, Radius, Explicit, RegionSpec, DomainResult
from .feature import FeatureKind, PolyFeature, Building, SurfaceLayer
from .reconstruction import Reconstruction, ExtrudedFootprint

__all__ = [
    'Point2D', 'BBox', 'Polygon', 'ORIGIN',
    'Automatic', 'Radius', 'Explicit', 'RegionSpec', 'DomainResult',
    'FeatureKind', 'PolyFeature', 'Building', 'SurfaceLayer',
    'Reconstruction', 'ExtrudedFootprint',
]
