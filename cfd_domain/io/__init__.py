"""
Input/Output modules for the CFD domain generator.
"""

from .geojson_loader import (
    read_geojson_polygons,
    load_region_polygon,
    load_buildings,
    load_surface_layers,
)
from .config_loader import load_config, parse_config, parse_region
from .domain_exporter import export_domain_geojson

__all__ = [
    # GeoJSON input
    'read_geojson_polygons',
    'load_region_polygon',
    'load_buildings',
    'load_surface_layers',
    # Configuration
    'load_config',
    'parse_config',
    'parse_region',
    # Output
    'export_domain_geojson',
]
