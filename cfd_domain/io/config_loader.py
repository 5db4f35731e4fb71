"""
JSON configuration loader for the CFD domain generator.

Maps the configuration file keys onto an immutable DomainConfig:

    {
        "point_of_interest": [x, y],
        "influence_region": 350,            # radius, polygon, file or true
        "domain_bnd": true,                 # BPG boundary
        "flow_direction": [1, 0],
        "bnd_type_bpg": "Round",
        "bpg_domain_size": [15, 6],
        "bpg_blockage_ratio": true,         # or a percentage, e.g. 3
        "top_height": 200,
        "polygons": [
            {"type": "Building", "path": "buildings.geojson",
             "height_attribute": "height"},
            {"type": "SurfaceLayer", "path": "water.geojson",
             "layer_name": "Water"}
        ],
        "output_file_name": "site"
    }
"""

from pathlib import Path
from typing import Any, Dict
import json
import logging

from ..config import BPG_BLOCKAGE_RATIO, BPGDomainSize, DomainConfig, DomainShape
from ..errors import ConfigurationError
from ..models.geometry import Point2D
from ..models.region import Automatic, Explicit, Radius, RegionSpec
from ..utils.polygon_utils import normalize_polygon
from .geojson_loader import load_region_polygon

logger = logging.getLogger(__name__)


def load_config(filepath: str, **overrides) -> DomainConfig:
    """
    Load a configuration file.

    Relative input paths are resolved against the configuration file's
    directory.

    Args:
        filepath: Path to the JSON configuration
        **overrides: DomainConfig fields replacing the file values

    Returns:
        DomainConfig

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {filepath}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except ValueError as e:
        raise ConfigurationError(f"Error parsing configuration file '{filepath}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file '{filepath}' must hold a JSON object")

    logger.info(f"Loading configuration from {filepath}")
    return parse_config(data, base_dir=path.parent, **overrides)


def parse_config(data: Dict[str, Any], base_dir: Path = Path('.'), **overrides) -> DomainConfig:
    """Build a DomainConfig from an already decoded configuration object."""
    poi = _parse_point(data.get('point_of_interest', [0.0, 0.0]), 'point_of_interest')

    influence_region = parse_region(data.get('influence_region'), 'influence_region', poi, base_dir)
    domain_bnd = parse_region(data.get('domain_bnd'), 'domain_bnd', poi, base_dir)

    shape = DomainShape.from_string(data.get('bnd_type_bpg', 'round'))
    if 'bpg_domain_size' in data:
        domain_size = BPGDomainSize.from_list(shape, data['bpg_domain_size'])
    else:
        domain_size = BPGDomainSize()

    values: Dict[str, Any] = dict(
        point_of_interest=poi,
        influence_region=influence_region,
        domain_bnd=domain_bnd,
        domain_shape=shape,
        domain_size=domain_size,
    )

    if 'flow_direction' in data:
        values['flow_direction'] = _parse_point(data['flow_direction'], 'flow_direction')

    blockage = data.get('bpg_blockage_ratio', False)
    if isinstance(blockage, bool):
        values['blockage_check'] = blockage
        values['blockage_threshold'] = BPG_BLOCKAGE_RATIO
    elif isinstance(blockage, (int, float)):
        values['blockage_check'] = True
        values['blockage_threshold'] = float(blockage) / 100
    else:
        raise ConfigurationError(f"Invalid bpg_blockage_ratio: {blockage!r}")

    if 'top_height' in data:
        values['top_height'] = _parse_number(data['top_height'], 'top_height')

    surface_layers = []
    for poly in data.get('polygons', []):
        if not isinstance(poly, dict) or 'path' not in poly:
            raise ConfigurationError(f"Polygon entry needs a 'path': {poly!r}")
        poly_type = poly.get('type')
        if poly_type == 'Building':
            values['buildings_path'] = str(base_dir / poly['path'])
            if 'height_attribute' in poly:
                values['height_attribute'] = poly['height_attribute']
        elif poly_type == 'SurfaceLayer':
            name = poly.get('layer_name', f"SurfaceLayer{len(surface_layers) + 1}")
            surface_layers.append((str(base_dir / poly['path']), name))
        else:
            raise ConfigurationError(f"Unknown polygon type: {poly_type!r}")
    values['surface_layers'] = tuple(surface_layers)

    if isinstance(data.get('output_file_name'), str):
        values['output_file_name'] = data['output_file_name']

    values.update(overrides)
    return DomainConfig(**values)


def parse_region(value: Any, name: str, poi: Point2D, base_dir: Path = Path('.')) -> RegionSpec:
    """
    Parse a region value.

    - missing or true: Automatic
    - string: GeoJSON file holding the region polygon
    - list of more than two points: explicit polygon
    - number or [number]: radius

    Raises:
        ConfigurationError: If the value matches none of the forms
    """
    if value is None or value is True:
        return Automatic()

    if isinstance(value, str):
        return Explicit(load_region_polygon(str(base_dir / value), poi))

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Radius(float(value))

    if isinstance(value, list):
        if len(value) > 2:
            ring = [_parse_point(pt, name) - poi for pt in value]
            return Explicit(normalize_polygon(ring))
        if len(value) == 1:
            return Radius(_parse_number(value[0], name))

    raise ConfigurationError(f"Cannot interpret {name}: {value!r}")


def _parse_point(value: Any, name: str) -> Point2D:
    try:
        return Point2D(float(value[0]), float(value[1]))
    except (TypeError, ValueError, IndexError) as e:
        raise ConfigurationError(f"Invalid {name}: {value!r}") from e


def _parse_number(value: Any, name: str) -> float:
    if isinstance(value, list) and len(value) == 1:
        value = value[0]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"Invalid {name}: {value!r}")
    return float(value)
