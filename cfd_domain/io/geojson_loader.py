"""
GeoJSON loader for the CFD domain generator.

Reads building footprints, surface layer polygons and region polygons
from GeoJSON feature collections. All coordinates are translated so the
point of interest becomes the origin, closing vertices are dropped and
rings are oriented (outer CCW, holes CW).
"""

from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple
import json
import logging

from ..errors import ConfigurationError
from ..models.feature import Building, SurfaceLayer
from ..models.geometry import ORIGIN, Point2D, Polygon
from ..utils.polygon_utils import normalize_polygon, polygon_signed_area

logger = logging.getLogger(__name__)


# Raw polygon: list of rings, each a list of [x, y] or [x, y, z]
RawPolygon = List[List[Sequence[float]]]


def read_geojson_polygons(filepath: str) -> List[Tuple[RawPolygon, dict]]:
    """
    Read every polygon of a GeoJSON feature collection.

    MultiPolygon features contribute one entry per member polygon. Other
    geometry types are skipped.

    Args:
        filepath: Path to the GeoJSON file

    Returns:
        List of (coordinates, properties) pairs

    Raises:
        ConfigurationError: If the file is missing or cannot be parsed
    """
    path = Path(filepath)
    if not path.exists():
        raise ConfigurationError(f"Cannot find polygon file '{filepath}'")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        polygons = []
        skipped = 0
        for feature in data['features']:
            geometry = feature.get('geometry') or {}
            properties = dict(feature.get('properties') or {})
            if 'id' in feature and 'id' not in properties:
                properties['id'] = feature['id']

            geom_type = geometry.get('type')
            if geom_type == 'Polygon':
                polygons.append((geometry['coordinates'], properties))
            elif geom_type == 'MultiPolygon':
                for coords in geometry['coordinates']:
                    polygons.append((coords, properties))
            else:
                skipped += 1

    except (ValueError, KeyError, TypeError) as e:
        raise ConfigurationError(f"Error parsing JSON file '{filepath}'. Details: {e}") from e

    if skipped:
        logger.debug(f"Skipped {skipped} non-polygon features in {filepath}")

    return polygons


def _ring_points(ring: Sequence[Sequence[float]], origin: Point2D) -> List[Tuple[Point2D, float]]:
    """Vertices relative to origin with their z value (0 if absent)."""
    result = []
    for coords in ring:
        z = float(coords[2]) if len(coords) > 2 else 0.0
        result.append((Point2D(float(coords[0]) - origin.x, float(coords[1]) - origin.y), z))
    if len(result) > 1 and result[0][0] == result[-1][0]:
        result.pop()
    return result


def _polygon_rings(
    coords: RawPolygon,
    origin: Point2D,
    filepath: str
) -> Tuple[List[Tuple[Point2D, float]], List[List[Point2D]]]:
    """
    Outer ring (with z values) and holes of a raw polygon.

    An empty coordinate list gives an empty outer ring; holes with fewer
    than 3 vertices are dropped.

    Raises:
        ConfigurationError: If a coordinate is not a numeric position
    """
    try:
        rings = [_ring_points(ring, origin) for ring in coords]
    except (TypeError, ValueError, IndexError) as e:
        raise ConfigurationError(f"Invalid coordinates in '{filepath}': {e}") from e

    if not rings:
        return [], []
    holes = [[p for p, _ in ring] for ring in rings[1:] if len(ring) >= 3]
    return rings[0], holes


def load_region_polygon(filepath: str, origin: Point2D = ORIGIN) -> Polygon:
    """
    Load a region polygon: the outer ring of the first polygon in the file.

    Args:
        filepath: Path to the GeoJSON file
        origin: Point of interest in absolute coordinates

    Returns:
        Normalized polygon relative to origin

    Raises:
        ConfigurationError: If the file holds no usable polygon
    """
    polygons = read_geojson_polygons(filepath)
    if not polygons:
        raise ConfigurationError(f"No polygon found in '{filepath}'")

    coords, _ = polygons[0]
    outer, _ = _polygon_rings(coords, origin, filepath)
    ring = [p for p, _ in outer]
    if len(ring) < 3:
        raise ConfigurationError(f"Region polygon in '{filepath}' has fewer than 3 vertices")

    return normalize_polygon(ring)


def load_buildings(
    filepath: str,
    origin: Point2D = ORIGIN,
    height_attribute: str = "height"
) -> List[Building]:
    """
    Load building footprints.

    The height attribute is the building height above its base. When
    footprint vertices carry a z coordinate it is used as the ground
    height under that vertex and the roof sits at the highest base plus
    the building height.

    Args:
        filepath: Path to the GeoJSON file
        origin: Point of interest in absolute coordinates
        height_attribute: Property holding the building height

    Returns:
        List of Building features in file order
    """
    buildings = []
    skipped = 0

    for index, (coords, properties) in enumerate(read_geojson_polygons(filepath)):
        feature_id = str(properties.get('id', index))

        height = _parse_height(properties.get(height_attribute))
        if height is None:
            logger.warning(f"Building {feature_id}: missing or invalid '{height_attribute}', skipped")
            skipped += 1
            continue

        outer, holes = _polygon_rings(coords, origin, filepath)
        if len(outer) < 3:
            logger.warning(f"Building {feature_id}: degenerate footprint, skipped")
            skipped += 1
            continue

        if polygon_signed_area([p for p, _ in outer]) < 0:
            outer.reverse()

        polygon = normalize_polygon([p for p, _ in outer], holes)
        base_heights = [z for _, z in outer]

        buildings.append(Building(
            feature_id=feature_id,
            polygon=polygon,
            height=max(base_heights) + height,
            base_heights=base_heights,
        ))

    logger.info(f"Loaded {len(buildings)} buildings from {filepath} (skipped {skipped})")
    return buildings


def load_surface_layers(
    filepath: str,
    origin: Point2D = ORIGIN,
    layer_id: int = 0
) -> List[SurfaceLayer]:
    """
    Load surface layer polygons, all assigned to one output layer.

    Args:
        filepath: Path to the GeoJSON file
        origin: Point of interest in absolute coordinates
        layer_id: Output layer of every polygon in the file

    Returns:
        List of SurfaceLayer features in file order
    """
    layers = []
    for index, (coords, properties) in enumerate(read_geojson_polygons(filepath)):
        outer, holes = _polygon_rings(coords, origin, filepath)
        if len(outer) < 3:
            logger.warning(f"Surface polygon {properties.get('id', index)}: degenerate, skipped")
            continue
        layers.append(SurfaceLayer(
            feature_id=str(properties.get('id', index)),
            polygon=normalize_polygon([p for p, _ in outer], holes),
            output_layer_id=layer_id,
        ))

    logger.info(f"Loaded {len(layers)} surface polygons for layer {layer_id} from {filepath}")
    return layers


def _parse_height(value: Any) -> Optional[float]:
    """Parse a height property, None if missing or not a positive number."""
    if value is None:
        return None
    try:
        height = float(str(value).replace('m', '').strip())
    except ValueError:
        return None
    return height if height > 0 else None
