"""
Domain export for the CFD domain generator.

Writes the domain boundary as a GeoJSON feature in absolute coordinates,
carrying the domain top height and blockage figures as properties.
"""

from pathlib import Path
from typing import List, Optional
import json
import logging

from ..models.geometry import ORIGIN, Point2D
from ..models.region import DomainResult

logger = logging.getLogger(__name__)


def domain_feature(result: DomainResult, origin: Point2D = ORIGIN) -> dict:
    """
    Build the GeoJSON feature of a domain.

    The ring is closed (first vertex repeated) as GeoJSON requires.
    """
    ring: List[List[float]] = [
        [p.x + origin.x, p.y + origin.y] for p in result.boundary.outer_ring
    ]
    if ring:
        ring.append(list(ring[0]))

    return {
        'type': 'Feature',
        'geometry': {
            'type': 'Polygon',
            'coordinates': [ring],
        },
        'properties': {
            'top_height': result.top_height,
            'blockage_ratio': result.blockage_ratio,
            'enlarge_ratio': result.enlarge_ratio,
            'corrected': result.corrected,
        },
    }


def export_domain_geojson(
    result: DomainResult,
    filepath: str,
    origin: Point2D = ORIGIN,
    name: Optional[str] = None
) -> None:
    """
    Write the domain boundary to a GeoJSON feature collection.

    Args:
        result: Domain to export
        filepath: Output file path
        origin: Point of interest in absolute coordinates
        name: Optional collection name
    """
    collection = {
        'type': 'FeatureCollection',
        'features': [domain_feature(result, origin)],
    }
    if name:
        collection['name'] = name

    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(collection, f, indent=2)

    logger.info(
        f"Exported domain boundary ({len(result.boundary.outer_ring)} vertices) to {filepath}"
    )
