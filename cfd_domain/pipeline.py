"""
Domain computation pipeline.

compute_domain() runs the core on an in-memory feature set:

1. Influence region (automatic, radius or polygon)
2. Scope filtering of buildings against the influence region
3. Domain boundary (BPG synthesis, or radius/polygon)
4. Blockage ratio check with at most one corrective enlargement

run_pipeline() wraps it with file loading, surface layer tagging and
export, and reports failures instead of raising them.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Sequence
import json
import logging
import math
import os
import time

from . import __version__
from .config import DomainConfig, DomainShape
from .errors import DomainError
from .io.domain_exporter import export_domain_geojson
from .io.geojson_loader import load_buildings, load_surface_layers
from .models.feature import Building, PolyFeature, SurfaceLayer
from .models.geometry import ORIGIN, Polygon
from .models.region import Automatic, DomainResult, Explicit, Radius
from .processing.blockage import BlockageRatioEstimator
from .processing.boundary import (
    DomainBoundarySynthesizer,
    collect_candidate_points,
    max_building_height,
)
from .processing.influence_region import InfluenceRegionResolver
from .processing.region_selector import RegionSelector
from .processing.scope_filter import filter_buildings_by_region
from .processing.surface_layers import LayerSummary, tag_surface_layers

logger = logging.getLogger(__name__)

# Output surfaces always present ahead of the domain sides
BASE_SURFACES = ["Terrain", "Buildings"]


def output_surfaces(config: DomainConfig, boundary: Optional[Polygon] = None) -> List[str]:
    """
    Names of the output surfaces of the domain.

    Terrain and buildings, then the domain sides (one per edge of an
    explicit polygon, four named sides for a BPG rectangle, a single
    surface otherwise), the top, and finally one surface per layer.
    """
    names = list(BASE_SURFACES)
    spec = config.domain_bnd

    if isinstance(spec, Explicit):
        names.extend(f"Side_{i}" for i in range(len(spec.polygon.outer_ring)))
    elif isinstance(spec, Automatic) and config.domain_shape == DomainShape.RECTANGLE:
        names.extend(["Side_1", "Back", "Side_2", "Front"])
    else:
        names.append("Sides")
    names.append("Top")

    names.extend(layer_name for _, layer_name in config.surface_layers)
    return names


def compute_domain(
    config: DomainConfig,
    buildings: Sequence[Building],
    resolver: Optional[InfluenceRegionResolver] = None
) -> DomainResult:
    """
    Compute the CFD domain for a set of buildings.

    Coordinates are relative to the point of interest, which sits at
    the origin.

    Args:
        config: Domain configuration
        buildings: All buildings, in stored order
        resolver: Influence region resolver (default: extruded footprints)

    Returns:
        DomainResult

    Raises:
        DomainError: On any fatal configuration or geometry problem
    """
    resolver = resolver or InfluenceRegionResolver()
    selector = RegionSelector()
    poi = ORIGIN

    influence_region = selector.select(
        config.influence_region,
        poi,
        lambda: resolver.resolve(buildings, poi),
    )

    scope = filter_buildings_by_region(list(buildings), influence_region)
    in_scope = scope.kept
    h_max = max_building_height(in_scope)
    logger.info(f"{len(in_scope)} buildings in scope, highest {h_max:.2f}m")

    if not isinstance(config.domain_bnd, Automatic):
        boundary = selector.select(config.domain_bnd, poi, lambda: influence_region)
        top_height = config.top_height
        if top_height is None:
            top_height = h_max * config.domain_size.top
        return DomainResult(boundary=boundary, top_height=top_height)

    synthesizer = DomainBoundarySynthesizer(config.domain_shape, config.domain_size)
    candidates = collect_candidate_points(influence_region, in_scope)

    synthesized = synthesizer.synthesize(candidates, config.flow_direction, h_max, 1.0, poi)
    result = DomainResult(boundary=synthesized.polygon, top_height=synthesized.top_height)

    if not config.blockage_check:
        return result

    ratio = BlockageRatioEstimator().estimate(
        in_scope, synthesized.angle, synthesized.local_polygon, synthesized.top_height
    )
    result.blockage_ratio = ratio

    if ratio > config.blockage_threshold:
        enlarge_ratio = math.sqrt(ratio / config.blockage_threshold)
        logger.info(
            f"Blockage ratio {ratio * 100:.2f}% exceeds "
            f"{config.blockage_threshold * 100:.2f}%, enlarging domain by {enlarge_ratio:.3f}"
        )
        enlarged = synthesizer.synthesize(
            candidates, config.flow_direction, h_max, enlarge_ratio, poi
        )
        result = DomainResult(
            boundary=enlarged.polygon,
            top_height=enlarged.top_height,
            blockage_ratio=ratio,
            enlarge_ratio=enlarge_ratio,
            corrected=True,
        )

    return result


@dataclass
class PipelineStats:
    """Statistics from the pipeline run."""
    buildings_loaded: int = 0
    surface_polygons_loaded: int = 0
    boundary_vertices: int = 0
    top_height: float = 0.0
    blockage_ratio: Optional[float] = None
    enlarge_ratio: float = 1.0
    corrected: bool = False
    layer_areas: Dict[str, float] = field(default_factory=dict)
    processing_time_ms: int = 0


@dataclass
class PipelineReport:
    """Report from pipeline run."""
    name: str
    version: str
    success: bool
    stats: PipelineStats
    output_files: List[str]
    output_surfaces: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    config_used: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PipelineResult:
    """
    Complete result of pipeline execution.

    Attributes:
        success: Whether the pipeline completed without errors
        report: Statistics and metadata
        domain: Computed domain (None on failure)
        domain_path: Path of the exported GeoJSON boundary
    """
    success: bool
    report: PipelineReport
    domain: Optional[DomainResult] = None
    domain_path: Optional[str] = None


def run_pipeline(config: DomainConfig, write_files: bool = True) -> PipelineResult:
    """
    Run the complete domain generation pipeline.

    Steps:
    1. Load buildings and surface layers
    2. Compute the domain
    3. Tag surface layers inside the domain
    4. Export the boundary and the report

    Args:
        config: Domain configuration
        write_files: If False, nothing is written to disk

    Returns:
        PipelineResult
    """
    start_time = time.time()
    stats = PipelineStats()
    errors: List[str] = []
    output_files: List[str] = []
    domain: Optional[DomainResult] = None
    domain_path: Optional[str] = None
    surfaces = output_surfaces(config)

    if write_files:
        os.makedirs(config.output_dir, exist_ok=True)

    try:
        # Step 1: Load inputs
        buildings: List[Building] = []
        if config.buildings_path:
            buildings = load_buildings(
                config.buildings_path, config.point_of_interest, config.height_attribute
            )
        stats.buildings_loaded = len(buildings)

        layers: List[SurfaceLayer] = []
        first_layer_id = len(surfaces) - len(config.surface_layers)
        for i, (path, layer_name) in enumerate(config.surface_layers):
            loaded = load_surface_layers(path, config.point_of_interest, first_layer_id + i)
            logger.debug(f"Surface layer '{layer_name}': {len(loaded)} polygons")
            layers.extend(loaded)
        stats.surface_polygons_loaded = len(layers)

        # Step 2: Domain
        domain = compute_domain(config, buildings)
        stats.boundary_vertices = len(domain.boundary.outer_ring)
        stats.top_height = domain.top_height
        stats.blockage_ratio = domain.blockage_ratio
        stats.enlarge_ratio = domain.enlarge_ratio
        stats.corrected = domain.corrected

        # Step 3: Surface layers
        if layers:
            features: List[PolyFeature] = [*buildings, *layers]
            summary = tag_surface_layers(domain.boundary, features)
            stats.layer_areas = _named_layer_areas(summary, surfaces)

        # Step 4: Export
        if write_files:
            domain_path = os.path.join(
                config.output_dir, f"{config.output_file_name}_domain.geojson"
            )
            export_domain_geojson(
                domain, domain_path, config.point_of_interest, config.output_file_name
            )
            output_files.append(domain_path)

    except DomainError as e:
        logger.error(f"Domain computation failed: {e}")
        errors.append(str(e))

    stats.processing_time_ms = int((time.time() - start_time) * 1000)

    config_used = {
        'domain_shape': config.domain_shape.value,
        'domain_size': asdict(config.domain_size),
        'flow_direction': [config.flow_direction.x, config.flow_direction.y],
        'blockage_check': config.blockage_check,
        'blockage_threshold': config.blockage_threshold,
        'influence_region': type(config.influence_region).__name__,
        'domain_bnd': type(config.domain_bnd).__name__,
    }
    if isinstance(config.influence_region, Radius):
        config_used['influence_radius'] = config.influence_region.radius

    report = PipelineReport(
        name=config.output_file_name,
        version=__version__,
        success=len(errors) == 0,
        stats=stats,
        output_files=output_files,
        output_surfaces=surfaces,
        errors=errors,
        config_used=config_used,
    )

    if write_files:
        report_path = os.path.join(config.output_dir, f"{config.output_file_name}_report.json")
        with open(report_path, 'w', encoding='utf-8') as f:
            json.dump(asdict(report), f, indent=2)
        output_files.append(report_path)
        logger.info(f"Report saved to {report_path}")

    logger.info(f"Pipeline completed in {stats.processing_time_ms}ms")

    return PipelineResult(
        success=report.success,
        report=report,
        domain=domain if report.success else None,
        domain_path=domain_path,
    )


def _named_layer_areas(summary: LayerSummary, surfaces: List[str]) -> Dict[str, float]:
    areas = {BASE_SURFACES[0]: summary.untagged_area}
    for tag, area in summary.layer_areas.items():
        areas[surfaces[tag]] = area
    return areas
