"""Tests for domain orchestration and the file-level pipeline."""

import json
import math

import pytest

from cfd_domain import pipeline
from cfd_domain.config import BPGDomainSize, DomainConfig, DomainShape
from cfd_domain.errors import ResolutionError
from cfd_domain.models.geometry import Point2D
from cfd_domain.models.region import Explicit, Radius
from cfd_domain.pipeline import compute_domain, output_surfaces, run_pipeline
from cfd_domain.utils.polygon_utils import normalize_polygon

from conftest import rect_ring

E2E_RADIUS = 3 * math.sqrt(200) + 20.0 * 15


def max_radius(polygon):
    return max(math.hypot(p.x, p.y) for p in polygon.outer_ring)


class FixedRatioEstimator:
    """Stand-in estimator returning a fixed ratio and counting calls."""

    calls = 0
    ratio = 0.0

    def estimate(self, buildings, angle, local_boundary, top_height):
        FixedRatioEstimator.calls += 1
        return FixedRatioEstimator.ratio


@pytest.fixture
def fixed_ratio(monkeypatch):
    FixedRatioEstimator.calls = 0
    monkeypatch.setattr(pipeline, "BlockageRatioEstimator", FixedRatioEstimator)
    return FixedRatioEstimator


class TestComputeDomain:
    def test_end_to_end_round_domain(self, central_building):
        result = compute_domain(DomainConfig(), [central_building])

        assert max_radius(result.boundary) == pytest.approx(E2E_RADIUS)
        assert result.top_height == pytest.approx(120.0)
        assert result.blockage_ratio is None
        assert not result.corrected

    def test_blockage_below_threshold_keeps_domain(self, central_building):
        config = DomainConfig(blockage_check=True)

        result = compute_domain(config, [central_building])

        cross_area = 2 * E2E_RADIUS * 120.0
        assert result.blockage_ratio == pytest.approx(200.0 / cross_area, rel=1e-3)
        assert not result.corrected
        assert result.enlarge_ratio == 1.0
        assert max_radius(result.boundary) == pytest.approx(E2E_RADIUS)

    def test_corrective_pass_enlarges_once(self, central_building):
        config = DomainConfig(blockage_check=True, blockage_threshold=0.001)

        result = compute_domain(config, [central_building])

        enlarge = math.sqrt(result.blockage_ratio / 0.001)
        assert enlarge > 1.0
        assert result.corrected
        assert result.enlarge_ratio == pytest.approx(enlarge)
        assert max_radius(result.boundary) == pytest.approx(E2E_RADIUS * enlarge)
        assert result.top_height == pytest.approx(120.0 * enlarge)

    def test_correction_is_single_shot(self, central_building, fixed_ratio):
        fixed_ratio.ratio = 0.12
        config = DomainConfig(blockage_check=True)

        result = compute_domain(config, [central_building])

        assert fixed_ratio.calls == 1
        assert result.corrected
        assert result.enlarge_ratio == pytest.approx(2.0)
        assert result.blockage_ratio == 0.12

    def test_check_disabled_skips_estimator(self, central_building, fixed_ratio):
        fixed_ratio.ratio = 0.5

        result = compute_domain(DomainConfig(), [central_building])

        assert fixed_ratio.calls == 0
        assert not result.corrected

    def test_rectangle_correction_keeps_top_height(self, central_building, fixed_ratio):
        fixed_ratio.ratio = 0.12
        config = DomainConfig(
            domain_shape=DomainShape.RECTANGLE,
            domain_size=BPGDomainSize.from_list(DomainShape.RECTANGLE, [5, 5, 15, 6]),
            blockage_check=True,
        )

        result = compute_domain(config, [central_building])

        assert result.corrected
        assert result.top_height == pytest.approx(120.0)

    def test_radius_domain_uses_configured_top(self, central_building):
        config = DomainConfig(domain_bnd=Radius(500.0), top_height=300.0)

        result = compute_domain(config, [central_building])

        assert max_radius(result.boundary) == pytest.approx(500.0)
        assert result.top_height == 300.0
        assert result.blockage_ratio is None

    def test_explicit_domain_top_falls_back_to_bpg(self, central_building):
        polygon = normalize_polygon(rect_ring(-400, -300, 600, 300))
        config = DomainConfig(domain_bnd=Explicit(polygon))

        result = compute_domain(config, [central_building])

        assert result.boundary is polygon
        assert result.top_height == pytest.approx(20.0 * 6)

    def test_out_of_scope_buildings_ignored(self, central_building, make_building):
        tower = make_building("tower", 1000, 0, 1010, 10, height=100.0)
        config = DomainConfig(influence_region=Radius(50.0))

        result = compute_domain(config, [central_building, tower])

        assert result.top_height == pytest.approx(120.0)

    def test_radius_influence_needs_no_containing_building(self, make_building):
        neighbour = make_building("neighbour", 10, 10, 20, 20, height=10.0)
        config = DomainConfig(influence_region=Radius(100.0))

        result = compute_domain(config, [neighbour])

        assert max_radius(result.boundary) == pytest.approx(100.0 + 10.0 * 15)

    def test_automatic_influence_without_building_fails(self, make_building):
        neighbour = make_building("neighbour", 10, 10, 20, 20)

        with pytest.raises(ResolutionError):
            compute_domain(DomainConfig(), [neighbour])


class TestOutputSurfaces:
    def test_round(self):
        assert output_surfaces(DomainConfig()) == ["Terrain", "Buildings", "Sides", "Top"]

    def test_rectangle_and_layers(self):
        config = DomainConfig(
            domain_shape=DomainShape.RECTANGLE,
            surface_layers=(("water.geojson", "Water"),),
        )

        assert output_surfaces(config) == [
            "Terrain", "Buildings", "Side_1", "Back", "Side_2", "Front", "Top", "Water"
        ]

    def test_explicit_polygon_sides(self):
        polygon = normalize_polygon(rect_ring(-10, -10, 10, 10))
        config = DomainConfig(domain_bnd=Explicit(polygon), domain_shape=DomainShape.RECTANGLE)

        assert output_surfaces(config) == [
            "Terrain", "Buildings", "Side_0", "Side_1", "Side_2", "Side_3", "Top"
        ]


def write_feature_collection(path, rings, properties):
    features = []
    for ring, props in zip(rings, properties):
        coords = [[p.x, p.y] for p in ring] + [[ring[0].x, ring[0].y]]
        features.append({
            "type": "Feature",
            "properties": props,
            "geometry": {"type": "Polygon", "coordinates": [coords]},
        })
    path.write_text(json.dumps({"type": "FeatureCollection", "features": features}))


class TestRunPipeline:
    def test_writes_domain_and_report(self, tmp_path):
        poi = Point2D(1000.0, 2000.0)
        buildings_path = tmp_path / "buildings.geojson"
        write_feature_collection(
            buildings_path,
            [rect_ring(995, 1995, 1005, 2005)],
            [{"id": "b1", "height": 20}],
        )
        water_path = tmp_path / "water.geojson"
        write_feature_collection(
            water_path,
            [rect_ring(1050, 1950, 1100, 2050)],
            [{"id": "w1"}],
        )
        config = DomainConfig(
            point_of_interest=poi,
            buildings_path=str(buildings_path),
            surface_layers=((str(water_path), "Water"),),
            output_dir=str(tmp_path / "out"),
            output_file_name="site",
        )

        result = run_pipeline(config)

        assert result.success
        assert result.domain is not None
        assert result.report.stats.buildings_loaded == 1
        assert result.report.stats.layer_areas["Water"] == pytest.approx(50.0 * 100.0)

        domain = json.loads((tmp_path / "out" / "site_domain.geojson").read_text())
        ring = domain["features"][0]["geometry"]["coordinates"][0]
        assert ring[0] == ring[-1]
        for x, y in ring:
            assert math.hypot(x - poi.x, y - poi.y) == pytest.approx(E2E_RADIUS)

        report = json.loads((tmp_path / "out" / "site_report.json").read_text())
        assert report["success"] is True
        assert report["output_surfaces"][-1] == "Water"

    def test_failure_reported(self, tmp_path):
        buildings_path = tmp_path / "buildings.geojson"
        write_feature_collection(
            buildings_path,
            [rect_ring(100, 100, 110, 110)],
            [{"height": 20}],
        )
        config = DomainConfig(
            buildings_path=str(buildings_path),
            output_dir=str(tmp_path),
        )

        result = run_pipeline(config)

        assert not result.success
        assert result.domain is None
        assert any("no containing building" in e for e in result.report.errors)
        report = json.loads((tmp_path / "domain_report.json").read_text())
        assert report["success"] is False

    def test_malformed_building_coordinates_reported(self, tmp_path):
        buildings_path = tmp_path / "buildings.geojson"
        buildings_path.write_text(json.dumps({
            "type": "FeatureCollection",
            "features": [{
                "type": "Feature",
                "properties": {"height": 20},
                "geometry": {"type": "Polygon", "coordinates": [[[0, 0], ["x", 1], [1, 1]]]},
            }],
        }))
        config = DomainConfig(buildings_path=str(buildings_path))

        result = run_pipeline(config, write_files=False)

        assert not result.success
        assert any("Invalid coordinates" in e for e in result.report.errors)

    def test_empty_building_geometry_does_not_abort(self, tmp_path, central_building):
        buildings_path = tmp_path / "buildings.geojson"
        coords = [[p.x, p.y] for p in central_building.polygon.outer_ring]
        buildings_path.write_text(json.dumps({
            "type": "FeatureCollection",
            "features": [
                {"type": "Feature", "properties": {"height": 20},
                 "geometry": {"type": "Polygon", "coordinates": []}},
                {"type": "Feature", "properties": {"height": 20},
                 "geometry": {"type": "Polygon", "coordinates": [coords + [coords[0]]]}},
            ],
        }))
        config = DomainConfig(buildings_path=str(buildings_path))

        result = run_pipeline(config, write_files=False)

        assert result.success
        assert result.report.stats.buildings_loaded == 1
        assert max_radius(result.domain.boundary) == pytest.approx(E2E_RADIUS)

    def test_memory_run_writes_nothing(self, tmp_path):
        config = DomainConfig(influence_region=Radius(30.0), output_dir=str(tmp_path / "none"))

        result = run_pipeline(config, write_files=False)

        assert result.success
        assert not (tmp_path / "none").exists()
