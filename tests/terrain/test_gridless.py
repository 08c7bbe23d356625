"""Tests for the Boundary Intersector and gridless cost evaluation.

Covers the 2-D segment evaluator, the elevation ramp, the 3-D elevation
proportioner and the composed GridlessCostEvaluator strategy.
"""

from __future__ import annotations

import pytest

from domain.geometry.services import distance_2d
from domain.geometry.value_objects import CircleEdge, LineSegment, Point
from domain.terrain.evaluator import (
    ElevationRamp,
    GridlessCostEvaluator,
    proportional_cost,
    segment_cost_2d,
    segment_cost_3d,
)
from domain.terrain.intersector import boundary_intersections, iterate_pairs
from domain.terrain.value_objects import MapConfig, Path, TerrainVolume, VolumeKind
from tests.fakes import FakeTerrain, strip_cost


def square_edges(x0: float, y0: float, x1: float, y1: float) -> list[LineSegment]:
    corners = [
        Point(x=x0, y=y0),
        Point(x=x1, y=y0),
        Point(x=x1, y=y1),
        Point(x=x0, y=y1),
    ]
    return [
        LineSegment.from_points(a, b) for a, b in zip(corners, corners[1:] + corners[:1])
    ]


# ===========================================================================
# Boundary Intersector
# ===========================================================================
class TestBoundaryIntersector:
    def test_no_edges_yields_endpoints(self):
        path = Path(origin=Point(x=0, y=0), destination=Point(x=100, y=0))
        points = boundary_intersections(path, [])
        assert points == [path.origin, path.destination]

    def test_crossings_sorted_along_path(self):
        path = Path(origin=Point(x=100, y=50), destination=Point(x=0, y=50))
        points = boundary_intersections(path, square_edges(20, 0, 60, 100))

        xs = [p.x for p in points]
        assert xs == pytest.approx([100, 60, 20, 0])

    def test_vertical_path_sorted_by_y(self):
        path = Path(origin=Point(x=50, y=0), destination=Point(x=50, y=100))
        points = boundary_intersections(path, square_edges(0, 30, 100, 70))

        ys = [p.y for p in points]
        assert ys == pytest.approx([0, 30, 70, 100])

    def test_duplicate_crossings_kept(self):
        """Two edges meeting on the path both report the crossing."""
        path = Path(origin=Point(x=0, y=0), destination=Point(x=100, y=0))
        edges = [
            LineSegment.from_points(Point(x=50, y=-10), Point(x=50, y=0)),
            LineSegment.from_points(Point(x=50, y=0), Point(x=50, y=10)),
        ]
        points = boundary_intersections(path, edges)
        assert len(points) == 4

    def test_partition_sums_to_path_length(self):
        path = Path(origin=Point(x=-30, y=-20), destination=Point(x=170, y=90))
        edges = [
            *square_edges(0, 0, 60, 60),
            CircleEdge(center=Point(x=120, y=60), radius=25),
        ]
        points = boundary_intersections(path, edges)
        total = sum(distance_2d(a, b) for a, b in iterate_pairs(points))

        assert len(points) > 2
        assert total == pytest.approx(path.length_2d)

    def test_distances_non_decreasing(self):
        path = Path(origin=Point(x=0, y=0), destination=Point(x=200, y=100))
        edges = [*square_edges(10, 10, 50, 50), *square_edges(30, 0, 150, 80)]
        points = boundary_intersections(path, edges)
        distances = [abs(p.x - path.origin.x) for p in points]

        assert distances == sorted(distances)


# ===========================================================================
# Segment Cost Evaluator (2-D)
# ===========================================================================
class TestSegmentCost2d:
    def test_midpoint_multiplier_times_length(self):
        terrain = FakeTerrain(cost=3.0)
        cost = segment_cost_2d(Point(x=0, y=0), Point(x=10, y=0), 4.0, terrain)

        assert cost == pytest.approx(8.0)
        assert terrain.cost_queries[0][0] == Point(x=5, y=0)


# ===========================================================================
# Elevation Proportioner (3-D)
# ===========================================================================
class TestProportionalCost:
    def test_span_inside_band_full_cost(self):
        assert proportional_cost(2.0, 10.0, 2.0, 8.0, 0.0, 10.0) == pytest.approx(20.0)

    def test_unbounded_band_full_cost(self):
        assert proportional_cost(1.0, 10.0, 50.0, 80.0, None, None) == pytest.approx(10.0)

    def test_span_above_band(self):
        assert proportional_cost(1.0, 10.0, 15.0, 20.0, 0.0, 10.0) == 0.0

    def test_span_below_band(self):
        assert proportional_cost(1.0, 10.0, -20.0, -5.0, 0.0, 10.0) == 0.0

    def test_top_trim(self):
        """Band [0, 10], span [5, 15], length 10 -> half inside -> 5."""
        assert proportional_cost(1.0, 10.0, 5.0, 15.0, 0.0, 10.0) == pytest.approx(5.0)

    def test_bottom_trim(self):
        assert proportional_cost(1.0, 10.0, -5.0, 5.0, 0.0, 10.0) == pytest.approx(5.0)

    def test_both_trims(self):
        # Span [-10, 20] through band [0, 10]: one third inside
        assert proportional_cost(3.0, 30.0, -10.0, 20.0, 0.0, 10.0) == pytest.approx(30.0)

    def test_flat_span_on_boundary_full_cost(self):
        """Flat span touching the ceiling is inside without dividing by zero."""
        assert proportional_cost(1.0, 10.0, 10.0, 10.0, 0.0, 10.0) == pytest.approx(10.0)

    def test_zero_multiplier(self):
        assert proportional_cost(0.0, 10.0, 5.0, 15.0, 0.0, 10.0) == 0.0


class TestSegmentCost3d:
    def test_overlapping_volumes_stack(self):
        volumes = [
            TerrainVolume(min_elevation=0, max_elevation=100, multiplier=1.0),
            TerrainVolume(min_elevation=0, max_elevation=100, multiplier=2.0),
        ]
        config = MapConfig(grid_size=1.0, grid_distance=1.0, use_elevation=True)
        cost = segment_cost_3d(
            Point(x=0, y=0, z=10),
            Point(x=10, y=0, z=10),
            10.0,
            FakeTerrain(volumes=volumes),
            config,
        )
        assert cost == pytest.approx(30.0)  # (1 + 2) * 10, not max

    def test_bands_converted_to_pixels(self):
        # 100 px per 5 units: band [0, 10] units is [0, 200] px
        volumes = [TerrainVolume(min_elevation=0, max_elevation=10, multiplier=1.0)]
        config = MapConfig(grid_size=100.0, grid_distance=5.0, use_elevation=True)
        cost = segment_cost_3d(
            Point(x=0, y=0, z=100),
            Point(x=10, y=0, z=300),
            10.0,
            FakeTerrain(volumes=volumes),
            config,
        )
        assert cost == pytest.approx(5.0)

    def test_tokens_ignored_unless_counted(self):
        token = TerrainVolume(
            min_elevation=0, max_elevation=6, multiplier=1.0, kind=VolumeKind.TOKEN
        )
        terrain = FakeTerrain(volumes=[token])
        start, end = Point(x=0, y=0, z=1), Point(x=10, y=0, z=1)

        off = MapConfig(grid_size=1.0, grid_distance=1.0, use_elevation=True)
        on = off.model_copy(update={"count_tokens": True})

        assert segment_cost_3d(start, end, 10.0, terrain, off) == 0.0
        assert segment_cost_3d(start, end, 10.0, terrain, on) == pytest.approx(10.0)


# ===========================================================================
# Elevation Ramp
# ===========================================================================
class TestElevationRamp:
    def test_linear_interpolation(self):
        path = Path(origin=Point(x=0, y=0, z=10), destination=Point(x=100, y=0, z=30))
        ramp = ElevationRamp(path)
        assert ramp.lift(Point(x=50, y=0)).z == pytest.approx(20.0)
        assert ramp.lift(path.destination).z == pytest.approx(30.0)

    def test_level_path_holds_origin_elevation(self):
        path = Path(origin=Point(x=0, y=0, z=10), destination=Point(x=100, y=0, z=10))
        assert ElevationRamp(path).lift(Point(x=70, y=0)).z == 10

    def test_pure_vertical_move_ratio_is_zero(self):
        path = Path(origin=Point(x=0, y=0, z=0), destination=Point(x=0, y=0, z=50))
        assert ElevationRamp(path).ratio == 0.0

    def test_requires_elevation(self):
        path = Path(origin=Point(x=0, y=0), destination=Point(x=10, y=0))
        with pytest.raises(ValueError):
            ElevationRamp(path)


# ===========================================================================
# GridlessCostEvaluator
# ===========================================================================
class TestGridlessCostEvaluator:
    def test_no_boundaries_uses_midpoint_cost(self, gridless_config):
        terrain = FakeTerrain(cost=2.0)
        evaluator = GridlessCostEvaluator(gridless_config, terrain, edges=())
        path = Path(origin=Point(x=0, y=0), destination=Point(x=200, y=0))

        # 200 px = 10 units, incremental multiplier 1
        assert evaluator.measure(path) == pytest.approx(10.0)
        assert [q[0] for q in terrain.cost_queries] == [Point(x=100, y=0)]

    def test_cost_only_inside_terrain(self, gridless_config):
        terrain = FakeTerrain(cost=strip_cost(100, 300, 2.0))
        edges = square_edges(100, -50, 300, 50)
        evaluator = GridlessCostEvaluator(gridless_config, terrain, edges)
        path = Path(origin=Point(x=0, y=0), destination=Point(x=400, y=0))

        # 200 px inside the strip = 10 units
        assert evaluator.measure(path) == pytest.approx(10.0)

    def test_degenerate_path_costs_nothing(self, gridless_config):
        evaluator = GridlessCostEvaluator(gridless_config, FakeTerrain(cost=5.0), ())
        point = Point(x=10, y=10)
        assert evaluator.measure(Path(origin=point, destination=point)) == 0.0

    def test_idempotent(self, gridless_config):
        terrain = FakeTerrain(cost=strip_cost(100, 300, 3.0))
        evaluator = GridlessCostEvaluator(
            gridless_config, terrain, square_edges(100, -50, 300, 50)
        )
        path = Path(origin=Point(x=0, y=10), destination=Point(x=400, y=-10))
        assert evaluator.measure(path) == evaluator.measure(path)

    def test_3d_path_leaving_band(self, gridless_3d_config):
        """Climbing from 0 to 20 over terrain 0..10 high: half the path counts."""
        volumes = [TerrainVolume(min_elevation=0, max_elevation=10, multiplier=1.0)]
        terrain = FakeTerrain(volumes=volumes)
        evaluator = GridlessCostEvaluator(gridless_3d_config, terrain, edges=())
        path = Path(origin=Point(x=0, y=0, z=0), destination=Point(x=20, y=0, z=20))

        length_3d = (20**2 + 20**2) ** 0.5
        assert evaluator.measure(path) == pytest.approx(length_3d / 2)

    def test_3d_falls_back_to_2d_without_elevation(self, gridless_3d_config):
        terrain = FakeTerrain(cost=2.0, volumes=[TerrainVolume(multiplier=5.0)])
        evaluator = GridlessCostEvaluator(gridless_3d_config, terrain, edges=())
        path = Path(origin=Point(x=0, y=0), destination=Point(x=10, y=0))

        assert evaluator.measure(path) == pytest.approx(10.0)
        assert terrain.volume_queries == []

    def test_cost_never_negative(self, gridless_config):
        evaluator = GridlessCostEvaluator(gridless_config, FakeTerrain(cost=0.0), ())
        path = Path(origin=Point(x=0, y=0), destination=Point(x=100, y=0))
        assert evaluator.measure(path) == 0.0
