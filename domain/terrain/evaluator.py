"""Terrain Bounded Context - Gridless Cost Evaluation.

Measures terrain cost on continuous (gridless) maps:

1. The Boundary Intersector splits the path at every terrain boundary.
2. Each sub-segment is assumed to lie in uniform terrain, so its midpoint is
   sampled for cost.
3. Without elevation, cost = midpoint multiplier * sub-segment length.
4. With elevation, the path is treated as a straight 3-D ramp. For every
   volume overlapping the midpoint, only the part of the sub-segment inside
   the volume's elevation band is charged. Overlapping volumes stack.

Looking overhead, a path crossing one terrain:

             ----------
            |          |
    Origin -a----------b-----> Destination
            |          |
             ----------

The elevations at a and b come from linear interpolation of the origin and
destination elevations by planar distance travelled.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from domain.geometry.services import almost_equal, distance, distance_2d, midpoint
from domain.geometry.value_objects import BoundaryEdge, Point
from domain.terrain.intersector import boundary_intersections, iterate_pairs
from domain.terrain.ports import TerrainQuery
from domain.terrain.value_objects import (
    MapConfig,
    Path,
    TerrainVolume,
    VolumeKind,
    incremental_cost,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Elevation Ramp
# ---------------------------------------------------------------------------
class ElevationRamp:
    """Linear elevation profile of a path, by planar distance from the origin.

    A zero planar length (pure vertical move) defines the ratio as zero.
    """

    def __init__(self, path: Path) -> None:
        if not path.has_elevation:
            raise ValueError("ElevationRamp requires elevation at both endpoints")
        self.origin = path.origin
        length = path.length_2d
        change = path.destination.z - path.origin.z  # type: ignore[operator]
        self.ratio = change / length if length else 0.0

    def lift(self, point: Point) -> Point:
        """Return ``point`` at its elevation on the ramp."""
        if not self.ratio:
            return point.with_z(self.origin.z)
        travelled = distance_2d(self.origin, point)
        return point.with_z(self.origin.z + travelled * self.ratio)  # type: ignore[operator]


# ---------------------------------------------------------------------------
# Segment Cost Evaluator (2-D)
# ---------------------------------------------------------------------------
def segment_cost_2d(
    start: Point,
    end: Point,
    segment_length: float,
    terrain: TerrainQuery,
    exclude_source_id: str | None = None,
) -> float:
    """Cost of a sub-segment sampled at its planar midpoint."""
    multiplier = incremental_cost(
        terrain.cost_multiplier_at(
            midpoint(start, end), exclude_source_id=exclude_source_id
        )
    )
    logger.debug(
        "gridless cost (%s, %s) -> (%s, %s): %s * %s",
        start.x,
        start.y,
        end.x,
        end.y,
        segment_length,
        multiplier,
    )
    return segment_length * multiplier


# ---------------------------------------------------------------------------
# Elevation Proportioner (3-D)
# ---------------------------------------------------------------------------
def proportional_cost(
    multiplier: float,
    segment_length: float,
    span_min: float,
    span_max: float,
    band_min: float | None,
    band_max: float | None,
) -> float:
    """Charge the part of a sub-segment inside a volume's elevation band.

    All elevations share one unit. ``None`` band limits are unbounded.

    Args:
        multiplier: Incremental cost multiplier of the volume
        segment_length: Sub-segment length in grid units
        span_min: Lowest elevation reached by the sub-segment
        span_max: Highest elevation reached by the sub-segment
        band_min: Volume floor
        band_max: Volume ceiling

    Returns:
        Non-negative cost contribution of this volume
    """
    if multiplier == 0:
        return 0.0

    below_top = band_max is None or span_max < band_max
    above_bottom = band_min is None or span_min > band_min
    if below_top and above_bottom:
        return multiplier * segment_length

    if band_max is not None and span_min > band_max:
        return 0.0  # Entirely above
    if band_min is not None and span_max < band_min:
        return 0.0  # Entirely below

    # Nearly parallel to the map and already known to be inside the band
    if almost_equal(span_max, span_min):
        return multiplier * segment_length

    total_elevation_shift = span_max - span_min
    top_trim = max(span_max - band_max, 0.0) if band_max is not None else 0.0
    bottom_trim = max(band_min - span_min, 0.0) if band_min is not None else 0.0
    inside = 1.0 - top_trim / total_elevation_shift - bottom_trim / total_elevation_shift

    return max(segment_length * inside, 0.0) * multiplier


def segment_cost_3d(
    start: Point,
    end: Point,
    segment_length: float,
    terrain: TerrainQuery,
    config: MapConfig,
    exclude_source_id: str | None = None,
) -> float:
    """Sum the proportional cost of every volume overlapping the sub-segment.

    ``start`` and ``end`` carry elevation in pixels; volume bands are in grid
    units and are converted before comparison.
    """
    span_min = min(start.z, end.z)  # type: ignore[type-var]
    span_max = max(start.z, end.z)  # type: ignore[type-var]

    totals = {kind: 0.0 for kind in VolumeKind}
    for volume in terrain.volumes_overlapping(midpoint(start, end), exclude_source_id):
        multiplier = _effective_multiplier(volume, config)
        band_min = _to_pixels(volume.min_elevation, config)
        band_max = _to_pixels(volume.max_elevation, config)
        totals[volume.kind] += proportional_cost(
            multiplier, segment_length, span_min, span_max, band_min, band_max
        )

    logger.debug(
        "gridless 3d cost (%s, %s, %s) -> (%s, %s, %s): %s[terrain] + %s[template] + %s[token]",
        start.x,
        start.y,
        start.z,
        end.x,
        end.y,
        end.z,
        totals[VolumeKind.TERRAIN],
        totals[VolumeKind.TEMPLATE],
        totals[VolumeKind.TOKEN],
    )
    return sum(totals.values())


def _effective_multiplier(volume: TerrainVolume, config: MapConfig) -> float:
    if volume.kind is VolumeKind.TOKEN and not config.count_tokens:
        return 0.0
    return volume.multiplier


def _to_pixels(elevation: float | None, config: MapConfig) -> float | None:
    return None if elevation is None else config.distance_to_pixels(elevation)


# ---------------------------------------------------------------------------
# Gridless Strategy
# ---------------------------------------------------------------------------
class GridlessCostEvaluator:
    """Cost strategy for gridless maps.

    Args:
        config: Map configuration
        terrain: Terrain data provider
        edges: Boundary edges collected once for the measurement session
        exclude_source_id: Source id of the moving token, never charged as terrain
    """

    def __init__(
        self,
        config: MapConfig,
        terrain: TerrainQuery,
        edges: Iterable[BoundaryEdge],
        exclude_source_id: str | None = None,
    ) -> None:
        self.config = config
        self.terrain = terrain
        self.edges = tuple(edges)
        self.exclude_source_id = exclude_source_id

    def measure(self, path: Path) -> float:
        """Return the incremental terrain cost of ``path``."""
        if path.is_degenerate:
            return 0.0

        ramp = (
            ElevationRamp(path)
            if self.config.use_elevation and path.has_elevation
            else None
        )

        total_cost = 0.0
        points = boundary_intersections(path, self.edges)
        for start, end in iterate_pairs(points):
            if ramp is None:
                length = self.config.pixels_to_distance(distance_2d(start, end))
                total_cost += segment_cost_2d(
                    start, end, length, self.terrain, self.exclude_source_id
                )
            else:
                start, end = ramp.lift(start), ramp.lift(end)
                length = self.config.pixels_to_distance(distance(start, end))
                total_cost += segment_cost_3d(
                    start, end, length, self.terrain, self.config, self.exclude_source_id
                )

        return max(total_cost, 0.0)
