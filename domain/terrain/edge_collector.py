"""Terrain Bounded Context - Terrain Edge Collector.

One-time conversion of raw terrain, template and token shapes into the
uniform BoundaryEdge representation consumed by the Boundary Intersector.
Runs once per measurement session, upstream of every gridless measurement.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from typing import Any

from domain.geometry.value_objects import (
    ArcEdge,
    BoundaryEdge,
    CircleEdge,
    LineSegment,
    Point,
)
from domain.terrain.errors import UnsupportedShapeError
from domain.terrain.value_objects import (
    CircleSource,
    ConeSource,
    MapConfig,
    PolygonSource,
    RectangleSource,
    TokenSource,
)

logger = logging.getLogger(__name__)


def _ring(points: list[Point]) -> list[BoundaryEdge]:
    """Segments joining consecutive points, closing edge included."""
    if points[0] == points[-1]:
        points = points[:-1]
    return [
        LineSegment.from_points(a, b)
        for a, b in zip(points, points[1:] + points[:1])
    ]


def polygon_edges(source: PolygonSource, config: MapConfig) -> list[BoundaryEdge]:
    return _ring(source.absolute_points())


def circle_edges(source: CircleSource, config: MapConfig) -> list[BoundaryEdge]:
    return [CircleEdge(center=Point(x=source.x, y=source.y), radius=source.radius)]


def rectangle_edges(source: RectangleSource, config: MapConfig) -> list[BoundaryEdge]:
    return _ring(source.corners())


def token_edges(source: TokenSource, config: MapConfig) -> list[BoundaryEdge]:
    return _ring(source.corners())


def cone_edges(source: ConeSource, config: MapConfig) -> list[BoundaryEdge]:
    """Arc at the cone's reach plus the two radii bounding its sides."""
    apex = Point(x=source.x, y=source.y)
    radius = config.distance_to_pixels(source.distance)
    direction = math.radians(source.direction)
    angle = math.radians(source.angle)

    edges: list[BoundaryEdge] = [
        ArcEdge(center=apex, radius=radius, direction=direction, angle=angle)
    ]
    if source.angle < 360:
        for side in (direction - angle / 2, direction + angle / 2):
            tip = Point(
                x=apex.x + math.cos(side) * radius,
                y=apex.y + math.sin(side) * radius,
            )
            edges.append(LineSegment.from_points(apex, tip))
    return edges


_DECOMPOSERS: dict[str, Callable[[Any, MapConfig], list[BoundaryEdge]]] = {
    "polygon": polygon_edges,
    "circle": circle_edges,
    "rectangle": rectangle_edges,
    "cone": cone_edges,
    "token": token_edges,
}


def edges_for_source(source: Any, config: MapConfig) -> list[BoundaryEdge]:
    """Decompose one terrain source into boundary edges.

    Raises:
        UnsupportedShapeError: If the source kind has no decomposer
    """
    kind = getattr(source, "kind", None)
    decomposer = _DECOMPOSERS.get(kind) if isinstance(kind, str) else None
    if decomposer is None:
        raise UnsupportedShapeError(kind if kind is not None else type(source).__name__)
    return decomposer(source, config)


def collect_terrain_edges(
    sources: Iterable[Any],
    config: MapConfig,
    exclude_token_id: str | None = None,
) -> tuple[BoundaryEdge, ...]:
    """Collect boundary edges of every terrain source.

    Unsupported shapes are logged and skipped; they never abort collection.

    Args:
        sources: Terrain regions, templates and tokens
        config: Map configuration (cone lengths are in grid units)
        exclude_token_id: Id of the token being measured, left out of the set

    Returns:
        Immutable tuple of edges, suitable for caching across a session
    """
    edges: list[BoundaryEdge] = []
    for source in sources:
        if isinstance(source, TokenSource) and source.id == exclude_token_id:
            continue
        try:
            edges.extend(edges_for_source(source, config))
        except UnsupportedShapeError as e:
            logger.warning("Unknown terrain source shape ignored: %s", e.kind)

    logger.debug("collected %d terrain edges", len(edges))
    return tuple(edges)
