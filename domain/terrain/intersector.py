"""Terrain Bounded Context - Boundary Intersector.

Finds where a gridless path crosses terrain boundaries and orders the
crossings along the path. Consecutive pairs of the result partition the path
into sub-segments with no gaps or overlaps.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from itertools import pairwise

from domain.geometry.services import intersect
from domain.geometry.value_objects import BoundaryEdge, LineSegment, Point
from domain.terrain.value_objects import Path

logger = logging.getLogger(__name__)


def boundary_intersections(path: Path, edges: Iterable[BoundaryEdge]) -> list[Point]:
    """Return path endpoints plus every boundary crossing, ordered along the path.

    Vertical paths sort by distance in y from the origin, all others by
    distance in x. Duplicates are kept (edges meeting at one crossing).
    Crossing points carry no elevation; the endpoints keep theirs.

    Args:
        path: Non-degenerate measured path
        edges: Session-cached boundary edges

    Returns:
        At least ``[origin, destination]``, non-decreasing in distance from origin
    """
    segment = LineSegment.from_points(path.origin, path.destination)

    points: list[Point] = []
    for edge in edges:
        points.extend(intersect(edge, segment))
    crossings = len(points)

    points.append(path.origin)
    points.append(path.destination)

    origin = path.origin
    if path.is_vertical:
        points.sort(key=lambda p: abs(p.y - origin.y))
    else:
        points.sort(key=lambda p: abs(p.x - origin.x))

    logger.debug("path crosses %d boundary points", crossings)
    return points


def iterate_pairs(points: Sequence[Point]) -> Iterator[tuple[Point, Point]]:
    """Yield consecutive (start, end) sub-segment pairs."""
    return pairwise(points)
