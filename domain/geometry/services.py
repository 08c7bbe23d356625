"""Geometry Bounded Context - Domain Services.

Distance helpers and edge/segment intersection tests. Pure functions, no I/O.
"""

from __future__ import annotations

import math
from collections.abc import Callable

from domain.geometry.value_objects import (
    ArcEdge,
    BoundaryEdge,
    CircleEdge,
    LineSegment,
    Point,
)

# ---------------------------------------------------------------------------
# Numeric Constants
# ---------------------------------------------------------------------------
EPSILON = 1e-8  # Tolerance for "almost equal" comparisons in pixel units


def almost_equal(a: float, b: float, epsilon: float = EPSILON) -> bool:
    """Compare two floats within an absolute tolerance."""
    return abs(a - b) <= epsilon


# ---------------------------------------------------------------------------
# Distances
# ---------------------------------------------------------------------------
def distance_2d(a: Point, b: Point) -> float:
    """Planar distance between two points, ignoring elevation."""
    return math.hypot(b.x - a.x, b.y - a.y)


def distance(a: Point, b: Point) -> float:
    """Distance between two points, in 3-D when both carry elevation."""
    if a.z is None or b.z is None:
        return distance_2d(a, b)
    return math.sqrt((b.x - a.x) ** 2 + (b.y - a.y) ** 2 + (b.z - a.z) ** 2)


def midpoint(a: Point, b: Point) -> Point:
    """Planar midpoint of two points (no elevation)."""
    return Point(x=(a.x + b.x) / 2, y=(a.y + b.y) / 2)


# ---------------------------------------------------------------------------
# Intersections
# ---------------------------------------------------------------------------
def _segment_with_segment(edge: LineSegment, segment: LineSegment) -> list[Point]:
    p, r_x, r_y = edge.a, edge.b.x - edge.a.x, edge.b.y - edge.a.y
    q, s_x, s_y = segment.a, segment.b.x - segment.a.x, segment.b.y - segment.a.y

    denom = r_x * s_y - r_y * s_x
    if almost_equal(denom, 0.0):
        # Parallel or collinear: no single crossing point
        return []

    qp_x, qp_y = q.x - p.x, q.y - p.y
    t = (qp_x * s_y - qp_y * s_x) / denom
    u = (qp_x * r_y - qp_y * r_x) / denom
    if -EPSILON <= t <= 1 + EPSILON and -EPSILON <= u <= 1 + EPSILON:
        return [Point(x=p.x + t * r_x, y=p.y + t * r_y)]
    return []


def _circle_crossings(
    center: Point, radius: float, segment: LineSegment
) -> list[tuple[Point, float]]:
    """Return (point, polar angle about center) for circle/segment crossings."""
    d_x = segment.b.x - segment.a.x
    d_y = segment.b.y - segment.a.y
    f_x = segment.a.x - center.x
    f_y = segment.a.y - center.y

    a = d_x * d_x + d_y * d_y
    if almost_equal(a, 0.0):
        return []
    b = 2 * (f_x * d_x + f_y * d_y)
    c = f_x * f_x + f_y * f_y - radius * radius

    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return []

    root = math.sqrt(discriminant)
    ts = [(-b - root) / (2 * a)]
    if root > EPSILON:
        ts.append((-b + root) / (2 * a))

    crossings: list[tuple[Point, float]] = []
    for t in ts:
        if -EPSILON <= t <= 1 + EPSILON:
            x = segment.a.x + t * d_x
            y = segment.a.y + t * d_y
            crossings.append(
                (Point(x=x, y=y), math.atan2(y - center.y, x - center.x))
            )
    return crossings


def _circle_with_segment(edge: CircleEdge, segment: LineSegment) -> list[Point]:
    return [point for point, _ in _circle_crossings(edge.center, edge.radius, segment)]


def _arc_with_segment(edge: ArcEdge, segment: LineSegment) -> list[Point]:
    return [
        point
        for point, theta in _circle_crossings(edge.center, edge.radius, segment)
        if edge.contains_angle(theta)
    ]


_INTERSECTORS: dict[str, Callable[..., list[Point]]] = {
    "segment": _segment_with_segment,
    "circle": _circle_with_segment,
    "arc": _arc_with_segment,
}


def intersect(edge: BoundaryEdge, segment: LineSegment) -> list[Point]:
    """Intersect a boundary edge with a straight segment.

    Dispatches on ``edge.kind``. Returns zero or more planar points; tangent
    contacts yield a single point.
    """
    return _INTERSECTORS[edge.kind](edge, segment)
