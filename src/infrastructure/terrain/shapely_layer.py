"""Shapely-backed terrain data provider for the TerrainQuery port.

Builds one shapely geometry per terrain source at construction and answers
point queries with prepared ``covers`` tests (boundary points count as
inside).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from typing import Any

import numpy as np
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon, box
from shapely.geometry.base import BaseGeometry
from shapely.prepared import PreparedGeometry, prep

from domain.geometry.value_objects import Point
from domain.terrain.errors import UnsupportedShapeError
from domain.terrain.value_objects import (
    CircleSource,
    ConeSource,
    MapConfig,
    PolygonSource,
    RectangleSource,
    TerrainVolume,
    TokenSource,
    VolumeKind,
)

logger = logging.getLogger(__name__)

# Vertices used to approximate a cone's curved side
CONE_ARC_VERTICES = 32


def _polygon(source: PolygonSource, config: MapConfig) -> BaseGeometry:
    return Polygon([(p.x, p.y) for p in source.absolute_points()])


def _circle(source: CircleSource, config: MapConfig) -> BaseGeometry:
    return ShapelyPoint(source.x, source.y).buffer(source.radius, quad_segs=32)


def _rectangle(source: RectangleSource | TokenSource, config: MapConfig) -> BaseGeometry:
    return box(source.x, source.y, source.x + source.width, source.y + source.height)


def _cone(source: ConeSource, config: MapConfig) -> BaseGeometry:
    radius = config.distance_to_pixels(source.distance)
    direction = math.radians(source.direction)
    half = math.radians(source.angle) / 2
    thetas = np.linspace(direction - half, direction + half, CONE_ARC_VERTICES)
    arc = [
        (source.x + radius * math.cos(t), source.y + radius * math.sin(t))
        for t in thetas
    ]
    if source.angle >= 360:
        return Polygon(arc)
    return Polygon([(source.x, source.y), *arc])


_GEOMETRIES: dict[str, Callable[[Any, MapConfig], BaseGeometry]] = {
    "polygon": _polygon,
    "circle": _circle,
    "rectangle": _rectangle,
    "cone": _cone,
    "token": _rectangle,
}


class ShapelyTerrainLayer:
    """Infrastructure adapter answering terrain queries from source shapes.

    Parameters
    ----------
    sources: Iterable
        Terrain regions, templates and tokens. Unsupported shapes are
        logged and skipped.
    config: MapConfig
        Supplies unit conversion and the ``count_tokens`` flag.
    """

    def __init__(self, sources: Iterable[Any], config: MapConfig) -> None:
        self.config = config
        self._regions: list[tuple[PreparedGeometry, TerrainVolume]] = []
        for source in sources:
            kind = getattr(source, "kind", None)
            build = _GEOMETRIES.get(kind) if isinstance(kind, str) else None
            if build is None:
                logger.warning(
                    "Terrain source skipped: %s", UnsupportedShapeError(kind)
                )
                continue
            volume = (
                source.volume(config)
                if isinstance(source, TokenSource)
                else source.volume()
            )
            self._regions.append((prep(build(source, config)), volume))

    def volumes_overlapping(
        self, point: Point, exclude_source_id: str | None = None
    ) -> list[TerrainVolume]:
        probe = ShapelyPoint(point.x, point.y)
        return [
            volume
            for geometry, volume in self._regions
            if (exclude_source_id is None or volume.source_id != exclude_source_id)
            and geometry.covers(probe)
        ]

    def cost_multiplier_at(
        self,
        point: Point,
        elevation: float | None = None,
        exclude_source_id: str | None = None,
    ) -> float:
        """Raw cost: 1 plus the stacked incremental cost of covering volumes.

        Only volumes whose band contains ``elevation`` (grid units) count.
        Tokens count only when ``count_tokens`` is enabled. The moving token is
        left out through ``exclude_source_id``.
        """
        extra = 0.0
        for volume in self.volumes_overlapping(point, exclude_source_id):
            if volume.kind is VolumeKind.TOKEN and not self.config.count_tokens:
                continue
            if volume.contains_elevation(elevation):
                extra += volume.multiplier
        return 1.0 + extra
