"""Cost-raster terrain data provider for the TerrainQuery port.

Reads raw cost multipliers from a per-cell ``CostRaster``; cell (row, col)
covers the square of ``grid_size`` pixels at that position. Raster terrain
has no elevation band, so its volumes are unbounded.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike

from domain.geometry.value_objects import Point
from domain.terrain.value_objects import (
    CostRaster,
    MapConfig,
    TerrainVolume,
    incremental_cost,
)


class RasterTerrainLayer:
    """Infrastructure adapter answering terrain queries from a cost raster.

    Raster cells carry no source id, so ``exclude_source_id`` never matches.
    """

    def __init__(self, raster: CostRaster, config: MapConfig) -> None:
        self.raster = raster
        self.config = config

    @classmethod
    def from_array(cls, data: ArrayLike, config: MapConfig) -> "RasterTerrainLayer":
        """Build from any array-like of raw costs (copied as float32)."""
        return cls(CostRaster(data=np.asarray(data, dtype=np.float32)), config)

    def _cell_of(self, point: Point) -> tuple[int, int]:
        size = self.config.grid_size
        return (int(math.floor(point.y / size)), int(math.floor(point.x / size)))

    def cost_multiplier_at(
        self,
        point: Point,
        elevation: float | None = None,
        exclude_source_id: str | None = None,
    ) -> float:
        row, col = self._cell_of(point)
        return self.raster.cost_at(row, col)

    def volumes_overlapping(
        self, point: Point, exclude_source_id: str | None = None
    ) -> list[TerrainVolume]:
        extra = incremental_cost(self.cost_multiplier_at(point))
        if extra == 0:
            return []
        return [TerrainVolume(multiplier=extra)]
