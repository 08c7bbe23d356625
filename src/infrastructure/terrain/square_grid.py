"""Square grid adapter for the GridSystem port.

Cells are ``grid_size`` pixels square, row 0 / col 0 at the canvas origin.
Cell enumeration walks one cell per step along the dominant axis, so a
straight diagonal visits exactly one cell per diagonal move.
"""

from __future__ import annotations

import math
from collections.abc import Iterator

import numpy as np

from domain.geometry.value_objects import Point
from domain.terrain.value_objects import GridStep, MapConfig


class SquareGridAdapter:
    """Infrastructure adapter for square grids.

    Parameters
    ----------
    config: MapConfig
        Supplies ``grid_size`` (pixels per cell).
    """

    def __init__(self, config: MapConfig) -> None:
        self.config = config

    def grid_position_of(self, point: Point) -> tuple[int, int]:
        size = self.config.grid_size
        return (int(math.floor(point.y / size)), int(math.floor(point.x / size)))

    def cell_center_of(self, row: int, col: int) -> Point:
        size = self.config.grid_size
        return Point(x=(col + 0.5) * size, y=(row + 0.5) * size)

    def iterate_grid_steps(self, origin: Point, destination: Point) -> Iterator[GridStep]:
        """Yield cells under the line from origin to destination.

        The origin cell is not yielded. Elevation is interpolated linearly
        when both endpoints carry ``z``; otherwise steps have no elevation.
        A move within one cell yields that cell only if elevation changes.
        """
        r0, c0 = self.grid_position_of(origin)
        r1, c1 = self.grid_position_of(destination)
        has_elevation = origin.z is not None and destination.z is not None

        n_steps = max(abs(r1 - r0), abs(c1 - c0))
        if n_steps == 0:
            if has_elevation and origin.z != destination.z:
                yield GridStep(row=r1, col=c1, elevation=destination.z)
            return

        # Round to nearest cell along the dominant-axis parametrization
        rows = np.rint(np.linspace(r0, r1, n_steps + 1)).astype(int)[1:]
        cols = np.rint(np.linspace(c0, c1, n_steps + 1)).astype(int)[1:]
        if has_elevation:
            elevations = np.linspace(origin.z, destination.z, n_steps + 1)[1:]
        else:
            elevations = np.full(n_steps, np.nan)

        for row, col, elevation in zip(rows, cols, elevations):
            yield GridStep(row=int(row), col=int(col), elevation=float(elevation))
