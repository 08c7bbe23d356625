"""Domain Port(s) for terrain cost measurement.

Defines interfaces (Protocols) that infrastructure adapters must implement
and that the host measurement pipeline consumes. No concrete I/O here.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from domain.geometry.value_objects import Point

from .value_objects import GridStep, Path, TerrainVolume


class TerrainQuery(Protocol):
    """Port for reading terrain costs at canvas points.

    Implementations live in infrastructure (e.g., shapely or raster layers).
    """

    def cost_multiplier_at(
        self,
        point: Point,
        elevation: float | None = None,
        exclude_source_id: str | None = None,
    ) -> float:
        """Raw movement cost multiplier at ``point`` (1.0 = normal movement).

        ``elevation`` is in grid distance units; ``None`` ignores elevation.
        Volumes whose ``source_id`` equals ``exclude_source_id`` are left out.
        """
        ...

    def volumes_overlapping(
        self, point: Point, exclude_source_id: str | None = None
    ) -> Iterable[TerrainVolume]:
        """Terrain, template and token volumes covering ``point`` in the plane.

        Volumes whose ``source_id`` equals ``exclude_source_id`` are left out.
        """
        ...


class GridSystem(Protocol):
    """Port for the host grid: cell enumeration and coordinate conversion."""

    def grid_position_of(self, point: Point) -> tuple[int, int]:
        """Return the (row, col) of the cell containing ``point``."""
        ...

    def cell_center_of(self, row: int, col: int) -> Point:
        """Return the canvas point at the center of a cell."""
        ...

    def iterate_grid_steps(self, origin: Point, destination: Point) -> Iterable[GridStep]:
        """Yield the cells a straight path crosses, origin cell excluded."""
        ...


class TerrainCostStrategy(Protocol):
    """Injected cost strategy called by the host measurement pipeline."""

    def measure(self, path: Path) -> float:
        """Return the non-negative incremental terrain cost of ``path``."""
        ...
