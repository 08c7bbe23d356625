"""Terrain Bounded Context - Grid Stepper.

Walks a path cell by cell on a gridded map and accumulates the incremental
terrain cost of each entered cell under the session's diagonal rule.

Step classification: a step is diagonal when both row and column change, or
when elevation changes at all (a straight up/down move is "diagonal in the
vertical sense"). Anything else, including re-entering the same cell, is
orthogonal and costs one plain cell distance.
"""

from __future__ import annotations

import logging

from domain.terrain.diagonal_rules import (
    equidistant_cost,
    euclidean_cost,
    fixed_alternating_cost,
)
from domain.terrain.errors import UnrecognizedDiagonalRuleError
from domain.terrain.ports import GridSystem, TerrainQuery
from domain.terrain.value_objects import (
    DiagonalRule,
    GridStep,
    MapConfig,
    Path,
    incremental_cost,
)

logger = logging.getLogger(__name__)

_KNOWN_RULES = frozenset(DiagonalRule)


def is_diagonal_step(prior: GridStep, current: GridStep) -> bool:
    """Classify a step as diagonal (True) or orthogonal (False)."""
    row_changed = prior.row != current.row
    col_changed = prior.col != current.col
    elevation_changed = (
        prior.elevation is not None
        and current.elevation is not None
        and prior.elevation != current.elevation
    )
    return (row_changed and col_changed) or elevation_changed


class GridStepper:
    """Cost strategy for gridded maps.

    Args:
        config: Map configuration; fixes the diagonal rule for every walk
        grid: Host grid system enumerating crossed cells
        terrain: Terrain data provider
        exclude_source_id: Source id of the moving token, never charged as terrain
    """

    def __init__(
        self,
        config: MapConfig,
        grid: GridSystem,
        terrain: TerrainQuery,
        exclude_source_id: str | None = None,
    ) -> None:
        self.config = config
        self.grid = grid
        self.terrain = terrain
        self.exclude_source_id = exclude_source_id

    def measure(self, path: Path) -> float:
        """Return the incremental terrain cost of walking ``path``.

        Raises:
            UnrecognizedDiagonalRuleError: If the configured rule is unknown
        """
        rule = self.config.diagonal_rule
        if rule not in _KNOWN_RULES:
            raise UnrecognizedDiagonalRuleError(rule)

        if path.is_degenerate:
            return 0.0

        use_elevation = self.config.use_elevation
        origin_elevation = path.origin.z if use_elevation else None

        row, col = self.grid.grid_position_of(path.origin)
        prior = GridStep(row=row, col=col, elevation=origin_elevation)

        total_cost = 0.0
        num_diagonals = 0

        for step in self.grid.iterate_grid_steps(path.origin, path.destination):
            elevation = step.elevation if use_elevation else None
            if use_elevation and elevation is None:
                elevation = origin_elevation
            current = GridStep(row=step.row, col=step.col, elevation=elevation)

            # Terrain layer expects elevation in grid units
            elevation_g = (
                None
                if elevation is None
                else round(self.config.pixels_to_distance(elevation))
            )
            center = self.grid.cell_center_of(current.row, current.col)
            multiplier = incremental_cost(
                self.terrain.cost_multiplier_at(
                    center,
                    elevation=elevation_g,
                    exclude_source_id=self.exclude_source_id,
                )
            )
            logger.debug(
                "grid [%d, %d] elevation %s: incremental cost %s",
                current.row,
                current.col,
                elevation,
                multiplier,
            )

            if rule == DiagonalRule.EQUIDISTANT or not is_diagonal_step(prior, current):
                total_cost += equidistant_cost(multiplier, self.config)
            else:
                num_diagonals += 1
                if rule == DiagonalRule.FIXED_ALTERNATING:
                    total_cost += fixed_alternating_cost(
                        multiplier, num_diagonals, self.config
                    )
                else:
                    total_cost += euclidean_cost(
                        multiplier, current, prior, self.grid, self.config
                    )

            prior = current

        return max(total_cost, 0.0)
