"""Terrain Bounded Context - Diagonal Cost Rules.

Pure functions converting an incremental multiplier into a distance-weighted
cost for one grid step. Three conventions:

1. equidistant: every move costs one cell distance, diagonals included.
2. fixed alternating (5-10-5): diagonals alternate between one and two cell
   distances, by parity of the diagonal count so far.
3. euclidean: a diagonal costs the actual distance between cell centers,
   including the elevation delta when elevation is tracked.
"""

from __future__ import annotations

import logging

from domain.geometry.services import distance
from domain.terrain.ports import GridSystem
from domain.terrain.value_objects import GridStep, MapConfig

logger = logging.getLogger(__name__)


def equidistant_cost(multiplier: float, config: MapConfig) -> float:
    """Cost of a move that counts one full cell distance."""
    return multiplier * config.grid_distance


def fixed_alternating_cost(
    multiplier: float, diagonal_count: int, config: MapConfig
) -> float:
    """Cost of the ``diagonal_count``-th diagonal under the 5-10-5 rule.

    Odd-numbered diagonals are cheap (1x) and even-numbered ones expensive
    (2x); ``swap_alternating_parity`` reverses this.

    Args:
        multiplier: Incremental cost multiplier of the entered cell
        diagonal_count: Diagonals moved so far, including this one (>= 1)
        config: Map configuration
    """
    cheap = diagonal_count % 2 == 1
    if config.swap_alternating_parity:
        cheap = not cheap
    factor = 1 if cheap else 2
    logger.debug("5-10-5 cost %s * %s", equidistant_cost(multiplier, config), factor)
    return equidistant_cost(multiplier, config) * factor


def euclidean_cost(
    multiplier: float,
    current: GridStep,
    prior: GridStep,
    grid: GridSystem,
    config: MapConfig,
) -> float:
    """Cost of a diagonal measured as the real distance between cell centers.

    With elevation tracking, missing step elevations count as 0. The distance
    is converted to grid units and rounded before multiplying.
    """
    a = grid.cell_center_of(prior.row, prior.col)
    b = grid.cell_center_of(current.row, current.col)
    if config.use_elevation:
        a = a.with_z(prior.elevation or 0.0)
        b = b.with_z(current.elevation or 0.0)

    step_distance = round(config.pixels_to_distance(distance(a, b)))
    logger.debug("euclidean cost %s * %s", multiplier, step_distance)
    return multiplier * step_distance
