"""Terrain Bounded Context - Measurement Session.

Composes the cost strategies for a host measurement pipeline. The host calls
``start`` when a measurement begins and ``modify_distance`` for every measured
leg, instead of having its own methods wrapped.

Session state:
    - the moving token (id and elevation), recorded at start
    - the gridless boundary-edge cache, written once at start and read for
      every leg. Terrain that moves mid-session is not seen until restart.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from itertools import pairwise
from typing import Any

from domain.geometry.value_objects import BoundaryEdge, Point
from domain.terrain.edge_collector import collect_terrain_edges
from domain.terrain.errors import MeasurementSessionError
from domain.terrain.evaluator import GridlessCostEvaluator
from domain.terrain.grid_stepper import GridStepper
from domain.terrain.ports import GridSystem, TerrainCostStrategy, TerrainQuery
from domain.terrain.value_objects import MapConfig, Path, TokenSource

logger = logging.getLogger(__name__)


class TerrainRuler:
    """Terrain cost measurement for one map.

    Args:
        config: Map configuration
        terrain: Terrain data provider
        grid: Host grid system; required on gridded maps
    """

    def __init__(
        self,
        config: MapConfig,
        terrain: TerrainQuery,
        grid: GridSystem | None = None,
    ) -> None:
        if not config.is_gridless and grid is None:
            raise ValueError("Gridded maps require a grid system")
        self.config = config
        self.terrain = terrain
        self.grid = grid
        self._strategy: TerrainCostStrategy | None = None
        self._edges: tuple[BoundaryEdge, ...] = ()
        self._token_id: str | None = None
        self._token_elevation: float | None = None

    # -----------------------------------------------------------------------
    # Session lifecycle
    # -----------------------------------------------------------------------
    def start(
        self,
        sources: Iterable[Any] = (),
        moving_token: TokenSource | None = None,
    ) -> None:
        """Begin a measurement session.

        Args:
            sources: Terrain sources whose edges are cached on gridless maps
            moving_token: Token being measured, if any; excluded from edges
                and terrain queries, and supplies the default path elevation
        """
        self._token_id = moving_token.id if moving_token is not None else None
        self._token_elevation = (
            moving_token.elevation if moving_token is not None else None
        )

        if self.config.is_gridless:
            self._edges = collect_terrain_edges(
                sources, self.config, exclude_token_id=self._token_id
            )
            self._strategy = GridlessCostEvaluator(
                self.config, self.terrain, self._edges, exclude_source_id=self._token_id
            )
        else:
            self._edges = ()
            self._strategy = GridStepper(
                self.config,
                self.grid,  # type: ignore[arg-type]
                self.terrain,
                exclude_source_id=self._token_id,
            )

        logger.debug(
            "session started: %s map, %d cached edges, token %s at elevation %s",
            self.config.grid_type,
            len(self._edges),
            self._token_id,
            self._token_elevation,
        )

    def restart(
        self,
        sources: Iterable[Any] = (),
        moving_token: TokenSource | None = None,
    ) -> None:
        """Discard the cached session state and start again."""
        self.end()
        self.start(sources, moving_token)

    def end(self) -> None:
        """Drop the session cache."""
        self._strategy = None
        self._edges = ()
        self._token_id = None
        self._token_elevation = None

    @property
    def is_active(self) -> bool:
        return self._strategy is not None

    @property
    def edges(self) -> tuple[BoundaryEdge, ...]:
        """Boundary edges cached for this session (empty on gridded maps)."""
        return self._edges

    # -----------------------------------------------------------------------
    # Measurement
    # -----------------------------------------------------------------------
    def prepare_path(self, path: Path) -> Path:
        """Apply the session's elevation policy to a measured path.

        With elevation tracking, a missing endpoint elevation falls back to
        the moving token's elevation (converted to pixels). Without it, all
        elevations are dropped.
        """
        if not self.config.use_elevation:
            return path.with_elevations(None, None)

        fallback = (
            None
            if self._token_elevation is None
            else self.config.distance_to_pixels(self._token_elevation)
        )
        origin_z = path.origin.z if path.origin.z is not None else fallback
        destination_z = (
            path.destination.z if path.destination.z is not None else fallback
        )
        # One known endpoint: hold the path level at that elevation
        if origin_z is None:
            origin_z = destination_z
        if destination_z is None:
            destination_z = origin_z
        return path.with_elevations(origin_z, destination_z)

    def measure_cost(self, path: Path) -> float:
        """Incremental terrain cost of one leg.

        Raises:
            MeasurementSessionError: If no session has been started
            UnrecognizedDiagonalRuleError: If the diagonal rule is unknown
        """
        if self._strategy is None:
            raise MeasurementSessionError("Measurement session not started")
        prepared = self.prepare_path(path)
        cost = self._strategy.measure(prepared)
        logger.debug(
            "terrain cost (%s, %s, %s) -> (%s, %s, %s): %s",
            prepared.origin.x,
            prepared.origin.y,
            prepared.origin.z,
            prepared.destination.x,
            prepared.destination.y,
            prepared.destination.z,
            cost,
        )
        return cost

    def modify_distance(self, measured_distance: float, path: Path) -> float:
        """Add the terrain cost of ``path`` to its base measured distance."""
        return measured_distance + self.measure_cost(path)

    def measure_route(self, waypoints: Sequence[Point]) -> float:
        """Total incremental cost of a multi-leg route, measured leg by leg."""
        return sum(
            (
                self.measure_cost(Path(origin=a, destination=b))
                for a, b in pairwise(waypoints)
            ),
            0.0,
        )
