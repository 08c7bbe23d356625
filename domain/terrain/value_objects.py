"""Terrain Bounded Context - Value Objects.

Immutable data structures describing paths, terrain volumes, grid steps and
map configuration. All validation occurs at construction time via Pydantic.

Units:
    Points, GridStep elevations and edge geometry are canvas pixels.
    Terrain elevation bands, token elevations and cone lengths are grid
    distance units (e.g. feet); MapConfig converts between the two.
"""

from __future__ import annotations

import math
from enum import StrEnum
from typing import Annotated, Any, Literal, Union

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from domain.geometry.services import distance_2d
from domain.geometry.value_objects import Point
from domain.terrain.errors import UnrecognizedDiagonalRuleError


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------
class GridType(StrEnum):
    """Discrete cell-stepping map vs. continuous-geometry map."""

    GRIDDED = "gridded"
    GRIDLESS = "gridless"


class DiagonalRule(StrEnum):
    """Convention for costing diagonal moves on a discrete grid."""

    EQUIDISTANT = "equidistant"
    FIXED_ALTERNATING = "fixed_alternating"
    EUCLIDEAN = "euclidean"

    @classmethod
    def parse(cls, value: Any) -> "DiagonalRule":
        """Resolve an enum member, its value, or a host alias.

        Host aliases: ``555`` (equidistant), ``5105`` (fixed alternating),
        ``EUCL`` (euclidean).

        Raises:
            UnrecognizedDiagonalRuleError: If the value names no known rule
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            if value in _RULE_ALIASES:
                return _RULE_ALIASES[value]
            try:
                return cls(value)
            except ValueError:
                pass
        raise UnrecognizedDiagonalRuleError(value)


_RULE_ALIASES: dict[str, DiagonalRule] = {
    "555": DiagonalRule.EQUIDISTANT,
    "5105": DiagonalRule.FIXED_ALTERNATING,
    "EUCL": DiagonalRule.EUCLIDEAN,
}


class VolumeKind(StrEnum):
    """Origin of a terrain volume; all kinds stack additively."""

    TERRAIN = "terrain"
    TEMPLATE = "template"
    TOKEN = "token"


class TokenSize(StrEnum):
    """Creature size categories used to estimate token height."""

    TINY = "tiny"
    SMALL = "sm"
    MEDIUM = "med"
    LARGE = "lg"
    HUGE = "huge"
    GARGANTUAN = "grg"


# Heights in grid units (PHB p. 191 squares / Pf2e size ranges)
TOKEN_HEIGHTS: dict[TokenSize, float] = {
    TokenSize.GARGANTUAN: 48.0,
    TokenSize.HUGE: 24.0,
    TokenSize.LARGE: 12.0,
    TokenSize.MEDIUM: 6.0,
    TokenSize.SMALL: 3.0,
    TokenSize.TINY: 1.5,
}


# ---------------------------------------------------------------------------
# MapConfig
# ---------------------------------------------------------------------------
class MapConfig(BaseModel):
    """Map configuration for one measurement (Value Object).

    Passed explicitly into every component; there is no ambient map state.

    Attributes:
        grid_type: Gridded (cell stepping) or gridless (continuous) measurement
        grid_size: Pixels per grid cell (gridless maps still carry one)
        grid_distance: Distance units per grid cell, e.g. 5 (feet)
        diagonal_rule: Diagonal convention; accepts host aliases such as "5105"
        use_elevation: Track elevation and proportion cost in 3-D
        count_tokens: Treat tokens as difficult terrain
        swap_alternating_parity: Make the first diagonal the expensive one
    """

    grid_type: GridType = GridType.GRIDDED
    grid_size: float = Field(default=100.0, gt=0)
    grid_distance: float = Field(default=5.0, gt=0)
    diagonal_rule: DiagonalRule = DiagonalRule.EUCLIDEAN
    use_elevation: bool = False
    count_tokens: bool = False
    swap_alternating_parity: bool = False

    model_config = ConfigDict(frozen=True)

    @field_validator("diagonal_rule", mode="before")
    @classmethod
    def parse_diagonal_rule(cls, value: Any) -> DiagonalRule:
        return DiagonalRule.parse(value)

    @property
    def is_gridless(self) -> bool:
        return self.grid_type is GridType.GRIDLESS

    def pixels_to_distance(self, pixels: float) -> float:
        """Convert a canvas length into grid distance units."""
        return pixels / self.grid_size * self.grid_distance

    def distance_to_pixels(self, distance: float) -> float:
        """Convert a grid distance into canvas pixels."""
        return distance * self.grid_size / self.grid_distance


# ---------------------------------------------------------------------------
# Path
# ---------------------------------------------------------------------------
class Path(BaseModel):
    """One measured leg from origin to destination (Value Object)."""

    origin: Point
    destination: Point

    model_config = ConfigDict(frozen=True)

    @property
    def length_2d(self) -> float:
        return distance_2d(self.origin, self.destination)

    @property
    def is_vertical(self) -> bool:
        return self.origin.x == self.destination.x

    @property
    def is_degenerate(self) -> bool:
        """True when origin and destination coincide in the plane."""
        return self.is_vertical and self.origin.y == self.destination.y

    @property
    def has_elevation(self) -> bool:
        return self.origin.z is not None and self.destination.z is not None

    def with_elevations(self, origin_z: float | None, destination_z: float | None) -> "Path":
        return Path(
            origin=self.origin.with_z(origin_z),
            destination=self.destination.with_z(destination_z),
        )


# ---------------------------------------------------------------------------
# TerrainVolume
# ---------------------------------------------------------------------------
class TerrainVolume(BaseModel):
    """Region's elevation band plus incremental cost multiplier (Value Object).

    ``multiplier`` is the extra cost beyond normal movement (base cost already
    subtracted). Bands are in grid distance units; ``None`` is unbounded.
    """

    min_elevation: float | None = None
    max_elevation: float | None = None
    multiplier: float = Field(ge=0)
    kind: VolumeKind = VolumeKind.TERRAIN
    source_id: str | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("min_elevation", "max_elevation", mode="before")
    @classmethod
    def sanitize_bound(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and math.isnan(value):
            return None
        return value

    @model_validator(mode="after")
    def validate_band(self) -> "TerrainVolume":
        if (
            self.min_elevation is not None
            and self.max_elevation is not None
            and self.min_elevation > self.max_elevation
        ):
            raise ValueError(
                f"Invalid elevation band: min={self.min_elevation} > max={self.max_elevation}"
            )
        return self

    @classmethod
    def from_cost(cls, cost: float, **kwargs: Any) -> "TerrainVolume":
        """Build a volume from a raw cost multiplier (1 = normal movement)."""
        return cls(multiplier=incremental_cost(cost), **kwargs)

    def contains_elevation(self, elevation: float | None) -> bool:
        """Check whether ``elevation`` (grid units) lies within the band."""
        if elevation is None:
            return True
        if self.min_elevation is not None and elevation < self.min_elevation:
            return False
        if self.max_elevation is not None and elevation > self.max_elevation:
            return False
        return True


def incremental_cost(cost: float) -> float:
    """Reduce a raw cost multiplier to the extra cost beyond normal movement.

    Never negative: terrain cheaper than normal movement is not modelled.
    """
    return max(0.0, cost - 1.0)


# ---------------------------------------------------------------------------
# GridStep
# ---------------------------------------------------------------------------
class GridStep(BaseModel):
    """One visited grid cell, with elevation in pixel units if tracked."""

    row: int
    col: int
    elevation: float | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("elevation", mode="before")
    @classmethod
    def sanitize_elevation(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and math.isnan(value):
            return None
        return value


# ---------------------------------------------------------------------------
# Terrain Sources (raw shapes, input to the Terrain Edge Collector)
# ---------------------------------------------------------------------------
class _AreaSource(BaseModel):
    """Fields shared by terrain regions and measurement templates."""

    id: str | None = None
    layer: VolumeKind = VolumeKind.TERRAIN
    cost: float = Field(default=2.0, ge=0)  # Raw multiplier; 2 = double movement
    min_elevation: float | None = None
    max_elevation: float | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("layer")
    @classmethod
    def validate_layer(cls, value: VolumeKind) -> VolumeKind:
        if value is VolumeKind.TOKEN:
            raise ValueError("Area sources are terrain or template, not token")
        return value

    def volume(self) -> TerrainVolume:
        return TerrainVolume.from_cost(
            self.cost,
            min_elevation=self.min_elevation,
            max_elevation=self.max_elevation,
            kind=self.layer,
            source_id=self.id,
        )


class PolygonSource(_AreaSource):
    """Polygon anchored at (x, y); ``points`` are offsets from the anchor."""

    kind: Literal["polygon"] = "polygon"
    x: float = 0.0
    y: float = 0.0
    points: tuple[tuple[float, float], ...]

    @model_validator(mode="after")
    def validate_points(self) -> "PolygonSource":
        if len(self.points) < 3:
            raise ValueError(f"Polygon needs >= 3 points, got {len(self.points)}")
        return self

    def absolute_points(self) -> list[Point]:
        return [Point(x=self.x + px, y=self.y + py) for px, py in self.points]


class CircleSource(_AreaSource):
    """Circle of ``radius`` pixels centred on (x, y)."""

    kind: Literal["circle"] = "circle"
    x: float
    y: float
    radius: float = Field(gt=0)


class RectangleSource(_AreaSource):
    """Axis-aligned rectangle with top-left corner (x, y)."""

    kind: Literal["rectangle"] = "rectangle"
    x: float
    y: float
    width: float = Field(gt=0)
    height: float = Field(gt=0)

    def corners(self) -> list[Point]:
        return [
            Point(x=self.x, y=self.y),
            Point(x=self.x + self.width, y=self.y),
            Point(x=self.x + self.width, y=self.y + self.height),
            Point(x=self.x, y=self.y + self.height),
        ]


class ConeSource(_AreaSource):
    """Cone template with apex (x, y).

    Attributes:
        distance: Cone length in grid distance units
        direction: Heading of the cone axis in degrees (0 = +x)
        angle: Full angular width in degrees
    """

    kind: Literal["cone"] = "cone"
    x: float
    y: float
    distance: float = Field(gt=0)
    direction: float = 0.0
    angle: float = Field(default=53.13, gt=0, le=360)


class TokenSource(BaseModel):
    """Token acting as a moving obstacle, bounding box with top-left (x, y)."""

    kind: Literal["token"] = "token"
    id: str
    x: float
    y: float
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    elevation: float = 0.0  # Grid distance units
    size: TokenSize | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("elevation", mode="before")
    @classmethod
    def sanitize_elevation(cls, value: Any) -> Any:
        if value is None or (isinstance(value, float) and math.isnan(value)):
            return 0.0
        return value

    def corners(self) -> list[Point]:
        return [
            Point(x=self.x, y=self.y),
            Point(x=self.x + self.width, y=self.y),
            Point(x=self.x + self.width, y=self.y + self.height),
            Point(x=self.x, y=self.y + self.height),
        ]

    def estimated_height(self, config: MapConfig) -> float:
        """Estimate vertical extent in grid units.

        Uses the size category when known, otherwise the larger side of the
        bounding box converted to grid units and rounded.
        """
        if self.size is not None:
            return TOKEN_HEIGHTS[self.size]
        return float(round(config.pixels_to_distance(max(self.width, self.height))))

    def volume(self, config: MapConfig) -> TerrainVolume:
        return TerrainVolume(
            min_elevation=self.elevation,
            max_elevation=self.elevation + self.estimated_height(config),
            multiplier=1.0,
            kind=VolumeKind.TOKEN,
            source_id=self.id,
        )


TerrainSource = Annotated[
    Union[PolygonSource, CircleSource, RectangleSource, ConeSource, TokenSource],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# CostRaster
# ---------------------------------------------------------------------------
class CostRaster(BaseModel):
    """Per-cell raw cost multipliers for a gridded map (Value Object).

    Row 0 is the top of the map. NaN marks cells without terrain. The array
    is copied and frozen at construction.
    """

    data: NDArray[np.float32]

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def validate_raster(self) -> "CostRaster":
        if self.data.ndim != 2:
            raise ValueError(f"Data must be 2D, got {self.data.ndim}D")
        if self.data.shape[0] == 0 or self.data.shape[1] == 0:
            raise ValueError(f"Data cannot be empty: {self.data.shape}")

        # Owned float32 copy; never flip flags on the caller's array
        immutable = np.array(self.data, dtype=np.float32, copy=True, order="C")
        if np.any(immutable[~np.isnan(immutable)] < 0):
            raise ValueError("Cost multipliers must be non-negative")
        immutable.flags.writeable = False
        object.__setattr__(self, "data", immutable)
        return self

    @property
    def shape(self) -> tuple[int, int]:
        return self.data.shape  # type: ignore[return-value]

    def cost_at(self, row: int, col: int) -> float:
        """Raw cost at a cell; 1.0 outside the raster or on NaN."""
        height, width = self.data.shape
        if not (0 <= row < height and 0 <= col < width):
            return 1.0
        value = float(self.data[row, col])
        return 1.0 if math.isnan(value) else value
