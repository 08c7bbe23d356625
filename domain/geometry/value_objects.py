"""Geometry Bounded Context - Value Objects.

Immutable planar primitives. All validation occurs at construction time via
Pydantic, so a BoundaryEdge that exists is always well formed.

Coordinates are canvas (pixel) units. ``z`` is elevation expressed in the same
linear unit as ``x`` and ``y``; ``None`` means "no elevation data".
"""

from __future__ import annotations

import math
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, field_validator


class Point(BaseModel):
    """Continuous map coordinate with optional elevation (Value Object).

    A NaN elevation is sanitized to ``None`` before any arithmetic sees it;
    an infinite one is rejected like an infinite coordinate.
    """

    x: FiniteFloat
    y: FiniteFloat
    z: FiniteFloat | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("z", mode="before")
    @classmethod
    def sanitize_elevation(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and math.isnan(value):
            return None
        return value

    def to_2d(self) -> "Point":
        """Return this point without elevation."""
        return Point(x=self.x, y=self.y)

    def with_z(self, z: float | None) -> "Point":
        """Return a copy of this point at elevation ``z``."""
        return Point(x=self.x, y=self.y, z=z)


class LineSegment(BaseModel):
    """Straight edge between two points."""

    kind: Literal["segment"] = "segment"
    a: Point
    b: Point

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_points(cls, a: Point, b: Point) -> "LineSegment":
        return cls(a=a.to_2d(), b=b.to_2d())

    @property
    def is_vertical(self) -> bool:
        return self.a.x == self.b.x


class CircleEdge(BaseModel):
    """Full circle boundary (circular templates)."""

    kind: Literal["circle"] = "circle"
    center: Point
    radius: float = Field(gt=0)

    model_config = ConfigDict(frozen=True)


class ArcEdge(BaseModel):
    """Circular arc boundary (the curved side of a cone template).

    The arc is centred on ``direction`` (radians, canvas orientation: 0 points
    along +x, positive angles turn towards +y) and spans ``angle`` radians.
    """

    kind: Literal["arc"] = "arc"
    center: Point
    radius: float = Field(gt=0)
    direction: float
    angle: float = Field(gt=0, le=2 * math.pi)

    model_config = ConfigDict(frozen=True)

    def contains_angle(self, theta: float) -> bool:
        """Check whether the polar angle ``theta`` lies on the arc."""
        offset = (theta - self.direction + math.pi) % (2 * math.pi) - math.pi
        return abs(offset) <= self.angle / 2 + 1e-9


BoundaryEdge = Annotated[
    Union[LineSegment, CircleEdge, ArcEdge], Field(discriminator="kind")
]
