"""Terrain Bounded Context - Error Hierarchy.

Custom exceptions for terrain cost measurement.

None of these inherit from ValueError, so when raised inside a Pydantic
validator they propagate unchanged instead of being folded into a
ValidationError.
"""

from __future__ import annotations


class TerrainCostError(Exception):
    """Base error for terrain cost operations."""


class UnrecognizedDiagonalRuleError(TerrainCostError):
    """Diagonal rule is not one of the supported conventions.

    Attributes:
        rule: The offending rule value as received
    """

    def __init__(self, rule: object) -> None:
        self.rule = rule
        super().__init__(f"Cost calculation type not recognized: {rule!r}")


class UnsupportedShapeError(TerrainCostError):
    """Terrain source shape cannot be decomposed into boundary edges."""

    def __init__(self, kind: object) -> None:
        self.kind = kind
        super().__init__(f"Unsupported terrain source shape: {kind!r}")


class MeasurementSessionError(TerrainCostError):
    """Measurement attempted outside of a started session."""

    pass
