"""Terrain Ruler Domain Layer.

This package contains the core business logic organized by bounded contexts:
- geometry: Planar primitives, distances, boundary intersections
- terrain: Grid stepping, gridless cost evaluation, elevation proportioning
"""

# Imports alphabetized per project style (isort)
from domain import geometry, terrain

__all__ = ["geometry", "terrain"]
