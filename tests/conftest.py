"""Root pytest configuration for all tests.

Provides map configurations shared across the geometry, terrain and
infrastructure suites. Port fakes live in tests/fakes.py.
"""

from __future__ import annotations

import pytest

from domain.terrain.value_objects import DiagonalRule, GridType, MapConfig


@pytest.fixture
def gridded_config() -> MapConfig:
    """100 px cells of 5 distance units, euclidean diagonals, 2-D."""
    return MapConfig(
        grid_type=GridType.GRIDDED,
        grid_size=100.0,
        grid_distance=5.0,
        diagonal_rule=DiagonalRule.EUCLIDEAN,
    )


@pytest.fixture
def gridless_config() -> MapConfig:
    """Gridless map, 100 px per 5 distance units, 2-D."""
    return MapConfig(grid_type=GridType.GRIDLESS, grid_size=100.0, grid_distance=5.0)


@pytest.fixture
def gridless_3d_config() -> MapConfig:
    """Gridless map with one pixel per distance unit and elevation tracking."""
    return MapConfig(
        grid_type=GridType.GRIDLESS,
        grid_size=1.0,
        grid_distance=1.0,
        use_elevation=True,
    )
