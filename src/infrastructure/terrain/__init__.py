"""Infrastructure adapters for the terrain bounded context.

Concrete implementations of the terrain ports: the square grid system and
the terrain data providers (shapely geometry layer, numpy cost raster).
"""

from .raster_layer import RasterTerrainLayer
from .shapely_layer import ShapelyTerrainLayer
from .square_grid import SquareGridAdapter

__all__ = ["RasterTerrainLayer", "ShapelyTerrainLayer", "SquareGridAdapter"]
