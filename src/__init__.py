"""Application Layer.

Infrastructure services that back domain ports with concrete geometry and
raster implementations.
"""
