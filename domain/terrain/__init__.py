"""Terrain Bounded Context.

Responsible for the incremental movement cost of difficult terrain:
- Value Objects: Path, TerrainVolume, GridStep, MapConfig, terrain sources
- Services: GridStepper (gridded), GridlessCostEvaluator (gridless),
  collect_terrain_edges, TerrainRuler (measurement session)
"""
