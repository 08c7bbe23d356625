"""Geometry Bounded Context.

Planar primitives shared by the terrain cost engine:
- Value Objects: Point, LineSegment, CircleEdge, ArcEdge (BoundaryEdge union)
- Services: distance, midpoint, intersect (dispatched by edge kind)
"""
