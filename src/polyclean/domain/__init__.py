"""Domain models for polyclean.

This module contains the value types the geometry engine operates on. All
models are designed to be:

- Immutable (frozen dataclasses), so operations return new values
- Serializable for inter-process communication (parallel processing)
- Independent of the DXF library used for reading and writing drawings

Key classes:
- Point: A 2D point
- LineSegment / ArcSegment: Primitive curves a polyline decomposes into
- Vertex: A polyline vertex with bulge and optional widths
- Polyline: An open or closed sequence of vertices
- IntersectionPoint: A curve crossing with parameters on both curves
- SelectionItem: A curve selected from a drawing, with its visibility
"""

from polyclean.domain.polyline import Curve, CurveMetadata, Polyline, Vertex
from polyclean.domain.primitives import (
    EPSILON,
    ArcSegment,
    IntersectionPoint,
    LineSegment,
    Point,
    PrimitiveCurve,
    segment_from_bulge,
)
from polyclean.domain.selection import SelectionItem

__all__: list[str] = [
    # Constants
    "EPSILON",
    # Primitive types
    "Point",
    "LineSegment",
    "ArcSegment",
    "PrimitiveCurve",
    "IntersectionPoint",
    "segment_from_bulge",
    # Polyline types
    "Vertex",
    "CurveMetadata",
    "Polyline",
    "Curve",
    # Selection
    "SelectionItem",
]
