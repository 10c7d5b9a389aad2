"""Core processing algorithms for polyclean.

This module contains the core algorithms for:

- Geometry kernels (projection, primitive intersections, turning angles)
- Nearest-point queries on lines, arcs and polylines
- Simplification (duplicates, near-straight runs, collinear vertices)
- Direction canonicalization
- Intersection detection and splitting
- Endpoint snapping and landing lines

All services are designed to be:
- Stateless (safe for use in worker processes)
- Pure (inputs are never modified; new polylines are returned)

Key functions:
- closest_point / closest_among: Nearest point on one or many curves
- remove_duplicate_vertices / reduce_points / remove_colinear_points
- set_direction: Orient a polyline along an axis
- intersect / find_self_intersections / split
- snap_endpoints / landing / trim_extend

Key classes:
- CurveProcessor: Batch orchestration over a drawing
"""

from polyclean.core.curve import (
    as_polyline,
    close_with_vertex,
    describe,
    extents,
    fit_arcs,
    primitives_of,
)
from polyclean.core.direction import Direction, reverse, set_direction
from polyclean.core.intersect import (
    detect_self_intersections,
    find_self_intersections,
    intersect,
    is_self_intersecting,
    param_at_point,
    split,
    split_at_intersections,
    split_at_points,
)
from polyclean.core.nearest import (
    NearestHit,
    closest_among,
    closest_parameter,
    closest_point,
    distance_to_curve,
)
from polyclean.core.processor import BatchResult, CurveProcessor, process_polyline
from polyclean.core.simplify import (
    reduce_points,
    remove_colinear_points,
    remove_duplicate_vertices,
)
from polyclean.core.snap import Landing, landing, snap_endpoints, trim_extend

__all__ = [
    # Processor classes
    "BatchResult",
    "CurveProcessor",
    # Direction
    "Direction",
    # Snap classes
    "Landing",
    "NearestHit",
    # Curve functions
    "as_polyline",
    "close_with_vertex",
    "closest_among",
    "closest_parameter",
    "closest_point",
    "describe",
    "detect_self_intersections",
    "distance_to_curve",
    "extents",
    "find_self_intersections",
    "fit_arcs",
    "intersect",
    "is_self_intersecting",
    "landing",
    "param_at_point",
    "primitives_of",
    "process_polyline",
    "reduce_points",
    "remove_colinear_points",
    "remove_duplicate_vertices",
    "reverse",
    "set_direction",
    "snap_endpoints",
    "split",
    "split_at_intersections",
    "split_at_points",
    "trim_extend",
]
