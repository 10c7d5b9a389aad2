"""Curve model operations shared by the engine components.

- primitives_of: Uniform decomposition of any curve into primitives
- as_polyline: Promote a line or arc to a polyline
- fit_arcs: Replace arc segments with straight chords
- close_with_vertex: Close a polyline by repeating its start point
- describe / extents: Vertex listing and bounding box queries
"""

import math
from collections.abc import Iterable, Sequence

from polyclean.domain import (
    EPSILON,
    ArcSegment,
    Curve,
    CurveMetadata,
    LineSegment,
    Point,
    Polyline,
    PrimitiveCurve,
    Vertex,
)


def primitives_of(curve: Curve) -> list[PrimitiveCurve]:
    """Decompose a curve into primitives.

    A polyline yields one primitive per segment, so the primitive index is the
    integer part of the polyline parameter. A line or arc yields itself.
    Degenerate curves (too few vertices, zero-radius arcs) yield nothing.
    """
    if isinstance(curve, Polyline):
        return curve.segments()
    if isinstance(curve, ArcSegment) and curve.is_degenerate():
        return []
    return [curve]


def as_polyline(curve: Curve, metadata: CurveMetadata | None = None) -> Polyline:
    """Promote a curve to a polyline (polylines are returned unchanged)."""
    if isinstance(curve, Polyline):
        return curve
    meta = metadata if metadata is not None else CurveMetadata()
    if isinstance(curve, LineSegment):
        return Polyline((Vertex(curve.start), Vertex(curve.end)), False, meta)
    return Polyline(
        (Vertex(curve.start_point, curve.bulge), Vertex(curve.end_point)),
        False,
        meta,
    )


def interpolate_width(start: float | None, end: float | None, t: float) -> float | None:
    """Width at parameter t along a segment with optional start/end widths."""
    if start is None and end is None:
        return None
    a = start if start is not None else 0.0
    b = end if end is not None else 0.0
    return a + (b - a) * t


def partial_bulge(bulge: float, t0: float, t1: float) -> float:
    """Bulge of the part [t0, t1] of a segment with the given bulge."""
    if bulge == 0.0:
        return 0.0
    if t0 == 0.0 and t1 == 1.0:
        return bulge
    sweep = 4.0 * math.atan(bulge)
    return math.tan(sweep * (t1 - t0) / 4.0)


def fit_arcs(poly: Polyline, segments_per_arc: int = 0, degrees_per_chord: float = 10.0) -> Polyline:
    """Replace every arc segment with straight chords.

    Args:
        poly: Source polyline
        segments_per_arc: Chords per arc; 0 picks the count from the sweep
        degrees_per_chord: Sweep covered by one chord when picking automatically

    Returns:
        Polyline with only straight segments (same metadata and closed flag)

    Raises:
        ValueError: If segments_per_arc is negative or degrees_per_chord not positive
    """
    if segments_per_arc < 0:
        raise ValueError("segments_per_arc must be >= 0")
    if degrees_per_chord <= 0:
        raise ValueError("degrees_per_chord must be > 0")
    if poly.is_degenerate:
        return poly

    vertices: list[Vertex] = []
    for i, vertex in enumerate(poly.vertices):
        if i >= poly.segment_count:
            vertices.append(vertex)
            continue

        segment = poly.segment(i)
        if not isinstance(segment, ArcSegment):
            vertices.append(Vertex(vertex.point, 0.0, vertex.start_width, vertex.end_width))
            continue

        if segments_per_arc > 0:
            count = segments_per_arc
        else:
            count = max(1, math.ceil(math.degrees(abs(segment.sweep)) / degrees_per_chord))

        for k in range(count):
            point = vertex.point if k == 0 else segment.evaluate(k / count)
            vertices.append(
                Vertex(
                    point,
                    0.0,
                    interpolate_width(vertex.start_width, vertex.end_width, k / count),
                    interpolate_width(vertex.start_width, vertex.end_width, (k + 1) / count),
                )
            )

    return poly.with_vertices(vertices)


def close_with_vertex(poly: Polyline) -> tuple[Polyline, bool]:
    """Close an open polyline by adding a vertex at its start point.

    The closed flag is left untouched; some exchange formats expect the
    closing vertex to be explicit.

    Returns:
        Tuple of (polyline, changed)
    """
    if poly.closed or len(poly.vertices) < 2:
        return poly, False
    start = poly.vertices[0].point
    if start.distance_to(poly.vertices[-1].point) <= EPSILON:
        return poly, False
    return poly.with_vertices(poly.vertices + (Vertex(start),)), True


def describe(poly: Polyline) -> list[tuple[int, Point, float]]:
    """Vertex listing as (index, point, bulge) rows."""
    return [(i, v.point, v.bulge) for i, v in enumerate(poly.vertices)]


def extents(curves: Iterable[Curve]) -> tuple[float, float, float, float] | None:
    """Combined bounding box of curves, or None when there are none."""
    boxes: Sequence[tuple[float, float, float, float]] = [
        curve.bounding_box()
        for curve in curves
        if not (isinstance(curve, Polyline) and not curve.vertices)
    ]
    if not boxes:
        return None
    return (
        min(b[0] for b in boxes),
        min(b[1] for b in boxes),
        max(b[2] for b in boxes),
        max(b[3] for b in boxes),
    )
