"""Intersection detection and polyline splitting.

This module answers three questions about curves:
- Where do two curves meet (intersect)
- Does a polyline cross itself (is_self_intersecting, find_self_intersections)
- What pieces does a polyline break into at given parameters (split)

Intersections are collected per pair of primitives and merged by location,
so a crossing at a shared vertex is reported once with every parameter it
occurs at.
"""

import math
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import replace

from polyclean.core.curve import interpolate_width, partial_bulge, primitives_of
from polyclean.core.geometry import primitive_intersections
from polyclean.core.nearest import closest_parameter
from polyclean.domain import (
    EPSILON,
    Curve,
    IntersectionPoint,
    Point,
    Polyline,
    PrimitiveCurve,
    Vertex,
)
from polyclean.exceptions import GeometryError, ParameterError, PointNotOnCurveError

Hit = tuple[Point, float, float]


def _boxes_overlap(
    a: tuple[float, float, float, float], b: tuple[float, float, float, float]
) -> bool:
    return not (
        a[2] < b[0] - EPSILON
        or b[2] < a[0] - EPSILON
        or a[3] < b[1] - EPSILON
        or b[3] < a[1] - EPSILON
    )


def _point_on(curve: Curve, piece: PrimitiveCurve, index: int, t: float) -> Point:
    if isinstance(curve, Polyline):
        point = curve.point_at(index + t)
        if point is not None:
            return point
    return piece.evaluate(t)


def _add_param(params: list[float], value: float) -> None:
    if all(abs(value - p) > EPSILON for p in params):
        params.append(value)


def _merge(hits: Iterable[Hit], tolerance: float = EPSILON) -> list[IntersectionPoint]:
    """Group hits by location and sort by the first parameter on curve A."""
    merged: list[tuple[Point, list[float], list[float]]] = []
    for point, param_a, param_b in hits:
        for existing, params_a, params_b in merged:
            if existing.is_close(point, tolerance):
                _add_param(params_a, param_a)
                _add_param(params_b, param_b)
                break
        else:
            merged.append((point, [param_a], [param_b]))

    result = [
        IntersectionPoint(point, tuple(sorted(params_a)), tuple(sorted(params_b)))
        for point, params_a, params_b in merged
    ]
    result.sort(key=lambda hit: hit.params_a[0])
    return result


def intersect(curve_a: Curve, curve_b: Curve) -> list[IntersectionPoint]:
    """Find all points where two curves meet.

    Tangent contacts count as intersections. Collinear overlaps report the
    ends of the shared part. Degenerate curves never intersect anything.

    Args:
        curve_a: First curve (polyline, line or arc)
        curve_b: Second curve

    Returns:
        Intersection points sorted by parameter on curve_a

    Example:
        >>> a = Polyline.from_points([(0, 0), (10, 10)])
        >>> b = Polyline.from_points([(0, 10), (10, 0)])
        >>> [hit.point for hit in intersect(a, b)]
        [Point(x=5.0, y=5.0)]
    """
    pieces_a = primitives_of(curve_a)
    pieces_b = primitives_of(curve_b)
    boxes_b = [piece.bounding_box() for piece in pieces_b]

    hits: list[Hit] = []
    for i, piece_a in enumerate(pieces_a):
        box_a = piece_a.bounding_box()
        for j, piece_b in enumerate(pieces_b):
            if not _boxes_overlap(box_a, boxes_b[j]):
                continue
            for t, u in primitive_intersections(piece_a, piece_b):
                hits.append((_point_on(curve_a, piece_a, i, t), i + t, j + u))
    return _merge(hits)


def _vertex_tolerance(poly: Polyline) -> float:
    """Distance under which a hit is considered to be a shared vertex."""
    min_x, min_y, max_x, max_y = poly.bounding_box()
    return EPSILON * max(1.0, max_x - min_x, max_y - min_y)


def _self_hits(poly: Polyline) -> Iterator[Hit]:
    segments = poly.segments()
    count = len(segments)
    if count < 2:
        return

    boxes = [segment.bounding_box() for segment in segments]
    tolerance = _vertex_tolerance(poly)
    # Segments separated only by zero-length ones still share a vertex
    degenerate = [segment.length <= tolerance for segment in segments]
    n = len(poly.vertices)
    start = poly.vertices[0].point
    wraps = poly.closed or start.is_close(poly.vertices[-1].point, tolerance)

    for i in range(count):
        for j in range(i + 1, count):
            if not _boxes_overlap(boxes[i], boxes[j]):
                continue

            shared: Point | None = None
            if all(degenerate[i + 1 : j]):
                shared = poly.vertices[(i + 1) % n].point
            elif wraps and all(degenerate[j + 1 :]) and all(degenerate[:i]):
                shared = poly.vertices[(j + 1) % n].point

            for t, u in primitive_intersections(segments[i], segments[j]):
                point = _point_on(poly, segments[i], i, t)
                if shared is not None and point.is_close(shared, tolerance):
                    continue
                yield point, i + t, j + u


def is_self_intersecting(poly: Polyline) -> bool:
    """True if any two non-adjacent segments of the polyline meet.

    Adjacent segments meeting only at their shared vertex do not count; the
    closing vertex of a closed polyline is such a shared vertex too.
    Degenerate polylines never self-intersect.
    """
    return any(True for _ in _self_hits(poly))


def find_self_intersections(poly: Polyline) -> list[IntersectionPoint]:
    """All points where a polyline crosses or touches itself.

    Returns:
        Intersection points; params_a holds the parameter on the earlier
        segment and params_b on the later one
    """
    return _merge(_self_hits(poly), _vertex_tolerance(poly))


def _point_at_param(poly: Polyline, param: float) -> Point:
    """Point at a parameter that may run past the end of a closed polyline."""
    n = len(poly.vertices)
    index = int(math.floor(param))
    t = param - index
    if t <= EPSILON:
        return poly.vertices[index % n].point
    return poly.segment(index % n).point_at(t)


def _extract(poly: Polyline, start: float, end: float) -> Polyline:
    """Open sub-polyline covering parameters [start, end].

    `end` may exceed segment_count for closed polylines, in which case the
    piece wraps through vertex 0.
    """
    n = len(poly.vertices)
    vertices: list[Vertex] = []
    param = start
    while param < end - EPSILON:
        index = int(math.floor(param + EPSILON))
        local_start = max(param - index, 0.0)
        stop = min(end, index + 1.0)
        local_end = stop - index
        param = stop
        if local_end - local_start <= EPSILON:
            continue

        source = poly.vertices[index % n]
        point = source.point if local_start == 0.0 else _point_at_param(poly, index + local_start)
        vertices.append(
            Vertex(
                point,
                partial_bulge(source.bulge, local_start, local_end),
                interpolate_width(source.start_width, source.end_width, local_start),
                interpolate_width(source.start_width, source.end_width, local_end),
            )
        )

    vertices.append(Vertex(_point_at_param(poly, end)))
    return Polyline(tuple(vertices), False, poly.metadata)


def split(poly: Polyline, params: Sequence[float]) -> list[Polyline]:
    """Split a polyline at the given parameters.

    Parameters are sorted and deduplicated. For open polylines, cuts at the
    start or end produce no empty pieces. A closed polyline cut at k distinct
    places becomes k open pieces that together cover it, the last one
    wrapping through vertex 0 (with a single cut it is opened there).
    Metadata is copied to every piece.

    Args:
        poly: Polyline to split
        params: Cut parameters in [0, segment_count]

    Returns:
        Pieces in traversal order; [poly] when there are no cuts

    Raises:
        ParameterError: If a parameter is outside [0, segment_count]
    """
    if not params:
        return [replace(poly)]

    count = poly.segment_count
    for param in params:
        if count == 0 or not 0.0 <= param <= count:
            raise ParameterError(param, 0.0, float(count))

    cuts: list[float] = []
    for param in sorted(0.0 if poly.closed and param >= count - EPSILON else param for param in params):
        if not cuts or param - cuts[-1] > EPSILON:
            cuts.append(float(param))

    if not poly.closed:
        inner = [param for param in cuts if EPSILON < param < count - EPSILON]
        bounds = [0.0] + inner + [float(count)]
        return [_extract(poly, a, b) for a, b in zip(bounds, bounds[1:])]

    bounds = cuts + [cuts[0] + count]
    return [_extract(poly, a, b) for a, b in zip(bounds, bounds[1:])]


def param_at_point(poly: Polyline, point: Point, tolerance: float = 1e-6) -> float:
    """Parameter of a point lying on the polyline.

    Raises:
        GeometryError: If the polyline is degenerate
        PointNotOnCurveError: If the point is farther than `tolerance`
    """
    result = closest_parameter(poly, point)
    if result is None:
        raise GeometryError("Cannot locate a point on a degenerate polyline")
    param, _, distance = result
    if distance > tolerance:
        raise PointNotOnCurveError(distance, tolerance)
    return param


def split_at_points(poly: Polyline, points: Iterable[Point], tolerance: float = 1e-6) -> list[Polyline]:
    """Split a polyline at points lying on it.

    Raises:
        PointNotOnCurveError: If a point is farther than `tolerance`
    """
    return split(poly, [param_at_point(poly, point, tolerance) for point in points])


def split_at_intersections(
    polylines: Sequence[Polyline],
    progress: Callable[[int, int, int, bool], None] | None = None,
) -> list[Polyline]:
    """Split every polyline where it meets any other polyline of the set.

    Polylines without intersections are returned as copies, so the result
    always replaces the whole input set.

    Args:
        polylines: Polylines to split against each other
        progress: Optional callback (completed, total, index, success)

    Returns:
        All resulting pieces in input order
    """
    total = len(polylines)
    pieces: list[Polyline] = []
    for index, poly in enumerate(polylines):
        params: list[float] = []
        for other_index, other in enumerate(polylines):
            if other_index == index:
                continue
            for hit in intersect(poly, other):
                params.extend(hit.params_a)
        pieces.extend(split(poly, params))
        if progress:
            progress(index + 1, total, index, True)
    return pieces


def detect_self_intersections(
    polylines: Sequence[Polyline],
    progress: Callable[[int, int, int, bool], None] | None = None,
) -> dict[int, list[IntersectionPoint]]:
    """Scan a set of polylines for self-intersections.

    Returns:
        Mapping from input index to the crossings found, for every
        polyline that intersects itself
    """
    total = len(polylines)
    found: dict[int, list[IntersectionPoint]] = {}
    for index, poly in enumerate(polylines):
        hits = find_self_intersections(poly)
        if hits:
            found[index] = hits
        if progress:
            progress(index + 1, total, index, True)
    return found
