"""Geometric kernels for line and arc primitives.

This module provides the core mathematical utilities for:
- Nearest point on a segment (clamped or extended projection)
- Nearest point on an arc (angular projection)
- Line-line, line-arc and arc-arc intersection parameters
- Direction change between consecutive segments

All functions are pure, stateless, and designed for use in parallel processing.
Intersection functions return parameter pairs (t on the first primitive,
u on the second); callers turn them into points and curve parameters.
"""

import math

from polyclean.domain import EPSILON, ArcSegment, LineSegment, Point, PrimitiveCurve


def _cross(ax: float, ay: float, bx: float, by: float) -> float:
    return ax * by - ay * bx


def nearest_point_on_segment(point: Point, seg_start: Point, seg_end: Point) -> tuple[Point, float]:
    """Find the closest point on a line segment to a given point.

    Projects the point onto the infinite line, then clamps to the segment endpoints.

    Args:
        point: The point to project
        seg_start: Start point of line segment
        seg_end: End point of line segment

    Returns:
        Tuple of (nearest_point, distance)

    Examples:
        >>> nearest, dist = nearest_point_on_segment(
        ...     Point(1.0, 1.0), Point(0.0, 0.0), Point(2.0, 0.0))
        >>> # nearest is (1.0, 0.0), dist is 1.0
    """
    _, nearest, distance = project_on_line(point, LineSegment(seg_start, seg_end))
    return nearest, distance


def project_on_line(
    point: Point,
    line: LineSegment,
    extend_start: bool = False,
    extend_end: bool = False,
) -> tuple[float, Point, float]:
    """Project a point onto a line segment.

    Args:
        point: The point to project
        line: Target segment
        extend_start: Allow parameters below 0 (line extended backwards)
        extend_end: Allow parameters above 1 (line extended forwards)

    Returns:
        Tuple of (parameter, nearest_point, distance)
    """
    dx = line.end.x - line.start.x
    dy = line.end.y - line.start.y

    # Handle zero-length segment
    segment_length_sq = dx * dx + dy * dy
    if segment_length_sq < EPSILON * EPSILON:
        return 0.0, line.start, point.distance_to(line.start)

    # t = dot(point - start, end - start) / ||end - start||^2
    t = ((point.x - line.start.x) * dx + (point.y - line.start.y) * dy) / segment_length_sq

    if t < 0.0 and not extend_start:
        t = 0.0
    elif t > 1.0 and not extend_end:
        t = 1.0

    nearest = line.start if t == 0.0 else line.end if t == 1.0 else line.evaluate(t)
    return t, nearest, point.distance_to(nearest)


def project_on_arc(
    point: Point,
    arc: ArcSegment,
    extend_start: bool = False,
    extend_end: bool = False,
) -> tuple[float, Point, float]:
    """Project a point onto a circular arc.

    Outside the angular span the nearer arc end is used, unless an extended
    end lets the projection continue around the circle. Continuing past the
    start gives negative parameters, past the end parameters above 1. A point
    at the center is equidistant from the whole arc and maps to the start.

    Args:
        point: The point to project
        arc: Target arc
        extend_start: Continue the circle backwards from the start
        extend_end: Continue the circle forwards from the end

    Returns:
        Tuple of (parameter, nearest_point, distance)
    """
    if arc.is_degenerate() or point.distance_to(arc.center) <= EPSILON:
        start = arc.start_point
        return 0.0, start, point.distance_to(start)

    angle = math.atan2(point.y - arc.center.y, point.x - arc.center.x)
    t = arc.param_of_angle(angle)

    if t > 1.0 and (extend_start or extend_end):
        period = 2.0 * math.pi / abs(arc.sweep)
        if not extend_end or (extend_start and period - t < t - 1.0):
            t -= period
    elif t > 1.0:
        start, end = arc.start_point, arc.end_point
        d_start = point.distance_to(start)
        d_end = point.distance_to(end)
        if d_start <= d_end:
            return 0.0, start, d_start
        return 1.0, end, d_end

    nearest = arc.point_at_angle(angle)
    return t, nearest, point.distance_to(nearest)


def project_on_primitive(
    point: Point,
    curve: PrimitiveCurve,
    extend_start: bool = False,
    extend_end: bool = False,
) -> tuple[float, Point, float]:
    """Project a point onto a line or arc."""
    if isinstance(curve, LineSegment):
        return project_on_line(point, curve, extend_start, extend_end)
    return project_on_arc(point, curve, extend_start, extend_end)


def _unit_param(t: float, length: float) -> float | None:
    """Snap a parameter that is within tolerance of [0, 1] into it, else None."""
    slack = EPSILON / max(length, EPSILON)
    if t < -slack or t > 1.0 + slack:
        return None
    return min(1.0, max(0.0, t))


def _arc_param(arc: ArcSegment, point: Point) -> float | None:
    """Parameter of a point on the arc's circle, or None outside the arc span."""
    angle = math.atan2(point.y - arc.center.y, point.x - arc.center.x)
    if not arc.contains_angle(angle):
        return None
    t = arc.param_of_angle(angle)
    if t > 1.0:
        # Either just past the end or just before the start
        return 1.0 if t - 1.0 < 2.0 * math.pi / abs(arc.sweep) - t else 0.0
    return t


def line_line_intersections(a: LineSegment, b: LineSegment) -> list[tuple[float, float]]:
    """Intersection parameters of two line segments.

    Collinear overlapping segments report the two ends of their shared part.
    """
    rx, ry = a.end.x - a.start.x, a.end.y - a.start.y
    sx, sy = b.end.x - b.start.x, b.end.y - b.start.y
    len_a = math.hypot(rx, ry)
    len_b = math.hypot(sx, sy)

    # Zero-length segments act as points
    if len_a <= EPSILON:
        u, _, dist = project_on_line(a.start, b)
        return [(0.0, u)] if dist <= EPSILON else []
    if len_b <= EPSILON:
        t, _, dist = project_on_line(b.start, a)
        return [(t, 0.0)] if dist <= EPSILON else []

    qx, qy = b.start.x - a.start.x, b.start.y - a.start.y
    denom = _cross(rx, ry, sx, sy)

    if abs(denom) <= EPSILON * len_a * len_b:
        # Parallel: only collinear segments can meet
        if abs(_cross(qx, qy, rx, ry)) / len_a > EPSILON:
            return []

        len_a_sq = len_a * len_a
        t0 = (qx * rx + qy * ry) / len_a_sq
        t1 = t0 + (sx * rx + sy * ry) / len_a_sq
        lo = max(0.0, min(t0, t1))
        hi = min(1.0, max(t0, t1))
        if hi < lo - EPSILON / len_a:
            return []

        results: list[tuple[float, float]] = []
        lo = min(lo, 1.0)
        for t in (lo, hi) if hi - lo > EPSILON / len_a else (lo,):
            u, _, _ = project_on_line(a.evaluate(t), b)
            results.append((t, u))
        return results

    t = _cross(qx, qy, sx, sy) / denom
    u = _cross(qx, qy, rx, ry) / denom

    t_ok = _unit_param(t, len_a)
    u_ok = _unit_param(u, len_b)
    if t_ok is None or u_ok is None:
        return []
    return [(t_ok, u_ok)]


def line_arc_intersections(line: LineSegment, arc: ArcSegment) -> list[tuple[float, float]]:
    """Intersection parameters of a line segment (t) and an arc (u)."""
    if arc.is_degenerate():
        return []

    length = line.length
    if length <= EPSILON:
        dist = abs(line.start.distance_to(arc.center) - arc.radius)
        u = _arc_param(arc, line.start)
        return [(0.0, u)] if dist <= EPSILON and u is not None else []

    # Foot of the perpendicular from the center onto the infinite line
    t_foot, foot, height = project_on_line(arc.center, line, extend_start=True, extend_end=True)
    if height > arc.radius + EPSILON:
        return []

    half_chord = math.sqrt(max(arc.radius * arc.radius - height * height, 0.0))
    if half_chord <= EPSILON:
        candidates = [t_foot]
    else:
        delta = half_chord / length
        candidates = [t_foot - delta, t_foot + delta]

    results: list[tuple[float, float]] = []
    for candidate in candidates:
        t = _unit_param(candidate, length)
        if t is None:
            continue
        u = _arc_param(arc, line.evaluate(t))
        if u is not None:
            results.append((t, u))
    return results


def arc_arc_intersections(a: ArcSegment, b: ArcSegment) -> list[tuple[float, float]]:
    """Intersection parameters of two arcs.

    Arcs on the same circle report the arc ends lying on the other arc.
    """
    if a.is_degenerate() or b.is_degenerate():
        return []

    dx = b.center.x - a.center.x
    dy = b.center.y - a.center.y
    d = math.hypot(dx, dy)

    if d <= EPSILON:
        if abs(a.radius - b.radius) > EPSILON:
            return []
        results: list[tuple[float, float]] = []
        for t, point in ((0.0, a.start_point), (1.0, a.end_point)):
            u = _arc_param(b, point)
            if u is not None:
                results.append((t, u))
        for u, point in ((0.0, b.start_point), (1.0, b.end_point)):
            t = _arc_param(a, point)
            if t is not None:
                results.append((t, u))
        return results

    if d > a.radius + b.radius + EPSILON or d < abs(a.radius - b.radius) - EPSILON:
        return []

    along = (a.radius * a.radius - b.radius * b.radius + d * d) / (2.0 * d)
    height = math.sqrt(max(a.radius * a.radius - along * along, 0.0))
    base = Point(a.center.x + along * dx / d, a.center.y + along * dy / d)

    if height <= EPSILON:
        points = [base]
    else:
        ox, oy = -dy / d * height, dx / d * height
        points = [Point(base.x + ox, base.y + oy), Point(base.x - ox, base.y - oy)]

    results = []
    for point in points:
        t = _arc_param(a, point)
        u = _arc_param(b, point)
        if t is not None and u is not None:
            results.append((t, u))
    return results


def primitive_intersections(a: PrimitiveCurve, b: PrimitiveCurve) -> list[tuple[float, float]]:
    """Intersection parameters of any two primitives, as (t on a, u on b)."""
    if isinstance(a, LineSegment) and isinstance(b, LineSegment):
        return line_line_intersections(a, b)
    if isinstance(a, LineSegment):
        return line_arc_intersections(a, b)
    if isinstance(b, LineSegment):
        return [(t, u) for u, t in line_arc_intersections(b, a)]
    return arc_arc_intersections(a, b)


def direction_change(p0: Point, p1: Point, p2: Point) -> float | None:
    """Absolute turning angle at p1 between p0->p1 and p1->p2, in radians.

    Returns:
        Angle in [0, pi], or None when either leg has zero length
    """
    ax, ay = p1.x - p0.x, p1.y - p0.y
    bx, by = p2.x - p1.x, p2.y - p1.y
    if math.hypot(ax, ay) <= EPSILON or math.hypot(bx, by) <= EPSILON:
        return None
    return abs(math.atan2(_cross(ax, ay, bx, by), ax * bx + ay * by))
