"""Polyline simplification: duplicate, near-straight and collinear vertices.

All functions return a new polyline together with the number of removed
vertices. Degenerate polylines are returned unchanged with a count of 0.
Arc segments are never altered: their shape cannot be recovered from a
reduced vertex set, so arcs and the vertices bounding them are always kept.
"""

from polyclean.core.geometry import direction_change, nearest_point_on_segment
from polyclean.domain import Point, Polyline, Vertex


def remove_duplicate_vertices(poly: Polyline, tolerance: float = 0.0) -> tuple[Polyline, int]:
    """Merge consecutive vertices closer than or equal to `tolerance`.

    Of two merged vertices the later one is kept together with its bulge;
    the bulge of the removed vertex described a zero-length segment and
    carries no curvature information. The (last, first) pair is checked only
    for closed polylines. The result contains no consecutive pair within
    tolerance, so a second call removes nothing.

    Args:
        poly: Polyline to clean
        tolerance: Merge distance (0 merges exactly coincident vertices)

    Returns:
        Tuple of (polyline, removed_count)

    Raises:
        ValueError: If tolerance is negative

    Example:
        >>> poly = Polyline.from_points([(0, 0), (0, 0), (5, 0), (10, 0)])
        >>> cleaned, count = remove_duplicate_vertices(poly)
        >>> len(cleaned.vertices), count
        (3, 1)
    """
    if tolerance < 0:
        raise ValueError("tolerance must be >= 0")
    if poly.is_degenerate:
        return poly, 0

    kept: list[Vertex] = []
    for vertex in poly.vertices:
        if kept and kept[-1].point.distance_to(vertex.point) <= tolerance:
            kept[-1] = vertex
            while len(kept) >= 2 and kept[-2].point.distance_to(kept[-1].point) <= tolerance:
                del kept[-2]
        else:
            kept.append(vertex)

    if poly.closed:
        while len(kept) > 1 and kept[-1].point.distance_to(kept[0].point) <= tolerance:
            kept.pop()

    removed = len(poly.vertices) - len(kept)
    if removed == 0:
        return poly, 0
    return poly.with_vertices(kept), removed


def _is_interior_straight(poly: Polyline, index: int) -> bool:
    """True if vertex `index` joins two straight segments and may be dropped."""
    n = len(poly.vertices)
    if index == 0 or (not poly.closed and index == n - 1):
        return False
    return poly.vertices[index - 1].bulge == 0.0 and poly.vertices[index].bulge == 0.0


def _reduce_pass(poly: Polyline, epsilon: float) -> list[Vertex]:
    vertices = poly.vertices
    n = len(vertices)
    kept: list[Vertex] = [vertices[0]]
    pending: list[Point] = []

    for i in range(1, n):
        vertex = vertices[i]
        if _is_interior_straight(poly, i):
            anchor = kept[-1].point
            following = vertices[(i + 1) % n].point
            candidates = pending + [vertex.point]
            if all(
                nearest_point_on_segment(p, anchor, following)[1] <= epsilon
                for p in candidates
            ):
                pending.append(vertex.point)
                continue
        kept.append(vertex)
        pending = []

    if poly.closed and len(kept) < 3:
        return list(vertices)
    return kept


def reduce_points(poly: Polyline, epsilon: float, iterate: bool = False) -> tuple[Polyline, int]:
    """Drop vertices of straight runs that deviate at most `epsilon`.

    A single scan walks the polyline keeping an anchor (the last retained
    vertex). An interior vertex of a straight run is dropped when it and
    every vertex dropped since the anchor lie within `epsilon` of the
    segment from the anchor to the next vertex, so every removed vertex ends
    up within `epsilon` of the segment that replaces it.

    Open endpoints and vertex 0 of a closed polyline are always kept, as are
    vertices bounding an arc segment. Closed polylines keep at least three
    vertices.

    Args:
        poly: Polyline to reduce
        epsilon: Maximum perpendicular deviation of a dropped vertex
        iterate: Repeat passes until nothing more is removed

    Returns:
        Tuple of (polyline, removed_count)

    Raises:
        ValueError: If epsilon is negative
    """
    if epsilon < 0:
        raise ValueError("epsilon must be >= 0")
    if poly.is_degenerate:
        return poly, 0

    current = poly
    total = 0
    while True:
        kept = _reduce_pass(current, epsilon)
        removed = len(current.vertices) - len(kept)
        if removed:
            current = current.with_vertices(kept)
            total += removed
        if not iterate or removed == 0:
            return current, total


def remove_colinear_points(poly: Polyline, angle_epsilon: float) -> tuple[Polyline, int]:
    """Drop vertices where a straight run changes direction by at most `angle_epsilon`.

    The incoming direction is measured from the last retained vertex, so a
    slow bend made of many tiny turns still keeps the vertices it needs.
    Zero-length legs and reversals are never dropped; arcs are untouched.

    Args:
        poly: Polyline to clean
        angle_epsilon: Maximum direction change in radians

    Returns:
        Tuple of (polyline, removed_count)

    Raises:
        ValueError: If angle_epsilon is negative
    """
    if angle_epsilon < 0:
        raise ValueError("angle_epsilon must be >= 0")
    if poly.is_degenerate:
        return poly, 0

    vertices = poly.vertices
    n = len(vertices)
    kept: list[Vertex] = [vertices[0]]

    for i in range(1, n):
        vertex = vertices[i]
        if _is_interior_straight(poly, i):
            turn = direction_change(kept[-1].point, vertex.point, vertices[(i + 1) % n].point)
            if turn is not None and turn <= angle_epsilon:
                continue
        kept.append(vertex)

    if poly.closed and len(kept) < 3:
        return poly, 0

    removed = n - len(kept)
    if removed == 0:
        return poly, 0
    return poly.with_vertices(kept), removed
