"""Endpoint snapping and landing lines.

snap_endpoints moves the open ends of a polyline onto nearby curves: an
endpoint is pulled onto the nearest start, end or interior point of another
curve when that point is closer than epsilon. This trims overshooting ends
and extends ends that stop short. landing computes the shortest connector
from a point to a set of curves.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace

from polyclean.core.curve import primitives_of
from polyclean.core.nearest import closest_among, closest_parameter
from polyclean.domain import EPSILON, Curve, LineSegment, Point, Polyline


@dataclass(frozen=True)
class Landing:
    """Shortest connection from a point to a set of curves.

    Attributes:
        index: Position of the target curve in the queried sequence
        curve: Target curve
        connector: Line from the query point to the closest point
        distance: Connector length
    """

    index: int
    curve: Curve
    connector: LineSegment
    distance: float


@dataclass(frozen=True)
class SnapTarget:
    """Candidate location an endpoint can be moved to."""

    point: Point
    distance: float
    on_interior: bool
    candidate_index: int
    order: int


def _targets(endpoint: Point, candidates: Sequence[Curve], exclude: Curve) -> list[SnapTarget]:
    targets: list[SnapTarget] = []
    for index, candidate in enumerate(candidates):
        if candidate is exclude or not primitives_of(candidate):
            continue
        start, end = candidate.start_point, candidate.end_point
        targets.append(SnapTarget(start, endpoint.distance_to(start), False, index, 0))
        targets.append(SnapTarget(end, endpoint.distance_to(end), False, index, 1))

        result = closest_parameter(candidate, endpoint)
        if result is not None:
            targets.append(SnapTarget(result[1], result[2], True, index, 2))
    return targets


def find_snap_target(
    endpoint: Point, candidates: Sequence[Curve], epsilon: float, exclude: Curve | None = None
) -> SnapTarget | None:
    """Pick the location an endpoint should snap to.

    The minimum distance over all candidates decides. Among equally distant
    locations, curve ends beat interior points, then the earlier candidate
    wins, then its start beats its end.

    Returns:
        The chosen target, or None when nothing is closer than epsilon
    """
    targets = _targets(endpoint, candidates, exclude)
    if not targets:
        return None

    best = min(target.distance for target in targets)
    if best >= epsilon:
        return None

    tied = [target for target in targets if target.distance <= best + EPSILON]
    return min(tied, key=lambda target: (target.on_interior, target.candidate_index, target.order))


def snap_endpoints(poly: Polyline, candidates: Sequence[Curve], epsilon: float) -> Polyline:
    """Move the open endpoints of a polyline onto nearby curves.

    Both endpoints are evaluated against the original positions, and the
    polyline itself is skipped among the candidates. Only the vertex
    position changes; its bulge and widths are kept. Closed and degenerate
    polylines are returned unchanged, as are endpoints already lying on the
    nearest curve.

    Args:
        poly: Polyline whose ends may move
        candidates: Curves to snap onto
        epsilon: Snap distance (exclusive)

    Returns:
        The snapped polyline, or poly itself when nothing moved

    Example:
        >>> a = Polyline.from_points([(0, 0), (10, 0)])
        >>> b = Polyline.from_points([(13, 0), (20, 0)])
        >>> snap_endpoints(a, [a, b], 5.0).end_point
        Point(x=13.0, y=0.0)
    """
    if poly.closed or poly.is_degenerate:
        return poly

    vertices = list(poly.vertices)
    changed = False
    for index in (0, len(vertices) - 1):
        target = find_snap_target(poly.vertices[index].point, candidates, epsilon, exclude=poly)
        if target is None or target.distance <= EPSILON:
            continue
        vertices[index] = replace(vertices[index], point=target.point)
        changed = True

    return poly.with_vertices(vertices) if changed else poly


def landing(point: Point, curves: Sequence[Curve]) -> Landing | None:
    """Shortest connector from a point to a set of curves.

    Returns:
        Landing, or None when no curve has any segment

    Example:
        >>> wall = LineSegment(Point(2.0, 0.0), Point(2.0, 10.0))
        >>> landing(Point(0.0, 0.0), [wall]).distance
        2.0
    """
    hit = closest_among(curves, point)
    if hit is None:
        return None
    return Landing(hit.index, hit.curve, LineSegment(point, hit.point), hit.distance)


def trim_extend(
    polylines: Sequence[Polyline],
    epsilon: float,
    progress: Callable[[int, int, int, bool], None] | None = None,
) -> list[Polyline]:
    """Snap the ends of every polyline against the rest of the set.

    Every polyline is compared with the original, unmodified set, so the
    result does not depend on processing order.

    Args:
        polylines: Polylines to trim or extend
        epsilon: Snap distance (exclusive)
        progress: Optional callback (completed, total, index, success)

    Returns:
        One polyline per input, in input order
    """
    total = len(polylines)
    result: list[Polyline] = []
    for index, poly in enumerate(polylines):
        result.append(snap_endpoints(poly, polylines, epsilon))
        if progress:
            progress(index + 1, total, index, True)
    return result
