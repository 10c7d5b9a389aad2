"""Closest-point queries on lines, arcs and polylines.

Every query reduces a curve to its primitives and takes the minimum over
per-primitive projections. Ties within EPSILON keep the lowest parameter
(for one curve) or the first curve (for a set), so results never depend on
floating-point noise.
"""

from dataclasses import dataclass
from typing import Sequence

from polyclean.core.curve import primitives_of
from polyclean.core.geometry import project_on_primitive
from polyclean.domain import EPSILON, Curve, Point, Polyline


@dataclass(frozen=True)
class NearestHit:
    """Closest location found among a set of curves.

    Attributes:
        index: Position of the curve in the queried sequence
        curve: The closest curve
        point: Closest point on that curve
        distance: Distance from the query point
        param: Curve parameter of the closest point
    """

    index: int
    curve: Curve
    point: Point
    distance: float
    param: float


def closest_parameter(
    curve: Curve, point: Point, extend: bool = False
) -> tuple[float, Point, float] | None:
    """Find the parameter of the closest point on a curve.

    For a line, `extend` projects onto the infinite line; for an arc, onto
    the full circle. For a polyline, only its open ends are extended (before
    the start of the first segment and after the end of the last); closed
    polylines ignore `extend`.

    Args:
        curve: Polyline, line or arc
        point: Query point
        extend: Extend the curve past its ends

    Returns:
        Tuple of (parameter, closest_point, distance), or None for a
        degenerate curve
    """
    pieces = primitives_of(curve)
    if not pieces:
        return None

    is_polyline = isinstance(curve, Polyline)
    last = len(pieces) - 1
    best: tuple[float, Point, float] | None = None

    for i, piece in enumerate(pieces):
        if is_polyline:
            open_ends = extend and not curve.closed
            extend_start = open_ends and i == 0
            extend_end = open_ends and i == last
        else:
            extend_start = extend_end = extend

        t, nearest, distance = project_on_primitive(point, piece, extend_start, extend_end)
        if best is None or distance < best[2] - EPSILON:
            best = (i + t, nearest, distance)

    return best


def closest_point(curve: Curve, point: Point, extend: bool = False) -> Point | None:
    """Point on `curve` minimizing the Euclidean distance to `point`.

    Returns:
        Closest point, or None for a degenerate curve
    """
    result = closest_parameter(curve, point, extend)
    return result[1] if result is not None else None


def closest_among(curves: Sequence[Curve], point: Point) -> NearestHit | None:
    """Closest point over a set of curves.

    Degenerate curves are skipped. Ties resolve to the first curve in input
    order.

    Returns:
        NearestHit, or None when no curve has any segment
    """
    best: NearestHit | None = None
    for index, curve in enumerate(curves):
        result = closest_parameter(curve, point)
        if result is None:
            continue
        param, nearest, distance = result
        if best is None or distance < best.distance - EPSILON:
            best = NearestHit(index, curve, nearest, distance, param)
    return best


def distance_to_curve(curve: Curve, point: Point, epsilon: float = EPSILON) -> float | None:
    """Distance from a point to a curve.

    Returns:
        The distance, exactly 0.0 when within `epsilon` of the curve, or
        None for a degenerate curve
    """
    result = closest_parameter(curve, point)
    if result is None:
        return None
    distance = result[2]
    return 0.0 if distance <= epsilon else distance
