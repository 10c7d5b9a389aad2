"""Direction canonicalization.

Polylines are made to run along a chosen axis direction by comparing the
first and last vertex. Reversal keeps the geometry identical: the bulge of
each segment is negated and moved to its new start vertex, and segment
widths are swapped end for end.
"""

from enum import Enum

from polyclean.domain import EPSILON, Polyline, Vertex


class Direction(Enum):
    """Traversal conventions, numbered as exposed on the command line."""

    RIGHT_TO_LEFT = 1
    BOTTOM_TO_TOP = 2
    LEFT_TO_RIGHT = 3
    TOP_TO_BOTTOM = 4


def reverse(poly: Polyline) -> Polyline:
    """Reverse the traversal order of a polyline.

    New vertex k is old vertex n-1-k. The segment leaving new vertex k is
    old segment (n-2-k) mod n traversed backwards. For closed polylines the
    old last vertex becomes vertex 0, so reversing twice is the identity.

    Args:
        poly: Polyline to reverse

    Returns:
        Reversed polyline with the same metadata
    """
    vertices = poly.vertices
    n = len(vertices)
    if n < 2:
        return poly

    reversed_vertices = []
    for k in range(n):
        source = vertices[(n - 2 - k) % n]
        reversed_vertices.append(
            Vertex(
                vertices[n - 1 - k].point,
                -source.bulge if source.bulge else 0.0,
                source.end_width,
                source.start_width,
            )
        )
    return poly.with_vertices(reversed_vertices)


def _needs_reversal(poly: Polyline, direction: Direction) -> bool:
    start = poly.vertices[0].point
    end = poly.vertices[-1].point
    dx = end.x - start.x
    dy = end.y - start.y

    if direction is Direction.RIGHT_TO_LEFT:
        return dx > EPSILON
    if direction is Direction.LEFT_TO_RIGHT:
        return dx < -EPSILON
    if direction is Direction.BOTTOM_TO_TOP:
        return dy < -EPSILON
    return dy > EPSILON


def set_direction(poly: Polyline, direction: Direction) -> tuple[Polyline, bool]:
    """Reverse a polyline if its first-to-last vertex order opposes `direction`.

    A polyline whose first and last vertex share the compared coordinate is
    left alone. Applying the same direction twice changes nothing the
    second time.

    Args:
        poly: Polyline to orient
        direction: Target convention

    Returns:
        Tuple of (polyline, changed)

    Example:
        >>> poly = Polyline.from_points([(10, 0), (0, 0)])
        >>> oriented, changed = set_direction(poly, Direction.LEFT_TO_RIGHT)
        >>> oriented.start_point, changed
        (Point(x=0.0, y=0.0), True)
    """
    if poly.is_degenerate:
        return poly, False
    if not _needs_reversal(poly, direction):
        return poly, False
    return reverse(poly), True
