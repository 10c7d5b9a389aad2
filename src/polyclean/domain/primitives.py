"""Primitive curve types: points, line segments and circular arcs.

This module defines the fundamental geometric types used throughout polyclean:
- Point: An immutable 2D point
- LineSegment: A straight segment between two points
- ArcSegment: A circular arc with a signed sweep
- IntersectionPoint: A point where two curves meet, with curve parameters

A polyline decomposes into a sequence of LineSegment and ArcSegment values
(the PrimitiveCurve tagged variant). Both primitives are parameterized over
[0, 1] proportionally to arc length, so a parameter means the same thing for
lines and arcs.
"""

import math
from dataclasses import dataclass
from typing import Any

from polyclean.exceptions import ParameterError

# Numeric tolerance for coincidence and degeneracy tests
EPSILON = 1e-9

TWO_PI = 2.0 * math.pi


def _check_unit_param(t: float) -> None:
    if not 0.0 <= t <= 1.0:
        raise ParameterError(t, 0.0, 1.0)


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate in drawing units
        y: Y coordinate in drawing units
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def is_close(self, other: "Point", tolerance: float = EPSILON) -> bool:
        """Check whether two points coincide within tolerance."""
        return self.distance_to(other) <= tolerance

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary."""
        return cls(x=data["x"], y=data["y"])


@dataclass(frozen=True, slots=True)
class LineSegment:
    """A straight line segment.

    Attributes:
        start: Start point (parameter 0)
        end: End point (parameter 1)
    """

    start: Point
    end: Point

    @property
    def start_point(self) -> Point:
        return self.start

    @property
    def end_point(self) -> Point:
        return self.end

    @property
    def bulge(self) -> float:
        return 0.0

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    def is_degenerate(self) -> bool:
        """True for a zero-length segment."""
        return self.length <= EPSILON

    def evaluate(self, t: float) -> Point:
        """Point at parameter t without range check (t outside [0, 1] extends the line)."""
        return Point(
            self.start.x + t * (self.end.x - self.start.x),
            self.start.y + t * (self.end.y - self.start.y),
        )

    def point_at(self, t: float) -> Point:
        """Point at parameter t in [0, 1].

        Raises:
            ParameterError: If t is outside [0, 1]
        """
        _check_unit_param(t)
        return self.evaluate(t)

    def tangent_at(self, t: float) -> tuple[float, float]:
        """Unit tangent at parameter t ((0, 0) for a zero-length segment)."""
        _check_unit_param(t)
        length = self.length
        if length <= EPSILON:
            return (0.0, 0.0)
        return ((self.end.x - self.start.x) / length, (self.end.y - self.start.y) / length)

    def reversed(self) -> "LineSegment":
        return LineSegment(self.end, self.start)

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Bounding box as (min_x, min_y, max_x, max_y)."""
        return (
            min(self.start.x, self.end.x),
            min(self.start.y, self.end.y),
            max(self.start.x, self.end.x),
            max(self.start.y, self.end.y),
        )


@dataclass(frozen=True, slots=True)
class ArcSegment:
    """A circular arc traversed from start_angle to end_angle.

    The sweep (end_angle - start_angle) is signed: positive sweeps run
    counter-clockwise, negative sweeps clockwise. This keeps the traversal
    direction of a polyline arc, which a plain CCW arc would lose.

    Attributes:
        center: Arc center
        radius: Arc radius (> 0)
        start_angle: Angle of the start point in radians
        end_angle: Angle of the end point in radians
    """

    center: Point
    radius: float
    start_angle: float
    end_angle: float

    @classmethod
    def from_bulge(cls, start: Point, end: Point, bulge: float) -> "ArcSegment":
        """Build the arc described by a polyline bulge between two points.

        The bulge is tan(sweep / 4); its sign gives the turning direction.

        Args:
            start: Arc start point
            end: Arc end point
            bulge: Non-zero bulge value

        Returns:
            ArcSegment passing through start and end

        Raises:
            ValueError: If bulge is zero or start and end coincide
        """
        chord = start.distance_to(end)
        if bulge == 0.0 or chord <= EPSILON:
            raise ValueError("Arc needs a non-zero bulge and distinct endpoints")

        sweep = 4.0 * math.atan(bulge)
        radius = chord * (1.0 + bulge * bulge) / (4.0 * abs(bulge))

        # Center sits on the chord's perpendicular bisector, left of the
        # chord direction for positive offsets
        ux = (end.x - start.x) / chord
        uy = (end.y - start.y) / chord
        offset = chord * (1.0 - bulge * bulge) / (4.0 * bulge)
        center = Point(
            (start.x + end.x) / 2.0 - uy * offset,
            (start.y + end.y) / 2.0 + ux * offset,
        )

        start_angle = math.atan2(start.y - center.y, start.x - center.x)
        return cls(center, radius, start_angle, start_angle + sweep)

    @property
    def sweep(self) -> float:
        return self.end_angle - self.start_angle

    @property
    def bulge(self) -> float:
        return math.tan(self.sweep / 4.0)

    @property
    def start_point(self) -> Point:
        return self.evaluate(0.0)

    @property
    def end_point(self) -> Point:
        return self.evaluate(1.0)

    @property
    def length(self) -> float:
        return self.radius * abs(self.sweep)

    def is_degenerate(self) -> bool:
        """True for a zero-radius or zero-sweep arc."""
        return self.radius <= EPSILON or abs(self.sweep) <= EPSILON

    def point_at_angle(self, angle: float) -> Point:
        return Point(
            self.center.x + self.radius * math.cos(angle),
            self.center.y + self.radius * math.sin(angle),
        )

    def evaluate(self, t: float) -> Point:
        """Point at parameter t without range check (t outside [0, 1] follows the circle)."""
        return self.point_at_angle(self.start_angle + t * self.sweep)

    def point_at(self, t: float) -> Point:
        """Point at parameter t in [0, 1].

        Raises:
            ParameterError: If t is outside [0, 1]
        """
        _check_unit_param(t)
        return self.evaluate(t)

    def tangent_at(self, t: float) -> tuple[float, float]:
        """Unit tangent in traversal direction at parameter t."""
        _check_unit_param(t)
        if self.is_degenerate():
            return (0.0, 0.0)
        angle = self.start_angle + t * self.sweep
        sign = 1.0 if self.sweep > 0 else -1.0
        return (-math.sin(angle) * sign, math.cos(angle) * sign)

    def param_of_angle(self, angle: float) -> float:
        """Parameter of a direction from the center, measured along the sweep.

        The result is in [0, 2*pi / |sweep|); values above 1 lie outside the
        arc span.
        """
        if self.sweep >= 0:
            delta = (angle - self.start_angle) % TWO_PI
        else:
            delta = (self.start_angle - angle) % TWO_PI
        return delta / abs(self.sweep)

    def contains_angle(self, angle: float, tolerance: float = EPSILON) -> bool:
        """Check whether the direction angle falls inside the arc span."""
        t = self.param_of_angle(angle)
        slack = tolerance / max(self.length, EPSILON)
        return t <= 1.0 + slack or t >= TWO_PI / abs(self.sweep) - slack

    def reversed(self) -> "ArcSegment":
        return ArcSegment(self.center, self.radius, self.end_angle, self.start_angle)

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Bounding box including the circle's extreme points inside the span."""
        points = [self.start_point, self.end_point]
        for quadrant in range(4):
            angle = quadrant * math.pi / 2.0
            if self.param_of_angle(angle) <= 1.0:
                points.append(self.point_at_angle(angle))
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return (min(xs), min(ys), max(xs), max(ys))


PrimitiveCurve = LineSegment | ArcSegment


def segment_from_bulge(start: Point, end: Point, bulge: float) -> PrimitiveCurve:
    """Decompose one polyline segment into its primitive curve.

    Zero bulges and zero-length chords give line segments.
    """
    if bulge == 0.0 or start.distance_to(end) <= EPSILON:
        return LineSegment(start, end)
    return ArcSegment.from_bulge(start, end, bulge)


@dataclass(frozen=True)
class IntersectionPoint:
    """A point where two curves meet.

    A single location can occur at several parameters on one curve (a
    shared vertex belongs to two segments, a tangency may be reported
    twice), so parameters are kept as tuples and points are deduplicated
    by location.

    Attributes:
        point: Location of the intersection
        params_a: Parameters on the first curve
        params_b: Parameters on the second curve
    """

    point: Point
    params_a: tuple[float, ...]
    params_b: tuple[float, ...]
