"""Polyline representation with bulge-encoded arc segments.

This module defines the polyline domain model:
- Vertex: A point with the bulge of the segment starting at it
- CurveMetadata: Opaque, non-geometric data carried through every operation
- Polyline: An ordered, optionally closed, sequence of vertices

Segment i spans vertex i to vertex i + 1 (mod n when closed). A parameter
along the polyline is the segment index plus the fractional position within
that segment.
"""

import math
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Sequence

from polyclean.domain.primitives import (
    EPSILON,
    ArcSegment,
    LineSegment,
    Point,
    PrimitiveCurve,
    segment_from_bulge,
)
from polyclean.exceptions import ParameterError


@dataclass(frozen=True, slots=True)
class Vertex:
    """A polyline vertex.

    Attributes:
        point: Vertex location
        bulge: tan(sweep / 4) of the segment starting here; 0 for a line
        start_width: Width override at the start of the following segment
        end_width: Width override at the end of the following segment
    """

    point: Point
    bulge: float = 0.0
    start_width: float | None = None
    end_width: float | None = None

    @property
    def x(self) -> float:
        return self.point.x

    @property
    def y(self) -> float:
        return self.point.y

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "x": self.point.x,
            "y": self.point.y,
            "bulge": self.bulge,
            "start_width": self.start_width,
            "end_width": self.end_width,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Vertex":
        """Deserialize from dictionary."""
        return cls(
            point=Point(data["x"], data["y"]),
            bulge=data.get("bulge", 0.0),
            start_width=data.get("start_width"),
            end_width=data.get("end_width"),
        )


@dataclass(frozen=True, slots=True)
class CurveMetadata:
    """Non-geometric polyline data, passed through untouched.

    Attributes:
        layer: Layer name
        constant_width: Global polyline width, if any
        xdata: Extended data as (group code, value) pairs
        handle: Handle of the source entity, if the polyline came from a drawing
    """

    layer: str = "0"
    constant_width: float | None = None
    xdata: tuple[tuple[int, Any], ...] = ()
    handle: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "layer": self.layer,
            "constant_width": self.constant_width,
            "xdata": [list(item) for item in self.xdata],
            "handle": self.handle,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CurveMetadata":
        return cls(
            layer=data.get("layer", "0"),
            constant_width=data.get("constant_width"),
            xdata=tuple(tuple(item) for item in data.get("xdata", ())),
            handle=data.get("handle"),
        )


@dataclass(frozen=True, slots=True)
class Polyline:
    """An ordered sequence of vertices joined by lines and arcs.

    Polylines are values: every operation returns a new Polyline and no
    instance ever shares mutable state with another.

    Attributes:
        vertices: Vertices in traversal order
        closed: If True, an implicit segment joins the last vertex to the first
        metadata: Opaque pass-through data (layer, width, xdata, handle)
    """

    vertices: tuple[Vertex, ...] = ()
    closed: bool = False
    metadata: CurveMetadata = field(default_factory=CurveMetadata)

    def __post_init__(self) -> None:
        if not isinstance(self.vertices, tuple):
            object.__setattr__(self, "vertices", tuple(self.vertices))

    @classmethod
    def from_points(
        cls,
        points: Iterable[Point | tuple[float, float]],
        bulges: Sequence[float] | None = None,
        closed: bool = False,
        metadata: CurveMetadata | None = None,
    ) -> "Polyline":
        """Build a polyline from points and optional per-vertex bulges.

        Args:
            points: Vertex locations as Point or (x, y) tuples
            bulges: Bulge per vertex (defaults to all straight segments)
            closed: Whether the polyline is closed
            metadata: Optional metadata

        Returns:
            New Polyline

        Raises:
            ValueError: If bulges and points differ in length
        """
        pts = [p if isinstance(p, Point) else Point(float(p[0]), float(p[1])) for p in points]
        if bulges is None:
            bulges = [0.0] * len(pts)
        if len(bulges) != len(pts):
            raise ValueError(f"Expected {len(pts)} bulges, got {len(bulges)}")

        vertices = tuple(Vertex(p, float(b)) for p, b in zip(pts, bulges))
        return cls(vertices, closed, metadata if metadata is not None else CurveMetadata())

    @property
    def points(self) -> list[Point]:
        return [v.point for v in self.vertices]

    @property
    def bulges(self) -> list[float]:
        return [v.bulge for v in self.vertices]

    @property
    def is_degenerate(self) -> bool:
        """True when the polyline has no segments."""
        n = len(self.vertices)
        return n < 3 if self.closed else n < 2

    @property
    def segment_count(self) -> int:
        if self.is_degenerate:
            return 0
        n = len(self.vertices)
        return n if self.closed else n - 1

    @property
    def end_param(self) -> float:
        return float(self.segment_count)

    @property
    def start_point(self) -> Point | None:
        return self.vertices[0].point if self.vertices else None

    @property
    def end_point(self) -> Point | None:
        """Last point of the traversal (the start point again when closed)."""
        if not self.vertices:
            return None
        if self.closed:
            return self.vertices[0].point
        return self.vertices[-1].point

    def with_vertices(self, vertices: Iterable[Vertex], closed: bool | None = None) -> "Polyline":
        """Copy of this polyline with new vertices, keeping metadata."""
        return replace(
            self,
            vertices=tuple(vertices),
            closed=self.closed if closed is None else closed,
        )

    def segment(self, index: int) -> PrimitiveCurve:
        """Primitive curve of segment `index`.

        Raises:
            IndexError: If the segment does not exist
        """
        if not 0 <= index < self.segment_count:
            raise IndexError(f"Segment {index} out of range (0..{self.segment_count - 1})")
        start = self.vertices[index]
        end = self.vertices[(index + 1) % len(self.vertices)]
        return segment_from_bulge(start.point, end.point, start.bulge)

    def segments(self) -> list[PrimitiveCurve]:
        """Decompose into primitive curves ([] for a degenerate polyline)."""
        return [self.segment(i) for i in range(self.segment_count)]

    def locate(self, param: float) -> tuple[int, float]:
        """Split a parameter into (segment index, local parameter).

        Raises:
            ParameterError: If param is outside [0, segment_count]
        """
        count = self.segment_count
        if count == 0 or not 0.0 <= param <= count:
            raise ParameterError(param, 0.0, float(count))
        index = min(int(math.floor(param)), count - 1)
        return index, param - index

    def point_at(self, param: float) -> Point | None:
        """Point at a polyline parameter.

        Returns:
            The point, or None for a degenerate polyline

        Raises:
            ParameterError: If param is outside [0, segment_count]
        """
        if self.is_degenerate:
            return None
        index, t = self.locate(param)
        if t == 0.0:
            return self.vertices[index].point
        if t == 1.0:
            return self.vertices[(index + 1) % len(self.vertices)].point
        return self.segment(index).point_at(t)

    def tangent_at(self, param: float) -> tuple[float, float] | None:
        """Unit tangent at a polyline parameter (None when degenerate).

        At an interior vertex the tangent of the segment starting there is used.
        """
        if self.is_degenerate:
            return None
        index, t = self.locate(param)
        if t == 1.0 and index + 1 < self.segment_count:
            index, t = index + 1, 0.0
        return self.segment(index).tangent_at(t)

    @property
    def length(self) -> float:
        return sum(seg.length for seg in self.segments())

    def length_between(self, start: float, end: float) -> float:
        """Arc length between two parameters (order-insensitive).

        Raises:
            ParameterError: If either parameter is out of range
        """
        if self.is_degenerate:
            return 0.0
        if start > end:
            start, end = end, start
        i0, t0 = self.locate(start)
        i1, t1 = self.locate(end)

        if i0 == i1:
            return self.segment(i0).length * (t1 - t0)

        total = self.segment(i0).length * (1.0 - t0)
        for i in range(i0 + 1, i1):
            total += self.segment(i).length
        total += self.segment(i1).length * t1
        return total

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Bounding box including arc bulges, as (min_x, min_y, max_x, max_y)."""
        if not self.vertices:
            return (0.0, 0.0, 0.0, 0.0)
        if self.is_degenerate:
            xs = [v.x for v in self.vertices]
            ys = [v.y for v in self.vertices]
            return (min(xs), min(ys), max(xs), max(ys))

        boxes = [seg.bounding_box() for seg in self.segments()]
        return (
            min(b[0] for b in boxes),
            min(b[1] for b in boxes),
            max(b[2] for b in boxes),
            max(b[3] for b in boxes),
        )

    def is_zero_length(self) -> bool:
        """True when the polyline has no extent along its path."""
        return self.length <= EPSILON

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "vertices": [v.to_dict() for v in self.vertices],
            "closed": self.closed,
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Polyline":
        """Deserialize from dictionary."""
        return cls(
            vertices=tuple(Vertex.from_dict(v) for v in data["vertices"]),
            closed=data.get("closed", False),
            metadata=CurveMetadata.from_dict(data.get("metadata", {})),
        )


Curve = Polyline | LineSegment | ArcSegment
