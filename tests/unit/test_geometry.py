"""Tests for line and arc geometric kernels."""

import math

import pytest

from polyclean.core.geometry import (
    arc_arc_intersections,
    direction_change,
    line_arc_intersections,
    line_line_intersections,
    nearest_point_on_segment,
    project_on_arc,
    project_on_line,
)
from polyclean.domain import ArcSegment, LineSegment, Point


class TestProjection:
    """Tests for point projection onto primitives."""

    def test_nearest_point_on_segment(self):
        """Test clamped projection inside the segment."""
        nearest, dist = nearest_point_on_segment(Point(1.0, 1.0), Point(0.0, 0.0), Point(2.0, 0.0))
        assert nearest == Point(1.0, 0.0)
        assert dist == 1.0

    def test_projection_clamps_to_end(self):
        """Test that a point past the end maps onto the end."""
        t, nearest, dist = project_on_line(Point(15, 3), LineSegment(Point(0, 0), Point(10, 0)))
        assert t == 1.0
        assert nearest == Point(10, 0)
        assert dist == pytest.approx(math.hypot(5, 3))

    def test_projection_extends_end(self):
        """Test that an extended end follows the infinite line."""
        t, nearest, dist = project_on_line(
            Point(15, 3), LineSegment(Point(0, 0), Point(10, 0)), extend_end=True
        )
        assert t == pytest.approx(1.5)
        assert nearest.x == pytest.approx(15.0)
        assert dist == pytest.approx(3.0)

    def test_projection_zero_length_segment(self):
        """Test projection onto a point-like segment."""
        t, nearest, dist = project_on_line(Point(3, 4), LineSegment(Point(0, 0), Point(0, 0)))
        assert t == 0.0
        assert dist == 5.0

    def test_arc_projection_inside_span(self):
        """Test projection onto the interior of an arc."""
        arc = ArcSegment(Point(0, 0), 5.0, 0.0, math.pi / 2)
        t, nearest, dist = project_on_arc(Point(10, 10), arc)
        assert t == pytest.approx(0.5)
        assert nearest.x == pytest.approx(5.0 / math.sqrt(2))
        assert dist == pytest.approx(math.hypot(10, 10) - 5.0)

    def test_arc_projection_outside_span(self):
        """Test that points outside the span use the nearer arc end."""
        arc = ArcSegment(Point(0, 0), 5.0, 0.0, math.pi / 2)
        t, nearest, _ = project_on_arc(Point(5, -1), arc)
        assert t == 0.0
        assert nearest.x == pytest.approx(5.0)
        assert nearest.y == pytest.approx(0.0)

    def test_arc_projection_from_center(self):
        """Test that the center maps to the arc start."""
        arc = ArcSegment(Point(0, 0), 5.0, 0.0, math.pi / 2)
        t, _, dist = project_on_arc(Point(0, 0), arc)
        assert t == 0.0
        assert dist == pytest.approx(5.0)


class TestIntersections:
    """Tests for primitive intersection parameters."""

    def test_crossing_lines(self):
        """Test two crossing segments."""
        a = LineSegment(Point(0, 0), Point(10, 10))
        b = LineSegment(Point(0, 10), Point(10, 0))
        assert line_line_intersections(a, b) == [(pytest.approx(0.5), pytest.approx(0.5))]

    def test_parallel_lines(self):
        """Test that parallel segments never meet."""
        a = LineSegment(Point(0, 0), Point(10, 0))
        b = LineSegment(Point(0, 1), Point(10, 1))
        assert line_line_intersections(a, b) == []

    def test_collinear_overlap(self):
        """Test that a collinear overlap reports both ends of the shared part."""
        a = LineSegment(Point(0, 0), Point(10, 0))
        b = LineSegment(Point(5, 0), Point(15, 0))
        hits = line_line_intersections(a, b)
        assert [t for t, _ in hits] == [pytest.approx(0.5), pytest.approx(1.0)]
        assert [u for _, u in hits] == [pytest.approx(0.0), pytest.approx(0.5)]

    def test_touching_at_endpoint(self):
        """Test that segments touching at an end count as meeting."""
        a = LineSegment(Point(0, 0), Point(10, 0))
        b = LineSegment(Point(10, 0), Point(10, 10))
        assert line_line_intersections(a, b) == [(1.0, 0.0)]

    def test_line_through_arc(self):
        """Test a line crossing a semicircle at its lowest point."""
        arc = ArcSegment.from_bulge(Point(0, 0), Point(10, 0), 1.0)
        line = LineSegment(Point(5, 0), Point(5, -10))
        hits = line_arc_intersections(line, arc)
        assert len(hits) == 1
        t, u = hits[0]
        assert t == pytest.approx(0.5)
        assert u == pytest.approx(0.5)

    def test_line_missing_arc(self):
        """Test a line that only crosses the circle outside the arc span."""
        arc = ArcSegment.from_bulge(Point(0, 0), Point(10, 0), 1.0)
        line = LineSegment(Point(5, 1), Point(5, 10))
        assert line_arc_intersections(line, arc) == []

    def test_two_arcs(self):
        """Test two half circles meeting twice."""
        a = ArcSegment(Point(0, 0), 5.0, -math.pi / 2, math.pi / 2)
        b = ArcSegment(Point(6, 0), 5.0, math.pi / 2, 3 * math.pi / 2)
        hits = arc_arc_intersections(a, b)
        points = sorted((a.evaluate(t).x, a.evaluate(t).y) for t, _ in hits)
        assert len(points) == 2
        assert points[0] == (pytest.approx(3.0), pytest.approx(-4.0))
        assert points[1] == (pytest.approx(3.0), pytest.approx(4.0))

    def test_distant_arcs(self):
        """Test arcs on circles that do not meet."""
        a = ArcSegment(Point(0, 0), 1.0, 0.0, math.pi)
        b = ArcSegment(Point(10, 0), 1.0, 0.0, math.pi)
        assert arc_arc_intersections(a, b) == []


class TestDirectionChange:
    """Tests for the turning angle between consecutive legs."""

    def test_straight(self):
        """Test that a straight continuation does not turn."""
        assert direction_change(Point(0, 0), Point(5, 0), Point(10, 0)) == 0.0

    def test_right_angle(self):
        """Test a quarter turn."""
        assert direction_change(Point(0, 0), Point(5, 0), Point(5, 5)) == pytest.approx(math.pi / 2)

    def test_reversal(self):
        """Test a full reversal."""
        assert direction_change(Point(0, 0), Point(10, 0), Point(5, 0)) == pytest.approx(math.pi)

    def test_zero_length_leg(self):
        """Test that a zero-length leg has no direction."""
        assert direction_change(Point(0, 0), Point(0, 0), Point(5, 0)) is None
