"""Tests for closest-point queries."""

import pytest

from polyclean.core.nearest import (
    closest_among,
    closest_parameter,
    closest_point,
    distance_to_curve,
)
from polyclean.domain import ArcSegment, LineSegment, Point, Polyline


class TestClosestPoint:
    """Tests for closest points on one curve."""

    def test_polyline_interior(self):
        """Test the closest point on the second segment of a polyline."""
        poly = Polyline.from_points([(0, 0), (10, 0), (10, 10)])
        assert closest_point(poly, Point(12, 5)) == Point(10, 5)

    def test_parameter_includes_segment_index(self):
        """Test that the parameter counts whole segments."""
        poly = Polyline.from_points([(0, 0), (10, 0), (10, 10)])
        param, _, distance = closest_parameter(poly, Point(12, 5))
        assert param == pytest.approx(1.5)
        assert distance == pytest.approx(2.0)

    def test_clamped_to_end(self):
        """Test that without extension the end is the closest point."""
        poly = Polyline.from_points([(0, 0), (10, 0)])
        assert closest_point(poly, Point(15, 3)) == Point(10, 0)

    def test_extended_end(self):
        """Test that extension continues past the open end."""
        poly = Polyline.from_points([(0, 0), (10, 0)])
        param, nearest, distance = closest_parameter(poly, Point(15, 3), extend=True)
        assert param == pytest.approx(1.5)
        assert nearest.x == pytest.approx(15.0)
        assert distance == pytest.approx(3.0)

    def test_semicircle(self):
        """Test the closest point on an arc segment."""
        poly = Polyline.from_points([(0, 0), (10, 0)], bulges=[1.0, 0.0])
        nearest = closest_point(poly, Point(5, -20))
        assert nearest.x == pytest.approx(5.0)
        assert nearest.y == pytest.approx(-5.0)

    def test_tie_keeps_lowest_parameter(self):
        """Test that equally distant segments resolve to the first one."""
        square = Polyline.from_points([(0, 0), (10, 0), (10, 10), (0, 10)], closed=True)
        param, nearest, _ = closest_parameter(square, Point(5, 5))
        assert param == pytest.approx(0.5)
        assert nearest == Point(5, 0)

    def test_degenerate(self):
        """Test that degenerate curves have no closest point."""
        assert closest_point(Polyline.from_points([(1, 1)]), Point(0, 0)) is None


class TestDistance:
    """Tests for point-to-curve distances."""

    def test_distance(self):
        """Test distance to a line."""
        line = LineSegment(Point(0, 0), Point(10, 0))
        assert distance_to_curve(line, Point(5, 4)) == pytest.approx(4.0)

    def test_on_curve_is_zero(self):
        """Test that points within epsilon report exactly zero."""
        line = LineSegment(Point(0, 0), Point(10, 0))
        assert distance_to_curve(line, Point(5, 1e-12)) == 0.0

    def test_arc(self):
        """Test distance to a bare arc."""
        arc = ArcSegment.from_bulge(Point(0, 0), Point(10, 0), 1.0)
        assert distance_to_curve(arc, Point(5, -20)) == pytest.approx(15.0)


class TestClosestAmong:
    """Tests for closest points over a set of curves."""

    def test_picks_nearest_curve(self):
        """Test that the nearest curve wins."""
        far = LineSegment(Point(0, 10), Point(10, 10))
        near = Polyline.from_points([(0, 1), (10, 1)])
        hit = closest_among([far, near], Point(5, 0))
        assert hit.index == 1
        assert hit.point == Point(5, 1)
        assert hit.distance == pytest.approx(1.0)

    def test_tie_keeps_first_curve(self):
        """Test that equally distant curves resolve to the first one."""
        below = LineSegment(Point(0, -1), Point(10, -1))
        above = LineSegment(Point(0, 1), Point(10, 1))
        assert closest_among([below, above], Point(5, 0)).index == 0

    def test_skips_degenerate(self):
        """Test that degenerate curves are ignored."""
        assert closest_among([Polyline.from_points([(0, 0)])], Point(1, 1)) is None
        assert closest_among([], Point(1, 1)) is None
