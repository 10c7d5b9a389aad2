"""Tests for domain models to verify they work correctly."""

import math

import pytest

from polyclean.domain import (
    ArcSegment,
    CurveMetadata,
    LineSegment,
    Point,
    Polyline,
    SelectionItem,
    Vertex,
    segment_from_bulge,
)
from polyclean.exceptions import ParameterError


class TestPoint:
    """Tests for Point class."""

    def test_point_creation(self) -> None:
        """Test basic point creation."""
        p = Point(100.0, 200.0)
        assert p.x == 100.0
        assert p.y == 200.0

    def test_point_to_tuple(self) -> None:
        """Test point to tuple conversion."""
        p = Point(100.0, 200.0)
        assert p.to_tuple() == (100.0, 200.0)

    def test_point_distance(self) -> None:
        """Test Euclidean distance between points."""
        assert Point(0, 0).distance_to(Point(3, 4)) == 5.0

    def test_point_is_close(self) -> None:
        """Test coincidence check within tolerance."""
        assert Point(0, 0).is_close(Point(0, 1e-12))
        assert not Point(0, 0).is_close(Point(0, 0.1))
        assert Point(0, 0).is_close(Point(0, 0.1), tolerance=0.2)

    def test_point_serialization(self) -> None:
        """Test point serialization and deserialization."""
        p1 = Point(100.0, 200.0)
        p2 = Point.from_dict(p1.to_dict())
        assert p2 == p1

    def test_point_immutable(self) -> None:
        """Test that point is immutable."""
        p = Point(100.0, 200.0)
        with pytest.raises(AttributeError):
            p.x = 300.0  # type: ignore


class TestLineSegment:
    """Tests for LineSegment class."""

    def test_length_and_midpoint(self) -> None:
        """Test length and evaluation at the midpoint."""
        line = LineSegment(Point(0, 0), Point(10, 0))
        assert line.length == 10.0
        assert line.point_at(0.5) == Point(5.0, 0.0)

    def test_point_at_out_of_range(self) -> None:
        """Test that parameters outside [0, 1] are rejected."""
        line = LineSegment(Point(0, 0), Point(10, 0))
        with pytest.raises(ParameterError):
            line.point_at(1.5)

    def test_evaluate_extends(self) -> None:
        """Test that evaluate follows the infinite line."""
        line = LineSegment(Point(0, 0), Point(10, 0))
        assert line.evaluate(1.5) == Point(15.0, 0.0)

    def test_zero_length_tangent(self) -> None:
        """Test tangent of a zero-length segment."""
        line = LineSegment(Point(1, 1), Point(1, 1))
        assert line.is_degenerate()
        assert line.tangent_at(0.0) == (0.0, 0.0)

    def test_bulge_is_zero(self) -> None:
        """Test that a line has zero bulge."""
        assert LineSegment(Point(0, 0), Point(1, 1)).bulge == 0.0


class TestArcSegment:
    """Tests for ArcSegment class."""

    def test_from_bulge_semicircle(self) -> None:
        """Test a semicircle built from bulge 1."""
        arc = ArcSegment.from_bulge(Point(0, 0), Point(10, 0), 1.0)
        assert arc.center.x == pytest.approx(5.0)
        assert arc.center.y == pytest.approx(0.0)
        assert arc.radius == pytest.approx(5.0)
        assert arc.sweep == pytest.approx(math.pi)

    def test_positive_bulge_is_counter_clockwise(self) -> None:
        """Test that a positive bulge arc passes right of the chord direction."""
        arc = ArcSegment.from_bulge(Point(0, 0), Point(10, 0), 1.0)
        mid = arc.point_at(0.5)
        assert mid.x == pytest.approx(5.0)
        assert mid.y == pytest.approx(-5.0)

    def test_negative_bulge_is_clockwise(self) -> None:
        """Test that a negative bulge arc passes left of the chord direction."""
        arc = ArcSegment.from_bulge(Point(0, 0), Point(10, 0), -1.0)
        assert arc.sweep < 0
        assert arc.point_at(0.5).y == pytest.approx(5.0)

    def test_endpoints_recovered(self) -> None:
        """Test that the arc starts and ends at the bulge endpoints."""
        arc = ArcSegment.from_bulge(Point(1, 2), Point(7, -3), 0.3)
        assert arc.start_point.x == pytest.approx(1.0)
        assert arc.start_point.y == pytest.approx(2.0)
        assert arc.end_point.x == pytest.approx(7.0)
        assert arc.end_point.y == pytest.approx(-3.0)

    def test_bulge_roundtrip(self) -> None:
        """Test that decomposition keeps the bulge."""
        arc = ArcSegment.from_bulge(Point(0, 0), Point(4, 4), -0.25)
        assert arc.bulge == pytest.approx(-0.25)

    def test_length(self) -> None:
        """Test arc length of a semicircle."""
        arc = ArcSegment.from_bulge(Point(0, 0), Point(10, 0), 1.0)
        assert arc.length == pytest.approx(5.0 * math.pi)

    def test_zero_bulge_rejected(self) -> None:
        """Test that a zero bulge cannot describe an arc."""
        with pytest.raises(ValueError):
            ArcSegment.from_bulge(Point(0, 0), Point(10, 0), 0.0)

    def test_bounding_box_includes_extreme(self) -> None:
        """Test that the box reaches the lowest point of the arc."""
        arc = ArcSegment.from_bulge(Point(0, 0), Point(10, 0), 1.0)
        min_x, min_y, max_x, max_y = arc.bounding_box()
        assert min_y == pytest.approx(-5.0)
        assert max_y == pytest.approx(0.0, abs=1e-9)
        assert (min_x, max_x) == (pytest.approx(0.0, abs=1e-9), pytest.approx(10.0))

    def test_segment_from_bulge_dispatch(self) -> None:
        """Test that zero bulges and zero chords give lines."""
        assert isinstance(segment_from_bulge(Point(0, 0), Point(1, 0), 0.0), LineSegment)
        assert isinstance(segment_from_bulge(Point(0, 0), Point(0, 0), 0.5), LineSegment)
        assert isinstance(segment_from_bulge(Point(0, 0), Point(1, 0), 0.5), ArcSegment)


class TestPolyline:
    """Tests for Polyline class."""

    def test_from_points(self) -> None:
        """Test construction from point tuples."""
        poly = Polyline.from_points([(0, 0), (10, 0), (10, 10)])
        assert len(poly.vertices) == 3
        assert poly.points[1] == Point(10.0, 0.0)
        assert poly.bulges == [0.0, 0.0, 0.0]
        assert not poly.closed

    def test_from_points_bulge_mismatch(self) -> None:
        """Test that bulges must match points."""
        with pytest.raises(ValueError):
            Polyline.from_points([(0, 0), (1, 0)], bulges=[0.0])

    def test_segment_count_open_and_closed(self) -> None:
        """Test segment counts for open and closed polylines."""
        points = [(0, 0), (10, 0), (10, 10)]
        assert Polyline.from_points(points).segment_count == 2
        assert Polyline.from_points(points, closed=True).segment_count == 3

    def test_degenerate(self) -> None:
        """Test degenerate polylines have no segments."""
        assert Polyline.from_points([(0, 0)]).is_degenerate
        assert Polyline.from_points([(0, 0), (1, 0)], closed=True).is_degenerate
        assert Polyline.from_points([(0, 0), (1, 0)], closed=True).segments() == []
        assert not Polyline.from_points([(0, 0), (1, 0)]).is_degenerate

    def test_decompose_mixed(self) -> None:
        """Test decomposition into lines and arcs."""
        poly = Polyline.from_points([(0, 0), (10, 0), (20, 0)], bulges=[0.0, 0.5, 0.0])
        segments = poly.segments()
        assert isinstance(segments[0], LineSegment)
        assert isinstance(segments[1], ArcSegment)

    def test_point_at(self) -> None:
        """Test evaluation at vertex and interior parameters."""
        poly = Polyline.from_points([(0, 0), (10, 0), (10, 10)])
        assert poly.point_at(0.0) == Point(0.0, 0.0)
        assert poly.point_at(1.0) == Point(10.0, 0.0)
        assert poly.point_at(1.5) == Point(10.0, 5.0)
        assert poly.point_at(2.0) == Point(10.0, 10.0)

    def test_point_at_closed_wraps(self) -> None:
        """Test the closing segment of a closed polyline."""
        poly = Polyline.from_points([(0, 0), (10, 0), (10, 10)], closed=True)
        assert poly.point_at(3.0) == Point(0.0, 0.0)
        p = poly.point_at(2.5)
        assert (p.x, p.y) == (pytest.approx(5.0), pytest.approx(5.0))

    def test_point_at_out_of_range(self) -> None:
        """Test that out-of-range parameters raise instead of clamping."""
        poly = Polyline.from_points([(0, 0), (10, 0)])
        with pytest.raises(ParameterError) as exc_info:
            poly.point_at(1.5)
        assert exc_info.value.upper == 1.0
        with pytest.raises(ValueError):
            poly.point_at(-0.1)

    def test_point_at_degenerate(self) -> None:
        """Test that degenerate polylines give an explicit empty result."""
        assert Polyline.from_points([(0, 0)]).point_at(0.0) is None
        assert Polyline.from_points([(0, 0)]).tangent_at(0.0) is None

    def test_tangent_at(self) -> None:
        """Test unit tangents along the polyline."""
        poly = Polyline.from_points([(0, 0), (10, 0), (10, 10)])
        assert poly.tangent_at(0.5) == (1.0, 0.0)
        assert poly.tangent_at(1.0) == (0.0, 1.0)

    def test_length(self) -> None:
        """Test total and partial lengths."""
        poly = Polyline.from_points([(0, 0), (10, 0), (10, 10)])
        assert poly.length == 20.0
        assert poly.length_between(0.5, 1.5) == pytest.approx(10.0)
        assert poly.length_between(1.5, 0.5) == pytest.approx(10.0)

    def test_length_with_arc(self) -> None:
        """Test that arc segments contribute their arc length."""
        poly = Polyline.from_points([(0, 0), (10, 0)], bulges=[1.0, 0.0])
        assert poly.length == pytest.approx(5.0 * math.pi)

    def test_start_end_point(self) -> None:
        """Test start and end points for open and closed polylines."""
        points = [(0, 0), (10, 0), (10, 10)]
        assert Polyline.from_points(points).end_point == Point(10.0, 10.0)
        assert Polyline.from_points(points, closed=True).end_point == Point(0.0, 0.0)

    def test_is_zero_length(self) -> None:
        """Test zero-length detection."""
        assert Polyline.from_points([(1, 1), (1, 1)]).is_zero_length()
        assert not Polyline.from_points([(0, 0), (1, 1)]).is_zero_length()

    def test_with_vertices_keeps_metadata(self) -> None:
        """Test that replacing vertices keeps metadata and closed flag."""
        meta = CurveMetadata(layer="WALLS", handle="1F")
        poly = Polyline.from_points([(0, 0), (1, 0), (1, 1)], closed=True, metadata=meta)
        copy = poly.with_vertices([Vertex(Point(0, 0)), Vertex(Point(2, 0)), Vertex(Point(2, 2))])
        assert copy.metadata == meta
        assert copy.closed

    def test_serialization(self) -> None:
        """Test polyline serialization for worker processes."""
        meta = CurveMetadata(layer="A", constant_width=0.5, xdata=((1000, "note"),), handle="2A")
        poly = Polyline(
            (Vertex(Point(0, 0), 0.5, 1.0, 2.0), Vertex(Point(10, 0))),
            False,
            meta,
        )
        restored = Polyline.from_dict(poly.to_dict())
        assert restored == poly

    def test_polyline_immutable(self) -> None:
        """Test that polyline is immutable."""
        poly = Polyline.from_points([(0, 0), (1, 0)])
        with pytest.raises(AttributeError):
            poly.closed = True  # type: ignore


class TestSelectionItem:
    """Tests for SelectionItem class."""

    def test_defaults(self) -> None:
        """Test default layer and visibility."""
        item = SelectionItem("1A", LineSegment(Point(0, 0), Point(1, 0)))
        assert item.layer == "0"
        assert item.visible
