"""Tests for shared curve model operations."""

import math

import pytest

from polyclean.core.curve import (
    as_polyline,
    close_with_vertex,
    describe,
    extents,
    fit_arcs,
    partial_bulge,
    primitives_of,
)
from polyclean.domain import ArcSegment, CurveMetadata, LineSegment, Point, Polyline, Vertex


@pytest.fixture
def semicircle() -> Polyline:
    """Open polyline made of one semicircle dipping to (5, -5)."""
    return Polyline.from_points([(0, 0), (10, 0)], bulges=[1.0, 0.0])


class TestPrimitives:
    """Tests for curve decomposition and promotion."""

    def test_primitives_of_polyline(self, semicircle):
        """Test that a polyline yields one primitive per segment."""
        pieces = primitives_of(semicircle)
        assert len(pieces) == 1
        assert isinstance(pieces[0], ArcSegment)

    def test_primitives_of_line(self):
        """Test that a line yields itself."""
        line = LineSegment(Point(0, 0), Point(1, 0))
        assert primitives_of(line) == [line]

    def test_primitives_of_degenerate(self):
        """Test that degenerate curves yield nothing."""
        assert primitives_of(Polyline.from_points([(0, 0)])) == []
        assert primitives_of(ArcSegment(Point(0, 0), 0.0, 0.0, 1.0)) == []

    def test_as_polyline_from_arc(self):
        """Test that an arc becomes a one-segment polyline with its bulge."""
        arc = ArcSegment.from_bulge(Point(0, 0), Point(10, 0), 0.5)
        poly = as_polyline(arc, CurveMetadata(layer="ARCS"))
        assert len(poly.vertices) == 2
        assert poly.vertices[0].bulge == pytest.approx(0.5)
        assert poly.metadata.layer == "ARCS"

    def test_as_polyline_keeps_polyline(self, semicircle):
        """Test that polylines are returned unchanged."""
        assert as_polyline(semicircle) is semicircle


class TestPartialBulge:
    """Tests for bulges of partial segments."""

    def test_full_segment(self):
        """Test that the whole segment keeps its bulge exactly."""
        assert partial_bulge(0.7, 0.0, 1.0) == 0.7

    def test_half_semicircle(self):
        """Test that half a semicircle is a quarter circle."""
        assert partial_bulge(1.0, 0.0, 0.5) == pytest.approx(math.tan(math.pi / 8))

    def test_straight(self):
        """Test that straight segments stay straight."""
        assert partial_bulge(0.0, 0.2, 0.6) == 0.0


class TestFitArcs:
    """Tests for arc-to-chord conversion."""

    def test_fixed_chord_count(self, semicircle):
        """Test that each arc is replaced by the requested number of chords."""
        fitted = fit_arcs(semicircle, segments_per_arc=4)
        assert len(fitted.vertices) == 5
        assert all(v.bulge == 0.0 for v in fitted.vertices)
        for v in fitted.vertices:
            assert v.point.distance_to(Point(5, 0)) == pytest.approx(5.0)

    def test_chord_count_from_sweep(self, semicircle):
        """Test that the chord count follows the sweep."""
        fitted = fit_arcs(semicircle, degrees_per_chord=50.0)
        assert len(fitted.vertices) == 5

    def test_straight_polyline_unchanged(self):
        """Test that a polyline without arcs keeps its geometry."""
        poly = Polyline.from_points([(0, 0), (10, 0), (10, 10)])
        assert fit_arcs(poly) == poly

    def test_invalid_arguments(self, semicircle):
        """Test validation of chord parameters."""
        with pytest.raises(ValueError):
            fit_arcs(semicircle, segments_per_arc=-1)
        with pytest.raises(ValueError):
            fit_arcs(semicircle, degrees_per_chord=0.0)


class TestCloseWithVertex:
    """Tests for explicit closing vertices."""

    def test_open_polyline_gets_closing_vertex(self):
        """Test that the start point is repeated at the end."""
        poly = Polyline.from_points([(0, 0), (10, 0), (10, 10)])
        closed, changed = close_with_vertex(poly)
        assert changed
        assert closed.end_point == Point(0, 0)
        assert not closed.closed

    def test_already_closed(self):
        """Test that closed polylines and returning ends are left alone."""
        poly = Polyline.from_points([(0, 0), (10, 0), (10, 10)], closed=True)
        assert close_with_vertex(poly) == (poly, False)
        ring = Polyline.from_points([(0, 0), (10, 0), (0, 0)])
        assert close_with_vertex(ring) == (ring, False)


class TestQueries:
    """Tests for vertex listings and extents."""

    def test_describe(self):
        """Test vertex rows."""
        poly = Polyline((Vertex(Point(0, 0), 0.5), Vertex(Point(10, 0))))
        assert describe(poly) == [(0, Point(0, 0), 0.5), (1, Point(10, 0), 0.0)]

    def test_extents_with_arc(self, semicircle):
        """Test that extents follow arc bulges."""
        min_x, min_y, max_x, max_y = extents([semicircle])
        assert min_y == pytest.approx(-5.0)
        assert max_x == pytest.approx(10.0)

    def test_extents_mixed(self, semicircle):
        """Test extents over several curve kinds."""
        line = LineSegment(Point(-3, 2), Point(0, 7))
        bounds = extents([semicircle, line])
        assert bounds[0] == pytest.approx(-3.0)
        assert bounds[3] == pytest.approx(7.0)

    def test_extents_empty(self):
        """Test that no curves give no extents."""
        assert extents([]) is None
