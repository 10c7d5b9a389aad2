"""Tests for polyline reversal and direction canonicalization."""

import pytest

from polyclean.core.direction import Direction, reverse, set_direction
from polyclean.domain import CurveMetadata, Point, Polyline, Vertex


class TestReverse:
    """Tests for geometry-preserving reversal."""

    def test_open_points_reversed(self):
        """Test that vertex order is reversed."""
        poly = Polyline.from_points([(0, 0), (10, 0), (10, 10)])
        assert reverse(poly).points == [Point(10, 10), Point(10, 0), Point(0, 0)]

    def test_bulge_negated_and_moved(self):
        """Test that an arc keeps its shape when traversed backwards."""
        poly = Polyline((Vertex(Point(0, 0), 0.5), Vertex(Point(10, 0))))
        reversed_poly = reverse(poly)
        assert reversed_poly.bulges == [-0.5, 0.0]

        original_mid = poly.segment(0).point_at(0.5)
        reversed_mid = reversed_poly.segment(0).point_at(0.5)
        assert reversed_mid.x == pytest.approx(original_mid.x)
        assert reversed_mid.y == pytest.approx(original_mid.y)

    def test_widths_swapped(self):
        """Test that segment widths are swapped end for end."""
        poly = Polyline((Vertex(Point(0, 0), 0.0, 1.0, 2.0), Vertex(Point(10, 0))))
        first = reverse(poly).vertices[0]
        assert (first.start_width, first.end_width) == (2.0, 1.0)

    def test_closed_reversal(self):
        """Test that each closed segment keeps its bulge on the reversed side."""
        poly = Polyline.from_points(
            [(0, 0), (10, 0), (10, 10)], bulges=[0.1, 0.2, 0.3], closed=True
        )
        reversed_poly = reverse(poly)
        assert reversed_poly.points == [Point(10, 10), Point(10, 0), Point(0, 0)]
        assert reversed_poly.bulges == [-0.2, -0.1, -0.3]
        assert reversed_poly.length == pytest.approx(poly.length)

    def test_double_reversal_is_identity(self):
        """Test that reversing twice gives the original polyline."""
        poly = Polyline.from_points(
            [(0, 0), (10, 0), (10, 10), (0, 10)], bulges=[0.1, 0.0, -0.4, 0.2], closed=True
        )
        assert reverse(reverse(poly)) == poly

    def test_metadata_preserved(self):
        """Test that metadata passes through."""
        meta = CurveMetadata(layer="PIPES", handle="3C")
        poly = Polyline.from_points([(0, 0), (1, 0)], metadata=meta)
        assert reverse(poly).metadata == meta


class TestSetDirection:
    """Tests for axis direction conventions."""

    @pytest.mark.parametrize(
        "points,direction",
        [
            ([(10, 0), (0, 0)], Direction.LEFT_TO_RIGHT),
            ([(0, 0), (10, 0)], Direction.RIGHT_TO_LEFT),
            ([(0, 10), (0, 0)], Direction.BOTTOM_TO_TOP),
            ([(0, 0), (0, 10)], Direction.TOP_TO_BOTTOM),
        ],
    )
    def test_reverses_opposing(self, points, direction):
        """Test that polylines running against the convention are reversed."""
        poly = Polyline.from_points(points)
        oriented, changed = set_direction(poly, direction)
        assert changed
        assert oriented.start_point == poly.end_point

    def test_already_oriented(self):
        """Test that a correctly oriented polyline is returned as is."""
        poly = Polyline.from_points([(0, 0), (10, 0)])
        assert set_direction(poly, Direction.LEFT_TO_RIGHT) == (poly, False)

    def test_equal_coordinate_unchanged(self):
        """Test that a tie on the compared coordinate changes nothing."""
        poly = Polyline.from_points([(0, 0), (0, 10)])
        assert set_direction(poly, Direction.LEFT_TO_RIGHT) == (poly, False)

    def test_idempotent(self):
        """Test that applying the same direction twice is a no-op the second time."""
        poly = Polyline.from_points([(10, 5), (3, 0), (0, 2)])
        oriented, _ = set_direction(poly, Direction.LEFT_TO_RIGHT)
        assert set_direction(oriented, Direction.LEFT_TO_RIGHT) == (oriented, False)

    def test_degenerate(self):
        """Test that degenerate polylines are left alone."""
        poly = Polyline.from_points([(5, 5)])
        assert set_direction(poly, Direction.RIGHT_TO_LEFT) == (poly, False)

    def test_cli_numbering(self):
        """Test the numeric values exposed on the command line."""
        assert Direction(1) is Direction.RIGHT_TO_LEFT
        assert Direction(4) is Direction.TOP_TO_BOTTOM
