"""End-to-end tests for the command-line interface."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from polyclean import __version__
from polyclean.cli.app import app
from polyclean.domain import CurveMetadata, Polyline
from polyclean.io import DxfReader, DxfWriter

runner = CliRunner()


@pytest.fixture
def drawing(tmp_path: Path) -> Path:
    """Drawing with a duplicate vertex, a bowtie and a reversed line."""
    path = tmp_path / "plan.dxf"
    writer = DxfWriter.new(path)
    writer.add(
        [
            Polyline.from_points([(0, 0), (0, 0), (5, 0), (10, 0)], metadata=CurveMetadata(layer="A")),
            Polyline.from_points([(0, 0), (10, 10), (10, 0), (0, 10)], closed=True),
            Polyline.from_points([(30, 5), (20, 5)]),
        ]
    )
    writer.save()
    return path


def _polylines(path: Path) -> list[Polyline]:
    with DxfReader(path) as reader:
        return reader.polylines()


class TestGeneral:
    """Tests for options shared by every command."""

    def test_version(self):
        """Test --version output."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"v{__version__}" in result.output

    def test_missing_input(self, tmp_path):
        """Test that a missing drawing exits with code 1."""
        result = runner.invoke(app, ["dedupe", str(tmp_path / "missing.dxf"), "-q"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_directory_input(self, tmp_path):
        """Test that a directory is rejected as input."""
        result = runner.invoke(app, ["dedupe", str(tmp_path), "-q"])
        assert result.exit_code == 1


class TestCleaningCommands:
    """Tests for commands that write a cleaned drawing."""

    def test_dedupe_default_output(self, drawing):
        """Test that dedupe writes {name}-Cleaned.dxf."""
        result = runner.invoke(app, ["dedupe", str(drawing), "-q", "-j", "1"])
        assert result.exit_code == 0, result.output

        output = drawing.parent / "plan-Cleaned.dxf"
        assert output.exists()
        assert sorted(len(p.vertices) for p in _polylines(output)) == [2, 3, 4]

    def test_dedupe_with_summary(self, drawing, tmp_path):
        """Test the non-quiet summary output."""
        output = tmp_path / "clean.dxf"
        result = runner.invoke(app, ["dedupe", str(drawing), "-o", str(output), "-j", "1"])
        assert result.exit_code == 0, result.output
        assert "Complete" in result.output
        assert output.exists()

    def test_direction(self, drawing, tmp_path):
        """Test that direction 3 orients every polyline left to right."""
        output = tmp_path / "oriented.dxf"
        result = runner.invoke(
            app, ["direction", str(drawing), "-d", "3", "-o", str(output), "-q", "-j", "1"]
        )
        assert result.exit_code == 0, result.output
        for poly in _polylines(output):
            assert poly.vertices[0].x <= poly.vertices[-1].x

    def test_invalid_direction(self, drawing):
        """Test that direction values outside 1..4 are rejected."""
        result = runner.invoke(app, ["direction", str(drawing), "-d", "7"])
        assert result.exit_code != 0

    def test_split(self, drawing, tmp_path):
        """Test that split replaces the drawing's polylines with pieces."""
        output = tmp_path / "split.dxf"
        result = runner.invoke(app, ["split", str(drawing), "-o", str(output), "-q"])
        assert result.exit_code == 0, result.output
        assert len(_polylines(output)) > 3

    def test_log_file(self, drawing, tmp_path):
        """Test that --log-file captures processing records."""
        log_file = tmp_path / "run.log"
        result = runner.invoke(
            app, ["close", str(drawing), "-q", "-j", "1", "--log-file", str(log_file)]
        )
        assert result.exit_code == 0, result.output
        assert "Processing complete" in log_file.read_text(encoding="utf-8")


class TestQueryCommands:
    """Tests for commands that only report."""

    def test_detect(self, drawing):
        """Test self-intersection reporting."""
        result = runner.invoke(app, ["detect", str(drawing), "-q"])
        assert result.exit_code == 0, result.output
        assert "1 of 3 polylines intersect themselves" in result.output

    def test_info(self, drawing):
        """Test vertex listings."""
        result = runner.invoke(app, ["info", str(drawing)])
        assert result.exit_code == 0, result.output
        assert "length 10.0000" in result.output

    def test_info_unknown_handle(self, drawing):
        """Test that an unknown handle exits with code 1."""
        result = runner.invoke(app, ["info", str(drawing), "--handle", "FFFFFF"])
        assert result.exit_code == 1

    def test_extents(self, drawing):
        """Test the combined bounding box."""
        result = runner.invoke(app, ["extents", str(drawing)])
        assert result.exit_code == 0, result.output
        assert "Min  (0.0000, 0.0000)" in result.output
        assert "Max  (30.0000, 10.0000)" in result.output

    def test_landing(self, drawing, tmp_path):
        """Test that landing prints and draws the connector."""
        output = tmp_path / "landing.dxf"
        result = runner.invoke(
            app, ["landing", str(drawing), "--x", "25", "--y", "8", "-o", str(output)]
        )
        assert result.exit_code == 0, result.output
        assert "3.0000" in result.output

        connectors = [p for p in _polylines(output) if len(p.vertices) == 2 and p.vertices[0].y == 8]
        assert len(connectors) == 1
        assert connectors[0].end_point.y == pytest.approx(5.0)

    def test_landing_without_curves(self, tmp_path):
        """Test that an empty drawing has nothing to land on."""
        path = tmp_path / "empty.dxf"
        DxfWriter.new(path).save()
        result = runner.invoke(app, ["landing", str(path), "--x", "0", "--y", "0"])
        assert result.exit_code == 1
