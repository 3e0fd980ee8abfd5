"""Tests for visualization utilities."""

import io

import matplotlib
import pytest

# Use non-interactive backend for testing
matplotlib.use("Agg")

import matplotlib.pyplot as plt

from gcode_writer.flavors import Flavor
from gcode_writer.models import RetractionConfig
from gcode_writer.visualize import parse_moves, plot_extrusion_only, plot_toolpath
from gcode_writer.writer import GCodeWriter


@pytest.fixture
def gcode():
    """A short program: travel, two extrusions, retraction, travel, extrusion."""
    out = io.StringIO()
    writer = GCodeWriter(out)
    writer.set_z(200)
    writer.write_move((0, 0), 150.0, 0.0)
    writer.write_move((10000, 0), 30.0, 0.05)
    writer.write_move((10000, 10000), 30.0, 0.05)
    writer.write_retraction(RetractionConfig(amount=4.5, speed=25.0, prime_speed=25.0))
    writer.write_move((20000, 10000), 150.0, 0.0)
    writer.write_move((20000, 20000), 30.0, 0.05)
    return out.getvalue()


class TestParseMoves:
    """Test parse_moves function."""

    def test_resolves_modal_coordinates(self, gcode):
        """Test that omitted axes keep their previous value."""
        moves = parse_moves(gcode)
        assert (moves[1].x, moves[1].y, moves[1].z) == (10.0, 0.0, 0.2)
        assert moves[1].e == pytest.approx(0.5)

    def test_classifies_moves(self, gcode):
        """Test travel, extrusion and retraction detection."""
        moves = parse_moves(gcode)
        assert [move.extruding for move in moves] == [
            False,
            True,
            True,
            False,
            False,
            False,
            True,
        ]
        assert [move.retraction for move in moves] == [
            False,
            False,
            False,
            True,
            False,
            False,
            False,
        ]

    def test_ignores_comments_and_other_commands(self):
        moves = parse_moves(";LAYER:0\nM104 S210\nG1 X1 Y2 E0.1 ; wall\n")
        assert len(moves) == 1
        assert moves[0].line_number == 3
        assert moves[0].extruding

    def test_g92_resets_extruder(self):
        moves = parse_moves("G1 X1 E5\nG92 E0\nG1 X2 E0.5\n")
        assert moves[-1].e == 0.5
        assert moves[-1].extruding

    def test_firmware_retraction(self):
        moves = parse_moves("G1 X1 E1\nG10\nG11\n")
        assert [move.retraction for move in moves] == [False, True, False]

    def test_other_axis(self):
        """Test Mach3 programs that extrude on the B axis."""
        out = io.StringIO()
        writer = GCodeWriter(out, flavor=Flavor.MACH3)
        writer.set_z(200)
        writer.write_move((0, 0), 150.0, 0.0)
        writer.switch_extruder(1)
        writer.write_move((10000, 0), 30.0, 0.05)
        moves = parse_moves(out.getvalue(), axis="B")
        assert moves[-1].e == pytest.approx(0.5)


class TestPlotToolpath:
    """Test plot_toolpath function."""

    def test_creates_figure(self, gcode):
        """Test that plot_toolpath creates a valid figure."""
        fig = plot_toolpath(gcode, show=False)
        assert isinstance(fig, plt.Figure)
        plt.close(fig)

    def test_has_two_subplots(self, gcode):
        fig = plot_toolpath(gcode, show=False)
        assert len(fig.axes) == 2
        plt.close(fig)

    def test_custom_title(self, gcode):
        fig = plot_toolpath(gcode, title="Calibration cube", show=False)
        assert fig._suptitle.get_text() == "Calibration cube"
        plt.close(fig)

    def test_save_to_file(self, gcode, tmp_path):
        """Test that the figure can be saved."""
        path = tmp_path / "toolpath.png"
        fig = plot_toolpath(gcode, show=False, save_path=str(path))
        assert path.exists()
        plt.close(fig)

    def test_empty_program_raises_error(self):
        with pytest.raises(ValueError, match="without moves"):
            plot_toolpath(";empty\n", show=False)


class TestPlotExtrusionOnly:
    """Test plot_extrusion_only function."""

    def test_creates_single_panel(self, gcode):
        fig = plot_extrusion_only(gcode, show=False)
        assert len(fig.axes) == 1
        assert fig.axes[0].get_title() == "Extruder Position"
        plt.close(fig)

    def test_empty_program_raises_error(self):
        with pytest.raises(ValueError, match="without moves"):
            plot_extrusion_only("", show=False)
