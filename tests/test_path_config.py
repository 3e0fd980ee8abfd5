"""Tests for PathConfig and the extrusion ratio calculation."""

import math

import pytest

from gcode_writer.models import PathConfig, RetractionConfig, calculate_extrusion


class TestCalculateExtrusion:
    """Tests for the pure calculate_extrusion function."""

    @pytest.mark.parametrize(
        "width, layer, diameter, flow, volume, filament",
        [
            (400, 200, 2850, 100.0, 0.08, 0.08 / (math.pi * 1.425**2)),
            (400, 200, 1750, 100.0, 0.08, 0.08 / (math.pi * 0.875**2)),
            (500, 100, 2850, 50.0, 0.025, 0.025 / (math.pi * 1.425**2)),
            (400, 200, 2850, 0.0, 0.0, 0.0),
        ],
    )
    def test_ratios(self, width, layer, diameter, flow, volume, filament):
        """Test the volume and filament ratios for typical cross-sections."""
        result = calculate_extrusion(width, layer, diameter, flow)
        assert result == pytest.approx((volume, filament))

    def test_zero_diameter_gives_zero_filament_ratio(self):
        """Test that an unset filament diameter does not divide by zero."""
        volume, filament = calculate_extrusion(400, 200, 0, 100.0)
        assert volume == pytest.approx(0.08)
        assert filament == 0.0


class TestPathConfig:
    """Tests for the PathConfig model."""

    @pytest.fixture
    def config(self):
        """Perimeter config for 2.85mm filament."""
        return PathConfig(
            retraction_config=RetractionConfig(amount=4.5, speed=25.0, prime_speed=25.0),
            name="WALL-OUTER",
            speed=30.0,
            line_width=400,
            layer_thickness=200,
            filament_diameter=2850,
            flow=100.0,
        )

    def test_derived_values_on_creation(self, config):
        """Test that the ratios are computed by the constructor."""
        assert config.extrusion_volume_per_mm == pytest.approx(0.08)
        assert config.extrusion_per_mm_filament == pytest.approx(0.012540, abs=1e-6)

    def test_speed_setter_does_not_touch_ratios(self, config):
        """Test that changing the speed leaves the derived values unchanged."""
        before = config.extrusion_per_mm_filament
        config.speed = 80.0
        assert config.speed == 80.0
        assert config.extrusion_per_mm_filament == before
        assert config.extrusion_per_mm_filament == pytest.approx(
            calculate_extrusion(400, 200, 2850, 100.0)[1]
        )

    def test_line_width_setter_recomputes(self, config):
        """Test that a wider line extrudes proportionally more."""
        config.line_width = 800
        assert config.extrusion_volume_per_mm == pytest.approx(0.16)

    def test_layer_thickness_setter_recomputes(self, config):
        """Test that a thinner layer extrudes proportionally less."""
        config.layer_thickness = 100
        assert config.extrusion_volume_per_mm == pytest.approx(0.04)

    def test_flow_setter_recomputes(self, config):
        """Test that flow scales both ratios."""
        filament = config.extrusion_per_mm_filament
        config.flow = 50.0
        assert config.extrusion_volume_per_mm == pytest.approx(0.04)
        assert config.extrusion_per_mm_filament == pytest.approx(filament / 2)

    def test_filament_diameter_setter_recomputes(self, config):
        """Test that thinner filament needs more length for the same volume."""
        config.filament_diameter = 1750
        assert config.extrusion_per_mm_filament == pytest.approx(
            0.08 / (math.pi * 0.875**2)
        )

    def test_extrusion_per_mm_selects_unit(self, config):
        """Test volumetric and linear ratio selection."""
        assert config.extrusion_per_mm(True) == config.extrusion_volume_per_mm
        assert config.extrusion_per_mm(False) == config.extrusion_per_mm_filament

    def test_smooth_speed_interpolates(self, config):
        """Test that the speed is interpolated between min and nominal.

        speed = 30 * 2 / 4 + 10 * (4 - 2) / 4 = 20
        """
        config.smooth_speed(10.0, 2, 4)
        assert config.speed == pytest.approx(20.0)

    def test_smooth_speed_first_layer(self, config):
        """Test that layer 0 runs at the minimum speed."""
        config.smooth_speed(10.0, 0, 4)
        assert config.speed == pytest.approx(10.0)

    def test_smooth_speed_last_layer(self, config):
        """Test that the ramp ends at the nominal speed."""
        config.smooth_speed(10.0, 4, 4)
        assert config.speed == pytest.approx(30.0)

    def test_smooth_speed_past_ramp(self, config):
        """Test that layers past the ramp keep the nominal speed."""
        config.smooth_speed(10.0, 6, 4)
        assert config.speed == pytest.approx(30.0)

    def test_smooth_speed_without_ramp(self, config):
        """Test that a ramp of zero layers leaves the speed alone."""
        config.smooth_speed(10.0, 0, 0)
        assert config.speed == pytest.approx(30.0)

    def test_defaults(self):
        """Test that a bare config is a zero-extrusion travel config."""
        config = PathConfig()
        assert config.retraction_config is None
        assert config.extrusion_volume_per_mm == 0.0
        assert config.extrusion_per_mm_filament == 0.0
        assert config.spiralize is False

    def test_repr(self, config):
        """Test that repr names the path."""
        assert "WALL-OUTER" in repr(config)
