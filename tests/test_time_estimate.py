"""Tests for the print time estimator."""

import pytest

from gcode_writer.time_estimate import (
    TimeEstimateCalculator,
    estimate_acceleration_distance,
    intersection_distance,
    max_allowable_speed,
)


class TestKinematics:
    """Tests for the constant-acceleration helpers."""

    def test_estimate_acceleration_distance(self):
        """Test v² = 2as: 0 to 10mm/s at 10mm/s² takes 5mm."""
        assert estimate_acceleration_distance(0.0, 10.0, 10.0) == pytest.approx(5.0)

    def test_estimate_acceleration_distance_zero_acceleration(self):
        assert estimate_acceleration_distance(0.0, 10.0, 0.0) == 0.0

    def test_max_allowable_speed(self):
        """Test the highest speed that can brake to rest within 5mm."""
        assert max_allowable_speed(-10.0, 0.0, 5.0) == pytest.approx(10.0)

    def test_intersection_distance(self):
        """Test that a symmetric move brakes at its midpoint."""
        assert intersection_distance(0.0, 0.0, 10.0, 10.0) == pytest.approx(5.0)


class TestTimeEstimateCalculator:
    """Tests for TimeEstimateCalculator."""

    @pytest.fixture
    def estimator(self):
        return TimeEstimateCalculator()

    def test_empty(self, estimator):
        """Test that nothing planned takes no time."""
        assert estimator.calculate() == 0.0
        assert len(estimator) == 0

    def test_add_time(self, estimator):
        """Test that fixed time is included."""
        estimator.add_time(2.5)
        assert estimator.calculate() == pytest.approx(2.5)

    def test_long_move_close_to_nominal(self, estimator):
        """Test that a long move takes slightly more than distance / speed."""
        estimator.plan((100.0, 0.0, 0.0, 0.0), 100.0)
        time = estimator.calculate()
        assert 1.0 < time < 1.1

    def test_zero_length_move_ignored(self, estimator):
        """Test that a move to the current position adds no block."""
        estimator.set_position((5.0, 5.0, 0.2, 1.0))
        estimator.plan((5.0, 5.0, 0.2, 1.0), 100.0)
        assert len(estimator) == 0

    def test_extruder_only_move(self, estimator):
        """Test that a retraction is timed by its E distance."""
        estimator.plan((0.0, 0.0, 0.0, -4.5), 25.0)
        assert len(estimator) == 1
        assert estimator.calculate() >= 4.5 / 25.0

    def test_z_feedrate_limited(self, estimator):
        """Test that Z moves are limited to the Z axis maximum feed rate."""
        estimator.plan((0.0, 0.0, 10.0, 0.0), 100.0)
        assert estimator.calculate() > 10.0 / 40.0

    def test_more_moves_take_longer(self, estimator):
        """Test that time accumulates over consecutive moves."""
        estimator.plan((10.0, 0.0, 0.0, 0.0), 50.0)
        single = TimeEstimateCalculator()
        single.plan((10.0, 0.0, 0.0, 0.0), 50.0)
        estimator.plan((10.0, 10.0, 0.0, 0.0), 50.0)
        assert estimator.calculate() > single.calculate()

    def test_reset_keeps_position(self, estimator):
        """Test that reset drops blocks but not the position."""
        estimator.plan((10.0, 0.0, 0.0, 0.0), 50.0)
        estimator.add_time(1.0)
        estimator.reset()
        assert estimator.calculate() == 0.0
        estimator.plan((10.0, 0.0, 0.0, 0.0), 50.0)
        assert len(estimator) == 0
