"""Tests for the retraction frequency limiter."""

import pytest

from gcode_writer.retraction_limiter import RetractionLimiter


class TestRetractionLimiter:
    """Tests for RetractionLimiter."""

    @pytest.fixture
    def limiter(self):
        """At most 3 retractions per 5mm of filament."""
        return RetractionLimiter(count_max=3, extrusion_window=5.0)

    def test_allows_until_full(self, limiter):
        """Test that retractions are allowed while the window has room."""
        for e in (1.0, 2.0, 3.0):
            assert limiter.allows(e)
            limiter.record(e)
        assert len(limiter) == 3

    def test_refuses_within_window(self, limiter):
        """Test that a 4th retraction within 5mm of the oldest is refused."""
        for e in (1.0, 2.0, 3.0):
            limiter.record(e)
        assert not limiter.allows(4.0)
        assert not limiter.allows(5.999)

    def test_allows_once_window_passed(self, limiter):
        """Test that the window reopens after enough extrusion."""
        for e in (1.0, 2.0, 3.0):
            limiter.record(e)
        assert limiter.allows(6.0)

    def test_oldest_snapshot_dropped(self, limiter):
        """Test the fixed capacity of the window."""
        for e in (1.0, 2.0, 3.0, 7.0):
            limiter.record(e)
        assert limiter.snapshots() == [2.0, 3.0, 7.0]
        assert not limiter.allows(6.5)
        assert limiter.allows(7.0)

    @pytest.mark.parametrize("count_max", [0, -1])
    def test_disabled(self, count_max):
        """Test that a count of zero or less never limits."""
        limiter = RetractionLimiter(count_max=count_max, extrusion_window=5.0)
        for _ in range(10):
            assert limiter.allows(0.0)
            limiter.record(0.0)
        assert len(limiter) == 0

    def test_shift(self, limiter):
        """Test that snapshots follow an extrusion counter reset."""
        for e in (1.0, 2.0, 3.0):
            limiter.record(e)
        limiter.shift(3.0)
        assert limiter.snapshots() == [-2.0, -1.0, 0.0]
        assert not limiter.allows(1.0)
        assert limiter.allows(3.0)

    def test_clear(self, limiter):
        """Test that clearing forgets all retractions."""
        for e in (1.0, 2.0, 3.0):
            limiter.record(e)
        limiter.clear()
        assert limiter.allows(3.0)
        assert limiter.snapshots() == []

    def test_properties(self, limiter):
        assert limiter.count_max == 3
        assert limiter.extrusion_window == 5.0

    def test_negative_window_raises_error(self):
        """Test that a negative window is rejected."""
        with pytest.raises(ValueError, match="extrusion_window must be non-negative"):
            RetractionLimiter(count_max=3, extrusion_window=-1.0)
