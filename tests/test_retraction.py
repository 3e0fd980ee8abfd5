"""Tests for retraction and coasting configuration."""

import pytest

from gcode_writer.models import CoastingConfig, RetractionConfig


class TestRetractionConfig:
    """Tests for the RetractionConfig model."""

    def test_valid_config(self):
        """Test creating a config with all fields."""
        config = RetractionConfig(
            amount=4.5, speed=25.0, prime_speed=30.0, prime_amount=0.1, z_hop=500
        )
        assert config.amount == 4.5
        assert config.speed == 25.0
        assert config.prime_speed == 30.0
        assert config.prime_amount == 0.1
        assert config.z_hop == 500

    def test_defaults(self):
        """Test that prime amount and z-hop default to zero."""
        config = RetractionConfig(amount=1.0, speed=25.0, prime_speed=25.0)
        assert config.prime_amount == 0.0
        assert config.z_hop == 0

    def test_zero_amount_allowed(self):
        """Test that a zero amount (retraction disabled) is valid."""
        config = RetractionConfig(amount=0.0, speed=0.0, prime_speed=0.0)
        assert config.amount == 0.0

    @pytest.mark.parametrize("field", ["amount", "speed", "prime_speed", "prime_amount"])
    def test_negative_value_raises_error(self, field):
        """Test that negative values are rejected."""
        values = {"amount": 1.0, "speed": 25.0, "prime_speed": 25.0, field: -1.0}
        with pytest.raises(ValueError, match=f"{field} must be non-negative"):
            RetractionConfig(**values)

    def test_negative_z_hop_raises_error(self):
        """Test that a negative z-hop is rejected."""
        with pytest.raises(ValueError, match="z_hop must be non-negative"):
            RetractionConfig(amount=1.0, speed=25.0, prime_speed=25.0, z_hop=-100)

    def test_config_is_immutable(self):
        """Test that configs cannot be modified after creation."""
        config = RetractionConfig(amount=1.0, speed=25.0, prime_speed=25.0)
        with pytest.raises(AttributeError):
            config.amount = 2.0


class TestCoastingConfig:
    """Tests for the CoastingConfig model."""

    def test_disabled_by_default(self):
        """Test that coasting is off unless enabled."""
        config = CoastingConfig()
        assert config.enable is False
        assert config.volume_move == 0.0

    def test_valid_config(self):
        """Test creating an enabled config."""
        config = CoastingConfig(
            enable=True,
            volume_move=0.064,
            speed_move=0.9,
            min_volume_move=0.8,
            volume_retract=0.064,
            speed_retract=0.9,
            min_volume_retract=0.8,
        )
        assert config.enable is True
        assert config.min_volume_retract == 0.8

    def test_negative_volume_raises_error(self):
        """Test that negative volumes are rejected."""
        with pytest.raises(ValueError, match="volume_move must be non-negative"):
            CoastingConfig(volume_move=-0.1)

    def test_min_volume_below_volume_raises_error(self):
        """Test that the minimum volume must cover the coasted volume."""
        with pytest.raises(ValueError, match="min_volume_move must be at least volume_move"):
            CoastingConfig(volume_move=0.5, min_volume_move=0.1)

    def test_min_volume_retract_below_volume_raises_error(self):
        """Test the same check for coasting before a retraction."""
        with pytest.raises(
            ValueError, match="min_volume_retract must be at least volume_retract"
        ):
            CoastingConfig(volume_retract=0.5, min_volume_retract=0.1)
