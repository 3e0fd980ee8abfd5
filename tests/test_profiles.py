"""Tests for machine and retraction profile presets."""

import pytest

from gcode_writer.flavors import Flavor
from gcode_writer.models.retraction import RetractionConfig
from gcode_writer.profiles import (
    MachineProfile,
    RetractionProfile,
    create_retraction_config,
    create_writer_settings,
)
from gcode_writer.settings import WriterSettings


class TestMachineProfile:
    """Tests for MachineProfile enum and create_writer_settings factory."""

    @pytest.mark.parametrize(
        "profile, flavor",
        [
            (MachineProfile.ULTIMAKER_ORIGINAL, Flavor.REPRAP),
            (MachineProfile.ULTIMAKER2, Flavor.ULTIGCODE),
            (MachineProfile.REPLICATOR_2X, Flavor.MAKERBOT),
            (MachineProfile.BFB_3000, Flavor.BFB),
            (MachineProfile.MACH3_DUAL, Flavor.MACH3),
        ],
    )
    def test_profile_flavor(self, profile, flavor):
        """Test that every profile selects its machine's flavor."""
        settings = create_writer_settings(profile)

        assert isinstance(settings, WriterSettings)
        assert settings.flavor is flavor

    def test_dual_extrusion_offsets(self):
        """Test the nozzle spacing of dual extrusion machines."""
        assert create_writer_settings(MachineProfile.ULTIMAKER2).extruder_offsets[1] == (18000, 0)
        assert create_writer_settings(MachineProfile.REPLICATOR_2X).extruder_offsets[1] == (
            35000,
            0,
        )

    def test_direct_drive_switch_retraction_shorter(self):
        """Test that the direct drive machine retracts less on a switch."""
        bowden = create_writer_settings(MachineProfile.ULTIMAKER2)
        direct = create_writer_settings(MachineProfile.REPLICATOR_2X)

        assert direct.switch_retraction_amount < bowden.switch_retraction_amount

    def test_invalid_profile_raises_error(self):
        with pytest.raises(ValueError, match="Unknown machine profile"):
            create_writer_settings("invalid_profile")


class TestRetractionProfile:
    """Tests for RetractionProfile enum and create_retraction_config factory."""

    def test_bowden(self):
        config = create_retraction_config(RetractionProfile.BOWDEN)

        assert isinstance(config, RetractionConfig)
        assert config.amount == 4.5
        assert config.z_hop == 0

    def test_bowden_z_hop(self):
        """Test that the z-hop variant only adds a hop."""
        plain = create_retraction_config(RetractionProfile.BOWDEN)
        hop = create_retraction_config(RetractionProfile.BOWDEN_Z_HOP)

        assert hop.z_hop == 500
        assert hop.amount == plain.amount

    def test_direct_drive(self):
        config = create_retraction_config(RetractionProfile.DIRECT_DRIVE)

        assert config.amount == 1.0
        assert config.prime_amount == 0.02

    def test_disabled(self):
        """Test that the disabled profile never retracts."""
        assert create_retraction_config(RetractionProfile.DISABLED).amount == 0.0

    def test_invalid_profile_raises_error(self):
        with pytest.raises(ValueError, match="Unknown retraction profile"):
            create_retraction_config("invalid_profile")
