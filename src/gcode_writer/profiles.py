"""Machine and retraction presets for common printer setups."""

from enum import Enum

from gcode_writer.flavors import Flavor
from gcode_writer.models.retraction import RetractionConfig
from gcode_writer.settings import WriterSettings


class MachineProfile(Enum):
    """Common printers, one per supported flavor family."""

    ULTIMAKER_ORIGINAL = "ultimaker_original"  # Marlin, 2.85mm filament
    ULTIMAKER2 = "ultimaker2"  # UltiGCode, firmware retraction
    REPLICATOR_2X = "replicator_2x"  # MakerBot dual extruder
    BFB_3000 = "bfb_3000"  # Bits From Bytes, RPM extrusion
    MACH3_DUAL = "mach3_dual"  # Mach3 controller, one axis per extruder


class RetractionProfile(Enum):
    """Typical retraction policies by extruder type."""

    BOWDEN = "bowden"  # Long feed tube: long, fast retraction
    BOWDEN_Z_HOP = "bowden_z_hop"  # Bowden with a z-hop during travel
    DIRECT_DRIVE = "direct_drive"  # Extruder on the head: short retraction
    DISABLED = "disabled"  # No retraction


def create_writer_settings(profile: MachineProfile) -> WriterSettings:
    """
    Create WriterSettings from a predefined machine profile.

    Args:
        profile: Machine profile to use

    Returns:
        WriterSettings with flavor, nozzle offsets and switch retraction
        matching the selected machine

    Examples:
        >>> settings = create_writer_settings(MachineProfile.ULTIMAKER2)
        >>> settings.flavor
        <Flavor.ULTIGCODE: 'ultigcode'>

        >>> dual = create_writer_settings(MachineProfile.REPLICATOR_2X)
        >>> dual.extruder_offsets[1]
        (35000, 0)
    """
    if profile == MachineProfile.ULTIMAKER_ORIGINAL:
        return WriterSettings(
            flavor=Flavor.REPRAP,
            switch_retraction_amount=16.0,  # mm - bowden tube
            retraction_extrusion_window=4.5,  # mm
            retraction_count_max=45,
        )
    elif profile == MachineProfile.ULTIMAKER2:
        return WriterSettings(
            flavor=Flavor.ULTIGCODE,
            extruder_offsets=((0, 0), (18000, 0)),  # microns - dual extrusion kit
            switch_retraction_amount=16.0,
            retraction_extrusion_window=4.5,
            retraction_count_max=45,
        )
    elif profile == MachineProfile.REPLICATOR_2X:
        return WriterSettings(
            flavor=Flavor.MAKERBOT,
            extruder_offsets=((0, 0), (35000, 0)),  # microns - nozzle spacing
            switch_retraction_amount=1.0,  # mm - direct drive
            switch_retraction_speed=25.0,
            switch_prime_speed=25.0,
            retraction_extrusion_window=1.0,
            retraction_count_max=25,
        )
    elif profile == MachineProfile.BFB_3000:
        return WriterSettings(flavor=Flavor.BFB)
    elif profile == MachineProfile.MACH3_DUAL:
        return WriterSettings(
            flavor=Flavor.MACH3,
            extruder_offsets=((0, 0), (20000, 0)),
            switch_retraction_amount=4.0,
        )
    else:
        raise ValueError(f"Unknown machine profile: {profile}")


def create_retraction_config(profile: RetractionProfile) -> RetractionConfig:
    """
    Create a RetractionConfig from a predefined retraction profile.

    Bowden extruders need a long retraction to relieve the pressure stored
    in the tube; direct drive extruders only a short one.

    Args:
        profile: Retraction profile to use

    Returns:
        RetractionConfig matching the selected profile

    Examples:
        >>> bowden = create_retraction_config(RetractionProfile.BOWDEN)
        >>> print(f"{bowden.amount}mm at {bowden.speed}mm/s")
        4.5mm at 25.0mm/s
    """
    if profile == RetractionProfile.BOWDEN:
        return RetractionConfig(amount=4.5, speed=25.0, prime_speed=25.0)
    elif profile == RetractionProfile.BOWDEN_Z_HOP:
        return RetractionConfig(
            amount=4.5,
            speed=25.0,
            prime_speed=25.0,
            z_hop=500,  # microns - clears the printed surface during travel
        )
    elif profile == RetractionProfile.DIRECT_DRIVE:
        return RetractionConfig(
            amount=1.0,
            speed=35.0,
            prime_speed=35.0,
            prime_amount=0.02,  # mm - makes up for oozing during travel
        )
    elif profile == RetractionProfile.DISABLED:
        return RetractionConfig(amount=0.0, speed=0.0, prime_speed=0.0)
    else:
        raise ValueError(f"Unknown retraction profile: {profile}")
