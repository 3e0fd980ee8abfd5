"""G-code flavors and their command spelling.

Every flavor-dependent decision lives in a ``Dialect``. The writer asks the
active dialect how to spell a command and which conventions apply (volumetric
E values, firmware retraction, extrusion resets); it never branches on the
flavor itself.
"""

from enum import Enum
from typing import Dict, List, Optional, Union

from gcode_writer.models.point import SECONDS_PER_MINUTE


class Flavor(Enum):
    """Supported G-code flavors."""

    REPRAP = "reprap"  # Marlin/Sprinter: absolute E in mm of filament
    REPRAP_VOLUMETRIC = "reprap_volumetric"  # Marlin with E in mm³ and G10/G11
    ULTIGCODE = "ultigcode"  # Ultimaker 2: E in mm³, firmware retraction
    MAKERBOT = "makerbot"  # MakerBot: M135 tool select, no G92
    BFB = "bfb"  # Bits From Bytes: RPM extrusion, automatic retraction
    MACH3 = "mach3"  # Mach3: one rotary axis (A, B, ...) per extruder

    @classmethod
    def parse(cls, value: Union["Flavor", str]) -> "Flavor":
        """
        Resolve a flavor from an enum member, its value, its name or the
        machine setting label used by slicer profiles.

        Raises:
            ValueError: If the flavor is unknown
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Unknown G-code flavor: {value!r}")
        key = value.strip()
        if key in _FLAVOR_LABELS:
            return _FLAVOR_LABELS[key]
        lowered = key.lower()
        for flavor in cls:
            if lowered in (flavor.value, flavor.name.lower()):
                return flavor
        raise ValueError(f"Unknown G-code flavor: {value!r}")


_FLAVOR_LABELS = {
    "RepRap (Marlin/Sprinter)": Flavor.REPRAP,
    "RepRap (Volumetric)": Flavor.REPRAP_VOLUMETRIC,
    "UltiGCode": Flavor.ULTIGCODE,
    "MakerBot": Flavor.MAKERBOT,
    "Bits From Bytes": Flavor.BFB,
    "Mach3": Flavor.MACH3,
}


def format_number(value: float, decimals: int) -> str:
    """Format with at most ``decimals`` decimals, dropping trailing zeros."""
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def feedrate_word(speed: float) -> str:
    """Convert a speed in mm/s to the G-code ``F`` word (mm/min)."""
    return f"F{format_number(speed * SECONDS_PER_MINUTE, 1)}"


class Dialect:
    """
    Command spelling for the RepRap (Marlin/Sprinter) flavor.

    Subclasses override only what their firmware spells differently.

    Attributes:
        flavor: The flavor this dialect implements
        volumetric: E values are mm³ instead of mm of filament
        firmware_retraction: Retraction is done with G10/G11
        auto_retraction: The firmware retracts on its own when extrusion stops
        supports_extrusion_reset: The E axis can be zeroed with G92
        reset_extrusion_on_switch: Each extruder has its own axis to zero after a switch
        newline: Line terminator
    """

    flavor = Flavor.REPRAP
    volumetric = False
    firmware_retraction = False
    auto_retraction = False
    supports_extrusion_reset = True
    reset_extrusion_on_switch = False
    newline = "\n"

    def extruder_axis(self, extruder: int) -> str:
        return "E"

    def move(
        self,
        extruding: bool,
        speed: Optional[float],
        x: float,
        y: float,
        z: Optional[float],
        axis: str,
        e_value: Optional[float],
    ) -> str:
        """
        Spell a linear move.

        Args:
            extruding: G1 if True, G0 otherwise
            speed: New speed in mm/s, or None if unchanged
            x: X in mm
            y: Y in mm
            z: Z in mm, or None if unchanged
            axis: Extruder axis letter
            e_value: Absolute extruder position, or None for travel moves

        Returns:
            One G-code line without terminator
        """
        words = ["G1" if extruding else "G0"]
        if speed is not None:
            words.append(feedrate_word(speed))
        words.append(f"X{x:.3f}")
        words.append(f"Y{y:.3f}")
        if z is not None:
            words.append(f"Z{z:.3f}")
        if e_value is not None:
            words.append(f"{axis}{e_value:.5f}")
        return " ".join(words)

    def z_move(self, z: float) -> str:
        return f"G1 Z{z:.3f}"

    def extruder_move(self, speed: float, axis: str, e_value: float) -> str:
        """Spell a move of the extruder axis alone."""
        return f"G1 {feedrate_word(speed)} {axis}{e_value:.5f}"

    def retract(self, speed: float, axis: str, e_value: float) -> List[str]:
        return [self.extruder_move(speed, axis, e_value)]

    def unretract(self, speed: float, axis: str, e_value: float, extra: float) -> List[str]:
        """
        Spell the prime after a retraction.

        Args:
            speed: Prime speed in mm/s
            axis: Extruder axis letter
            e_value: Extruder position after priming
            extra: Material primed beyond the retracted amount
        """
        return [self.extruder_move(speed, axis, e_value)]

    def switch_retract(self, speed: float, axis: str, e_value: float) -> List[str]:
        return [self.extruder_move(speed, axis, e_value)]

    def reset_extrusion(self, axis: str, value: float = 0.0) -> str:
        return f"G92 {axis}{format_number(value, 5)}"

    def select_tool(self, extruder: int) -> Optional[str]:
        return f"T{extruder}"

    def fan(self, speed: float) -> str:
        """Spell a fan command for ``speed`` in percent."""
        if speed > 0:
            return f"M106 S{format_number(speed * 255 / 100, 1)}"
        return "M107"

    def temperature(self, temperature: float, wait: bool, extruder: Optional[int]) -> str:
        """
        Spell a hotend temperature command.

        Args:
            temperature: Target in degrees Celsius
            wait: Block until the temperature is reached
            extruder: Tool index, or None for the active tool
        """
        words = ["M109" if wait else "M104"]
        if extruder is not None:
            words.append(f"T{extruder}")
        words.append(f"S{format_number(temperature, 1)}")
        return " ".join(words)

    def bed_temperature(self, temperature: float, wait: bool) -> str:
        return f"{'M190' if wait else 'M140'} S{format_number(temperature, 1)}"

    def delay(self, seconds: float) -> str:
        return f"G4 P{int(seconds * 1000)}"


class FirmwareRetractionDialect(Dialect):
    """Volumetric E values with retraction settings stored in the firmware."""

    flavor = Flavor.REPRAP_VOLUMETRIC
    volumetric = True
    firmware_retraction = True

    def retract(self, speed: float, axis: str, e_value: float) -> List[str]:
        return ["G10"]

    def unretract(self, speed: float, axis: str, e_value: float, extra: float) -> List[str]:
        lines = ["G11"]
        # G11 only undoes the firmware retraction
        if extra > 0:
            lines.append(self.extruder_move(speed, axis, e_value))
        return lines

    def switch_retract(self, speed: float, axis: str, e_value: float) -> List[str]:
        return ["G10 S1"]


class UltiGCodeDialect(FirmwareRetractionDialect):
    flavor = Flavor.ULTIGCODE


class MakerBotDialect(Dialect):
    flavor = Flavor.MAKERBOT
    supports_extrusion_reset = False

    def select_tool(self, extruder: int) -> Optional[str]:
        return f"M135 T{extruder}"

    def fan(self, speed: float) -> str:
        # MakerBot firmware can only switch the fan on or off
        if speed > 0:
            return "M126 T0"
        return "M127 T0"


class Mach3Dialect(Dialect):
    flavor = Flavor.MACH3
    reset_extrusion_on_switch = True

    def extruder_axis(self, extruder: int) -> str:
        return chr(ord("A") + extruder)

    def fan(self, speed: float) -> str:
        if speed > 0:
            return f"M106 P{format_number(speed * 255 / 100, 1)}"
        return "M106 P0"


# All BFB machines extrude 4mm per RPM
BFB_MM_PER_RPM = 4.0


class BFBDialect(Dialect):
    """
    Bits From Bytes machines.

    These do not take E values. Extrusion is controlled by setting the
    extruder RPM (M108) and switching the extruder on (M101, M201, ...) and
    off (M103); switching off retracts automatically.
    """

    flavor = Flavor.BFB
    auto_retraction = True
    supports_extrusion_reset = False
    newline = "\r\n"

    def select_tool(self, extruder: int) -> Optional[str]:
        return None

    def set_rpm(self, rpm: float) -> str:
        return f"M108 S{rpm:.1f}"

    def extruder_on(self, extruder: int) -> str:
        return f"M{(extruder + 1) * 100 + 1}"

    def extruder_off(self) -> str:
        return "M103"

    def rpm_move(self, x: float, y: float, z: float, feedrate: float) -> str:
        """Spell a BFB move; ``feedrate`` is already in mm/min."""
        return f"G1 X{x:.3f} Y{y:.3f} Z{z:.3f} F{feedrate:.1f}"


DIALECTS: Dict[Flavor, Dialect] = {
    Flavor.REPRAP: Dialect(),
    Flavor.REPRAP_VOLUMETRIC: FirmwareRetractionDialect(),
    Flavor.ULTIGCODE: UltiGCodeDialect(),
    Flavor.MAKERBOT: MakerBotDialect(),
    Flavor.BFB: BFBDialect(),
    Flavor.MACH3: Mach3Dialect(),
}


def get_dialect(flavor: Union[Flavor, str]) -> Dialect:
    """
    Look up the dialect for a flavor.

    Raises:
        ValueError: If the flavor is unknown
    """
    return DIALECTS[Flavor.parse(flavor)]
