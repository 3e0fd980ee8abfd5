"""Per-path extrusion configuration for G-code moves."""

import math
from typing import Optional, Tuple

from gcode_writer.models.point import int2mm
from gcode_writer.models.retraction import RetractionConfig


def calculate_extrusion(
    line_width: int, layer_thickness: int, filament_diameter: int, flow: float
) -> Tuple[float, float]:
    """Calculate the extrusion ratios for a line of the given cross-section.

    The extruded line is modelled as a rectangle of ``line_width`` by
    ``layer_thickness``, scaled by the flow percentage. Dividing that volume
    by the cross-sectional area of the filament gives the length of filament
    pushed per millimeter of path.

    Args:
        line_width: Width of the extruded line in microns
        layer_thickness: Layer height in microns
        filament_diameter: Diameter of the filament on the spool in microns
        flow: Extrusion flow in percent

    Returns:
        Tuple of (mm³ per mm of path, mm of filament per mm of path).
        The filament ratio is 0.0 when the diameter is not positive.

    Examples:
        >>> volume, filament = calculate_extrusion(400, 200, 2850, 100.0)
        >>> round(volume, 3)
        0.08
        >>> round(filament, 5)
        0.01254
    """
    volume_per_mm = int2mm(line_width) * int2mm(layer_thickness) * flow / 100.0
    if filament_diameter <= 0:
        return volume_per_mm, 0.0
    radius = int2mm(filament_diameter) / 2.0
    filament_area = math.pi * radius * radius
    return volume_per_mm, volume_per_mm / filament_area


class PathConfig:
    """
    Configuration for one kind of move (perimeter, infill, support, ...).

    Defines the width and speed a line is printed at. The extrusion ratios
    are derived from line width, layer thickness, filament diameter and flow,
    and are recomputed whenever one of those four changes.

    Attributes:
        name: Display name, written as the ``;TYPE:`` comment
        spiralize: Whether the path is printed with continuously rising Z
        retraction_config: Retraction policy used when leaving this path
    """

    def __init__(
        self,
        retraction_config: Optional[RetractionConfig] = None,
        name: str = "",
        speed: float = 0.0,
        line_width: int = 0,
        layer_thickness: int = 0,
        filament_diameter: int = 0,
        flow: float = 100.0,
        spiralize: bool = False,
    ) -> None:
        self.retraction_config = retraction_config
        self.name = name
        self.spiralize = spiralize
        self._speed = speed
        self._line_width = line_width
        self._layer_thickness = layer_thickness
        self._filament_diameter = filament_diameter
        self._flow = flow
        self._extrusion_volume_per_mm = 0.0
        self._extrusion_per_mm = 0.0
        self._calculate_extrusion()

    @property
    def speed(self) -> float:
        """Movement speed in mm/s."""
        return self._speed

    @speed.setter
    def speed(self, value: float) -> None:
        self._speed = value

    @property
    def line_width(self) -> int:
        """Width of the extruded line in microns."""
        return self._line_width

    @line_width.setter
    def line_width(self, value: int) -> None:
        self._line_width = value
        self._calculate_extrusion()

    @property
    def layer_thickness(self) -> int:
        """Layer height in microns."""
        return self._layer_thickness

    @layer_thickness.setter
    def layer_thickness(self, value: int) -> None:
        self._layer_thickness = value
        self._calculate_extrusion()

    @property
    def filament_diameter(self) -> int:
        """Filament diameter in microns."""
        return self._filament_diameter

    @filament_diameter.setter
    def filament_diameter(self, value: int) -> None:
        self._filament_diameter = value
        self._calculate_extrusion()

    @property
    def flow(self) -> float:
        """Extrusion flow in percent."""
        return self._flow

    @flow.setter
    def flow(self, value: float) -> None:
        self._flow = value
        self._calculate_extrusion()

    @property
    def extrusion_volume_per_mm(self) -> float:
        """mm³ of material per mm of path."""
        return self._extrusion_volume_per_mm

    @property
    def extrusion_per_mm_filament(self) -> float:
        """mm of filament per mm of path."""
        return self._extrusion_per_mm

    def extrusion_per_mm(self, volumetric: bool) -> float:
        """
        Get the extrusion ratio in the unit the firmware expects.

        Volumetric flavors take E values in mm³; all others take mm of
        filament.

        Args:
            volumetric: True for volumetric E values

        Returns:
            mm³ per mm of path if volumetric, else mm of filament per mm
        """
        if volumetric:
            return self._extrusion_volume_per_mm
        return self._extrusion_per_mm

    def smooth_speed(self, min_speed: float, layer_nr: int, max_speed_layer: float) -> None:
        """
        Ramp the speed up over the first layers.

        At layer 0 the speed becomes ``min_speed``; from ``max_speed_layer``
        on it stays at the current speed; in between it is interpolated
        linearly. A ``max_speed_layer`` of 0 or less disables the ramp.

        Note:
            The interpolation starts from the current speed, so this must be
            called once per layer, in increasing layer order, on a config
            whose speed was reset to nominal. Repeated calls compound.
        """
        if layer_nr >= max_speed_layer:
            return
        self._speed = (self._speed * layer_nr) / max_speed_layer + (
            min_speed * (max_speed_layer - layer_nr) / max_speed_layer
        )

    def _calculate_extrusion(self) -> None:
        self._extrusion_volume_per_mm, self._extrusion_per_mm = calculate_extrusion(
            self._line_width, self._layer_thickness, self._filament_diameter, self._flow
        )

    def __repr__(self) -> str:
        return (
            f"PathConfig(name={self.name!r}, speed={self._speed}, "
            f"line_width={self._line_width}, layer_thickness={self._layer_thickness})"
        )
