"""Core data models for G-code export.

This package contains the path, retraction and coasting configurations and
the integer micron point type.
"""

from gcode_writer.models.path_config import PathConfig, calculate_extrusion
from gcode_writer.models.point import (
    MICRONS_PER_MM,
    SECONDS_PER_MINUTE,
    Point3,
    int2mm,
    mm2int,
)
from gcode_writer.models.retraction import CoastingConfig, RetractionConfig

__all__ = [
    "PathConfig",
    "RetractionConfig",
    "CoastingConfig",
    "Point3",
    "calculate_extrusion",
    "int2mm",
    "mm2int",
    "MICRONS_PER_MM",
    "SECONDS_PER_MINUTE",
]
