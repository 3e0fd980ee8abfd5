"""Integer micron coordinates and unit conversion helpers."""

import math
from dataclasses import dataclass
from typing import Tuple

# Internal coordinates are integer microns
MICRONS_PER_MM = 1000

# G-code feed rates are per minute, Python speeds are per second
SECONDS_PER_MINUTE = 60.0


def int2mm(value: int) -> float:
    """Convert integer microns to millimeters."""
    return value / MICRONS_PER_MM


def mm2int(value: float) -> int:
    """Convert millimeters to integer microns (rounded to nearest)."""
    return int(round(value * MICRONS_PER_MM))


@dataclass(frozen=True)
class Point3:
    """Tool-head position in integer microns.

    Attributes:
        x: X coordinate in microns
        y: Y coordinate in microns
        z: Z coordinate in microns
    """

    x: int
    y: int
    z: int

    def __sub__(self, other: "Point3") -> "Point3":
        return Point3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __add__(self, other: "Point3") -> "Point3":
        return Point3(self.x + other.x, self.y + other.y, self.z + other.z)

    def vsize_mm(self) -> float:
        """Euclidean length of this vector in millimeters."""
        return math.sqrt(
            int2mm(self.x) ** 2 + int2mm(self.y) ** 2 + int2mm(self.z) ** 2
        )

    def xy(self) -> Tuple[int, int]:
        """The XY part of this point."""
        return (self.x, self.y)

    def to_mm(self) -> Tuple[float, float, float]:
        """This point converted to millimeters."""
        return (int2mm(self.x), int2mm(self.y), int2mm(self.z))
