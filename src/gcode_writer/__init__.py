"""G-code export for 3D printers: moves, retraction and extruder state."""

from .flavors import Flavor
from .models import CoastingConfig, PathConfig, Point3, RetractionConfig
from .settings import WriterSettings
from .time_estimate import TimeEstimateCalculator
from .writer import GCodeWriter, PrintSummary

__all__ = [
    "GCodeWriter",
    "PrintSummary",
    "PathConfig",
    "RetractionConfig",
    "CoastingConfig",
    "Point3",
    "Flavor",
    "WriterSettings",
    "TimeEstimateCalculator",
]
