"""Machine settings consumed by the G-code writer at setup.

``WriterSettings`` bundles everything the writer reads once before the first
move: flavor, nozzle offsets, extruder switch code and the retraction
parameters used for extruder switches and retraction limiting.

Settings come either from keyword arguments or from an already-parsed
slicer settings mapping (``WriterSettings.from_mapping``), using the slicer's
key names::

    settings = WriterSettings.from_mapping({
        "machine_gcode_flavor": "UltiGCode",
        "machine_nozzle_offset_x_1": 18.0,
        "retraction_count_max": 25,
    })
    writer.pre_setup(settings)
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Tuple, Union

from gcode_writer.flavors import Flavor
from gcode_writer.models.point import mm2int

logger = logging.getLogger(__name__)

# Highest number of extruders a writer can drive
MAX_EXTRUDERS = 16

# Extruder switch retraction and retraction limit defaults
DEFAULT_SWITCH_RETRACTION_AMOUNT = 16.0  # mm
DEFAULT_SWITCH_RETRACTION_SPEED = 20.0  # mm/s
DEFAULT_SWITCH_PRIME_SPEED = 20.0  # mm/s
DEFAULT_RETRACTION_EXTRUSION_WINDOW = 4.5  # mm
DEFAULT_RETRACTION_COUNT_MAX = 0  # limiting disabled


def check_extruder(extruder: int) -> None:
    """
    Validate an extruder index.

    Raises:
        ValueError: If the index is outside [0, MAX_EXTRUDERS)
    """
    if not 0 <= extruder < MAX_EXTRUDERS:
        raise ValueError(
            f"extruder must be between 0 and {MAX_EXTRUDERS - 1}, got {extruder}"
        )


@dataclass(frozen=True)
class WriterSettings:
    """Setup parameters of a G-code writer.

    Attributes:
        flavor: G-code flavor (enum member or flavor name)
        extruder_offsets: Nozzle XY offset per extruder in microns, indexed by extruder
        pre_switch_codes: G-code run before switching to each extruder
        post_switch_codes: G-code run after switching away from each extruder
        switch_retraction_amount: Retraction on extruder switch in mm
        switch_retraction_speed: Retraction speed on extruder switch in mm/s
        switch_prime_speed: Prime speed after an extruder switch in mm/s
        retraction_extrusion_window: Filament length in mm the retraction count applies to
        retraction_count_max: Maximum retractions within the window (0 disables limiting)
    """

    flavor: Union[Flavor, str] = Flavor.REPRAP
    extruder_offsets: Tuple[Tuple[int, int], ...] = ()
    pre_switch_codes: Tuple[str, ...] = ()
    post_switch_codes: Tuple[str, ...] = ()
    switch_retraction_amount: float = DEFAULT_SWITCH_RETRACTION_AMOUNT
    switch_retraction_speed: float = DEFAULT_SWITCH_RETRACTION_SPEED
    switch_prime_speed: float = DEFAULT_SWITCH_PRIME_SPEED
    retraction_extrusion_window: float = DEFAULT_RETRACTION_EXTRUSION_WINDOW
    retraction_count_max: int = DEFAULT_RETRACTION_COUNT_MAX

    def __post_init__(self) -> None:
        """Resolve the flavor and validate the remaining values."""
        object.__setattr__(self, "flavor", Flavor.parse(self.flavor))
        for name in ("extruder_offsets", "pre_switch_codes", "post_switch_codes"):
            count = len(getattr(self, name))
            if count > MAX_EXTRUDERS:
                raise ValueError(
                    f"{name} has {count} entries, at most {MAX_EXTRUDERS} extruders supported"
                )
        if self.switch_retraction_amount < 0:
            raise ValueError(
                f"switch_retraction_amount must be non-negative, "
                f"got {self.switch_retraction_amount}"
            )
        if self.switch_retraction_speed <= 0:
            raise ValueError(
                f"switch_retraction_speed must be positive, got {self.switch_retraction_speed}"
            )
        if self.switch_prime_speed <= 0:
            raise ValueError(
                f"switch_prime_speed must be positive, got {self.switch_prime_speed}"
            )
        if self.retraction_extrusion_window < 0:
            raise ValueError(
                f"retraction_extrusion_window must be non-negative, "
                f"got {self.retraction_extrusion_window}"
            )

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any]) -> "WriterSettings":
        """
        Build settings from a slicer settings mapping.

        Lengths in the mapping are millimeters and speeds mm/s. Nozzle
        offsets are converted to microns. Extruder 0 is the reference nozzle
        and has no offset keys.

        Args:
            settings: Mapping of slicer setting keys to already-parsed values

        Returns:
            WriterSettings with one offset and switch code entry per
            supported extruder

        Raises:
            ValueError: If ``machine_gcode_flavor`` is missing or unknown
        """
        if "machine_gcode_flavor" not in settings:
            raise ValueError("machine_gcode_flavor is required")

        offsets = [(0, 0)]
        for n in range(1, MAX_EXTRUDERS):
            offsets.append(
                (
                    mm2int(float(settings.get(f"machine_nozzle_offset_x_{n}", 0.0))),
                    mm2int(float(settings.get(f"machine_nozzle_offset_y_{n}", 0.0))),
                )
            )
        pre_codes = tuple(
            str(settings.get(f"machine_pre_extruder_switch_code_{n}", ""))
            for n in range(MAX_EXTRUDERS)
        )
        post_codes = tuple(
            str(settings.get(f"machine_post_extruder_switch_code_{n}", ""))
            for n in range(MAX_EXTRUDERS)
        )

        defaults = cls.__dataclass_fields__
        result = cls(
            flavor=settings["machine_gcode_flavor"],
            extruder_offsets=tuple(offsets),
            pre_switch_codes=pre_codes,
            post_switch_codes=post_codes,
            switch_retraction_amount=float(
                settings.get(
                    "machine_switch_extruder_retraction_amount",
                    defaults["switch_retraction_amount"].default,
                )
            ),
            switch_retraction_speed=float(
                settings.get(
                    "material_switch_extruder_retraction_speed",
                    defaults["switch_retraction_speed"].default,
                )
            ),
            switch_prime_speed=float(
                settings.get(
                    "material_switch_extruder_prime_speed",
                    defaults["switch_prime_speed"].default,
                )
            ),
            retraction_extrusion_window=float(
                settings.get(
                    "retraction_extrusion_window",
                    defaults["retraction_extrusion_window"].default,
                )
            ),
            retraction_count_max=int(
                settings.get("retraction_count_max", defaults["retraction_count_max"].default)
            ),
        )
        logger.debug("Loaded writer settings for flavor %s", result.flavor.name)
        return result
