"""Retraction and coasting policy parameters."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RetractionConfig:
    """Parameters of one retraction policy.

    Attributes:
        amount: Filament retracted, in mm (mm³ for volumetric flavors)
        speed: Retraction speed in mm/s
        prime_speed: Speed of the un-retract in mm/s
        prime_amount: Extra material pushed on un-retract, in mm
        z_hop: Height the head is lifted during retracted travel, in microns
    """

    amount: float
    speed: float
    prime_speed: float
    prime_amount: float = 0.0
    z_hop: int = 0

    def __post_init__(self) -> None:
        """Validate that all values are non-negative."""
        if self.amount < 0:
            raise ValueError(f"amount must be non-negative, got {self.amount}")
        if self.speed < 0:
            raise ValueError(f"speed must be non-negative, got {self.speed}")
        if self.prime_speed < 0:
            raise ValueError(f"prime_speed must be non-negative, got {self.prime_speed}")
        if self.prime_amount < 0:
            raise ValueError(f"prime_amount must be non-negative, got {self.prime_amount}")
        if self.z_hop < 0:
            raise ValueError(f"z_hop must be non-negative, got {self.z_hop}")


@dataclass(frozen=True)
class CoastingConfig:
    """Coasting thresholds.

    Coasting ends a path without extrusion for its last stretch so built-up
    pressure bleeds off. Whether and where to coast is decided by the path
    planner; this only carries the parameters.

    Attributes:
        enable: Whether coasting is used at all
        volume_move: Volume coasted before a travel move, in mm³
        speed_move: Coasting speed before a travel move, as a fraction of the path speed
        min_volume_move: Minimum extruded volume of a path for coasting before a move, in mm³
        volume_retract: Volume coasted before a retraction, in mm³
        speed_retract: Coasting speed before a retraction, as a fraction of the path speed
        min_volume_retract: Minimum extruded volume of a path for coasting before a retraction, in mm³
    """

    enable: bool = False
    volume_move: float = 0.0
    speed_move: float = 0.0
    min_volume_move: float = 0.0
    volume_retract: float = 0.0
    speed_retract: float = 0.0
    min_volume_retract: float = 0.0

    def __post_init__(self) -> None:
        """Validate volumes and their minimums."""
        for name in (
            "volume_move",
            "speed_move",
            "min_volume_move",
            "volume_retract",
            "speed_retract",
            "min_volume_retract",
        ):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")
        if self.min_volume_move < self.volume_move:
            raise ValueError(
                f"min_volume_move must be at least volume_move, "
                f"got {self.min_volume_move} < {self.volume_move}"
            )
        if self.min_volume_retract < self.volume_retract:
            raise ValueError(
                f"min_volume_retract must be at least volume_retract, "
                f"got {self.min_volume_retract} < {self.volume_retract}"
            )
