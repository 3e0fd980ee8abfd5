"""Retraction frequency limiting."""

from collections import deque
from typing import List


class RetractionLimiter:
    """
    Sliding window of the extrusion amount at the most recent retractions.

    Retracting over the same piece of filament again and again grinds it
    down. The limiter keeps the cumulative extrusion amount recorded at the
    last ``count_max`` retractions and refuses a new one while fewer than
    ``extrusion_window`` units of filament have been extruded since the
    oldest of them. At most ``count_max`` retractions therefore happen within
    any ``extrusion_window`` of filament.
    """

    def __init__(self, count_max: int = 0, extrusion_window: float = 0.0) -> None:
        """
        Initialize the limiter.

        Args:
            count_max: Maximum retractions within the window. Zero or less
                disables limiting.
            extrusion_window: Filament length (mm, or mm³ for volumetric
                flavors) the count applies to

        Raises:
            ValueError: If extrusion_window is negative
        """
        if extrusion_window < 0:
            raise ValueError(f"extrusion_window must be non-negative, got {extrusion_window}")

        self._count_max = count_max
        self._extrusion_window = extrusion_window
        self._snapshots: deque[float] = deque(maxlen=max(count_max, 1))

    @property
    def count_max(self) -> int:
        """Get the configured retraction count ceiling."""
        return self._count_max

    @property
    def extrusion_window(self) -> float:
        """Get the configured extrusion window."""
        return self._extrusion_window

    def allows(self, extrusion_amount: float) -> bool:
        """
        Check whether a retraction at ``extrusion_amount`` is allowed.

        Args:
            extrusion_amount: Current cumulative extrusion amount

        Returns:
            False if the window is full and its oldest retraction happened
            less than ``extrusion_window`` ago
        """
        if self._count_max <= 0:
            return True
        if len(self._snapshots) < self._count_max:
            return True
        return extrusion_amount >= self._snapshots[0] + self._extrusion_window

    def record(self, extrusion_amount: float) -> None:
        """
        Record an accepted retraction.

        If the window is at capacity, the oldest snapshot is dropped.
        """
        if self._count_max <= 0:
            return
        self._snapshots.append(extrusion_amount)

    def shift(self, amount: float) -> None:
        """
        Move every snapshot down by ``amount``.

        Used when the extrusion counter is reset so the snapshots stay
        relative to the new zero.
        """
        for i in range(len(self._snapshots)):
            self._snapshots[i] -= amount

    def snapshots(self) -> List[float]:
        """Get the recorded snapshots, oldest first."""
        return list(self._snapshots)

    def __len__(self) -> int:
        return len(self._snapshots)

    def clear(self) -> None:
        """Forget all recorded retractions."""
        self._snapshots.clear()
