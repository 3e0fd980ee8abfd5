"""Print time estimation.

A port of the Marlin firmware motion planner: every move becomes a block
with a trapezoidal speed profile (accelerate, cruise, decelerate). Junction
speeds between blocks are limited by jerk, then a reverse and a forward pass
make every block reachable from its neighbours before the time of each
trapezoid is summed.

Positions are (x, y, z, e) in millimeters, feed rates in mm/s.
"""

import math
from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np

NUM_AXIS = 4
X_AXIS, Y_AXIS, Z_AXIS, E_AXIS = range(NUM_AXIS)

# Lowest speed a block is planned to end at (mm/s)
MINIMUM_PLANNER_SPEED = 0.05

# Machine limits, per axis (x, y, z, e)
MAX_FEEDRATE = np.array([600.0, 600.0, 40.0, 25.0])  # mm/s
MAX_ACCELERATION = np.array([9000.0, 9000.0, 100.0, 10000.0])  # mm/s²
MINIMUM_FEEDRATE = 0.01  # mm/s
ACCELERATION = 3000.0  # mm/s²
MAX_XY_JERK = 20.0  # mm/s
MAX_Z_JERK = 0.4  # mm/s
MAX_E_JERK = 5.0  # mm/s


@dataclass
class Block:
    """One planned move with its trapezoid parameters (distances in mm)."""

    distance: float
    nominal_feedrate: float
    acceleration: float
    entry_speed: float = 0.0
    max_entry_speed: float = 0.0
    nominal_length_flag: bool = False
    recalculate_flag: bool = True
    initial_feedrate: float = 0.0
    final_feedrate: float = 0.0
    accelerate_until: float = 0.0
    decelerate_after: float = 0.0
    delta: np.ndarray = field(default_factory=lambda: np.zeros(NUM_AXIS))


def max_allowable_speed(acceleration: float, target_velocity: float, distance: float) -> float:
    """Highest speed from which ``target_velocity`` is reachable within ``distance``.

    ``acceleration`` is negative for deceleration.
    """
    return math.sqrt(max(0.0, target_velocity * target_velocity - 2 * acceleration * distance))


def estimate_acceleration_distance(
    initial_rate: float, target_rate: float, acceleration: float
) -> float:
    """Distance needed to go from ``initial_rate`` to ``target_rate``."""
    if acceleration == 0:
        return 0.0
    return (target_rate * target_rate - initial_rate * initial_rate) / (2.0 * acceleration)


def intersection_distance(
    initial_rate: float, final_rate: float, acceleration: float, distance: float
) -> float:
    """Point at which to start braking when there is no room to cruise."""
    if acceleration == 0:
        return 0.0
    return (
        2.0 * acceleration * distance - initial_rate * initial_rate + final_rate * final_rate
    ) / (4.0 * acceleration)


def acceleration_time_from_distance(
    initial_feedrate: float, distance: float, acceleration: float
) -> float:
    """Time needed to cover ``distance`` accelerating from ``initial_feedrate``."""
    discriminant = math.sqrt(
        max(0.0, initial_feedrate * initial_feedrate + 2 * acceleration * distance)
    )
    return (-initial_feedrate + discriminant) / acceleration


def calculate_trapezoid_for_block(block: Block, entry_factor: float, exit_factor: float) -> None:
    """
    Set the trapezoid of ``block`` for the given entry and exit speeds.

    Args:
        block: Block to update in place
        entry_factor: Entry speed as a fraction of the nominal feed rate
        exit_factor: Exit speed as a fraction of the nominal feed rate
    """
    initial_feedrate = block.nominal_feedrate * entry_factor
    final_feedrate = block.nominal_feedrate * exit_factor

    acceleration = block.acceleration
    accelerate_distance = estimate_acceleration_distance(
        initial_feedrate, block.nominal_feedrate, acceleration
    )
    decelerate_distance = estimate_acceleration_distance(
        block.nominal_feedrate, final_feedrate, -acceleration
    )

    plateau_distance = block.distance - accelerate_distance - decelerate_distance

    # No room to reach the nominal rate: accelerate then brake immediately
    if plateau_distance < 0:
        accelerate_distance = intersection_distance(
            initial_feedrate, final_feedrate, acceleration, block.distance
        )
        accelerate_distance = min(max(accelerate_distance, 0.0), block.distance)
        plateau_distance = 0.0

    block.accelerate_until = accelerate_distance
    block.decelerate_after = accelerate_distance + plateau_distance
    block.initial_feedrate = initial_feedrate
    block.final_feedrate = final_feedrate


class TimeEstimateCalculator:
    """
    Accumulate planned moves and estimate how long the firmware takes to
    execute them.

    Example:
        >>> estimator = TimeEstimateCalculator()
        >>> estimator.plan((10.0, 0.0, 0.0, 0.0), 100.0)
        >>> estimator.calculate() > 0.1
        True
    """

    def __init__(self) -> None:
        self._current_position = np.zeros(NUM_AXIS)
        self._blocks: List[Block] = []
        self._extra_time = 0.0
        self._previous_feedrate = np.zeros(NUM_AXIS)
        self._previous_nominal_feedrate = 0.0

    def set_position(self, position: Sequence[float]) -> None:
        """Set the current position without planning a move."""
        self._current_position = np.asarray(position, dtype=float)

    def add_time(self, seconds: float) -> None:
        """Add a fixed amount of time, e.g. for a dwell."""
        self._extra_time += seconds

    def reset(self) -> None:
        """Drop all planned blocks and extra time. The position is kept."""
        self._extra_time = 0.0
        self._blocks.clear()

    def __len__(self) -> int:
        return len(self._blocks)

    def plan(self, position: Sequence[float], feedrate: float) -> None:
        """
        Plan a move from the current position to ``position``.

        Args:
            position: Target (x, y, z, e) in mm
            feedrate: Requested speed in mm/s
        """
        new_position = np.asarray(position, dtype=float)
        delta = new_position - self._current_position
        abs_delta = np.abs(delta)
        if abs_delta.max() <= 0:
            return

        feedrate = max(feedrate, MINIMUM_FEEDRATE)
        distance = float(np.linalg.norm(abs_delta[:3]))
        if distance == 0.0:
            # Extruder-only move
            distance = float(abs_delta[E_AXIS])

        block = Block(distance=distance, nominal_feedrate=feedrate, acceleration=ACCELERATION)
        block.delta = delta

        current_feedrate = delta * feedrate / distance
        current_abs_feedrate = np.abs(current_feedrate)
        over = current_abs_feedrate > MAX_FEEDRATE
        if over.any():
            feedrate_factor = float(np.min(MAX_FEEDRATE[over] / current_abs_feedrate[over]))
            current_feedrate = current_feedrate * feedrate_factor
            current_abs_feedrate = current_abs_feedrate * feedrate_factor
            block.nominal_feedrate *= feedrate_factor

        for axis in range(NUM_AXIS):
            if block.acceleration * (abs_delta[axis] / distance) > MAX_ACCELERATION[axis]:
                block.acceleration = float(MAX_ACCELERATION[axis])

        vmax_junction = MAX_XY_JERK / 2
        if current_abs_feedrate[Z_AXIS] > MAX_Z_JERK / 2:
            vmax_junction = min(vmax_junction, MAX_Z_JERK / 2)
        if current_abs_feedrate[E_AXIS] > MAX_E_JERK / 2:
            vmax_junction = min(vmax_junction, MAX_E_JERK / 2)
        vmax_junction = min(vmax_junction, block.nominal_feedrate)
        safe_speed = vmax_junction

        if self._blocks and self._previous_nominal_feedrate > 0.0001:
            jerk = current_feedrate - self._previous_feedrate
            xy_jerk = math.hypot(jerk[X_AXIS], jerk[Y_AXIS])
            vmax_junction = block.nominal_feedrate
            vmax_junction_factor = 1.0
            if xy_jerk > MAX_XY_JERK:
                vmax_junction_factor = MAX_XY_JERK / xy_jerk
            if abs(jerk[Z_AXIS]) > MAX_Z_JERK:
                vmax_junction_factor = min(vmax_junction_factor, MAX_Z_JERK / abs(jerk[Z_AXIS]))
            if abs(jerk[E_AXIS]) > MAX_E_JERK:
                vmax_junction_factor = min(vmax_junction_factor, MAX_E_JERK / abs(jerk[E_AXIS]))
            vmax_junction = min(
                self._previous_nominal_feedrate, vmax_junction * vmax_junction_factor
            )

        block.max_entry_speed = vmax_junction

        v_allowable = max_allowable_speed(
            -block.acceleration, MINIMUM_PLANNER_SPEED, block.distance
        )
        block.entry_speed = min(vmax_junction, v_allowable)
        block.nominal_length_flag = block.nominal_feedrate <= v_allowable
        block.recalculate_flag = True

        self._previous_feedrate = current_feedrate
        self._previous_nominal_feedrate = block.nominal_feedrate
        self._current_position = new_position

        calculate_trapezoid_for_block(
            block,
            block.entry_speed / block.nominal_feedrate,
            safe_speed / block.nominal_feedrate,
        )
        self._blocks.append(block)

    def calculate(self) -> float:
        """
        Estimate the total time of all planned blocks.

        Returns:
            Time in seconds, including time added with ``add_time``
        """
        self._reverse_pass()
        self._forward_pass()
        self._recalculate_trapezoids()

        total_time = 0.0
        for block in self._blocks:
            plateau_distance = block.decelerate_after - block.accelerate_until
            total_time += acceleration_time_from_distance(
                block.initial_feedrate, block.accelerate_until, block.acceleration
            )
            total_time += plateau_distance / block.nominal_feedrate
            total_time += acceleration_time_from_distance(
                block.final_feedrate, block.distance - block.decelerate_after, block.acceleration
            )
        return total_time + self._extra_time

    def _reverse_pass(self) -> None:
        # The first block keeps its entry speed: the machine starts from rest
        for i in range(len(self._blocks) - 2, 0, -1):
            current = self._blocks[i]
            following = self._blocks[i + 1]
            if current.entry_speed == current.max_entry_speed:
                continue
            if (not current.nominal_length_flag) and (
                current.max_entry_speed > following.entry_speed
            ):
                current.entry_speed = min(
                    current.max_entry_speed,
                    max_allowable_speed(
                        -current.acceleration, following.entry_speed, current.distance
                    ),
                )
            else:
                current.entry_speed = current.max_entry_speed
            current.recalculate_flag = True

    def _forward_pass(self) -> None:
        for previous, current in zip(self._blocks, self._blocks[1:]):
            if previous.nominal_length_flag:
                continue
            if previous.entry_speed < current.entry_speed:
                entry_speed = min(
                    current.entry_speed,
                    max_allowable_speed(
                        -previous.acceleration, previous.entry_speed, previous.distance
                    ),
                )
                if current.entry_speed != entry_speed:
                    current.entry_speed = entry_speed
                    current.recalculate_flag = True

    def _recalculate_trapezoids(self) -> None:
        for current, following in zip(self._blocks, self._blocks[1:]):
            if current.recalculate_flag or following.recalculate_flag:
                calculate_trapezoid_for_block(
                    current,
                    current.entry_speed / current.nominal_feedrate,
                    following.entry_speed / current.nominal_feedrate,
                )
                current.recalculate_flag = False
        if self._blocks:
            last = self._blocks[-1]
            calculate_trapezoid_for_block(
                last,
                last.entry_speed / last.nominal_feedrate,
                MINIMUM_PLANNER_SPEED / last.nominal_feedrate,
            )
            last.recalculate_flag = False
