"""Stateful G-code writer.

``GCodeWriter`` is the only class that knows what G-code looks like. It
turns planned moves into G-code lines and tracks the machine state those
lines imply: position, extruder position, retraction and z-hop status,
active extruder, temperatures and fan speed. Flavor differences are
delegated to the active ``Dialect``.

Units:
    Positions are integer microns, speeds mm/s, extrusion amounts mm of
    filament (mm³ for volumetric flavors). Speeds become ``F`` words in
    mm/min only when a line is written.

Example:
    >>> import io
    >>> out = io.StringIO()
    >>> writer = GCodeWriter(out)
    >>> writer.set_z(200)
    >>> writer.write_move((10000, 10000), 150.0, 0.0)
    >>> out.getvalue()
    'G0 F9000 X10.000 Y10.000 Z0.200\\n'
"""

import logging
import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO, Tuple, Union

from gcode_writer.flavors import BFB_MM_PER_RPM, Flavor, get_dialect
from gcode_writer.models.path_config import PathConfig
from gcode_writer.models.point import Point3, int2mm, mm2int
from gcode_writer.models.retraction import RetractionConfig
from gcode_writer.retraction_limiter import RetractionLimiter
from gcode_writer.settings import (
    DEFAULT_RETRACTION_COUNT_MAX,
    DEFAULT_RETRACTION_EXTRUSION_WINDOW,
    DEFAULT_SWITCH_PRIME_SPEED,
    DEFAULT_SWITCH_RETRACTION_AMOUNT,
    DEFAULT_SWITCH_RETRACTION_SPEED,
    MAX_EXTRUDERS,
    WriterSettings,
    check_extruder,
)
from gcode_writer.time_estimate import TimeEstimateCalculator

logger = logging.getLogger(__name__)

# Extrusion ratios at or below this are travel moves
EXTRUSION_EPSILON = 0.000001

# Zero the E axis above this amount; firmware loses precision on long prints
MAX_EXTRUSION_BEFORE_RESET = 10000.0

# Position the head is assumed to start at
INITIAL_POSITION = Point3(0, 0, mm2int(20.0))

Target = Union[Point3, Tuple[int, int]]


@dataclass(frozen=True)
class PrintSummary:
    """Totals reported when a G-code stream is finalized.

    Attributes:
        print_time: Estimated print time in seconds
        filament_used: Extrusion amount per extruder, indexed by extruder
    """

    print_time: float
    filament_used: Tuple[float, ...]


class GCodeWriter:
    """
    Write G-code for a sequence of planned moves.

    Configure the writer once (flavor, nozzle offsets, switch code,
    retraction settings), then feed it moves, retractions, extruder
    switches and temperature/fan commands, and call ``finalize`` at the end.

    The writer is single-threaded: calls must come from one producer, in
    print order. It can be used as a context manager, which closes an output
    file opened with ``open_output`` on every exit path.
    """

    def __init__(
        self, stream: Optional[TextIO] = None, flavor: Union[Flavor, str] = Flavor.REPRAP
    ) -> None:
        """
        Initialize the writer.

        Args:
            stream: Text sink for the G-code (default: stdout)
            flavor: G-code flavor (default: RepRap)

        Raises:
            ValueError: If the flavor is unknown
        """
        self._stream: TextIO = stream if stream is not None else sys.stdout
        self._owns_stream = False
        self._dialect = get_dialect(flavor)

        self._current_position = INITIAL_POSITION
        self._start_position: Optional[Point3] = None
        self._z = 0
        self._current_speed: Optional[float] = None
        self._extrusion_amount = 0.0
        # E value at which the active extruder took over an axis that was not reset
        self._extrusion_baseline = 0.0
        self._last_coasted_amount = 0.0

        self._retracted = False
        self._retracted_amount = 0.0
        self._prime_speed = 1.0
        self._prime_amount = 0.0
        self._z_hopped = False
        self._z_hop = 0
        self._last_retraction_config: Optional[RetractionConfig] = None
        self._bfb_rpm: Optional[int] = None

        self._extruder = 0
        self._extruder_offsets: List[Tuple[int, int]] = [(0, 0)] * MAX_EXTRUDERS
        self._pre_switch_codes: List[str] = [""] * MAX_EXTRUDERS
        self._post_switch_codes: List[str] = [""] * MAX_EXTRUDERS
        self._temperatures: List[Optional[float]] = [None] * MAX_EXTRUDERS
        self._bed_temperature: Optional[float] = None
        self._fan_speed: Optional[float] = None

        self._switch_retraction_amount = DEFAULT_SWITCH_RETRACTION_AMOUNT
        self._switch_retraction_speed = DEFAULT_SWITCH_RETRACTION_SPEED
        self._switch_prime_speed = DEFAULT_SWITCH_PRIME_SPEED
        self._limiter = RetractionLimiter(
            DEFAULT_RETRACTION_COUNT_MAX, DEFAULT_RETRACTION_EXTRUSION_WINDOW
        )

        self._total_filament = [0.0] * MAX_EXTRUDERS
        self._total_print_time = 0.0
        self._estimator = TimeEstimateCalculator()
        self._estimator.set_position((*self._current_position.to_mm(), 0.0))

    def __enter__(self) -> "GCodeWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Output sink
    # ------------------------------------------------------------------

    def set_output_stream(self, stream: TextIO) -> None:
        """Write to ``stream``. A file previously opened by the writer is closed."""
        self.close()
        self._stream = stream
        self._owns_stream = False

    def open_output(self, path: str) -> None:
        """
        Open ``path`` for writing and make the writer own it.

        The file is closed by ``close``, ``finalize`` or leaving the
        writer's ``with`` block.

        Raises:
            OSError: If the file cannot be opened
        """
        self.close()
        # newline="" keeps the flavor's line terminator byte-for-byte
        self._stream = open(path, "w", encoding="utf-8", newline="")
        self._owns_stream = True

    def close(self) -> None:
        """Flush the sink, closing it if the writer opened it."""
        if getattr(self._stream, "closed", False):
            return
        if self._owns_stream:
            self._stream.close()
            self._owns_stream = False
        else:
            self._stream.flush()

    def _write(self, line: str) -> None:
        self._stream.write(line + self._dialect.newline)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_flavor(self, flavor: Union[Flavor, str]) -> None:
        """
        Select the G-code flavor.

        Raises:
            ValueError: If the flavor is unknown
        """
        self._dialect = get_dialect(flavor)
        logger.debug("G-code flavor set to %s", self._dialect.flavor.name)

    def get_flavor(self) -> Flavor:
        return self._dialect.flavor

    def is_volumetric(self) -> bool:
        """Whether E values are written in mm³."""
        return self._dialect.volumetric

    def set_extruder_offset(self, extruder: int, offset: Tuple[int, int]) -> None:
        """Set the nozzle XY offset of ``extruder`` in microns."""
        check_extruder(extruder)
        self._extruder_offsets[extruder] = (int(offset[0]), int(offset[1]))

    def get_extruder_offset(self, extruder: int) -> Tuple[int, int]:
        check_extruder(extruder)
        return self._extruder_offsets[extruder]

    def set_switch_extruder_code(self, extruder: int, pre_code: str, post_code: str) -> None:
        """
        Set the G-code run around an extruder switch.

        Args:
            extruder: Extruder index
            pre_code: Written before switching to this extruder
            post_code: Written after switching away from this extruder
        """
        check_extruder(extruder)
        self._pre_switch_codes[extruder] = pre_code
        self._post_switch_codes[extruder] = post_code

    def set_retraction_settings(
        self,
        switch_retraction_amount: float,
        switch_retraction_speed: float,
        switch_prime_speed: float,
        retraction_extrusion_window: float,
        retraction_count_max: int,
    ) -> None:
        """
        Set the extruder switch retraction and the retraction limiter.

        Args:
            switch_retraction_amount: Retraction on extruder switch in mm
            switch_retraction_speed: Retraction speed on extruder switch in mm/s
            switch_prime_speed: Prime speed after an extruder switch in mm/s
            retraction_extrusion_window: Filament length the count applies to
            retraction_count_max: Maximum retractions within the window,
                zero or less to disable limiting
        """
        self._switch_retraction_amount = switch_retraction_amount
        self._switch_retraction_speed = switch_retraction_speed
        self._switch_prime_speed = switch_prime_speed
        self._limiter = RetractionLimiter(retraction_count_max, retraction_extrusion_window)
        logger.debug(
            "Retraction limit: %d retractions per %.3f extruded",
            retraction_count_max,
            retraction_extrusion_window,
        )

    def pre_setup(self, settings: WriterSettings) -> None:
        """Apply a ``WriterSettings`` bundle before the first move."""
        for extruder, offset in enumerate(settings.extruder_offsets):
            self.set_extruder_offset(extruder, offset)
        pre_codes = list(settings.pre_switch_codes) + [""] * MAX_EXTRUDERS
        post_codes = list(settings.post_switch_codes) + [""] * MAX_EXTRUDERS
        for extruder in range(MAX_EXTRUDERS):
            self.set_switch_extruder_code(extruder, pre_codes[extruder], post_codes[extruder])
        self.set_flavor(settings.flavor)
        self.set_retraction_settings(
            settings.switch_retraction_amount,
            settings.switch_retraction_speed,
            settings.switch_prime_speed,
            settings.retraction_extrusion_window,
            settings.retraction_count_max,
        )

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    def set_z(self, z: int) -> None:
        """Set the Z (microns) used by the following 2-D moves."""
        self._z = z

    def set_last_coasted_amount(self, amount: float) -> None:
        """Material coasted at the end of the last path, primed before the next extrusion."""
        self._last_coasted_amount = amount

    def get_position(self) -> Point3:
        return self._current_position

    def get_position_xy(self) -> Tuple[int, int]:
        return self._current_position.xy()

    def get_position_z(self) -> int:
        return self._current_position.z

    def reset_start_position(self) -> None:
        """Forget where the current path started."""
        self._start_position = None

    def get_start_position_xy(self) -> Optional[Tuple[int, int]]:
        """XY of the last move end, or None after ``reset_start_position``."""
        if self._start_position is None:
            return None
        return self._start_position.xy()

    def get_extruder_nr(self) -> int:
        return self._extruder

    def get_temperature(self, extruder: int) -> Optional[float]:
        check_extruder(extruder)
        return self._temperatures[extruder]

    @property
    def bed_temperature(self) -> Optional[float]:
        return self._bed_temperature

    @property
    def fan_speed(self) -> Optional[float]:
        """Last fan speed written, in percent."""
        return self._fan_speed

    @property
    def current_speed(self) -> Optional[float]:
        return self._current_speed

    @property
    def extrusion_amount(self) -> float:
        """Absolute E value of the active extruder since the last reset."""
        return self._extrusion_amount

    @property
    def is_retracted(self) -> bool:
        return self._retracted

    @property
    def is_z_hopped(self) -> bool:
        return self._z_hopped

    @property
    def retraction_limiter(self) -> RetractionLimiter:
        return self._limiter

    def get_total_filament_used(self, extruder: int) -> float:
        """Total extrusion amount of ``extruder`` so far."""
        check_extruder(extruder)
        if extruder == self._extruder:
            unbooked = self._extrusion_amount - self._extrusion_baseline
            return self._total_filament[extruder] + unbooked
        return self._total_filament[extruder]

    def get_total_print_time(self) -> float:
        """Print time in seconds, as of the last ``update_total_print_time``."""
        return self._total_print_time

    def update_total_print_time(self) -> None:
        """Fold the moves planned so far into the total print time."""
        self._total_print_time += self._estimator.calculate()
        self._estimator.reset()

    def reset_total_print_time(self) -> None:
        self._total_print_time = 0.0

    # ------------------------------------------------------------------
    # Plain output
    # ------------------------------------------------------------------

    def write_comment(self, comment: str) -> None:
        self._write(f";{comment}")

    def write_type_comment(self, type_name: str) -> None:
        self._write(f";TYPE:{type_name}")

    def write_layer_comment(self, layer_nr: int) -> None:
        self._write(f";LAYER:{layer_nr}")

    def write_line(self, line: str) -> None:
        self._write(line)

    def write_code(self, code: str) -> None:
        """Write a block of user G-code, one line at a time. Empty code writes nothing."""
        for line in code.splitlines():
            self._write(line)

    def write_delay(self, seconds: float) -> None:
        """Dwell for ``seconds``."""
        self._write(self._dialect.delay(seconds))
        self._estimator.add_time(seconds)

    def reset_extrusion_value(self) -> None:
        """
        Zero the E axis of the active extruder.

        The current amount is added to the extruder's total. While retracted,
        the axis is set to minus the retracted amount so the next prime
        still restores it. Nothing is written when the axis is already at
        zero, or for flavors without G92.
        """
        if not self._dialect.supports_extrusion_reset:
            return
        if self._extrusion_amount == 0 and not self._retracted:
            return
        axis = self._dialect.extruder_axis(self._extruder)
        value = -self._retracted_amount if self._retracted else 0.0
        self._write(self._dialect.reset_extrusion(axis, value))
        self._book_extrusion()
        self._limiter.shift(self._extrusion_amount)
        self._extrusion_amount = 0.0
        self._extrusion_baseline = 0.0
        self._estimator.set_position(self._estimate_position())

    def _book_extrusion(self) -> None:
        """Add the extrusion since the last booking to the active extruder's total."""
        self._total_filament[self._extruder] += self._extrusion_amount - self._extrusion_baseline
        self._extrusion_baseline = self._extrusion_amount

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------

    def write_path_move(self, target: Target, config: PathConfig) -> None:
        """Move to ``target`` at the speed and extrusion ratio of ``config``."""
        self.write_move(target, config.speed, config.extrusion_per_mm(self._dialect.volumetric))

    def write_move(self, target: Target, speed: float, extrusion_per_mm: float) -> None:
        """
        Move the head to ``target``, extruding if ``extrusion_per_mm`` > 0.

        A retracted extruder is primed, and a z-hop undone, before the first
        extruding line. Moves to the current position write nothing.

        Args:
            target: ``Point3``, or (x, y) in microns at the Z given to ``set_z``
            speed: Speed in mm/s
            extrusion_per_mm: Extrusion per mm of path, in the flavor's E unit

        Raises:
            OSError: If the sink cannot be written
        """
        if isinstance(target, Point3):
            point = target
        else:
            point = Point3(int(target[0]), int(target[1]), self._z)
        if point == self._current_position:
            return

        if self._dialect.auto_retraction:
            self._write_rpm_move(point, speed, extrusion_per_mm)
        else:
            self._write_extrusion_move(point, speed, extrusion_per_mm)

        self._current_position = point
        self._start_position = point
        self._plan(speed)

    def _write_extrusion_move(self, point: Point3, speed: float, extrusion_per_mm: float) -> None:
        dialect = self._dialect
        extruding = extrusion_per_mm > EXTRUSION_EPSILON
        if extruding:
            if self._z_hopped:
                self._restore_z()
            self._prime()
            distance = (point - self._current_position).vsize_mm()
            self._extrusion_amount += extrusion_per_mm * distance

        z = None
        if point.z != self._current_position.z:
            z = int2mm(point.z + (self._z_hop if self._z_hopped else 0))
        new_speed = None if speed == self._current_speed else speed
        self._current_speed = speed

        offset_x, offset_y = self._extruder_offsets[self._extruder]
        self._write(
            dialect.move(
                extruding,
                new_speed,
                int2mm(point.x + offset_x),
                int2mm(point.y + offset_y),
                z,
                dialect.extruder_axis(self._extruder),
                self._extrusion_amount if extruding else None,
            )
        )

    def _write_rpm_move(self, point: Point3, speed: float, extrusion_per_mm: float) -> None:
        dialect = self._dialect
        feedrate = speed * 60
        rpm = extrusion_per_mm * speed * 60 / BFB_MM_PER_RPM
        if rpm > 0:
            if self._retracted:
                if self._bfb_rpm != int(rpm * 10):
                    self._write(dialect.set_rpm(rpm))
                    self._bfb_rpm = int(rpm * 10)
                self._write(dialect.extruder_on(self._extruder))
                self._retracted = False
            # The RPM is rounded by the firmware; correct the feed rate instead
            rounded_rpm = round(rpm * 100) / 100
            if rounded_rpm > 0:
                feedrate *= rpm / rounded_rpm
            distance = (point - self._current_position).vsize_mm()
            self._extrusion_amount += extrusion_per_mm * distance
        elif not self._retracted:
            self._write(dialect.extruder_off())
            self._retracted = True

        offset_x, offset_y = self._extruder_offsets[self._extruder]
        self._write(
            dialect.rpm_move(
                int2mm(point.x + offset_x), int2mm(point.y + offset_y), int2mm(point.z), feedrate
            )
        )
        self._current_speed = speed

    def _restore_z(self) -> None:
        self._write(self._dialect.z_move(int2mm(self._current_position.z)))
        self._z_hopped = False
        self._z_hop = 0
        self._plan(self._current_speed or self._prime_speed)

    def _prime(self) -> None:
        dialect = self._dialect
        axis = dialect.extruder_axis(self._extruder)
        coasted = self._last_coasted_amount
        self._last_coasted_amount = 0.0
        if self._retracted:
            extra = self._prime_amount + coasted
            self._extrusion_amount += extra
            for line in dialect.unretract(self._prime_speed, axis, self._extrusion_amount, extra):
                self._write(line)
            if not dialect.firmware_retraction or extra > 0:
                self._current_speed = self._prime_speed
            self._retracted = False
            self._retracted_amount = 0.0
            self._plan(self._prime_speed)
            if self._extrusion_amount > MAX_EXTRUSION_BEFORE_RESET:
                self.reset_extrusion_value()
        elif coasted > 0:
            self._extrusion_amount += coasted
            self._write(dialect.extruder_move(self._prime_speed, axis, self._extrusion_amount))
            self._current_speed = self._prime_speed
            self._plan(self._prime_speed)

    def _estimate_position(self) -> Tuple[float, float, float, float]:
        x, y, z = self._current_position.to_mm()
        if self._z_hopped:
            z += int2mm(self._z_hop)
        return (x, y, z, self._extrusion_amount - self._retracted_amount)

    def _plan(self, speed: float) -> None:
        self._estimator.plan(self._estimate_position(), speed)

    # ------------------------------------------------------------------
    # Retraction and extruder switching
    # ------------------------------------------------------------------

    def write_retraction(self, config: RetractionConfig, force: bool = False) -> None:
        """
        Retract the filament of the active extruder.

        Nothing is written when already retracted, when ``config.amount`` is
        not positive, or when the firmware retracts on its own. Unless
        ``force`` is set, the retraction limiter may silently skip it.

        Args:
            config: Retraction policy of the path being left
            force: Bypass the retraction limiter
        """
        dialect = self._dialect
        if dialect.auto_retraction:
            return
        if self._retracted:
            return
        if config.amount <= 0:
            return
        if not force and not self._limiter.allows(self._extrusion_amount):
            logger.debug(
                "Retraction skipped at %.5f: %d retractions within %.3f",
                self._extrusion_amount,
                self._limiter.count_max,
                self._limiter.extrusion_window,
            )
            return

        axis = dialect.extruder_axis(self._extruder)
        for line in dialect.retract(config.speed, axis, self._extrusion_amount - config.amount):
            self._write(line)
        if not dialect.firmware_retraction:
            self._current_speed = config.speed
        self._retracted = True
        self._retracted_amount = config.amount
        self._prime_speed = config.prime_speed
        self._prime_amount = config.prime_amount
        self._plan(config.speed)

        if config.z_hop > 0:
            self._write(dialect.z_move(int2mm(self._current_position.z + config.z_hop)))
            self._z_hopped = True
            self._z_hop = config.z_hop
            self._plan(self._current_speed or config.speed)

        self._limiter.record(self._extrusion_amount)
        self._last_retraction_config = config

    def switch_extruder(self, new_extruder: int) -> None:
        """
        Switch to ``new_extruder``.

        The outgoing extruder is retracted with the switch settings, its
        post-switch code is written, then the incoming extruder's pre-switch
        code and the tool change. The new extruder stays retracted until the
        next extruding move primes it.

        An extruder that is already retracted is only retracted further, up
        to the switch amount; a deeper retraction is kept as it is.

        Raises:
            ValueError: If the extruder index is out of range
        """
        check_extruder(new_extruder)
        if new_extruder == self._extruder:
            return

        dialect = self._dialect
        old_extruder = self._extruder
        # Book the amount on the old extruder, zeroing E where the flavor can
        if dialect.supports_extrusion_reset:
            self.reset_extrusion_value()
        else:
            self._book_extrusion()

        if dialect.auto_retraction:
            if not self._retracted:
                self._write(dialect.extruder_off())
            self._retracted = True
        else:
            already_retracted = self._retracted_amount if self._retracted else 0.0
            deepen = self._switch_retraction_amount > already_retracted
            # Firmware retraction ignores G10 while retracted
            if deepen and not (self._retracted and dialect.firmware_retraction):
                axis = dialect.extruder_axis(old_extruder)
                for line in dialect.switch_retract(
                    self._switch_retraction_speed,
                    axis,
                    self._extrusion_amount - self._switch_retraction_amount,
                ):
                    self._write(line)
                if not dialect.firmware_retraction:
                    self._current_speed = self._switch_retraction_speed
                self._retracted = True
                self._retracted_amount = self._switch_retraction_amount
                self._plan(self._switch_retraction_speed)

        self.write_code(self._post_switch_codes[old_extruder])
        self._extruder = new_extruder
        if dialect.reset_extrusion_on_switch:
            self.reset_extrusion_value()
        self._prime_speed = self._switch_prime_speed
        self._prime_amount = 0.0
        self.write_code(self._pre_switch_codes[new_extruder])
        tool_select = dialect.select_tool(new_extruder)
        if tool_select is not None:
            self._write(tool_select)
        logger.debug("Switched extruder %d -> %d", old_extruder, new_extruder)

    # ------------------------------------------------------------------
    # Temperature and fan
    # ------------------------------------------------------------------

    def write_temperature_command(
        self, extruder: int, temperature: float, wait: bool = False
    ) -> None:
        """
        Set the hotend temperature of ``extruder``.

        A non-waiting command for the temperature already set is skipped.

        Raises:
            ValueError: If the extruder index is out of range
        """
        check_extruder(extruder)
        if not wait and self._temperatures[extruder] == temperature:
            return
        tool = None if extruder == self._extruder else extruder
        self._write(self._dialect.temperature(temperature, wait, tool))
        self._temperatures[extruder] = temperature

    def write_bed_temperature_command(self, temperature: float, wait: bool = False) -> None:
        self._write(self._dialect.bed_temperature(temperature, wait))
        self._bed_temperature = temperature

    def write_fan_command(self, speed: float) -> None:
        """Set the fan to ``speed`` percent, unless it already runs at that speed."""
        if self._fan_speed == speed:
            return
        self._write(self._dialect.fan(speed))
        self._fan_speed = speed

    # ------------------------------------------------------------------
    # End of stream
    # ------------------------------------------------------------------

    def finalize(
        self,
        max_object_height: int,
        move_speed: float,
        end_code: str,
        retraction_config: Optional[RetractionConfig] = None,
    ) -> PrintSummary:
        """
        End the G-code stream.

        Turns the fan off, forces a retraction, lifts the head to
        ``max_object_height`` if it is below it, writes ``end_code`` and
        flushes the sink. A sink opened with ``open_output`` is closed, even
        if writing fails.

        Args:
            max_object_height: Height to lift to, in microns (0 to skip)
            move_speed: Speed of the lift in mm/s
            end_code: G-code appended at the end
            retraction_config: Final retraction; defaults to the last one
                used, or the extruder switch retraction

        Returns:
            PrintSummary with the estimated print time and filament used
        """
        try:
            self.write_fan_command(0)
            config = retraction_config or self._last_retraction_config
            if config is None:
                config = RetractionConfig(
                    amount=self._switch_retraction_amount,
                    speed=self._switch_retraction_speed,
                    prime_speed=self._switch_prime_speed,
                )
            self.write_retraction(config, force=True)
            if max_object_height > self._current_position.z:
                self.set_z(max_object_height)
                self.write_move(self.get_position_xy(), move_speed, 0.0)
            self.write_code(end_code)
            self.update_total_print_time()

            summary = PrintSummary(
                print_time=self._total_print_time,
                filament_used=tuple(
                    self.get_total_filament_used(extruder) for extruder in range(MAX_EXTRUDERS)
                ),
            )
            logger.info("Print time: %d", int(summary.print_time))
            logger.info("Filament: %d", int(summary.filament_used[0]))
            for extruder, used in enumerate(summary.filament_used[1:], start=1):
                if used > 0:
                    logger.info("Filament%d: %d", extruder + 1, int(used))
            self._stream.flush()
        finally:
            if self._owns_stream:
                self.close()
        return summary
