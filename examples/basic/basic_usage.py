"""Basic usage example.

This example demonstrates:
- Creating a writer for a RepRap (Marlin) printer
- Describing perimeters with a PathConfig
- Retracting before travel moves
- Finalizing the program and reading the print summary

This is the simplest way to use the G-code writer.
"""

import io
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from plot_helper import generate_example_plot

from gcode_writer import GCodeWriter, PathConfig
from gcode_writer.profiles import (
    MachineProfile,
    RetractionProfile,
    create_retraction_config,
    create_writer_settings,
)
from gcode_writer.visualize import parse_moves

START_CODE = """G21 ;metric values
G90 ;absolute positioning
M82 ;absolute extrusion
G28 ;home all axes"""

END_CODE = """M104 S0 ;extruder heater off
M140 S0 ;heated bed heater off
G28 X0 Y0 ;home X and Y
M84 ;steppers off"""


def square(center, size):
    """Corners of a square, closed back on its first corner."""
    cx, cy = center
    half = size // 2
    corners = [
        (cx - half, cy - half),
        (cx + half, cy - half),
        (cx + half, cy + half),
        (cx - half, cy + half),
    ]
    return corners + corners[:1]


def main():
    """Print two squares per layer, retracting between them."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 80)
    print("BASIC G-CODE WRITER USAGE")
    print("=" * 80)

    out = io.StringIO()
    writer = GCodeWriter(out)
    writer.pre_setup(create_writer_settings(MachineProfile.ULTIMAKER_ORIGINAL))

    # Perimeter: 0.4mm wide, 0.2mm layers, 2.85mm filament, 30mm/s
    # All lengths in microns
    retraction = create_retraction_config(RetractionProfile.BOWDEN_Z_HOP)
    wall = PathConfig(
        retraction_config=retraction,
        name="WALL-OUTER",
        speed=30.0,
        line_width=400,
        layer_thickness=200,
        filament_diameter=2850,
    )
    travel_speed = 150.0  # mm/s

    print("\nInput Configuration:")
    print(f"  Flavor: {writer.get_flavor().name}")
    print(f"  Extrusion: {wall.extrusion_per_mm_filament:.5f} mm filament per mm")
    print(f"  Retraction: {retraction.amount} mm at {retraction.speed} mm/s")
    print(f"  Z-hop: {retraction.z_hop / 1000:.1f} mm\n")

    writer.write_code(START_CODE)
    writer.write_bed_temperature_command(60, wait=True)
    writer.write_temperature_command(0, 210, wait=True)

    layer_count = 5
    for layer_nr in range(layer_count):
        writer.write_layer_comment(layer_nr)
        writer.set_z(200 * (layer_nr + 1))
        if layer_nr == 1:
            writer.write_fan_command(100)

        for center in ((50000, 50000), (90000, 50000)):
            path = square(center, 20000)
            writer.write_retraction(retraction)
            writer.write_move(path[0], travel_speed, 0.0)
            writer.write_type_comment(wall.name)
            for corner in path[1:]:
                writer.write_path_move(corner, wall)

    summary = writer.finalize(
        max_object_height=200 * layer_count + 10000,
        move_speed=travel_speed,
        end_code=END_CODE,
    )
    gcode = out.getvalue()

    print("Program Summary:")
    print("  " + "-" * 70)
    print(f"  Lines: {len(gcode.splitlines())}")
    retractions = sum(1 for move in parse_moves(gcode) if move.retraction)
    print(f"  Retractions: {retractions}")
    print(f"  Print time: {summary.print_time:.1f} s")
    print(f"  Filament used: {summary.filament_used[0]:.3f} mm")

    print("\nFirst Layer:")
    for line in gcode.splitlines()[:20]:
        print(f"  {line}")

    print("\n" + "=" * 80)
    print("GENERATING PLOT")
    print("=" * 80)
    generate_example_plot("basic_usage", gcode)
    print()


if __name__ == "__main__":
    main()
