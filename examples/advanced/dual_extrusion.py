"""Dual extrusion example.

This example demonstrates:
- Loading writer settings from a slicer settings mapping
- Nozzle offsets applied to the emitted coordinates
- Extruder switch code and tool changes
- How the same toolpath is spelled by different G-code flavors

Shows how to adapt the writer to your specific 3D printer setup.
"""

import io
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from plot_helper import save_toolpath_plot

from gcode_writer import Flavor, GCodeWriter, PathConfig, WriterSettings
from gcode_writer.profiles import RetractionProfile, create_retraction_config


def machine_settings(flavor):
    """Slicer settings of a dual extrusion machine with nozzles 18mm apart."""
    return {
        "machine_gcode_flavor": flavor.value,
        "machine_nozzle_offset_x_1": 18.0,
        "machine_nozzle_offset_y_1": 0.0,
        "machine_pre_extruder_switch_code_1": "M109 T1 S210",
        "machine_post_extruder_switch_code_0": "M104 T0 S175",
        "machine_switch_extruder_retraction_amount": 16.0,
        "material_switch_extruder_retraction_speed": 20.0,
        "material_switch_extruder_prime_speed": 20.0,
        "retraction_extrusion_window": 4.5,
        "retraction_count_max": 25,
    }


def print_two_materials(flavor):
    """Print a line with each extruder and return the program.

    Args:
        flavor: G-code flavor to write

    Returns:
        Tuple of (program text, print summary)
    """
    out = io.StringIO()
    writer = GCodeWriter(out)
    writer.pre_setup(WriterSettings.from_mapping(machine_settings(flavor)))

    retraction = create_retraction_config(RetractionProfile.BOWDEN)
    config = PathConfig(
        retraction_config=retraction,
        name="WALL-OUTER",
        speed=30.0,
        line_width=400,
        layer_thickness=200,
        filament_diameter=2850,
    )
    extrusion_per_mm = config.extrusion_per_mm(writer.is_volumetric())

    writer.set_z(200)
    for extruder, y in ((0, 40000), (1, 60000)):
        writer.switch_extruder(extruder)
        writer.write_move((40000, y), 150.0, 0.0)
        writer.write_move((80000, y), config.speed, extrusion_per_mm)
        writer.write_retraction(retraction)

    summary = writer.finalize(10000, 150.0, "M84")
    return out.getvalue(), summary


def main():
    logging.basicConfig(level=logging.WARNING)

    print("=" * 80)
    print("DUAL EXTRUSION ACROSS FLAVORS")
    print("=" * 80)

    for flavor in (Flavor.REPRAP, Flavor.ULTIGCODE, Flavor.MAKERBOT, Flavor.MACH3):
        gcode, summary = print_two_materials(flavor)
        print(f"\n{flavor.name}:")
        print("  " + "-" * 70)
        for line in gcode.splitlines():
            print(f"  {line}")
        print(
            f"  Print time: {summary.print_time:.1f} s | "
            f"Filament: {summary.filament_used[0]:.3f} / {summary.filament_used[1]:.3f}"
        )

    print("\n" + "=" * 80)
    print("GENERATING PLOT")
    print("=" * 80)
    gcode, _ = print_two_materials(Flavor.REPRAP)
    output = Path(__file__).parent / "dual_extrusion_plot.png"
    save_toolpath_plot(gcode, str(output), title="Dual Extrusion")
    print()


if __name__ == "__main__":
    main()
