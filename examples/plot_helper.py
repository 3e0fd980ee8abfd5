"""Helper functions for creating matplotlib plots in examples."""

import os
from typing import Optional

from gcode_writer.visualize import plot_toolpath


def save_toolpath_plot(
    gcode: str,
    filename: str,
    axis: str = "E",
    title: Optional[str] = None,
) -> None:
    """Save a toolpath plot to file.

    Args:
        gcode: Generated program text
        filename: Output filename (e.g., "my_plot.png")
        axis: Extruder axis letter
        title: Optional custom title
    """
    if not filename.endswith((".png", ".jpg", ".pdf")):
        filename += ".png"

    plot_toolpath(gcode, axis=axis, title=title, show=False, save_path=filename)
    print(f"  Plot saved: {filename}")


def generate_example_plot(
    name: str,
    gcode: str,
    axis: str = "E",
    output_dir: Optional[str] = None,
) -> None:
    """Generate and save a plot with automatic naming.

    Args:
        name: Base name for the plot (e.g., "basic_usage")
        gcode: Generated program text
        axis: Extruder axis letter
        output_dir: Optional output directory (defaults to caller's directory)
    """
    if output_dir is None:
        import inspect

        caller_frame = inspect.stack()[1]
        caller_file = caller_frame.filename
        output_dir = os.path.dirname(os.path.abspath(caller_file))

    filename = os.path.join(output_dir, f"{name}_plot.png")
    title = name.replace("_", " ").title()

    save_toolpath_plot(gcode, filename, axis=axis, title=title)
