"""Visualization utilities for generated G-code.

This module parses the moves back out of a generated program and plots the
toolpath and the extruder position, marking retractions.
"""

from dataclasses import dataclass
from typing import List, Optional

import matplotlib.pyplot as plt
import numpy as np


@dataclass(frozen=True)
class ParsedMove:
    """
    One motion line of a G-code program, with modal coordinates resolved.

    Attributes:
        line_number: 1-based line number in the program
        x: X after the line in mm
        y: Y after the line in mm
        z: Z after the line in mm
        e: Extruder axis after the line
        extruding: The line deposits material (XY motion with increasing E)
        retraction: The line pulls filament back (E decreasing, or G10)
    """

    line_number: int
    x: float
    y: float
    z: float
    e: float
    extruding: bool
    retraction: bool


def parse_moves(gcode: str, axis: str = "E") -> List[ParsedMove]:
    """Parse G0/G1/G10/G11/G92 lines of ``gcode`` into resolved moves.

    Args:
        gcode: Program text
        axis: Extruder axis letter (``A``, ``B``, ... for Mach3)

    Returns:
        One ParsedMove per motion line, in program order
    """
    x = y = z = e = 0.0
    moves: List[ParsedMove] = []
    for line_number, raw in enumerate(gcode.splitlines(), start=1):
        code = raw.split(";", 1)[0].strip()
        if not code:
            continue
        words = code.split()
        command = words[0].upper()
        values = {}
        for word in words[1:]:
            try:
                values[word[0].upper()] = float(word[1:])
            except ValueError:
                continue

        if command == "G92":
            e = values.get(axis, e)
            continue
        if command in ("G10", "G11"):
            moves.append(
                ParsedMove(line_number, x, y, z, e, extruding=False, retraction=command == "G10")
            )
            continue
        if command not in ("G0", "G1"):
            continue

        moved_xy = "X" in values or "Y" in values
        new_e = values.get(axis, e)
        x = values.get("X", x)
        y = values.get("Y", y)
        z = values.get("Z", z)
        moves.append(
            ParsedMove(
                line_number,
                x,
                y,
                z,
                new_e,
                extruding=moved_xy and new_e > e,
                retraction=not moved_xy and new_e < e,
            )
        )
        e = new_e
    return moves


def plot_toolpath(
    gcode: str,
    axis: str = "E",
    title: Optional[str] = None,
    show: bool = True,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Plot the toolpath and extruder position of a G-code program.

    Creates a two-panel visualization showing:
    - XY toolpath, extruding segments solid and travel dashed
    - Extruder position per motion line with retractions marked

    Args:
        gcode: Program text
        axis: Extruder axis letter
        title: Optional custom title (default: auto-generated)
        show: Whether to display the plot (default: True)
        save_path: Optional path to save the figure

    Returns:
        matplotlib Figure object

    Example:
        >>> writer = GCodeWriter(out)
        >>> ...
        >>> plot_toolpath(out.getvalue())
    """
    moves = parse_moves(gcode, axis)
    if not moves:
        raise ValueError("Cannot plot a program without moves")

    xs = np.array([move.x for move in moves])
    ys = np.array([move.y for move in moves])
    es = np.array([move.e for move in moves])
    extruding = np.array([move.extruding for move in moves])
    retractions = np.array([move.retraction for move in moves])

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))

    if title is None:
        title = (
            f"G-code Analysis\n"
            f"{len(moves)} moves | {int(retractions.sum())} retractions | "
            f"final E {es[-1]:.3f}"
        )
    fig.suptitle(title, fontsize=14, fontweight="bold")

    # Plot 1: XY toolpath
    for i in range(1, len(moves)):
        segment_x = xs[i - 1 : i + 1]
        segment_y = ys[i - 1 : i + 1]
        if extruding[i]:
            ax1.plot(segment_x, segment_y, color="tab:blue", linewidth=2)
        else:
            ax1.plot(segment_x, segment_y, color="gray", linestyle="--", alpha=0.5)
    ax1.plot([], [], color="tab:blue", linewidth=2, label="Extrusion")
    ax1.plot([], [], color="gray", linestyle="--", label="Travel")
    ax1.set_xlabel("X (mm)")
    ax1.set_ylabel("Y (mm)")
    ax1.set_title("Toolpath")
    ax1.set_aspect("equal", adjustable="datalim")
    ax1.legend()
    ax1.grid(True, alpha=0.3)

    # Plot 2: Extruder position
    _plot_extruder_position(ax2, es, retractions)

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    if show:
        plt.show()

    return fig


def plot_extrusion_only(
    gcode: str,
    axis: str = "E",
    title: str = "Extruder Position",
    show: bool = True,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Plot the extruder position of a G-code program (single panel).

    Args:
        gcode: Program text
        axis: Extruder axis letter
        title: Plot title
        show: Whether to display the plot
        save_path: Optional path to save the figure

    Returns:
        matplotlib Figure object
    """
    moves = parse_moves(gcode, axis)
    if not moves:
        raise ValueError("Cannot plot a program without moves")

    es = np.array([move.e for move in moves])
    retractions = np.array([move.retraction for move in moves])

    fig, ax = plt.subplots(figsize=(12, 4))
    _plot_extruder_position(ax, es, retractions)
    ax.set_title(title)

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    if show:
        plt.show()

    return fig


def _plot_extruder_position(ax: plt.Axes, es: np.ndarray, retractions: np.ndarray) -> None:
    indices = np.arange(len(es))
    ax.step(indices, es, where="post", linewidth=2, label="Extruder position")
    if retractions.any():
        ax.scatter(
            indices[retractions],
            es[retractions],
            color="red",
            marker="v",
            zorder=3,
            label="Retraction",
        )
    ax.set_xlabel("Move")
    ax.set_ylabel("Extruder position")
    ax.set_title("Extruder Position")
    ax.legend()
    ax.grid(True, alpha=0.3)
