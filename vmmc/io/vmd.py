"""VMD helper script generation."""

from __future__ import annotations

import itertools
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from ..system import Box


def write_vmd_script(
    box: Box,
    filename: str | Path = "vmd.tcl",
    radius: float = 0.5,
) -> Path:
    """
    Write a Tcl script that draws the periodic box in VMD.

    Load it after the trajectory with ``vmd trajectory.xyz -e vmd.tcl``.

    Args:
        box: Simulation box. 2D boxes are drawn as a rectangle at z = 0.
        filename: Output script path.
        radius: Particle radius used for the VDW representation.

    Returns:
        Path of the written script.
    """
    lengths = np.zeros(3)
    lengths[: box.dimension] = box.lengths

    corners = []
    for corner in itertools.product((0, 1), repeat=box.dimension):
        point = np.zeros(3)
        point[: box.dimension] = np.array(corner) * box.lengths
        corners.append(point)

    edges = []
    for a, b in itertools.combinations(corners, 2):
        # Edges join corners differing along exactly one axis
        if np.count_nonzero(a != b) == 1:
            edges.append((a, b))

    lines = [
        "set molid [molinfo top]",
        "mol delrep 0 $molid",
        f"mol representation VDW {radius:.4f} 16.0",
        "mol addrep $molid",
        "draw color white",
    ]
    for a, b in edges:
        lines.append(
            "draw line "
            f"{{{a[0]:.5f} {a[1]:.5f} {a[2]:.5f}}} "
            f"{{{b[0]:.5f} {b[1]:.5f} {b[2]:.5f}}} width 2"
        )
    lines.append(
        f"pbc set {{{lengths[0]:.5f} {lengths[1]:.5f} {max(lengths[2], 1.0):.5f}}} -all"
    )
    lines.append("display resetview")

    path = Path(filename)
    path.write_text("\n".join(lines) + "\n")
    return path
