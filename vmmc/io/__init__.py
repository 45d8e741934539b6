"""Trajectory output for external visualisation."""

from .base import TrajectoryWriter
from .formats.xyz import XYZWriter
from .vmd import write_vmd_script

__all__ = ["TrajectoryWriter", "XYZWriter", "write_vmd_script"]
