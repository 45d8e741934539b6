"""XYZ trajectory format implementation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from ..base import TrajectoryWriter

if TYPE_CHECKING:
    from ...system import ParticleStore

logger = logging.getLogger(__name__)


class XYZWriter(TrajectoryWriter):
    """
    XYZ format trajectory writer.

    XYZ is a simple text format:
        N
        comment line
        type x y z
        type x y z
        ...

    Two-dimensional configurations are written with z = 0 so VMD can read
    them unchanged.
    """

    def __init__(self, filename, append: bool = False, precision: int = 5) -> None:
        """
        Initialize XYZ writer.

        Args:
            filename: Output file path.
            append: Append frames to an existing file instead of truncating.
            precision: Decimal places for coordinates.
        """
        super().__init__(filename, append=append)
        self.precision = precision

    def write(self, particles: ParticleStore, comment: str = "", **kwargs) -> None:
        """
        Write a single frame in XYZ format.

        Args:
            particles: Particle store to write.
            comment: Comment line.
        """
        if self._file is None:
            raise RuntimeError("File not open. Use context manager or call open().")

        positions = particles.positions
        if particles.dimension == 2:
            positions = np.column_stack((positions, np.zeros(particles.n_particles)))

        if not comment:
            comment = f"Frame {self._n_frames}"

        self._file.write(f"{particles.n_particles}\n")
        self._file.write(f"{comment}\n")

        fmt = f"{{}} {{:.{self.precision}f}} {{:.{self.precision}f}} {{:.{self.precision}f}}\n"
        for type_, position in zip(particles.types, positions):
            self._file.write(fmt.format(type_, *position))
        self._file.flush()

        self._n_frames += 1
        logger.debug("Wrote frame %d to %s", self._n_frames, self.filename)
