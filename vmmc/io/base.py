"""Base classes for trajectory output."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..system import ParticleStore


class TrajectoryWriter(ABC):
    """
    Abstract base class for trajectory writers.

    Trajectory writers serialize the committed particle state to various
    file formats. They support both truncating and append modes.

    Example:
        with XYZWriter("trajectory.xyz") as writer:
            for _ in range(100):
                vmmc += 1000
                writer.write(vmmc.particles)
    """

    def __init__(self, filename: str | Path, append: bool = False) -> None:
        """
        Initialize trajectory writer.

        Args:
            filename: Output file path.
            append: Append frames to an existing file instead of truncating.
        """
        self.filename = Path(filename)
        self.append = append
        self._file = None
        self._n_frames = 0

    @abstractmethod
    def write(self, particles: ParticleStore, **kwargs) -> None:
        """
        Write a single frame.

        Args:
            particles: Particle store to write.
            **kwargs: Format-specific options.
        """
        ...

    def open(self) -> None:
        """Open file for writing."""
        self._file = self.filename.open("a" if self.append else "w")

    def close(self) -> None:
        """Close file."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> TrajectoryWriter:
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    @property
    def n_frames(self) -> int:
        """Number of frames written."""
        return self._n_frames
