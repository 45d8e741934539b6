"""Periodic simulation box."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..errors import ConfigurationError


@dataclass(frozen=True)
class Box:
    """
    Orthorhombic periodic simulation box in two or three dimensions.

    Attributes:
        lengths: Per-axis box lengths, shape (dimension,).
    """

    lengths: NDArray[np.floating]

    def __post_init__(self) -> None:
        """Validate and convert lengths to a read-only float array."""
        lengths = np.array(self.lengths, dtype=np.float64)
        if lengths.ndim != 1:
            raise ConfigurationError(
                f"Box lengths must be one-dimensional, got shape {lengths.shape}"
            )
        if len(lengths) not in (2, 3):
            raise ConfigurationError(
                f"Box dimension must be 2 or 3, got {len(lengths)}"
            )
        if not np.all(np.isfinite(lengths)) or np.any(lengths <= 0):
            raise ConfigurationError(
                f"Box lengths must be finite and positive, got {lengths}"
            )
        lengths.flags.writeable = False
        # Use object.__setattr__ since dataclass is frozen
        object.__setattr__(self, "lengths", lengths)

    @classmethod
    def cubic(cls, length: float, dimension: int = 3) -> Box:
        """Create a square (2D) or cubic (3D) box with given side length."""
        return cls(np.full(dimension, length, dtype=np.float64))

    @property
    def dimension(self) -> int:
        """Return the spatial dimension."""
        return len(self.lengths)

    @property
    def volume(self) -> float:
        """Return box area (2D) or volume (3D)."""
        return float(np.prod(self.lengths))

    @property
    def max_cutoff(self) -> float:
        """Largest interaction range for which minimum image is unambiguous."""
        return float(0.5 * np.min(self.lengths))

    def wrap(self, position: ArrayLike) -> NDArray[np.floating]:
        """
        Wrap position(s) into the primary box, [0, L_i) on every axis.

        Args:
            position: Position(s), shape (dimension,) or (N, dimension).

        Returns:
            Wrapped copy of the input.
        """
        position = np.asarray(position, dtype=np.float64)
        wrapped = position - self.lengths * np.floor(position / self.lengths)
        # Tiny negative inputs round up to exactly L.
        return np.where(wrapped >= self.lengths, wrapped - self.lengths, wrapped)

    def minimum_image(self, separation: ArrayLike) -> NDArray[np.floating]:
        """
        Reduce separation vector(s) to the minimum image, [-L_i/2, L_i/2).

        Args:
            separation: Separation(s), shape (dimension,) or (N, dimension).

        Returns:
            Reduced copy of the input.
        """
        separation = np.asarray(separation, dtype=np.float64)
        half = 0.5 * self.lengths
        reduced = separation - self.lengths * np.floor(separation / self.lengths + 0.5)
        reduced = np.where(reduced >= half, reduced - self.lengths, reduced)
        return np.where(reduced < -half, reduced + self.lengths, reduced)

    def separation(self, r1: ArrayLike, r2: ArrayLike) -> NDArray[np.floating]:
        """Minimum image displacement vector r2 - r1."""
        return self.minimum_image(np.asarray(r2) - np.asarray(r1))

    def distance(self, r1: ArrayLike, r2: ArrayLike) -> float | NDArray[np.floating]:
        """
        Compute minimum image distance between positions.

        Args:
            r1: First position(s), shape (dimension,) or (N, dimension).
            r2: Second position(s), shape (dimension,) or (N, dimension).

        Returns:
            Distance(s) under minimum image convention.
        """
        return np.linalg.norm(self.separation(r1, r2), axis=-1)
