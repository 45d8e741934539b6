"""Fixed-capacity particle storage."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..errors import ConfigurationError
from .box import Box


@dataclass
class ParticleStore:
    """
    Committed state of every particle in the simulation.

    Particles are created once and addressed by their row index for the
    lifetime of the store. The orientation buffer is always allocated;
    entries of particles without orientation are ignored.

    Attributes:
        positions: Wrapped positions, shape (N, d).
        orientations: Unit orientation vectors, shape (N, d).
        types: Integer type tag per particle, shape (N,).
        has_orientation: Whether a particle's potential depends on its
            orientation, shape (N,).
    """

    positions: NDArray[np.floating]
    orientations: NDArray[np.floating]
    types: NDArray[np.integer]
    has_orientation: NDArray[np.bool_]

    def __post_init__(self) -> None:
        """Validate and convert arrays."""
        self.positions = np.array(self.positions, dtype=np.float64)
        self.orientations = np.array(self.orientations, dtype=np.float64)
        self.types = np.array(self.types, dtype=np.int64)
        self.has_orientation = np.array(self.has_orientation, dtype=bool)

        if self.positions.ndim != 2 or self.positions.shape[1] not in (2, 3):
            raise ConfigurationError(
                f"positions must have shape (N, 2) or (N, 3), got {self.positions.shape}"
            )
        n_particles = len(self.positions)
        if n_particles == 0:
            raise ConfigurationError("At least one particle is required")
        if not np.all(np.isfinite(self.positions)):
            raise ConfigurationError("positions must be finite")
        if self.orientations.shape != self.positions.shape:
            raise ConfigurationError(
                f"orientations shape {self.orientations.shape} incompatible with "
                f"positions shape {self.positions.shape}"
            )
        if self.types.shape != (n_particles,):
            raise ConfigurationError(
                f"types shape {self.types.shape} incompatible with {n_particles} particles"
            )
        if self.has_orientation.shape != (n_particles,):
            raise ConfigurationError(
                f"has_orientation shape {self.has_orientation.shape} incompatible "
                f"with {n_particles} particles"
            )

    @classmethod
    def create(
        cls,
        positions: ArrayLike,
        box: Box,
        types: ArrayLike | None = None,
        orientations: ArrayLike | None = None,
        is_isotropic: ArrayLike | None = None,
    ) -> ParticleStore:
        """
        Create a store from user buffers, wrapping positions into the box.

        Args:
            positions: Particle coordinates, shape (N, d) or flat (N * d,).
            box: Simulation box; its dimension must match the coordinates.
            types: Type tag per particle. Defaults to zeros.
            orientations: Orientation vectors, same layout as positions.
                Defaults to unit vectors along the first axis.
            is_isotropic: Per-particle isotropic flags. Defaults to True for
                every particle when no orientations are given, False otherwise.

        Returns:
            New ParticleStore instance.
        """
        dimension = box.dimension
        positions = np.asarray(positions, dtype=np.float64)
        if positions.ndim == 1:
            if len(positions) % dimension != 0:
                raise ConfigurationError(
                    f"Coordinate buffer of length {len(positions)} is not a "
                    f"multiple of the box dimension {dimension}"
                )
            positions = positions.reshape(-1, dimension)
        if positions.ndim != 2 or positions.shape[1] != dimension:
            raise ConfigurationError(
                f"positions shape {positions.shape} does not match box "
                f"dimension {dimension}"
            )
        n_particles = len(positions)

        if types is None:
            types = np.zeros(n_particles, dtype=np.int64)

        if orientations is None:
            orientations = np.zeros((n_particles, dimension), dtype=np.float64)
            orientations[:, 0] = 1.0
            default_isotropic = True
        else:
            orientations = np.asarray(orientations, dtype=np.float64)
            if orientations.ndim == 1 and orientations.size == n_particles * dimension:
                orientations = orientations.reshape(n_particles, dimension)
            default_isotropic = False

        if is_isotropic is None:
            is_isotropic = np.full(n_particles, default_isotropic)
        has_orientation = ~np.asarray(is_isotropic, dtype=bool)

        store = cls(
            positions=box.wrap(positions) if np.all(np.isfinite(positions)) else positions,
            orientations=orientations,
            types=types,
            has_orientation=has_orientation,
        )

        norms = np.linalg.norm(store.orientations, axis=1)
        anisotropic = store.has_orientation
        if np.any(norms[anisotropic] == 0) or not np.all(np.isfinite(norms)):
            raise ConfigurationError("Orientation vectors must be finite and non-zero")
        store.orientations[anisotropic] /= norms[anisotropic, np.newaxis]
        return store

    @property
    def n_particles(self) -> int:
        """Return number of particles."""
        return len(self.positions)

    @property
    def dimension(self) -> int:
        """Return spatial dimension."""
        return self.positions.shape[1]

    def copy(self) -> ParticleStore:
        """Create a deep copy of this store."""
        return ParticleStore(
            positions=self.positions.copy(),
            orientations=self.orientations.copy(),
            types=self.types.copy(),
            has_orientation=self.has_orientation.copy(),
        )
