"""Random initial configurations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ..errors import ConfigurationError

if TYPE_CHECKING:
    from .box import Box


def random_configuration(
    n_particles: int,
    box: Box,
    rng: np.random.Generator | int | None = None,
    diameter: float = 1.0,
    max_trials: int = 100_000,
) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
    """
    Place particles at random without overlaps.

    Particles are inserted one at a time at uniform random positions; an
    insertion is retried while it lies closer than one diameter to a
    particle already placed. Overlap checks use a cell grid of edge >= one
    diameter.

    Args:
        n_particles: Number of particles to place.
        box: Simulation box.
        rng: Random generator or seed.
        diameter: Minimum separation between particle centres.
        max_trials: Insertion attempts allowed per particle.

    Returns:
        Tuple of (positions, orientations), each of shape (N, dimension).
        Orientations are random unit vectors.
    """
    if not isinstance(rng, np.random.Generator):
        rng = np.random.default_rng(rng)

    dimension = box.dimension
    n_cells = np.maximum(np.floor(box.lengths / diameter).astype(np.int64), 1)
    cell_size = box.lengths / n_cells
    grid: dict[tuple[int, ...], list[int]] = {}
    offsets = np.array(np.meshgrid(*([[-1, 0, 1]] * dimension), indexing="ij")).reshape(
        dimension, -1
    ).T

    positions = np.zeros((n_particles, dimension), dtype=np.float64)
    diameter_sq = diameter**2

    for i in range(n_particles):
        for _ in range(max_trials):
            trial = rng.random(dimension) * box.lengths
            cell = np.minimum((trial / cell_size).astype(np.int64), n_cells - 1)

            overlap = False
            for offset in offsets:
                key = tuple(int(c) for c in (cell + offset) % n_cells)
                for j in grid.get(key, ()):
                    sep = box.minimum_image(positions[j] - trial)
                    if np.dot(sep, sep) < diameter_sq:
                        overlap = True
                        break
                if overlap:
                    break

            if not overlap:
                positions[i] = trial
                grid.setdefault(tuple(int(c) for c in cell), []).append(i)
                break
        else:
            raise ConfigurationError(
                f"Could not place particle {i} of {n_particles} after "
                f"{max_trials} trials; the box is too dense"
            )

    orientations = rng.standard_normal((n_particles, dimension))
    orientations /= np.linalg.norm(orientations, axis=1)[:, np.newaxis]

    return positions, orientations


def box_length_for_density(n_particles: int, density: float, dimension: int = 3) -> float:
    """
    Side length of a square/cubic box giving a packing fraction.

    Particles have unit diameter, so the covered area (2D) or volume (3D)
    per particle is pi/4 or pi/6.
    """
    if density <= 0:
        raise ConfigurationError(f"density must be positive, got {density}")
    if dimension == 2:
        return float(np.sqrt(n_particles * np.pi / (4.0 * density)))
    return float(np.cbrt(n_particles * np.pi / (6.0 * density)))
