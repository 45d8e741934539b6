"""Truncated and shifted Lennard-Jones potential."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from .base import Model

if TYPE_CHECKING:
    from ..neighborlists import CellList
    from ..system import Box, ParticleStore


class LennardJonesium(Model):
    """
    Lennard-Jones 12-6 potential, truncated and shifted to zero at the cutoff.

    V(r) = 4 * epsilon * [r^-12 - r^-6] - V(r_c)

    Distances are in units of the particle diameter, energies in kT.
    """

    def __init__(
        self,
        box: Box,
        particles: ParticleStore,
        cells: CellList,
        interaction_energy: float = 1.0,
        interaction_range: float = 2.5,
    ) -> None:
        """
        Initialize Lennard-Jones model.

        Args:
            box: Simulation box.
            particles: Particle store.
            cells: Cell list.
            interaction_energy: Well depth epsilon (units of kT).
            interaction_range: Cutoff distance (units of diameter).
        """
        super().__init__(box, particles, cells, interaction_energy, interaction_range)

        r6_inv = 1.0 / self.squared_cutoff**3
        self.potential_shift = 4.0 * self.interaction_energy * (r6_inv * r6_inv - r6_inv)

        self.reset_energy()

    def pair_energy(
        self,
        i: int,
        position_i: NDArray[np.floating],
        type_i: int,
        orientation_i: NDArray[np.floating],
        j: int,
        position_j: NDArray[np.floating],
        type_j: int,
        orientation_j: NDArray[np.floating],
    ) -> float:
        """Compute the shifted Lennard-Jones energy of a pair."""
        r_sq = self.squared_distance(position_i, position_j)
        if r_sq >= self.squared_cutoff:
            return 0.0
        if r_sq == 0.0:
            return float("inf")

        r2_inv = 1.0 / r_sq
        r6_inv = r2_inv * r2_inv * r2_inv
        return 4.0 * self.interaction_energy * (r6_inv * r6_inv - r6_inv) - self.potential_shift
