"""Cosine-squared attractive well with a WCA-style repulsive core."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..errors import ConfigurationError
from .base import Model

if TYPE_CHECKING:
    from ..neighborlists import CellList
    from ..system import Box, ParticleStore


class CosSquared(Model):
    """
    Cosine-squared potential for multi-component self-assembly.

    For r < 1 (one particle diameter):
        V(r) = epsilon * [r^-12 - 2 r^-6 + 1]
    For 1 <= r < r_ab:
        V(r) = -epsilon_ab * cos^2(pi (r - 1) / (2 (r_ab - 1)))

    The well depth epsilon_ab = epsilon * well_depths[type_a, type_b]. The
    default multipliers give type 0 pairs and mixed pairs a well of epsilon
    and type 1 pairs a well of 5 epsilon; types outside the table do not
    attract. The range r_ab is r_c for like pairs and the cross range for
    pairs of different types, so mixed pairs can reach further.

    Attributes:
        well_depths: Symmetric well-depth multipliers, shape (n_types, n_types).
        like_range: Range of pairs of the same type.
        cross_range: Range of pairs of different types.
    """

    def __init__(
        self,
        box: Box,
        particles: ParticleStore,
        cells: CellList,
        interaction_energy: float = 1.0,
        interaction_range: float = 2.0,
        well_depths: ArrayLike | None = None,
        cross_range: float | None = None,
    ) -> None:
        """
        Initialize cosine-squared model.

        Args:
            box: Simulation box.
            particles: Particle store.
            cells: Cell list.
            interaction_energy: Energy scale epsilon (units of kT).
            interaction_range: Cutoff r_c (units of diameter), must exceed 1.
            well_depths: Symmetric matrix of well-depth multipliers indexed
                by particle type.
            cross_range: Range of pairs of different types, at least
                interaction_range. Defaults to interaction_range. The cell
                list cutoff must cover the larger of the two.
        """
        if interaction_range <= 1.0:
            raise ConfigurationError(
                f"Cosine-squared range must exceed the diameter, got {interaction_range}"
            )
        if cross_range is None:
            cross_range = interaction_range
        if cross_range < interaction_range:
            raise ConfigurationError(
                f"Cross-type range {cross_range} is shorter than the like-type "
                f"range {interaction_range}"
            )
        if well_depths is None:
            well_depths = [[1.0, 1.0], [1.0, 5.0]]
        well_depths = np.asarray(well_depths, dtype=np.float64)
        if well_depths.ndim != 2 or well_depths.shape[0] != well_depths.shape[1]:
            raise ConfigurationError(
                f"well_depths must be a square matrix, got shape {well_depths.shape}"
            )
        if not np.allclose(well_depths, well_depths.T):
            raise ConfigurationError("well_depths must be symmetric")

        super().__init__(box, particles, cells, interaction_energy, cross_range)

        self.well_depths = well_depths
        self.like_range = float(interaction_range)
        self.cross_range = float(cross_range)

        self.reset_energy()

    def _well_depth(self, type_i: int, type_j: int) -> float:
        """Well-depth multiplier for a type pair."""
        n_types = len(self.well_depths)
        if type_i < 0 or type_j < 0 or type_i >= n_types or type_j >= n_types:
            return 0.0
        return float(self.well_depths[type_i, type_j])

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
        """Compute the cosine-squared energy of a pair."""
        r_sq = self.squared_distance(position_i, position_j)

        # Repulsive core
        if r_sq < 1.0:
            if r_sq == 0.0:
                return float("inf")
            r2_inv = 1.0 / r_sq
            r6_inv = r2_inv * r2_inv * r2_inv
            return self.interaction_energy * (r6_inv * r6_inv - 2.0 * r6_inv + 1.0)

        pair_range = self.like_range if type_i == type_j else self.cross_range
        if r_sq >= pair_range * pair_range:
            return 0.0

        depth = self._well_depth(type_i, type_j)
        if depth == 0.0:
            return 0.0

        r = np.sqrt(r_sq)
        cosine = np.cos(np.pi * (r - 1.0) / (2.0 * (pair_range - 1.0)))
        return float(-depth * self.interaction_energy * cosine * cosine)
