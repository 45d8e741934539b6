"""Callback contract between the VMMC engine and potential models."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ..errors import ConfigurationError

if TYPE_CHECKING:
    from ..neighborlists import CellList
    from ..system import Box, ParticleStore

logger = logging.getLogger(__name__)


class Callbacks(ABC):
    """
    The four operations the engine calls into but does not implement.

    The engine only requires an object with these four callables, so
    subclassing is optional; see FunctionCallbacks.

    Energies are in units of the thermal energy. ``pair_energy`` must be
    symmetric under exchange of the two particles and depend only on the
    arguments it is given.
    """

    @abstractmethod
    def energy(
        self,
        index: int,
        position: NDArray[np.floating],
        type_: int,
        orientation: NDArray[np.floating],
    ) -> float:
        """Total energy of a particle against its committed neighbours."""
        ...

    @abstractmethod
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
        """Pair energy between two particles in the given states."""
        ...

    @abstractmethod
    def interactions(
        self,
        index: int,
        position: NDArray[np.floating],
        type_: int,
        orientation: NDArray[np.floating],
    ) -> Sequence[int]:
        """Indices of particles that may interact with one placed at position."""
        ...

    @abstractmethod
    def post_move(self, index: int, old_energy: float, new_energy: float) -> None:
        """Hook invoked once per moved particle after an accepted move."""
        ...


@dataclass(frozen=True)
class FunctionCallbacks:
    """
    Callback contract assembled from four plain callables.

    Example:
        callbacks = FunctionCallbacks(
            energy=lambda i, pos, t, o: 0.0,
            pair_energy=lambda i, pi, ti, oi, j, pj, tj, oj: 0.0,
            interactions=lambda i, pos, t, o: [],
        )
    """

    energy: Callable[..., float]
    pair_energy: Callable[..., float]
    interactions: Callable[..., Sequence[int]]
    post_move: Callable[[int, float, float], None] = lambda index, old, new: None


class Model(Callbacks):
    """
    Base class for pairwise potential models.

    A model reads the committed particle state through the store and cell
    list it is bound to; only ``pair_energy`` is model specific. The engine
    is the sole writer of that state, the model only keeps a running total
    energy updated through ``post_move``. Subclasses call ``reset_energy()``
    once their own parameters are set.

    Attributes:
        box: Simulation box.
        particles: Committed particle store shared with the engine.
        cells: Cell list shared with the engine.
        interaction_energy: Energy scale (units of kT).
        interaction_range: Potential cutoff distance.
    """

    def __init__(
        self,
        box: Box,
        particles: ParticleStore,
        cells: CellList,
        interaction_energy: float,
        interaction_range: float,
    ) -> None:
        """
        Initialize model.

        Args:
            box: Simulation box.
            particles: Particle store.
            cells: Cell list built for the particle positions.
            interaction_energy: Energy scale (units of kT).
            interaction_range: Potential cutoff; must not exceed the cell
                list cutoff.
        """
        if interaction_range <= 0:
            raise ConfigurationError(
                f"Interaction range must be positive, got {interaction_range}"
            )
        if interaction_range > cells.cutoff:
            raise ConfigurationError(
                f"Interaction range {interaction_range} exceeds cell list "
                f"cutoff {cells.cutoff}"
            )
        if particles.dimension != box.dimension:
            raise ConfigurationError(
                f"Particle dimension {particles.dimension} does not match box "
                f"dimension {box.dimension}"
            )

        self.box = box
        self.particles = particles
        self.cells = cells
        self.interaction_energy = float(interaction_energy)
        self.interaction_range = float(interaction_range)
        self.squared_cutoff = self.interaction_range**2

        self._energy = 0.0

    @property
    def total_energy(self) -> float:
        """Return the running total energy."""
        return self._energy

    @abstractmethod
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
        """
        Calculate the pair energy between two particles.

        Returns:
            The pair energy in units of kT.
        """
        ...

    def squared_distance(
        self, position_i: NDArray[np.floating], position_j: NDArray[np.floating]
    ) -> float:
        """Squared minimum image distance between two positions."""
        sep = self.box.minimum_image(np.asarray(position_i) - np.asarray(position_j))
        return float(np.dot(sep, sep))

    def interactions(
        self,
        index: int,
        position: NDArray[np.floating],
        type_: int,
        orientation: NDArray[np.floating],
    ) -> list[int]:
        """
        Find the particles within range of a particle placed at position.

        Args:
            index: Index of the particle (excluded from the result).
            position: Position to search around.
            type_: Type of the particle.
            orientation: Orientation of the particle.

        Returns:
            Sorted list of neighbour indices.
        """
        candidates = self.cells.neighbors(position, self.interaction_range)
        candidates = candidates[candidates != index]
        if len(candidates) == 0:
            return []
        sep = self.box.minimum_image(self.particles.positions[candidates] - position)
        r_sq = np.sum(sep**2, axis=1)
        return [int(j) for j in candidates[r_sq < self.squared_cutoff]]

    def energy(
        self,
        index: int,
        position: NDArray[np.floating],
        type_: int,
        orientation: NDArray[np.floating],
    ) -> float:
        """Total energy of a particle against its committed neighbours."""
        particles = self.particles
        total = 0.0
        for j in self.interactions(index, position, type_, orientation):
            total += self.pair_energy(
                index,
                position,
                type_,
                orientation,
                j,
                particles.positions[j],
                int(particles.types[j]),
                particles.orientations[j],
            )
        return total

    def post_move(self, index: int, old_energy: float, new_energy: float) -> None:
        """Accumulate the energy change of a moved particle."""
        self._energy += new_energy - old_energy

    def compute_total_energy(self) -> float:
        """Compute the total energy of the committed configuration from scratch."""
        particles = self.particles
        total = 0.0
        for i in range(particles.n_particles):
            total += self.energy(
                i,
                particles.positions[i],
                int(particles.types[i]),
                particles.orientations[i],
            )
        # Every pair is counted twice
        return 0.5 * total

    def reset_energy(self) -> float:
        """Resynchronise the running total with the committed configuration."""
        self._energy = self.compute_total_energy()
        logger.debug("%s total energy reset to %g", type(self).__name__, self._energy)
        return self._energy
