"""Virtual-move Monte Carlo engine."""

from __future__ import annotations

import logging
import math
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..errors import ConfigurationError, ModelError
from ..system import Box, ParticleStore
from .moves import Move, propose_rotation, propose_translation
from .reporters import Reporter, ReporterGroup
from .statistics import MoveStatistics

if TYPE_CHECKING:
    from ..models import Callbacks
    from ..neighborlists import CellList

logger = logging.getLogger(__name__)

_CALLBACK_NAMES = ("energy", "pair_energy", "interactions", "post_move")


@dataclass(frozen=True)
class MoveParameters:
    """
    Trial move parameters.

    Attributes:
        max_trial_translation: Radius of the ball translations are drawn from.
        max_trial_rotation: Largest rotation angle (radians).
        prob_translate: Probability that a move is a translation.
        reference_radius: Secondary tuning value, validated and stored but
            not used by the cluster move.
        max_interactions: Largest number of distinct candidate neighbours a
            cluster member may have before the move is abandoned.
        is_repulsive: Mode flag, stored but not used by the cluster move.
    """

    max_trial_translation: float = 0.15
    max_trial_rotation: float = 0.2
    prob_translate: float = 0.5
    reference_radius: float = 0.5
    max_interactions: int = 100
    is_repulsive: bool = False

    def __post_init__(self) -> None:
        """Validate parameter ranges."""
        if not math.isfinite(self.max_trial_translation) or self.max_trial_translation < 0:
            raise ConfigurationError(
                f"max_trial_translation must be non-negative, got {self.max_trial_translation}"
            )
        if not math.isfinite(self.max_trial_rotation) or self.max_trial_rotation < 0:
            raise ConfigurationError(
                f"max_trial_rotation must be non-negative, got {self.max_trial_rotation}"
            )
        if not 0.0 <= self.prob_translate <= 1.0:
            raise ConfigurationError(
                f"prob_translate must lie in [0, 1], got {self.prob_translate}"
            )
        if not math.isfinite(self.reference_radius) or self.reference_radius <= 0:
            raise ConfigurationError(
                f"reference_radius must be positive, got {self.reference_radius}"
            )
        if int(self.max_interactions) != self.max_interactions or self.max_interactions < 1:
            raise ConfigurationError(
                f"max_interactions must be a positive integer, got {self.max_interactions}"
            )


@dataclass
class Cluster:
    """
    Outcome of growing one cluster.

    Attributes:
        seed: Index of the seed particle.
        move: The rigid transform shared by every member.
        members: Cluster members in the order they were admitted.
        trial_positions: Moved positions of every particle the move was
            applied to, members or not.
        trial_orientations: Moved orientations, same keys as positions.
        frustration: Product of (1 - p_reverse) / (1 - p_forward) over every
            failed link.
        aborted: True if the interaction cap was exceeded.
    """

    seed: int
    move: Move
    members: list[int] = field(default_factory=list)
    trial_positions: dict[int, NDArray[np.floating]] = field(default_factory=dict)
    trial_orientations: dict[int, NDArray[np.floating]] = field(default_factory=dict)
    frustration: float = 1.0
    aborted: bool = False

    @property
    def size(self) -> int:
        return len(self.members)


def link_probability(initial_energy: float, virtual_energy: float) -> float:
    """
    Probability of linking a pair given its energy before and after a virtual move.

    p = clamp(1 - exp(-(E_virtual - E_initial)), 0, 1)
    """
    delta = virtual_energy - initial_energy
    if delta <= 0.0:
        return 0.0
    return -math.expm1(-delta)


class VMMC:
    """
    Virtual-move Monte Carlo cluster-move engine.

    Each elementary move picks a seed particle, draws one rigid transform
    and grows a cluster by linking neighbours whose pair energy would change
    under the transform. The whole cluster is then moved or left untouched.

    The committed particle store and the optional cell list are only
    written when a move is accepted; trial states live in the Cluster of
    the step in progress.

    Example usage:
        box = Box.cubic(20.0)
        cells = CellList(box, cutoff=2.5)
        particles = ParticleStore.create(positions, box)
        cells.build(particles.positions)
        model = LennardJonesium(box, particles, cells, interaction_energy=2.0)
        vmmc = VMMC(particles, box, model, seed=42)
        vmmc += 1000

    Attributes:
        particles: Committed particle store.
        box: Simulation box.
        callbacks: Potential callbacks.
        cells: Cell list kept in sync with accepted moves, if any.
        parameters: Trial move parameters.
    """

    def __init__(
        self,
        particles: ParticleStore,
        box: Box,
        callbacks: Callbacks,
        max_trial_translation: float = 0.15,
        max_trial_rotation: float = 0.2,
        prob_translate: float = 0.5,
        reference_radius: float = 0.5,
        max_interactions: int = 100,
        is_repulsive: bool = False,
        cells: CellList | None = None,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        """
        Initialize VMMC engine.

        Args:
            particles: Particle store holding the initial configuration.
            box: Simulation box; dimension must match the particles.
            callbacks: Object implementing energy, pair_energy,
                interactions and post_move.
            max_trial_translation: Maximum trial translation.
            max_trial_rotation: Maximum trial rotation angle (radians).
            prob_translate: Probability of proposing a translation.
            reference_radius: Secondary tuning value (stored only).
            max_interactions: Interaction cap per particle.
            is_repulsive: Mode flag (stored only).
            cells: Cell list to update on acceptance. Defaults to the
                callbacks' ``cells`` attribute when present.
            seed: Seed for a new random generator.
            rng: Random generator to use instead of seeding a new one.
        """
        if particles.dimension != box.dimension:
            raise ConfigurationError(
                f"Particle dimension {particles.dimension} does not match box "
                f"dimension {box.dimension}"
            )
        for name in _CALLBACK_NAMES:
            if not callable(getattr(callbacks, name, None)):
                raise ConfigurationError(f"callbacks must provide a callable '{name}'")

        shared = getattr(callbacks, "particles", None)
        if shared is not None and shared is not particles:
            raise ConfigurationError(
                "callbacks are bound to a different particle store than the engine"
            )

        self._particles = particles
        self._box = box
        self._callbacks = callbacks
        self._parameters = MoveParameters(
            max_trial_translation=float(max_trial_translation),
            max_trial_rotation=float(max_trial_rotation),
            prob_translate=float(prob_translate),
            reference_radius=float(reference_radius),
            max_interactions=int(max_interactions),
            is_repulsive=bool(is_repulsive),
        )

        if cells is None:
            cells = getattr(callbacks, "cells", None)
        if cells is not None:
            self._check_cells(cells)
        self._cells = cells

        self._rng = rng if rng is not None else np.random.default_rng(seed)

        self._statistics = MoveStatistics()
        self._reporters = ReporterGroup()
        self._last_cluster: tuple[int, ...] = ()
        self._n_sweeps = 0

        logger.debug(
            "VMMC engine: %d particles, dimension %d, %s",
            particles.n_particles,
            box.dimension,
            self._parameters,
        )

    @classmethod
    def from_arrays(
        cls,
        n_particles: int,
        dimension: int,
        coordinates: ArrayLike,
        types: ArrayLike,
        callbacks: Callbacks,
        box_size: ArrayLike,
        orientations: ArrayLike | None = None,
        is_isotropic: ArrayLike | None = None,
        **kwargs,
    ) -> VMMC:
        """
        Create an engine from raw particle buffers.

        Args:
            n_particles: Number of particles (fixed capacity).
            dimension: Spatial dimension.
            coordinates: Flat (n_particles * dimension,) or (N, dimension)
                coordinate buffer.
            types: Type tag per particle.
            callbacks: Potential callbacks.
            box_size: Per-axis box lengths.
            orientations: Optional orientation buffer, same layout as
                coordinates.
            is_isotropic: Optional per-particle isotropic flags.
            **kwargs: Forwarded to the constructor.

        Returns:
            New VMMC instance owning a new ParticleStore.
        """
        box = Box(box_size)
        if box.dimension != dimension:
            raise ConfigurationError(
                f"Box has {box.dimension} axes but dimension is {dimension}"
            )
        coordinates = np.asarray(coordinates, dtype=np.float64)
        if coordinates.size != n_particles * dimension:
            raise ConfigurationError(
                f"Coordinate buffer has {coordinates.size} entries, expected "
                f"{n_particles * dimension}"
            )
        if np.asarray(types).shape != (n_particles,):
            raise ConfigurationError(
                f"Type buffer shape {np.asarray(types).shape} incompatible with "
                f"{n_particles} particles"
            )
        particles = ParticleStore.create(
            coordinates.reshape(n_particles, dimension),
            box,
            types=types,
            orientations=orientations,
            is_isotropic=is_isotropic,
        )
        return cls(particles, box, callbacks, **kwargs)

    def _check_cells(self, cells: CellList) -> None:
        """Check a cell list matches the box and register any missing particles."""
        if not np.array_equal(cells.box.lengths, self._box.lengths):
            raise ConfigurationError("Cell list was initialised for a different box")
        if cells.n_particles == 0:
            cells.build(self._particles.positions)
        elif cells.n_particles != self._particles.n_particles:
            raise ConfigurationError(
                f"Cell list holds {cells.n_particles} particles, store holds "
                f"{self._particles.n_particles}"
            )

    @property
    def particles(self) -> ParticleStore:
        """Return the committed particle store."""
        return self._particles

    @property
    def box(self) -> Box:
        """Return simulation box."""
        return self._box

    @property
    def callbacks(self) -> Callbacks:
        """Return potential callbacks."""
        return self._callbacks

    @property
    def cells(self) -> CellList | None:
        """Return cell list."""
        return self._cells

    @property
    def parameters(self) -> MoveParameters:
        """Return trial move parameters."""
        return self._parameters

    @property
    def rng(self) -> np.random.Generator:
        """Return the random generator."""
        return self._rng

    @property
    def n_particles(self) -> int:
        return self._particles.n_particles

    @property
    def dimension(self) -> int:
        return self._box.dimension

    @property
    def positions(self) -> NDArray[np.floating]:
        """Return a read-only view of the committed positions."""
        view = self._particles.positions.view()
        view.flags.writeable = False
        return view

    @property
    def orientations(self) -> NDArray[np.floating]:
        """Return a read-only view of the committed orientations."""
        view = self._particles.orientations.view()
        view.flags.writeable = False
        return view

    @property
    def statistics(self) -> MoveStatistics:
        """Return move statistics."""
        return self._statistics

    @property
    def acceptance_ratio(self) -> float:
        """Return cumulative acceptance ratio."""
        return self._statistics.acceptance_ratio

    @property
    def n_steps(self) -> int:
        """Return number of elementary moves attempted."""
        return self._statistics.n_attempts

    @property
    def n_sweeps(self) -> int:
        """Return number of sweeps completed by run()."""
        return self._n_sweeps

    @property
    def last_cluster(self) -> tuple[int, ...]:
        """Return the members of the most recent cluster (empty if aborted)."""
        return self._last_cluster

    def reset_statistics(self) -> None:
        """Zero the move statistics."""
        self._statistics.reset()

    def add_reporter(self, reporter: Reporter) -> None:
        """Add a reporter."""
        self._reporters.add(reporter)

    def remove_reporter(self, reporter: Reporter) -> None:
        """Remove a reporter."""
        self._reporters.remove(reporter)

    def propose_move(self, seed: int) -> Move:
        """
        Draw the rigid transform for a move seeded at a particle.

        Rotations pivot on the seed's committed position.
        """
        params = self._parameters
        if self._rng.random() < params.prob_translate:
            return propose_translation(self._rng, self.dimension, params.max_trial_translation)
        return propose_rotation(
            self._rng,
            self.dimension,
            params.max_trial_rotation,
            self._particles.positions[seed],
        )

    def _trial_state(
        self, index: int, cluster: Cluster
    ) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
        """Return (and cache) a particle's state with the cluster's move applied."""
        position = cluster.trial_positions.get(index)
        if position is None:
            particles = self._particles
            position, orientation = cluster.move.apply(
                particles.positions[index],
                particles.orientations[index],
                self._box,
                rotate_orientation=bool(particles.has_orientation[index]),
            )
            cluster.trial_positions[index] = position
            cluster.trial_orientations[index] = orientation
        return position, cluster.trial_orientations[index]

    def _pair_energy(
        self,
        i: int,
        position_i: NDArray[np.floating],
        orientation_i: NDArray[np.floating],
        j: int,
        position_j: NDArray[np.floating],
        orientation_j: NDArray[np.floating],
    ) -> float:
        """Evaluate the pair energy callback and check the result."""
        types = self._particles.types
        energy = float(
            self._callbacks.pair_energy(
                i,
                position_i,
                int(types[i]),
                orientation_i,
                j,
                position_j,
                int(types[j]),
                orientation_j,
            )
        )
        if not math.isfinite(energy):
            raise ModelError(f"Non-finite pair energy {energy} for particles {i} and {j}")
        return energy

    def _energy(self, index: int) -> float:
        """Evaluate the single-particle energy callback and check the result."""
        particles = self._particles
        energy = float(
            self._callbacks.energy(
                index,
                particles.positions[index],
                int(particles.types[index]),
                particles.orientations[index],
            )
        )
        if not math.isfinite(energy):
            raise ModelError(f"Non-finite energy {energy} for particle {index}")
        return energy

    def _interactions(
        self,
        index: int,
        position: NDArray[np.floating],
        orientation: NDArray[np.floating],
    ) -> Sequence[int]:
        """Evaluate the interactions callback and check the result."""
        result = self._callbacks.interactions(
            index, position, int(self._particles.types[index]), orientation
        )
        neighbors = np.asarray(result)
        if neighbors.size == 0:
            return []
        if neighbors.ndim != 1 or not np.issubdtype(neighbors.dtype, np.integer):
            raise ModelError(
                f"Interactions of particle {index} must be a sequence of integers, got {result!r}"
            )
        if np.any(neighbors < 0) or np.any(neighbors >= self.n_particles):
            raise ModelError(
                f"Interactions of particle {index} contain indices outside "
                f"[0, {self.n_particles})"
            )
        return [int(j) for j in neighbors]

    def _candidates(self, index: int, cluster: Cluster) -> list[int]:
        """Distinct neighbours of a particle at its committed and trial positions."""
        particles = self._particles
        trial_position, trial_orientation = self._trial_state(index, cluster)
        found = dict.fromkeys(
            self._interactions(index, particles.positions[index], particles.orientations[index])
        )
        found.update(dict.fromkeys(self._interactions(index, trial_position, trial_orientation)))
        found.pop(index, None)
        return list(found)

    def grow_cluster(self, seed: int, move: Move) -> Cluster:
        """
        Grow a cluster from a seed particle under a given move.

        Neighbours are linked breadth-first. A neighbour q of a cluster
        member p is admitted with probability
        ``clamp(1 - exp(-(E(p', q) - E(p, q))))``, where p' is p with the
        move applied. When a link fails, the ratio of the reverse link
        weight (q moved instead of p) to the forward one multiplies the
        frustration factor, even if q is recruited later through another
        member.

        Args:
            seed: Index of the seed particle.
            move: Rigid transform applied to every member.

        Returns:
            The grown (or aborted) cluster. Committed state is untouched.
        """
        particles = self._particles
        max_interactions = self._parameters.max_interactions

        cluster = Cluster(seed=seed, move=move, members=[seed])
        in_cluster = {seed}
        pending = deque([seed])

        while pending:
            p = pending.popleft()
            position_p = particles.positions[p]
            orientation_p = particles.orientations[p]
            trial_position_p, trial_orientation_p = self._trial_state(p, cluster)

            candidates = self._candidates(p, cluster)
            if len(candidates) > max_interactions:
                cluster.aborted = True
                return cluster

            for q in candidates:
                if q in in_cluster:
                    continue
                position_q = particles.positions[q]
                orientation_q = particles.orientations[q]

                initial_energy = self._pair_energy(
                    p, position_p, orientation_p, q, position_q, orientation_q
                )
                virtual_energy = self._pair_energy(
                    p, trial_position_p, trial_orientation_p, q, position_q, orientation_q
                )
                p_link = link_probability(initial_energy, virtual_energy)

                if p_link > 0.0 and self._rng.random() < p_link:
                    cluster.members.append(q)
                    in_cluster.add(q)
                    pending.append(q)
                    continue

                trial_position_q, trial_orientation_q = self._trial_state(q, cluster)
                reverse_energy = self._pair_energy(
                    p, position_p, orientation_p, q, trial_position_q, trial_orientation_q
                )
                p_reverse = link_probability(initial_energy, reverse_energy)
                cluster.frustration *= (1.0 - p_reverse) / (1.0 - p_link)

        return cluster

    def _commit(self, cluster: Cluster) -> None:
        """Apply an accepted cluster move to the store and cell list."""
        particles = self._particles
        members = cluster.members

        old_energies = [self._energy(i) for i in members]
        old_positions = particles.positions[members].copy()
        old_orientations = particles.orientations[members].copy()

        for i in members:
            particles.positions[i] = cluster.trial_positions[i]
            if particles.has_orientation[i]:
                particles.orientations[i] = cluster.trial_orientations[i]
        if self._cells is not None:
            for k, i in enumerate(members):
                self._cells.update(i, old_positions[k], particles.positions[i])

        try:
            new_energies = [self._energy(i) for i in members]
        except ModelError:
            # Leave no half-applied move behind
            if self._cells is not None:
                for k, i in enumerate(members):
                    self._cells.update(i, particles.positions[i], old_positions[k])
            particles.positions[members] = old_positions
            particles.orientations[members] = old_orientations
            raise

        for i, old_energy, new_energy in zip(members, old_energies, new_energies):
            self._callbacks.post_move(i, old_energy, new_energy)

    def step(self) -> bool:
        """
        Perform a single elementary move.

        Returns:
            True if the move was accepted.
        """
        seed = int(self._rng.integers(self.n_particles))
        move = self.propose_move(seed)
        cluster = self.grow_cluster(seed, move)

        if cluster.aborted:
            logger.debug(
                "Move seeded at particle %d exceeded %d interactions; rejected",
                seed,
                self._parameters.max_interactions,
            )
            self._last_cluster = ()
            self._statistics.record(move.is_rotation, False, cluster.size, overflow=True)
            return False

        self._last_cluster = tuple(cluster.members)
        frustration = cluster.frustration
        accepted = frustration >= 1.0 or self._rng.random() < frustration
        if accepted:
            self._commit(cluster)
        self._statistics.record(move.is_rotation, accepted, cluster.size)
        return accepted

    def advance(self, n_steps: int) -> int:
        """
        Run elementary moves sequentially.

        Args:
            n_steps: Number of moves to attempt.

        Returns:
            Number of accepted moves.
        """
        if n_steps < 0:
            raise ValueError(f"n_steps must be non-negative, got {n_steps}")
        accepted = 0
        for _ in range(n_steps):
            accepted += self.step()
        return accepted

    def __iadd__(self, n_steps: int) -> VMMC:
        """Advance by n_steps elementary moves (``vmmc += n``)."""
        self.advance(n_steps)
        return self

    def run(
        self,
        n_sweeps: int,
        callback: Callable[[VMMC], bool] | None = None,
    ) -> ParticleStore:
        """
        Run a number of sweeps, calling reporters after each one.

        A sweep is one elementary move per particle on average.

        Args:
            n_sweeps: Number of sweeps to run.
            callback: Optional callback called each sweep.
                     Return True to stop early.

        Returns:
            The committed particle store.
        """
        self._reporters.initialize(self)
        try:
            for _ in range(n_sweeps):
                self.advance(self.n_particles)
                self._n_sweeps += 1
                self._reporters.report(self)

                if callback is not None and callback(self):
                    break
        finally:
            self._reporters.finalize(self)

        return self._particles
