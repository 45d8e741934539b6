"""
Simple high-level simulation API.

This module provides a user-friendly interface for running VMMC
simulations of the bundled potential models with minimal configuration.

Example:
    >>> from vmmc import simulate
    >>> result = simulate.lennard_jonesium(n_particles=100, n_sweeps=50)
    >>> print(result.acceptance_ratio)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np
from numpy.typing import NDArray

from .engines import VMMC, EnergyReporter, TrajectoryReporter
from .io import write_vmd_script
from .models import CosSquared, LennardJonesium, Model
from .neighborlists import CellList
from .system import Box, ParticleStore, box_length_for_density, random_configuration


@dataclass
class SimulationResult:
    """Results from a simulation run."""

    # Final configuration
    positions: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    orientations: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    types: NDArray[np.integer] = field(default_factory=lambda: np.array([], dtype=np.int64))

    # Time series, one entry per reported sweep
    sweeps: NDArray[np.integer] = field(default_factory=lambda: np.array([], dtype=np.int64))
    energy: NDArray[np.floating] = field(default_factory=lambda: np.array([]))

    # Summary statistics
    final_energy: float = 0.0
    acceptance_ratio: float = 0.0
    mean_cluster_size: float = 0.0
    cluster_size_histogram: NDArray[np.integer] = field(
        default_factory=lambda: np.zeros(1, dtype=np.int64)
    )
    statistics: dict[str, Any] = field(default_factory=dict)

    # Metadata
    n_particles: int = 0
    n_sweeps: int = 0
    dimension: int = 3
    box_lengths: NDArray[np.floating] = field(default_factory=lambda: np.array([]))


def _run_model(
    model_cls: type[Model],
    label: str,
    n_particles: int,
    dimension: int,
    density: float,
    interaction_energy: float,
    interaction_range: float,
    max_interactions: int,
    is_repulsive: bool,
    n_sweeps: int,
    report_every: int,
    types: NDArray[np.integer] | None,
    trajectory: str | Path | None,
    seed: int,
    verbose: bool,
    cell_cutoff: float | None = None,
    **model_kwargs: Any,
) -> SimulationResult:
    """Set up and run one demo system."""
    rng = np.random.default_rng(seed)

    box = Box.cubic(box_length_for_density(n_particles, density, dimension), dimension)
    cells = CellList(box, cell_cutoff or interaction_range)

    positions, orientations = random_configuration(n_particles, box, rng)
    particles = ParticleStore.create(
        positions,
        box,
        types=types,
        orientations=orientations,
        is_isotropic=np.ones(n_particles, dtype=bool),
    )
    cells.build(particles.positions)

    model = model_cls(
        box,
        particles,
        cells,
        interaction_energy=interaction_energy,
        interaction_range=interaction_range,
        **model_kwargs,
    )

    vmmc = VMMC(
        particles,
        box,
        model,
        max_trial_translation=0.15,
        max_trial_rotation=0.2,
        prob_translate=0.5,
        reference_radius=0.5,
        max_interactions=max_interactions,
        is_repulsive=is_repulsive,
        rng=rng,
    )

    energies = EnergyReporter(frequency=report_every)
    vmmc.add_reporter(energies)
    if trajectory is not None:
        trajectory = Path(trajectory)
        vmmc.add_reporter(TrajectoryReporter(trajectory, frequency=report_every))
        write_vmd_script(box, trajectory.with_suffix(".tcl"))

    if verbose:
        print(
            f"{label}: N={n_particles}, d={dimension}, density={density}, "
            f"L={box.lengths[0]:.3f}, energy scale={interaction_energy}"
        )
        print(f"Running {n_sweeps} sweeps...", end=" ", flush=True)

    vmmc.run(n_sweeps)

    if verbose:
        print("done")
        print(f"  Final energy: {model.total_energy:.4f}")
        print(f"  Acceptance ratio: {vmmc.acceptance_ratio:.4f}")
        print(f"  Mean cluster size: {vmmc.statistics.mean_cluster_size:.3f}")

    stats = vmmc.statistics
    return SimulationResult(
        positions=particles.positions.copy(),
        orientations=particles.orientations.copy(),
        types=particles.types.copy(),
        sweeps=energies.sweeps,
        energy=energies.energies,
        final_energy=model.total_energy,
        acceptance_ratio=stats.acceptance_ratio,
        mean_cluster_size=stats.mean_cluster_size,
        cluster_size_histogram=stats.cluster_size_histogram(),
        statistics=stats.as_dict(),
        n_particles=n_particles,
        n_sweeps=n_sweeps,
        dimension=dimension,
        box_lengths=box.lengths.copy(),
    )


def lennard_jonesium(
    n_particles: int = 100,
    dimension: int = 3,
    density: float = 0.05,
    interaction_energy: float = 2.0,
    interaction_range: float = 2.5,
    max_interactions: int = 100,
    n_sweeps: int = 100,
    report_every: int = 10,
    trajectory: str | Path | None = None,
    seed: int = 42,
    verbose: bool = True,
) -> SimulationResult:
    """
    Run a Lennard-Jones cluster-move simulation.

    Args:
        n_particles: Number of particles (default: 100).
        dimension: Spatial dimension, 2 or 3 (default: 3).
        density: Packing fraction of unit-diameter particles (default: 0.05).
        interaction_energy: Well depth in kT (default: 2.0).
        interaction_range: Cutoff in diameters (default: 2.5).
        max_interactions: Interaction cap per particle (default: 100).
        n_sweeps: Number of sweeps (default: 100).
        report_every: Sweeps between energy records and frames (default: 10).
        trajectory: Optional XYZ output path; a VMD script is written
            beside it.
        seed: Random seed for reproducibility (default: 42).
        verbose: Print progress (default: True).

    Returns:
        SimulationResult with the final configuration and statistics.

    Example:
        >>> result = lennard_jonesium(n_particles=50, n_sweeps=20, verbose=False)
        >>> print(f"Acceptance: {result.acceptance_ratio:.3f}")
    """
    return _run_model(
        LennardJonesium,
        "Lennard-Jonesium",
        n_particles=n_particles,
        dimension=dimension,
        density=density,
        interaction_energy=interaction_energy,
        interaction_range=interaction_range,
        max_interactions=max_interactions,
        is_repulsive=True,
        n_sweeps=n_sweeps,
        report_every=report_every,
        types=None,
        trajectory=trajectory,
        seed=seed,
        verbose=verbose,
    )


def cos_squarium(
    n_particles: int = 100,
    dimension: int = 3,
    density: float = 0.01,
    interaction_energy: float = 2.4,
    interaction_range: float = 2.0,
    max_interactions: int = 60,
    fraction_type_one: float = 0.0,
    well_depths: NDArray[np.floating] | None = None,
    cross_range: float | None = None,
    n_sweeps: int = 100,
    report_every: int = 10,
    trajectory: str | Path | None = None,
    seed: int = 42,
    verbose: bool = True,
) -> SimulationResult:
    """
    Run a cosine-squared cluster-move simulation.

    Args:
        n_particles: Number of particles (default: 100).
        dimension: Spatial dimension, 2 or 3 (default: 3).
        density: Packing fraction of unit-diameter particles (default: 0.01).
        interaction_energy: Energy scale in kT (default: 2.4).
        interaction_range: Cutoff in diameters (default: 2.0).
        max_interactions: Interaction cap per particle (default: 60).
        fraction_type_one: Fraction of particles given type 1; the rest are
            type 0 (default: 0.0).
        well_depths: Optional well-depth multiplier matrix.
        cross_range: Range of pairs of different types; defaults to
            interaction_range. The cell list is sized to the larger range.
        n_sweeps: Number of sweeps (default: 100).
        report_every: Sweeps between energy records and frames (default: 10).
        trajectory: Optional XYZ output path.
        seed: Random seed for reproducibility (default: 42).
        verbose: Print progress (default: True).

    Returns:
        SimulationResult with the final configuration and statistics.
    """
    types = np.zeros(n_particles, dtype=np.int64)
    types[: int(round(fraction_type_one * n_particles))] = 1

    return _run_model(
        CosSquared,
        "Cos-squarium",
        n_particles=n_particles,
        dimension=dimension,
        density=density,
        interaction_energy=interaction_energy,
        interaction_range=interaction_range,
        max_interactions=max_interactions,
        is_repulsive=False,
        n_sweeps=n_sweeps,
        report_every=report_every,
        types=types,
        trajectory=trajectory,
        seed=seed,
        verbose=verbose,
        well_depths=well_depths,
        cross_range=cross_range,
        cell_cutoff=max(interaction_range, cross_range or interaction_range),
    )
