#!/usr/bin/env python
"""
Example: Lennard-Jones self-assembly with virtual-move Monte Carlo.

This script demonstrates how to:
1. Create a system (box, particle store, cell list)
2. Set up a potential model
3. Drive the engine with elementary moves and reporters
4. Write a trajectory and a VMD script

Units:
- Length: particle diameter
- Energy: kT

Usage:
    python examples/run_lennard_jonesium.py
"""

import sys

import numpy as np

from vmmc.engines import VMMC, StateReporter, TrajectoryReporter
from vmmc.io import write_vmd_script
from vmmc.models import LennardJonesium
from vmmc.neighborlists import CellList
from vmmc.system import Box, ParticleStore, box_length_for_density, random_configuration


def run_simulation(
    n_particles: int = 1000,
    dimension: int = 3,
    density: float = 0.05,
    interaction_energy: float = 2.0,
    interaction_range: float = 2.5,
    n_sweeps: int = 1000,
    report_every: int = 100,
    seed: int = 42,
):
    """
    Run a Lennard-Jonesium simulation.

    Args:
        n_particles: Number of particles.
        dimension: Spatial dimension.
        density: Packing fraction of unit-diameter particles.
        interaction_energy: Well depth in kT.
        interaction_range: Potential cutoff in diameters.
        n_sweeps: Number of sweeps.
        report_every: Sweeps between console reports and trajectory frames.
        seed: Random seed for reproducibility.
    """
    print("=" * 60)
    print("Lennard-Jonesium (Virtual-Move Monte Carlo)")
    print("=" * 60)

    rng = np.random.default_rng(seed)

    # 1. Create initial system
    box = Box.cubic(box_length_for_density(n_particles, density, dimension), dimension)
    positions, orientations = random_configuration(n_particles, box, rng)
    particles = ParticleStore.create(
        positions,
        box,
        orientations=orientations,
        is_isotropic=np.ones(n_particles, dtype=bool),
    )
    print(f"\n  N = {n_particles}, box length = {box.lengths[0]:.2f}")

    # 2. Set up cell list and potential
    cells = CellList(box, interaction_range)
    cells.build(particles.positions)
    model = LennardJonesium(
        box,
        particles,
        cells,
        interaction_energy=interaction_energy,
        interaction_range=interaction_range,
    )
    print(f"  Initial energy: {model.total_energy:.4f}")

    # 3. Set up the engine
    vmmc = VMMC(
        particles,
        box,
        model,
        max_trial_translation=0.15,
        max_trial_rotation=0.2,
        prob_translate=0.5,
        reference_radius=0.5,
        max_interactions=100,
        is_repulsive=True,
        rng=rng,
    )
    vmmc.add_reporter(StateReporter(frequency=report_every, file=sys.stdout))
    vmmc.add_reporter(TrajectoryReporter("trajectory.xyz", frequency=report_every))
    write_vmd_script(box, "vmd.tcl")

    # 4. Run
    print()
    vmmc.run(n_sweeps)

    # 5. Summary
    stats = vmmc.statistics
    print(f"\n  Final energy: {model.total_energy:.4f}")
    print(f"  Acceptance: {stats.acceptance_ratio:.4f}")
    print(f"  Translations accepted: {stats.translation_acceptance:.4f}")
    print(f"  Rotations accepted: {stats.rotation_acceptance:.4f}")
    print(f"  Mean cluster size: {stats.mean_cluster_size:.3f}")
    print(f"  Aborted moves: {stats.n_overflows}")

    drift = abs(model.total_energy - model.compute_total_energy())
    print(f"  Running energy drift: {drift:.2e}")


if __name__ == "__main__":
    run_simulation()
