"""
vmmc - Virtual-move Monte Carlo for self-assembling particles.

Design Principles:
- Collective rigid-body cluster moves built from pair energy changes
- Committed state only changes on accepted moves
- Deterministic + reproducible for a given seed
- Potentials plug in through a four-operation callback contract

Quick Start:
    >>> from vmmc import simulate
    >>> result = simulate.lennard_jonesium(n_particles=100, n_sweeps=50)
    >>> print(f"Acceptance ratio: {result.acceptance_ratio:.3f}")
"""

__version__ = "0.1.0"

# High-level APIs
from . import plotting, simulate
from .engines import VMMC
from .errors import ConfigurationError, ModelError, VMMCError
from .models import CosSquared, FunctionCallbacks, LennardJonesium, Model
from .neighborlists import CellList

# Core components for advanced users
from .system import Box, ParticleStore

__all__ = [
    "simulate",
    "plotting",
    "VMMC",
    "Box",
    "ParticleStore",
    "CellList",
    "Model",
    "FunctionCallbacks",
    "LennardJonesium",
    "CosSquared",
    "VMMCError",
    "ConfigurationError",
    "ModelError",
]
