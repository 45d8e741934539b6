"""
Built-in plotting utilities for simulation results.

Provides simple one-line plotting functions for common visualizations.

Example:
    >>> from vmmc import simulate, plotting
    >>> result = simulate.lennard_jonesium(n_particles=64)
    >>> plotting.energy(result, show=False)
    >>> plotting.save("my_simulation.png")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .simulate import SimulationResult

# Try to import matplotlib, but don't fail if not available
try:
    import matplotlib.pyplot as plt

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False
    plt = None


def _check_matplotlib():
    """Check if matplotlib is available."""
    if not HAS_MATPLOTLIB:
        raise ImportError(
            "matplotlib is required for plotting. "
            "Install it with: pip install matplotlib"
        )


def energy(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (8, 4),
) -> None:
    """
    Plot the total energy against sweeps.

    Args:
        result: SimulationResult from a simulation.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(result.sweeps, result.energy, "k-", lw=1)
    ax.set_xlabel("Sweeps")
    ax.set_ylabel("Energy (kT)")
    ax.set_title(f"Energy (N={result.n_particles})")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()


def cluster_sizes(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (8, 4),
) -> None:
    """
    Plot the distribution of accepted cluster sizes.

    Args:
        result: SimulationResult from a simulation.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    histogram = result.cluster_size_histogram
    sizes = np.arange(len(histogram))
    total = histogram.sum()
    fraction = histogram / total if total > 0 else histogram.astype(float)

    fig, ax = plt.subplots(figsize=figsize)
    ax.bar(sizes[1:], fraction[1:], color="steelblue", alpha=0.8)
    ax.set_yscale("log")
    ax.set_xlabel("Cluster size")
    ax.set_ylabel("Fraction of accepted moves")
    ax.set_title(
        f"Cluster sizes (mean {result.mean_cluster_size:.2f}, "
        f"acceptance {result.acceptance_ratio:.2f})"
    )
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()


def save(filename: str | Path, dpi: int = 150) -> None:
    """
    Save the current figure.

    Args:
        filename: Output path; the format follows the extension.
        dpi: Resolution in dots per inch.
    """
    _check_matplotlib()
    plt.savefig(filename, dpi=dpi, bbox_inches="tight")


def close() -> None:
    """Close all figures."""
    _check_matplotlib()
    plt.close("all")
