#!/usr/bin/env python
"""
Quick start example - the simplest way to run a simulation.

This demonstrates the high-level API for users who just want results
without dealing with the internal details.

Usage:
    python examples/quickstart.py
"""

from vmmc import simulate


def main():
    print("=" * 60)
    print("VMMC Quick Start")
    print("=" * 60)

    # 1. Simplest possible simulation
    print("\n1. Lennard-Jonesium (simplest usage):")
    print("-" * 40)
    result = simulate.lennard_jonesium()
    print(f"   Mean cluster size: {result.mean_cluster_size:.2f}")

    # 2. Customize parameters
    print("\n2. Lennard-Jonesium in two dimensions:")
    print("-" * 40)
    result = simulate.lennard_jonesium(
        n_particles=200,
        dimension=2,
        density=0.1,
        n_sweeps=200,
    )

    # 3. Cosine-squared binary mixture
    print("\n3. Cos-squarium (half type 0, half type 1):")
    print("-" * 40)
    result = simulate.cos_squarium(fraction_type_one=0.5, n_sweeps=200)
    print(f"   Largest accepted cluster: {len(result.cluster_size_histogram) - 1}")

    print("\n" + "=" * 60)
    print("All examples completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()
