"""Monte Carlo move statistics."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray


@dataclass
class MoveStatistics:
    """
    Counters owned by one engine, reset at construction.

    Attributes:
        n_attempts: Elementary moves attempted.
        n_accepted: Moves accepted.
        n_rejected: Moves rejected, including cap overflows.
        n_overflows: Moves aborted because a particle had more candidate
            neighbours than the interaction cap.
        n_translations: Translation moves attempted.
        n_translations_accepted: Translation moves accepted.
        n_rotations: Rotation moves attempted.
        n_rotations_accepted: Rotation moves accepted.
        cluster_sizes: Histogram of accepted cluster sizes.
    """

    n_attempts: int = 0
    n_accepted: int = 0
    n_rejected: int = 0
    n_overflows: int = 0
    n_translations: int = 0
    n_translations_accepted: int = 0
    n_rotations: int = 0
    n_rotations_accepted: int = 0
    cluster_sizes: Counter = field(default_factory=Counter)

    def record(
        self,
        is_rotation: bool,
        accepted: bool,
        cluster_size: int,
        overflow: bool = False,
    ) -> None:
        """Record the outcome of one elementary move."""
        self.n_attempts += 1
        if is_rotation:
            self.n_rotations += 1
        else:
            self.n_translations += 1

        if not accepted:
            self.n_rejected += 1
            if overflow:
                self.n_overflows += 1
            return

        self.n_accepted += 1
        if is_rotation:
            self.n_rotations_accepted += 1
        else:
            self.n_translations_accepted += 1
        self.cluster_sizes[cluster_size] += 1

    def reset(self) -> None:
        """Zero every counter."""
        self.n_attempts = 0
        self.n_accepted = 0
        self.n_rejected = 0
        self.n_overflows = 0
        self.n_translations = 0
        self.n_translations_accepted = 0
        self.n_rotations = 0
        self.n_rotations_accepted = 0
        self.cluster_sizes.clear()

    @property
    def acceptance_ratio(self) -> float:
        """Fraction of attempted moves that were accepted."""
        if self.n_attempts == 0:
            return 0.0
        return self.n_accepted / self.n_attempts

    @property
    def translation_acceptance(self) -> float:
        if self.n_translations == 0:
            return 0.0
        return self.n_translations_accepted / self.n_translations

    @property
    def rotation_acceptance(self) -> float:
        if self.n_rotations == 0:
            return 0.0
        return self.n_rotations_accepted / self.n_rotations

    @property
    def mean_cluster_size(self) -> float:
        """Mean size of accepted clusters."""
        if self.n_accepted == 0:
            return 0.0
        total = sum(size * count for size, count in self.cluster_sizes.items())
        return total / self.n_accepted

    def cluster_size_histogram(self) -> NDArray[np.integer]:
        """
        Return accepted cluster counts indexed by cluster size.

        Entry k holds the number of accepted moves of a k-particle cluster;
        entry 0 is always zero.
        """
        if not self.cluster_sizes:
            return np.zeros(1, dtype=np.int64)
        histogram = np.zeros(max(self.cluster_sizes) + 1, dtype=np.int64)
        for size, count in self.cluster_sizes.items():
            histogram[size] = count
        return histogram

    def as_dict(self) -> dict[str, Any]:
        """Summarise the counters as a plain dictionary."""
        return {
            "attempts": self.n_attempts,
            "accepted": self.n_accepted,
            "rejected": self.n_rejected,
            "overflows": self.n_overflows,
            "acceptance_ratio": self.acceptance_ratio,
            "translation_acceptance": self.translation_acceptance,
            "rotation_acceptance": self.rotation_acceptance,
            "mean_cluster_size": self.mean_cluster_size,
        }
