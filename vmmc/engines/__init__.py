"""Monte Carlo engine implementations."""

from .moves import Move, Rotation, Translation
from .reporters import (
    CallbackReporter,
    EnergyReporter,
    Reporter,
    ReporterGroup,
    StateReporter,
    TrajectoryReporter,
)
from .statistics import MoveStatistics
from .vmmc import VMMC, Cluster, MoveParameters, link_probability

__all__ = [
    "VMMC",
    "Cluster",
    "MoveParameters",
    "MoveStatistics",
    "link_probability",
    "Move",
    "Translation",
    "Rotation",
    "Reporter",
    "ReporterGroup",
    "StateReporter",
    "TrajectoryReporter",
    "CallbackReporter",
    "EnergyReporter",
]
