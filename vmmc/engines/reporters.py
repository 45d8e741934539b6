"""Reporter implementations for simulation output."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import numpy as np

if TYPE_CHECKING:
    from .vmmc import VMMC


def _current_energy(engine: VMMC) -> float:
    """Running total energy from the callbacks, or NaN if they keep none."""
    energy = getattr(engine.callbacks, "total_energy", None)
    if energy is None:
        return float("nan")
    return float(energy() if callable(energy) else energy)


class Reporter(ABC):
    """
    Abstract base class for simulation reporters.

    Reporters are called after every sweep and fire every ``frequency``
    sweeps to output information or record observables.
    """

    @abstractmethod
    def report(self, engine: VMMC) -> None:
        """
        Generate report for the current state.

        Args:
            engine: The running engine.
        """
        ...

    @property
    @abstractmethod
    def frequency(self) -> int:
        """Return reporting frequency (every N sweeps)."""
        ...

    def should_report(self, sweep: int) -> bool:
        """Check if reporter should run after this sweep."""
        return sweep % self.frequency == 0

    def initialize(self, engine: VMMC) -> None:
        """Initialize reporter (called before a run)."""
        pass

    def finalize(self, engine: VMMC) -> None:
        """Finalize reporter (called after a run)."""
        pass


class ReporterGroup:
    """
    Collection of reporters with automatic frequency handling.
    """

    def __init__(self, reporters: list[Reporter] | None = None) -> None:
        """
        Initialize reporter group.

        Args:
            reporters: List of reporters to manage.
        """
        self._reporters: list[Reporter] = reporters if reporters else []

    def __len__(self) -> int:
        return len(self._reporters)

    def add(self, reporter: Reporter) -> None:
        """Add a reporter to the group."""
        self._reporters.append(reporter)

    def remove(self, reporter: Reporter) -> None:
        """Remove a reporter from the group."""
        self._reporters.remove(reporter)

    def initialize(self, engine: VMMC) -> None:
        """Initialize all reporters."""
        for reporter in self._reporters:
            reporter.initialize(engine)

    def report(self, engine: VMMC) -> None:
        """Run all reporters that should fire after the current sweep."""
        for reporter in self._reporters:
            if reporter.should_report(engine.n_sweeps):
                reporter.report(engine)

    def finalize(self, engine: VMMC) -> None:
        """Finalize all reporters."""
        for reporter in self._reporters:
            reporter.finalize(engine)


class StateReporter(Reporter):
    """
    Reporter that prints sweeps, energy and acceptance to console or file.
    """

    def __init__(
        self,
        frequency: int = 1000,
        file: TextIO | None = None,
        separator: str = "\t",
    ) -> None:
        """
        Initialize state reporter.

        Args:
            frequency: Reporting frequency (every N sweeps).
            file: Output file (defaults to stdout).
            separator: Field separator.
        """
        self._frequency = frequency
        self._file = file if file is not None else sys.stdout
        self._separator = separator
        self._header_written = False

    @property
    def frequency(self) -> int:
        return self._frequency

    def initialize(self, engine: VMMC) -> None:
        """Write header."""
        if not self._header_written:
            headers = ["Sweeps", "Energy", "Acceptance", "MeanCluster"]
            self._file.write(self._separator.join(headers) + "\n")
            self._header_written = True

    def report(self, engine: VMMC) -> None:
        """Report current state."""
        stats = engine.statistics
        values = [
            f"{engine.n_sweeps:d}",
            f"{_current_energy(engine):.4f}",
            f"{stats.acceptance_ratio:.4f}",
            f"{stats.mean_cluster_size:.4f}",
        ]
        self._file.write(self._separator.join(values) + "\n")


class EnergyReporter(Reporter):
    """
    Reporter that tracks energy and acceptance over sweeps.
    """

    def __init__(self, frequency: int = 1) -> None:
        """
        Initialize energy reporter.

        Args:
            frequency: Reporting frequency.
        """
        self._frequency = frequency
        self._sweeps: list[int] = []
        self._energies: list[float] = []
        self._acceptance: list[float] = []

    @property
    def frequency(self) -> int:
        return self._frequency

    def report(self, engine: VMMC) -> None:
        """Record energy and acceptance ratio."""
        self._sweeps.append(engine.n_sweeps)
        self._energies.append(_current_energy(engine))
        self._acceptance.append(engine.acceptance_ratio)

    @property
    def sweeps(self) -> np.ndarray:
        """Return sweep numbers."""
        return np.array(self._sweeps)

    @property
    def energies(self) -> np.ndarray:
        """Return energy time series."""
        return np.array(self._energies)

    @property
    def acceptance(self) -> np.ndarray:
        """Return cumulative acceptance ratio time series."""
        return np.array(self._acceptance)

    def clear(self) -> None:
        """Clear stored data."""
        self._sweeps.clear()
        self._energies.clear()
        self._acceptance.clear()


class TrajectoryReporter(Reporter):
    """
    Reporter that appends particle coordinates to an XYZ trajectory.
    """

    def __init__(
        self,
        filename: str | Path,
        frequency: int = 1000,
        append: bool = False,
    ) -> None:
        """
        Initialize trajectory reporter.

        Args:
            filename: Output XYZ file.
            frequency: Reporting frequency (every N sweeps).
            append: Append to an existing file instead of truncating it.
        """
        from ..io import XYZWriter

        self._frequency = frequency
        self._writer = XYZWriter(filename, append=append)

    @property
    def frequency(self) -> int:
        return self._frequency

    @property
    def n_frames(self) -> int:
        """Return number of frames written."""
        return self._writer.n_frames

    def initialize(self, engine: VMMC) -> None:
        """Open the trajectory file."""
        self._writer.open()

    def report(self, engine: VMMC) -> None:
        """Write the committed configuration."""
        self._writer.write(engine.particles, comment=f"sweeps = {engine.n_sweeps}")

    def finalize(self, engine: VMMC) -> None:
        """Close the trajectory file; later runs append to it."""
        self._writer.close()
        self._writer.append = True


class CallbackReporter(Reporter):
    """
    Reporter that calls a user-defined function.

    Allows arbitrary custom reporting logic.
    """

    def __init__(
        self,
        callback: Callable[[VMMC], None],
        frequency: int = 1,
    ) -> None:
        """
        Initialize callback reporter.

        Args:
            callback: Function to call with the engine.
            frequency: Reporting frequency.
        """
        self._callback = callback
        self._frequency = frequency

    @property
    def frequency(self) -> int:
        return self._frequency

    def report(self, engine: VMMC) -> None:
        """Call the callback function."""
        self._callback(engine)
