"""Tests for reporters and move statistics."""

import io
import tempfile
from pathlib import Path

import numpy as np
import pytest

from vmmc.engines import (
    VMMC,
    CallbackReporter,
    EnergyReporter,
    MoveStatistics,
    StateReporter,
    TrajectoryReporter,
)
from vmmc.models import FunctionCallbacks
from vmmc.system import Box, ParticleStore


@pytest.fixture
def engine():
    """Engine over three non-interacting particles."""
    box = Box.cubic(10.0)
    particles = ParticleStore.create(
        [[1.0, 1.0, 1.0], [4.0, 4.0, 4.0], [7.0, 7.0, 7.0]], box
    )
    callbacks = FunctionCallbacks(
        energy=lambda i, pos, t, o: 0.0,
        pair_energy=lambda i, pi, ti, oi, j, pj, tj, oj: 0.0,
        interactions=lambda i, pos, t, o: [],
    )
    return VMMC(particles, box, callbacks, seed=0)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestMoveStatistics:
    """Test move counters."""

    def test_record(self):
        """Outcomes are tallied by move kind."""
        stats = MoveStatistics()
        stats.record(is_rotation=False, accepted=True, cluster_size=1)
        stats.record(is_rotation=False, accepted=True, cluster_size=3)
        stats.record(is_rotation=True, accepted=False, cluster_size=2)
        stats.record(is_rotation=True, accepted=False, cluster_size=0, overflow=True)

        assert stats.n_attempts == 4
        assert stats.n_accepted == 2
        assert stats.n_rejected == 2
        assert stats.n_overflows == 1
        assert stats.acceptance_ratio == 0.5
        assert stats.translation_acceptance == 1.0
        assert stats.rotation_acceptance == 0.0
        assert stats.mean_cluster_size == 2.0
        assert list(stats.cluster_size_histogram()) == [0, 1, 0, 1]

    def test_empty(self):
        """Ratios of an empty record are zero."""
        stats = MoveStatistics()
        assert stats.acceptance_ratio == 0.0
        assert stats.mean_cluster_size == 0.0
        assert list(stats.cluster_size_histogram()) == [0]

    def test_reset(self):
        """reset zeroes every counter."""
        stats = MoveStatistics()
        stats.record(is_rotation=True, accepted=True, cluster_size=2)
        stats.reset()
        assert stats.as_dict()["attempts"] == 0
        assert not stats.cluster_sizes


class TestReporters:
    """Test reporters driven by VMMC.run."""

    def test_energy_reporter_frequency(self, engine):
        """Reporters fire every ``frequency`` sweeps."""
        reporter = EnergyReporter(frequency=2)
        engine.add_reporter(reporter)
        engine.run(5)

        assert list(reporter.sweeps) == [2, 4]
        # Plain function callbacks keep no running energy
        assert np.all(np.isnan(reporter.energies))
        assert np.all(reporter.acceptance == 1.0)

        reporter.clear()
        assert len(reporter.sweeps) == 0

    def test_state_reporter(self, engine):
        """The state reporter writes a header and one row per report."""
        output = io.StringIO()
        engine.add_reporter(StateReporter(frequency=1, file=output))
        engine.run(2)

        lines = output.getvalue().splitlines()
        assert lines[0].split("\t") == ["Sweeps", "Energy", "Acceptance", "MeanCluster"]
        assert len(lines) == 3
        assert lines[2].split("\t")[0] == "2"

    def test_callback_reporter(self, engine):
        """Callback reporters receive the engine."""
        seen = []
        engine.add_reporter(CallbackReporter(lambda e: seen.append(e.n_sweeps)))
        engine.run(3)
        assert seen == [1, 2, 3]

    def test_remove_reporter(self, engine):
        """Removed reporters no longer fire."""
        seen = []
        reporter = CallbackReporter(lambda e: seen.append(e.n_sweeps))
        engine.add_reporter(reporter)
        engine.run(1)
        engine.remove_reporter(reporter)
        engine.run(1)
        assert seen == [1]

    def test_trajectory_reporter(self, engine, temp_dir):
        """Trajectory frames accumulate across runs."""
        filepath = temp_dir / "traj.xyz"
        reporter = TrajectoryReporter(filepath, frequency=1)
        engine.add_reporter(reporter)

        engine.run(2)
        engine.run(1)

        lines = filepath.read_text().splitlines()
        assert reporter.n_frames == 3
        assert len(lines) == 3 * (engine.n_particles + 2)
        assert lines[1] == "sweeps = 1"
        assert lines[-4] == "sweeps = 3"
