"""Tests for potential models."""

import numpy as np
import pytest

from vmmc.errors import ConfigurationError
from vmmc.models import Callbacks, CosSquared, FunctionCallbacks, LennardJonesium
from vmmc.neighborlists import CellList
from vmmc.system import Box, ParticleStore


def make_system(positions, box, cutoff, types=None):
    """Particle store and built cell list for a configuration."""
    particles = ParticleStore.create(positions, box, types=types)
    cells = CellList(box, cutoff)
    cells.build(particles.positions)
    return particles, cells


def pair(model, i, j, position_i=None, position_j=None):
    """Pair energy of two stored particles, optionally displaced."""
    particles = model.particles
    return model.pair_energy(
        i,
        particles.positions[i] if position_i is None else position_i,
        int(particles.types[i]),
        particles.orientations[i],
        j,
        particles.positions[j] if position_j is None else position_j,
        int(particles.types[j]),
        particles.orientations[j],
    )


@pytest.fixture
def lj_pair():
    """Two LJ particles at the potential minimum."""
    box = Box.cubic(10.0)
    r_min = 2.0 ** (1.0 / 6.0)
    particles, cells = make_system([[1.0, 1.0, 1.0], [1.0 + r_min, 1.0, 1.0]], box, 2.5)
    return LennardJonesium(box, particles, cells, interaction_energy=1.0)


class TestLennardJonesium:
    """Test the truncated and shifted LJ potential."""

    def test_minimum(self, lj_pair):
        """Energy at r = 2^(1/6) is -epsilon minus the shift."""
        energy = pair(lj_pair, 0, 1)
        assert np.isclose(energy, -1.0 - lj_pair.potential_shift)

    def test_zero_at_cutoff(self, lj_pair):
        """Energy vanishes at and beyond the cutoff."""
        origin = np.array([1.0, 1.0, 1.0])
        assert pair(lj_pair, 0, 1, origin, origin + [2.5, 0.0, 0.0]) == 0.0
        assert pair(lj_pair, 0, 1, origin, origin + [3.0, 0.0, 0.0]) == 0.0
        # Continuous at the cutoff
        just_inside = pair(lj_pair, 0, 1, origin, origin + [2.5 - 1e-9, 0.0, 0.0])
        assert abs(just_inside) < 1e-8

    def test_symmetric(self, lj_pair):
        """Exchanging the particles leaves the energy unchanged."""
        assert pair(lj_pair, 0, 1) == pair(lj_pair, 1, 0)

    def test_minimum_image(self, lj_pair):
        """Pairs across the boundary interact through the nearest image."""
        near = pair(lj_pair, 0, 1, np.array([0.2, 5.0, 5.0]), np.array([9.7, 5.0, 5.0]))
        direct = pair(lj_pair, 0, 1, np.array([1.0, 5.0, 5.0]), np.array([1.5, 5.0, 5.0]))
        assert np.isclose(near, direct)

    def test_total_energy(self, lj_pair):
        """The running total starts at the configuration energy."""
        assert np.isclose(lj_pair.total_energy, pair(lj_pair, 0, 1))
        assert np.isclose(lj_pair.compute_total_energy(), lj_pair.total_energy)

    def test_post_move_accumulates(self, lj_pair):
        """post_move adds the energy difference of a moved particle."""
        start = lj_pair.total_energy
        lj_pair.post_move(0, -1.0, -0.25)
        assert np.isclose(lj_pair.total_energy, start + 0.75)
        lj_pair.reset_energy()
        assert np.isclose(lj_pair.total_energy, start)

    def test_interactions(self):
        """Interactions list in-range particles, excluding the query."""
        box = Box.cubic(10.0)
        particles, cells = make_system(
            [[1.0, 1.0, 1.0], [2.0, 1.0, 1.0], [9.5, 1.0, 1.0], [5.0, 5.0, 5.0]],
            box,
            2.5,
        )
        model = LennardJonesium(box, particles, cells)
        found = model.interactions(0, particles.positions[0], 0, particles.orientations[0])
        assert sorted(found) == [1, 2]

    def test_interactions_at_trial_position(self):
        """A query position away from the stored one finds its own neighbours."""
        box = Box.cubic(10.0)
        particles, cells = make_system([[1.0, 1.0, 1.0], [5.0, 5.0, 5.0]], box, 2.5)
        model = LennardJonesium(box, particles, cells)
        found = model.interactions(0, np.array([4.0, 5.0, 5.0]), 0, particles.orientations[0])
        assert found == [1]

    def test_range_exceeds_cells(self):
        """The interaction range must fit in the cell list cutoff."""
        box = Box.cubic(10.0)
        particles, cells = make_system([[1.0, 1.0, 1.0]], box, 2.0)
        with pytest.raises(ConfigurationError):
            LennardJonesium(box, particles, cells, interaction_range=2.5)

    def test_satisfies_callbacks(self, lj_pair):
        """Models implement the engine callback contract."""
        assert isinstance(lj_pair, Callbacks)


class TestCosSquared:
    """Test the cosine-squared potential."""

    @pytest.fixture
    def model(self):
        """Binary mixture with one particle of each type plus a spare type 1."""
        box = Box.cubic(10.0)
        particles, cells = make_system(
            [[1.0, 1.0, 1.0], [5.0, 5.0, 5.0], [8.0, 8.0, 8.0]],
            box,
            2.0,
            types=[0, 1, 1],
        )
        return CosSquared(box, particles, cells, interaction_energy=2.0, interaction_range=2.0)

    def test_contact_energy(self, model):
        """At contact the well is at its deepest."""
        origin = np.array([3.0, 3.0, 3.0])
        contact = origin + [1.0, 0.0, 0.0]
        # Types 0-1 and 1-1
        assert np.isclose(pair(model, 0, 1, origin, contact), -2.0)
        assert np.isclose(pair(model, 1, 2, origin, contact), -10.0)

    def test_well_shape(self, model):
        """Half way across the well the energy is half the depth."""
        origin = np.array([3.0, 3.0, 3.0])
        energy = pair(model, 0, 1, origin, origin + [1.5, 0.0, 0.0])
        assert np.isclose(energy, -2.0 * np.cos(np.pi / 4.0) ** 2)

    def test_repulsive_core(self, model):
        """Overlapping particles repel."""
        origin = np.array([3.0, 3.0, 3.0])
        assert pair(model, 0, 1, origin, origin + [0.9, 0.0, 0.0]) > 0.0
        assert pair(model, 0, 1, origin, origin) == float("inf")

    def test_zero_beyond_range(self, model):
        """Energy vanishes at the cutoff."""
        origin = np.array([3.0, 3.0, 3.0])
        assert pair(model, 0, 1, origin, origin + [2.0, 0.0, 0.0]) == 0.0

    def test_unknown_types_do_not_attract(self):
        """Types outside the well-depth table have no well."""
        box = Box.cubic(10.0)
        particles, cells = make_system(
            [[1.0, 1.0, 1.0], [2.2, 1.0, 1.0]], box, 2.0, types=[0, 7]
        )
        model = CosSquared(box, particles, cells)
        assert pair(model, 0, 1) == 0.0

    def test_symmetric(self, model):
        """Exchanging the particles leaves the energy unchanged."""
        origin = np.array([3.0, 3.0, 3.0])
        other = origin + [1.3, 0.2, 0.0]
        assert pair(model, 0, 1, origin, other) == pair(model, 1, 0, other, origin)

    def test_cross_range(self):
        """Pairs of different types reach out to the cross range."""
        box = Box.cubic(10.0)
        particles, cells = make_system(
            [[1.0, 1.0, 1.0], [3.2, 1.0, 1.0], [5.4, 1.0, 1.0]],
            box,
            2.5,
            types=[0, 1, 1],
        )
        model = CosSquared(
            box, particles, cells, interaction_energy=2.0, interaction_range=2.0, cross_range=2.5
        )

        expected = -2.0 * np.cos(np.pi * 1.2 / 3.0) ** 2
        assert np.isclose(pair(model, 0, 1), expected)
        # Like pairs keep the shorter range
        assert pair(model, 1, 2) == 0.0
        assert np.isclose(model.total_energy, expected)
        found = model.interactions(1, particles.positions[1], 1, particles.orientations[1])
        assert sorted(found) == [0, 2]

        origin = np.array([5.0, 5.0, 5.0])
        assert np.isclose(pair(model, 0, 1, origin, origin + [1.0, 0.0, 0.0]), -2.0)
        assert pair(model, 0, 1, origin, origin + [2.5, 0.0, 0.0]) == 0.0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"interaction_range": 1.0},
            {"well_depths": [[1.0, 2.0], [3.0, 1.0]]},
            {"well_depths": [1.0, 2.0]},
            {"cross_range": 1.5},
            {"cross_range": 2.5},
        ],
    )
    def test_invalid_parameters(self, kwargs):
        """Short ranges, ranges beyond the cells and malformed well tables are rejected."""
        box = Box.cubic(10.0)
        particles, cells = make_system([[1.0, 1.0, 1.0]], box, 2.0)
        with pytest.raises(ConfigurationError):
            CosSquared(box, particles, cells, **kwargs)


class TestFunctionCallbacks:
    """Test assembling callbacks from functions."""

    def test_default_post_move(self):
        """post_move defaults to a no-op."""
        callbacks = FunctionCallbacks(
            energy=lambda i, pos, t, o: 0.0,
            pair_energy=lambda i, pi, ti, oi, j, pj, tj, oj: 0.0,
            interactions=lambda i, pos, t, o: [],
        )
        assert callbacks.post_move(0, 1.0, 2.0) is None
