"""Tests for particle storage and initial configurations."""

import numpy as np
import pytest

from vmmc.errors import ConfigurationError
from vmmc.system import Box, ParticleStore, box_length_for_density, random_configuration


class TestParticleStoreCreation:
    """Test ParticleStore.create."""

    def test_defaults(self):
        """Types default to zero and particles to isotropic."""
        box = Box.cubic(10.0)
        store = ParticleStore.create(np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]), box)

        assert store.n_particles == 2
        assert store.dimension == 3
        assert np.all(store.types == 0)
        assert not np.any(store.has_orientation)
        assert np.allclose(store.orientations, [[1.0, 0.0, 0.0], [1.0, 0.0, 0.0]])

    def test_flat_buffer(self):
        """Flat coordinate buffers are reshaped by the box dimension."""
        box = Box.cubic(10.0, dimension=2)
        store = ParticleStore.create([1.0, 2.0, 3.0, 4.0, 5.0, 6.0], box)
        assert store.positions.shape == (3, 2)
        assert np.allclose(store.positions[2], [5.0, 6.0])

    def test_positions_wrapped(self):
        """Positions are wrapped into the box."""
        box = Box.cubic(10.0)
        store = ParticleStore.create([[11.0, -1.0, 25.0]], box)
        assert np.allclose(store.positions, [[1.0, 9.0, 5.0]])

    def test_orientations_normalised(self):
        """Given orientations are normalised and anisotropic by default."""
        box = Box.cubic(10.0)
        store = ParticleStore.create(
            [[1.0, 1.0, 1.0], [2.0, 2.0, 2.0]],
            box,
            orientations=[[0.0, 3.0, 0.0], [1.0, 1.0, 0.0]],
        )
        assert np.all(store.has_orientation)
        assert np.allclose(np.linalg.norm(store.orientations, axis=1), 1.0)
        assert np.allclose(store.orientations[0], [0.0, 1.0, 0.0])

    def test_zero_orientation_rejected(self):
        """Anisotropic particles need a non-zero orientation."""
        box = Box.cubic(10.0)
        with pytest.raises(ConfigurationError):
            ParticleStore.create(
                [[1.0, 1.0, 1.0]], box, orientations=[[0.0, 0.0, 0.0]]
            )

    def test_zero_orientation_allowed_when_isotropic(self):
        """Isotropic particles may carry a zero orientation."""
        box = Box.cubic(10.0)
        store = ParticleStore.create(
            [[1.0, 1.0, 1.0]],
            box,
            orientations=[[0.0, 0.0, 0.0]],
            is_isotropic=[True],
        )
        assert not store.has_orientation[0]

    @pytest.mark.parametrize(
        "positions",
        [
            [1.0, 2.0, 3.0, 4.0],
            [[1.0, 2.0], [3.0, 4.0]],
            [[np.nan, 1.0, 1.0]],
            np.zeros((0, 3)),
        ],
    )
    def test_invalid_positions(self, positions):
        """Mismatched, non-finite or empty positions are rejected."""
        box = Box.cubic(10.0)
        with pytest.raises(ConfigurationError):
            ParticleStore.create(positions, box)

    def test_types_length_mismatch(self):
        """One type per particle is required."""
        box = Box.cubic(10.0)
        with pytest.raises(ConfigurationError):
            ParticleStore.create([[1.0, 1.0, 1.0]], box, types=[0, 1])

    def test_copy_is_independent(self):
        """Copies do not share buffers."""
        box = Box.cubic(10.0)
        store = ParticleStore.create([[1.0, 1.0, 1.0]], box)
        clone = store.copy()
        clone.positions[0] = [2.0, 2.0, 2.0]
        assert np.allclose(store.positions[0], [1.0, 1.0, 1.0])


class TestRandomConfiguration:
    """Test random non-overlapping placement."""

    @pytest.mark.parametrize("dimension", [2, 3])
    def test_no_overlaps(self, dimension):
        """Every pair is at least one diameter apart."""
        box = Box.cubic(box_length_for_density(60, 0.1, dimension), dimension)
        positions, orientations = random_configuration(60, box, rng=3)

        assert positions.shape == (60, dimension)
        assert np.all(positions >= 0.0)
        assert np.all(positions < box.lengths)
        assert np.allclose(np.linalg.norm(orientations, axis=1), 1.0)
        for i in range(60):
            for j in range(i + 1, 60):
                assert box.distance(positions[i], positions[j]) >= 1.0

    def test_reproducible(self):
        """The same seed gives the same configuration."""
        box = Box.cubic(8.0)
        first, _ = random_configuration(20, box, rng=11)
        second, _ = random_configuration(20, box, rng=np.random.default_rng(11))
        assert np.array_equal(first, second)

    def test_too_dense(self):
        """Impossible packings raise after the trial budget."""
        box = Box.cubic(2.0)
        with pytest.raises(ConfigurationError):
            random_configuration(50, box, rng=0, max_trials=100)

    def test_box_length_for_density(self):
        """Box length reproduces the requested packing fraction."""
        length = box_length_for_density(100, 0.05, dimension=3)
        assert np.isclose(100 * np.pi / 6.0 / length**3, 0.05)
        length = box_length_for_density(100, 0.2, dimension=2)
        assert np.isclose(100 * np.pi / 4.0 / length**2, 0.2)

    def test_invalid_density(self):
        """Density must be positive."""
        with pytest.raises(ConfigurationError):
            box_length_for_density(10, 0.0)
