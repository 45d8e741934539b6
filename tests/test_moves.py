"""Tests for rigid-body trial moves."""

import numpy as np
import pytest

from vmmc.engines.moves import (
    Rotation,
    Translation,
    propose_rotation,
    propose_translation,
    random_unit_vector,
    rotation_matrix,
)
from vmmc.system import Box


class TestRotationMatrix:
    """Test rotation matrices."""

    def test_two_dimensional(self):
        """A quarter turn maps x onto y."""
        matrix = rotation_matrix([0.0, 0.0, 1.0], np.pi / 2, 2)
        assert np.allclose(matrix @ [1.0, 0.0], [0.0, 1.0])

    def test_three_dimensional(self):
        """A quarter turn about z maps x onto y and keeps z."""
        matrix = rotation_matrix([0.0, 0.0, 1.0], np.pi / 2, 3)
        assert np.allclose(matrix @ [1.0, 0.0, 0.0], [0.0, 1.0, 0.0])
        assert np.allclose(matrix @ [0.0, 0.0, 1.0], [0.0, 0.0, 1.0])

    def test_orthogonal(self):
        """Rotation matrices are orthogonal with unit determinant."""
        rng = np.random.default_rng(0)
        axis = random_unit_vector(rng, 3)
        matrix = rotation_matrix(axis, 0.7, 3)
        assert np.allclose(matrix @ matrix.T, np.eye(3))
        assert np.isclose(np.linalg.det(matrix), 1.0)


class TestTranslation:
    """Test translation moves."""

    def test_apply_wraps(self):
        """Translated positions are wrapped; orientations are unchanged."""
        box = Box.cubic(10.0)
        move = Translation([0.5, 0.0, -0.5])
        position, orientation = move.apply(
            np.array([9.8, 5.0, 0.2]), np.array([0.0, 1.0, 0.0]), box
        )
        assert np.allclose(position, [0.3, 5.0, 9.7])
        assert np.allclose(orientation, [0.0, 1.0, 0.0])

    def test_inverse(self):
        """The inverse translation returns the particle."""
        box = Box.cubic(10.0)
        move = Translation([0.1, -0.2, 0.3])
        start = np.array([1.0, 2.0, 3.0])
        moved, orientation = move.apply(start, np.array([1.0, 0.0, 0.0]), box)
        back, _ = move.inverse().apply(moved, orientation, box)
        assert np.allclose(back, start)

    @pytest.mark.parametrize("dimension", [2, 3])
    def test_proposals_within_ball(self, dimension):
        """Proposed displacements never exceed the maximum step."""
        rng = np.random.default_rng(1)
        for _ in range(500):
            move = propose_translation(rng, dimension, 0.15)
            assert move.vector.shape == (dimension,)
            assert np.linalg.norm(move.vector) <= 0.15 + 1e-12
            assert not move.is_rotation


class TestRotation:
    """Test rotation moves."""

    def test_rotates_about_pivot(self):
        """Positions rotate about the pivot and orientations with them."""
        box = Box.cubic(10.0)
        move = Rotation([0.0, 0.0, 1.0], np.pi / 2, [5.0, 5.0, 5.0])
        position, orientation = move.apply(
            np.array([6.0, 5.0, 5.0]), np.array([1.0, 0.0, 0.0]), box
        )
        assert np.allclose(position, [5.0, 6.0, 5.0])
        assert np.allclose(orientation, [0.0, 1.0, 0.0])
        assert move.is_rotation

    def test_pivot_across_boundary(self):
        """The nearest image of a particle is rotated about the pivot."""
        box = Box.cubic(10.0, dimension=2)
        move = Rotation([0.0, 0.0, 1.0], np.pi, [0.2, 5.0])
        position, _ = move.apply(np.array([9.8, 5.0]), np.array([1.0, 0.0]), box)
        assert np.allclose(position, [0.6, 5.0])

    def test_orientation_kept_when_not_rotated(self):
        """Isotropic particles keep their orientation buffer untouched."""
        box = Box.cubic(10.0)
        move = Rotation([0.0, 0.0, 1.0], 0.3, [5.0, 5.0, 5.0])
        _, orientation = move.apply(
            np.array([6.0, 5.0, 5.0]),
            np.zeros(3),
            box,
            rotate_orientation=False,
        )
        assert np.array_equal(orientation, np.zeros(3))

    def test_preserves_distances(self):
        """Rigid rotations keep pair separations."""
        rng = np.random.default_rng(2)
        box = Box.cubic(10.0)
        pivot = np.array([5.0, 5.0, 5.0])
        move = propose_rotation(rng, 3, 0.5, pivot)
        a = np.array([5.5, 5.2, 4.9])
        b = np.array([6.1, 4.4, 5.3])
        orientation = np.array([1.0, 0.0, 0.0])
        new_a, _ = move.apply(a, orientation, box)
        new_b, _ = move.apply(b, orientation, box)
        assert np.isclose(box.distance(new_a, new_b), box.distance(a, b))

    def test_inverse(self):
        """The inverse rotation returns the particle and orientation."""
        box = Box.cubic(10.0)
        move = Rotation([0.0, 1.0, 0.0], 0.4, [5.0, 5.0, 5.0])
        start = np.array([6.0, 5.5, 4.0])
        start_orientation = np.array([0.0, 0.0, 1.0])
        moved, orientation = move.apply(start, start_orientation, box)
        back, back_orientation = move.inverse().apply(moved, orientation, box)
        assert np.allclose(back, start)
        assert np.allclose(back_orientation, start_orientation)

    def test_proposed_angles(self):
        """Proposed angles lie within the maximum rotation."""
        rng = np.random.default_rng(3)
        for _ in range(200):
            move = propose_rotation(rng, 3, 0.2, np.zeros(3))
            assert abs(move.angle) <= 0.2
            assert np.isclose(np.linalg.norm(move.axis), 1.0)
