"""Rigid-body trial moves."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

if TYPE_CHECKING:
    from ..system import Box


def random_unit_vector(rng: np.random.Generator, dimension: int) -> NDArray[np.floating]:
    """Draw a vector uniformly distributed on the unit sphere (circle in 2D)."""
    while True:
        vector = rng.standard_normal(dimension)
        norm = np.linalg.norm(vector)
        if norm > 1e-12:
            return vector / norm


def rotation_matrix(axis: ArrayLike, angle: float, dimension: int) -> NDArray[np.floating]:
    """
    Build a rotation matrix.

    Args:
        axis: Unit rotation axis, shape (3,). Ignored in 2D, where rotations
            are about the implicit z axis.
        angle: Rotation angle in radians.
        dimension: Spatial dimension (2 or 3).

    Returns:
        Rotation matrix of shape (dimension, dimension).
    """
    c = np.cos(angle)
    s = np.sin(angle)
    if dimension == 2:
        return np.array([[c, -s], [s, c]])

    # Rodrigues' formula
    x, y, z = np.asarray(axis, dtype=np.float64)
    k = np.array([[0.0, -z, y], [z, 0.0, -x], [-y, x, 0.0]])
    return np.eye(3) + s * k + (1.0 - c) * (k @ k)


@dataclass(frozen=True)
class Translation:
    """
    Rigid translation of every cluster member by the same vector.

    Attributes:
        vector: Displacement, shape (dimension,).
    """

    vector: NDArray[np.floating]

    def __post_init__(self) -> None:
        object.__setattr__(self, "vector", np.asarray(self.vector, dtype=np.float64))

    @property
    def is_rotation(self) -> bool:
        return False

    def apply(
        self,
        position: NDArray[np.floating],
        orientation: NDArray[np.floating],
        box: Box,
        rotate_orientation: bool = True,
    ) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
        """Return the wrapped displaced position and the unchanged orientation."""
        return box.wrap(position + self.vector), orientation.copy()

    def inverse(self) -> Translation:
        """Return the move that undoes this one."""
        return Translation(-self.vector)


@dataclass(frozen=True)
class Rotation:
    """
    Rigid rotation of every cluster member about a common pivot.

    Attributes:
        axis: Unit rotation axis, shape (3,); unused in 2D.
        angle: Rotation angle in radians.
        pivot: Centre of rotation, shape (dimension,).
        matrix: Rotation matrix derived from axis and angle.
    """

    axis: NDArray[np.floating]
    angle: float
    pivot: NDArray[np.floating]
    matrix: NDArray[np.floating] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        pivot = np.asarray(self.pivot, dtype=np.float64)
        object.__setattr__(self, "pivot", pivot)
        object.__setattr__(self, "matrix", rotation_matrix(self.axis, self.angle, len(pivot)))

    @property
    def is_rotation(self) -> bool:
        return True

    def apply(
        self,
        position: NDArray[np.floating],
        orientation: NDArray[np.floating],
        box: Box,
        rotate_orientation: bool = True,
    ) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
        """Rotate a position about the pivot (minimum image) and its orientation."""
        relative = box.minimum_image(position - self.pivot)
        new_position = box.wrap(self.pivot + self.matrix @ relative)
        if not rotate_orientation:
            return new_position, orientation.copy()
        new_orientation = self.matrix @ orientation
        return new_position, new_orientation / np.linalg.norm(new_orientation)

    def inverse(self) -> Rotation:
        """Return the move that undoes this one."""
        return Rotation(self.axis, -self.angle, self.pivot)


Move = Union[Translation, Rotation]


def propose_translation(
    rng: np.random.Generator, dimension: int, max_step: float
) -> Translation:
    """Draw a displacement uniformly from the ball of radius max_step."""
    direction = random_unit_vector(rng, dimension)
    radius = max_step * rng.random() ** (1.0 / dimension)
    return Translation(radius * direction)


def propose_rotation(
    rng: np.random.Generator,
    dimension: int,
    max_angle: float,
    pivot: NDArray[np.floating],
) -> Rotation:
    """Draw a rotation about a uniform random axis by an angle in [-max, max]."""
    if dimension == 3:
        axis = random_unit_vector(rng, 3)
    else:
        axis = np.array([0.0, 0.0, 1.0])
    angle = max_angle * (2.0 * rng.random() - 1.0)
    return Rotation(axis, angle, np.array(pivot, dtype=np.float64))
