"""Incremental cell list for neighbour search."""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..errors import ConfigurationError

if TYPE_CHECKING:
    from ..system import Box


class CellList:
    """
    Cell list (linked cell) spatial index.

    Divides the simulation box into cells of edge >= cutoff, so any pair
    closer than the cutoff lies in the same or an adjacent cell (with
    periodic wrapping of cell indices). Unlike a rebuilt neighbour list,
    particles are moved between cells one at a time as moves are accepted.

    Attributes:
        box: Simulation box.
        _cutoff: Interaction cutoff distance.
        _n_cells: Number of cells in each dimension.
        _cell_size: Size of cells in each dimension.
        _cells: Set of particle indices per linear cell index.
        _particle_cell: Linear cell index per registered particle.
    """

    def __init__(self, box: Box, cutoff: float) -> None:
        """
        Initialize an empty cell list.

        Args:
            box: Simulation box.
            cutoff: Interaction range; must not exceed half the shortest
                box length.
        """
        if not np.isfinite(cutoff) or cutoff <= 0:
            raise ConfigurationError(f"Cell list cutoff must be positive, got {cutoff}")
        if cutoff > box.max_cutoff:
            raise ConfigurationError(
                f"Cutoff {cutoff} exceeds half the shortest box length "
                f"({box.max_cutoff}); minimum image would be ambiguous"
            )

        self.box = box
        self._cutoff = float(cutoff)

        self._n_cells: NDArray[np.integer] = np.maximum(
            np.floor(box.lengths / self._cutoff).astype(np.int64), 1
        )
        self._cell_size: NDArray[np.floating] = box.lengths / self._n_cells
        self._strides = np.cumprod(np.concatenate(([1], self._n_cells[:0:-1])))[::-1]

        self._cells: list[set[int]] = [set() for _ in range(self.total_cells)]
        self._particle_cell: dict[int, int] = {}
        self._stencils: dict[int, tuple[int, ...]] = {}

    @property
    def cutoff(self) -> float:
        """Return the interaction cutoff distance."""
        return self._cutoff

    @property
    def n_cells(self) -> tuple[int, ...]:
        """Return number of cells in each dimension."""
        return tuple(int(n) for n in self._n_cells)

    @property
    def cell_size(self) -> NDArray[np.floating]:
        """Return cell edge lengths."""
        return self._cell_size.copy()

    @property
    def total_cells(self) -> int:
        """Return total number of cells."""
        return int(np.prod(self._n_cells))

    @property
    def n_particles(self) -> int:
        """Return number of registered particles."""
        return len(self._particle_cell)

    def cell_index(self, position: ArrayLike) -> int:
        """
        Get the linear index of the cell containing a position.

        Args:
            position: Position vector, shape (dimension,). Need not be wrapped.

        Returns:
            Linear cell index.
        """
        wrapped = self.box.wrap(position)
        cell = np.floor(wrapped / self._cell_size).astype(np.int64)
        # Handle edge cases
        cell = np.clip(cell, 0, self._n_cells - 1)
        return int(np.dot(cell, self._strides))

    def _unravel(self, linear: int) -> NDArray[np.integer]:
        """Convert a linear cell index to per-axis indices."""
        return np.array(np.unravel_index(linear, self.n_cells), dtype=np.int64)

    def _neighbor_cells(self, linear: int) -> tuple[int, ...]:
        """
        Get linear indices of neighbouring cells (including self).

        Returns up to 9 (2D) or 27 (3D) cells centred on the given cell, with
        periodic wrapping. Duplicates from grids narrower than three cells
        are removed.
        """
        stencil = self._stencils.get(linear)
        if stencil is None:
            centre = self._unravel(linear)
            cells = set()
            for offset in itertools.product((-1, 0, 1), repeat=self.box.dimension):
                neighbor = (centre + np.array(offset)) % self._n_cells
                cells.add(int(np.dot(neighbor, self._strides)))
            stencil = tuple(sorted(cells))
            self._stencils[linear] = stencil
        return stencil

    def build(self, positions: ArrayLike) -> None:
        """
        Register every particle from scratch.

        Args:
            positions: Particle positions, shape (N, dimension). Row index is
                the particle index.
        """
        positions = np.asarray(positions, dtype=np.float64)
        if positions.ndim != 2 or positions.shape[1] != self.box.dimension:
            raise ConfigurationError(
                f"positions shape {positions.shape} does not match box "
                f"dimension {self.box.dimension}"
            )
        for cell in self._cells:
            cell.clear()
        self._particle_cell.clear()
        for i, position in enumerate(positions):
            self.register(i, position)

    def register(self, index: int, position: ArrayLike) -> None:
        """Insert a particle into the cell containing its position."""
        if index in self._particle_cell:
            raise ValueError(f"Particle {index} is already registered")
        cell = self.cell_index(position)
        self._cells[cell].add(index)
        self._particle_cell[index] = cell

    def update(self, index: int, old_position: ArrayLike, new_position: ArrayLike) -> None:
        """
        Move a particle between cells after its committed position changed.

        Args:
            index: Particle index.
            old_position: Previous committed position.
            new_position: New committed position.
        """
        old_cell = self._particle_cell.get(index)
        if old_cell is None:
            raise KeyError(f"Particle {index} is not registered")
        if old_cell != self.cell_index(old_position):
            raise ValueError(
                f"Particle {index} is registered in cell {old_cell}, which does "
                "not contain its old position"
            )
        new_cell = self.cell_index(new_position)
        if new_cell != old_cell:
            self._cells[old_cell].discard(index)
            self._cells[new_cell].add(index)
            self._particle_cell[index] = new_cell

    def remove(self, index: int) -> None:
        """Remove a particle from the cell list."""
        cell = self._particle_cell.pop(index)
        self._cells[cell].discard(index)

    def cell_of(self, index: int) -> int:
        """Return the linear cell index a particle is registered in."""
        return self._particle_cell[index]

    def particles_in_cell(self, linear: int) -> frozenset[int]:
        """Return the indices registered in one cell."""
        return frozenset(self._cells[linear])

    def neighbors(
        self, position: ArrayLike, max_range: float | None = None
    ) -> NDArray[np.integer]:
        """
        Get candidate neighbours of a position.

        This is a deliberate over-approximation: callers must still filter by
        the exact pair distance.

        Args:
            position: Query position, shape (dimension,).
            max_range: Range the caller filters by. The stencil only covers
                ranges up to the cutoff; defaults to the cutoff.

        Returns:
            Sorted array of particle indices in the containing cell and all
            adjacent cells.
        """
        if max_range is not None and max_range > self._cutoff:
            raise ConfigurationError(
                f"Query range {max_range} exceeds the cell list cutoff {self._cutoff}"
            )
        found: list[int] = []
        for cell in self._neighbor_cells(self.cell_index(position)):
            found.extend(self._cells[cell])
        return np.array(sorted(found), dtype=np.int64)
