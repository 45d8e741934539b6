"""Spatial indexing for neighbour search."""

from .cell import CellList

__all__ = ["CellList"]
