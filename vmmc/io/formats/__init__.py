"""Trajectory format implementations."""

from .xyz import XYZWriter

__all__ = ["XYZWriter"]
