"""Potential models and the engine callback contract."""

from .base import Callbacks, FunctionCallbacks, Model
from .cos_squared import CosSquared
from .lj import LennardJonesium

__all__ = ["Callbacks", "FunctionCallbacks", "Model", "LennardJonesium", "CosSquared"]
