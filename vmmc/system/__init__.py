"""System geometry and particle storage."""

from .box import Box
from .initialise import box_length_for_density, random_configuration
from .particles import ParticleStore

__all__ = ["Box", "ParticleStore", "random_configuration", "box_length_for_density"]
